"""httprunner formatter - plain-text console output for run results."""

import json

from httprunner.models import (
    AssertionResult,
    HttpFileResults,
    ProcessorResults,
    RequestProcessingResult,
    RequestStatus,
)

_STATUS_LABELS = {
    RequestStatus.SUCCEEDED: "OK",
    RequestStatus.FAILED: "FAIL",
    RequestStatus.SKIPPED: "SKIP",
}


def format_json_if_valid(text: str) -> str:
    """Pretty-print text when it parses as a JSON object or array."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError):
        return text
    if isinstance(data, dict | list):
        return json.dumps(data, indent=2)
    return text


def format_assertion(result: AssertionResult) -> str:
    label = "PASS" if result.passed else "FAIL"
    line = f"  {label} {result.assertion.type.value}: {result.assertion.expected_value}"
    if not result.passed and result.error_message:
        line += f" ({result.error_message})"
    return line


def format_event(
    event: RequestProcessingResult,
    verbose: bool = False,
    pretty_json: bool = False,
) -> str:
    """Format one request outcome.

    The first line is always present; verbose adds response headers and
    body. Assertion lines are shown whenever the request had assertions.
    """
    prefix = f"[{event.index + 1}/{event.total}] {event.name}: {event.request.method} {event.request.url}"
    label = _STATUS_LABELS[event.status]

    if event.status is RequestStatus.SKIPPED:
        return f"{prefix} - {label} ({event.reason})"

    result = event.result
    if result.status_code == 0:
        return f"{prefix} - {label} {result.error_message} ({result.duration_ms}ms)"

    lines = [f"{prefix} - {label} {result.status_code} ({result.duration_ms}ms)"]
    lines.extend(format_assertion(r) for r in result.assertion_results)

    if verbose:
        if result.response_headers:
            lines.append("HEADERS:")
            for key, value in result.response_headers.items():
                lines.append(f"  {key}: {value}")
        if result.response_body:
            body = format_json_if_valid(result.response_body) if pretty_json else result.response_body
            lines.append("BODY:")
            lines.append(body)

    return "\n".join(lines)


def format_file_summary(results: HttpFileResults) -> str:
    line = (
        f"{results.filename}: {results.success_count} passed, "
        f"{results.failed_count} failed, {results.skipped_count} skipped"
    )
    if results.cancelled:
        line += " (cancelled)"
    return line


def format_overall_summary(results: ProcessorResults) -> str:
    passed = sum(f.success_count for f in results.files)
    failed = sum(f.failed_count for f in results.files)
    skipped = sum(f.skipped_count for f in results.files)
    verdict = "PASSED" if results.success else "FAILED"
    return (
        f"{verdict}: {len(results.files)} file(s), {passed} passed, "
        f"{failed} failed, {skipped} skipped"
    )
