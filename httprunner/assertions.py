"""httprunner assertions - EXPECTED_RESPONSE_* checks against a response."""

from httprunner.models import Assertion, AssertionResult, AssertionType, HttpResult


def _format_headers(headers: dict[str, str]) -> str:
    return ", ".join(f"{k}: {v}" for k, v in headers.items())


def _check_status(assertion: Assertion, result: HttpResult) -> AssertionResult:
    actual = str(result.status_code)
    try:
        expected = int(assertion.expected_value.strip())
    except ValueError:
        return AssertionResult(
            assertion,
            passed=False,
            actual_value=actual,
            error_message="Invalid expected status code format",
        )
    passed = result.status_code == expected
    return AssertionResult(
        assertion,
        passed=passed,
        actual_value=actual,
        error_message=None if passed else f"Expected status {expected}, got {actual}",
    )


def _check_body(assertion: Assertion, result: HttpResult) -> AssertionResult:
    if result.response_body is None:
        return AssertionResult(
            assertion,
            passed=False,
            actual_value="",
            error_message="No response body available",
        )
    passed = assertion.expected_value in result.response_body
    return AssertionResult(
        assertion,
        passed=passed,
        actual_value=result.response_body,
        error_message=None
        if passed
        else f"Expected body to contain '{assertion.expected_value}'",
    )


def _check_headers(assertion: Assertion, result: HttpResult) -> AssertionResult:
    headers = result.response_headers
    if not headers:
        return AssertionResult(
            assertion,
            passed=False,
            actual_value="",
            error_message="No response headers available",
        )

    actual = _format_headers(headers)
    if ":" not in assertion.expected_value:
        return AssertionResult(
            assertion,
            passed=False,
            actual_value=actual,
            error_message="Invalid header format, expected 'Name: Value'",
        )

    name, value = assertion.expected_value.split(":", 1)
    name, value = name.strip(), value.strip()
    matching = [v for k, v in headers.items() if k.lower() == name.lower()]
    if not matching:
        return AssertionResult(
            assertion,
            passed=False,
            actual_value=actual,
            error_message=f"Header '{name}' not present in response",
        )

    passed = any(value in v for v in matching)
    return AssertionResult(
        assertion,
        passed=passed,
        actual_value=matching[0] if len(matching) == 1 else actual,
        error_message=None
        if passed
        else f"Expected header '{name}' with value containing '{value}'",
    )


_CHECKS = {
    AssertionType.STATUS: _check_status,
    AssertionType.BODY: _check_body,
    AssertionType.HEADERS: _check_headers,
}


def evaluate_assertion(assertion: Assertion, result: HttpResult) -> AssertionResult:
    return _CHECKS[assertion.type](assertion, result)


def evaluate_assertions(assertions: list[Assertion], result: HttpResult) -> list[AssertionResult]:
    """One AssertionResult per assertion, in declaration order."""
    return [evaluate_assertion(a, result) for a in assertions]
