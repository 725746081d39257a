"""httprunner processor - runs request files and aggregates their results.

Requests in a file run strictly in order because later requests read what
earlier ones recorded. For each request::

    dependency check -> condition check -> substitution -> pre-delay
        -> dispatch -> assertions -> post-delay -> record

A skipped request is recorded without a result and never dispatched.
"""

import logging
import threading
import time
from collections.abc import Callable, Generator, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from pathlib import Path

from httprunner.assertions import evaluate_assertions
from httprunner.conditions import check_dependency, evaluate_conditions_verbose
from httprunner.context import ContextStore
from httprunner.environment import load_environment_file
from httprunner.errors import TransportError, UnresolvedReferenceError
from httprunner.executor import execute_request
from httprunner.models import (
    HttpFileResults,
    HttpRequest,
    HttpResult,
    ProcessorResults,
    RequestProcessingResult,
    RequestStatus,
    Variable,
)
from httprunner.parser import parse_http_file
from httprunner.substitution import substitute_request

logger = logging.getLogger(__name__)

Transport = Callable[[HttpRequest, bool], HttpResult]
EventCallback = Callable[[RequestProcessingResult], bool | None]


class CancellationToken:
    """Cooperative stop signal, checked between requests."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class ProcessorConfig:
    """Run options. Timeouts and delays are milliseconds."""

    environment: str | None = None
    insecure: bool = False
    delay_ms: int = 0
    timeout: int | None = None
    connection_timeout: int | None = None
    jobs: int = 1


class FileRun:
    """Context store and tallies of one file run."""

    def __init__(self, filename: str):
        self.filename = filename
        self.store = ContextStore()
        self.success_count = 0
        self.failed_count = 0
        self.skipped_count = 0
        self.cancelled = False

    def tally(self, status: RequestStatus) -> None:
        if status is RequestStatus.SUCCEEDED:
            self.success_count += 1
        elif status is RequestStatus.FAILED:
            self.failed_count += 1
        else:
            self.skipped_count += 1

    def results(self) -> HttpFileResults:
        return HttpFileResults(
            filename=self.filename,
            success_count=self.success_count,
            failed_count=self.failed_count,
            skipped_count=self.skipped_count,
            result_contexts=self.store.contexts(),
            cancelled=self.cancelled,
        )


class HttpFileProcessor:
    def __init__(
        self,
        config: ProcessorConfig | None = None,
        transport: Transport | None = None,
        cancel_token: CancellationToken | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config or ProcessorConfig()
        self.transport = transport or execute_request
        self.cancel_token = cancel_token or CancellationToken()
        self.sleep = sleep

    # ── Public API ───────────────────────────────────────────────────────

    def iter_file(self, path: str | Path) -> Generator[RequestProcessingResult, None, HttpFileResults]:
        """Parse path and yield one event per request; returns the file results.

        Parse and file errors are raised before the first event.
        """
        requests = parse_http_file(path)
        variables = load_environment_file(path, self.config.environment)
        logger.info("Processing %s: %d request(s)", path, len(requests))
        return (yield from self.iter_requests(requests, str(path), variables))

    def iter_requests(
        self,
        requests: list[HttpRequest],
        filename: str = "<memory>",
        variables: list[Variable] | None = None,
    ) -> Generator[RequestProcessingResult, None, HttpFileResults]:
        run = FileRun(filename)
        total = len(requests)
        for index, request in enumerate(requests):
            if self.cancel_token.cancelled:
                logger.info("Cancelled after %d of %d request(s) in %s", index, total, filename)
                run.cancelled = True
                break
            if index and self.config.delay_ms:
                self._delay(self.config.delay_ms)
            event = self._process_request(run, index, total, request, variables or [])
            run.tally(event.status)
            yield event
        return run.results()

    def process_file(self, path: str | Path, callback: EventCallback | None = None) -> HttpFileResults:
        """Run a whole file. ``callback`` sees every event; returning False stops the run."""
        events = self.iter_file(path)
        while True:
            try:
                event = next(events)
            except StopIteration as stop:
                return stop.value
            if callback is not None and callback(event) is False:
                self.cancel_token.cancel()

    # ── Per-request pipeline ─────────────────────────────────────────────

    def _process_request(
        self,
        run: FileRun,
        index: int,
        total: int,
        request: HttpRequest,
        variables: list[Variable],
    ) -> RequestProcessingResult:
        position = index + 1

        reason = self._skip_reason(request, run.store)
        if reason is None:
            try:
                resolved = substitute_request(request, run.store, variables)
            except UnresolvedReferenceError as e:
                reason = str(e)

        if reason is not None:
            ctx = run.store.record(request, None, position)
            logger.info("Skipped %s %s %s: %s", ctx.name, request.method, request.url, reason)
            return RequestProcessingResult(
                index, total, ctx.name, request, RequestStatus.SKIPPED, reason=reason
            )

        if request.pre_delay_ms:
            self._delay(request.pre_delay_ms)
        resolved = self._apply_default_timeouts(resolved)
        result = self._dispatch(resolved)

        if request.post_delay_ms:
            self._delay(request.post_delay_ms)

        ctx = run.store.record(resolved, result, position)
        status = RequestStatus.SUCCEEDED if result.success else RequestStatus.FAILED
        logger.info(
            "%s %s %s - %s %d (%dms)",
            ctx.name,
            resolved.method,
            resolved.url,
            status.value,
            result.status_code,
            result.duration_ms,
        )
        return RequestProcessingResult(
            index, total, ctx.name, resolved, status, result=result, reason=result.error_message
        )

    def _skip_reason(self, request: HttpRequest, store: ContextStore) -> str | None:
        if not check_dependency(request.depends_on, store):
            return f"dependency '{request.depends_on}' not met"
        if request.conditions:
            met, evaluations = evaluate_conditions_verbose(request.conditions, store)
            for e in evaluations:
                logger.debug(
                    "%s %s %s: expected %r, actual %r -> %s",
                    "@if-not" if e.condition.negate else "@if",
                    e.condition.describe(),
                    "!=" if e.condition.negate else "==",
                    e.condition.expected_value,
                    e.actual_value,
                    "met" if e.met else "not met",
                )
            if not met:
                return "conditions not met"
        return None

    def _apply_default_timeouts(self, request: HttpRequest) -> HttpRequest:
        return replace(
            request,
            timeout=request.timeout or self.config.timeout,
            connection_timeout=request.connection_timeout or self.config.connection_timeout,
        )

    def _dispatch(self, request: HttpRequest) -> HttpResult:
        try:
            result = self.transport(request, self.config.insecure)
        except TransportError as e:
            return HttpResult(
                request_name=request.name,
                status_code=0,
                success=False,
                duration_ms=e.duration_ms,
                error_message=str(e),
            )

        if request.assertions:
            result.assertion_results = evaluate_assertions(request.assertions, result)
            result.success = result.success and all(r.passed for r in result.assertion_results)
        return result

    def _delay(self, millis: int) -> None:
        self.sleep(millis / 1000)


# ── Module-level entry points ────────────────────────────────────────────


def iter_http_file(
    path: str | Path,
    config: ProcessorConfig | None = None,
    transport: Transport | None = None,
    cancel_token: CancellationToken | None = None,
) -> Generator[RequestProcessingResult, None, HttpFileResults]:
    """Incremental mode: yield each request's outcome as it completes.

    The generator's return value (``StopIteration.value``) is the file's
    HttpFileResults.
    """
    processor = HttpFileProcessor(config, transport, cancel_token)
    return processor.iter_file(path)


def process_http_file(
    path: str | Path,
    config: ProcessorConfig | None = None,
    transport: Transport | None = None,
    cancel_token: CancellationToken | None = None,
) -> HttpFileResults:
    return HttpFileProcessor(config, transport, cancel_token).process_file(path)


def process_http_file_incremental(
    path: str | Path,
    callback: EventCallback,
    config: ProcessorConfig | None = None,
    transport: Transport | None = None,
    cancel_token: CancellationToken | None = None,
) -> HttpFileResults:
    """Call ``callback`` after every request; stop early when it returns False.

    Returns the (possibly partial) aggregate for the file.
    """
    return HttpFileProcessor(config, transport, cancel_token).process_file(path, callback)


def process_http_files(
    files: Iterable[str | Path],
    config: ProcessorConfig | None = None,
    transport: Transport | None = None,
    cancel_token: CancellationToken | None = None,
    callback: EventCallback | None = None,
) -> ProcessorResults:
    """Batch mode over several files, each with its own context store.

    With ``config.jobs > 1`` files run on a thread pool; results keep input
    order. Parse and file errors propagate to the caller.
    """
    config = config or ProcessorConfig()
    files = list(files)
    cancel_token = cancel_token or CancellationToken()

    def _run(path: str | Path) -> HttpFileResults:
        processor = HttpFileProcessor(config, transport, cancel_token)
        return processor.process_file(path, callback)

    if config.jobs > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=config.jobs) as pool:
            file_results = list(pool.map(_run, files))
    else:
        file_results = [_run(path) for path in files]

    return ProcessorResults(
        success=all(r.failed_count == 0 for r in file_results),
        files=file_results,
    )
