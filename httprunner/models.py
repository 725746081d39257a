"""httprunner models - requests, results and the per-file context records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class AssertionType(Enum):
    STATUS = "status"
    BODY = "body"
    HEADERS = "headers"


class ConditionType(Enum):
    STATUS = "status"
    BODY_JSON_PATH = "body_json_path"


class RequestVariableSource(Enum):
    REQUEST = "request"
    RESPONSE = "response"


class RequestVariableTarget(Enum):
    BODY = "body"
    HEADERS = "headers"


class RequestStatus(Enum):
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class Variable:
    name: str
    value: str


@dataclass
class Header:
    name: str
    value: str


@dataclass
class Assertion:
    type: AssertionType
    expected_value: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "expected_value": self.expected_value}


@dataclass
class AssertionResult:
    assertion: Assertion
    passed: bool
    actual_value: str | None = None
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "assertion": self.assertion.to_dict(),
            "passed": self.passed,
            "actual_value": self.actual_value,
            "error_message": self.error_message,
        }


@dataclass
class Condition:
    """``@if`` / ``@if-not`` directive.

    ``json_path`` is only set for BODY_JSON_PATH conditions and keeps the
    ``$.`` prefix as written in the file.
    """

    request_name: str
    type: ConditionType
    expected_value: str
    negate: bool = False
    json_path: str | None = None

    def describe(self) -> str:
        if self.type is ConditionType.STATUS:
            return f"{self.request_name}.response.status"
        return f"{self.request_name}.response.body.{self.json_path}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "request_name": self.request_name,
            "type": self.type.value,
            "json_path": self.json_path,
            "expected_value": self.expected_value,
            "negate": self.negate,
        }


@dataclass
class ConditionEvaluation:
    condition: Condition
    met: bool
    actual_value: str | None = None


@dataclass
class RequestVariable:
    reference: str
    request_name: str
    source: RequestVariableSource
    target: RequestVariableTarget
    path: str


@dataclass
class HttpRequest:
    method: str
    url: str
    name: str | None = None
    headers: list[Header] = field(default_factory=list)
    body: str | None = None
    assertions: list[Assertion] = field(default_factory=list)
    conditions: list[Condition] = field(default_factory=list)
    depends_on: str | None = None
    timeout: int | None = None
    connection_timeout: int | None = None
    pre_delay_ms: int | None = None
    post_delay_ms: int | None = None

    def header(self, name: str) -> str | None:
        """Return the first header value matching name (case-insensitive)."""
        lower = name.lower()
        for h in self.headers:
            if h.name.lower() == lower:
                return h.value
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "method": self.method,
            "url": self.url,
            "headers": [{"name": h.name, "value": h.value} for h in self.headers],
            "body": self.body,
            "assertions": [a.to_dict() for a in self.assertions],
            "conditions": [c.to_dict() for c in self.conditions],
            "depends_on": self.depends_on,
            "timeout": self.timeout,
            "connection_timeout": self.connection_timeout,
            "pre_delay_ms": self.pre_delay_ms,
            "post_delay_ms": self.post_delay_ms,
        }


@dataclass
class HttpResult:
    status_code: int
    success: bool
    duration_ms: int = 0
    request_name: str | None = None
    error_message: str | None = None
    response_headers: dict[str, str] | None = None
    response_body: str | None = None
    assertion_results: list[AssertionResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "request_name": self.request_name,
            "status_code": self.status_code,
            "success": self.success,
            "error_message": self.error_message,
            "duration_ms": self.duration_ms,
            "response_headers": self.response_headers,
            "response_body": self.response_body,
            "assertion_results": [r.to_dict() for r in self.assertion_results],
        }


@dataclass
class RequestContext:
    """Executed (or skip-recorded) state of one request in a file run."""

    name: str
    request: HttpRequest
    result: HttpResult | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "request": self.request.to_dict(),
            "result": self.result.to_dict() if self.result else None,
        }


@dataclass
class HttpFileResults:
    filename: str
    success_count: int = 0
    failed_count: int = 0
    skipped_count: int = 0
    result_contexts: list[RequestContext] = field(default_factory=list)
    cancelled: bool = False

    @property
    def total(self) -> int:
        return self.success_count + self.failed_count + self.skipped_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "success_count": self.success_count,
            "failed_count": self.failed_count,
            "skipped_count": self.skipped_count,
            "cancelled": self.cancelled,
            "result_contexts": [c.to_dict() for c in self.result_contexts],
        }


@dataclass
class ProcessorResults:
    success: bool
    files: list[HttpFileResults] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "files": [f.to_dict() for f in self.files],
        }


@dataclass
class RequestProcessingResult:
    """One incremental event: emitted as each request completes or is skipped."""

    index: int
    total: int
    name: str
    request: HttpRequest
    status: RequestStatus
    result: HttpResult | None = None
    reason: str | None = None

    @property
    def skipped(self) -> bool:
        return self.status is RequestStatus.SKIPPED
