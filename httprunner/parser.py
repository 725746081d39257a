"""httprunner parser - .http request files into HttpRequest lists.

A file is a sequence of requests. Directives attach to the next request
line; headers follow the request line up to the first blank line; the body
runs until the next request line::

    @host = https://api.example.com

    # @name login
    # @timeout 10s
    POST {{host}}/login
    Content-Type: application/json

    {"user": "admin"}

    EXPECTED_RESPONSE_STATUS 200

    ###
    # @name profile
    # @dependsOn login
    # @if login.response.body.$.role admin
    GET {{host}}/me
    Authorization: Bearer {{login.response.body.$.token}}
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from httprunner.errors import ParseError
from httprunner.models import (
    Assertion,
    AssertionType,
    Condition,
    ConditionType,
    Header,
    HttpRequest,
    Variable,
)
from httprunner.timeout import parse_timeout_value
from httprunner.variables import substitute_variables

logger = logging.getLogger(__name__)

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS", "TRACE", "CONNECT")

_REQUEST_LINE_PREFIXES = tuple(f"{m} " for m in HTTP_METHODS)

_VARIABLE_RE = re.compile(r"^@([A-Za-z_][\w.-]*)\s*=\s*(.*)$")
_DIRECTIVE_RE = re.compile(r"^@([A-Za-z][\w-]*)\s*:?\s*(.*)$")
_COMMENT_DIRECTIVE_RE = re.compile(r"^(?:#+|//)\s*(@.*)$")

_ASSERTION_PREFIXES = (
    ("EXPECTED_RESPONSE_STATUS", AssertionType.STATUS),
    ("EXPECTED_RESPONSE_BODY", AssertionType.BODY),
    ("EXPECTED_RESPONSE_HEADERS", AssertionType.HEADERS),
)

DIRECTIVES = (
    "name",
    "dependsOn",
    "if",
    "if-not",
    "timeout",
    "connection-timeout",
    "connectionTimeout",
    "pre-delay",
    "post-delay",
)


def is_http_request_line(line: str) -> bool:
    """True for lines containing ``HTTP/`` or starting with a method and a space."""
    return "HTTP/" in line or line.startswith(_REQUEST_LINE_PREFIXES)


def parse_condition(value: str, negate: bool = False) -> Condition | None:
    """Parse the argument of ``@if`` / ``@if-not``.

    ``<request>.response.status <expected>`` or
    ``<request>.response.body.<$.path> <expected>``; the expected value is
    the rest of the line. Returns None when the value does not fit either form.
    """
    parts = value.split()
    if len(parts) < 2:
        return None
    reference = parts[0]
    expected = " ".join(parts[1:])

    ref_parts = reference.split(".")
    if len(ref_parts) < 3 or not ref_parts[0] or ref_parts[1] != "response":
        return None

    if len(ref_parts) == 3 and ref_parts[2] == "status":
        return Condition(ref_parts[0], ConditionType.STATUS, expected, negate)
    if len(ref_parts) >= 4 and ref_parts[2] == "body":
        return Condition(
            ref_parts[0],
            ConditionType.BODY_JSON_PATH,
            expected,
            negate,
            json_path=".".join(ref_parts[3:]),
        )
    return None


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


@dataclass
class _Pending:
    """Directive values waiting for the next request line."""

    name: str | None = None
    depends_on: str | None = None
    conditions: list[Condition] = field(default_factory=list)
    timeout: int | None = None
    connection_timeout: int | None = None
    pre_delay_ms: int | None = None
    post_delay_ms: int | None = None

    def is_empty(self) -> bool:
        return self == _Pending()


class _ParserState:
    def __init__(self, variables: list[Variable] | None = None):
        self.requests: list[HttpRequest] = []
        self.variables: list[Variable] = [Variable(v.name, v.value) for v in variables or []]
        self.current: HttpRequest | None = None
        self.in_body = False
        self.body_lines: list[str] = []
        self.pending = _Pending()
        self.in_script = False
        self.seen_names: set[str] = set()

    def expand(self, text: str) -> str:
        return substitute_variables(text, self.variables)

    def set_variable(self, name: str, value: str) -> None:
        value = self.expand(value)
        for var in self.variables:
            if var.name == name:
                var.value = value
                return
        self.variables.append(Variable(name, value))

    def finalize(self) -> None:
        if self.current is None:
            return
        while self.body_lines and not self.body_lines[-1].strip():
            self.body_lines.pop()
        while self.body_lines and not self.body_lines[0].strip():
            self.body_lines.pop(0)
        if self.body_lines:
            self.current.body = "\n".join(self.body_lines)
        self.requests.append(self.current)
        self.current = None
        self.body_lines = []
        self.in_body = False

    def start_request(self, line: str, line_number: int) -> None:
        self.finalize()

        tokens = line.split()
        if tokens[0] in HTTP_METHODS:
            method, rest = tokens[0], tokens[1:]
        else:
            method, rest = "GET", tokens
        if not rest or rest[0].startswith("HTTP/"):
            raise ParseError(f"Request line has no URL: '{line}'", line_number)

        pending = self.pending
        if pending.name is not None:
            if pending.name in self.seen_names:
                logger.warning(
                    "Duplicate request name '%s' at line %d; later references use this request",
                    pending.name,
                    line_number,
                )
            self.seen_names.add(pending.name)

        self.current = HttpRequest(
            method=self.expand(method),
            url=self.expand(rest[0]),
            name=pending.name,
            conditions=pending.conditions,
            depends_on=pending.depends_on,
            timeout=pending.timeout,
            connection_timeout=pending.connection_timeout,
            pre_delay_ms=pending.pre_delay_ms,
            post_delay_ms=pending.post_delay_ms,
        )
        self.pending = _Pending()


def _parse_duration(keyword: str, value: str, line_number: int, default_factor: int) -> int:
    millis = parse_timeout_value(value, default_factor=default_factor)
    if millis is None:
        raise ParseError(f"Invalid @{keyword} value: '{value}'", line_number)
    return millis


def _apply_directive(keyword: str, value: str, state: _ParserState, line_number: int) -> None:
    pending = state.pending
    if keyword == "name":
        if not value:
            raise ParseError("@name requires a value", line_number)
        pending.name = value
    elif keyword == "dependsOn":
        if not value:
            raise ParseError("@dependsOn requires a request name", line_number)
        pending.depends_on = value
    elif keyword in ("if", "if-not"):
        condition = parse_condition(state.expand(value), negate=keyword == "if-not")
        if condition is None:
            raise ParseError(f"Invalid @{keyword} directive: '{value}'", line_number)
        pending.conditions.append(condition)
    elif keyword == "timeout":
        pending.timeout = _parse_duration(keyword, value, line_number, 1_000)
    elif keyword in ("connection-timeout", "connectionTimeout"):
        pending.connection_timeout = _parse_duration(keyword, value, line_number, 1_000)
    elif keyword == "pre-delay":
        pending.pre_delay_ms = _parse_duration(keyword, value, line_number, 1)
    elif keyword == "post-delay":
        pending.post_delay_ms = _parse_duration(keyword, value, line_number, 1)
    else:
        raise ParseError(f"Unknown directive: @{keyword}", line_number)


def _try_directive(text: str, state: _ParserState, line_number: int, strict: bool) -> bool:
    """Handle ``@keyword value``. Unknown keywords are errors only when ``strict``."""
    m = _DIRECTIVE_RE.match(text)
    if not m:
        return False
    keyword, value = m.group(1), m.group(2).strip()
    if keyword not in DIRECTIVES and not strict:
        return False
    _apply_directive(keyword, value, state, line_number)
    return True


def _try_assertion(trimmed: str, state: _ParserState, line_number: int) -> bool:
    text = trimmed[2:] if trimmed.startswith("> ") else trimmed
    for prefix, assertion_type in _ASSERTION_PREFIXES:
        if text == prefix or text.startswith(prefix + " "):
            if state.current is None:
                raise ParseError(f"{prefix} before any request line", line_number)
            expected = _strip_quotes(text[len(prefix) :].strip())
            state.current.assertions.append(Assertion(assertion_type, state.expand(expected)))
            return True
    return False


def _parse_line(raw: str, state: _ParserState, line_number: int) -> None:
    trimmed = raw.strip()

    # IntelliJ response handler scripts: > {% ... %}
    if trimmed.startswith("> {%"):
        state.in_script = not trimmed.endswith("%}")
        return
    if state.in_script:
        if trimmed.endswith("%}"):
            state.in_script = False
        return

    if not trimmed:
        if state.in_body:
            state.body_lines.append("")
        elif state.current is not None:
            # Blank line ends the header block.
            state.in_body = True
        return

    comment = _COMMENT_DIRECTIVE_RE.match(trimmed)
    if comment and _try_directive(comment.group(1), state, line_number, strict=False):
        return
    if trimmed.startswith(("#", "//")):
        return

    if trimmed.startswith("@"):
        var = _VARIABLE_RE.match(trimmed)
        if var:
            state.set_variable(var.group(1), var.group(2).strip())
            return
        _try_directive(trimmed, state, line_number, strict=True)
        return

    if _try_assertion(trimmed, state, line_number):
        return

    if is_http_request_line(trimmed):
        state.start_request(trimmed, line_number)
        return

    if state.current is None:
        raise ParseError(f"Unexpected content outside of a request: '{trimmed}'", line_number)

    if not state.in_body and ":" in trimmed:
        name, value = trimmed.split(":", 1)
        state.current.headers.append(Header(state.expand(name.strip()), state.expand(value.strip())))
        return

    state.in_body = True
    state.body_lines.append(state.expand(raw.rstrip()))


def parse_http_content(content: str, variables: list[Variable] | None = None) -> list[HttpRequest]:
    """Parse request-file text. Raises ParseError; never returns a partial list.

    ``variables`` seed the parse-time ``{{name}}`` expansion; ``@name = value``
    lines in the file add to or override them.
    """
    state = _ParserState(variables)
    for line_number, line in enumerate(content.splitlines(), start=1):
        _parse_line(line, state, line_number)
    state.finalize()

    if not state.pending.is_empty():
        logger.warning("Directives after the last request line are ignored")
    return state.requests


def parse_http_file(path: str | Path, variables: list[Variable] | None = None) -> list[HttpRequest]:
    """Read and parse a request file (UTF-8). File errors propagate to the caller."""
    try:
        with open(path, encoding="utf-8") as f:
            content = f.read()
    except UnicodeDecodeError as e:
        raise ParseError(f"{path} is not valid UTF-8: {e}") from e
    logger.debug("Parsing %s", path)
    return parse_http_content(content, variables)
