"""httprunner variables - {{placeholders}} and references to earlier requests.

A request variable reads data recorded for an earlier request in the same
file::

    {{login.response.body.$.token}}
    {{login.response.headers.Content-Type}}
    {{login.request.body.*}}
"""

import json
import logging
import re
from typing import Any

from httprunner.context import ContextStore
from httprunner.errors import UnresolvedReferenceError
from httprunner.models import (
    HttpRequest,
    HttpResult,
    RequestVariable,
    RequestVariableSource,
    RequestVariableTarget,
    Variable,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"\{\{(.+?)\}\}")

JSON_PATH_PREFIX = "$."


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


def extract_json_value(body: str | None, path: str) -> str | None:
    """Extract ``$.a.b.c`` from a JSON document.

    Only a dotted chain of object keys is supported. Returns None when the
    prefix is missing, the body is not JSON, or any key is absent.
    """
    if body is None or not path.startswith(JSON_PATH_PREFIX):
        return None
    try:
        current = json.loads(body)
    except ValueError:
        return None

    for key in path[len(JSON_PATH_PREFIX) :].split("."):
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return _stringify(current)


def substitute_variables(text: str | None, variables: list[Variable]) -> str | None:
    """Replace ``{{name}}`` with the matching variable; unknown names stay verbatim."""
    if text is None or not variables:
        return text
    lookup = {v.name: v.value for v in variables}

    def _replace(m: re.Match) -> str:
        return lookup.get(m.group(1).strip(), m.group(0))

    return PLACEHOLDER_RE.sub(_replace, text)


def parse_request_variable(reference: str) -> RequestVariable | None:
    """Parse ``name.source.target.path`` (braces optional). None if it is not one."""
    cleaned = reference
    if cleaned.startswith("{{") and cleaned.endswith("}}"):
        cleaned = cleaned[2:-2]
    cleaned = cleaned.strip()

    parts = cleaned.split(".")
    if len(parts) < 4 or not parts[0]:
        return None

    try:
        source = RequestVariableSource(parts[1])
        target = RequestVariableTarget(parts[2])
    except ValueError:
        return None

    return RequestVariable(
        reference=reference,
        request_name=parts[0],
        source=source,
        target=target,
        path=".".join(parts[3:]),
    )


def _header_value(headers: dict[str, str] | None, name: str) -> str | None:
    if not headers:
        return None
    lower = name.lower()
    for k, v in headers.items():
        if k.lower() == lower:
            return v
    return None


def _body_value(body: str | None, path: str) -> str | None:
    if body is None:
        return None
    if path == "*":
        return body
    return extract_json_value(body, path)


def _from_request(var: RequestVariable, request: HttpRequest) -> str | None:
    if var.target is RequestVariableTarget.HEADERS:
        return request.header(var.path)
    return _body_value(request.body, var.path)


def _from_response(var: RequestVariable, result: HttpResult) -> str | None:
    if var.target is RequestVariableTarget.HEADERS:
        return _header_value(result.response_headers, var.path)
    return _body_value(result.response_body, var.path)


def extract_request_variable_value(var: RequestVariable, store: ContextStore) -> str | None:
    """Resolve a request variable against the context store. None if unresolvable."""
    ctx = store.get(var.request_name)
    if ctx is None:
        return None
    if var.source is RequestVariableSource.REQUEST:
        return _from_request(var, ctx.request)
    if ctx.result is None:
        return None
    return _from_response(var, ctx.result)


def substitute_request_variables(text: str | None, store: ContextStore) -> str | None:
    """Replace every request-variable reference in text.

    Raises UnresolvedReferenceError when a reference names an unknown
    request, one without a recorded result, or a path that does not resolve.
    Placeholders that are not request variables are left for later passes.
    """
    if text is None:
        return None

    def _replace(m: re.Match) -> str:
        var = parse_request_variable(m.group(1))
        if var is None:
            return m.group(0)
        value = extract_request_variable_value(var, store)
        if value is None:
            raise UnresolvedReferenceError(m.group(0))
        logger.debug("Resolved %s", m.group(0))
        return value

    return PLACEHOLDER_RE.sub(_replace, text)
