"""httprunner substitution - resolve a parsed request into the one that is sent."""

from dataclasses import replace

from httprunner.context import ContextStore
from httprunner.functions import substitute_functions
from httprunner.models import Assertion, Header, HttpRequest, Variable
from httprunner.variables import substitute_request_variables, substitute_variables


def _resolve(text: str | None, store: ContextStore, variables: list[Variable]) -> str | None:
    """Request variables, then built-in functions, then environment variables."""
    text = substitute_request_variables(text, store)
    text = substitute_functions(text)
    return substitute_variables(text, variables)


def substitute_request(
    request: HttpRequest,
    store: ContextStore,
    variables: list[Variable] | None = None,
) -> HttpRequest:
    """Return a fully-resolved copy of request; the parsed request is untouched.

    Raises UnresolvedReferenceError when a request-variable reference cannot
    be resolved from the context store.
    """
    variables = variables or []
    return replace(
        request,
        url=_resolve(request.url, store, variables),
        headers=[
            Header(_resolve(h.name, store, variables), _resolve(h.value, store, variables))
            for h in request.headers
        ],
        body=_resolve(request.body, store, variables),
        assertions=[
            Assertion(a.type, _resolve(a.expected_value, store, variables))
            for a in request.assertions
        ],
        conditions=list(request.conditions),
    )
