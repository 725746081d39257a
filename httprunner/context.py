"""httprunner context store - what earlier requests in a file did."""

from collections.abc import Iterator

from httprunner.models import HttpRequest, HttpResult, RequestContext


class ContextStore:
    """Append-only record of a single file run.

    Entries keep file order; the name index points at the most recent
    entry recorded under a name, so a duplicated ``@name`` shadows the
    earlier request for every later lookup.
    """

    def __init__(self):
        self._contexts: list[RequestContext] = []
        self._index: dict[str, int] = {}

    def record(
        self,
        request: HttpRequest,
        result: HttpResult | None,
        position: int,
    ) -> RequestContext:
        """Record a request at 1-based ``position``. Unnamed requests get ``request_<n>``."""
        name = request.name or f"request_{position}"
        ctx = RequestContext(name=name, request=request, result=result)
        self._index[name] = len(self._contexts)
        self._contexts.append(ctx)
        return ctx

    def get(self, name: str) -> RequestContext | None:
        idx = self._index.get(name)
        if idx is None:
            return None
        return self._contexts[idx]

    def result_for(self, name: str) -> HttpResult | None:
        ctx = self.get(name)
        return ctx.result if ctx else None

    def contexts(self) -> list[RequestContext]:
        return list(self._contexts)

    def __contains__(self, name: str) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[RequestContext]:
        return iter(self._contexts)

    def __len__(self) -> int:
        return len(self._contexts)
