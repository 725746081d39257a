"""httprunner executor - HTTP dispatch of a fully-resolved request."""

import logging
import time

import requests

from httprunner.errors import TransportError
from httprunner.models import HttpRequest, HttpResult

logger = logging.getLogger(__name__)

DEFAULT_CONNECTION_TIMEOUT_MS = 30_000
DEFAULT_TIMEOUT_MS = 60_000


def _merge_headers(request: HttpRequest) -> dict[str, str]:
    """Fold the ordered header list into a dict; repeated names are comma-joined."""
    headers: dict[str, str] = {}
    lower_to_name: dict[str, str] = {}
    for h in request.headers:
        key = lower_to_name.setdefault(h.name.lower(), h.name)
        if key in headers:
            headers[key] = f"{headers[key]}, {h.value}"
        else:
            headers[key] = h.value
    return headers


def execute_request(request: HttpRequest, insecure: bool = False) -> HttpResult:
    """Send request and return the raw outcome (assertions are not evaluated here).

    ``success`` reflects a 2xx status only. Raises TransportError when no
    response was obtained.
    """
    connect_ms = request.connection_timeout or DEFAULT_CONNECTION_TIMEOUT_MS
    read_ms = request.timeout or DEFAULT_TIMEOUT_MS

    kwargs = {
        "method": request.method.upper(),
        "url": request.url,
        "headers": _merge_headers(request),
        "data": request.body.encode("utf-8") if request.body is not None else None,
        "timeout": (connect_ms / 1000, read_ms / 1000),
        "allow_redirects": True,
        "verify": not insecure,
    }

    logger.debug("%s %s (connect %dms, read %dms)", kwargs["method"], request.url, connect_ms, read_ms)
    start = time.monotonic()
    try:
        resp = requests.request(**kwargs)
    except requests.exceptions.Timeout as e:
        raise TransportError(f"Request timeout: {e}", _elapsed_ms(start)) from e
    except requests.exceptions.ConnectionError as e:
        raise TransportError(f"Connection error: {e}", _elapsed_ms(start)) from e
    except requests.exceptions.RequestException as e:
        raise TransportError(f"Request failed: {e}", _elapsed_ms(start)) from e
    except Exception as e:
        raise TransportError(f"Unexpected error: {e}", _elapsed_ms(start)) from e

    return HttpResult(
        request_name=request.name,
        status_code=resp.status_code,
        success=200 <= resp.status_code < 300,
        duration_ms=_elapsed_ms(start),
        response_headers=dict(resp.headers),
        response_body=resp.text,
    )


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
