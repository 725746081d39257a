"""Shared fixtures for httprunner tests."""

import json
import logging
import textwrap

import pytest
from click.testing import CliRunner

from httprunner import core
from httprunner.errors import TransportError
from httprunner.models import HttpResult


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def global_httprunner_dir(tmp_path, monkeypatch):
    """Override the global ~/.httprunner directory to a temp location."""
    fake_global = tmp_path / "fake_home" / ".httprunner"
    fake_global.mkdir(parents=True)
    monkeypatch.setattr(core, "GLOBAL_DIR", fake_global)
    monkeypatch.setattr(core, "GLOBAL_CONFIG", fake_global / "config.yaml")
    return fake_global


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handlers the CLI attaches so caplog keeps seeing records."""
    yield
    logger = logging.getLogger("httprunner")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def tmp_project(tmp_path, monkeypatch, global_httprunner_dir):
    """Temporary project directory as CWD, isolated from ~/.httprunner."""
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    return project


@pytest.fixture
def write_http(tmp_path):
    """Write dedented request-file text and return its path."""

    def _write(content, name="requests.http", directory=None):
        path = (directory or tmp_path) / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return path

    return _write


def make_http_result(
    status_code=200,
    body=None,
    headers=None,
    duration_ms=42,
    request_name=None,
):
    """Factory for raw transport results (assertions not yet evaluated)."""
    if isinstance(body, dict | list):
        body = json.dumps(body)
    return HttpResult(
        request_name=request_name,
        status_code=status_code,
        success=200 <= status_code < 300,
        duration_ms=duration_ms,
        response_headers=headers if headers is not None else {"Content-Type": "application/json"},
        response_body=body,
    )


class FakeTransport:
    """Stands in for execute_request.

    ``routes`` maps "METHOD url" (or just the url) to an HttpResult, an
    exception instance, or a callable taking the request. Every dispatched
    request is kept in ``calls``.
    """

    def __init__(self, routes=None, default=None):
        self.routes = routes or {}
        self.default = default
        self.calls = []
        self.insecure_flags = []

    def __call__(self, request, insecure=False):
        self.calls.append(request)
        self.insecure_flags.append(insecure)
        outcome = self.routes.get(f"{request.method} {request.url}", self.routes.get(request.url))
        if outcome is None:
            outcome = self.default
        if outcome is None:
            raise TransportError(f"Connection error: no route for {request.method} {request.url}")
        if callable(outcome) and not isinstance(outcome, HttpResult):
            outcome = outcome(request)
        if isinstance(outcome, Exception):
            raise outcome
        # fresh copy so assertion evaluation never leaks between calls
        return HttpResult(**{**outcome.__dict__, "request_name": request.name, "assertion_results": []})

    @property
    def urls(self):
        return [r.url for r in self.calls]


@pytest.fixture
def transport():
    return FakeTransport(default=make_http_result(200, body={"ok": True}))
