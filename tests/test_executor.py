"""Tests for HTTP dispatch over requests."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from httprunner.errors import TransportError
from httprunner.executor import DEFAULT_CONNECTION_TIMEOUT_MS, DEFAULT_TIMEOUT_MS, execute_request
from httprunner.models import Header, HttpRequest


def _response(status_code=200, text='{"ok": true}', headers=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    resp.headers = headers if headers is not None else {"Content-Type": "application/json"}
    return resp


class TestExecuteRequest:
    @patch("httprunner.executor.requests.request")
    def test_passes_request_fields(self, mock_request):
        mock_request.return_value = _response()
        request = HttpRequest(
            "post",
            "https://e.com/users",
            headers=[Header("Content-Type", "application/json")],
            body='{"name": "é"}',
            timeout=5_000,
            connection_timeout=1_500,
        )

        execute_request(request)

        _, kwargs = mock_request.call_args
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == "https://e.com/users"
        assert kwargs["headers"] == {"Content-Type": "application/json"}
        assert kwargs["data"] == '{"name": "é"}'.encode()
        assert kwargs["timeout"] == (1.5, 5.0)
        assert kwargs["allow_redirects"] is True
        assert kwargs["verify"] is True

    @patch("httprunner.executor.requests.request")
    def test_default_timeouts_and_insecure(self, mock_request):
        mock_request.return_value = _response()
        execute_request(HttpRequest("GET", "https://e.com"), insecure=True)
        _, kwargs = mock_request.call_args
        assert kwargs["timeout"] == (DEFAULT_CONNECTION_TIMEOUT_MS / 1000, DEFAULT_TIMEOUT_MS / 1000)
        assert kwargs["verify"] is False
        assert kwargs["data"] is None

    @patch("httprunner.executor.requests.request")
    def test_repeated_headers_joined(self, mock_request):
        mock_request.return_value = _response()
        request = HttpRequest("GET", "https://e.com", headers=[Header("Accept", "a"), Header("accept", "b")])
        execute_request(request)
        _, kwargs = mock_request.call_args
        assert kwargs["headers"] == {"Accept": "a, b"}

    @patch("httprunner.executor.requests.request")
    def test_result_fields(self, mock_request):
        mock_request.return_value = _response(201, "created", {"Location": "/users/1"})
        result = execute_request(HttpRequest("POST", "https://e.com/users", name="create"))
        assert result.request_name == "create"
        assert result.status_code == 201
        assert result.success
        assert result.response_body == "created"
        assert result.response_headers == {"Location": "/users/1"}
        assert result.assertion_results == []

    @patch("httprunner.executor.requests.request")
    def test_non_2xx_is_not_success(self, mock_request):
        mock_request.return_value = _response(302)
        assert not execute_request(HttpRequest("GET", "https://e.com")).success

    @pytest.mark.parametrize(
        "exc,prefix",
        [
            (requests.exceptions.ConnectTimeout("slow"), "Request timeout"),
            (requests.exceptions.ReadTimeout("slow"), "Request timeout"),
            (requests.exceptions.ConnectionError("refused"), "Connection error"),
            (requests.exceptions.InvalidURL("bad"), "Request failed"),
        ],
    )
    def test_transport_failures_raise(self, exc, prefix):
        with patch("httprunner.executor.requests.request", side_effect=exc):
            with pytest.raises(TransportError) as err:
                execute_request(HttpRequest("GET", "https://e.com"))
        assert str(err.value).startswith(prefix)

    def test_header_outside_latin1_raises_transport_error(self):
        exc = UnicodeEncodeError("latin-1", "€", 0, 1, "ordinal not in range(256)")
        request = HttpRequest("GET", "https://e.com", headers=[Header("X-Currency", "€")])
        with patch("httprunner.executor.requests.request", side_effect=exc):
            with pytest.raises(TransportError) as err:
                execute_request(request)
        assert str(err.value).startswith("Unexpected error")
        assert isinstance(err.value.__cause__, UnicodeEncodeError)
