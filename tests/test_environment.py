"""Tests for http-client.env.json lookup and loading."""

import json
import logging

import pytest

from httprunner.environment import (
    ENV_FILE_NAME,
    find_environment_file,
    load_environment_file,
    parse_environment_file,
)
from httprunner.errors import EnvironmentFileError


def _write_env(directory, data):
    path = directory / ENV_FILE_NAME
    path.write_text(json.dumps(data) if not isinstance(data, str) else data)
    return path


class TestFindEnvironmentFile:
    def test_same_directory(self, tmp_path):
        env = _write_env(tmp_path, {"dev": {}})
        assert find_environment_file(tmp_path / "api.http") == env.resolve()

    def test_walks_upward(self, tmp_path):
        env = _write_env(tmp_path, {"dev": {}})
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_environment_file(nested / "api.http") == env.resolve()

    def test_nearest_wins(self, tmp_path):
        _write_env(tmp_path, {"dev": {}})
        nested = tmp_path / "svc"
        nested.mkdir()
        near = _write_env(nested, {"dev": {}})
        assert find_environment_file(nested / "api.http") == near.resolve()


class TestParseEnvironmentFile:
    def test_values_are_stringified(self, tmp_path):
        path = _write_env(
            tmp_path,
            {"dev": {"host": "localhost", "port": 8080, "debug": True, "tags": ["a", 1], "none": None}},
        )
        envs = parse_environment_file(path)
        assert [(v.name, v.value) for v in envs["dev"]] == [
            ("host", "localhost"),
            ("port", "8080"),
            ("debug", "true"),
            ("tags", '["a",1]'),
            ("none", ""),
        ]

    def test_invalid_json(self, tmp_path):
        path = _write_env(tmp_path, "{not json")
        with pytest.raises(EnvironmentFileError):
            parse_environment_file(path)

    def test_top_level_must_be_object(self, tmp_path):
        path = _write_env(tmp_path, [1, 2])
        with pytest.raises(EnvironmentFileError):
            parse_environment_file(path)

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / ENV_FILE_NAME
        path.write_bytes(b'{"dev": {"a": "\xff"}}')
        with pytest.raises(EnvironmentFileError, match="not valid UTF-8"):
            parse_environment_file(path)


class TestLoadEnvironmentFile:
    def test_selects_environment(self, tmp_path):
        """Only the selected environment's variables are returned."""
        _write_env(
            tmp_path,
            {
                "dev": {"HostAddress": "https://localhost:44320", "ApiKey": "dev-api-key-123"},
                "prod": {"HostAddress": "https://contoso.com", "ApiKey": "prod-api-key-789"},
            },
        )
        variables = load_environment_file(tmp_path / "api.http", "dev")
        assert {v.name: v.value for v in variables} == {
            "HostAddress": "https://localhost:44320",
            "ApiKey": "dev-api-key-123",
        }

    def test_no_environment_selected(self, tmp_path):
        _write_env(tmp_path, {"dev": {"a": "1"}})
        assert load_environment_file(tmp_path / "api.http", None) == []

    def test_no_env_file(self, tmp_path):
        assert load_environment_file(tmp_path / "api.http", "dev") == []

    def test_unknown_environment_warns(self, tmp_path, caplog):
        _write_env(tmp_path, {"dev": {"a": "1"}})
        with caplog.at_level(logging.WARNING, logger="httprunner"):
            assert load_environment_file(tmp_path / "api.http", "staging") == []
        assert "staging" in caplog.text

    def test_numbers_stringified_without_quotes(self, tmp_path):
        _write_env(tmp_path, {"dev": {"TOKEN": "abc", "COUNT": 1}})
        variables = load_environment_file(tmp_path / "api.http", "dev")
        assert [(v.name, v.value) for v in variables] == [("TOKEN", "abc"), ("COUNT", "1")]
