"""Tests for duration literal parsing."""

import pytest

from httprunner.timeout import U64_MAX, parse_timeout_value


class TestParseTimeoutValue:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("30", 30_000),
            ("30s", 30_000),
            ("500ms", 500),
            ("2m", 120_000),
            ("0", 0),
            ("0ms", 0),
            ("  10s  ", 10_000),
        ],
    )
    def test_valid_literals(self, value, expected):
        assert parse_timeout_value(value) == expected

    @pytest.mark.parametrize(
        "value",
        ["", "   ", "abc", "10x", "10S", "10MS", "-5", "+5", "1.5s", "s", "ms"],
    )
    def test_invalid_literals(self, value):
        assert parse_timeout_value(value) is None

    def test_ms_is_not_read_as_minutes(self):
        assert parse_timeout_value("5ms") == 5

    def test_default_factor_for_bare_numbers(self):
        assert parse_timeout_value("250", default_factor=1) == 250
        # suffixes ignore the default factor
        assert parse_timeout_value("2s", default_factor=1) == 2_000

    def test_overflowing_multiplication_rejected(self):
        assert parse_timeout_value("18446744073709551615m") is None
        assert parse_timeout_value("18446744073709551615s") is None

    def test_max_value_in_milliseconds_accepted(self):
        assert parse_timeout_value(f"{U64_MAX}ms") == U64_MAX

    def test_number_beyond_u64_rejected(self):
        assert parse_timeout_value(f"{U64_MAX + 1}ms") is None
