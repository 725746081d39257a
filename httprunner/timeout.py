"""httprunner timeout literals - "30", "500ms", "10s", "2m" -> milliseconds."""

import re

U64_MAX = 2**64 - 1

_DIGITS_RE = re.compile(r"^[0-9]+$")

# Longest suffix first so "500ms" is not read as minutes.
_UNITS = (
    ("ms", 1),
    ("m", 60_000),
    ("s", 1_000),
)


def _parse_u64(text: str) -> int | None:
    text = text.strip()
    if not _DIGITS_RE.match(text):
        return None
    value = int(text)
    if value > U64_MAX:
        return None
    return value


def _checked_mul(value: int, factor: int) -> int | None:
    product = value * factor
    if product > U64_MAX:
        return None
    return product


def parse_timeout_value(value: str, default_factor: int = 1_000) -> int | None:
    """Parse a duration literal into milliseconds.

    A bare number is seconds unless ``default_factor`` says otherwise
    (delay directives pass 1 so a bare number reads as milliseconds).
    Returns None for empty input, unknown or upper-case suffixes,
    signed numbers and values that overflow an unsigned 64-bit integer.
    """
    value = value.strip()
    if not value:
        return None

    for suffix, factor in _UNITS:
        if value.endswith(suffix):
            number = _parse_u64(value[: -len(suffix)])
            if number is None:
                return None
            return _checked_mul(number, factor)

    number = _parse_u64(value)
    if number is None:
        return None
    return _checked_mul(number, default_factor)
