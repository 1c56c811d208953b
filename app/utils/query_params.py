"""Sanitization helpers for listing query parameters.

Query parameters are never rejected: malformed values fall back to
defaults or are clamped into range, so a bad parameter yields a normal
listing (and a normal cache key) instead of an error.
"""

from __future__ import annotations

import re

MAX_SEARCH_LENGTH = 255
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_leading_int(value: str | None) -> int | None:
    """Parse the integer prefix of a string ("12abc" -> 12); None if there is none."""

    if not value:
        return None
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def sanitize_search_input(value: str | None) -> str:
    """Strip control characters, trim and cap a free-text search term."""

    if not value or not isinstance(value, str):
        return ""
    sanitized = _CONTROL_CHARS.sub("", value).strip()
    return sanitized[:MAX_SEARCH_LENGTH]


def sanitize_number(
    value: str | None,
    min_value: int | None = None,
    max_value: int | None = None,
    default: int | None = None,
) -> int | None:
    """Parse an integer query parameter, clamping it to [min_value, max_value].

    Missing or unparseable values return ``default``.
    """

    number = parse_leading_int(value)
    if number is None:
        return default
    if min_value is not None and number < min_value:
        return min_value
    if max_value is not None and number > max_value:
        return max_value
    return number


def validate_pagination(page: int | None, page_size: int | None) -> tuple[int, int]:
    valid_page = page if page and page > 0 else 1
    valid_page_size = (
        page_size if page_size and 0 < page_size <= MAX_PAGE_SIZE else DEFAULT_PAGE_SIZE
    )
    return valid_page, valid_page_size


def sanitize_boolean(value: str | None, default: bool = False) -> bool:
    if not value:
        return default
    return value.lower() == "true"
