"""Price formatting in the es-AR convention ("1.234,56")."""

from __future__ import annotations

import re

_NON_NUMERIC = re.compile(r"[$\s]")


def format_price(value: float) -> str:
    """Format a number with ``.`` thousands separators and ``,`` decimals.

    Examples:
        >>> format_price(1234.5)
        '1.234,50'
        >>> format_price(7000)
        '7.000,00'
    """

    us_style = f"{value:,.2f}"
    return us_style.replace(",", "\x00").replace(".", ",").replace("\x00", ".")


def parse_price(value: str | None) -> float:
    """Parse an es-AR formatted price back to a float; unparseable input gives 0."""

    if not value or not isinstance(value, str):
        return 0.0
    cleaned = _NON_NUMERIC.sub("", value)
    normalized = cleaned.replace(".", "").replace(",", ".", 1)
    try:
        return float(normalized)
    except ValueError:
        return 0.0
