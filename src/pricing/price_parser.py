# src/pricing/price_parser.py

"""Turn scraped price fragments into a canonical decimal string.

Product pages usually split a displayed price into an integer element
and a cents element (Amazon's ``.a-price-whole`` / ``.a-price-fraction``),
and the integer element's text often carries a trailing ``.`` or a
locale thousands separator.  ``normalize`` folds both fragments into a
string such as ``"1,299.99"`` that keeps the scraped digits exactly;
``to_numeric`` is only for comparing that string against a target.
"""

import re
from decimal import Decimal, InvalidOperation

_NON_WHOLE_CHARS = re.compile(r"[^\d,]")
_NON_DIGITS = re.compile(r"\D")


def _clean_whole(whole: str | None) -> str:
    """Digits and grouping commas of the whole part, or ``"0"``."""
    if not whole:
        return "0"
    # "." is always a thousands separator in the whole part
    cleaned = _NON_WHOLE_CHARS.sub("", whole.replace(".", ""))
    cleaned = cleaned.strip(",")
    if not any(ch.isdigit() for ch in cleaned):
        return "0"
    return re.sub(r",{2,}", ",", cleaned)


def _clean_fraction(fraction: str | None) -> str:
    if not fraction:
        return "0"
    digits = _NON_DIGITS.sub("", fraction)
    return digits or "0"


def normalize(whole: str | None, fraction: str | None) -> str:
    """Combine whole and fraction fragments into ``"<whole>.<fraction>"``.

    Never raises.  Missing or digit-less parts default to ``"0"``, so
    ``normalize(None, None)`` is ``"0.0"``; callers must not mistake
    that for a real observation.

    >>> normalize("1.234", "99")
    '1234.99'
    >>> normalize("1,299.", "00")
    '1,299.00'
    """
    return f"{_clean_whole(whole)}.{_clean_fraction(fraction)}"


def to_numeric(price_text: str) -> Decimal:
    """Parse a price string (grouping commas allowed) into a Decimal.

    Raises:
        ValueError: *price_text* is not a decimal number.
    """
    try:
        value = Decimal(price_text.replace(",", "").strip())
    except InvalidOperation as exc:
        raise ValueError(f"Not a price: {price_text!r}") from exc
    if not value.is_finite():
        raise ValueError(f"Not a price: {price_text!r}")
    return value
