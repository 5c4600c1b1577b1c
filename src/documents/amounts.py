"""Monetary value cleaning for recognized document fields."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any

# Currency symbols, thousands separators, and whitespace
_NOISE = re.compile(r"[$,\s]")


def clean_amount(value: Any) -> Decimal | None:
    """Parse a recognized monetary value into a Decimal.

    Accepts numbers, strings such as "$161,130.48", and the wrapper objects
    some recognizers emit ({"value": ...} or {"content": ...}).

    Args:
        value: Raw value from the recognition service.

    Returns:
        The amount, or None when the value is missing or malformed.

    Example:
        >>> clean_amount("$161,130.48")
        Decimal('161130.48')
        >>> clean_amount("N/A") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, dict):
        for key in ("value", "content", "amount"):
            if key in value:
                return clean_amount(value[key])
        return None

    if isinstance(value, float):
        value = str(value)

    if isinstance(value, (int, Decimal)):
        amount = Decimal(value)
    elif isinstance(value, str):
        cleaned = _NOISE.sub("", value)
        if not cleaned:
            return None
        try:
            amount = Decimal(cleaned)
        except InvalidOperation:
            return None
    else:
        return None

    if not amount.is_finite():
        return None
    return amount
