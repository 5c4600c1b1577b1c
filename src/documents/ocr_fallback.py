"""Recover W-2 Box 1 wages from recognized document text.

Used when the structured fields carry no usable wage amount. The patterns are
tried in order and the first one yielding a positive amount wins. Each pattern
records a sample line it is meant to match.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal

from src.documents.amounts import clean_amount


@dataclass(frozen=True)
class WagePattern:
    """One rung of the wage-recovery ladder.

    Attributes:
        name: Short identifier, logged when the pattern matches.
        pattern: Compiled case-insensitive regex; group 1 is the amount.
        example: A text line the pattern is written for.
    """

    name: str
    pattern: re.Pattern[str]
    example: str


@dataclass(frozen=True)
class WageMatch:
    amount: Decimal
    pattern_name: str


def _compile(expression: str) -> re.Pattern[str]:
    return re.compile(expression, re.IGNORECASE)


# Amount capture. A one- or two-digit number followed by a word on the same
# line is the next box's label ("2 Federal income tax withheld"), not an amount.
_AMOUNT = r"(?!\d{1,2}[ \t]+[A-Za-z])([\d,]+\.?\d*)"

_BOX1_LABEL = r"\b1\s+Wages[,\s]*tips[,\s]*other\s+compensation"


WAGE_PATTERNS: tuple[WagePattern, ...] = (
    WagePattern(
        name="box1_label_inline",
        pattern=_compile(_BOX1_LABEL + r"\s+" + _AMOUNT),
        example="1 Wages, tips, other compensation 161130.48",
    ),
    WagePattern(
        name="box1_label_punctuated",
        pattern=_compile(
            r"\b1\.?\s*Wages[,\s]*tips[,\s]*other\s+compensation[:\s]+\$?" + _AMOUNT
        ),
        example="1. Wages, tips, other compensation: $161,130.48",
    ),
    WagePattern(
        name="box1_number_only",
        pattern=_compile(r"\b(?:Box\s*)?1\s+\$?" + _AMOUNT),
        example="Box 1 161130.48",
    ),
    WagePattern(
        name="wages_and_tips",
        pattern=_compile(r"Wages\s+and\s+tips\s+\$?" + _AMOUNT),
        example="Wages and tips 161130.48",
    ),
    WagePattern(
        name="box1_label_next_line",
        pattern=_compile(_BOX1_LABEL + r"[\s\n]+\$?" + _AMOUNT),
        example="1 Wages, tips, other compensation\n161130.48",
    ),
    WagePattern(
        name="box1_label_header_row",
        pattern=_compile(_BOX1_LABEL + r"[^\n]*\n\s*\$?" + _AMOUNT),
        example="1 Wages, tips, other compensation 2 Federal income tax withheld\n"
        "161130.48 25000.00",
    ),
)


def match_wages(text: str | None) -> WageMatch | None:
    """First positive wage amount found by the pattern ladder.

    Args:
        text: Full recognized text of a W-2.

    Returns:
        The amount and the name of the pattern that found it, or None.
    """
    if not text:
        return None

    for wage_pattern in WAGE_PATTERNS:
        for match in wage_pattern.pattern.finditer(text):
            amount = clean_amount(match.group(1))
            if amount is not None and amount > 0:
                return WageMatch(amount=amount, pattern_name=wage_pattern.name)
    return None


def extract_wages_from_text(text: str | None) -> Decimal | None:
    """Box 1 wages recovered from raw text, or None when nothing matches.

    Example:
        >>> extract_wages_from_text("Box 1 161130.48\\nBox 2 25000.00")
        Decimal('161130.48')
        >>> extract_wages_from_text("Box 2 25000.00") is None
        True
    """
    found = match_wages(text)
    return found.amount if found else None
