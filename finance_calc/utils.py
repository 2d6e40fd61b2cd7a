"""Utility functions for the calculators.

This module provides helpers for parsing user input into Python data types:
plain and pt-BR formatted numbers, amounts with ``k``/``m`` shorthand and
ISO dates.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, getcontext

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

# pt-BR integer with dot-grouped thousands, e.g. "1.234.567"
_THOUSANDS = re.compile(r"^-?[1-9]\d{0,2}(\.\d{3})+$")


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and handles both integer and float-like
    strings. It raises ``ValueError`` if conversion fails.
    """
    try:
        cleaned = value.replace(",", "")
        number = Decimal(cleaned)
    except (InvalidOperation, AttributeError) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not number.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return number


def decimal_from_locale(value: str) -> Decimal:
    """Convert pt-BR formatted text such as ``"R$ 1.234,56"`` or ``"12,5%"``.

    When the text contains a comma it is taken as the decimal separator and
    dots as thousands separators. Without a comma, dots that each start a
    group of exactly three digits are thousands separators too (``"10.000"``
    is ten thousand, ``"12.5"`` is twelve and a half); otherwise the text is
    parsed like :func:`decimal_from_str`.
    """
    cleaned = value.replace("R$", "").replace("%", "").replace("\xa0", "").strip()
    cleaned = cleaned.replace(" ", "")
    if "," in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    elif _THOUSANDS.match(cleaned):
        cleaned = cleaned.replace(".", "")
    return decimal_from_str(cleaned)


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("500000"), pt-BR text ("R$ 1.500,00") and
    shorthand with ``k``/``m`` suffixes (e.g., "500k" meaning 500_000).
    """
    value = value.strip().lower()
    factor = Decimal(1)
    if value.endswith("k"):
        factor = Decimal(1_000)
        value = value[:-1]
    elif value.endswith("m"):
        factor = Decimal(1_000_000)
        value = value[:-1]
    value = value.replace("r$", "")
    return decimal_from_locale(value) * factor


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string into a ``date`` object.

    Raises
    ------
    ValueError
        If the string is not a valid date.
    """
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (ValueError, AttributeError) as exc:
        raise ValueError(f"Invalid date (expected YYYY-MM-DD): {value}") from exc
