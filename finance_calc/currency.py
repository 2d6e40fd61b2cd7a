"""Currency conversion from a table of exchange rates.

Rates are quoted against a single base currency (BRL by default), in the
shape returned by the ``/v4/latest/<BASE>`` endpoint of exchangerate-api::

    {"base": "BRL", "date": "2024-05-01", "rates": {"USD": 0.19, "EUR": 0.18}}

Fetching the table is left to the caller; :func:`load_rate_table` reads a
saved copy from disk.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple

from .utils import decimal_from_str

logger = logging.getLogger(__name__)

BASE_CURRENCY = "BRL"


@dataclass(frozen=True)
class Currency:
    code: str
    name: str
    symbol: str


CURRENCIES: Dict[str, Currency] = {
    c.code: c
    for c in (
        Currency("BRL", "Brazilian real", "R$"),
        Currency("USD", "US dollar", "$"),
        Currency("EUR", "Euro", "€"),
        Currency("GBP", "Pound sterling", "£"),
        Currency("JPY", "Japanese yen", "¥"),
        Currency("CAD", "Canadian dollar", "C$"),
        Currency("AUD", "Australian dollar", "A$"),
        Currency("CHF", "Swiss franc", "CHF"),
        Currency("CNY", "Chinese yuan", "¥"),
        Currency("INR", "Indian rupee", "₹"),
    )
}


@dataclass(frozen=True)
class RateTable:
    """Exchange rates relative to ``base``: 1 unit of base buys ``rates[code]``."""

    rates: Mapping[str, Decimal]
    base: str = BASE_CURRENCY
    date: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "RateTable":
        raw = payload.get("rates")
        if not isinstance(raw, Mapping):
            raise ValueError("Rate payload has no 'rates' mapping")
        rates = {str(code).upper(): decimal_from_str(str(value)) for code, value in raw.items()}
        base = str(payload.get("base") or BASE_CURRENCY).upper()
        date = payload.get("date")
        return cls(rates=rates, base=base, date=str(date) if date else None)


@dataclass(frozen=True)
class Conversion:
    amount: Decimal
    source: str
    target: str
    rate: Decimal
    converted: Decimal


def load_rate_table(path: Path) -> RateTable:
    """Read a rate table saved from the rates API."""
    with path.open("r", encoding="utf-8") as f:
        payload = json.load(f)
    table = RateTable.from_payload(payload)
    logger.debug("Loaded %d rates (base %s) from %s", len(table.rates), table.base, path)
    return table


def exchange_rate(source: str, target: str, table: RateTable) -> Decimal:
    """Return how many units of ``target`` one unit of ``source`` buys.

    Conversions between two non-base currencies go through the base. A code
    missing from the table counts as 0 when it is the target of a conversion
    from the base, and as 1 otherwise.
    """
    rates = table.rates
    if source == target:
        return Decimal(1)
    if source == table.base:
        return rates.get(target, Decimal(0))
    if target == table.base:
        return 1 / (rates.get(source) or Decimal(1))
    source_rate = rates.get(source) or Decimal(1)
    target_rate = rates.get(target) or Decimal(1)
    return target_rate / source_rate


def convert(amount: Decimal, source: str, target: str, table: RateTable) -> Conversion:
    """Convert ``amount`` from ``source`` to ``target`` currency.

    Raises
    ------
    ValueError
        If the amount is not positive, the table is empty or a currency is
        not supported.
    """
    source = source.upper()
    target = target.upper()
    if amount <= 0:
        raise ValueError("Amount must be positive")
    if not table.rates:
        raise ValueError("No exchange rates available")
    for code in (source, target):
        if code not in CURRENCIES:
            raise ValueError(f"Unsupported currency: {code}")
    rate = exchange_rate(source, target, table)
    return Conversion(amount=amount, source=source, target=target, rate=rate, converted=amount * rate)


def swap(source: str, target: str) -> Tuple[str, str]:
    """Return the currency pair inverted."""
    return target, source
