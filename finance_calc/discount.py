"""Percentage discount on a price."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class DiscountResult:
    original_value: Decimal
    percent: Decimal
    discount: Decimal
    final_value: Decimal

    @property
    def savings(self) -> Decimal:
        return self.discount


def apply_discount(original_value: Decimal, percent: Decimal) -> DiscountResult:
    """Take ``percent`` percent off ``original_value``.

    The discount must be strictly between 0 and 100 percent and the value
    positive, otherwise ``ValueError`` is raised.
    """
    if original_value <= 0:
        raise ValueError("Original value must be positive")
    if not 0 < percent < 100:
        raise ValueError("Discount must be between 0 and 100 percent")
    discount = original_value * (percent / Decimal(100))
    return DiscountResult(
        original_value=original_value,
        percent=percent,
        discount=discount,
        final_value=original_value - discount,
    )
