"""Simple and compound interest over a number of periods."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class InterestResult:
    capital: Decimal
    interest: Decimal
    amount: Decimal  # capital plus interest


def _check(capital: Decimal, rate: Decimal, periods: Decimal) -> None:
    if capital < 0 or rate < 0 or periods < 0:
        raise ValueError("Capital, rate and periods must not be negative")


def simple_interest(capital: Decimal, rate: Decimal, periods: Decimal) -> InterestResult:
    """Interest of ``rate`` percent per period, charged on the capital only."""
    _check(capital, rate, periods)
    interest = capital * (rate / HUNDRED) * periods
    return InterestResult(capital=capital, interest=interest, amount=capital + interest)


def compound_interest(capital: Decimal, rate: Decimal, periods: Decimal) -> InterestResult:
    """Interest of ``rate`` percent per period, capitalized every period."""
    _check(capital, rate, periods)
    amount = capital * (1 + rate / HUNDRED) ** periods
    return InterestResult(capital=capital, interest=amount - capital, amount=amount)
