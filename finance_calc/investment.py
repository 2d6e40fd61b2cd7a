"""Projection of an investment with an initial deposit and monthly deposits.

Returns are compounded monthly at the rate equivalent to the annual yield,
``(1 + annual) ** (1/12) - 1``. Monthly deposits are made at the end of each
month (ordinary annuity).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

ZERO = Decimal("0")
ONE = Decimal("1")


@dataclass(frozen=True)
class InvestmentProjection:
    initial_deposit: Decimal
    monthly_deposit: Decimal
    months: Decimal
    annual_rate: Decimal
    monthly_rate: Decimal  # fraction, not percent
    final_amount: Decimal
    total_invested: Decimal
    profit: Decimal


def monthly_rate_from_annual(annual_rate: Decimal) -> Decimal:
    """Return the monthly rate (as a fraction) equivalent to ``annual_rate`` percent."""
    return (ONE + annual_rate / Decimal(100)) ** (ONE / Decimal(12)) - ONE


def project_investment(
    initial_deposit: Decimal,
    monthly_deposit: Decimal,
    months: Decimal,
    annual_rate: Decimal,
) -> InvestmentProjection:
    """Project the balance of an investment after ``months`` months.

    Raises
    ------
    ValueError
        If ``months`` or ``annual_rate`` is not positive, or a deposit is
        negative.
    """
    if months <= ZERO or annual_rate <= ZERO:
        raise ValueError("Please fill in the period and the annual yield correctly")
    if initial_deposit < ZERO or monthly_deposit < ZERO:
        raise ValueError("Deposits must not be negative")

    rate = monthly_rate_from_annual(annual_rate)
    growth = (ONE + rate) ** months
    final_amount = initial_deposit * growth
    if monthly_deposit > ZERO:
        final_amount += monthly_deposit * ((growth - ONE) / rate)

    total_invested = initial_deposit + monthly_deposit * months
    return InvestmentProjection(
        initial_deposit=initial_deposit,
        monthly_deposit=monthly_deposit,
        months=months,
        annual_rate=annual_rate,
        monthly_rate=rate,
        final_amount=final_amount,
        total_invested=total_invested,
        profit=final_amount - total_invested,
    )
