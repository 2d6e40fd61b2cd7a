"""Data models for the loan calculator.

This module defines dataclasses representing the entities used by the
amortization engine: the loan being financed, the individual installments of
its schedule and the aggregate result. All of them are frozen so a computed
result can be handed to the presentation layer without being altered.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Tuple


class AmortizationKind(str, Enum):
    """How principal is repaid over the term."""

    PRICE = "price"  # French system, fixed installment
    SAC = "sac"  # constant amortization, declining installment
    FLAT = "flat"  # simple interest on the original principal


class PaymentFrequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMIANNUAL = "semiannual"
    ANNUAL = "annual"

    @property
    def periods_per_year(self) -> int:
        return _PERIODS_PER_YEAR[self]


_PERIODS_PER_YEAR = {
    PaymentFrequency.MONTHLY: 12,
    PaymentFrequency.QUARTERLY: 4,
    PaymentFrequency.SEMIANNUAL: 2,
    PaymentFrequency.ANNUAL: 1,
}


@dataclass(frozen=True)
class Loan:
    """Inputs of a loan calculation.

    Attributes
    ----------
    principal: Decimal
        The amount borrowed.
    annual_rate: Decimal
        Annual nominal interest rate in percent (``Decimal("12")`` is 12 %).
    term_years: Decimal
        Term in years. Fractional terms are accepted.
    amortization_kind: AmortizationKind
        Repayment system used to build the schedule.
    payment_frequency: PaymentFrequency
        How often installments are due.
    """

    principal: Decimal
    annual_rate: Decimal
    term_years: Decimal
    amortization_kind: AmortizationKind = AmortizationKind.PRICE
    payment_frequency: PaymentFrequency = PaymentFrequency.MONTHLY

    @property
    def periods(self) -> Decimal:
        """Total number of payment periods, not rounded."""
        return self.term_years * self.payment_frequency.periods_per_year


@dataclass(frozen=True)
class Installment:
    """One row of the amortization schedule."""

    number: int
    payment: Decimal
    principal_portion: Decimal
    interest_portion: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True)
class AmortizationResult:
    """Schedule and totals produced for a loan.

    ``payment`` is the fixed installment for Price and Flat loans and the
    first (largest) installment for SAC loans.
    """

    payment: Decimal
    total_paid: Decimal
    total_interest: Decimal
    principal: Decimal
    schedule: Tuple[Installment, ...]
