"""Core calculation engine for the loan calculator.

This module builds amortization schedules for three repayment systems:

* **Price** (French system): equal installments, declining interest share.
* **SAC** (constant amortization): equal principal share, declining
  installments.
* **Flat**: equal installments whose interest is charged on the original
  principal every period (simple interest).

Each system is a strategy implementing :class:`AmortizationStrategy`; the
strategy for a loan is looked up from ``STRATEGIES`` by its
:class:`~finance_calc.data_models.AmortizationKind`. Every strategy folds a
per-period step over the periods of the loan and returns an immutable
:class:`~finance_calc.data_models.AmortizationResult`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from decimal import Decimal, Overflow, getcontext
from typing import Callable, Dict, List, Optional, Tuple

from .data_models import (
    AmortizationKind,
    AmortizationResult,
    Installment,
    Loan,
    PaymentFrequency,
)

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")

Step = Callable[[int, Decimal], Installment]


def periodic_rate(annual_rate: Decimal, frequency: PaymentFrequency) -> Decimal:
    """Return the interest rate for one payment period as a fraction.

    Monthly loans pro-rate the annual rate (``annual / 12``) while every other
    frequency uses the compounding-equivalent rate
    ``(1 + annual) ** (1 / periods_per_year) - 1``. The two rules are not
    consistent with each other; both are kept because existing schedules were
    produced with them.
    """
    if frequency is PaymentFrequency.MONTHLY:
        return annual_rate / HUNDRED / Decimal(12)
    exponent = ONE / Decimal(frequency.periods_per_year)
    return (ONE + annual_rate / HUNDRED) ** exponent - ONE


def _clamp(balance: Decimal) -> Decimal:
    # Rounding drift may push the last balances slightly below zero.
    return balance if balance > ZERO else ZERO


def _fold_schedule(count: int, principal: Decimal, step: Step) -> Tuple[Installment, ...]:
    """Apply ``step`` to periods ``1..count``, threading the remaining balance."""
    installments: List[Installment] = []
    balance = principal
    for number in range(1, count + 1):
        installment = step(number, balance)
        installments.append(installment)
        balance = installment.remaining_balance
    return tuple(installments)


def _sum_interest(schedule: Tuple[Installment, ...]) -> Decimal:
    return sum((i.interest_portion for i in schedule), ZERO)


class AmortizationStrategy(ABC):
    """A repayment system able to build a full schedule."""

    kind: AmortizationKind

    @abstractmethod
    def build(self, principal: Decimal, rate: Decimal, periods: Decimal) -> AmortizationResult:
        """Build the schedule for ``principal`` at ``rate`` per period.

        ``periods`` may be fractional; the closed-form formulas use it as
        given while the schedule holds one row per whole period.
        """


class PriceStrategy(AmortizationStrategy):
    kind = AmortizationKind.PRICE

    @staticmethod
    def installment_amount(principal: Decimal, rate: Decimal, periods: Decimal) -> Decimal:
        """Return the fixed installment of a Price loan.

        The formula is:

            payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

        Raises ``ValueError`` when ``(1 + i)^n`` is indistinguishable from 1
        at the working precision or too large to represent.
        """
        try:
            factor = (ONE + rate) ** periods
        except Overflow as exc:
            raise ValueError("Rate and term are too large to amortize") from exc
        if factor == ONE:
            raise ValueError("Rate is too small to amortize at this precision")
        return principal * (rate * factor) / (factor - ONE)

    def build(self, principal: Decimal, rate: Decimal, periods: Decimal) -> AmortizationResult:
        payment = self.installment_amount(principal, rate, periods)

        def step(number: int, balance: Decimal) -> Installment:
            interest = balance * rate
            amortized = payment - interest
            return Installment(
                number=number,
                payment=payment,
                principal_portion=amortized,
                interest_portion=interest,
                remaining_balance=_clamp(balance - amortized),
            )

        schedule = _fold_schedule(int(periods), principal, step)
        return AmortizationResult(
            payment=payment,
            total_paid=payment * periods,
            total_interest=_sum_interest(schedule),
            principal=principal,
            schedule=schedule,
        )


class SacStrategy(AmortizationStrategy):
    kind = AmortizationKind.SAC

    def build(self, principal: Decimal, rate: Decimal, periods: Decimal) -> AmortizationResult:
        amortized = principal / periods

        def step(number: int, balance: Decimal) -> Installment:
            interest = balance * rate
            return Installment(
                number=number,
                payment=amortized + interest,
                principal_portion=amortized,
                interest_portion=interest,
                remaining_balance=_clamp(balance - amortized),
            )

        schedule = _fold_schedule(int(periods), principal, step)
        return AmortizationResult(
            # the first installment is the largest one
            payment=schedule[0].payment,
            total_paid=sum((i.payment for i in schedule), ZERO),
            total_interest=_sum_interest(schedule),
            principal=principal,
            schedule=schedule,
        )


class FlatStrategy(AmortizationStrategy):
    """Simple interest charged on the original principal every period.

    The remaining balance is reported for display only and never feeds back
    into the interest charged.
    """

    kind = AmortizationKind.FLAT

    def build(self, principal: Decimal, rate: Decimal, periods: Decimal) -> AmortizationResult:
        amortized = principal / periods
        interest = principal * rate
        payment = amortized + interest

        def step(number: int, balance: Decimal) -> Installment:
            return Installment(
                number=number,
                payment=payment,
                principal_portion=amortized,
                interest_portion=interest,
                remaining_balance=_clamp(balance - amortized),
            )

        schedule = _fold_schedule(int(periods), principal, step)
        return AmortizationResult(
            payment=payment,
            total_paid=payment * periods,
            total_interest=_sum_interest(schedule),
            principal=principal,
            schedule=schedule,
        )


STRATEGIES: Dict[AmortizationKind, AmortizationStrategy] = {
    strategy.kind: strategy for strategy in (PriceStrategy(), SacStrategy(), FlatStrategy())
}


def loan_is_computable(loan: Loan) -> bool:
    """Return True when ``loan`` satisfies the engine's preconditions."""
    return (
        loan.principal > ZERO
        and loan.annual_rate > ZERO
        and loan.term_years > ZERO
        and loan.periods >= ONE
    )


def compute_schedule(loan: Loan) -> AmortizationResult:
    """Compute the amortization schedule and totals for a loan.

    Parameters
    ----------
    loan: Loan
        The loan to amortize. Principal, rate and term must be positive and
        the term must cover at least one payment period.

    Returns
    -------
    AmortizationResult
        The fixed (or first) installment, totals and one installment per
        whole payment period, numbered from 1.

    Raises
    ------
    ValueError
        If the loan violates the preconditions above. A zero rate is rejected
        here rather than producing a division by zero in the Price formula.
    """
    if loan.principal <= ZERO:
        raise ValueError("Principal must be positive")
    if loan.annual_rate <= ZERO:
        raise ValueError("Annual rate must be positive")
    if loan.term_years <= ZERO:
        raise ValueError("Term must be positive")
    periods = loan.periods
    if periods < ONE:
        raise ValueError("Term must cover at least one payment period")

    rate = periodic_rate(loan.annual_rate, loan.payment_frequency)
    strategy = STRATEGIES[loan.amortization_kind]
    logger.debug(
        "Amortizing %s over %s %s periods at %s per period (%s)",
        loan.principal,
        periods,
        loan.payment_frequency.value,
        rate,
        strategy.kind.value,
    )
    return strategy.build(loan.principal, rate, periods)


def calculate_loan(loan: Loan) -> Optional[AmortizationResult]:
    """Return the result for ``loan`` or None when it cannot be computed.

    Invalid input is not an error for the user: the engine is simply not
    invoked and no result is shown. Inputs the engine rejects while
    computing (a rate too small for the working precision) give no result
    as well.
    """
    if not loan_is_computable(loan):
        logger.info("Loan inputs are not computable; no result: %s", loan)
        return None
    try:
        return compute_schedule(loan)
    except ValueError as exc:
        logger.info("Loan not amortized; no result: %s", exc)
        return None
