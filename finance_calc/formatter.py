"""Output helpers for the calculators.

This module renders results in a tabular text format with Brazilian
(pt-BR) number formatting: ``.`` groups thousands and ``,`` separates the
two decimal places. Rounding happens here only; results keep their full
precision.
"""

from __future__ import annotations

import os
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Sequence, Tuple

from .currency import CURRENCIES, Conversion
from .data_models import AmortizationKind, AmortizationResult, Installment
from .discount import DiscountResult
from .interest import InterestResult
from .investment import InvestmentProjection
from .pregnancy import PregnancyEstimate, trimester_label

# Number of schedule rows shown before the remaining ones are summarised.
PREVIEW_ROWS = int(os.environ.get("FINANCE_CALC_PREVIEW_ROWS", "12"))

_CENT = Decimal("0.01")


def _group(value: Decimal, places: int) -> str:
    quantum = Decimal(1).scaleb(-places)
    rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    text = f"{rounded:,.{places}f}"
    # swap US separators for pt-BR ones
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_brl(value: Decimal) -> str:
    """Format ``value`` as Brazilian reais, e.g. ``R$ 1.234,56``."""
    value = Decimal(value)
    sign = "-" if value.quantize(_CENT, rounding=ROUND_HALF_UP) < 0 else ""
    return f"{sign}R$ {_group(abs(value), 2)}"


def format_number(value: Decimal, places: int = 2) -> str:
    return _group(Decimal(value), places)


def format_percent(value: Decimal, places: int = 2) -> str:
    """Format a percentage (``12`` means 12 %) as ``12,00%``."""
    return f"{_group(Decimal(value), places)}%"


def format_money(value: Decimal, code: str) -> str:
    currency = CURRENCIES.get(code)
    symbol = currency.symbol if currency else code
    return f"{symbol} {_group(Decimal(value), 2)}"


def schedule_preview(
    result: AmortizationResult, limit: int = PREVIEW_ROWS
) -> Tuple[Sequence[Installment], int]:
    """Return the first ``limit`` installments and how many were left out."""
    rows = result.schedule[:limit]
    return rows, len(result.schedule) - len(rows)


def print_loan_summary(result: AmortizationResult, kind: AmortizationKind) -> None:
    """Print a summary of loan metrics in a human‑readable format."""
    label = "First installment" if kind is AmortizationKind.SAC else "Installment"
    print("Summary")
    print("-" * 72)
    print(f"{label:<19}: {format_brl(result.payment)}")
    print(f"Total paid         : {format_brl(result.total_paid)}")
    print(f"Total interest     : {format_brl(result.total_interest)}")
    print(f"Principal          : {format_brl(result.principal)}")
    print(f"Installments       : {len(result.schedule)}")
    print("-" * 72)


def print_schedule(schedule: Iterable[Installment], remaining: int = 0) -> None:
    """Print the amortization schedule as a simple table.

    Parameters
    ----------
    schedule: Iterable[Installment]
        The installments to print.
    remaining: int
        Number of installments left out of ``schedule``; when positive a note
        is printed below the table.
    """
    headers = ["No.", "Installment", "Principal", "Interest", "Balance"]
    print("\t".join(headers))
    for entry in schedule:
        row = [
            str(entry.number),
            format_brl(entry.payment),
            format_brl(entry.principal_portion),
            format_brl(entry.interest_portion),
            format_brl(entry.remaining_balance),
        ]
        print("\t".join(row))
    if remaining > 0:
        print(f"... and {remaining} more installments")


def print_kind_comparison(results: Sequence[Tuple[AmortizationKind, AmortizationResult]]) -> None:
    """Print the same loan amortized under several systems side by side.

    The last column shows the difference in total interest against the first
    system listed; a negative difference means that system is cheaper.
    """
    print("Comparison")
    print("=" * 72)
    print(f"{'System':10s} {'Installment':>16s} {'Total paid':>16s} {'Interest':>16s} {'Difference':>16s}")
    if not results:
        print("=" * 72)
        return
    baseline = results[0][1].total_interest
    for kind, result in results:
        diff = result.total_interest - baseline
        print(
            f"{kind.value:10s} {format_brl(result.payment):>16s} "
            f"{format_brl(result.total_paid):>16s} {format_brl(result.total_interest):>16s} "
            f"{format_brl(diff):>16s}"
        )
    print("=" * 72)


def interest_lines(result: InterestResult, mode: str) -> List[str]:
    title = "Compound interest" if mode == "compound" else "Simple interest"
    return [
        f"{title}: {format_brl(result.interest)}",
        f"Amount: {format_brl(result.amount)}",
    ]


def investment_lines(projection: InvestmentProjection) -> List[str]:
    return [
        f"Final amount    : {format_brl(projection.final_amount)}",
        f"Total invested  : {format_brl(projection.total_invested)}",
        f"Profit          : {format_brl(projection.profit)}",
        f"Monthly rate    : {format_percent(projection.monthly_rate * 100, places=4)}",
        f"Annual rate     : {format_percent(projection.annual_rate)}",
        f"Months          : {projection.months}",
    ]


def discount_lines(result: DiscountResult) -> List[str]:
    return [
        f"Original value  : {format_brl(result.original_value)}",
        f"Discount        : {format_percent(result.percent)} ({format_brl(result.discount)})",
        f"Final value     : {format_brl(result.final_value)}",
        f"You save        : {format_brl(result.savings)}",
    ]


def conversion_lines(conversion: Conversion) -> List[str]:
    return [
        f"{format_money(conversion.amount, conversion.source)} = "
        f"{format_money(conversion.converted, conversion.target)}",
        f"1 {conversion.source} = {format_number(conversion.rate, 4)} {conversion.target}",
    ]


def pregnancy_lines(estimate: PregnancyEstimate) -> List[str]:
    return [
        f"Last period     : {estimate.last_menstrual_period:%d/%m/%Y}",
        f"Due date        : {estimate.due_date:%d/%m/%Y}",
        f"Gestational age : {estimate.gestational_weeks} weeks",
        f"Trimester       : {trimester_label(estimate.trimester)}",
        f"Weeks remaining : {estimate.weeks_remaining}",
        f"Days remaining  : {estimate.days_remaining}",
    ]
