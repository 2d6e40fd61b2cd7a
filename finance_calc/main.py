"""Command‑line interface for the calculators.

This module uses the ``click`` library to implement a multi‑command
interface. Users can compute loan amortization schedules (Price, SAC or flat
installments), compare the three systems for the same loan, and run the
interest, investment, discount, currency and pregnancy calculators. Loan
schedules can be printed to the terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
import os
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click

from .currency import BASE_CURRENCY, CURRENCIES, RateTable, convert, load_rate_table, swap
from .data_models import AmortizationKind, AmortizationResult, Loan, PaymentFrequency
from .discount import apply_discount
from .engine import calculate_loan
from .formatter import (
    PREVIEW_ROWS,
    conversion_lines,
    discount_lines,
    interest_lines,
    investment_lines,
    pregnancy_lines,
    print_kind_comparison,
    print_loan_summary,
    print_schedule,
    schedule_preview,
)
from .interest import compound_interest, simple_interest
from .investment import project_investment
from .pregnancy import estimate_pregnancy
from .utils import decimal_from_locale, decimal_from_str, parse_amount, parse_date

logger = logging.getLogger(__name__)

NO_RESULT = "No result: check that every value is filled in and positive."


def _amount(value: str, name: str) -> Decimal:
    try:
        return parse_amount(value)
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}", param_hint=name)


def _percent(value: str, name: str) -> Decimal:
    """Parse a percentage string (e.g. "12", "12%" or "12,5%")."""
    try:
        return decimal_from_locale(value)
    except ValueError:
        raise click.BadParameter(f"Invalid percentage: {value}", param_hint=name)


def _number(value: str, name: str) -> Decimal:
    try:
        return decimal_from_str(value)
    except ValueError:
        raise click.BadParameter(f"Invalid number: {value}", param_hint=name)


def build_loan_from_options(
    principal: str,
    rate: str,
    term: str,
    loan_type: str,
    frequency: str,
) -> Loan:
    return Loan(
        principal=_amount(principal, "--principal"),
        annual_rate=_percent(rate, "--rate"),
        term_years=_number(term, "--term"),
        amortization_kind=AmortizationKind(loan_type.lower()),
        payment_frequency=PaymentFrequency(frequency.lower()),
    )


def serialize_result(result: AmortizationResult) -> Dict[str, Any]:
    """Convert a result into a JSON-serialisable dictionary."""
    return {
        "summary": {
            "payment": float(result.payment),
            "total_paid": float(result.total_paid),
            "total_interest": float(result.total_interest),
            "principal": float(result.principal),
            "installments": len(result.schedule),
        },
        "schedule": [
            {
                "number": i.number,
                "payment": float(i.payment),
                "principal": float(i.principal_portion),
                "interest": float(i.interest_portion),
                "balance": float(i.remaining_balance),
            }
            for i in result.schedule
        ],
    }


def export_to_json(path: Path, result: AmortizationResult) -> None:
    """Export schedule and summary to a JSON file."""
    with path.open("w", encoding="utf-8") as f:
        json.dump(serialize_result(result), f, indent=2)


def export_to_csv(path: Path, result: AmortizationResult) -> None:
    """Export schedule to a CSV file."""
    header = ["Number", "Payment", "Principal", "Interest", "Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for e in result.schedule:
            writer.writerow(
                [
                    e.number,
                    float(e.payment),
                    float(e.principal_portion),
                    float(e.interest_portion),
                    float(e.remaining_balance),
                ]
            )


def _echo_lines(lines: List[str]) -> None:
    for line in lines:
        click.echo(line)


def _build_rate_table(rates_file: Optional[str], rate: Tuple[str, ...]) -> RateTable:
    base = BASE_CURRENCY
    rates: Dict[str, Decimal] = {}
    date = None
    if rates_file:
        try:
            table = load_rate_table(Path(rates_file))
        except (OSError, ValueError) as exc:
            raise click.BadParameter(str(exc), param_hint="--rates-file")
        base, date = table.base, table.date
        rates.update(table.rates)
    for item in rate:
        code, sep, value = item.partition("=")
        if not sep:
            raise click.BadParameter(f"Rate must be in CODE=VALUE format; got {item}", param_hint="--rate")
        rates[code.strip().upper()] = _number(value, "--rate")
    return RateTable(rates=rates, base=base, date=date)


_LOAN_OPTIONS = [
    click.option("--principal", "-p", "principal", required=True, help="Loan amount (e.g. 10000, 10k, 'R$ 10.000,00')"),
    click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)"),
    click.option("--term", "-t", "term", required=True, help="Loan term in years"),
    click.option(
        "--frequency",
        "-f",
        "frequency",
        type=click.Choice([f.value for f in PaymentFrequency]),
        default=PaymentFrequency.MONTHLY.value,
        help="Payment frequency",
    ),
]


def loan_options(func):
    for option in reversed(_LOAN_OPTIONS):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log calculation details")
def cli(verbose: bool) -> None:
    """Financial calculators: loans, interest, investments, discounts and more."""
    level = "DEBUG" if verbose else os.environ.get("FINANCE_CALC_LOG_LEVEL", "WARNING")
    logging.basicConfig(level=level.upper(), format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@loan_options
@click.option(
    "--type",
    "loan_type",
    type=click.Choice([k.value for k in AmortizationKind]),
    default=AmortizationKind.PRICE.value,
    help="Amortization system",
)
@click.option("--full", is_flag=True, help="Print every installment instead of a preview")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def loan(
    principal: str,
    rate: str,
    term: str,
    frequency: str,
    loan_type: str,
    full: bool,
    output: Optional[str],
) -> None:
    """Compute and print the amortization schedule of a loan."""
    config = build_loan_from_options(principal, rate, term, loan_type, frequency)
    result = calculate_loan(config)
    if result is None:
        click.echo(NO_RESULT)
        return
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, result)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv", param_hint="--output")
        click.echo(f"Schedule exported to {path}")
        return
    print_loan_summary(result, config.amortization_kind)
    if full:
        print_schedule(result.schedule)
    else:
        rows, remaining = schedule_preview(result, PREVIEW_ROWS)
        print_schedule(rows, remaining)


@cli.command()
@loan_options
def compare(principal: str, rate: str, term: str, frequency: str) -> None:
    """Compare the same loan under the Price, SAC and flat systems."""
    results = []
    for kind in AmortizationKind:
        result = calculate_loan(build_loan_from_options(principal, rate, term, kind.value, frequency))
        if result is None:
            click.echo(NO_RESULT)
            return
        results.append((kind, result))
    print_kind_comparison(results)


@cli.command()
@click.option("--capital", "-c", required=True, help="Initial capital")
@click.option("--rate", "-r", required=True, help="Interest rate per period (percent)")
@click.option("--periods", "-n", required=True, help="Number of periods")
@click.option("--mode", type=click.Choice(["simple", "compound"]), default="simple", help="Interest regime")
def interest(capital: str, rate: str, periods: str, mode: str) -> None:
    """Compute simple or compound interest."""
    compute = compound_interest if mode == "compound" else simple_interest
    try:
        result = compute(_amount(capital, "--capital"), _percent(rate, "--rate"), _number(periods, "--periods"))
    except ValueError as exc:
        logger.info("Interest not computed: %s", exc)
        click.echo(NO_RESULT)
        return
    _echo_lines(interest_lines(result, mode))


@cli.command()
@click.option("--initial", default="0", help="Initial deposit")
@click.option("--monthly", default="0", help="Monthly deposit")
@click.option("--months", required=True, help="Investment period in months")
@click.option("--rate", "-r", required=True, help="Annual yield (percent)")
def investment(initial: str, monthly: str, months: str, rate: str) -> None:
    """Project an investment with compound returns and monthly deposits."""
    try:
        projection = project_investment(
            _amount(initial, "--initial"),
            _amount(monthly, "--monthly"),
            _number(months, "--months"),
            _percent(rate, "--rate"),
        )
    except ValueError as exc:
        logger.info("Investment not projected: %s", exc)
        click.echo(str(exc))
        return
    _echo_lines(investment_lines(projection))


@cli.command()
@click.option("--value", required=True, help="Original price")
@click.option("--percent", required=True, help="Discount (percent)")
def discount(value: str, percent: str) -> None:
    """Apply a percentage discount to a price."""
    try:
        result = apply_discount(_amount(value, "--value"), _percent(percent, "--percent"))
    except ValueError as exc:
        logger.info("Discount not applied: %s", exc)
        click.echo(NO_RESULT)
        return
    _echo_lines(discount_lines(result))


@cli.command(name="convert")
@click.option("--amount", "-a", required=True, help="Amount to convert")
@click.option("--from", "source", type=click.Choice(list(CURRENCIES)), default="BRL", help="Source currency")
@click.option("--to", "target", type=click.Choice(list(CURRENCIES)), default="USD", help="Target currency")
@click.option(
    "--rates-file",
    default=lambda: os.environ.get("FINANCE_CALC_RATES_FILE"),
    help="JSON file saved from the rates API ({'base': 'BRL', 'rates': {...}})",
)
@click.option("--rate", "rate", multiple=True, help="Exchange rate against BRL in CODE=VALUE format")
@click.option("--swap", "swap_pair", is_flag=True, help="Invert the currency pair (convert TO into FROM)")
def convert_command(
    amount: str,
    source: str,
    target: str,
    rates_file: Optional[str],
    rate: Tuple[str, ...],
    swap_pair: bool,
) -> None:
    """Convert an amount between currencies."""
    if swap_pair:
        source, target = swap(source, target)
    table = _build_rate_table(rates_file, rate)
    try:
        conversion = convert(_amount(amount, "--amount"), source, target, table)
    except ValueError as exc:
        logger.info("Conversion not computed: %s", exc)
        click.echo(NO_RESULT)
        return
    _echo_lines(conversion_lines(conversion))
    if table.date:
        click.echo(f"Rates as of {table.date}")


@cli.command()
@click.option("--lmp", required=True, help="First day of the last menstrual period (YYYY-MM-DD)")
@click.option("--today", "today", help="Reference date (YYYY-MM-DD); defaults to today")
def pregnancy(lmp: str, today: Optional[str]) -> None:
    """Estimate due date and gestational age."""
    try:
        lmp_date = parse_date(lmp)
        today_date = parse_date(today) if today else None
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    try:
        estimate = estimate_pregnancy(lmp_date, today_date)
    except ValueError as exc:
        logger.info("Pregnancy not estimated: %s", exc)
        click.echo(NO_RESULT)
        return
    _echo_lines(pregnancy_lines(estimate))


if __name__ == "__main__":
    cli()
