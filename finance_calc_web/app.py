import json
import os
from collections.abc import Mapping
from decimal import Decimal
from pathlib import Path

from flask import Flask, jsonify, render_template, request

from finance_calc.currency import CURRENCIES, RateTable, convert, load_rate_table, swap
from finance_calc.data_models import AmortizationKind, Loan, PaymentFrequency
from finance_calc.discount import apply_discount
from finance_calc.engine import calculate_loan
from finance_calc.formatter import (
    PREVIEW_ROWS,
    format_brl,
    format_money,
    format_number,
    format_percent,
    schedule_preview,
)
from finance_calc.interest import compound_interest, simple_interest
from finance_calc.investment import project_investment
from finance_calc.main import serialize_result
from finance_calc.pregnancy import estimate_pregnancy, trimester_label
from finance_calc.utils import decimal_from_locale, decimal_from_str, parse_amount, parse_date

app = Flask(__name__)
app.config["ASSET_VERSION"] = os.environ.get("ASSET_VERSION", "1")
app.config["RATES_FILE"] = os.environ.get("FINANCE_CALC_RATES_FILE")
app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")

app.jinja_env.filters["brl"] = format_brl
app.jinja_env.filters["percent"] = format_percent

KIND_LABELS = {
    AmortizationKind.PRICE: "Price table (fixed installments)",
    AmortizationKind.SAC: "SAC (constant amortization)",
    AmortizationKind.FLAT: "Fixed installments (simple interest)",
}

FREQUENCY_LABELS = {
    PaymentFrequency.MONTHLY: "Monthly",
    PaymentFrequency.QUARTERLY: "Quarterly",
    PaymentFrequency.SEMIANNUAL: "Semiannual",
    PaymentFrequency.ANNUAL: "Annual",
}


def _field(form, name: str, default: str = "") -> str:
    value = form.get(name, default)
    return str(value).strip() if value is not None else default


def _as_number(value):
    # JSON numbers are already numeric; skip pt-BR text parsing for them.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return decimal_from_str(str(value))
    return None


def _json_number(form, name: str):
    return _as_number(form.get(name))


def _rate_value(value) -> Decimal:
    number = _as_number(value)
    return number if number is not None else decimal_from_locale(str(value))


def _decimal(form, name: str) -> Decimal:
    number = _json_number(form, name)
    if number is not None:
        return number
    raw = _field(form, name)
    return decimal_from_locale(raw) if raw else Decimal("0")


def _amount(form, name: str) -> Decimal:
    number = _json_number(form, name)
    if number is not None:
        return number
    raw = _field(form, name)
    return parse_amount(raw) if raw else Decimal("0")


def _form_to_loan(form) -> Loan:
    """Build a loan from form fields; empty fields count as zero."""
    return Loan(
        principal=_amount(form, "principal"),
        annual_rate=_decimal(form, "rate"),
        term_years=_decimal(form, "term"),
        amortization_kind=AmortizationKind(_field(form, "loan_type", "price").lower()),
        payment_frequency=PaymentFrequency(_field(form, "frequency", "monthly").lower()),
    )


def _run_loan(form):
    loan = _form_to_loan(form)
    return loan, calculate_loan(loan)


def _rate_table(form) -> RateTable:
    rates_file = app.config.get("RATES_FILE")
    table = RateTable(rates={})
    if rates_file:
        try:
            table = load_rate_table(Path(rates_file))
        except OSError as exc:
            app.logger.warning("Rates file %s unreadable: %s", rates_file, exc)
            raise ValueError(f"Rates file unavailable: {rates_file}") from exc
    overrides = form.get("rates") or {}
    if isinstance(overrides, str):
        overrides = json.loads(overrides)
    if not isinstance(overrides, Mapping):
        raise ValueError("Rates must map currency codes to values")
    if overrides:
        rates = dict(table.rates)
        rates.update({str(code).upper(): _rate_value(v) for code, v in overrides.items()})
        table = RateTable(rates=rates, base=table.base, date=table.date)
    return table


def _interest(form):
    compute = compound_interest if _field(form, "mode", "simple") == "compound" else simple_interest
    result = compute(_amount(form, "capital"), _decimal(form, "rate"), _decimal(form, "periods"))
    return {"interest": float(result.interest), "amount": float(result.amount)}


def _investment(form):
    p = project_investment(
        _amount(form, "initial"),
        _amount(form, "monthly"),
        _decimal(form, "months"),
        _decimal(form, "rate"),
    )
    return {
        "final_amount": float(p.final_amount),
        "total_invested": float(p.total_invested),
        "profit": float(p.profit),
        "monthly_rate": format_number(p.monthly_rate * 100, 4),
    }


def _discount(form):
    d = apply_discount(_amount(form, "value"), _decimal(form, "percent"))
    return {
        "discount": float(d.discount),
        "final_value": float(d.final_value),
        "savings": float(d.savings),
    }


def _convert(form):
    source, target = _field(form, "from", "BRL"), _field(form, "to", "USD")
    if form.get("swap") in (True, "1", "true", "on"):
        source, target = swap(source, target)
    c = convert(_amount(form, "amount"), source, target, _rate_table(form))
    return {
        "rate": float(c.rate),
        "converted": float(c.converted),
        "display": f"{format_money(c.amount, c.source)} = {format_money(c.converted, c.target)}",
    }


def _pregnancy(form):
    today = _field(form, "today")
    e = estimate_pregnancy(parse_date(_field(form, "lmp")), parse_date(today) if today else None)
    return {
        "due_date": e.due_date.isoformat(),
        "gestational_weeks": e.gestational_weeks,
        "trimester": e.trimester,
        "trimester_label": trimester_label(e.trimester),
        "weeks_remaining": e.weeks_remaining,
        "days_remaining": e.days_remaining,
    }


CALCULATORS = {
    "interest": _interest,
    "investment": _investment,
    "discount": _discount,
    "convert": _convert,
    "pregnancy": _pregnancy,
}


@app.route("/", methods=["GET", "POST"])
def index():
    result = None
    rows = []
    remaining = 0
    form = {}
    loan = None

    if request.method == "POST":
        form = request.form
        action = form.get("action", "run")
        if action == "clear":
            form = {}
        else:
            try:
                loan, result = _run_loan(form)
            except ValueError as exc:
                app.logger.info("Rejected loan form: %s", exc)
                result = None
            if result is not None:
                rows, remaining = schedule_preview(result, PREVIEW_ROWS)

    return render_template(
        "index.html",
        form=form,
        loan=loan,
        result=result,
        rows=rows,
        remaining=remaining,
        kind_labels=KIND_LABELS,
        frequency_labels=FREQUENCY_LABELS,
        asset_version=app.config["ASSET_VERSION"],
    )


@app.post("/api/loan")
def api_loan():
    payload = request.get_json(silent=True) or request.form
    try:
        _, result = _run_loan(payload)
    except ValueError as exc:
        app.logger.info("Rejected loan request: %s", exc)
        return jsonify({"result": None, "error": str(exc)}), 422
    if result is None:
        return jsonify({"result": None}), 422
    return jsonify({"result": serialize_result(result)})


@app.post("/api/<calculator>")
def api_calculator(calculator: str):
    compute = CALCULATORS.get(calculator)
    if compute is None:
        return jsonify({"error": f"Unknown calculator: {calculator}"}), 404
    payload = request.get_json(silent=True) or request.form
    try:
        result = compute(payload)
    except ValueError as exc:
        app.logger.info("Rejected %s request: %s", calculator, exc)
        return jsonify({"result": None, "error": str(exc)}), 422
    return jsonify({"result": result})


@app.get("/api/currencies")
def api_currencies():
    return jsonify(
        [{"code": c.code, "name": c.name, "symbol": c.symbol} for c in CURRENCIES.values()]
    )


if __name__ == "__main__":
    print("Starting finance calculators web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)
