"""Shared fixtures for the calculator tests.

Loans used across engine, CLI and web tests:
  price_loan: R$ 10.000 at 12% a.a., 1 year, monthly (installment ~888,49)
  sac_loan:   R$ 12.000 at 12% a.a., 1 year, monthly (1120 down to 1010)
  flat_loan:  R$ 1.000 at 10% a.a., 1 year, monthly (installment ~91,67)
"""

import pytest
from decimal import Decimal

from finance_calc.currency import RateTable
from finance_calc.data_models import AmortizationKind, Loan, PaymentFrequency


@pytest.fixture
def price_loan() -> Loan:
    return Loan(
        principal=Decimal("10000"),
        annual_rate=Decimal("12"),
        term_years=Decimal("1"),
        amortization_kind=AmortizationKind.PRICE,
        payment_frequency=PaymentFrequency.MONTHLY,
    )


@pytest.fixture
def sac_loan() -> Loan:
    return Loan(
        principal=Decimal("12000"),
        annual_rate=Decimal("12"),
        term_years=Decimal("1"),
        amortization_kind=AmortizationKind.SAC,
        payment_frequency=PaymentFrequency.MONTHLY,
    )


@pytest.fixture
def flat_loan() -> Loan:
    return Loan(
        principal=Decimal("1000"),
        annual_rate=Decimal("10"),
        term_years=Decimal("1"),
        amortization_kind=AmortizationKind.FLAT,
        payment_frequency=PaymentFrequency.MONTHLY,
    )


@pytest.fixture
def rate_table() -> RateTable:
    """Rates against BRL: 1 BRL buys 0.20 USD or 0.18 EUR."""
    return RateTable(
        rates={"BRL": Decimal("1"), "USD": Decimal("0.20"), "EUR": Decimal("0.18")},
        base="BRL",
        date="2024-05-01",
    )
