"""
Tests for annuity loans and amortization schedules.
"""

from decimal import Decimal

import pandas as pd

from gzplan.core.models.loan import Loan, payment, schedule, total_debt_service
from gzplan.core.money import CurrencyAmount


class TestPayment:
    """Annuity payment calculation."""

    def test_reference_annuity(self):
        result = payment(20000, 5, 60)
        assert result.monthly_payment == Decimal("377.42")
        assert result.total_payments == result.total_interest + 20000

    def test_total_interest_is_positive(self):
        result = payment(20000, 5, 60)
        assert Decimal("2600") < result.total_interest.value < Decimal("2700")

    def test_zero_rate_is_straight_line(self):
        result = payment(1200, 0, 12)
        assert result.monthly_payment == Decimal("100.00")
        assert result.total_interest == Decimal("0")

    def test_zero_term_yields_zero(self):
        result = payment(20000, 5, 0)
        assert result.monthly_payment == Decimal("0")
        assert result.total_payments == Decimal("0")

    def test_string_rate(self):
        assert payment(20000, "5", 60).monthly_payment == Decimal("377.42")


class TestSchedule:

    def test_principal_portions_add_up_to_principal(self):
        rows = schedule(20000, 5, 60)
        assert len(rows) == 60
        assert CurrencyAmount.sum(row.principal for row in rows) == Decimal("20000.00")
        assert rows[-1].balance == Decimal("0")

    def test_first_month_split(self):
        first = schedule(20000, 5, 60)[0]
        assert first.interest == Decimal("83.33")
        assert first.principal == Decimal("294.09")
        assert first.balance == Decimal("19705.91")

    def test_balance_never_negative(self):
        rows = schedule(1000, 12, 7)
        assert all(not row.balance.is_negative() for row in rows)
        assert rows[-1].balance == Decimal("0")

    def test_truncated_schedule(self):
        rows = schedule(20000, 5, 60, months_to_compute=12)
        assert len(rows) == 12
        assert rows[-1].month == 12
        assert rows[-1].balance > 0

    def test_zero_term_empty(self):
        assert schedule(20000, 5, 0) == []


class TestLoan:

    def test_debt_service_stops_after_term(self):
        loan = Loan("KfW", 12000, 3, 24)
        assert loan.debt_service(1) == loan.get_monthly_payment()
        assert loan.debt_service(24) == loan.get_monthly_payment()
        assert loan.debt_service(25) == Decimal("0")
        assert loan.debt_service(0) == Decimal("0")

    def test_total_debt_service_sums_loans(self):
        loans = [Loan("a", 12000, 0, 12), Loan("b", 6000, 0, 24)]
        assert total_debt_service(loans, 1) == Decimal("1250.00")
        assert total_debt_service(loans, 13) == Decimal("250.00")
        assert total_debt_service([], 1) == Decimal("0")

    def test_projection_dataframe(self):
        loan = Loan("bank", 20000, 5, 60)
        df = loan.get_projection(months_to_compute=6, start_date="2025-01-15")

        assert isinstance(df, pd.DataFrame)
        assert len(df) == 6
        assert list(df.columns) == ["id", "month", "date", "payment", "interest", "principal", "balance"]
        assert df["date"].iloc[0] == pd.Timestamp("2025-01-01")
        assert df["interest"].iloc[0] == Decimal("83.33")

    def test_to_dict(self):
        loan_dict = Loan("bank", 20000, 5, 60).to_dict()
        assert loan_dict["principal"] == "20000.00"
        assert loan_dict["payment"]["monthly_payment"] == "377.42"
