"""
Loan models for gzplan.

Start-up loans (bank loans, KfW promotional loans, private loans) are repaid
as annuities: a constant monthly payment whose interest share shrinks as the
balance falls. All calculations run in Decimal and results are rounded to
cents.

Classes:
    LoanPayment: Monthly payment, total interest and total payments of a loan
    ScheduleRow: One month of an amortization schedule
    Loan: Annuity loan with payment, schedule and projection views

Functions:
    payment: Annuity payment for principal, annual rate and term
    schedule: Month-by-month amortization breakdown
    total_debt_service: Summed monthly payment of several loans in a given month
"""

from dataclasses import dataclass
from typing import Dict, Any, Iterable, List, Optional, Union
from datetime import datetime

import pandas as pd

from gzplan.core.money import CurrencyAmount, ONE, ZERO, CONTEXT, decimal_power, safe_divide
from gzplan.utils.date_utils import month_start_dates
from gzplan.utils.error_utils import error_handler
from gzplan.utils.rate_utils import annual_pct_to_monthly_decimal


@dataclass(frozen=True)
class LoanPayment:
    """Debt service figures of one loan, rounded to cents."""

    monthly_payment: CurrencyAmount
    total_interest: CurrencyAmount
    total_payments: CurrencyAmount

    def to_dict(self) -> Dict[str, str]:
        return {
            "monthly_payment": self.monthly_payment.to_json(),
            "total_interest": self.total_interest.to_json(),
            "total_payments": self.total_payments.to_json(),
        }


@dataclass(frozen=True)
class ScheduleRow:
    month: int
    payment: CurrencyAmount
    interest: CurrencyAmount
    principal: CurrencyAmount
    balance: CurrencyAmount

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "payment": self.payment.to_json(),
            "interest": self.interest.to_json(),
            "principal": self.principal.to_json(),
            "balance": self.balance.to_json(),
        }


def _exact_monthly_payment(principal, annual_rate_pct, term_months: int) -> CurrencyAmount:
    principal = CurrencyAmount(principal)
    monthly_rate = annual_pct_to_monthly_decimal(annual_rate_pct)
    if monthly_rate == ZERO:
        return principal / term_months

    # P * r(1+r)^n / ((1+r)^n - 1)
    compound_factor = decimal_power(CONTEXT.add(ONE, monthly_rate), term_months)
    numerator = CONTEXT.multiply(CONTEXT.multiply(principal.value, monthly_rate), compound_factor)
    return CurrencyAmount(safe_divide(numerator, CONTEXT.subtract(compound_factor, ONE)))


def payment(principal, annual_rate_pct, term_months: int) -> LoanPayment:
    """
    Calculate the constant monthly annuity payment of a loan.

    Falls back to straight-line repayment (principal / term) when the rate is
    zero. A term of zero or less yields a zero payment.

    Args:
        principal: Loan amount
        annual_rate_pct: Annual interest rate as percentage (5 = 5%)
        term_months: Repayment term in months

    Returns:
        LoanPayment with cent-rounded monthly payment, total interest and total payments

    Examples:
        >>> payment(20000, 5, 60).monthly_payment
        CurrencyAmount('377.42')
    """
    if term_months <= 0:
        zero = CurrencyAmount.zero().cents()
        return LoanPayment(monthly_payment=zero, total_interest=zero, total_payments=zero)

    monthly = _exact_monthly_payment(principal, annual_rate_pct, term_months)
    total_payments = monthly * term_months
    total_interest = total_payments - CurrencyAmount(principal)
    return LoanPayment(
        monthly_payment=monthly.cents(),
        total_interest=total_interest.cents(),
        total_payments=total_payments.cents(),
    )


def schedule(principal, annual_rate_pct, term_months: int, months_to_compute: Optional[int] = None) -> List[ScheduleRow]:
    """
    Build the amortization schedule of an annuity loan.

    Interest is rounded to cents each month. The final month of the term
    repays whatever balance is left, so the principal portions over the full
    term add up exactly to the principal. The balance never goes below zero.

    Args:
        principal: Loan amount
        annual_rate_pct: Annual interest rate as percentage
        term_months: Repayment term in months
        months_to_compute: Number of rows to produce (defaults to the full term)

    Returns:
        List of ScheduleRow, at most ``term_months`` long
    """
    if term_months <= 0:
        return []

    rows = min(term_months, months_to_compute) if months_to_compute is not None else term_months
    monthly_rate = annual_pct_to_monthly_decimal(annual_rate_pct)
    monthly_payment = payment(principal, annual_rate_pct, term_months).monthly_payment
    balance = CurrencyAmount(principal).cents()
    zero = CurrencyAmount.zero().cents()

    result = []
    for month in range(1, rows + 1):
        interest = (balance * monthly_rate).cents()
        principal_part = monthly_payment - interest
        if month == term_months or principal_part > balance:
            principal_part = balance
        if principal_part < zero:
            principal_part = zero

        balance = balance - principal_part
        if balance.is_negative():
            balance = zero

        result.append(
            ScheduleRow(
                month=month,
                payment=(principal_part + interest).cents(),
                interest=interest,
                principal=principal_part.cents(),
                balance=balance.cents(),
            )
        )

    return result


class Loan:
    """
    Annuity loan taken up at plan start.

    Attributes:
        id: Loan identifier (usually the financing source label)
        principal: Loan amount
        interest_rate_annual_pct: Annual interest rate as percentage
        term_months: Repayment term in months
    """

    def __init__(self, id: str, principal, interest_rate_annual_pct, term_months: int):
        self.id = id
        self.principal = CurrencyAmount(principal)
        self.interest_rate_annual_pct = interest_rate_annual_pct
        self.term_months = int(term_months)

    def get_payment(self) -> LoanPayment:
        return payment(self.principal, self.interest_rate_annual_pct, self.term_months)

    def get_monthly_payment(self) -> CurrencyAmount:
        return self.get_payment().monthly_payment

    def debt_service(self, month: int) -> CurrencyAmount:
        """Payment due in plan month ``month`` (1-based); zero once the term has ended."""
        if month < 1 or month > self.term_months:
            return CurrencyAmount.zero().cents()
        return self.get_monthly_payment()

    def get_schedule(self, months_to_compute: Optional[int] = None) -> List[ScheduleRow]:
        return schedule(self.principal, self.interest_rate_annual_pct, self.term_months, months_to_compute)

    @error_handler
    def get_projection(
        self,
        months_to_compute: Optional[int] = None,
        start_date: Optional[Union[str, datetime, pd.Timestamp]] = None,
    ) -> pd.DataFrame:
        """
        Amortization schedule as a DataFrame.

        Returns:
            DataFrame with columns: id, month, [date], payment, interest, principal, balance.
            Amount columns hold Decimal values.
        """
        rows = self.get_schedule(months_to_compute)
        d = {
            "id": self.id,
            "month": [row.month for row in rows],
            "payment": [row.payment.value for row in rows],
            "interest": [row.interest.value for row in rows],
            "principal": [row.principal.value for row in rows],
            "balance": [row.balance.value for row in rows],
        }
        df = pd.DataFrame.from_dict(d)

        if start_date is not None:
            df.insert(2, "date", month_start_dates(start_date, len(rows)))

        return df

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "principal": self.principal.to_json(),
            "interest_rate_annual_pct": str(self.interest_rate_annual_pct),
            "term_months": self.term_months,
            "payment": self.get_payment().to_dict(),
        }


def total_debt_service(loans: Iterable[Loan], month: int) -> CurrencyAmount:
    """Sum of each loan's independently computed payment for ``month``."""
    return CurrencyAmount.sum(loan.debt_service(month) for loan in loans).cents()
