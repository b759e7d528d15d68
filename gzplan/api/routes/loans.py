"""
Loan calculator API endpoints.

Annuity payment and amortization schedule for a single loan, independent of
any plan.
"""

from fastapi import APIRouter, HTTPException, status

from gzplan.api.schemas import LoanRequest, LoanScheduleRequest, LoanPaymentResponse, LoanScheduleResponse
from gzplan.core.models.loan import payment, schedule
from gzplan.utils.number_utils import normalize_amount
from gzplan.utils.rate_utils import normalize_rate_input, validate_rate_range


router = APIRouter()


def _read_loan(loan: LoanRequest):
    principal = normalize_amount(loan.principal, field="principal")
    rate = normalize_rate_input(loan.interest_rate_annual_pct)
    if not validate_rate_range(rate):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Interest rate {rate}% is outside the plausible range of 0-50%",
        )
    return principal, rate


@router.post("/payment", response_model=LoanPaymentResponse)
def loan_payment(loan: LoanRequest):
    principal, rate = _read_loan(loan)
    return payment(principal, rate, loan.term_months).to_dict()


@router.post("/schedule", response_model=LoanScheduleResponse)
def loan_schedule(loan: LoanScheduleRequest):
    """Monthly payment plus the amortization schedule (optionally truncated)."""
    principal, rate = _read_loan(loan)
    rows = schedule(principal, rate, loan.term_months, loan.months_to_compute)
    return {
        "payment": payment(principal, rate, loan.term_months).to_dict(),
        "schedule": [row.to_dict() for row in rows],
    }
