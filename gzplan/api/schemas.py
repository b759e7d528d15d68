"""
Pydantic schemas for API request/response validation.

These schemas provide:
- Input validation for API requests
- Response serialization
- OpenAPI documentation generation

Monetary request fields accept numbers or loosely formatted strings
("1.234,56 €"); the engine normalizes them. Monetary response fields are
strings at cent precision so no client ever sees a binary float.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Dict, Any, List, Union

from pydantic import BaseModel, Field, ConfigDict, field_validator

from gzplan.core.constants import (
    FinancingStatus,
    FinancingType,
    HouseholdType,
    MAX_PROJECTION_MONTHS,
    MIN_PROJECTION_MONTHS,
    MONTHS_PER_YEAR,
    RevenueStreamType,
)

# Number or loosely formatted string, normalized by the engine
Amount = Optional[Union[Decimal, str]]


# ======================
# Base Schemas
# ======================


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        validate_assignment=True,
        use_enum_values=True,
    )


# ======================
# Plan Input Schemas
# ======================


class CapitalInput(BaseSchema):
    """Capital requirement categories; absent categories count as zero."""

    equipment: Amount = None
    goods_materials: Amount = None
    fixtures: Amount = None
    startup_marketing: Amount = None
    working_capital_reserve: Amount = None
    living_cost_buffer: Amount = None
    notary: Amount = None
    commercial_register: Amount = None
    advisory: Amount = None
    other_founding: Amount = None
    running_cost_months: Optional[int] = Field(None, ge=0, le=MAX_PROJECTION_MONTHS)
    monthly_running_costs: Amount = None
    running_reserve_pct: Amount = Field(default=Decimal(20))


class FinancingSourceInput(BaseSchema):
    type: FinancingType
    label: str = Field(default="", max_length=255)
    amount: Amount = None
    interest_rate: Amount = Field(None, description="Annual interest rate in percent")
    term_months: Optional[int] = Field(None, ge=0)
    status: FinancingStatus = Field(default=FinancingStatus.PLANNED)


class PrivateWithdrawalInput(BaseSchema):
    housing: Amount = None
    food: Amount = None
    insurance: Amount = None
    mobility: Amount = None
    communication: Amount = None
    other: Amount = None
    savings: Amount = None


class RevenueStreamInput(BaseSchema):
    name: str = Field(..., min_length=1, max_length=255)
    type: RevenueStreamType = Field(default=RevenueStreamType.SERVICE)
    unit_price: Amount = None
    monthly_quantities_year1: List[Amount] = Field(default_factory=list)
    quantity_year2: Amount = None
    quantity_year3: Amount = None


class CostPlanInput(BaseSchema):
    fixed_monthly: Dict[str, Amount] = Field(default_factory=dict)
    variable_year1: Amount = None
    variable_year2: Amount = None
    variable_year3: Amount = None


class PaymentTermsInput(BaseSchema):
    customer_payment_days: Optional[int] = Field(None, ge=0, le=365)
    supplier_payment_days: Optional[int] = Field(None, ge=0, le=365)
    variable_cost_payment_delay: Optional[int] = Field(None, ge=0, le=365)


class SeasonalityInput(BaseSchema):
    industry: Optional[str] = None
    quarterly_multipliers: Optional[List[Decimal]] = None

    @field_validator("quarterly_multipliers")
    @classmethod
    def four_quarters(cls, v):
        if v is not None and len(v) != 4:
            raise ValueError("quarterly_multipliers needs exactly 4 values")
        return v


class PlanRequest(BaseSchema):
    """Complete founder input for one plan evaluation."""

    capital: CapitalInput = Field(default_factory=CapitalInput)
    financing_sources: List[FinancingSourceInput] = Field(default_factory=list)
    private_withdrawal: PrivateWithdrawalInput = Field(default_factory=PrivateWithdrawalInput)
    revenue_streams: List[RevenueStreamInput] = Field(default_factory=list)
    costs: CostPlanInput = Field(default_factory=CostPlanInput)
    payment_terms: Optional[PaymentTermsInput] = None
    seasonality: Optional[SeasonalityInput] = None
    months: int = Field(default=MONTHS_PER_YEAR, ge=MIN_PROJECTION_MONTHS, le=MAX_PROJECTION_MONTHS)
    start_date: Optional[date] = Field(None, description="Founding date for calendar labels")
    industry: Optional[str] = Field(None, description="e.g. beratung, ecommerce, handwerk, restaurant, software")
    business_age_years: int = Field(default=1, ge=0)
    region: Optional[str] = Field(None, description="City for the living-cost adjustment, e.g. München")
    household_type: HouseholdType = Field(default=HouseholdType.SINGLE)
    income: Amount = None
    include_table: bool = Field(default=False, description="Include a flat month-by-month table")


# ======================
# Plan Response Schemas
# ======================


class ComplianceIssueResponse(BaseSchema):
    severity: str
    code: str
    message: str


class ComplianceResponse(BaseSchema):
    is_export_ready: bool
    blockers: List[ComplianceIssueResponse]
    warnings: List[ComplianceIssueResponse]
    flags: Dict[str, bool]


class PlanResponse(BaseSchema):
    """Plan evaluation result; monetary values are cent-precision strings."""

    is_export_ready: bool
    has_negative_liquidity: bool
    self_sufficiency_month: Optional[int] = None
    capital_requirement_total: str
    capital: Dict[str, Any]
    financing: Dict[str, Any]
    financing_risk: Dict[str, Any]
    financing_source_errors: List[str]
    loans: List[Dict[str, Any]]
    revenue: Dict[str, Any]
    revenue_realism: Dict[str, Any]
    revenue_suggestions: List[Dict[str, Any]]
    costs: Dict[str, Any]
    monthly_profits: List[str]
    private_withdrawal: Dict[str, Any]
    withdrawal_analysis: Dict[str, Any]
    household_comparison: Dict[str, Any]
    regional_withdrawal: Optional[Dict[str, Any]] = None
    cash_flow: Dict[str, Any]
    liquidity: Dict[str, Any]
    compliance: ComplianceResponse
    input_errors: List[Dict[str, Any]]
    table: Optional[List[Dict[str, Any]]] = None


# ======================
# Loan Schemas
# ======================


class LoanRequest(BaseSchema):
    principal: Union[Decimal, str] = Field(..., description="Loan amount")
    interest_rate_annual_pct: Union[Decimal, str] = Field(..., description="Annual interest rate in percent")
    term_months: int = Field(..., ge=0, le=600)


class LoanScheduleRequest(LoanRequest):
    months_to_compute: Optional[int] = Field(None, gt=0, le=600)


class LoanPaymentResponse(BaseSchema):
    monthly_payment: str
    total_interest: str
    total_payments: str


class ScheduleRowResponse(BaseSchema):
    month: int
    payment: str
    interest: str
    principal: str
    balance: str


class LoanScheduleResponse(BaseSchema):
    payment: LoanPaymentResponse
    schedule: List[ScheduleRowResponse]


# ======================
# Error Schemas
# ======================


class ErrorResponse(BaseSchema):
    """Standard error response schema."""

    error: str = Field(..., description="Error message")
    detail: Optional[Any] = Field(None, description="Detailed error information")
    type: Optional[str] = Field(None, description="Error type/class")
