"""
Cash-flow simulation for gzplan.

Simulates the business bank account month by month: customer payments arrive
with the agreed payment delay, variable costs are paid with their own delay,
the planned investment is paid out over the first three months, loans are
serviced, and the founder withdraws a constant amount to live on. The total
financing is booked once in month 1.

Every component of a month is rounded to cents before the net cash flow is
formed, so ``ending = beginning + net`` holds exactly for the published
figures.

Classes:
    PaymentTerms: Payment delays in days
    SeasonalityConfig: Quarterly revenue multipliers
    SimulationConfig: Horizon, payment terms, seasonality and start date
    CashFlowMonth: One simulated month
    CashFlowProjection: The simulated months plus minimum-cash tracking
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Any, List, Optional, Tuple

import pandas as pd

from gzplan.core.constants import (
    DEFAULT_CUSTOMER_PAYMENT_DAYS,
    DEFAULT_SUPPLIER_PAYMENT_DAYS,
    DEFAULT_VARIABLE_COST_PAYMENT_DAYS,
    INVESTMENT_SPREAD_MONTHS,
    MAX_PROJECTION_MONTHS,
    MIN_PROJECTION_MONTHS,
    MONTHS_PER_YEAR,
    SEASONALITY_PATTERNS,
)
from gzplan.core.models.cost_plan import CostPlan
from gzplan.core.models.loan import Loan, total_debt_service
from gzplan.core.models.revenue_stream import RevenueProjection
from gzplan.core.money import CurrencyAmount, ONE, to_decimal
from gzplan.utils.date_utils import month_label, month_start_dates
from gzplan.utils.error_utils import error_handler
from gzplan.utils.rate_utils import days_to_months

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentTerms:
    """Payment delays in days; German B2B averages by default."""

    customer_payment_days: int = DEFAULT_CUSTOMER_PAYMENT_DAYS
    supplier_payment_days: int = DEFAULT_SUPPLIER_PAYMENT_DAYS
    variable_cost_payment_delay: int = DEFAULT_VARIABLE_COST_PAYMENT_DAYS

    @property
    def customer_delay_months(self) -> int:
        return days_to_months(self.customer_payment_days)

    @property
    def variable_delay_months(self) -> int:
        return days_to_months(self.variable_cost_payment_delay)

    def to_dict(self) -> Dict[str, int]:
        return {
            "customer_payment_days": self.customer_payment_days,
            "supplier_payment_days": self.supplier_payment_days,
            "variable_cost_payment_delay": self.variable_cost_payment_delay,
        }


@dataclass(frozen=True)
class SeasonalityConfig:
    """
    Quarterly revenue multipliers.

    Explicit ``quarterly_multipliers`` win over the industry pattern; an
    unknown industry gets the flat default pattern.
    """

    industry: Optional[str] = None
    quarterly_multipliers: Optional[Tuple[Decimal, Decimal, Decimal, Decimal]] = None

    def __post_init__(self):
        if self.quarterly_multipliers is not None:
            multipliers = tuple(to_decimal(m) for m in self.quarterly_multipliers)
            if len(multipliers) != 4:
                raise ValueError(f"Seasonality needs 4 quarterly multipliers, got {len(multipliers)}")
            object.__setattr__(self, "quarterly_multipliers", multipliers)

    def multipliers(self) -> Tuple[Decimal, ...]:
        if self.quarterly_multipliers is not None:
            return self.quarterly_multipliers
        return SEASONALITY_PATTERNS.get((self.industry or "default").lower(), SEASONALITY_PATTERNS["default"])

    def factor(self, month: int) -> Decimal:
        """Multiplier of plan month ``month`` (1-based; month 1 is in Q1)."""
        quarter = ((month - 1) % MONTHS_PER_YEAR) // 3
        return self.multipliers()[quarter]

    def to_dict(self) -> Dict[str, Any]:
        return {"industry": self.industry, "quarterly_multipliers": [str(m) for m in self.multipliers()]}


@dataclass(frozen=True)
class SimulationConfig:
    """
    Per-call simulation settings.

    Attributes:
        months: Simulation horizon, 12 to 36 months
        payment_terms: PaymentTerms
        seasonality: Optional SeasonalityConfig; no seasonal adjustment when None
        start_date: Optional founding date for calendar labels
    """

    months: int = MIN_PROJECTION_MONTHS
    payment_terms: PaymentTerms = field(default_factory=PaymentTerms)
    seasonality: Optional[SeasonalityConfig] = None
    start_date: Optional[str] = None

    def __post_init__(self):
        if not MIN_PROJECTION_MONTHS <= self.months <= MAX_PROJECTION_MONTHS:
            raise ValueError(
                f"Simulation horizon must be {MIN_PROJECTION_MONTHS}-{MAX_PROJECTION_MONTHS} months, got {self.months}"
            )


@dataclass(frozen=True)
class CashFlowMonth:
    """One simulated month; all amounts in cents."""

    month: int
    beginning_cash: CurrencyAmount
    revenue_inflow: CurrencyAmount
    financing_inflow: CurrencyAmount
    operating_outflow: CurrencyAmount
    investment_outflow: CurrencyAmount
    debt_service_outflow: CurrencyAmount
    private_withdrawal: CurrencyAmount
    net_cash_flow: CurrencyAmount
    ending_cash: CurrencyAmount

    @property
    def total_inflows(self) -> CurrencyAmount:
        return self.revenue_inflow + self.financing_inflow

    @property
    def total_outflows(self) -> CurrencyAmount:
        return self.operating_outflow + self.investment_outflow + self.debt_service_outflow + self.private_withdrawal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "beginning_cash": self.beginning_cash.to_json(),
            "revenue_inflow": self.revenue_inflow.to_json(),
            "financing_inflow": self.financing_inflow.to_json(),
            "total_inflows": self.total_inflows.to_json(),
            "operating_outflow": self.operating_outflow.to_json(),
            "investment_outflow": self.investment_outflow.to_json(),
            "debt_service_outflow": self.debt_service_outflow.to_json(),
            "private_withdrawal": self.private_withdrawal.to_json(),
            "total_outflows": self.total_outflows.to_json(),
            "net_cash_flow": self.net_cash_flow.to_json(),
            "ending_cash": self.ending_cash.to_json(),
        }


AMOUNT_COLUMNS = [
    "beginning_cash",
    "revenue_inflow",
    "financing_inflow",
    "operating_outflow",
    "investment_outflow",
    "debt_service_outflow",
    "private_withdrawal",
    "net_cash_flow",
    "ending_cash",
]


class CashFlowProjection:
    """
    Result of a cash-flow simulation.

    Attributes:
        months: Simulated CashFlowMonth records, month 1 first
        generated_revenue: Revenue generated per month (after seasonality, before delay), cents
        minimum_cash: Lowest ending cash over the horizon
        minimum_month: First month in which ``minimum_cash`` occurs
        start_date: Optional founding date used for calendar views
    """

    def __init__(
        self,
        months: List[CashFlowMonth],
        generated_revenue: List[CurrencyAmount],
        start_date: Optional[str] = None,
    ):
        self.months = months
        self.generated_revenue = generated_revenue
        self.start_date = start_date

        self.minimum_cash = months[0].ending_cash
        self.minimum_month = months[0].month
        for record in months[1:]:
            if record.ending_cash < self.minimum_cash:
                self.minimum_cash = record.ending_cash
                self.minimum_month = record.month

    @property
    def horizon(self) -> int:
        return len(self.months)

    @property
    def has_negative_liquidity(self) -> bool:
        return self.minimum_cash.is_negative()

    def ending_balances(self) -> List[CurrencyAmount]:
        return [m.ending_cash for m in self.months]

    def operating_outflows(self) -> List[CurrencyAmount]:
        return [m.operating_outflow for m in self.months]

    @error_handler
    def to_dataframe(self) -> pd.DataFrame:
        """
        Projection as a DataFrame, one row per month.

        Amount columns hold Decimal values. When a start date is known a
        ``date`` column (month start) and a ``label`` column ("MM/YYYY") are added.
        """
        rows = []
        for record in self.months:
            row = {"month": record.month}
            for column in AMOUNT_COLUMNS:
                row[column] = getattr(record, column).value
            row["total_inflows"] = record.total_inflows.value
            row["total_outflows"] = record.total_outflows.value
            rows.append(row)

        df = pd.DataFrame(rows)
        if self.start_date is not None:
            df.insert(1, "date", month_start_dates(self.start_date, self.horizon))
            df.insert(2, "label", [month_label(self.start_date, m) for m in df["month"]])
        return df

    def to_dict(self) -> Dict[str, Any]:
        return {
            "months": [m.to_dict() for m in self.months],
            "minimum_cash": self.minimum_cash.to_json(),
            "minimum_month": self.minimum_month,
            "has_negative_liquidity": self.has_negative_liquidity,
        }


def _generated_revenue(revenue: RevenueProjection, months: int, seasonality: Optional[SeasonalityConfig]) -> List[CurrencyAmount]:
    generated = []
    for month in range(1, months + 1):
        amount = revenue.generated_revenue(month)
        factor = seasonality.factor(month) if seasonality is not None else ONE
        generated.append((amount * factor).cents())
    return generated


def _variable_share(cost_plan: CostPlan, revenue: RevenueProjection, month: int) -> Decimal:
    year = (month - 1) // MONTHS_PER_YEAR + 1
    return cost_plan.variable_cost_share(year, revenue.annual_revenue(year))


def simulate(
    revenue: RevenueProjection,
    cost_plan: CostPlan,
    investment_total,
    total_financing,
    loans: List[Loan],
    monthly_withdrawal,
    config: Optional[SimulationConfig] = None,
) -> CashFlowProjection:
    """
    Run the month-by-month cash-flow simulation.

    Month m:
        revenue inflow      = generated revenue of month m - customer delay
        operating outflow   = fixed monthly costs
                              + generated revenue of month m - variable delay * variable share
        investment outflow  = investment / 3 in months 1-3 (cent-exact split)
        debt service        = sum of the loans' monthly payments while their term runs
        private withdrawal  = constant monthly amount
        financing inflow    = total financing in month 1 only

    Months before month 1 generate no revenue. Month 1 opens with the total
    financing as beginning cash; every later month opens with the previous
    month's ending cash.

    Args:
        revenue: RevenueProjection of all streams
        cost_plan: CostPlan with fixed and variable costs
        investment_total: Capital investment paid out in the first three months
        total_financing: Sum of all financing sources
        loans: Loans generating debt service
        monthly_withdrawal: Private withdrawal per month
        config: SimulationConfig (defaults to 12 months with default payment terms)

    Returns:
        CashFlowProjection
    """
    config = config or SimulationConfig()
    horizon = config.months
    customer_delay = config.payment_terms.customer_delay_months
    variable_delay = config.payment_terms.variable_delay_months

    generated = _generated_revenue(revenue, horizon, config.seasonality)
    zero = CurrencyAmount.zero().cents()

    def generated_in(month: int) -> CurrencyAmount:
        if month < 1:
            return zero
        return generated[month - 1]

    fixed_monthly = cost_plan.fixed_monthly_total()
    investment_parts = CurrencyAmount(investment_total).allocate(INVESTMENT_SPREAD_MONTHS)
    withdrawal = CurrencyAmount(monthly_withdrawal).cents()
    financing = CurrencyAmount(total_financing).cents()

    records = []
    beginning = financing
    for month in range(1, horizon + 1):
        revenue_inflow = generated_in(month - customer_delay)

        variable_month = month - variable_delay
        variable_costs = zero
        if variable_month >= 1:
            variable_costs = (generated_in(variable_month) * _variable_share(cost_plan, revenue, variable_month)).cents()
        operating_outflow = fixed_monthly + variable_costs

        investment_outflow = investment_parts[month - 1] if month <= INVESTMENT_SPREAD_MONTHS else zero
        debt_service = total_debt_service(loans, month)
        financing_inflow = financing if month == 1 else zero

        net = (revenue_inflow + financing_inflow) - (operating_outflow + investment_outflow + debt_service + withdrawal)
        ending = beginning + net

        records.append(
            CashFlowMonth(
                month=month,
                beginning_cash=beginning,
                revenue_inflow=revenue_inflow,
                financing_inflow=financing_inflow,
                operating_outflow=operating_outflow,
                investment_outflow=investment_outflow,
                debt_service_outflow=debt_service,
                private_withdrawal=withdrawal,
                net_cash_flow=net,
                ending_cash=ending,
            )
        )
        beginning = ending

    projection = CashFlowProjection(records, generated, start_date=config.start_date)
    logger.debug(
        f"Simulated {horizon} months: minimum cash {projection.minimum_cash} in month {projection.minimum_month}"
    )
    return projection
