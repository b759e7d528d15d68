"""
Cost plan model for gzplan.

Fixed costs arrive as monthly amounts per category (rent, insurance,
personnel, ...). Variable costs arrive as pre-computed annual totals per plan
year; deriving them from the revenue mix happens outside the engine. The cost
plan sums both and exposes the variable cost share the cash-flow simulation
uses to time variable cost payments.
"""

import logging
from decimal import Decimal
from typing import Dict, Any, List, Optional

from gzplan.core.constants import MONTHS_PER_YEAR
from gzplan.core.money import CurrencyAmount, ONE, ZERO, CONTEXT, safe_divide
from gzplan.utils.error_utils import InvalidInputError
from gzplan.utils.number_utils import amount_or_zero

logger = logging.getLogger(__name__)

FIXED_COST_CATEGORIES = (
    "personnel",
    "rent",
    "insurance",
    "marketing",
    "materials",
    "depreciation",
    "interest",
    "taxes",
    "other",
)

PLAN_YEARS = (1, 2, 3)


class CostPlan:
    """
    Fixed and variable costs of the plan.

    Unknown fixed-cost category names are accepted as-is, since founders name
    their cost items freely; ``FIXED_COST_CATEGORIES`` are the usual ones.

    Attributes:
        fixed_monthly: Monthly amount per fixed cost category
        variable_annual: Variable cost total per plan year (1, 2, 3)
        input_errors: Field-scoped input problems found while reading the data
    """

    def __init__(
        self,
        fixed_monthly: Optional[Dict[str, Any]] = None,
        variable_year1=None,
        variable_year2=None,
        variable_year3=None,
        field_prefix: str = "costs",
    ):
        self.input_errors: List[InvalidInputError] = []
        self.fixed_monthly: Dict[str, CurrencyAmount] = {
            name: CurrencyAmount(amount_or_zero(value, f"{field_prefix}.fixed_monthly.{name}", self.input_errors))
            for name, value in (fixed_monthly or {}).items()
        }
        self.variable_annual: Dict[int, CurrencyAmount] = {}
        for year, value in zip(PLAN_YEARS, (variable_year1, variable_year2, variable_year3)):
            self.variable_annual[year] = CurrencyAmount(
                amount_or_zero(value, f"{field_prefix}.variable_year{year}", self.input_errors)
            )

    def fixed_monthly_total(self) -> CurrencyAmount:
        return CurrencyAmount.sum(self.fixed_monthly.values()).cents()

    def fixed_annual_total(self) -> CurrencyAmount:
        return (self.fixed_monthly_total() * MONTHS_PER_YEAR).cents()

    def variable_total(self, year: int) -> CurrencyAmount:
        return self.variable_annual.get(year, CurrencyAmount.zero()).cents()

    def total_costs(self, year: int) -> CurrencyAmount:
        """Fixed plus variable costs of plan year ``year``."""
        return (self.fixed_annual_total() + self.variable_total(year)).cents()

    def variable_cost_share(self, year: int, revenue) -> Decimal:
        """
        Variable costs as a fraction of the year's revenue.

        Args:
            year: Plan year (1, 2 or 3)
            revenue: Revenue of that year

        Returns:
            Unrounded share (0.33 = 33%); 0 when the revenue is 0
        """
        return safe_divide(self.variable_total(year), revenue)

    def break_even_revenue(self, revenue_year1) -> Optional[CurrencyAmount]:
        """
        Monthly revenue at which the year-1 cost structure breaks even.

        ``fixed / (1 - variable share)``; None when variable costs eat all revenue.
        """
        share = self.variable_cost_share(1, revenue_year1)
        margin = CONTEXT.subtract(ONE, share)
        if margin <= ZERO:
            return None
        return CurrencyAmount(safe_divide(self.fixed_monthly_total(), margin)).cents()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fixed_monthly": {k: v.to_json() for k, v in self.fixed_monthly.items()},
            "fixed_monthly_total": self.fixed_monthly_total().to_json(),
            "fixed_annual_total": self.fixed_annual_total().to_json(),
            "variable_annual": {str(y): self.variable_total(y).to_json() for y in PLAN_YEARS},
            "total_costs": {str(y): self.total_costs(y).to_json() for y in PLAN_YEARS},
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], field_prefix: str = "costs") -> "CostPlan":
        data = data or {}
        return cls(
            fixed_monthly=data.get("fixed_monthly"),
            variable_year1=data.get("variable_year1"),
            variable_year2=data.get("variable_year2"),
            variable_year3=data.get("variable_year3"),
            field_prefix=field_prefix,
        )


def monthly_profits(cost_plan: CostPlan, revenue_projection, months: int = 3 * MONTHS_PER_YEAR) -> List[CurrencyAmount]:
    """
    Projected profit per plan month, before taxes.

    Year 1: ``revenue(m) - fixed monthly - revenue(m) * variable share(1)``.
    Years 2 and 3: ``(annual revenue - total annual costs) / 12``.

    Args:
        cost_plan: CostPlan
        revenue_projection: RevenueProjection providing monthly and annual revenue
        months: Number of months to compute (at most 36)

    Returns:
        Cent-rounded profits for months 1..months
    """
    profits = []
    share_year1 = cost_plan.variable_cost_share(1, revenue_projection.annual_revenue(1))
    fixed = cost_plan.fixed_monthly_total()

    for month in range(1, min(months, 3 * MONTHS_PER_YEAR) + 1):
        if month <= MONTHS_PER_YEAR:
            revenue = revenue_projection.generated_revenue(month)
            profit = revenue - fixed - revenue * share_year1
        else:
            year = (month - 1) // MONTHS_PER_YEAR + 1
            profit = (revenue_projection.annual_revenue(year) - cost_plan.total_costs(year)) / MONTHS_PER_YEAR
        profits.append(profit.cents())

    return profits


def self_sufficiency_month(profits: List[CurrencyAmount]) -> Optional[int]:
    """First month (1-based) with non-negative profit, None if it never happens."""
    for month, profit in enumerate(profits, start=1):
        if not profit.is_negative():
            return month
    return None
