"""
Capital requirement model for gzplan.

The capital requirement (Kapitalbedarf) is the amount a founder needs before
the business carries itself: investments, founding costs and a buffer for the
start-up phase. Every category is optional while the plan is being filled in;
an absent category contributes zero to the total.

Classes:
    CapitalRequirement: Named cost categories and their total
    RunningCosts: Result of the start-up running-cost calculation
"""

import logging
from dataclasses import dataclass
from typing import Dict, Any, List, Optional

from gzplan.core.money import CurrencyAmount, HUNDRED, safe_divide, to_decimal
from gzplan.utils.error_utils import InvalidInputError
from gzplan.utils.number_utils import amount_or_zero, count_or_default

logger = logging.getLogger(__name__)

INVESTMENT_CATEGORIES = ("equipment", "goods_materials", "fixtures")
FOUNDING_COST_CATEGORIES = ("notary", "commercial_register", "advisory", "other_founding")
OPERATING_CATEGORIES = ("startup_marketing", "working_capital_reserve", "living_cost_buffer")

CATEGORIES = INVESTMENT_CATEGORIES + FOUNDING_COST_CATEGORIES + OPERATING_CATEGORIES

DEFAULT_RUNNING_RESERVE_PCT = 20


@dataclass(frozen=True)
class RunningCosts:
    """Start-up running costs: monthly costs over the ramp-up period plus a safety reserve."""

    running: CurrencyAmount
    reserve: CurrencyAmount
    total: CurrencyAmount

    def to_dict(self) -> Dict[str, str]:
        return {
            "running": self.running.to_json(),
            "reserve": self.reserve.to_json(),
            "total": self.total.to_json(),
        }


def startup_running_costs(monthly_costs, months: int, reserve_pct=DEFAULT_RUNNING_RESERVE_PCT) -> RunningCosts:
    """
    Running costs for the ramp-up period with a percentage safety reserve.

    Args:
        monthly_costs: Business and private costs per month
        months: Length of the ramp-up period
        reserve_pct: Safety margin in percent of the running costs

    Returns:
        RunningCosts with cent-rounded running, reserve and total amounts

    Examples:
        >>> startup_running_costs(4000, 6, 25).total
        CurrencyAmount('30000.00')
    """
    running = CurrencyAmount(monthly_costs) * months
    reserve = running * safe_divide(reserve_pct, HUNDRED)
    return RunningCosts(
        running=running.cents(),
        reserve=reserve.cents(),
        total=(running + reserve).cents(),
    )


def validate_running_costs(monthly_costs, months: int) -> List[str]:
    """Advisory checks on the ramp-up assumptions; never blocks a plan."""
    warnings = []
    monthly = to_decimal(monthly_costs)

    if months < 3:
        warnings.append("A ramp-up period of less than 3 months is very optimistic")
    if months > 18:
        warnings.append("A ramp-up period of more than 18 months may tie up too much capital")
    if monthly < 1000:
        warnings.append("Monthly running costs below 1,000 EUR look very low")
    if monthly > 10000:
        warnings.append("Monthly running costs above 10,000 EUR are very high; check every item")

    return warnings


class CapitalRequirement:
    """
    Capital requirement broken down by category.

    Category amounts are stored as ``CurrencyAmount``. Unknown keys passed to
    ``from_dict`` are ignored; absent or invalid categories count as zero and
    invalid ones are recorded in ``input_errors``.

    Attributes:
        categories: Mapping of category name to amount (all of ``CATEGORIES``)
        running_cost_months: Optional ramp-up period for the running-cost buffer
        monthly_running_costs: Optional monthly costs during the ramp-up period
        running_reserve_pct: Reserve margin on top of the running costs
        input_errors: Field-scoped input problems found while reading the data
    """

    def __init__(
        self,
        categories: Optional[Dict[str, Any]] = None,
        running_cost_months: Optional[int] = None,
        monthly_running_costs=None,
        running_reserve_pct=DEFAULT_RUNNING_RESERVE_PCT,
        field_prefix: str = "capital",
    ):
        self.input_errors: List[InvalidInputError] = []
        categories = categories or {}

        self.categories: Dict[str, CurrencyAmount] = {}
        for name in CATEGORIES:
            self.categories[name] = CurrencyAmount(
                amount_or_zero(categories.get(name), f"{field_prefix}.{name}", self.input_errors)
            )

        self.running_cost_months = count_or_default(
            running_cost_months, f"{field_prefix}.running_cost_months", self.input_errors
        )
        self.monthly_running_costs = CurrencyAmount(
            amount_or_zero(monthly_running_costs, f"{field_prefix}.monthly_running_costs", self.input_errors)
        )
        self.running_reserve_pct = amount_or_zero(
            running_reserve_pct, f"{field_prefix}.running_reserve_pct", self.input_errors
        )

    def running_costs(self) -> Optional[RunningCosts]:
        """Running-cost buffer, or None when no ramp-up period was given."""
        if not self.running_cost_months:
            return None
        return startup_running_costs(
            self.monthly_running_costs, self.running_cost_months, self.running_reserve_pct
        )

    def founding_costs_total(self) -> CurrencyAmount:
        return CurrencyAmount.sum(self.categories[name] for name in FOUNDING_COST_CATEGORIES)

    def investment_total(self) -> CurrencyAmount:
        """Capital investment paid out during the first months of the business."""
        return CurrencyAmount.sum(self.categories[name] for name in INVESTMENT_CATEGORIES)

    def total(self) -> CurrencyAmount:
        """
        Total capital requirement.

        Sum of all categories plus the running-cost buffer when a ramp-up
        period is set. Absent categories contribute zero.
        """
        total = CurrencyAmount.sum(self.categories.values())
        running = self.running_costs()
        if running is not None:
            total = total + running.total
        return total.cents()

    def validate(self) -> List[str]:
        """Advisory warnings on the running-cost assumptions."""
        if not self.running_cost_months:
            return []
        return validate_running_costs(self.monthly_running_costs, self.running_cost_months)

    def to_dict(self) -> Dict[str, Any]:
        running = self.running_costs()
        return {
            "categories": {name: amount.to_json() for name, amount in self.categories.items()},
            "founding_costs_total": self.founding_costs_total().to_json(),
            "investment_total": self.investment_total().to_json(),
            "running_costs": running.to_dict() if running else None,
            "total": self.total().to_json(),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], field_prefix: str = "capital") -> "CapitalRequirement":
        """
        Build from plain input data.

        Categories may be given at the top level or under a ``categories`` key.
        """
        data = data or {}
        categories = dict(data.get("categories") or {})
        for name in CATEGORIES:
            if name in data and name not in categories:
                categories[name] = data[name]

        return cls(
            categories=categories,
            running_cost_months=data.get("running_cost_months"),
            monthly_running_costs=data.get("monthly_running_costs"),
            running_reserve_pct=data.get("running_reserve_pct", DEFAULT_RUNNING_RESERVE_PCT),
            field_prefix=field_prefix,
        )


def total(categories: Optional[Dict[str, Any]]) -> CurrencyAmount:
    """Total of a plain category mapping; missing categories contribute zero."""
    return CapitalRequirement(categories=categories).total()
