"""
Private withdrawal model for gzplan.

The private withdrawal (Privatentnahme) is what the founder takes out of the
business every month to live on. It is planned bottom-up from living-cost
categories plus a savings rate, can be adjusted to the cost of living of a
city, and is checked for sustainability and against German household
averages.

Classes:
    PrivateWithdrawal: Living-cost categories and their monthly/annual totals
    SpendingAnalysis: Category shares and sustainability classification
    HouseholdComparison: Deviation from household-type averages
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Any, List, Optional, Tuple

from gzplan.core.constants import (
    HOUSEHOLD_AVERAGES,
    HOUSEHOLD_DEVIATION_BAND_PCT,
    HouseholdType,
    MONTHS_PER_YEAR,
    REGIONAL_FACTORS,
    REGIONAL_SENSITIVITY,
    Sustainability,
)
from gzplan.core.money import CONTEXT, CurrencyAmount, ONE, ZERO, percentage, round_percent, to_decimal
from gzplan.utils.error_utils import InvalidInputError
from gzplan.utils.number_utils import amount_or_zero

logger = logging.getLogger(__name__)

LIVING_COST_CATEGORIES = ("housing", "food", "insurance", "mobility", "communication", "other")
CATEGORIES = LIVING_COST_CATEGORIES + ("savings",)

_SUSTAINABILITY_ORDER = {
    Sustainability.SUSTAINABLE: 0,
    Sustainability.TIGHT: 1,
    Sustainability.UNSUSTAINABLE: 2,
}


def _escalate(current: Sustainability, candidate: Sustainability) -> Sustainability:
    if _SUSTAINABILITY_ORDER[candidate] > _SUSTAINABILITY_ORDER[current]:
        return candidate
    return current


def regional_factor(region: Optional[str]) -> Decimal:
    """Cost-of-living multiplier of a city; unknown cities get the default factor."""
    if not region:
        return REGIONAL_FACTORS["default"]
    return REGIONAL_FACTORS.get(region, REGIONAL_FACTORS["default"])


def category_factor(category: str, factor: Decimal) -> Decimal:
    """
    Blend the regional factor by the category's sensitivity.

    ``1 + (factor - 1) * weight``; weight 1 for housing, 0 for insurance,
    communication and savings.
    """
    weight = REGIONAL_SENSITIVITY[category]
    return CONTEXT.add(ONE, CONTEXT.multiply(CONTEXT.subtract(factor, ONE), weight))


class PrivateWithdrawal:
    """
    Monthly private withdrawal broken down by living-cost category.

    Absent categories count as zero.

    Attributes:
        categories: Monthly amount per category (``CATEGORIES``, savings included)
        input_errors: Field-scoped input problems found while reading the data
    """

    def __init__(self, categories: Optional[Dict[str, Any]] = None, field_prefix: str = "private_withdrawal"):
        self.input_errors: List[InvalidInputError] = []
        categories = categories or {}
        self.categories: Dict[str, CurrencyAmount] = {
            name: CurrencyAmount(amount_or_zero(categories.get(name), f"{field_prefix}.{name}", self.input_errors))
            for name in CATEGORIES
        }

    @property
    def monthly(self) -> CurrencyAmount:
        return CurrencyAmount.sum(self.categories.values()).cents()

    @property
    def annual(self) -> CurrencyAmount:
        return (self.monthly * MONTHS_PER_YEAR).cents()

    def adjust_for_region(self, region: Optional[str]) -> "PrivateWithdrawal":
        """
        New withdrawal with every category adjusted to the cost of living of ``region``.

        Adjusted categories are rounded to whole euros; uniform categories are
        carried over unchanged.
        """
        factor = regional_factor(region)
        adjusted = {}
        for name, amount in self.categories.items():
            if REGIONAL_SENSITIVITY[name] == ZERO:
                adjusted[name] = amount.value
            else:
                adjusted[name] = (amount * category_factor(name, factor)).round(0).value
        logger.debug(f"Adjusted private withdrawal for region '{region}' with factor {factor}")
        return PrivateWithdrawal(adjusted)

    def analyze(self, income=None) -> "SpendingAnalysis":
        return analyze_spending(self, income)

    def compare(self, household_type: HouseholdType = HouseholdType.SINGLE) -> "HouseholdComparison":
        return compare_with_averages(self, household_type)

    def validate(self) -> List[str]:
        """Advisory sanity checks on the withdrawal."""
        warnings = []
        total = self.monthly.value

        if total < 1000:
            warnings.append("A private withdrawal below 1,000 EUR per month is very low")
        if total > 6000:
            warnings.append("A private withdrawal above 6,000 EUR per month is very high")
        if self.categories["housing"] > CONTEXT.multiply(total, Decimal("0.5")):
            warnings.append("Housing costs exceed 50% of the private withdrawal")
        if self.categories["insurance"] < 200:
            warnings.append("Insurance costs look very low; is health insurance included?")
        if self.categories["savings"] > CONTEXT.multiply(total, Decimal("0.3")):
            warnings.append("Savings rate is very high for the start-up phase")

        return warnings

    def to_dict(self) -> Dict[str, Any]:
        return {
            "categories": {k: v.to_json() for k, v in self.categories.items()},
            "monthly": self.monthly.to_json(),
            "annual": self.annual.to_json(),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], field_prefix: str = "private_withdrawal") -> "PrivateWithdrawal":
        data = data or {}
        categories = dict(data.get("categories") or {})
        for name in CATEGORIES:
            if name in data and name not in categories:
                categories[name] = data[name]
        return cls(categories, field_prefix=field_prefix)


def total(categories: Optional[Dict[str, Any]], savings=None) -> Tuple[CurrencyAmount, CurrencyAmount]:
    """Monthly and annual withdrawal of living-cost categories plus a savings amount."""
    categories = dict(categories or {})
    if savings is not None:
        categories["savings"] = savings
    withdrawal = PrivateWithdrawal(categories)
    return withdrawal.monthly, withdrawal.annual


@dataclass(frozen=True)
class SpendingAnalysis:
    category_pct: Dict[str, Decimal]
    housing_ratio: Decimal
    savings_ratio: Decimal
    expense_ratio: Optional[Decimal]
    sustainability: Sustainability
    warnings: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category_pct": {k: str(round_percent(v)) for k, v in self.category_pct.items()},
            "housing_ratio": str(round_percent(self.housing_ratio)),
            "savings_ratio": str(round_percent(self.savings_ratio)),
            "expense_ratio": str(round_percent(self.expense_ratio)) if self.expense_ratio is not None else None,
            "sustainability": self.sustainability.value,
            "warnings": list(self.warnings),
        }


def analyze_spending(withdrawal: PrivateWithdrawal, income=None) -> SpendingAnalysis:
    """
    Classify how sustainable the planned withdrawal is.

    Housing above 40% of the withdrawal is tight, above 50% unsustainable.
    Savings below 5% or above 30% produce a warning. When a monthly income is
    given, spending above 80% of it is tight and above 90% unsustainable; the
    income check can only make the classification worse.

    Args:
        withdrawal: PrivateWithdrawal
        income: Optional monthly net income for the expense ratio

    Returns:
        SpendingAnalysis
    """
    total_amount = withdrawal.monthly
    category_pct = {name: percentage(amount, total_amount) for name, amount in withdrawal.categories.items()}
    housing_ratio = category_pct["housing"]
    savings_ratio = category_pct["savings"]

    sustainability = Sustainability.SUSTAINABLE
    warnings = []

    if housing_ratio > 50:
        sustainability = Sustainability.UNSUSTAINABLE
        warnings.append("Housing costs are critically high (>50% of spending)")
    elif housing_ratio > 40:
        sustainability = Sustainability.TIGHT
        warnings.append("Housing costs are high (>40% of spending)")

    if savings_ratio < 5:
        warnings.append("Very low savings rate (<5%); build an emergency fund")
    elif savings_ratio > 30:
        warnings.append("Very high savings rate (>30%); possibly too conservative for the start-up phase")

    expense_ratio = None
    income_value = to_decimal(income) if income is not None else ZERO
    if income_value > ZERO:
        expense_ratio = percentage(total_amount, income_value)
        if expense_ratio > 90:
            sustainability = _escalate(sustainability, Sustainability.UNSUSTAINABLE)
            warnings.append("Spending exceeds 90% of income")
        elif expense_ratio > 80:
            sustainability = _escalate(sustainability, Sustainability.TIGHT)
            warnings.append("Spending exceeds 80% of income; no buffer for the unexpected")

    return SpendingAnalysis(
        category_pct=category_pct,
        housing_ratio=housing_ratio,
        savings_ratio=savings_ratio,
        expense_ratio=expense_ratio,
        sustainability=sustainability,
        warnings=tuple(warnings),
    )


@dataclass(frozen=True)
class HouseholdComparison:
    household_type: HouseholdType
    comparison: Dict[str, str]
    averages: Dict[str, Decimal]
    deviations_pct: Dict[str, Decimal]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "household_type": self.household_type.value,
            "comparison": dict(self.comparison),
            "averages": {k: str(v) for k, v in self.averages.items()},
            "deviations_pct": {k: str(round_percent(v)) for k, v in self.deviations_pct.items()},
        }


def compare_with_averages(
    withdrawal: PrivateWithdrawal,
    household_type: HouseholdType = HouseholdType.SINGLE,
) -> HouseholdComparison:
    """
    Benchmark each category against German household averages.

    Deviations beyond -20% are "below", beyond +20% "above", otherwise "average".
    """
    household_type = HouseholdType(household_type)
    averages = HOUSEHOLD_AVERAGES[household_type]
    comparison = {}
    deviations = {}

    for name, average in averages.items():
        actual = withdrawal.categories[name].value
        deviation = percentage(CONTEXT.subtract(actual, average), average)
        deviations[name] = deviation
        if deviation < -HOUSEHOLD_DEVIATION_BAND_PCT:
            comparison[name] = "below"
        elif deviation > HOUSEHOLD_DEVIATION_BAND_PCT:
            comparison[name] = "above"
        else:
            comparison[name] = "average"

    return HouseholdComparison(
        household_type=household_type,
        comparison=comparison,
        averages=dict(averages),
        deviations_pct=deviations,
    )
