"""
Revenue stream models for gzplan.

A revenue stream is one product or service line with a unit price, a monthly
quantity plan for the first year and annual quantities for years two and
three. This module projects monthly and annual revenue across streams,
derives growth rates and runs the advisory realism checks that flag overly
optimistic plans.

Classes:
    RevenueStream: One revenue line as entered by the founder
    GrowthRates: Year-over-year growth and 2-year CAGR in percent
    RevenueRealism: Advisory realism warnings and recommendations
    OptimizationSuggestion: Revenue optimization hint
    RevenueProjection: Monthly/annual revenue of a set of streams
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Any, List, Optional, Sequence, Tuple

from gzplan.core.constants import (
    GROWTH_RATE_CEILINGS,
    INDUSTRY_BENCHMARKS,
    MAX_PLAUSIBLE_REVENUE_YEAR1,
    MIN_PLAUSIBLE_REVENUE_YEAR1,
    MONTHS_PER_YEAR,
    RevenueStreamType,
    YOUNG_BUSINESS_GROWTH_FACTOR,
    YOUNG_BUSINESS_MAX_AGE_YEARS,
)
from gzplan.core.money import (
    CONTEXT,
    CurrencyAmount,
    HUNDRED,
    ONE,
    ZERO,
    decimal_sqrt,
    round_percent,
    safe_divide,
    to_decimal,
)
from gzplan.utils.error_utils import InvalidInputError
from gzplan.utils.number_utils import amount_or_zero, member_or_default

logger = logging.getLogger(__name__)

HOCKEY_STICK_GROWTH_PCT = Decimal(100)


class RevenueStream:
    """
    A single revenue stream.

    ``monthly_quantities_year1`` always has exactly 12 entries: shorter input
    is padded with zeros, longer input is cut after month 12.

    Attributes:
        name: Stream name
        type: RevenueStreamType
        unit_price: Price per unit
        monthly_quantities_year1: 12 monthly quantities for year 1
        quantity_year2: Annual quantity for year 2
        quantity_year3: Annual quantity for year 3
        input_errors: Field-scoped input problems found while reading the data
    """

    def __init__(
        self,
        name: str,
        unit_price=None,
        monthly_quantities_year1: Optional[Sequence] = None,
        quantity_year2=None,
        quantity_year3=None,
        type: RevenueStreamType = RevenueStreamType.SERVICE,
        field_prefix: str = "revenue_stream",
    ):
        self.input_errors: List[InvalidInputError] = []
        self.name = name
        self.type = member_or_default(
            RevenueStreamType, type, f"{field_prefix}.type", self.input_errors, default=RevenueStreamType.SERVICE,
        )
        self.unit_price = CurrencyAmount(amount_or_zero(unit_price, f"{field_prefix}.unit_price", self.input_errors))

        raw_quantities = list(monthly_quantities_year1 or [])
        if len(raw_quantities) > MONTHS_PER_YEAR:
            logger.warning(f"Revenue stream '{name}' has {len(raw_quantities)} monthly quantities, using the first 12")
        raw_quantities = raw_quantities[:MONTHS_PER_YEAR]
        raw_quantities += [None] * (MONTHS_PER_YEAR - len(raw_quantities))

        self.monthly_quantities_year1: List[Decimal] = [
            amount_or_zero(q, f"{field_prefix}.monthly_quantities_year1[{i}]", self.input_errors)
            for i, q in enumerate(raw_quantities)
        ]
        self.quantity_year2 = amount_or_zero(quantity_year2, f"{field_prefix}.quantity_year2", self.input_errors)
        self.quantity_year3 = amount_or_zero(quantity_year3, f"{field_prefix}.quantity_year3", self.input_errors)

    def monthly_revenue_year1(self) -> List[CurrencyAmount]:
        return [self.unit_price * quantity for quantity in self.monthly_quantities_year1]

    def annual_quantity(self, year: int) -> Decimal:
        if year == 1:
            return sum(self.monthly_quantities_year1, ZERO)
        if year == 2:
            return self.quantity_year2
        if year == 3:
            return self.quantity_year3
        raise ValueError(f"Revenue is planned for years 1-3, got year {year}")

    def annual_revenue(self, year: int) -> CurrencyAmount:
        return self.unit_price * self.annual_quantity(year)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.value,
            "unit_price": self.unit_price.to_json(),
            "monthly_quantities_year1": [str(q) for q in self.monthly_quantities_year1],
            "quantity_year2": str(self.quantity_year2),
            "quantity_year3": str(self.quantity_year3),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], field_prefix: str = "revenue_stream") -> "RevenueStream":
        return cls(
            name=data.get("name", ""),
            unit_price=data.get("unit_price"),
            monthly_quantities_year1=data.get("monthly_quantities_year1"),
            quantity_year2=data.get("quantity_year2"),
            quantity_year3=data.get("quantity_year3"),
            type=data.get("type", RevenueStreamType.SERVICE),
            field_prefix=field_prefix,
        )


def monthly_revenue_year1(streams: List[RevenueStream]) -> List[CurrencyAmount]:
    """
    Total revenue per month of year 1 across all streams.

    Returns:
        Exactly 12 cent-rounded amounts (all zero for an empty stream list)
    """
    totals = []
    for month in range(MONTHS_PER_YEAR):
        total = CurrencyAmount.sum(s.unit_price * s.monthly_quantities_year1[month] for s in streams)
        totals.append(total.cents())
    return totals


def annual_revenue(streams: List[RevenueStream], year: int) -> CurrencyAmount:
    """Revenue of year 1, 2 or 3 across all streams."""
    return CurrencyAmount.sum(s.annual_revenue(year) for s in streams).cents()


@dataclass(frozen=True)
class GrowthRates:
    """Growth figures in percent (unrounded)."""

    year1_to_year2: Decimal
    year2_to_year3: Decimal
    cagr: Decimal

    def to_dict(self) -> Dict[str, str]:
        return {
            "year1_to_year2": str(round_percent(self.year1_to_year2)),
            "year2_to_year3": str(round_percent(self.year2_to_year3)),
            "cagr": str(round_percent(self.cagr)),
        }


def _growth_pct(previous: Decimal, current: Decimal) -> Decimal:
    if previous == ZERO:
        return ZERO
    return CONTEXT.multiply(safe_divide(CONTEXT.subtract(current, previous), previous), HUNDRED)


def growth_rates(revenue_year1, revenue_year2, revenue_year3) -> GrowthRates:
    """
    Year-over-year growth rates and the 2-year CAGR, all in percent.

    Each rate is 0 when its base year has no revenue.

    Examples:
        >>> growth_rates(50000, 200000, 800000).year1_to_year2
        Decimal('300')
    """
    r1 = to_decimal(revenue_year1)
    r2 = to_decimal(revenue_year2)
    r3 = to_decimal(revenue_year3)

    if r1 == ZERO:
        cagr = ZERO
    else:
        # (r3 / r1)^(1/2) - 1
        cagr = CONTEXT.multiply(CONTEXT.subtract(decimal_sqrt(safe_divide(r3, r1)), ONE), HUNDRED)

    return GrowthRates(
        year1_to_year2=_growth_pct(r1, r2),
        year2_to_year3=_growth_pct(r2, r3),
        cagr=cagr,
    )


def growth_ceiling(industry: Optional[str], business_age_years: int = 1) -> Decimal:
    """Maximum plausible yearly growth in percent; younger businesses get 1.5x headroom."""
    ceiling = GROWTH_RATE_CEILINGS.get((industry or "default").lower(), GROWTH_RATE_CEILINGS["default"])
    if business_age_years <= YOUNG_BUSINESS_MAX_AGE_YEARS:
        ceiling = CONTEXT.multiply(ceiling, YOUNG_BUSINESS_GROWTH_FACTOR)
    return ceiling


def check_growth_rate_realism(rate_pct, industry: Optional[str], business_age_years: int = 1) -> bool:
    return to_decimal(rate_pct) <= growth_ceiling(industry, business_age_years)


def is_hockey_stick(rates: GrowthRates) -> bool:
    """Two consecutive years of more than 100% growth."""
    return rates.year1_to_year2 > HOCKEY_STICK_GROWTH_PCT and rates.year2_to_year3 > HOCKEY_STICK_GROWTH_PCT


@dataclass(frozen=True)
class RevenueRealism:
    is_realistic: bool
    hockey_stick: bool
    warnings: Tuple[str, ...]
    recommendations: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_realistic": self.is_realistic,
            "hockey_stick": self.hockey_stick,
            "warnings": list(self.warnings),
            "recommendations": list(self.recommendations),
        }


def validate_revenue_realism(
    annual_revenues: Sequence,
    industry: Optional[str] = None,
    business_age_years: int = 1,
) -> RevenueRealism:
    """
    Advisory realism checks on the 3-year revenue plan.

    Never a hard failure: the result feeds recommendations, not the
    compliance gate. A single warning is still considered realistic.

    Args:
        annual_revenues: Revenue of years 1, 2 and 3
        industry: Industry key for the growth ceiling (e.g. "beratung", "software")
        business_age_years: Age of the business in years

    Returns:
        RevenueRealism
    """
    r1, r2, r3 = (to_decimal(r) for r in annual_revenues)
    rates = growth_rates(r1, r2, r3)
    industry_label = industry or "this industry"
    warnings = []
    recommendations = []

    for rate, base in ((rates.year1_to_year2, r1), (rates.year2_to_year3, r2)):
        if base > ZERO and not check_growth_rate_realism(rate, industry, business_age_years):
            warnings.append(f"Growth rate of {round_percent(rate, 1)}% is very optimistic for {industry_label}")
            recommendations.append("Review your market size and competitive situation")

    hockey_stick = is_hockey_stick(rates)
    if hockey_stick:
        warnings.append("Exponential growth over two years is very unlikely")
        recommendations.append("Plan for linear or moderate growth instead")

    if r1 > MAX_PLAUSIBLE_REVENUE_YEAR1:
        warnings.append("First-year revenue above 500,000 EUR is very ambitious")
        recommendations.append("Allow time for customer acquisition")
    if r1 < MIN_PLAUSIBLE_REVENUE_YEAR1:
        warnings.append("First-year revenue below 10,000 EUR is very low for a full-time business")
        recommendations.append("Check whether the business is economically viable")

    return RevenueRealism(
        is_realistic=len(warnings) <= 1,
        hockey_stick=hockey_stick,
        warnings=tuple(warnings),
        recommendations=tuple(recommendations),
    )


@dataclass(frozen=True)
class OptimizationSuggestion:
    category: str
    suggestion: str
    impact: str

    def to_dict(self) -> Dict[str, str]:
        return {"category": self.category, "suggestion": self.suggestion, "impact": self.impact}


def suggest_revenue_optimization(streams: List[RevenueStream]) -> List[OptimizationSuggestion]:
    """Pricing, volume, timing and mix hints for the revenue plan."""
    if not streams:
        return []

    suggestions = []

    average_price = safe_divide(sum((s.unit_price.value for s in streams), ZERO), len(streams))
    if average_price < 50:
        suggestions.append(OptimizationSuggestion(
            "pricing", "Low average prices; check the potential for price increases", "high"
        ))

    total_volume = sum((s.annual_quantity(1) for s in streams), ZERO)
    if total_volume < 100:
        suggestions.append(OptimizationSuggestion(
            "volume", "Low volumes; focus on customer growth", "high"
        ))

    for stream in streams:
        quantities = stream.monthly_quantities_year1
        if max(quantities) > min(quantities) * 3:
            suggestions.append(OptimizationSuggestion(
                "timing", f"Strong monthly swings in '{stream.name}'; consider smoothing the season", "medium"
            ))

    if len(streams) == 1:
        suggestions.append(OptimizationSuggestion(
            "mix", "Only one revenue stream; develop further streams for stability", "medium"
        ))

    return suggestions


def industry_benchmarks(industry: Optional[str]) -> Dict[str, Any]:
    """Typical growth and seasonality for an industry (falls back to the default row)."""
    return dict(INDUSTRY_BENCHMARKS.get((industry or "default").lower(), INDUSTRY_BENCHMARKS["default"]))


class RevenueProjection:
    """
    Revenue plan of a set of streams.

    Attributes:
        streams: Revenue streams
        monthly_year1: 12 monthly revenue totals of year 1
        annual: Revenue of years 1, 2 and 3
        growth: GrowthRates derived from ``annual``
    """

    def __init__(self, streams: List[RevenueStream]):
        self.streams = list(streams)
        self.monthly_year1 = monthly_revenue_year1(self.streams)
        self.annual = [annual_revenue(self.streams, year) for year in (1, 2, 3)]
        self.growth = growth_rates(*self.annual)

    def annual_revenue(self, year: int) -> CurrencyAmount:
        return self.annual[year - 1]

    def generated_revenue(self, month: int) -> CurrencyAmount:
        """
        Revenue generated in plan month ``month`` (1..36).

        Year 1 uses the monthly plan; years 2 and 3 spread the annual revenue
        evenly. Months outside 1..36 generate nothing.
        """
        if month < 1 or month > 3 * MONTHS_PER_YEAR:
            return CurrencyAmount.zero()
        if month <= MONTHS_PER_YEAR:
            return self.monthly_year1[month - 1]
        year = (month - 1) // MONTHS_PER_YEAR + 1
        return self.annual[year - 1] / MONTHS_PER_YEAR

    def realism(self, industry: Optional[str] = None, business_age_years: int = 1) -> RevenueRealism:
        return validate_revenue_realism(self.annual, industry, business_age_years)

    def optimization_suggestions(self) -> List[OptimizationSuggestion]:
        return suggest_revenue_optimization(self.streams)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "monthly_year1": [m.to_json() for m in self.monthly_year1],
            "annual": [a.to_json() for a in self.annual],
            "growth": self.growth.to_dict(),
        }
