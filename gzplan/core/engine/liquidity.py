"""
Liquidity risk analysis for gzplan.

Statistical view of a simulated projection: lowest and average cash, how
volatile the balance is, and how the lowest balance compares with a reserve of
three months of operating outflows.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Any, List, Tuple

from gzplan.core.constants import MONTHS_PER_YEAR, RESERVE_MONTHS
from gzplan.core.engine.cash_flow import CashFlowProjection
from gzplan.core.money import CONTEXT, CurrencyAmount, ZERO, decimal_sqrt, safe_divide

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiquidityAnalysis:
    """
    Liquidity metrics of a projection; amounts in cents.

    Attributes:
        minimum_cash: Lowest ending cash
        minimum_month: Month of the lowest ending cash
        average_cash: Mean ending cash
        negative_months: Number of months ending below zero
        volatility: Population standard deviation of the ending balances
        recommended_reserve: Three times the average monthly operating outflow
        actual_reserve: Lowest ending cash, floored at zero
        reserve_shortfall: Missing amount up to the recommended reserve
        max_cash_need: Deepest overdraft (zero when cash never goes negative)
        quarterly_revenue: Average generated revenue per quarter of year 1
        seasonal_swing: Largest minus smallest quarterly average
    """

    minimum_cash: CurrencyAmount
    minimum_month: int
    average_cash: CurrencyAmount
    negative_months: int
    volatility: CurrencyAmount
    recommended_reserve: CurrencyAmount
    actual_reserve: CurrencyAmount
    reserve_shortfall: CurrencyAmount
    max_cash_need: CurrencyAmount
    quarterly_revenue: Tuple[CurrencyAmount, ...]
    seasonal_swing: CurrencyAmount

    @property
    def has_negative_liquidity(self) -> bool:
        return self.minimum_cash.is_negative()

    @property
    def smallest_quarter_revenue(self) -> CurrencyAmount:
        return min(self.quarterly_revenue)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "minimum_cash": self.minimum_cash.to_json(),
            "minimum_month": self.minimum_month,
            "average_cash": self.average_cash.to_json(),
            "negative_months": self.negative_months,
            "has_negative_liquidity": self.has_negative_liquidity,
            "volatility": self.volatility.to_json(),
            "recommended_reserve": self.recommended_reserve.to_json(),
            "actual_reserve": self.actual_reserve.to_json(),
            "reserve_shortfall": self.reserve_shortfall.to_json(),
            "max_cash_need": self.max_cash_need.to_json(),
            "quarterly_revenue": [q.to_json() for q in self.quarterly_revenue],
            "seasonal_swing": self.seasonal_swing.to_json(),
        }


def population_std_dev(values: List[CurrencyAmount]) -> Decimal:
    """Population standard deviation (divides by N, not N - 1)."""
    if not values:
        return ZERO
    mean = safe_divide(CurrencyAmount.sum(values), len(values))
    squared = ZERO
    for value in values:
        deviation = CONTEXT.subtract(value.value, mean)
        squared = CONTEXT.add(squared, CONTEXT.multiply(deviation, deviation))
    return decimal_sqrt(safe_divide(squared, len(values)))


def quarterly_averages(monthly: List[CurrencyAmount]) -> Tuple[CurrencyAmount, ...]:
    """Average per quarter of the first 12 months."""
    year1 = monthly[:MONTHS_PER_YEAR]
    return tuple(
        (CurrencyAmount.sum(year1[q * 3:q * 3 + 3]) / 3).cents()
        for q in range(4)
    )


def analyze(projection: CashFlowProjection) -> LiquidityAnalysis:
    """
    Compute liquidity metrics of a projection.

    Args:
        projection: CashFlowProjection from ``cash_flow.simulate``

    Returns:
        LiquidityAnalysis
    """
    balances = projection.ending_balances()
    horizon = len(balances)
    zero = CurrencyAmount.zero().cents()

    minimum = projection.minimum_cash
    average = (CurrencyAmount.sum(balances) / horizon).cents()
    negative_months = sum(1 for b in balances if b.is_negative())
    volatility = CurrencyAmount(population_std_dev(balances)).cents()

    average_operating = CurrencyAmount.sum(projection.operating_outflows()) / horizon
    recommended = (average_operating * RESERVE_MONTHS).cents()
    actual = minimum if minimum > zero else zero
    shortfall = recommended - actual
    if shortfall < zero:
        shortfall = zero
    max_cash_need = -minimum if minimum.is_negative() else zero

    quarters = quarterly_averages(projection.generated_revenue)
    swing = (max(quarters) - min(quarters)).cents()

    analysis = LiquidityAnalysis(
        minimum_cash=minimum,
        minimum_month=projection.minimum_month,
        average_cash=average,
        negative_months=negative_months,
        volatility=volatility,
        recommended_reserve=recommended,
        actual_reserve=actual,
        reserve_shortfall=shortfall.cents(),
        max_cash_need=max_cash_need,
        quarterly_revenue=quarters,
        seasonal_swing=swing,
    )
    logger.debug(f"Liquidity: minimum {minimum} (month {projection.minimum_month}), reserve shortfall {shortfall}")
    return analysis
