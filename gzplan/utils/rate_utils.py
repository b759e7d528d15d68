"""
Rate conversion utilities for financial calculations.

This module provides standardized functions for converting between the rate
formats used throughout the planning engine.

Conventions:
- All user inputs are annual rates as percentages (e.g., 5.0 = 5%)
- All calculations use decimal rates (e.g., 0.05 = 5%)
- Monthly rates are derived from annual rates: annual_decimal / 12
- Variable naming: *_rate_annual_pct, *_rate_monthly_decimal, etc.
- Everything is Decimal; binary floats never enter a calculation
"""

from decimal import Decimal
from typing import Union

from gzplan.core.money import CONTEXT, HUNDRED, safe_divide, to_decimal
from gzplan.utils.number_utils import normalize_amount

MONTHS_PER_YEAR = 12
DAYS_PER_MONTH = 30


def annual_pct_to_decimal(rate_pct: Union[Decimal, int, str]) -> Decimal:
    """
    Convert annual percentage rate to decimal format.

    Examples:
        >>> annual_pct_to_decimal(5)
        Decimal('0.05')
    """
    return safe_divide(to_decimal(rate_pct), HUNDRED)


def decimal_to_annual_pct(rate_decimal: Union[Decimal, int, str]) -> Decimal:
    """
    Convert decimal rate to annual percentage format.

    Examples:
        >>> decimal_to_annual_pct(Decimal("0.05"))
        Decimal('5.00')
    """
    return CONTEXT.multiply(to_decimal(rate_decimal), HUNDRED)


def annual_pct_to_monthly_decimal(rate_pct: Union[Decimal, int, str]) -> Decimal:
    """
    Convert annual percentage rate directly to monthly decimal rate.

    Examples:
        >>> annual_pct_to_monthly_decimal(6)
        Decimal('0.005')
    """
    return safe_divide(annual_pct_to_decimal(rate_pct), MONTHS_PER_YEAR)


def days_to_months(days: int) -> int:
    """
    Whole months needed to cover a payment term given in days (30-day months, rounded up).

    Examples:
        >>> days_to_months(45)
        2
        >>> days_to_months(30)
        1
        >>> days_to_months(0)
        0
    """
    if days <= 0:
        return 0
    return -(-int(days) // DAYS_PER_MONTH)


def normalize_rate_input(rate_input) -> Decimal:
    """
    Normalize rate input from various formats to a Decimal percentage.

    Handles strings with percent signs and decimal commas ("4,5 %").

    Raises:
        InvalidInputError: If the rate cannot be read as a non-negative number

    Examples:
        >>> normalize_rate_input("5,5%")
        Decimal('5.5')
        >>> normalize_rate_input(7)
        Decimal('7')
    """
    return normalize_amount(rate_input, field="interest_rate")


def validate_rate_range(rate_pct, min_pct=Decimal(0), max_pct=Decimal(50)) -> bool:
    """
    Check that a loan rate percentage is within plausible bounds for a start-up loan.

    Examples:
        >>> validate_rate_range(Decimal("4.5"))
        True
        >>> validate_rate_range(Decimal("60"))
        False
    """
    return to_decimal(min_pct) <= to_decimal(rate_pct) <= to_decimal(max_pct)
