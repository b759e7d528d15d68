"""
Utility modules for gzplan.

This package contains reusable helpers for input normalization, date
handling, rate conversions and error handling.
"""

from gzplan.utils.error_utils import (
    GZPlanError,
    InvalidInputError,
    error_handler,
    logger,
)

from gzplan.utils.number_utils import (
    normalize_amount,
    amount_or_zero,
    count_or_default,
    member_or_default,
)

from gzplan.utils.date_utils import (
    parse_date,
    month_start_dates,
    month_label,
)

from gzplan.utils.rate_utils import (
    annual_pct_to_decimal,
    decimal_to_annual_pct,
    annual_pct_to_monthly_decimal,
    days_to_months,
    normalize_rate_input,
    validate_rate_range,
    MONTHS_PER_YEAR,
    DAYS_PER_MONTH,
)

__all__ = [
    # Error handling
    "GZPlanError",
    "InvalidInputError",
    "error_handler",
    "logger",
    # Number normalization
    "normalize_amount",
    "amount_or_zero",
    "count_or_default",
    "member_or_default",
    # Date utilities
    "parse_date",
    "month_start_dates",
    "month_label",
    # Rate utilities
    "annual_pct_to_decimal",
    "decimal_to_annual_pct",
    "annual_pct_to_monthly_decimal",
    "days_to_months",
    "normalize_rate_input",
    "validate_rate_range",
    "MONTHS_PER_YEAR",
    "DAYS_PER_MONTH",
]

__version__ = "0.1.0"
