"""
Date utilities for gzplan.

The engine itself works on month indexes (1..36). Dates only appear when the
presentation layer asks for a calendar view of a projection, anchored on the
planned founding date.

Key Features:
- Parsing of ISO and German (DD.MM.YYYY) dates
- Month-start normalization
- Calendar month sequences for projection tables
"""

from datetime import datetime, date
from typing import List, Union

import pandas as pd
from dateutil.relativedelta import relativedelta

from gzplan.utils.error_utils import error_handler


@error_handler
def parse_date(
    date_input: Union[str, datetime, date, pd.Timestamp],
    normalize_to_month_start: bool = True,
) -> pd.Timestamp:
    """
    Parse a founding/plan date into a pandas Timestamp.

    Args:
        date_input: Date as string, datetime, date or Timestamp
        normalize_to_month_start: If True, sets day to 1

    Returns:
        pd.Timestamp: Normalized timestamp

    Raises:
        ValueError: If the string matches no supported format
        TypeError: If input type is not supported

    Examples:
        >>> parse_date("2025-03-15")
        Timestamp('2025-03-01 00:00:00')
        >>> parse_date("15.03.2025")
        Timestamp('2025-03-01 00:00:00')
    """
    if date_input is None:
        raise ValueError("Date input cannot be None")

    if isinstance(date_input, pd.Timestamp):
        result = date_input
    elif isinstance(date_input, (datetime, date)):
        result = pd.Timestamp(date_input)
    elif isinstance(date_input, str):
        result = _parse_date_string(date_input.strip())
    else:
        raise TypeError(f"Unsupported date input type: {type(date_input)}")

    if normalize_to_month_start:
        result = result.replace(day=1)

    return result


def _parse_date_string(date_str: str) -> pd.Timestamp:
    if not date_str:
        raise ValueError("Date string cannot be empty")

    format_patterns = [
        "%Y-%m-%d",
        "%Y/%m/%d",
        "%d.%m.%Y",
        "%d.%m.%y",
        "%m.%Y",
        "%Y-%m",
    ]

    for format_str in format_patterns:
        try:
            return pd.Timestamp(datetime.strptime(date_str, format_str))
        except ValueError:
            continue

    raise ValueError(
        f"Unable to parse date string '{date_str}'. Supported formats include: YYYY-MM-DD, DD.MM.YYYY, MM.YYYY"
    )


def month_start_dates(start_date: Union[str, datetime, date, pd.Timestamp], months: int) -> List[pd.Timestamp]:
    """Month-start dates for plan months 1..months, month 1 being the founding month."""
    start = parse_date(start_date, normalize_to_month_start=True)
    return [start + x * relativedelta(months=1) for x in range(months)]


def month_label(start_date: Union[str, datetime, date, pd.Timestamp], month: int) -> str:
    """'MM/YYYY' label of plan month ``month`` (1-based)."""
    start = parse_date(start_date, normalize_to_month_start=True)
    return (start + relativedelta(months=month - 1)).strftime("%m/%Y")
