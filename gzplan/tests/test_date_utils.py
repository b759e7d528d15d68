"""
Test suite for date utilities.
"""

from datetime import date, datetime

import pandas as pd
import pytest

from gzplan.utils.date_utils import month_label, month_start_dates, parse_date
from gzplan.utils.error_utils import GZPlanError


def test_parse_date_iso_format():
    assert parse_date("2025-03-15") == pd.Timestamp("2025-03-01")


def test_parse_date_german_format():
    assert parse_date("15.03.2025") == pd.Timestamp("2025-03-01")
    assert parse_date("03.2025") == pd.Timestamp("2025-03-01")


def test_parse_date_without_normalization():
    assert parse_date("2025-03-15", normalize_to_month_start=False) == pd.Timestamp("2025-03-15")


def test_parse_date_objects():
    assert parse_date(date(2025, 3, 15)) == pd.Timestamp("2025-03-01")
    assert parse_date(datetime(2025, 3, 15, 12, 30)) == pd.Timestamp("2025-03-01 12:30")
    assert parse_date(pd.Timestamp("2025-03-15")) == pd.Timestamp("2025-03-01")


def test_parse_date_invalid_raises():
    with pytest.raises(GZPlanError):
        parse_date("next tuesday")
    with pytest.raises(GZPlanError):
        parse_date(None)


def test_month_start_dates():
    dates = month_start_dates("2025-11-20", 3)
    assert dates == [pd.Timestamp("2025-11-01"), pd.Timestamp("2025-12-01"), pd.Timestamp("2026-01-01")]


def test_month_label():
    assert month_label("2025-11-20", 1) == "11/2025"
    assert month_label("2025-11-20", 3) == "01/2026"
    assert month_label("2025-01-01", 36) == "12/2027"
