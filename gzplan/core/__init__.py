"""
Core modules for gzplan.

This package contains the exact money type, domain constants, the planning
models and the simulation/validation engines.
"""

from gzplan.core.constants import (
    FinancingType,
    FinancingStatus,
    RevenueStreamType,
    Severity,
    HouseholdType,
    Sustainability,
    RiskLevel,
    SELF_SUFFICIENCY_DEADLINE_MONTH,
    MONTHS_PER_YEAR,
)
from gzplan.core.money import CurrencyAmount, as_amount

__all__ = [
    "FinancingType",
    "FinancingStatus",
    "RevenueStreamType",
    "Severity",
    "HouseholdType",
    "Sustainability",
    "RiskLevel",
    "SELF_SUFFICIENCY_DEADLINE_MONTH",
    "MONTHS_PER_YEAR",
    "CurrencyAmount",
    "as_amount",
]

__version__ = "0.1.0"
