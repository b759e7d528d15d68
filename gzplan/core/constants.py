"""
Core constants and enumerations for gzplan.

This module defines the constant values, enumerations and domain tables used
throughout the planning engine: payment-term defaults for German B2B business,
seasonality patterns, growth ceilings, regional cost-of-living factors and
household spending averages.
"""

from decimal import Decimal
from enum import Enum

# Projection constants
MONTHS_PER_YEAR = 12
MIN_PROJECTION_MONTHS = 12
MAX_PROJECTION_MONTHS = 36
INVESTMENT_SPREAD_MONTHS = 3

# Gründungszuschuss rule: the plan must be self-sufficient by this month.
# Fixed by the Bundesagentur für Arbeit, deliberately not a parameter anywhere.
SELF_SUFFICIENCY_DEADLINE_MONTH = 6


class FinancingType(str, Enum):
    """Financing source types"""
    EQUITY = "equity"
    GRANT = "grant"
    BANK_LOAN = "bank_loan"
    SUBSIDIZED_LOAN = "subsidized_loan"
    PARTICIPATION = "participation"
    CROWDFUNDING = "crowdfunding"
    FRIENDS_FAMILY = "friends_family"
    OTHER = "other"

    @property
    def is_equity(self) -> bool:
        return self in EQUITY_FINANCING_TYPES


EQUITY_FINANCING_TYPES = frozenset({
    FinancingType.EQUITY,
    FinancingType.GRANT,  # Gründungszuschuss is a grant, not debt
    FinancingType.PARTICIPATION,
    FinancingType.CROWDFUNDING,  # reward-based
})


class FinancingStatus(str, Enum):
    """Where a financing source stands"""
    SECURED = "secured"
    APPLIED = "applied"
    PLANNED = "planned"


class RevenueStreamType(str, Enum):
    """Revenue stream types"""
    PRODUCT = "product"
    SERVICE = "service"
    SUBSCRIPTION = "subscription"
    COMMISSION = "commission"
    OTHER = "other"


class Severity(str, Enum):
    """Compliance issue severity"""
    BLOCKER = "blocker"
    WARNING = "warning"


class HouseholdType(str, Enum):
    """Household types for living-cost benchmarks"""
    SINGLE = "single"
    PARTNER = "partner"
    FAMILY = "family"


class Sustainability(str, Enum):
    """Private withdrawal sustainability classes"""
    SUSTAINABLE = "sustainable"
    TIGHT = "tight"
    UNSUSTAINABLE = "unsustainable"


class RiskLevel(str, Enum):
    """Financing risk levels"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Payment terms (days), German B2B averages
DEFAULT_CUSTOMER_PAYMENT_DAYS = 45
DEFAULT_SUPPLIER_PAYMENT_DAYS = 30
DEFAULT_VARIABLE_COST_PAYMENT_DAYS = 30

# Quarterly revenue multipliers (Q1..Q4)
SEASONALITY_PATTERNS = {
    "services": (Decimal("1.1"), Decimal("0.9"), Decimal("0.8"), Decimal("1.1")),
    "ecommerce": (Decimal("0.9"), Decimal("1.0"), Decimal("1.0"), Decimal("1.1")),
    "handwerk": (Decimal("0.8"), Decimal("1.1"), Decimal("1.1"), Decimal("1.0")),
    "restaurant": (Decimal("0.9"), Decimal("1.1"), Decimal("1.2"), Decimal("0.8")),
    "default": (Decimal("1.0"), Decimal("1.0"), Decimal("1.0"), Decimal("1.0")),
}

# Year-over-year growth ceilings in percent
GROWTH_RATE_CEILINGS = {
    "beratung": Decimal(30),
    "ecommerce": Decimal(100),
    "handwerk": Decimal(25),
    "restaurant": Decimal(15),
    "software": Decimal(150),
    "default": Decimal(50),
}
YOUNG_BUSINESS_MAX_AGE_YEARS = 2
YOUNG_BUSINESS_GROWTH_FACTOR = Decimal("1.5")

# Year-1 revenue sanity band
MIN_PLAUSIBLE_REVENUE_YEAR1 = Decimal(10000)
MAX_PLAUSIBLE_REVENUE_YEAR1 = Decimal(500000)

INDUSTRY_BENCHMARKS = {
    "beratung": {"growth_year1_to_2": 25, "growth_year2_to_3": 15, "seasonality": "low"},
    "ecommerce": {"growth_year1_to_2": 75, "growth_year2_to_3": 40, "seasonality": "high (Q4)"},
    "handwerk": {"growth_year1_to_2": 20, "growth_year2_to_3": 15, "seasonality": "medium (weather)"},
    "restaurant": {"growth_year1_to_2": 10, "growth_year2_to_3": 8, "seasonality": "medium (tourism)"},
    "default": {"growth_year1_to_2": 30, "growth_year2_to_3": 20, "seasonality": "unknown"},
}

# City cost-of-living multipliers
REGIONAL_FACTORS = {
    "München": Decimal("1.4"),
    "Frankfurt": Decimal("1.35"),
    "Stuttgart": Decimal("1.25"),
    "Hamburg": Decimal("1.2"),
    "Berlin": Decimal("1.15"),
    "Köln": Decimal("1.15"),
    "Düsseldorf": Decimal("1.2"),
    "Hannover": Decimal("1.05"),
    "Nürnberg": Decimal("1.05"),
    "Bremen": Decimal("1.0"),
    "Dresden": Decimal("0.9"),
    "Leipzig": Decimal("0.9"),
    "default": Decimal("0.95"),
}

# Share of the regional deviation each living-cost category follows.
# Housing follows it fully; insurance, communication and savings not at all.
REGIONAL_SENSITIVITY = {
    "housing": Decimal("1"),
    "food": Decimal("0.7"),
    "insurance": Decimal("0"),
    "mobility": Decimal("0.5"),
    "communication": Decimal("0"),
    "other": Decimal("0.6"),
    "savings": Decimal("0"),
}

# Monthly household averages for Germany (2024)
HOUSEHOLD_AVERAGES = {
    HouseholdType.SINGLE: {
        "housing": Decimal(800),
        "food": Decimal(400),
        "insurance": Decimal(300),
        "mobility": Decimal(250),
        "communication": Decimal(80),
        "other": Decimal(400),
        "savings": Decimal(200),
    },
    HouseholdType.PARTNER: {
        "housing": Decimal(1200),
        "food": Decimal(600),
        "insurance": Decimal(450),
        "mobility": Decimal(350),
        "communication": Decimal(120),
        "other": Decimal(600),
        "savings": Decimal(300),
    },
    HouseholdType.FAMILY: {
        "housing": Decimal(1500),
        "food": Decimal(800),
        "insurance": Decimal(600),
        "mobility": Decimal(450),
        "communication": Decimal(150),
        "other": Decimal(800),
        "savings": Decimal(200),
    },
}
HOUSEHOLD_DEVIATION_BAND_PCT = Decimal(20)

# Gründungszuschuss: phase 1 pays ALG I + social security lump sum, phase 2 the lump sum only
GZ_SOCIAL_SECURITY_MONTHLY = Decimal(300)
GZ_PHASE1_MONTHS = 6
GZ_PHASE2_MONTHS = 9
GZ_MAX_GRANT = Decimal(25000)

# Liquidity thresholds
RESERVE_MONTHS = 3
TIGHT_RESERVE_RATIO = Decimal("0.5")
HIGH_VOLATILITY_RATIO = Decimal("0.3")
SEASONAL_SWING_RATIO = Decimal("0.3")
