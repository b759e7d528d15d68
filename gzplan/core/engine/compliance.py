"""
Compliance validation for gzplan.

Applies the Gründungszuschuss gates of the Bundesagentur für Arbeit to a
liquidity analysis. Blockers prevent the business plan from being exported;
warnings are shown but do not block. Business conditions are never raised as
exceptions: every finding is a ``ComplianceIssue`` in the result, accompanied
by a boolean flag so callers can rebuild their UI state without parsing
messages.

Classes:
    ComplianceContext: Explicit inputs and warning thresholds of the validator
    ComplianceIssue: One blocker or warning
    ComplianceResult: Ordered blockers and warnings, flags and export readiness
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Any, Optional, Tuple

from gzplan.core.constants import (
    HIGH_VOLATILITY_RATIO,
    SEASONAL_SWING_RATIO,
    SELF_SUFFICIENCY_DEADLINE_MONTH,
    Severity,
    TIGHT_RESERVE_RATIO,
)
from gzplan.core.engine.liquidity import LiquidityAnalysis

logger = logging.getLogger(__name__)

NEGATIVE_LIQUIDITY = "NEGATIVE_LIQUIDITY"
INSUFFICIENT_STARTUP_CAPITAL = "INSUFFICIENT_STARTUP_CAPITAL"
SELF_SUFFICIENCY_DEADLINE = "SELF_SUFFICIENCY_DEADLINE"
TIGHT_RESERVE = "TIGHT_RESERVE"
HIGH_VOLATILITY = "HIGH_VOLATILITY"
SEASONAL_SWING = "SEASONAL_SWING"


@dataclass(frozen=True)
class ComplianceContext:
    """
    Explicit validator inputs.

    The self-sufficiency deadline itself is not part of the context: month 6
    is fixed by regulation and lives in ``SELF_SUFFICIENCY_DEADLINE_MONTH``.

    Attributes:
        self_sufficiency_month: First month with non-negative profit, None if never reached
        tight_reserve_ratio: Warn when the actual reserve is below this share of the recommended one
        volatility_ratio: Warn when volatility exceeds this share of the average cash
        seasonal_swing_ratio: Warn when the quarterly revenue swing exceeds this share of the weakest quarter
    """

    self_sufficiency_month: Optional[int]
    tight_reserve_ratio: Decimal = TIGHT_RESERVE_RATIO
    volatility_ratio: Decimal = HIGH_VOLATILITY_RATIO
    seasonal_swing_ratio: Decimal = SEASONAL_SWING_RATIO


@dataclass(frozen=True)
class ComplianceIssue:
    severity: Severity
    code: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"severity": self.severity.value, "code": self.code, "message": self.message}


@dataclass(frozen=True)
class ComplianceResult:
    blockers: Tuple[ComplianceIssue, ...]
    warnings: Tuple[ComplianceIssue, ...]
    flags: Dict[str, bool]

    @property
    def is_export_ready(self) -> bool:
        return len(self.blockers) == 0

    @property
    def has_negative_liquidity(self) -> bool:
        return self.flags[NEGATIVE_LIQUIDITY]

    def codes(self) -> Tuple[str, ...]:
        return tuple(issue.code for issue in self.blockers + self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_export_ready": self.is_export_ready,
            "blockers": [issue.to_dict() for issue in self.blockers],
            "warnings": [issue.to_dict() for issue in self.warnings],
            "flags": dict(self.flags),
        }


def _blocker(code: str, message: str) -> ComplianceIssue:
    return ComplianceIssue(Severity.BLOCKER, code, message)


def _warning(code: str, message: str) -> ComplianceIssue:
    return ComplianceIssue(Severity.WARNING, code, message)


def validate(liquidity: LiquidityAnalysis, context: ComplianceContext) -> ComplianceResult:
    """
    Apply the export gates to a liquidity analysis.

    Blockers, in order: negative liquidity in any month; minimum cash below
    minus the recommended reserve; self-sufficiency after month 6 or never.
    Warnings, in order: tight reserve, high volatility, seasonal swing.

    Args:
        liquidity: LiquidityAnalysis of the projection
        context: ComplianceContext with the self-sufficiency month and warning thresholds

    Returns:
        ComplianceResult; ``is_export_ready`` is True iff there are no blockers
    """
    blockers = []
    warnings = []

    negative_liquidity = liquidity.has_negative_liquidity
    if negative_liquidity:
        blockers.append(_blocker(
            NEGATIVE_LIQUIDITY,
            f"Cash balance falls to {liquidity.minimum_cash} EUR in month {liquidity.minimum_month}; "
            f"liquidity must never be negative",
        ))

    insufficient_capital = liquidity.minimum_cash < -liquidity.recommended_reserve
    if insufficient_capital:
        blockers.append(_blocker(
            INSUFFICIENT_STARTUP_CAPITAL,
            f"Minimum cash of {liquidity.minimum_cash} EUR is below the negative recommended reserve "
            f"of {liquidity.recommended_reserve} EUR; start-up capital is structurally insufficient",
        ))

    month = context.self_sufficiency_month
    misses_deadline = month is None or month > SELF_SUFFICIENCY_DEADLINE_MONTH
    if misses_deadline:
        if month is None:
            message = "Self-sufficiency is not reached within the plan horizon"
        else:
            message = f"Self-sufficiency is reached in month {month}"
        blockers.append(_blocker(
            SELF_SUFFICIENCY_DEADLINE,
            f"{message}; it must be reached by month {SELF_SUFFICIENCY_DEADLINE_MONTH}",
        ))

    tight_reserve = liquidity.actual_reserve < liquidity.recommended_reserve * context.tight_reserve_ratio
    if tight_reserve:
        warnings.append(_warning(
            TIGHT_RESERVE,
            f"Liquidity reserve of {liquidity.actual_reserve} EUR is below "
            f"{int(context.tight_reserve_ratio * 100)}% of the recommended {liquidity.recommended_reserve} EUR",
        ))

    high_volatility = liquidity.volatility > liquidity.average_cash * context.volatility_ratio
    if high_volatility:
        warnings.append(_warning(
            HIGH_VOLATILITY,
            f"Cash balance fluctuates strongly (standard deviation {liquidity.volatility} EUR "
            f"against an average of {liquidity.average_cash} EUR)",
        ))

    seasonal_swing = liquidity.seasonal_swing > liquidity.smallest_quarter_revenue * context.seasonal_swing_ratio
    if seasonal_swing:
        warnings.append(_warning(
            SEASONAL_SWING,
            f"Quarterly revenue swings by {liquidity.seasonal_swing} EUR; increase the liquidity buffer",
        ))

    flags = {
        NEGATIVE_LIQUIDITY: negative_liquidity,
        INSUFFICIENT_STARTUP_CAPITAL: insufficient_capital,
        SELF_SUFFICIENCY_DEADLINE: misses_deadline,
        TIGHT_RESERVE: tight_reserve,
        HIGH_VOLATILITY: high_volatility,
        SEASONAL_SWING: seasonal_swing,
    }

    result = ComplianceResult(blockers=tuple(blockers), warnings=tuple(warnings), flags=flags)
    if not result.is_export_ready:
        logger.info(f"Plan is not export ready: {', '.join(issue.code for issue in result.blockers)}")
    return result
