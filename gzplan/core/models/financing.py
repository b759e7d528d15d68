"""
Financing models for gzplan.

A start-up is financed from several sources: own capital, the
Gründungszuschuss grant, bank and promotional loans, participations and so on.
This module classifies them into equity and debt, derives the financing
structure against the capital requirement and turns interest-bearing sources
into annuity loans for the cash-flow simulation.

Classes:
    FinancingSource: One funding source as entered by the founder
    FinancingStructure: Equity/debt totals, ratios and the financing gap
    FinancingRisk: Advisory risk assessment of a financing structure
    GruendungszuschussAmount: Grant amounts for both funding phases
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Any, List, Optional, Tuple

from gzplan.core.constants import (
    FinancingStatus,
    FinancingType,
    GZ_MAX_GRANT,
    GZ_PHASE1_MONTHS,
    GZ_PHASE2_MONTHS,
    GZ_SOCIAL_SECURITY_MONTHLY,
    RiskLevel,
)
from gzplan.core.models.loan import Loan
from gzplan.core.money import CurrencyAmount, ZERO, percentage, round_percent, to_decimal
from gzplan.utils.error_utils import InvalidInputError
from gzplan.utils.number_utils import amount_or_zero, count_or_default, member_or_default
from gzplan.utils.rate_utils import validate_rate_range

logger = logging.getLogger(__name__)


class FinancingSource:
    """
    A single financing source.

    Attributes:
        type: FinancingType of the source
        label: Display name, e.g. "Sparkasse Gründerkredit"
        amount: Amount provided
        interest_rate: Optional annual interest rate as percentage
        term_months: Optional repayment term in months
        status: FinancingStatus (secured, applied, planned)
        input_errors: Field-scoped input problems found while reading the data
    """

    def __init__(
        self,
        type: FinancingType,
        label: str = "",
        amount=None,
        interest_rate=None,
        term_months=None,
        status: FinancingStatus = FinancingStatus.PLANNED,
        field_prefix: str = "financing_source",
    ):
        self.input_errors: List[InvalidInputError] = []
        self.type = member_or_default(
            FinancingType, type, f"{field_prefix}.type", self.input_errors, default=FinancingType.OTHER,
        )
        self.label = label or self.type.value
        self.amount = CurrencyAmount(amount_or_zero(amount, f"{field_prefix}.amount", self.input_errors))
        self.interest_rate: Optional[Decimal] = None
        if interest_rate is not None and not (isinstance(interest_rate, str) and not interest_rate.strip()):
            self.interest_rate = amount_or_zero(interest_rate, f"{field_prefix}.interest_rate", self.input_errors)
        self.term_months: Optional[int] = count_or_default(term_months, f"{field_prefix}.term_months", self.input_errors)
        self.status = member_or_default(
            FinancingStatus, status, f"{field_prefix}.status", self.input_errors, default=FinancingStatus.PLANNED,
        )

    @property
    def is_equity(self) -> bool:
        return self.type.is_equity

    @property
    def is_debt(self) -> bool:
        return not self.type.is_equity

    @property
    def is_repayable(self) -> bool:
        """True when the source carries a rate and a term and therefore generates debt service."""
        return (
            self.interest_rate is not None
            and self.term_months is not None
            and self.term_months > 0
            and self.amount > ZERO
        )

    def to_loan(self) -> Optional[Loan]:
        if not self.is_repayable:
            return None
        return Loan(self.label, self.amount, self.interest_rate, self.term_months)

    def validate(self) -> List[str]:
        """Plausibility errors of this source (empty list when valid)."""
        errors = []
        if self.amount <= ZERO:
            errors.append(f"{self.label}: amount must be greater than 0")
        if self.interest_rate is not None and not validate_rate_range(self.interest_rate):
            errors.append(f"{self.label}: interest rate must be between 0% and 50%")
        if self.term_months is not None and self.term_months <= 0:
            errors.append(f"{self.label}: term must be positive")
        if self.type == FinancingType.GRANT and self.amount > GZ_MAX_GRANT:
            errors.append(f"{self.label}: Gründungszuschuss can be at most about 25,000 EUR")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "label": self.label,
            "amount": self.amount.to_json(),
            "interest_rate": str(self.interest_rate) if self.interest_rate is not None else None,
            "term_months": self.term_months,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], field_prefix: str = "financing_source") -> "FinancingSource":
        return cls(
            type=data.get("type", FinancingType.OTHER),
            label=data.get("label", ""),
            amount=data.get("amount"),
            interest_rate=data.get("interest_rate"),
            term_months=data.get("term_months"),
            status=data.get("status", FinancingStatus.PLANNED),
            field_prefix=field_prefix,
        )


@dataclass(frozen=True)
class FinancingStructure:
    """Derived financing structure; percentages are 0 when there is no financing at all."""

    total: CurrencyAmount
    equity_total: CurrencyAmount
    debt_total: CurrencyAmount
    equity_pct: Decimal
    debt_pct: Decimal
    capital_requirement: CurrencyAmount
    financing_gap: CurrencyAmount
    totals_by_type: Dict[str, CurrencyAmount] = field(default_factory=dict)

    @property
    def has_gap(self) -> bool:
        return self.financing_gap > ZERO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total.to_json(),
            "equity_total": self.equity_total.to_json(),
            "debt_total": self.debt_total.to_json(),
            "equity_pct": str(round_percent(self.equity_pct)),
            "debt_pct": str(round_percent(self.debt_pct)),
            "capital_requirement": self.capital_requirement.to_json(),
            "financing_gap": self.financing_gap.to_json(),
            "totals_by_type": {k: v.to_json() for k, v in self.totals_by_type.items()},
        }


def structure(sources: List[FinancingSource], capital_requirement) -> FinancingStructure:
    """
    Aggregate financing sources against the capital requirement.

    Always returns a structure, also for an empty source list.

    Args:
        sources: Financing sources
        capital_requirement: Total capital requirement

    Returns:
        FinancingStructure; financing_gap > 0 is a shortfall, < 0 a surplus
    """
    equity_total = CurrencyAmount.sum(s.amount for s in sources if s.is_equity)
    debt_total = CurrencyAmount.sum(s.amount for s in sources if s.is_debt)
    total = equity_total + debt_total
    requirement = CurrencyAmount(capital_requirement)

    totals_by_type: Dict[str, CurrencyAmount] = {}
    for source in sources:
        key = source.type.value
        totals_by_type[key] = totals_by_type.get(key, CurrencyAmount.zero()) + source.amount

    return FinancingStructure(
        total=total.cents(),
        equity_total=equity_total.cents(),
        debt_total=debt_total.cents(),
        equity_pct=percentage(equity_total, total),
        debt_pct=percentage(debt_total, total),
        capital_requirement=requirement.cents(),
        financing_gap=(requirement - total).cents(),
        totals_by_type={k: v.cents() for k, v in totals_by_type.items()},
    )


@dataclass(frozen=True)
class FinancingRisk:
    level: RiskLevel
    risk_factors: Tuple[str, ...]
    recommendations: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level.value,
            "risk_factors": list(self.risk_factors),
            "recommendations": list(self.recommendations),
        }


def assess_risk(financing: FinancingStructure) -> FinancingRisk:
    """
    Classify the financing risk from equity ratio, debt ratio and financing gap.

    Advisory only; the result never blocks a plan.
    """
    factors = []
    recommendations = []
    equity_pct = financing.equity_pct
    debt_pct = financing.debt_pct
    gap = financing.financing_gap.value
    requirement = financing.capital_requirement.value

    if equity_pct < 15:
        factors.append("Very low equity ratio (<15%)")
        recommendations.append("Increase equity or reduce the capital requirement")
    elif equity_pct < 25:
        factors.append("Low equity ratio (<25%)")
        recommendations.append("Arrange collateral or guarantors for loans")

    if debt_pct > 85:
        factors.append("Very high debt ratio (>85%)")
        recommendations.append("Reduce debt or look for alternative financing")
    elif debt_pct > 75:
        factors.append("High debt ratio (>75%)")
        recommendations.append("Plan repayments conservatively")

    if gap > ZERO:
        gap_pct = percentage(gap, requirement)
        if gap_pct > 20:
            factors.append(f"Large financing gap ({round_percent(gap_pct, 1)}%)")
            recommendations.append("Open up additional financing sources")
        elif gap_pct > 10:
            factors.append(f"Financing gap ({round_percent(gap_pct, 1)}%)")
            recommendations.append("Prepare a fallback plan for the financing gap")

    if equity_pct <= 10 or debt_pct >= 90 or gap > requirement * Decimal("0.3"):
        level = RiskLevel.CRITICAL
    elif equity_pct < 15 or debt_pct > 85 or gap > requirement * Decimal("0.2"):
        level = RiskLevel.HIGH
    elif equity_pct < 20 or debt_pct > 75 or gap > requirement * Decimal("0.1"):
        level = RiskLevel.MEDIUM
    else:
        level = RiskLevel.LOW

    return FinancingRisk(level=level, risk_factors=tuple(factors), recommendations=tuple(recommendations))


@dataclass(frozen=True)
class GruendungszuschussAmount:
    phase1_monthly: CurrencyAmount
    phase1_total: CurrencyAmount
    phase2_monthly: CurrencyAmount
    phase2_total: CurrencyAmount
    total: CurrencyAmount

    def to_dict(self) -> Dict[str, str]:
        return {
            "phase1_monthly": self.phase1_monthly.to_json(),
            "phase1_total": self.phase1_total.to_json(),
            "phase2_monthly": self.phase2_monthly.to_json(),
            "phase2_total": self.phase2_total.to_json(),
            "total": self.total.to_json(),
        }


def gruendungszuschuss(previous_alg1, phase1_months: int = GZ_PHASE1_MONTHS, phase2_months: int = GZ_PHASE2_MONTHS) -> GruendungszuschussAmount:
    """
    Grant amounts from the founder's previous unemployment benefit (ALG I).

    Phase 1 pays ALG I plus a 300 EUR social security lump sum per month,
    phase 2 the lump sum only.

    Examples:
        >>> gruendungszuschuss(1500).total
        CurrencyAmount('13500.00')
    """
    phase1_monthly = CurrencyAmount(to_decimal(previous_alg1)) + GZ_SOCIAL_SECURITY_MONTHLY
    phase1_total = phase1_monthly * phase1_months
    phase2_monthly = CurrencyAmount(GZ_SOCIAL_SECURITY_MONTHLY)
    phase2_total = phase2_monthly * phase2_months

    return GruendungszuschussAmount(
        phase1_monthly=phase1_monthly.cents(),
        phase1_total=phase1_total.cents(),
        phase2_monthly=phase2_monthly.cents(),
        phase2_total=phase2_total.cents(),
        total=(phase1_total + phase2_total).cents(),
    )


def loans_from_sources(sources: List[FinancingSource]) -> List[Loan]:
    """Annuity loans for every source that carries a rate and a term."""
    loans = []
    for source in sources:
        loan = source.to_loan()
        if loan is not None:
            logger.debug(f"Loan from '{source.label}': {loan.principal} over {loan.term_months} months")
            loans.append(loan)
    return loans
