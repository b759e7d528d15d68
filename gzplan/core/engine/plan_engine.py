"""
Plan engine for gzplan.

Orchestrates the whole financial plan: capital requirement, financing
structure, revenue, costs and private withdrawal are evaluated independently,
loans are derived from the financing sources, and the cash-flow simulation,
liquidity analysis and compliance validation run on top. The engine is
stateless; evaluating the same input twice yields identical results.

Classes:
    PlanInput: Founder data of one plan, read from plain dictionaries
    PlanResult: Everything the presentation layer needs from one evaluation

Functions:
    evaluate: Run the full pipeline on a PlanInput
"""

import logging
from typing import Dict, Any, List, Optional

import pandas as pd

from gzplan.core.constants import HouseholdType, MAX_PROJECTION_MONTHS, MIN_PROJECTION_MONTHS
from gzplan.core.engine import cash_flow, compliance, liquidity
from gzplan.core.engine.cash_flow import CashFlowProjection, PaymentTerms, SeasonalityConfig, SimulationConfig
from gzplan.core.engine.compliance import ComplianceContext, ComplianceResult
from gzplan.core.engine.liquidity import LiquidityAnalysis
from gzplan.core.models.capital import CapitalRequirement
from gzplan.core.models.cost_plan import CostPlan, monthly_profits, self_sufficiency_month
from gzplan.core.models.financing import (
    FinancingRisk,
    FinancingSource,
    FinancingStructure,
    assess_risk,
    loans_from_sources,
    structure,
)
from gzplan.core.models.loan import Loan
from gzplan.core.models.private_withdrawal import HouseholdComparison, PrivateWithdrawal, SpendingAnalysis
from gzplan.core.models.revenue_stream import RevenueProjection, RevenueRealism, RevenueStream
from gzplan.core.money import CurrencyAmount
from gzplan.utils.error_utils import InvalidInputError, error_handler
from gzplan.utils.number_utils import amount_or_zero, count_or_default, member_or_default

logger = logging.getLogger(__name__)


class PlanInput:
    """
    Founder data of one business plan.

    Every section is optional; missing sections evaluate as empty (zero)
    sections. Invalid values are replaced by zero or the default and collected
    in ``input_errors``.

    Attributes:
        capital: CapitalRequirement
        financing_sources: List of FinancingSource
        private_withdrawal: PrivateWithdrawal
        revenue_streams: List of RevenueStream
        costs: CostPlan
        simulation: SimulationConfig (horizon, payment terms, seasonality, start date)
        industry: Industry key for growth ceilings and benchmarks
        business_age_years: Age of the business for the growth ceiling
        region: City for the regional living-cost adjustment
        household_type: HouseholdType for the living-cost comparison
        income: Optional monthly household income for the expense ratio
    """

    def __init__(
        self,
        capital: Optional[CapitalRequirement] = None,
        financing_sources: Optional[List[FinancingSource]] = None,
        private_withdrawal: Optional[PrivateWithdrawal] = None,
        revenue_streams: Optional[List[RevenueStream]] = None,
        costs: Optional[CostPlan] = None,
        simulation: Optional[SimulationConfig] = None,
        industry: Optional[str] = None,
        business_age_years: int = 1,
        region: Optional[str] = None,
        household_type: HouseholdType = HouseholdType.SINGLE,
        income=None,
        input_errors: Optional[List[InvalidInputError]] = None,
    ):
        self.capital = capital or CapitalRequirement()
        self.financing_sources = list(financing_sources or [])
        self.private_withdrawal = private_withdrawal or PrivateWithdrawal()
        self.revenue_streams = list(revenue_streams or [])
        self.costs = costs or CostPlan()
        self.simulation = simulation or SimulationConfig()
        self.industry = industry
        self.business_age_years = business_age_years
        self.region = region
        self.input_errors: List[InvalidInputError] = list(input_errors or [])
        self.household_type = member_or_default(
            HouseholdType, household_type, "household_type", self.input_errors, default=HouseholdType.SINGLE,
        )
        self.income = None if income is None else amount_or_zero(income, "income", self.input_errors)

    def all_input_errors(self) -> List[InvalidInputError]:
        errors = list(self.input_errors)
        errors += self.capital.input_errors
        for source in self.financing_sources:
            errors += source.input_errors
        errors += self.private_withdrawal.input_errors
        for stream in self.revenue_streams:
            errors += stream.input_errors
        errors += self.costs.input_errors
        return errors

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlanInput":
        """
        Build a plan input from plain data (e.g. a decoded JSON request).

        Keys: capital, financing_sources, private_withdrawal, revenue_streams,
        costs, payment_terms, seasonality, months, start_date, industry,
        business_age_years, region, household_type, income.
        """
        errors: List[InvalidInputError] = []

        months = count_or_default(data.get("months"), "months", errors, default=MIN_PROJECTION_MONTHS)
        if not MIN_PROJECTION_MONTHS <= months <= MAX_PROJECTION_MONTHS:
            clamped = min(max(months, MIN_PROJECTION_MONTHS), MAX_PROJECTION_MONTHS)
            logger.warning(f"Projection horizon {months} out of range, using {clamped}")
            months = clamped

        terms_data = data.get("payment_terms") or {}
        defaults = PaymentTerms()
        payment_terms = PaymentTerms(
            customer_payment_days=count_or_default(
                terms_data.get("customer_payment_days"), "payment_terms.customer_payment_days",
                errors, default=defaults.customer_payment_days,
            ),
            supplier_payment_days=count_or_default(
                terms_data.get("supplier_payment_days"), "payment_terms.supplier_payment_days",
                errors, default=defaults.supplier_payment_days,
            ),
            variable_cost_payment_delay=count_or_default(
                terms_data.get("variable_cost_payment_delay"), "payment_terms.variable_cost_payment_delay",
                errors, default=defaults.variable_cost_payment_delay,
            ),
        )

        seasonality = None
        seasonality_data = data.get("seasonality")
        if seasonality_data:
            multipliers = seasonality_data.get("quarterly_multipliers")
            if multipliers is not None and (not isinstance(multipliers, (list, tuple)) or len(multipliers) != 4):
                error = InvalidInputError(
                    "seasonality.quarterly_multipliers", multipliers, "expected exactly 4 quarterly multipliers",
                )
                logger.warning(f"Ignoring {error.field}: {error.reason}; using the industry pattern")
                errors.append(error)
                multipliers = None
            if multipliers is not None:
                multipliers = tuple(
                    amount_or_zero(m, f"seasonality.quarterly_multipliers[{i}]", errors)
                    for i, m in enumerate(multipliers)
                )
            seasonality = SeasonalityConfig(
                industry=seasonality_data.get("industry") or data.get("industry"),
                quarterly_multipliers=multipliers,
            )

        simulation = SimulationConfig(
            months=months,
            payment_terms=payment_terms,
            seasonality=seasonality,
            start_date=data.get("start_date"),
        )

        return cls(
            capital=CapitalRequirement.from_dict(data.get("capital")),
            financing_sources=[
                FinancingSource.from_dict(s, field_prefix=f"financing_sources[{i}]")
                for i, s in enumerate(data.get("financing_sources") or [])
            ],
            private_withdrawal=PrivateWithdrawal.from_dict(data.get("private_withdrawal")),
            revenue_streams=[
                RevenueStream.from_dict(s, field_prefix=f"revenue_streams[{i}]")
                for i, s in enumerate(data.get("revenue_streams") or [])
            ],
            costs=CostPlan.from_dict(data.get("costs")),
            simulation=simulation,
            industry=data.get("industry"),
            business_age_years=count_or_default(data.get("business_age_years"), "business_age_years", errors, default=1),
            region=data.get("region"),
            household_type=data.get("household_type") or HouseholdType.SINGLE,
            income=data.get("income"),
            input_errors=errors,
        )


class PlanResult:
    """
    Structured result of one plan evaluation.

    Attributes:
        capital_requirement_total: Total capital requirement
        capital: CapitalRequirement the total was computed from
        financing: FinancingStructure
        financing_risk: FinancingRisk (advisory)
        financing_source_errors: Plausibility errors per financing source
        loans: Loans derived from the financing sources
        revenue: RevenueProjection (monthly year 1, annual years 1-3, growth rates)
        revenue_realism: RevenueRealism (advisory)
        costs: CostPlan
        monthly_profits: Profit per month for up to 36 months
        self_sufficiency_month: First month with non-negative profit, or None
        withdrawal: PrivateWithdrawal used in the simulation
        withdrawal_analysis: SpendingAnalysis
        household_comparison: HouseholdComparison
        regional_withdrawal: Region-adjusted withdrawal, when a region is given
        projection: CashFlowProjection
        liquidity: LiquidityAnalysis
        compliance: ComplianceResult
        input_errors: InvalidInputError list collected while reading the input
    """

    def __init__(self, **kwargs):
        self.capital_requirement_total: CurrencyAmount = kwargs["capital_requirement_total"]
        self.capital: CapitalRequirement = kwargs["capital"]
        self.financing: FinancingStructure = kwargs["financing"]
        self.financing_risk: FinancingRisk = kwargs["financing_risk"]
        self.financing_source_errors: List[str] = kwargs["financing_source_errors"]
        self.loans: List[Loan] = kwargs["loans"]
        self.revenue: RevenueProjection = kwargs["revenue"]
        self.revenue_realism: RevenueRealism = kwargs["revenue_realism"]
        self.costs: CostPlan = kwargs["costs"]
        self.monthly_profits: List[CurrencyAmount] = kwargs["monthly_profits"]
        self.self_sufficiency_month: Optional[int] = kwargs["self_sufficiency_month"]
        self.withdrawal: PrivateWithdrawal = kwargs["withdrawal"]
        self.withdrawal_analysis: SpendingAnalysis = kwargs["withdrawal_analysis"]
        self.household_comparison: HouseholdComparison = kwargs["household_comparison"]
        self.regional_withdrawal: Optional[PrivateWithdrawal] = kwargs.get("regional_withdrawal")
        self.projection: CashFlowProjection = kwargs["projection"]
        self.liquidity: LiquidityAnalysis = kwargs["liquidity"]
        self.compliance: ComplianceResult = kwargs["compliance"]
        self.input_errors: List[InvalidInputError] = kwargs.get("input_errors", [])

    @property
    def is_export_ready(self) -> bool:
        return self.compliance.is_export_ready

    @property
    def has_negative_liquidity(self) -> bool:
        return self.projection.has_negative_liquidity

    def to_dataframe(self) -> pd.DataFrame:
        return self.projection.to_dataframe()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "capital_requirement_total": self.capital_requirement_total.to_json(),
            "capital": self.capital.to_dict(),
            "financing": self.financing.to_dict(),
            "financing_risk": self.financing_risk.to_dict(),
            "financing_source_errors": list(self.financing_source_errors),
            "loans": [loan.to_dict() for loan in self.loans],
            "revenue": self.revenue.to_dict(),
            "revenue_realism": self.revenue_realism.to_dict(),
            "revenue_suggestions": [s.to_dict() for s in self.revenue.optimization_suggestions()],
            "costs": self.costs.to_dict(),
            "monthly_profits": [p.to_json() for p in self.monthly_profits],
            "self_sufficiency_month": self.self_sufficiency_month,
            "private_withdrawal": self.withdrawal.to_dict(),
            "withdrawal_analysis": self.withdrawal_analysis.to_dict(),
            "household_comparison": self.household_comparison.to_dict(),
            "regional_withdrawal": self.regional_withdrawal.to_dict() if self.regional_withdrawal else None,
            "cash_flow": self.projection.to_dict(),
            "liquidity": self.liquidity.to_dict(),
            "compliance": self.compliance.to_dict(),
            "input_errors": [e.to_dict() for e in self.input_errors],
        }


@error_handler
def evaluate(plan: PlanInput) -> PlanResult:
    """
    Evaluate a business plan end to end.

    Args:
        plan: PlanInput

    Returns:
        PlanResult; business problems (negative liquidity, late
        self-sufficiency, unrealistic growth) are reported inside the result,
        never raised
    """
    capital_total = plan.capital.total()
    financing = structure(plan.financing_sources, capital_total)
    financing_source_errors = [error for source in plan.financing_sources for error in source.validate()]

    revenue = RevenueProjection(plan.revenue_streams)
    profits = monthly_profits(plan.costs, revenue)
    sufficiency_month = self_sufficiency_month(profits)

    loans = loans_from_sources(plan.financing_sources)

    projection = cash_flow.simulate(
        revenue=revenue,
        cost_plan=plan.costs,
        investment_total=plan.capital.investment_total(),
        total_financing=financing.total,
        loans=loans,
        monthly_withdrawal=plan.private_withdrawal.monthly,
        config=plan.simulation,
    )
    liquidity_analysis = liquidity.analyze(projection)
    compliance_result = compliance.validate(
        liquidity_analysis,
        ComplianceContext(self_sufficiency_month=sufficiency_month),
    )

    regional = plan.private_withdrawal.adjust_for_region(plan.region) if plan.region else None
    input_errors = plan.all_input_errors()
    if input_errors:
        logger.warning(f"Plan evaluated with {len(input_errors)} invalid input field(s) replaced by defaults")

    return PlanResult(
        capital_requirement_total=capital_total,
        capital=plan.capital,
        financing=financing,
        financing_risk=assess_risk(financing),
        financing_source_errors=financing_source_errors,
        loans=loans,
        revenue=revenue,
        revenue_realism=revenue.realism(plan.industry, plan.business_age_years),
        costs=plan.costs,
        monthly_profits=profits,
        self_sufficiency_month=sufficiency_month,
        withdrawal=plan.private_withdrawal,
        withdrawal_analysis=plan.private_withdrawal.analyze(plan.income),
        household_comparison=plan.private_withdrawal.compare(plan.household_type),
        regional_withdrawal=regional,
        projection=projection,
        liquidity=liquidity_analysis,
        compliance=compliance_result,
        input_errors=input_errors,
    )


def evaluate_dict(data: Dict[str, Any]) -> PlanResult:
    """Convenience wrapper: ``evaluate(PlanInput.from_dict(data))``."""
    return evaluate(PlanInput.from_dict(data))
