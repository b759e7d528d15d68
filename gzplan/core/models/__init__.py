"""
gzplan Core Models Package.

This package contains the planning models a founder fills in: capital
requirement, financing sources, loans, revenue streams, costs and the private
withdrawal.

Modules:
    capital: CapitalRequirement and start-up running costs
    financing: FinancingSource, FinancingStructure, risk assessment, Gründungszuschuss
    loan: Annuity loan payment and amortization schedule
    revenue_stream: RevenueStream, RevenueProjection, growth and realism checks
    cost_plan: CostPlan, monthly profits and self-sufficiency month
    private_withdrawal: PrivateWithdrawal, regional adjustment and benchmarks
"""

from gzplan.core.models.capital import CapitalRequirement, RunningCosts, startup_running_costs

from gzplan.core.models.financing import (
    FinancingSource,
    FinancingStructure,
    FinancingRisk,
    GruendungszuschussAmount,
    structure,
    assess_risk,
    gruendungszuschuss,
    loans_from_sources,
)

from gzplan.core.models.loan import Loan, LoanPayment, ScheduleRow, payment, schedule, total_debt_service

from gzplan.core.models.revenue_stream import (
    RevenueStream,
    RevenueProjection,
    GrowthRates,
    RevenueRealism,
    OptimizationSuggestion,
    monthly_revenue_year1,
    annual_revenue,
    growth_rates,
    validate_revenue_realism,
)

from gzplan.core.models.cost_plan import CostPlan, monthly_profits, self_sufficiency_month

from gzplan.core.models.private_withdrawal import (
    PrivateWithdrawal,
    SpendingAnalysis,
    HouseholdComparison,
    analyze_spending,
    compare_with_averages,
)

__all__ = [
    # Capital
    "CapitalRequirement",
    "RunningCosts",
    "startup_running_costs",
    # Financing
    "FinancingSource",
    "FinancingStructure",
    "FinancingRisk",
    "GruendungszuschussAmount",
    "structure",
    "assess_risk",
    "gruendungszuschuss",
    "loans_from_sources",
    # Loans
    "Loan",
    "LoanPayment",
    "ScheduleRow",
    "payment",
    "schedule",
    "total_debt_service",
    # Revenue
    "RevenueStream",
    "RevenueProjection",
    "GrowthRates",
    "RevenueRealism",
    "OptimizationSuggestion",
    "monthly_revenue_year1",
    "annual_revenue",
    "growth_rates",
    "validate_revenue_realism",
    # Costs
    "CostPlan",
    "monthly_profits",
    "self_sufficiency_month",
    # Private withdrawal
    "PrivateWithdrawal",
    "SpendingAnalysis",
    "HouseholdComparison",
    "analyze_spending",
    "compare_with_averages",
]

__version__ = "0.1.0"
