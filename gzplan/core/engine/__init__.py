"""
gzplan Core Engine Package.

This package contains the simulation and validation engines that run on top
of the planning models.

Modules:
    cash_flow: Month-by-month cash-flow simulation
    liquidity: Liquidity risk metrics
    compliance: Export gates (blockers and warnings)
    plan_engine: End-to-end plan evaluation
"""

from gzplan.core.engine.cash_flow import (
    CashFlowMonth,
    CashFlowProjection,
    PaymentTerms,
    SeasonalityConfig,
    SimulationConfig,
    simulate,
)
from gzplan.core.engine.liquidity import LiquidityAnalysis, analyze
from gzplan.core.engine.compliance import ComplianceContext, ComplianceIssue, ComplianceResult, validate
from gzplan.core.engine.plan_engine import PlanInput, PlanResult, evaluate, evaluate_dict

__all__ = [
    "CashFlowMonth",
    "CashFlowProjection",
    "PaymentTerms",
    "SeasonalityConfig",
    "SimulationConfig",
    "simulate",
    "LiquidityAnalysis",
    "analyze",
    "ComplianceContext",
    "ComplianceIssue",
    "ComplianceResult",
    "validate",
    "PlanInput",
    "PlanResult",
    "evaluate",
    "evaluate_dict",
]

__version__ = "0.1.0"
