"""
End-to-end tests of the plan engine.
"""

import json
from decimal import Decimal

import pandas as pd

from gzplan.core.constants import HouseholdType
from gzplan.core.engine import compliance
from gzplan.core.engine.plan_engine import PlanInput, evaluate, evaluate_dict


class TestUnderfundedPlan:

    def test_negative_liquidity_blocks_export(self, underfunded_plan):
        result = evaluate_dict(underfunded_plan)

        assert result.capital_requirement_total == Decimal("60000")
        assert result.financing.total == Decimal("25000")
        assert result.financing.financing_gap == Decimal("35000")
        assert result.has_negative_liquidity
        assert not result.is_export_ready

    def test_cash_path(self, underfunded_plan):
        projection = evaluate_dict(underfunded_plan).projection
        endings = [m.ending_cash for m in projection.months]

        assert endings[:5] == [
            Decimal("34000"), Decimal("18000"), Decimal("5000"), Decimal("2000"), Decimal("-1000"),
        ]
        assert projection.minimum_month == 12
        assert projection.minimum_cash == Decimal("-22000")

    def test_blockers(self, underfunded_plan):
        result = evaluate_dict(underfunded_plan)
        codes = [issue.code for issue in result.compliance.blockers]

        assert codes == [
            compliance.NEGATIVE_LIQUIDITY,
            compliance.INSUFFICIENT_STARTUP_CAPITAL,
            compliance.SELF_SUFFICIENCY_DEADLINE,
        ]
        assert result.self_sufficiency_month is None


class TestHealthyPlan:

    def test_capital_and_financing(self, healthy_plan):
        result = evaluate_dict(healthy_plan)

        assert result.capital_requirement_total == Decimal("48200")
        assert result.financing.total == Decimal("55000")
        assert result.financing.equity_total == Decimal("40000")
        assert not result.financing.has_gap
        assert [loan.id for loan in result.loans] == ["KfW StartGeld"]

    def test_no_negative_liquidity(self, healthy_plan):
        result = evaluate_dict(healthy_plan)

        assert not result.has_negative_liquidity
        assert result.self_sufficiency_month == 1
        assert result.is_export_ready
        assert result.revenue.monthly_year1[0] == Decimal("4000")
        assert result.revenue.monthly_year1[11] == Decimal("12500")

    def test_debt_service_in_cash_flow(self, healthy_plan):
        result = evaluate_dict(healthy_plan)
        monthly_payment = result.loans[0].get_monthly_payment()
        assert result.projection.months[0].debt_service_outflow == monthly_payment

    def test_table(self, healthy_plan):
        df = evaluate_dict(healthy_plan).to_dataframe()
        assert isinstance(df, pd.DataFrame)
        assert len(df) == 12
        assert df["label"].iloc[0] == "03/2025"

    def test_evaluation_is_idempotent(self, healthy_plan):
        assert evaluate_dict(healthy_plan).to_dict() == evaluate_dict(healthy_plan).to_dict()

    def test_to_dict_is_json_serializable(self, healthy_plan):
        data = evaluate_dict(healthy_plan).to_dict()
        encoded = json.dumps(data)

        assert data["capital_requirement_total"] == "48200.00"
        assert data["compliance"]["is_export_ready"] is True
        assert '"monthly_payment"' in encoded


class TestPlanInput:

    def test_empty_plan(self):
        result = evaluate(PlanInput())

        assert result.capital_requirement_total == Decimal("0")
        assert result.projection.horizon == 12
        assert not result.has_negative_liquidity
        # no revenue and no costs: profit 0 counts as self-sufficient
        assert result.self_sufficiency_month == 1

    def test_invalid_fields_are_reported(self, healthy_plan):
        healthy_plan["capital"]["equipment"] = "zwanzigtausend"
        healthy_plan["revenue_streams"][0]["unit_price"] = "teuer"
        result = evaluate_dict(healthy_plan)

        fields = [e.field for e in result.input_errors]
        assert "capital.equipment" in fields
        assert "revenue_streams[0].unit_price" in fields
        assert result.capital_requirement_total == Decimal("28200")

    def test_horizon_is_clamped(self, healthy_plan):
        healthy_plan["months"] = 48
        assert evaluate_dict(healthy_plan).projection.horizon == 36

        healthy_plan["months"] = 6
        assert evaluate_dict(healthy_plan).projection.horizon == 12

    def test_payment_terms_from_dict(self):
        plan = PlanInput.from_dict({"payment_terms": {"customer_payment_days": "14"}})
        terms = plan.simulation.payment_terms
        assert terms.customer_delay_months == 1
        assert terms.variable_delay_months == 1

    def test_seasonality_from_industry(self):
        plan = PlanInput.from_dict({"industry": "restaurant", "seasonality": {"industry": None, "quarterly_multipliers": None}})
        assert plan.simulation.seasonality is not None
        assert plan.simulation.seasonality.factor(7) == Decimal("1.2")

    def test_region_adjustment_is_informational(self, healthy_plan):
        healthy_plan["region"] = "München"
        result = evaluate_dict(healthy_plan)

        assert result.regional_withdrawal.monthly > result.withdrawal.monthly
        assert result.projection.months[0].private_withdrawal == result.withdrawal.monthly

    def test_locale_formatted_income(self, healthy_plan):
        healthy_plan["income"] = "3.500,00 €"
        result = evaluate_dict(healthy_plan)

        assert result.input_errors == []
        assert Decimal("62") < result.withdrawal_analysis.expense_ratio < Decimal("63")

    def test_unreadable_income_is_ignored(self, healthy_plan):
        healthy_plan["income"] = "genug"
        result = evaluate_dict(healthy_plan)

        assert [e.field for e in result.input_errors] == ["income"]
        assert result.withdrawal_analysis.expense_ratio is None

    def test_unknown_choices_fall_back_to_defaults(self, healthy_plan):
        healthy_plan["revenue_streams"][0]["type"] = "abo"
        healthy_plan["financing_sources"][0]["type"] = "lottery"
        healthy_plan["financing_sources"][1]["status"] = "maybe"
        healthy_plan["household_type"] = "wg"
        result = evaluate_dict(healthy_plan)

        fields = [e.field for e in result.input_errors]
        assert "household_type" in fields
        assert "financing_sources[0].type" in fields
        assert "financing_sources[1].status" in fields
        assert "revenue_streams[0].type" in fields
        assert result.capital_requirement_total == Decimal("48200")

    def test_choices_are_case_insensitive(self, healthy_plan):
        healthy_plan["household_type"] = "Family"
        plan = PlanInput.from_dict(healthy_plan)

        assert plan.household_type == HouseholdType.FAMILY
        assert plan.all_input_errors() == []

    def test_wrong_number_of_quarters_uses_industry_pattern(self):
        plan = PlanInput.from_dict({
            "industry": "restaurant",
            "seasonality": {"quarterly_multipliers": [1, 2, 3]},
        })

        assert [e.field for e in plan.input_errors] == ["seasonality.quarterly_multipliers"]
        assert plan.simulation.seasonality.quarterly_multipliers is None
        assert plan.simulation.seasonality.factor(7) == Decimal("1.2")
