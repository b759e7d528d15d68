"""
Tests for the cash-flow simulation and the liquidity analysis.
"""

from decimal import Decimal

import pandas as pd
import pytest

from gzplan.core.engine import liquidity
from gzplan.core.engine.cash_flow import PaymentTerms, SeasonalityConfig, SimulationConfig, simulate
from gzplan.core.engine.liquidity import population_std_dev, quarterly_averages
from gzplan.core.models.cost_plan import CostPlan
from gzplan.core.models.loan import Loan
from gzplan.core.models.revenue_stream import RevenueProjection, RevenueStream
from gzplan.core.money import CurrencyAmount


@pytest.fixture
def revenue():
    """10,000 EUR per month in every plan year."""
    return RevenueProjection([
        RevenueStream("Beratung", unit_price=1000, monthly_quantities_year1=[10] * 12,
                      quantity_year2=120, quantity_year3=120)
    ])


@pytest.fixture
def cost_plan():
    """2,000 EUR fixed per month; variable costs at 20% of revenue."""
    return CostPlan(fixed_monthly={"rent": 2000}, variable_year1=24000, variable_year2=24000, variable_year3=24000)


def _simulate(revenue, cost_plan, config=None, loans=None, investment=9000, financing=30000, withdrawal=1500):
    return simulate(
        revenue=revenue,
        cost_plan=cost_plan,
        investment_total=investment,
        total_financing=financing,
        loans=loans or [],
        monthly_withdrawal=withdrawal,
        config=config,
    )


class TestSimulation:

    def test_first_months(self, revenue, cost_plan):
        projection = _simulate(revenue, cost_plan)
        m1, m2, m3, m4 = projection.months[:4]

        assert m1.beginning_cash == Decimal("30000")
        assert m1.financing_inflow == Decimal("30000")
        assert m1.revenue_inflow == Decimal("0")
        assert m1.operating_outflow == Decimal("2000")
        assert m1.ending_cash == Decimal("53500")

        # 45-day customer terms: revenue of month 1 arrives in month 3
        assert m2.revenue_inflow == Decimal("0")
        assert m3.revenue_inflow == Decimal("10000")
        # 30-day variable cost terms: month 1 variable costs are paid in month 2
        assert m2.operating_outflow == Decimal("4000")
        assert m2.ending_cash == Decimal("45000")
        assert m3.ending_cash == Decimal("46500")
        assert m4.ending_cash == Decimal("51000")

    def test_balance_invariants(self, revenue, cost_plan):
        projection = _simulate(revenue, cost_plan, config=SimulationConfig(months=36))
        assert projection.horizon == 36

        previous = None
        for record in projection.months:
            assert record.ending_cash == record.beginning_cash + record.net_cash_flow
            assert record.net_cash_flow == record.total_inflows - record.total_outflows
            if previous is not None:
                assert record.beginning_cash == previous.ending_cash
                assert record.financing_inflow == Decimal("0")
            previous = record

    def test_investment_spread_over_three_months(self, revenue, cost_plan):
        projection = _simulate(revenue, cost_plan, investment=10000)
        outflows = [m.investment_outflow for m in projection.months]
        assert outflows[:3] == [Decimal("3333.33"), Decimal("3333.33"), Decimal("3333.34")]
        assert all(o == Decimal("0") for o in outflows[3:])

    def test_no_payment_delay(self, revenue, cost_plan):
        terms = PaymentTerms(customer_payment_days=0, variable_cost_payment_delay=0)
        projection = _simulate(revenue, cost_plan, config=SimulationConfig(payment_terms=terms))
        assert projection.months[0].revenue_inflow == Decimal("10000")
        assert projection.months[0].operating_outflow == Decimal("4000")

    def test_debt_service_stops_after_term(self, revenue, cost_plan):
        loans = [Loan("Bank", 12000, 0, 12)]
        projection = _simulate(revenue, cost_plan, config=SimulationConfig(months=24), loans=loans)
        assert projection.months[11].debt_service_outflow == Decimal("1000")
        assert projection.months[12].debt_service_outflow == Decimal("0")

    def test_seasonality(self, revenue, cost_plan):
        seasonality = SeasonalityConfig(quarterly_multipliers=("1.2", "1", "1", "0.8"))
        projection = _simulate(revenue, cost_plan, config=SimulationConfig(seasonality=seasonality))
        assert projection.generated_revenue[0] == Decimal("12000")
        assert projection.generated_revenue[11] == Decimal("8000")

    def test_industry_seasonality_pattern(self):
        assert SeasonalityConfig(industry="restaurant").factor(7) == Decimal("1.2")
        assert SeasonalityConfig(industry="unbekannt").factor(7) == Decimal("1.0")
        assert SeasonalityConfig().factor(13) == Decimal("1.0")

    def test_seasonality_needs_four_quarters(self):
        with pytest.raises(ValueError):
            SeasonalityConfig(quarterly_multipliers=(1, 1, 1))

    @pytest.mark.parametrize("months", [11, 37])
    def test_horizon_out_of_range(self, months):
        with pytest.raises(ValueError):
            SimulationConfig(months=months)

    def test_minimum_cash_tracking(self, revenue, cost_plan):
        projection = _simulate(revenue, cost_plan)
        assert projection.minimum_cash == Decimal("45000")
        assert projection.minimum_month == 2
        assert not projection.has_negative_liquidity

    def test_negative_liquidity(self, revenue, cost_plan):
        projection = _simulate(revenue, cost_plan, financing=1000, withdrawal=5000)
        assert projection.has_negative_liquidity
        assert projection.minimum_cash.is_negative()

    def test_repeated_simulation_is_identical(self, revenue, cost_plan):
        first = _simulate(revenue, cost_plan).to_dict()
        second = _simulate(revenue, cost_plan).to_dict()
        assert first == second

    def test_dataframe_with_calendar(self, revenue, cost_plan):
        config = SimulationConfig(start_date="2025-04-15")
        df = _simulate(revenue, cost_plan, config=config).to_dataframe()

        assert isinstance(df, pd.DataFrame)
        assert len(df) == 12
        assert df["label"].iloc[0] == "04/2025"
        assert df["label"].iloc[11] == "03/2026"
        assert df["ending_cash"].iloc[0] == Decimal("53500")

    def test_dataframe_without_calendar(self, revenue, cost_plan):
        df = _simulate(revenue, cost_plan).to_dataframe()
        assert "date" not in df.columns
        assert list(df["month"]) == list(range(1, 13))


class TestLiquidity:

    def test_healthy_projection(self, revenue, cost_plan):
        analysis = liquidity.analyze(_simulate(revenue, cost_plan))

        assert analysis.minimum_cash == Decimal("45000")
        assert analysis.negative_months == 0
        # operating outflow: 2,000 in month 1, 4,000 afterwards
        assert analysis.recommended_reserve == Decimal("11500")
        assert analysis.actual_reserve == Decimal("45000")
        assert analysis.reserve_shortfall == Decimal("0")
        assert analysis.max_cash_need == Decimal("0")
        assert analysis.seasonal_swing == Decimal("0")

    def test_negative_projection(self, revenue, cost_plan):
        projection = _simulate(revenue, cost_plan, financing=1000, withdrawal=5000)
        analysis = liquidity.analyze(projection)

        assert analysis.has_negative_liquidity
        assert analysis.negative_months > 0
        assert analysis.actual_reserve == Decimal("0")
        assert analysis.max_cash_need == -analysis.minimum_cash
        assert analysis.reserve_shortfall == analysis.recommended_reserve

    def test_population_std_dev(self):
        values = [CurrencyAmount(v) for v in (2, 4, 4, 4, 5, 5, 7, 9)]
        assert population_std_dev(values) == Decimal("2")
        assert population_std_dev([]) == Decimal("0")

    def test_quarterly_averages(self):
        monthly = [CurrencyAmount(v) for v in (1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12)]
        assert quarterly_averages(monthly) == (
            Decimal("2"), Decimal("5"), Decimal("8"), Decimal("11"),
        )
