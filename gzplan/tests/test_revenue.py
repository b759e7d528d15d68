"""
Tests for revenue streams, projections and realism checks.
"""

from decimal import Decimal

from gzplan.core.constants import RevenueStreamType
from gzplan.core.models.revenue_stream import (
    RevenueProjection,
    RevenueStream,
    growth_ceiling,
    growth_rates,
    industry_benchmarks,
    is_hockey_stick,
    monthly_revenue_year1,
    validate_revenue_realism,
)


def _stream(**overrides):
    data = {
        "name": "Beratung",
        "unit_price": 1000,
        "monthly_quantities_year1": [10] * 12,
        "quantity_year2": 150,
        "quantity_year3": 180,
    }
    data.update(overrides)
    return RevenueStream(**data)


class TestRevenueStream:

    def test_short_quantity_plan_is_padded(self):
        stream = _stream(monthly_quantities_year1=[5, 5, 5])
        assert len(stream.monthly_quantities_year1) == 12
        assert stream.monthly_quantities_year1[3:] == [Decimal("0")] * 9
        assert stream.annual_revenue(1) == Decimal("15000")

    def test_long_quantity_plan_is_truncated(self):
        stream = _stream(monthly_quantities_year1=[1] * 14)
        assert len(stream.monthly_quantities_year1) == 12
        assert stream.annual_quantity(1) == Decimal("12")

    def test_invalid_quantity_recorded(self):
        stream = _stream(monthly_quantities_year1=["zehn"] + [10] * 11, field_prefix="revenue_streams[0]")
        assert stream.monthly_quantities_year1[0] == Decimal("0")
        assert [e.field for e in stream.input_errors] == ["revenue_streams[0].monthly_quantities_year1[0]"]

    def test_from_dict(self):
        stream = RevenueStream.from_dict({
            "name": "Shop",
            "type": "product",
            "unit_price": "19,90",
            "monthly_quantities_year1": [100] * 12,
        })
        assert stream.type == RevenueStreamType.PRODUCT
        assert stream.unit_price == Decimal("19.90")
        assert stream.annual_revenue(1) == Decimal("23880")
        assert stream.annual_revenue(2) == Decimal("0")


class TestProjection:

    def test_monthly_revenue_of_no_streams(self):
        totals = monthly_revenue_year1([])
        assert len(totals) == 12
        assert all(t == Decimal("0") for t in totals)

    def test_monthly_revenue_sums_streams(self):
        totals = monthly_revenue_year1([_stream(), _stream(unit_price=50, monthly_quantities_year1=[2] * 12)])
        assert totals[0] == Decimal("10100")

    def test_generated_revenue_per_month(self):
        projection = RevenueProjection([_stream()])
        assert projection.generated_revenue(1) == Decimal("10000")
        assert projection.generated_revenue(13) == Decimal("12500")
        assert projection.generated_revenue(25) == Decimal("15000")
        assert projection.generated_revenue(0) == Decimal("0")
        assert projection.generated_revenue(37) == Decimal("0")

    def test_annual_and_growth(self):
        projection = RevenueProjection([_stream()])
        assert projection.annual_revenue(1) == Decimal("120000")
        assert projection.annual_revenue(2) == Decimal("150000")
        assert projection.growth.year1_to_year2 == Decimal("25")
        assert projection.growth.year2_to_year3 == Decimal("20")

    def test_single_stream_suggests_mix(self):
        suggestions = RevenueProjection([_stream()]).optimization_suggestions()
        assert [s.category for s in suggestions] == ["mix"]

    def test_no_suggestions_without_streams(self):
        assert RevenueProjection([]).optimization_suggestions() == []


class TestGrowthAndRealism:

    def test_growth_rates_of_hockey_stick(self):
        rates = growth_rates(50000, 200000, 800000)
        assert rates.year1_to_year2 == Decimal("300")
        assert rates.year2_to_year3 == Decimal("300")
        assert rates.cagr == Decimal("300")
        assert is_hockey_stick(rates)

    def test_growth_rates_zero_base(self):
        rates = growth_rates(0, 100, 200)
        assert rates.year1_to_year2 == Decimal("0")
        assert rates.year2_to_year3 == Decimal("100")
        assert rates.cagr == Decimal("0")

    def test_growth_rates_of_flat_revenue(self):
        rates = growth_rates(Decimal("42000.50"), Decimal("42000.50"), Decimal("42000.50"))
        assert rates.year1_to_year2 == Decimal(0)
        assert rates.year2_to_year3 == Decimal(0)
        assert rates.cagr == Decimal(0)
        assert not is_hockey_stick(rates)

    def test_hockey_stick_is_unrealistic(self):
        realism = validate_revenue_realism([50000, 200000, 800000], industry="beratung")
        assert realism.hockey_stick
        assert not realism.is_realistic
        assert len(realism.warnings) == 3

    def test_moderate_growth_is_realistic(self):
        realism = validate_revenue_realism([60000, 70000, 80000])
        assert realism.is_realistic
        assert realism.warnings == ()

    def test_single_warning_still_realistic(self):
        realism = validate_revenue_realism([8000, 9000, 10000])
        assert len(realism.warnings) == 1
        assert realism.is_realistic

    def test_growth_ceiling_for_young_business(self):
        assert growth_ceiling("beratung", business_age_years=1) == Decimal("45")
        assert growth_ceiling("beratung", business_age_years=5) == Decimal("30")
        assert growth_ceiling("unknown", business_age_years=5) == Decimal("50")

    def test_industry_benchmarks_fallback(self):
        assert industry_benchmarks("Handwerk")["growth_year1_to_2"] == 20
        assert industry_benchmarks(None)["seasonality"] == "unknown"
