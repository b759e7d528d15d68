"""
Tests for the private withdrawal, its analysis and regional adjustment.
"""

from decimal import Decimal

from gzplan.core.constants import HouseholdType, Sustainability
from gzplan.core.models import private_withdrawal
from gzplan.core.models.private_withdrawal import PrivateWithdrawal, regional_factor

AVERAGE_SINGLE = {
    "housing": 800,
    "food": 400,
    "insurance": 300,
    "mobility": 250,
    "communication": 80,
    "other": 400,
    "savings": 200,
}


class TestTotals:

    def test_monthly_and_annual(self):
        withdrawal = PrivateWithdrawal(AVERAGE_SINGLE)
        assert withdrawal.monthly == Decimal("2430")
        assert withdrawal.annual == Decimal("29160")

    def test_module_total_with_savings(self):
        monthly, annual = private_withdrawal.total({"housing": 900, "food": "350,50"}, savings=100)
        assert monthly == Decimal("1350.50")
        assert annual == Decimal("16206.00")

    def test_missing_categories_are_zero(self):
        assert PrivateWithdrawal.from_dict(None).monthly == Decimal("0")


class TestAnalysis:

    def test_average_household_is_sustainable(self):
        analysis = PrivateWithdrawal(AVERAGE_SINGLE).analyze()
        assert analysis.sustainability == Sustainability.SUSTAINABLE
        assert analysis.expense_ratio is None
        assert analysis.warnings == ()

    def test_high_housing_share_is_unsustainable(self):
        analysis = PrivateWithdrawal({"housing": 1500, "food": 500, "savings": 500}).analyze()
        assert analysis.housing_ratio == Decimal("60")
        assert analysis.sustainability == Sustainability.UNSUSTAINABLE

    def test_income_check_only_escalates(self):
        withdrawal = PrivateWithdrawal({"housing": 1500, "food": 500, "savings": 500})
        assert withdrawal.analyze(income=10000).sustainability == Sustainability.UNSUSTAINABLE

        analysis = PrivateWithdrawal(AVERAGE_SINGLE).analyze(income=2500)
        assert analysis.expense_ratio > 90
        assert analysis.sustainability == Sustainability.UNSUSTAINABLE

    def test_low_savings_warning(self):
        categories = dict(AVERAGE_SINGLE, savings=0)
        warnings = PrivateWithdrawal(categories).analyze().warnings
        assert any("savings" in w for w in warnings)


class TestComparisonAndRegion:

    def test_average_household_matches(self):
        comparison = PrivateWithdrawal(AVERAGE_SINGLE).compare(HouseholdType.SINGLE)
        assert set(comparison.comparison.values()) == {"average"}

    def test_family_comparison(self):
        comparison = PrivateWithdrawal(AVERAGE_SINGLE).compare("family")
        assert comparison.comparison["housing"] == "below"
        assert comparison.deviations_pct["housing"] < -20

    def test_munich_adjustment(self):
        adjusted = PrivateWithdrawal(AVERAGE_SINGLE).adjust_for_region("München")
        assert adjusted.categories["housing"] == Decimal("1120")
        assert adjusted.categories["food"] == Decimal("512")
        assert adjusted.categories["insurance"] == Decimal("300")
        assert adjusted.categories["mobility"] == Decimal("300")
        assert adjusted.categories["other"] == Decimal("496")
        assert adjusted.monthly == Decimal("3008")

    def test_unknown_region_uses_default_factor(self):
        assert regional_factor("Kleinstadt") == Decimal("0.95")
        adjusted = PrivateWithdrawal(AVERAGE_SINGLE).adjust_for_region("Kleinstadt")
        assert adjusted.categories["housing"] == Decimal("760")

    def test_validate_warnings(self):
        warnings = PrivateWithdrawal({"housing": 600, "insurance": 100}).validate()
        assert len(warnings) == 3
