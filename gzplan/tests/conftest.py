"""
Shared plan fixtures.
"""

import pytest


@pytest.fixture
def healthy_plan():
    """48,200 EUR requirement, 55,000 EUR financing, revenue ramping 4,000 -> 12,500 EUR/month."""
    return {
        "capital": {
            "equipment": 20000,
            "fixtures": 5000,
            "goods_materials": 3000,
            "startup_marketing": 5000,
            "working_capital_reserve": 10000,
            "advisory": 1500,
            "notary": 700,
            "commercial_register": 300,
            "other_founding": 2700,
        },
        "financing_sources": [
            {"type": "equity", "label": "Eigenkapital", "amount": 30000, "status": "secured"},
            {"type": "grant", "label": "Gründungszuschuss", "amount": 10000, "status": "applied"},
            {
                "type": "subsidized_loan",
                "label": "KfW StartGeld",
                "amount": 15000,
                "interest_rate": 3,
                "term_months": 60,
                "status": "planned",
            },
        ],
        "private_withdrawal": {
            "housing": 800,
            "food": 400,
            "insurance": 300,
            "mobility": 200,
            "communication": 80,
            "other": 300,
            "savings": 120,
        },
        "revenue_streams": [
            {
                "name": "Beratungstage",
                "type": "service",
                "unit_price": 100,
                "monthly_quantities_year1": [40, 45, 50, 60, 70, 80, 90, 100, 105, 110, 120, 125],
                "quantity_year2": 1500,
                "quantity_year3": 1800,
            }
        ],
        "costs": {
            "fixed_monthly": {"rent": 800, "insurance": 300, "marketing": 400, "other": 500},
            "variable_year1": 9950,
            "variable_year2": 15000,
            "variable_year3": 18000,
        },
        "industry": "beratung",
        "start_date": "2025-03-01",
    }


@pytest.fixture
def underfunded_plan():
    """60,000 EUR requirement, 25,000 EUR financing, flat 3,000 EUR/month revenue, 4,000 EUR/month fixed costs."""
    return {
        "capital": {"equipment": 30000, "working_capital_reserve": 30000},
        "financing_sources": [
            {"type": "equity", "amount": 15000},
            {"type": "grant", "amount": 10000},
        ],
        "private_withdrawal": {"housing": 1200, "food": 400, "insurance": 400},
        "revenue_streams": [
            {
                "name": "Reparaturen",
                "unit_price": 100,
                "monthly_quantities_year1": [30] * 12,
                "quantity_year2": 360,
                "quantity_year3": 360,
            }
        ],
        "costs": {"fixed_monthly": {"rent": 2000, "personnel": 2000}},
    }
