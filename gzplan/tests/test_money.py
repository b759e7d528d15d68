"""
Tests for the exact currency type.
"""

from decimal import Decimal
from itertools import permutations

import pytest

from gzplan.core.money import (
    CurrencyAmount,
    as_amount,
    percentage,
    quantize_cents,
    safe_divide,
    to_decimal,
)


class TestCurrencyAmount:
    """Arithmetic, rounding and immutability."""

    def test_addition_is_exact(self):
        total = CurrencyAmount("0.1") + CurrencyAmount("0.2")
        assert total == Decimal("0.3")

    def test_sum_is_order_independent(self):
        amounts = ["0.10", "0.20", "19.99", "1234.56", "0.01", "7.77"]
        totals = {
            CurrencyAmount.sum(CurrencyAmount(a) for a in order).to_json()
            for order in permutations(amounts)
        }
        assert totals == {"1262.63"}

    def test_mixed_operands(self):
        amount = CurrencyAmount(100)
        assert amount + 5 == Decimal("105")
        assert 5 + amount == Decimal("105")
        assert 200 - amount == Decimal("100")
        assert amount * Decimal("1.5") == Decimal("150")
        assert amount / 4 == Decimal("25")

    def test_division_by_zero_is_zero(self):
        assert CurrencyAmount(100) / 0 == Decimal("0")

    def test_cents_round_half_up(self):
        assert CurrencyAmount("2.345").cents() == Decimal("2.35")
        assert CurrencyAmount("2.344").cents() == Decimal("2.34")
        assert CurrencyAmount("-2.345").cents() == Decimal("-2.35")
        assert round(CurrencyAmount("10.005")) == Decimal("10.01")

    def test_immutable(self):
        amount = CurrencyAmount(10)
        with pytest.raises(AttributeError):
            amount._value = Decimal(20)

    def test_allocate_distributes_leftover_cents(self):
        parts = CurrencyAmount(100).allocate(3)
        assert [p.value for p in parts] == [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]
        assert CurrencyAmount.sum(parts) == Decimal("100")

    def test_allocate_exact_split(self):
        parts = CurrencyAmount("30000").allocate(3)
        assert all(p == Decimal("10000") for p in parts)

    def test_comparisons(self):
        assert CurrencyAmount(5) < CurrencyAmount(6)
        assert CurrencyAmount(5) >= 5
        assert CurrencyAmount("-0.01").is_negative()
        assert not CurrencyAmount(0).is_negative()
        assert not CurrencyAmount(0)

    def test_to_json_has_cent_precision(self):
        assert CurrencyAmount("12.5").to_json() == "12.50"
        assert CurrencyAmount("1234.567").to_json() == "1234.57"

    def test_sum_of_empty_iterable(self):
        assert CurrencyAmount.sum([]) == Decimal("0")

    def test_as_amount_keeps_instances(self):
        amount = CurrencyAmount(7)
        assert as_amount(amount) is amount
        assert as_amount("7") == amount


class TestDecimalHelpers:

    def test_to_decimal_float_uses_shortest_repr(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_to_decimal_rejects_bool(self):
        with pytest.raises(TypeError):
            to_decimal(True)

    def test_quantize_cents(self):
        assert quantize_cents("0.005") == Decimal("0.01")

    def test_safe_divide(self):
        assert safe_divide(10, 4) == Decimal("2.5")
        assert safe_divide(10, 0) == Decimal("0")

    def test_percentage(self):
        assert percentage(25, 200) == Decimal("12.5")
        assert percentage(25, 0) == Decimal("0")
