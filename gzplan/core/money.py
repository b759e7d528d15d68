"""
Exact currency arithmetic for gzplan.

All monetary values in the engine are ``CurrencyAmount`` instances backed by
``decimal.Decimal``. Arithmetic goes through one private ``decimal.Context``
(28 significant digits, ROUND_HALF_UP) instead of the thread-local default
context, so evaluating several plans in parallel never shares mutable state.

Conventions:
- Intermediate results keep the full 28-digit precision
- Values leaving the engine are quantized to cents with ROUND_HALF_UP
- Division by zero yields zero; plans under construction often have zero totals
"""

from decimal import (
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    ROUND_HALF_UP,
)
from typing import Iterable, List, Union

PRECISION = 28
ROUNDING = ROUND_HALF_UP

CONTEXT = Context(
    prec=PRECISION,
    rounding=ROUNDING,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)

CENT = Decimal("0.01")
ZERO = Decimal(0)
ONE = Decimal(1)
HUNDRED = Decimal(100)

Number = Union["CurrencyAmount", Decimal, int, str]


def to_decimal(value) -> Decimal:
    """
    Convert a trusted engine value to Decimal.

    Loose user input (locale strings, floats from JSON) must go through
    ``gzplan.utils.number_utils.normalize_amount`` instead.
    """
    if isinstance(value, CurrencyAmount):
        return value.value
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a currency value")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        # repr() of a float is the shortest round-tripping literal
        return Decimal(repr(value))
    if isinstance(value, str):
        return Decimal(value.strip())
    if value is None:
        return ZERO
    raise TypeError(f"Cannot convert {type(value).__name__} to Decimal")


def quantize_cents(value) -> Decimal:
    """Round to whole cents, half-up."""
    return to_decimal(value).quantize(CENT, context=CONTEXT)


def safe_divide(numerator, denominator) -> Decimal:
    """Divide with the engine context; zero denominator gives zero."""
    denominator = to_decimal(denominator)
    if denominator == ZERO:
        return ZERO
    return CONTEXT.divide(to_decimal(numerator), denominator)


def percentage(part, total) -> Decimal:
    """``part / total * 100``, zero when total is zero."""
    return CONTEXT.multiply(safe_divide(part, total), HUNDRED)


def round_percent(value, places: int = 2) -> Decimal:
    return to_decimal(value).quantize(Decimal(1).scaleb(-places), context=CONTEXT)


def decimal_sqrt(value) -> Decimal:
    value = to_decimal(value)
    if value <= ZERO:
        return ZERO
    return CONTEXT.sqrt(value)


def decimal_power(base, exponent: int) -> Decimal:
    return CONTEXT.power(to_decimal(base), exponent)


class CurrencyAmount:
    """
    Immutable exact money value.

    Supports ``+ - * /``, unary minus, ``abs()``, ordering against other
    amounts, Decimals and ints, and cent rounding via ``round()``.
    """

    __slots__ = ("_value",)

    def __init__(self, value: Number = 0):
        object.__setattr__(self, "_value", CONTEXT.plus(to_decimal(value)))

    def __setattr__(self, name, value):
        raise AttributeError("CurrencyAmount is immutable")

    def __reduce__(self):
        return (CurrencyAmount, (str(self._value),))

    @property
    def value(self) -> Decimal:
        return self._value

    @classmethod
    def zero(cls) -> "CurrencyAmount":
        return cls(ZERO)

    @classmethod
    def sum(cls, amounts: Iterable[Number]) -> "CurrencyAmount":
        total = ZERO
        for amount in amounts:
            total = CONTEXT.add(total, to_decimal(amount))
        return cls(total)

    # Arithmetic

    def __add__(self, other):
        return CurrencyAmount(CONTEXT.add(self._value, to_decimal(other)))

    __radd__ = __add__

    def __sub__(self, other):
        return CurrencyAmount(CONTEXT.subtract(self._value, to_decimal(other)))

    def __rsub__(self, other):
        return CurrencyAmount(CONTEXT.subtract(to_decimal(other), self._value))

    def __mul__(self, other):
        return CurrencyAmount(CONTEXT.multiply(self._value, to_decimal(other)))

    __rmul__ = __mul__

    def __truediv__(self, other):
        return CurrencyAmount(safe_divide(self._value, other))

    def __neg__(self):
        return CurrencyAmount(CONTEXT.minus(self._value))

    def __abs__(self):
        return CurrencyAmount(CONTEXT.abs(self._value))

    def __round__(self, places: int = 2):
        return self.round(places)

    def round(self, places: int = 2) -> "CurrencyAmount":
        exponent = Decimal(1).scaleb(-places)
        return CurrencyAmount(self._value.quantize(exponent, context=CONTEXT))

    def cents(self) -> "CurrencyAmount":
        return self.round(2)

    def allocate(self, parts: int) -> List["CurrencyAmount"]:
        """
        Split into ``parts`` cent amounts that add up exactly to the rounded total.

        Leftover cents go to the last parts, e.g. 100.00 / 3 -> 33.33, 33.33, 33.34.
        """
        if parts <= 0:
            return []
        total_cents = int(quantize_cents(self._value).scaleb(2))
        base, remainder = divmod(total_cents, parts)
        shares = [base] * (parts - remainder) + [base + 1] * remainder
        return [CurrencyAmount(Decimal(share).scaleb(-2)) for share in shares]

    # Comparison

    def _compare(self, other) -> int:
        return self._value.compare(to_decimal(other))

    def __eq__(self, other):
        try:
            return self._compare(other) == 0
        except TypeError:
            return NotImplemented

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __lt__(self, other):
        return self._compare(other) < 0

    def __le__(self, other):
        return self._compare(other) <= 0

    def __gt__(self, other):
        return self._compare(other) > 0

    def __ge__(self, other):
        return self._compare(other) >= 0

    def __hash__(self):
        return hash(self._value)

    def __bool__(self):
        return self._value != ZERO

    def is_negative(self) -> bool:
        return self._value < ZERO

    # Representation

    def __repr__(self):
        return f"CurrencyAmount('{self._value}')"

    def __str__(self):
        return str(quantize_cents(self._value))

    def to_json(self) -> str:
        """Cent-precision string, the form the presentation layer formats."""
        return str(quantize_cents(self._value))


def as_amount(value: Number) -> CurrencyAmount:
    if isinstance(value, CurrencyAmount):
        return value
    return CurrencyAmount(value)
