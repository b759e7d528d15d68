"""
Normalization of loosely formatted numeric input.

Founders type numbers into a chat; values arrive as ints, floats, Decimals or
strings such as "1.234,56 €", "2.000", "4,5 %" or "1,250.00". This module turns
them into canonical Decimals (and enum choices into members) and is the only
place that raises ``InvalidInputError``.

Separator rules:
- Both '.' and ',' present: the right-most one is the decimal separator
- Only ',' present: one comma is a decimal comma, several are thousands separators
- Only '.' present: several dots, or one dot followed by exactly three digits,
  are thousands separators (German grouping); otherwise it is a decimal point
"""

import logging
import math
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import List, Optional, Type

from gzplan.core.money import ZERO
from gzplan.utils.error_utils import InvalidInputError

logger = logging.getLogger(__name__)

_STRIP_PATTERN = re.compile(r"[€%\s']|EUR|Euro", re.IGNORECASE)
_NUMBER_PATTERN = re.compile(r"^[+-]?\d+(\.\d+)?$")


def _canonical_string(raw: str) -> str:
    cleaned = _STRIP_PATTERN.sub("", raw)

    has_dot = "." in cleaned
    has_comma = "," in cleaned

    if has_dot and has_comma:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif has_comma:
        if cleaned.count(",") == 1:
            cleaned = cleaned.replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif has_dot:
        fraction = cleaned.rsplit(".", 1)[1]
        if cleaned.count(".") > 1 or len(fraction) == 3:
            cleaned = cleaned.replace(".", "")

    return cleaned


def normalize_amount(raw, field: str = "value", allow_negative: bool = False) -> Decimal:
    """
    Convert loosely formatted input into a Decimal.

    ``None`` and empty strings mean "not filled in yet" and yield zero.

    Args:
        raw: Value as supplied by the caller
        field: Field path used in the error, e.g. "revenue_streams[0].unit_price"
        allow_negative: Accept values below zero

    Returns:
        Decimal value (full precision, not rounded)

    Raises:
        InvalidInputError: Non-finite numbers, unparseable strings,
            unsupported types, or negative values where not allowed

    Examples:
        >>> normalize_amount("1.234,56 €")
        Decimal('1234.56')
        >>> normalize_amount("2.000")
        Decimal('2000')
        >>> normalize_amount(12.5)
        Decimal('12.5')
    """
    if raw is None:
        return ZERO

    if isinstance(raw, bool):
        raise InvalidInputError(field, raw, "boolean is not a number")

    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, int):
        value = Decimal(raw)
    elif isinstance(raw, float):
        if not math.isfinite(raw):
            raise InvalidInputError(field, raw, "number is not finite")
        value = Decimal(repr(raw))
    elif isinstance(raw, str):
        stripped = raw.strip()
        if not stripped:
            return ZERO
        canonical = _canonical_string(stripped)
        if not _NUMBER_PATTERN.match(canonical):
            raise InvalidInputError(field, raw, "not a recognizable number")
        try:
            value = Decimal(canonical)
        except InvalidOperation:
            raise InvalidInputError(field, raw, "not a recognizable number")
    else:
        raise InvalidInputError(field, raw, f"unsupported type {type(raw).__name__}")

    if not value.is_finite():
        raise InvalidInputError(field, raw, "number is not finite")

    if value < ZERO and not allow_negative:
        raise InvalidInputError(field, raw, "negative value is not allowed")

    return value


def amount_or_zero(
    raw,
    field: str,
    errors: Optional[List[InvalidInputError]] = None,
    allow_negative: bool = False,
) -> Decimal:
    """
    ``normalize_amount`` that degrades to zero instead of aborting.

    The error is logged and appended to ``errors`` when a list is given.
    """
    try:
        return normalize_amount(raw, field=field, allow_negative=allow_negative)
    except InvalidInputError as e:
        logger.warning(f"Falling back to 0 for {e.field}: {e.reason} ({e.value!r})")
        if errors is not None:
            errors.append(e)
        return ZERO


def count_or_default(
    raw,
    field: str,
    errors: Optional[List[InvalidInputError]] = None,
    default: Optional[int] = None,
) -> Optional[int]:
    """Whole, non-negative count (months, days); ``default`` when absent or invalid."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return default
    try:
        value = normalize_amount(raw, field=field)
    except InvalidInputError as e:
        logger.warning(f"Falling back to default for {e.field}: {e.reason} ({e.value!r})")
        if errors is not None:
            errors.append(e)
        return default
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def member_or_default(
    enum_cls: Type[Enum],
    raw,
    field: str,
    errors: Optional[List[InvalidInputError]] = None,
    default: Optional[Enum] = None,
):
    """
    Enum member for ``raw`` (a member or its value, case-insensitive); ``default`` when absent or unknown.

    Examples:
        >>> member_or_default(RevenueStreamType, "Product", "type")
        <RevenueStreamType.PRODUCT: 'product'>
        >>> member_or_default(RevenueStreamType, "abo", "type", default=RevenueStreamType.SERVICE)
        <RevenueStreamType.SERVICE: 'service'>
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return default
    if isinstance(raw, enum_cls):
        return raw
    key = raw.strip().lower() if isinstance(raw, str) else raw
    try:
        return enum_cls(key)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        e = InvalidInputError(field, raw, f"unknown {enum_cls.__name__}, expected one of: {allowed}")
        logger.warning(f"Falling back to {default.value if default is not None else None} for {field}: {e.reason}")
        if errors is not None:
            errors.append(e)
        return default
