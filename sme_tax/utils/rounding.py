"""Rounding helpers for ringgit amounts and rates.

Money is rounded half away from zero (ROUND_HALF_UP), never banker's
rounding: 0.005 always becomes 0.01.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_CENT = Decimal("0.01")
_BASIS = Decimal("0.0001")
_RINGGIT = Decimal("1")

Number = Decimal | int | float


def to_decimal(value: Number) -> Decimal:
    """Convert an int, float or Decimal to Decimal.

    Floats go through ``str`` so 0.1 becomes Decimal("0.1"), not its
    binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_currency(value: Number) -> Decimal:
    """Round to 2 decimal places (sen)."""
    return to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP)


def round_percentage(value: Number) -> Decimal:
    """Round a rate to 4 decimal places."""
    return to_decimal(value).quantize(_BASIS, rounding=ROUND_HALF_UP)


def round_to_ringgit(value: Number) -> Decimal:
    """Round to a whole ringgit."""
    return to_decimal(value).quantize(_RINGGIT, rounding=ROUND_HALF_UP)


def is_valid_number(value: object) -> bool:
    """True for finite int, float or Decimal values (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    try:
        return to_decimal(value).is_finite()
    except (InvalidOperation, ValueError):
        return False


def is_non_negative(value: object) -> bool:
    return is_valid_number(value) and to_decimal(value) >= 0  # type: ignore[arg-type]
