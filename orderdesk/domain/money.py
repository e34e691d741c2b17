"""Decimal helpers shared by the pricing modules."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def to_decimal(value: object, default: Decimal = ZERO) -> Decimal:
    """Coerce a number-ish value to Decimal; non-finite or unparsable values map to ``default``."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # str() keeps 0.1 as Decimal("0.1") instead of the binary float expansion.
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return default
    if not result.is_finite():
        return default
    return result


def round2(value: Decimal) -> Decimal:
    """Round to currency minor units, half-up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def non_negative(value: Decimal) -> Decimal:
    return value if value > ZERO else ZERO
