"""Decimal helpers for monetary amounts and ratings."""

# Standard library imports
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")
ONE_DECIMAL_PLACE = Decimal("0.1")


def parse_decimal(value: Decimal | float | int | str | None) -> Decimal | None:
    """Convert a caller-supplied number to Decimal.

    Floats go through ``str`` so that 199.99 becomes Decimal("199.99")
    rather than its binary approximation.

    Args:
        value: Number in any accepted representation

    Returns:
        The Decimal value, or None if the value is missing, boolean or not finite
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
    if not result.is_finite():
        return None
    return result


def round_half_up(value: Decimal, step: Decimal = ONE_DECIMAL_PLACE) -> Decimal:
    """Round to the given step using half-up rounding (4.25 -> 4.3)."""
    return value.quantize(step, rounding=ROUND_HALF_UP)
