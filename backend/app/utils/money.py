"""Fixed-point money helpers shared by the split and balance services."""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from app.utils.errors import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def round2(value: Decimal) -> Decimal:
    """Round to 2 decimal places, half away from zero."""
    try:
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # More digits than the decimal context can hold.
        raise ValidationError("amount is too large")


def to_decimal(value: Any, field: str = "amount") -> Decimal:
    """
    Convert a user or database supplied number to Decimal.

    Floats go through str() so 0.1 stays 0.1 instead of its binary expansion.
    """
    if value is None or value == "":
        raise ValidationError(f"{field} is required")
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise ValidationError(f"{field} must be a number")
    if not result.is_finite():
        raise ValidationError(f"{field} must be a number")
    return result


def to_float(value: Decimal) -> float:
    """Presentation/storage form: a 2-decimal float."""
    return float(round2(value))
