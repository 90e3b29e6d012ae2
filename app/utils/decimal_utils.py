"""Decimal helpers for money amounts"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional


def round_decimal(value: Decimal, decimal_places: int = 2) -> Decimal:
    """
    Round a decimal value to specified decimal places.

    Args:
        value: Decimal value to round
        decimal_places: Number of decimal places (default 2)

    Returns:
        Rounded decimal value
    """
    quantize_value = Decimal(10) ** -decimal_places
    return value.quantize(quantize_value, rounding=ROUND_HALF_UP)


def to_amount(value: Any) -> Optional[Decimal]:
    """
    Coerce request input (str, int, float or Decimal) to a 2-place amount.

    Floats go through str() so 25.1 stays 25.10 instead of picking up
    binary noise. Non-numeric input is returned untouched for the schema
    validator to reject.

    Args:
        value: Raw amount or None

    Returns:
        Rounded Decimal, None, or the original value when it isn't numeric
    """
    if value is None or isinstance(value, bool):
        return value
    try:
        return round_decimal(Decimal(str(value)))
    except (InvalidOperation, ValueError):
        return value
