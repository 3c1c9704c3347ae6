from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable


# ============================================================================
# PRECISION CONSTANTS
# ============================================================================

# Hours are reported to the hundredth (CumulativeHrs, TotalHours)
HOURS_PRECISION = Decimal('0.01')


# ============================================================================
# DECIMAL COERCION HELPER
# ============================================================================

def to_decimal(value: Any, default: Decimal = Decimal(0)) -> Decimal:
    """
    Safely coerce any value to a Decimal.

    Hour fields arrive as CSV strings, often blank. Summing them as floats
    drifts (0.1 + 0.2), so every aggregation goes through Decimal.

    Args:
        value: Any value to convert. Supports int, float, str, Decimal, None.
        default: Decimal fallback if conversion fails. Defaults to Decimal(0).

    Returns:
        Decimal: Precise numeric value, or default if conversion fails.

    Examples:
        >>> to_decimal('7.5')
        Decimal('7.5')
        >>> to_decimal('') == Decimal(0)
        True
        >>> to_decimal(None, Decimal('-1')) == Decimal('-1')
        True
    """
    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    text = str(value).strip()
    if not text:
        return default
    try:
        result = Decimal(text)
    except (InvalidOperation, TypeError, ValueError):
        return default
    if not result.is_finite():
        return default
    return result


def is_blank_hours(value: Any) -> bool:
    """True for empty strings, None, and anything that is not a number."""
    if value is None:
        return True
    text = str(value).strip()
    if not text:
        return True
    try:
        return not Decimal(text).is_finite()
    except (InvalidOperation, ValueError):
        return True


def sum_hours(values: Iterable[Any]) -> Decimal:
    total = Decimal(0)
    for value in values:
        total += to_decimal(value)
    return total


def round_hours(value: Any) -> Decimal:
    return to_decimal(value).quantize(HOURS_PRECISION, rounding=ROUND_HALF_UP)


def format_hours(value: Any) -> str:
    """Two-decimal string used for every persisted hour total ('14.50')."""
    return f"{round_hours(value):.2f}"


def parse_hours(value: Any, maximum=None) -> Decimal:
    """
    Parse user-entered hours, rejecting negatives and values above ``maximum``.

    Raises:
        ValueError: when the input is not a finite non-negative number
    """
    text = '' if value is None else str(value).strip()
    if not text:
        return Decimal(0)
    try:
        result = Decimal(text)
    except (InvalidOperation, ValueError):
        raise ValueError(f"'{text}' is not a number")
    if not result.is_finite() or result < 0:
        raise ValueError(f"Hours must be a non-negative number, got '{text}'")
    if maximum is not None and result > Decimal(str(maximum)):
        raise ValueError(f"Hours cannot exceed {maximum}, got '{text}'")
    return result
