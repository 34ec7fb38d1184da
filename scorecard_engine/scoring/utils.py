"""
Utility functions for safe numeric handling in scoring calculations.
"""

import logging
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

logger = logging.getLogger(__name__)


def safe_float(value: Any, field_name: str = "") -> Optional[float]:
    """
    Safely convert a stored value to a finite-or-infinite float.

    Non-numeric values and NaN are treated as malformed input: a warning is
    logged and None is returned so the metric is excluded from scoring.

    Args:
        value: Value to convert
        field_name: Field name used in the warning

    Returns:
        Float value, or None if missing or malformed
    """
    if value is None:
        return None

    if isinstance(value, str):
        # Remove commas, percent signs and whitespace
        value = value.replace(",", "").replace("%", "").strip()
        if not value:
            return None

    try:
        if isinstance(value, bool):
            raise TypeError("booleans are not numeric")
        result = float(value)
    except (ValueError, TypeError):
        result = math.nan

    if math.isnan(result):
        logger.warning(
            "Non-numeric value %r for %s. Treating as not applicable.",
            value,
            field_name or "variance",
        )
        return None

    return result


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning default when the denominator is zero."""
    if denominator == 0:
        return default
    return numerator / denominator


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper]."""
    return max(lower, min(upper, value))
