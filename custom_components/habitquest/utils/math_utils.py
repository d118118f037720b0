# File: utils/math_utils.py
"""Math and calculation utilities for HabitQuest.

Pure Python math functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed.

Functions:
    - clamp: Bound a value to a closed range
    - calculate_ratio: Progress ratio in [0, 1] with division-by-zero protection
    - non_negative_int: Coerce arbitrary input to an int >= 0
"""

from __future__ import annotations

import logging
from typing import Any

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

# Default float precision for ratio rounding
DATA_FLOAT_PRECISION = 4


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds.

    Args:
        value: Value to clamp
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        Value clamped to [min_val, max_val] range

    Examples:
        clamp(150, 0, 100) → 100
        clamp(-10, 0, 100) → 0
        clamp(50, 0, 100) → 50
    """
    return max(min_val, min(value, max_val))


def calculate_ratio(
    current: float,
    target: float,
    precision: int = DATA_FLOAT_PRECISION,
) -> float:
    """Calculate a progress ratio clamped to [0.0, 1.0].

    Args:
        current: Current progress value
        target: Target value
        precision: Number of decimal places for rounding

    Returns:
        Ratio in [0.0, 1.0], or 0.0 if target is not positive

    Examples:
        calculate_ratio(5, 10) → 0.5
        calculate_ratio(15, 10) → 1.0
        calculate_ratio(1, 3) → 0.3333
        calculate_ratio(5, 0) → 0.0  # Division by zero protection
    """
    if target <= 0:
        return 0.0
    return round(clamp(current / target, 0.0, 1.0), precision)


def non_negative_int(value: Any, default: int = 0) -> int:
    """Coerce a value to an int >= 0.

    Used for user-supplied counters (streak lengths) and for persisted
    counters that may have been hand-edited.

    Examples:
        non_negative_int(3) → 3
        non_negative_int(-2) → 0
        non_negative_int("7") → 7
        non_negative_int("abc") → 0
    """
    if value is None:
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        _LOGGER.debug("Invalid counter value %r, using %s", value, default)
        return default
    return max(0, number)
