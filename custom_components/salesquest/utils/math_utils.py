# File: utils/math_utils.py
"""Math and calculation utilities for SalesQuest.

Pure Python math functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Functions:
    - round_half_up: Rounding that matches what users expect (2.5 → 3)
    - ceil_div: Ceiling division for per-member minimums
    - calculate_percentage: Progress percentage, capped at 100
    - clamp: Bound a value into a closed range
"""

from __future__ import annotations

import logging
import math

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    Python's built-in round() uses banker's rounding, which would turn
    62.5% into 62%.

    Examples:
        round_half_up(62.5) → 63
        round_half_up(62.4) → 62
    """
    return int(math.floor(value + 0.5))


def ceil_div(numerator: float, denominator: int) -> int:
    """Return ceil(numerator / denominator), or 0 when the denominator is 0.

    Examples:
        ceil_div(100, 4) → 25
        ceil_div(100, 3) → 34
        ceil_div(100, 0) → 0
    """
    if denominator <= 0:
        return 0
    return int(math.ceil(numerator / denominator))


def calculate_percentage(current: float, target: float, cap: int = 100) -> int:
    """Calculate progress percentage toward a target.

    Args:
        current: Current value
        target: Target value
        cap: Upper bound for the result (default 100)

    Returns:
        Integer percentage, 0 when target is not positive

    Examples:
        calculate_percentage(25, 100) → 25
        calculate_percentage(150, 100) → 100
        calculate_percentage(5, 0) → 0
    """
    if target <= 0:
        return 0
    return min(cap, round_half_up(current / target * 100))


def clamp(value: int, lower: int, upper: int) -> int:
    """Clamp a value into [lower, upper]."""
    return max(lower, min(upper, value))
