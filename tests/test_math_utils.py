"""Tests for math_utils helpers."""

import pytest

from custom_components.salesquest.utils import math_utils


@pytest.mark.parametrize(("value", "expected"), [(62.5, 63), (62.4, 62), (0.5, 1), (0, 0)])
def test_round_half_up(value, expected) -> None:
    """Halves round up instead of to even."""
    assert math_utils.round_half_up(value) == expected


@pytest.mark.parametrize(
    ("numerator", "denominator", "expected"),
    [(100, 4, 25), (100, 3, 34), (1, 5, 1), (100, 0, 0)],
)
def test_ceil_div(numerator, denominator, expected) -> None:
    """Ceiling division with a zero guard."""
    assert math_utils.ceil_div(numerator, denominator) == expected


def test_calculate_percentage() -> None:
    """Percentages cap and guard against empty targets."""
    assert math_utils.calculate_percentage(25, 100) == 25
    assert math_utils.calculate_percentage(150, 100) == 100
    assert math_utils.calculate_percentage(150, 100, cap=200) == 150
    assert math_utils.calculate_percentage(5, 0) == 0


def test_clamp() -> None:
    """Values are bounded on both sides."""
    assert math_utils.clamp(7, 1, 5) == 5
    assert math_utils.clamp(-1, 1, 5) == 1
    assert math_utils.clamp(3, 1, 5) == 3
