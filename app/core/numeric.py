"""
Small numeric helpers shared by the scoring services.
"""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 away from zero (Python's round() is banker's)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
