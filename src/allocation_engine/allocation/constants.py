"""Frozen identifiers and numeric constants for the allocation engine."""

from __future__ import annotations

from decimal import Decimal

DEFAULT_PRECISION = Decimal("0.01")

# Fractional digits kept for weight ratios (rounded half-up).
RATIO_SCALE = 10

BASE_EVEN = "even"
BASE_WEIGHTED = "weighted"

REMAINDER_SEQUENTIAL = "sequential"
REMAINDER_RANDOM = "random"
REMAINDER_SEQUENTIAL_BY_MIN = "sequential_by_min_value"
REMAINDER_SEQUENTIAL_BY_MAX = "sequential_by_max_value"
REMAINDER_MIN_VALUE = "min_value"
REMAINDER_MAX_VALUE = "max_value"
REMAINDER_FIXED_POSITION = "fixed_position"
REMAINDER_WEIGHTED = "weighted"

__all__ = [
    "BASE_EVEN",
    "BASE_WEIGHTED",
    "DEFAULT_PRECISION",
    "RATIO_SCALE",
    "REMAINDER_FIXED_POSITION",
    "REMAINDER_MAX_VALUE",
    "REMAINDER_MIN_VALUE",
    "REMAINDER_RANDOM",
    "REMAINDER_SEQUENTIAL",
    "REMAINDER_SEQUENTIAL_BY_MAX",
    "REMAINDER_SEQUENTIAL_BY_MIN",
    "REMAINDER_WEIGHTED",
]
