"""Built-in base allocators.

Both round every part *down* to the precision so the base split never exceeds
the total; the shortfall is left for a remainder strategy.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence, Tuple

from .exceptions import err
from .precision import (
    coerce_weights,
    exact_sum,
    floor_to_precision,
    quantize_ratio,
    to_units,
    working_precision,
)

__all__ = ["EvenAllocator", "WeightedAllocator"]


@dataclass(frozen=True)
class EvenAllocator:
    """Give every position ``floor(total / quantity)`` at the precision."""

    def __call__(
        self, total: Decimal, quantity: int, precision: Decimal
    ) -> Tuple[Decimal, ...]:
        # Whole ticks per position, taken straight from the total so the
        # division never goes through an inexact intermediate.
        with working_precision():
            units = to_units(total, precision * quantity)
            share = floor_to_precision(precision * units, precision)
        return (share,) * quantity


@dataclass(frozen=True)
class WeightedAllocator:
    """Split proportionally to ``weights``, one weight per position."""

    weights: Tuple[Decimal, ...]

    def __init__(self, weights: Sequence[Decimal]) -> None:
        object.__setattr__(self, "weights", coerce_weights(weights))

    def __call__(
        self, total: Decimal, quantity: int, precision: Decimal
    ) -> Tuple[Decimal, ...]:
        if len(self.weights) != quantity:
            raise err(
                "E_WEIGHTS_INVALID",
                f"expected {quantity} weights, got {len(self.weights)}",
            )
        total_weight = exact_sum(self.weights)
        with working_precision():
            return tuple(
                floor_to_precision(total * quantize_ratio(weight, total_weight), precision)
                for weight in self.weights
            )
