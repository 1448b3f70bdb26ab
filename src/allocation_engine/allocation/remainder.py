"""Built-in remainder strategies.

Tick-based strategies convert the remainder into a signed count of minimal
units and hand them out one per position along an ordering, wrapping around
the ordering until the ticks run out.  A negative tick is only taken from a
position that still holds at least one tick; if no position can give one up
the loop stops and the caller's sum check reports the shortfall.

Concentrating strategies move the remainder onto a single position in one go.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from .exceptions import err
from .precision import (
    coerce_weights,
    exact_sum,
    floor_to_precision,
    to_units,
    truncate_to_precision,
    working_precision,
)
from .types import ShuffleSource

__all__ = [
    "FixedPositionRemainder",
    "MaxValueRemainder",
    "MinValueRemainder",
    "RandomRemainder",
    "SequentialByMaxValue",
    "SequentialByMinValue",
    "SequentialRemainder",
    "WeightedRemainder",
    "distribute_ticks",
]


def distribute_ticks(
    amounts: List[Decimal],
    order: Sequence[int],
    units: int,
    precision: Decimal,
    *,
    wrap: bool = True,
) -> int:
    """Add (or remove, when ``units`` < 0) one tick per position along ``order``.

    Mutates ``amounts`` in place and returns the signed number of ticks that
    could not be placed (zero on success).
    """

    if units == 0 or not order:
        return units
    step = precision if units > 0 else -precision
    remaining = abs(units)
    with working_precision():
        while remaining:
            placed = 0
            for index in order:
                if remaining == 0:
                    break
                if step < 0 and amounts[index] < precision:
                    continue
                amounts[index] += step
                remaining -= 1
                placed += 1
            if not wrap or placed == 0:
                break
    return remaining if units > 0 else -remaining


def _spread(
    base_amounts: Sequence[Decimal],
    remainder: Decimal,
    precision: Decimal,
    order: Sequence[int],
) -> Tuple[Decimal, ...]:
    amounts = list(base_amounts)
    distribute_ticks(amounts, order, to_units(remainder, precision), precision)
    return tuple(amounts)


def _whole_ticks(amount: Decimal, precision: Decimal) -> Decimal:
    """Part of ``amount`` that can be given up in whole ticks (never negative)."""

    if amount < precision:
        return Decimal(0)
    return floor_to_precision(amount, precision)


def _ascending(amounts: Sequence[Decimal]) -> List[int]:
    return sorted(range(len(amounts)), key=lambda index: (amounts[index], index))


def _descending(amounts: Sequence[Decimal]) -> List[int]:
    return sorted(range(len(amounts)), key=lambda index: (-amounts[index], index))


@dataclass(frozen=True)
class SequentialRemainder:
    """One tick per position in index order."""

    def __call__(
        self,
        base_amounts: Sequence[Decimal],
        remainder: Decimal,
        precision: Decimal,
    ) -> Tuple[Decimal, ...]:
        if remainder == 0:
            return tuple(base_amounts)
        return _spread(base_amounts, remainder, precision, range(len(base_amounts)))


@dataclass(frozen=True)
class RandomRemainder:
    """One tick per position over a shuffled ordering.

    ``seed`` makes every call shuffle identically (a fresh generator per
    call); ``rng`` lets the caller supply its own shuffle source instead.
    With neither, each call draws an unpredictable ordering.
    """

    seed: Optional[int] = None
    rng: Optional[ShuffleSource] = None

    def __call__(
        self,
        base_amounts: Sequence[Decimal],
        remainder: Decimal,
        precision: Decimal,
    ) -> Tuple[Decimal, ...]:
        if remainder == 0:
            return tuple(base_amounts)
        order = list(range(len(base_amounts)))
        self._source().shuffle(order)
        return _spread(base_amounts, remainder, precision, order)

    def _source(self) -> ShuffleSource:
        if self.rng is not None:
            return self.rng
        return random.Random(self.seed)


@dataclass(frozen=True)
class SequentialByMinValue:
    """Ticks go to the smallest amounts first (ties by index)."""

    def __call__(
        self,
        base_amounts: Sequence[Decimal],
        remainder: Decimal,
        precision: Decimal,
    ) -> Tuple[Decimal, ...]:
        if remainder == 0:
            return tuple(base_amounts)
        return _spread(base_amounts, remainder, precision, _ascending(base_amounts))


@dataclass(frozen=True)
class SequentialByMaxValue:
    """Ticks go to the largest amounts first (ties by index)."""

    def __call__(
        self,
        base_amounts: Sequence[Decimal],
        remainder: Decimal,
        precision: Decimal,
    ) -> Tuple[Decimal, ...]:
        if remainder == 0:
            return tuple(base_amounts)
        return _spread(base_amounts, remainder, precision, _descending(base_amounts))


@dataclass(frozen=True)
class MinValueRemainder:
    """Put a positive remainder on the first smallest amount."""

    def __call__(
        self,
        base_amounts: Sequence[Decimal],
        remainder: Decimal,
        precision: Decimal,
    ) -> Tuple[Decimal, ...]:
        amounts = list(base_amounts)
        if remainder <= 0 or not amounts:
            return tuple(amounts)
        target = _ascending(amounts)[0]
        with working_precision():
            amounts[target] += remainder
        return tuple(amounts)


@dataclass(frozen=True)
class MaxValueRemainder:
    """Put a positive remainder on the first largest amount."""

    def __call__(
        self,
        base_amounts: Sequence[Decimal],
        remainder: Decimal,
        precision: Decimal,
    ) -> Tuple[Decimal, ...]:
        amounts = list(base_amounts)
        if remainder <= 0 or not amounts:
            return tuple(amounts)
        target = _descending(amounts)[0]
        with working_precision():
            amounts[target] += remainder
        return tuple(amounts)


@dataclass(frozen=True)
class FixedPositionRemainder:
    """Put the whole remainder on one chosen position.

    A negative remainder is only applied if the position stays non-negative.
    """

    position: int

    def __post_init__(self) -> None:
        if isinstance(self.position, bool) or not isinstance(self.position, int):
            raise err("E_POSITION_RANGE", f"position must be an integer, got {self.position!r}")
        if self.position < 0:
            raise err("E_POSITION_RANGE", f"position must be >= 0, got {self.position}")

    def __call__(
        self,
        base_amounts: Sequence[Decimal],
        remainder: Decimal,
        precision: Decimal,
    ) -> Tuple[Decimal, ...]:
        amounts = list(base_amounts)
        if self.position >= len(amounts):
            raise err(
                "E_POSITION_RANGE",
                f"position {self.position} outside 0..{len(amounts) - 1}",
            )
        if remainder == 0:
            return tuple(amounts)
        with working_precision():
            if amounts[self.position] + remainder >= 0:
                amounts[self.position] += remainder
        return tuple(amounts)


@dataclass(frozen=True)
class WeightedRemainder:
    """Split the remainder by ``weights``, then place leftover ticks.

    Each position first receives its weighted share rounded toward zero.  The
    ticks lost to that rounding go out in weight-descending order: one pass
    over positions whose share came out as zero, then round-robin over every
    position.  A negative share is capped at what its position holds in whole
    ticks; the rest is taken back as leftover ticks elsewhere.
    """

    weights: Tuple[Decimal, ...]

    def __init__(self, weights: Sequence[Decimal]) -> None:
        object.__setattr__(self, "weights", coerce_weights(weights))

    def __call__(
        self,
        base_amounts: Sequence[Decimal],
        remainder: Decimal,
        precision: Decimal,
    ) -> Tuple[Decimal, ...]:
        if len(self.weights) != len(base_amounts):
            raise err(
                "E_WEIGHTS_INVALID",
                f"expected {len(base_amounts)} weights, got {len(self.weights)}",
            )
        if remainder == 0:
            return tuple(base_amounts)

        total_weight = exact_sum(self.weights)
        with working_precision():
            parts = [
                truncate_to_precision(remainder * weight / total_weight, precision)
                for weight in self.weights
            ]
            if remainder < 0:
                # A share may not take a position below zero; the excess
                # joins the leftover ticks below.
                parts = [
                    max(part, -_whole_ticks(base, precision))
                    for base, part in zip(base_amounts, parts)
                ]
            amounts = [base + part for base, part in zip(base_amounts, parts)]
            leftover = to_units(remainder - exact_sum(parts), precision)

        order = sorted(
            range(len(self.weights)),
            key=lambda index: (-self.weights[index], index),
        )
        untouched = [index for index in order if parts[index] == 0]
        leftover = distribute_ticks(amounts, untouched, leftover, precision, wrap=False)
        distribute_ticks(amounts, order, leftover, precision)
        return tuple(amounts)
