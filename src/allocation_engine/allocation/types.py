"""Common data structures and strategy contracts for the allocation engine."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, Sequence, Tuple

from .precision import working_precision


class BaseAllocator(Protocol):
    """Produce the initial split of ``total`` into ``quantity`` parts.

    Every part must be a non-negative multiple of ``precision`` and the parts
    must not add up to more than ``total``.  Under-allocation is expected; the
    shortfall becomes the remainder.
    """

    def __call__(
        self, total: Decimal, quantity: int, precision: Decimal
    ) -> Sequence[Decimal]: ...


class RemainderStrategy(Protocol):
    """Spread a signed ``remainder`` over ``base_amounts``.

    The returned parts must be as many as ``base_amounts`` and add up to
    ``sum(base_amounts) + remainder``.
    """

    def __call__(
        self,
        base_amounts: Sequence[Decimal],
        remainder: Decimal,
        precision: Decimal,
    ) -> Sequence[Decimal]: ...


class ShuffleSource(Protocol):
    """Anything that can shuffle a list in place (``random.Random`` and friends)."""

    def shuffle(self, x: list) -> None: ...


@dataclass(frozen=True)
class AllocationBreakdown:
    """Outcome of one allocation, with the intermediate base split."""

    total: Decimal
    quantity: int
    precision: Decimal
    base_amounts: Tuple[Decimal, ...]
    remainder: Decimal
    amounts: Tuple[Decimal, ...]

    @property
    def adjustments(self) -> Tuple[Decimal, ...]:
        """Per-position change applied by the remainder strategy."""

        with working_precision():
            return tuple(
                amount - base for amount, base in zip(self.amounts, self.base_amounts)
            )


__all__ = [
    "AllocationBreakdown",
    "BaseAllocator",
    "RemainderStrategy",
    "ShuffleSource",
]
