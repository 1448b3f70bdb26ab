"""Core allocation entry points.

``allocate`` validates its inputs, asks the base allocator for an initial
split, hands the signed remainder to the remainder strategy and finally checks
that the parts add up to the total exactly.  The final check always runs,
whatever strategies are plugged in.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Tuple

from allocation_engine.core.logging import get_logger

from .constants import DEFAULT_PRECISION
from .exceptions import AllocationStateError
from .precision import exact_sum, working_precision
from .types import AllocationBreakdown, BaseAllocator, RemainderStrategy
from .validate import (
    validate_amounts,
    validate_precision,
    validate_quantity,
    validate_sum,
    validate_total,
)

__all__ = ["allocate", "allocate_detailed"]

logger = get_logger(__name__)


def allocate(
    total: Decimal,
    quantity: int,
    base_allocator: BaseAllocator,
    remainder_strategy: RemainderStrategy,
    precision: Decimal = DEFAULT_PRECISION,
) -> Tuple[Decimal, ...]:
    """Split ``total`` into ``quantity`` parts that add up to it exactly."""

    return allocate_detailed(
        total,
        quantity,
        base_allocator,
        remainder_strategy,
        precision,
    ).amounts


def allocate_detailed(
    total: Decimal,
    quantity: int,
    base_allocator: BaseAllocator,
    remainder_strategy: RemainderStrategy,
    precision: Decimal = DEFAULT_PRECISION,
) -> AllocationBreakdown:
    """Like :func:`allocate`, but also return the base split and remainder."""

    total = validate_total(total)
    quantity = validate_quantity(quantity)
    precision = validate_precision(precision)

    with working_precision():
        base = validate_amounts(
            base_allocator(total, quantity, precision), quantity, stage="base"
        )
        remainder = total - exact_sum(base)
        amounts = validate_amounts(
            remainder_strategy(base, remainder, precision), quantity, stage="remainder"
        )

    try:
        validate_sum(amounts, total)
    except AllocationStateError as exc:
        logger.error(
            "allocation sum mismatch: expected=%s actual=%s remainder=%s "
            "base_allocator=%r remainder_strategy=%r",
            exc.expected,
            exc.actual,
            remainder,
            base_allocator,
            remainder_strategy,
        )
        raise

    return AllocationBreakdown(
        total=total,
        quantity=quantity,
        precision=precision,
        base_amounts=base,
        remainder=remainder,
        amounts=amounts,
    )
