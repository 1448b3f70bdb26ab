"""Name-based lookup for the built-in strategies."""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping

from . import constants as c
from .base import EvenAllocator, WeightedAllocator
from .exceptions import err
from .remainder import (
    FixedPositionRemainder,
    MaxValueRemainder,
    MinValueRemainder,
    RandomRemainder,
    SequentialByMaxValue,
    SequentialByMinValue,
    SequentialRemainder,
    WeightedRemainder,
)
from .types import BaseAllocator, RemainderStrategy

__all__ = [
    "BASE_ALLOCATORS",
    "REMAINDER_STRATEGIES",
    "resolve_base_allocator",
    "resolve_remainder_strategy",
]

BASE_ALLOCATORS: Mapping[str, Callable[..., BaseAllocator]] = {
    c.BASE_EVEN: EvenAllocator,
    c.BASE_WEIGHTED: WeightedAllocator,
}

REMAINDER_STRATEGIES: Mapping[str, Callable[..., RemainderStrategy]] = {
    c.REMAINDER_SEQUENTIAL: SequentialRemainder,
    c.REMAINDER_RANDOM: RandomRemainder,
    c.REMAINDER_SEQUENTIAL_BY_MIN: SequentialByMinValue,
    c.REMAINDER_SEQUENTIAL_BY_MAX: SequentialByMaxValue,
    c.REMAINDER_MIN_VALUE: MinValueRemainder,
    c.REMAINDER_MAX_VALUE: MaxValueRemainder,
    c.REMAINDER_FIXED_POSITION: FixedPositionRemainder,
    c.REMAINDER_WEIGHTED: WeightedRemainder,
}


def resolve_base_allocator(kind: str, **options: Any) -> BaseAllocator:
    """Build a base allocator by name (``even``, ``weighted``)."""

    return _build(BASE_ALLOCATORS, "base allocator", kind, options)


def resolve_remainder_strategy(kind: str, **options: Any) -> RemainderStrategy:
    """Build a remainder strategy by name (see ``REMAINDER_STRATEGIES``)."""

    return _build(REMAINDER_STRATEGIES, "remainder strategy", kind, options)


def _build(
    registry: Mapping[str, Callable[..., Any]],
    label: str,
    kind: str,
    options: Dict[str, Any],
) -> Any:
    factory = registry.get(kind)
    if factory is None:
        raise err(
            "E_STRATEGY_UNKNOWN",
            f"unknown {label} '{kind}' (known: {sorted(registry)})",
        )
    try:
        return factory(**options)
    except TypeError as exc:
        raise err(
            "E_STRATEGY_OPTIONS",
            f"{label} '{kind}' does not accept options {sorted(options)}: {exc}",
        ) from exc
