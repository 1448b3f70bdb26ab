"""Deterministic monetary allocation: split an exact total into N parts."""

from .base import EvenAllocator, WeightedAllocator
from .constants import DEFAULT_PRECISION
from .exceptions import (
    AllocationError,
    AllocationStateError,
    FailureCategory,
    InvalidAllocationArgument,
)
from .kernel import allocate, allocate_detailed
from .policy import AllocationPolicy, PolicyLoadingError, load_policy
from .precision import scale_of, to_units
from .registry import resolve_base_allocator, resolve_remainder_strategy
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
from .runner import AllocationRunner, AllocationRunOutputs
from .types import AllocationBreakdown, BaseAllocator, RemainderStrategy

__all__ = [
    "AllocationBreakdown",
    "AllocationError",
    "AllocationPolicy",
    "AllocationRunOutputs",
    "AllocationRunner",
    "AllocationStateError",
    "BaseAllocator",
    "DEFAULT_PRECISION",
    "EvenAllocator",
    "FailureCategory",
    "FixedPositionRemainder",
    "InvalidAllocationArgument",
    "MaxValueRemainder",
    "MinValueRemainder",
    "PolicyLoadingError",
    "RandomRemainder",
    "RemainderStrategy",
    "SequentialByMaxValue",
    "SequentialByMinValue",
    "SequentialRemainder",
    "WeightedAllocator",
    "WeightedRemainder",
    "allocate",
    "allocate_detailed",
    "load_policy",
    "resolve_base_allocator",
    "resolve_remainder_strategy",
    "scale_of",
    "to_units",
]
