"""Failure taxonomy for the allocation engine.

Every failure carries a stable ``code`` so callers can tell apart bad input
(fix the arguments and call again) from a broken strategy (the parts no longer
add up to the total).  Input problems are ``ValueError`` subclasses; sum
mismatches are not.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, Mapping, Tuple

from allocation_engine.core.errors import EngineError


class FailureCategory(Enum):
    """High-level failure buckets."""

    INVALID_ARGUMENT = "invalid_argument"
    INCONSISTENT_STATE = "inconsistent_state"


_FAILURE_CODE_MAP: Mapping[str, Tuple[FailureCategory, str]] = {
    "E_TOTAL_INVALID": (FailureCategory.INVALID_ARGUMENT, "total_invalid"),
    "E_QUANTITY_INVALID": (FailureCategory.INVALID_ARGUMENT, "quantity_invalid"),
    "E_PRECISION_INVALID": (FailureCategory.INVALID_ARGUMENT, "precision_invalid"),
    "E_WEIGHTS_INVALID": (FailureCategory.INVALID_ARGUMENT, "weights_invalid"),
    "E_BASE_LENGTH": (FailureCategory.INVALID_ARGUMENT, "base_length_mismatch"),
    "E_BASE_AMOUNT_TYPE": (FailureCategory.INVALID_ARGUMENT, "base_amount_not_decimal"),
    "E_REMAINDER_LENGTH": (
        FailureCategory.INVALID_ARGUMENT,
        "remainder_length_mismatch",
    ),
    "E_REMAINDER_AMOUNT_TYPE": (
        FailureCategory.INVALID_ARGUMENT,
        "remainder_amount_not_decimal",
    ),
    "E_POSITION_RANGE": (FailureCategory.INVALID_ARGUMENT, "position_out_of_range"),
    "E_STRATEGY_UNKNOWN": (FailureCategory.INVALID_ARGUMENT, "strategy_unknown"),
    "E_STRATEGY_OPTIONS": (FailureCategory.INVALID_ARGUMENT, "strategy_options_invalid"),
    "E_SUM_MISMATCH": (FailureCategory.INCONSISTENT_STATE, "sum_mismatch"),
}


@dataclass(frozen=True)
class ErrorContext:
    """Structured payload describing an allocation failure."""

    code: str
    detail: str

    def as_message(self) -> str:
        return f"{self.code}: {self.detail}"

    @property
    def failure_category(self) -> FailureCategory:
        return _FAILURE_CODE_MAP.get(
            self.code, (FailureCategory.INVALID_ARGUMENT, self.code)
        )[0]

    @property
    def failure_code(self) -> str:
        return _FAILURE_CODE_MAP.get(
            self.code, (FailureCategory.INVALID_ARGUMENT, self.code)
        )[1]


class AllocationError(EngineError):
    """Base allocation error that preserves the canonical failure context."""

    def __init__(self, context: ErrorContext) -> None:
        super().__init__(context.as_message())
        self.context = context

    def failure_record(self) -> Dict[str, str]:
        return {
            "code": self.context.code,
            "detail": self.context.detail,
            "failure_category": self.context.failure_category.value,
            "failure_code": self.context.failure_code,
        }


class InvalidAllocationArgument(AllocationError, ValueError):
    """Caller-supplied input (or strategy output shape) violates the contract."""


class AllocationStateError(AllocationError):
    """Allocated parts do not add up to the requested total.

    Only a non-conforming strategy can produce this; it is never retried.
    """

    def __init__(
        self,
        context: ErrorContext,
        *,
        expected: Decimal,
        actual: Decimal,
    ) -> None:
        super().__init__(context)
        self.expected = expected
        self.actual = actual

    def failure_record(self) -> Dict[str, str]:
        record = super().failure_record()
        record["expected"] = str(self.expected)
        record["actual"] = str(self.actual)
        return record


def err(code: str, detail: str) -> InvalidAllocationArgument:
    """Build an :class:`InvalidAllocationArgument` with minimal ceremony."""

    context = ErrorContext(code=code, detail=detail)
    if context.failure_category is not FailureCategory.INVALID_ARGUMENT:
        raise TypeError(f"{code} is not an invalid-argument code")
    return InvalidAllocationArgument(context)


def sum_mismatch(expected: Decimal, actual: Decimal) -> AllocationStateError:
    """Build the fatal error raised when the final sum check fails."""

    context = ErrorContext(
        code="E_SUM_MISMATCH",
        detail=f"allocated parts sum to {actual}, expected {expected}",
    )
    return AllocationStateError(context, expected=expected, actual=actual)


__all__ = [
    "AllocationError",
    "AllocationStateError",
    "ErrorContext",
    "FailureCategory",
    "InvalidAllocationArgument",
    "err",
    "sum_mismatch",
]
