"""Validation helpers for allocation inputs and strategy outputs."""

from __future__ import annotations

from decimal import Decimal
from typing import Sequence, Tuple

from .exceptions import err, sum_mismatch
from .precision import as_decimal, exact_sum

__all__ = [
    "validate_amounts",
    "validate_precision",
    "validate_quantity",
    "validate_sum",
    "validate_total",
]


def validate_total(total: object) -> Decimal:
    value = as_decimal(total, "total", code="E_TOTAL_INVALID")
    if value < 0:
        raise err("E_TOTAL_INVALID", f"total must be >= 0, got {value}")
    return value


def validate_quantity(quantity: object) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise err("E_QUANTITY_INVALID", f"quantity must be an integer, got {quantity!r}")
    if quantity < 1:
        raise err("E_QUANTITY_INVALID", f"quantity must be >= 1, got {quantity}")
    return quantity


def validate_precision(precision: object) -> Decimal:
    value = as_decimal(precision, "precision", code="E_PRECISION_INVALID")
    if value <= 0:
        raise err("E_PRECISION_INVALID", f"precision must be > 0, got {value}")
    return value


def validate_amounts(
    amounts: object,
    quantity: int,
    *,
    stage: str,
) -> Tuple[Decimal, ...]:
    """Check a strategy returned ``quantity`` decimals and freeze them."""

    length_code = "E_BASE_LENGTH" if stage == "base" else "E_REMAINDER_LENGTH"
    type_code = "E_BASE_AMOUNT_TYPE" if stage == "base" else "E_REMAINDER_AMOUNT_TYPE"
    if amounts is None or isinstance(amounts, (str, bytes)):
        raise err(length_code, f"{stage} strategy returned {amounts!r}, expected a sequence")
    try:
        values = tuple(amounts)  # type: ignore[call-overload]
    except TypeError as exc:
        raise err(length_code, f"{stage} strategy returned a non-sequence") from exc
    if len(values) != quantity:
        raise err(
            length_code,
            f"{stage} strategy returned {len(values)} amounts, expected {quantity}",
        )
    for index, value in enumerate(values):
        if not isinstance(value, Decimal) or not value.is_finite():
            raise err(
                type_code,
                f"{stage} strategy returned {value!r} at position {index}",
            )
    return values


def validate_sum(amounts: Sequence[Decimal], total: Decimal) -> None:
    """Raise the fatal sum-mismatch error unless ``sum(amounts) == total``."""

    actual = exact_sum(amounts)
    if actual != total:
        raise sum_mismatch(expected=total, actual=actual)
