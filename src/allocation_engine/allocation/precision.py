"""Exact decimal helpers for minimal-unit arithmetic.

Amounts are ``decimal.Decimal`` end to end.  A *tick* is one minimal unit,
i.e. one ``precision``; remainders are converted to a signed tick count before
being spread across positions.
"""

from __future__ import annotations

from contextlib import contextmanager
from decimal import (
    ROUND_HALF_UP,
    Decimal,
    InvalidOperation,
    localcontext,
)
from typing import Iterable, Iterator

from .constants import RATIO_SCALE
from .exceptions import err

__all__ = [
    "as_decimal",
    "coerce_weights",
    "exact_sum",
    "floor_to_precision",
    "quantize_ratio",
    "scale_of",
    "to_units",
    "truncate_to_precision",
    "working_precision",
]

# Digits carried by intermediate results; wide enough that sums and integer
# divisions of realistic monetary amounts are exact.
_WORKING_DIGITS = 60


@contextmanager
def working_precision() -> Iterator[None]:
    """Widen the decimal context so products and sums of amounts stay exact."""

    with localcontext() as ctx:
        ctx.prec = _WORKING_DIGITS
        yield


def as_decimal(value: object, label: str, *, code: str) -> Decimal:
    """Coerce ``value`` to a finite ``Decimal`` or raise invalid-argument.

    ``int`` and ``str`` are accepted; ``float`` and ``bool`` are not, because a
    binary float cannot carry an exact monetary amount.
    """

    if value is None:
        raise err(code, f"{label} must not be null")
    if isinstance(value, bool) or isinstance(value, float):
        raise err(code, f"{label} must be an exact decimal, got {type(value).__name__}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as exc:
            raise err(code, f"{label} is not a decimal: {value!r}") from exc
    else:
        raise err(code, f"{label} must be a decimal, got {type(value).__name__}")
    if not result.is_finite():
        raise err(code, f"{label} must be finite, got {result}")
    return result


def scale_of(precision: Decimal) -> int:
    """Number of fractional digits implied by ``precision`` (0.01 -> 2)."""

    exponent = precision.normalize().as_tuple().exponent
    return max(0, -int(exponent))


def to_units(amount: Decimal, precision: Decimal) -> int:
    """Signed count of whole ticks in ``amount``, truncated toward zero."""

    with working_precision():
        return int(amount // precision)


def floor_to_precision(value: Decimal, precision: Decimal) -> Decimal:
    """Largest multiple of ``precision`` not above ``value``."""

    with working_precision():
        units = value // precision
        if value < 0 and units * precision != value:
            units -= 1
        return _at_scale(units * precision, precision)


def truncate_to_precision(value: Decimal, precision: Decimal) -> Decimal:
    """Multiple of ``precision`` obtained by rounding ``value`` toward zero."""

    with working_precision():
        return _at_scale((value // precision) * precision, precision)


def quantize_ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """``numerator / denominator`` at ``RATIO_SCALE`` digits, half-up."""

    with working_precision():
        return (numerator / denominator).quantize(
            Decimal(1).scaleb(-RATIO_SCALE), rounding=ROUND_HALF_UP
        )


def exact_sum(amounts: Iterable[Decimal]) -> Decimal:
    with working_precision():
        return sum(amounts, Decimal(0))


def _at_scale(amount: Decimal, precision: Decimal) -> Decimal:
    # "+ 0" folds negative zero back to zero.
    return (amount + 0).quantize(Decimal(1).scaleb(-scale_of(precision)))


def coerce_weights(weights: object, label: str = "weights") -> tuple[Decimal, ...]:
    """Validate a weight vector: non-empty, non-negative, positive sum."""

    if weights is None:
        raise err("E_WEIGHTS_INVALID", f"{label} must not be null")
    if isinstance(weights, (str, bytes)) or not isinstance(weights, Iterable):
        raise err("E_WEIGHTS_INVALID", f"{label} must be a sequence of decimals")
    values = tuple(
        as_decimal(value, f"{label}[{index}]", code="E_WEIGHTS_INVALID")
        for index, value in enumerate(weights)
    )
    if not values:
        raise err("E_WEIGHTS_INVALID", f"{label} must not be empty")
    for index, value in enumerate(values):
        if value < 0:
            raise err("E_WEIGHTS_INVALID", f"{label}[{index}] must be >= 0, got {value}")
    if exact_sum(values) <= 0:
        raise err("E_WEIGHTS_INVALID", f"{label} must sum to more than 0")
    return values
