from __future__ import annotations

import random
from decimal import Decimal

import pytest

from allocation_engine.allocation.exceptions import InvalidAllocationArgument
from allocation_engine.allocation.remainder import (
    FixedPositionRemainder,
    MaxValueRemainder,
    MinValueRemainder,
    RandomRemainder,
    SequentialByMaxValue,
    SequentialByMinValue,
    SequentialRemainder,
    WeightedRemainder,
    distribute_ticks,
)

D = Decimal
CENT = D("0.01")
BASE = (D("1.00"), D("3.00"), D("2.00"))


class _ReverseShuffle:
    def shuffle(self, x: list) -> None:
        x.reverse()


def test_sequential_adds_ticks_in_index_order() -> None:
    strategy = SequentialRemainder()
    assert strategy(BASE, D("0.02"), CENT) == (D("1.01"), D("3.01"), D("2.00"))


def test_sequential_wraps_when_ticks_exceed_positions() -> None:
    strategy = SequentialRemainder()
    assert strategy(BASE, D("0.05"), CENT) == (D("1.02"), D("3.02"), D("2.01"))


def test_sequential_removes_ticks_for_negative_remainder() -> None:
    strategy = SequentialRemainder()
    assert strategy(BASE, D("-0.02"), CENT) == (D("0.99"), D("2.99"), D("2.00"))


def test_negative_ticks_skip_positions_without_headroom() -> None:
    strategy = SequentialRemainder()
    base = (D("0.00"), D("0.01"), D("0.00"))
    assert strategy(base, D("-0.01"), CENT) == (D("0.00"), D("0.00"), D("0.00"))
    # Nothing left to take the second tick from; the shortfall is left in place.
    assert strategy(base, D("-0.02"), CENT) == (D("0.00"), D("0.00"), D("0.00"))


def test_distribute_ticks_reports_unplaced_ticks() -> None:
    amounts = [D("0.00"), D("0.01")]
    assert distribute_ticks(amounts, [0, 1], -3, CENT) == -2
    assert amounts == [D("0.00"), D("0.00")]

    amounts = [D("1.00"), D("1.00")]
    assert distribute_ticks(amounts, [1], 3, CENT, wrap=False) == 2
    assert amounts == [D("1.00"), D("1.01")]


def test_sequential_by_min_value() -> None:
    strategy = SequentialByMinValue()
    assert strategy(BASE, D("0.02"), CENT) == (D("1.01"), D("3.00"), D("2.01"))


def test_sequential_by_max_value() -> None:
    strategy = SequentialByMaxValue()
    assert strategy(BASE, D("0.02"), CENT) == (D("1.00"), D("3.01"), D("2.01"))


def test_sorted_orderings_break_ties_by_index() -> None:
    base = (D("5.00"), D("4.00"), D("5.00"), D("4.00"))
    assert SequentialByMaxValue()(base, D("0.01"), CENT) == (
        D("5.01"),
        D("4.00"),
        D("5.00"),
        D("4.00"),
    )
    assert SequentialByMinValue()(base, D("0.03"), CENT) == (
        D("5.01"),
        D("4.01"),
        D("5.00"),
        D("4.01"),
    )


def test_min_and_max_value_concentrate_whole_remainder() -> None:
    assert MinValueRemainder()(BASE, D("0.05"), CENT) == (D("1.05"), D("3.00"), D("2.00"))
    assert MaxValueRemainder()(BASE, D("0.05"), CENT) == (D("1.00"), D("3.05"), D("2.00"))

    ties = (D("2.00"), D("2.00"))
    assert MaxValueRemainder()(ties, D("0.01"), CENT) == (D("2.01"), D("2.00"))
    assert MinValueRemainder()(ties, D("0.01"), CENT) == (D("2.01"), D("2.00"))


def test_min_and_max_value_ignore_negative_remainder() -> None:
    assert MinValueRemainder()(BASE, D("-0.01"), CENT) == BASE
    assert MaxValueRemainder()(BASE, D("-0.01"), CENT) == BASE


def test_fixed_position() -> None:
    strategy = FixedPositionRemainder(2)
    assert strategy(BASE, D("0.03"), CENT) == (D("1.00"), D("3.00"), D("2.03"))
    assert strategy(BASE, D("-0.03"), CENT) == (D("1.00"), D("3.00"), D("1.97"))
    # Would go negative: left alone.
    assert FixedPositionRemainder(0)(BASE, D("-3.00"), CENT) == BASE


def test_fixed_position_range_checks() -> None:
    with pytest.raises(InvalidAllocationArgument):
        FixedPositionRemainder(-1)
    with pytest.raises(InvalidAllocationArgument) as excinfo:
        FixedPositionRemainder(5)(BASE, D("0.01"), CENT)
    assert excinfo.value.context.code == "E_POSITION_RANGE"


def test_random_uses_injected_shuffle_source() -> None:
    strategy = RandomRemainder(rng=_ReverseShuffle())
    assert strategy(BASE, D("0.02"), CENT) == (D("1.00"), D("3.01"), D("2.01"))


def test_random_with_seed_is_repeatable() -> None:
    base = tuple(D("10.00") for _ in range(6))
    strategy = RandomRemainder(seed=7)

    order = list(range(6))
    random.Random(7).shuffle(order)
    expected = list(base)
    for index in order[:4]:
        expected[index] += CENT

    assert strategy(base, D("0.04"), CENT) == tuple(expected)
    assert strategy(base, D("0.04"), CENT) == tuple(expected)


def test_random_without_seed_preserves_sum() -> None:
    base = tuple(D("10.00") for _ in range(5))
    result = RandomRemainder()(base, D("0.03"), CENT)
    assert sum(result) == D("50.03")
    assert sorted(result) == [D("10.00")] * 2 + [D("10.01")] * 3


def test_weighted_remainder_positive() -> None:
    strategy = WeightedRemainder([D(1), D(2), D(3)])
    base = (D("10.00"),) * 3
    # shares 0.00 / 0.01 / 0.02, then the two lost ticks: first to the
    # zero-share position, then to the heaviest weight.
    assert strategy(base, D("0.05"), CENT) == (D("10.01"), D("10.01"), D("10.03"))


def test_weighted_remainder_negative() -> None:
    strategy = WeightedRemainder([D(1), D(2), D(3)])
    base = (D("10.00"),) * 3
    assert strategy(base, D("-0.05"), CENT) == (D("9.99"), D("9.99"), D("9.97"))


def test_weighted_remainder_negative_never_goes_below_zero() -> None:
    strategy = WeightedRemainder([D(1), D(1)])
    # The empty position cannot give up its share; the other one covers it.
    assert strategy((D("0.00"), D("10.00")), D("-0.02"), CENT) == (D("0.00"), D("9.98"))
    # A share larger than the position is cut to what the position holds.
    assert strategy((D("0.01"), D("10.00")), D("-0.04"), CENT) == (D("0.00"), D("9.97"))


def test_weighted_remainder_length_mismatch() -> None:
    with pytest.raises(InvalidAllocationArgument):
        WeightedRemainder([D(1), D(2)])(BASE, D("0.01"), CENT)


@pytest.mark.parametrize(
    "strategy",
    [
        SequentialRemainder(),
        RandomRemainder(),
        SequentialByMinValue(),
        SequentialByMaxValue(),
        MinValueRemainder(),
        MaxValueRemainder(),
        FixedPositionRemainder(1),
        WeightedRemainder([D(1), D(1), D(1)]),
    ],
)
def test_zero_remainder_is_a_no_op(strategy: object) -> None:
    assert strategy(BASE, D("0.00"), CENT) == BASE  # type: ignore[operator]
