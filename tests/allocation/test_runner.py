from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import polars as pl
import pytest
import yaml

from allocation_engine.allocation.base import EvenAllocator
from allocation_engine.allocation.exceptions import AllocationStateError
from allocation_engine.allocation.kernel import allocate_detailed
from allocation_engine.allocation.policy import policy_from_mapping
from allocation_engine.allocation.remainder import SequentialRemainder
from allocation_engine.allocation.runner import AllocationRunner
from allocation_engine.allocation.writer import LEDGER_COLUMNS, ledger_frame, write_ledger


def _policy_file(path: Path) -> Path:
    payload = {
        "policy_version": "2026-10-01",
        "precision": "0.01",
        "base_allocator": {"kind": "weighted", "weights": ["1", "2", "3"]},
        "remainder_strategy": {"kind": "max_value"},
    }
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    return path


def test_ledger_frame_keeps_exact_strings() -> None:
    breakdown = allocate_detailed(Decimal("100.01"), 4, EvenAllocator(), SequentialRemainder())
    frame = ledger_frame(breakdown)

    assert tuple(frame.columns) == LEDGER_COLUMNS
    assert frame["position"].to_list() == [0, 1, 2, 3]
    assert frame["base_amount"].to_list() == ["25.00"] * 4
    assert frame["adjustment"].to_list() == ["0.01", "0.00", "0.00", "0.00"]
    assert frame["amount"].to_list() == ["25.01", "25.00", "25.00", "25.00"]


def test_write_ledger_formats(tmp_path: Path) -> None:
    breakdown = allocate_detailed(Decimal("10.00"), 3, EvenAllocator(), SequentialRemainder())

    parquet_path = write_ledger(breakdown, tmp_path / "out" / "ledger.parquet")
    assert pl.read_parquet(parquet_path)["amount"].to_list() == ["3.34", "3.33", "3.33"]

    csv_path = write_ledger(breakdown, tmp_path / "ledger.csv")
    frame = pl.read_csv(csv_path, schema_overrides={"amount": pl.Utf8})
    assert frame["amount"].to_list() == ["3.34", "3.33", "3.33"]

    with pytest.raises(ValueError):
        write_ledger(breakdown, tmp_path / "ledger.json")


def test_runner_applies_policy_and_writes_ledger(tmp_path: Path) -> None:
    policy_path = _policy_file(tmp_path / "policy.yaml")
    outputs = AllocationRunner().run(
        total=Decimal("100.04"),
        quantity=3,
        policy_path=policy_path,
        output_path=tmp_path / "ledger.parquet",
    )

    assert outputs.amounts == (Decimal("16.67"), Decimal("33.34"), Decimal("50.03"))
    assert outputs.breakdown.remainder == Decimal("0.01")
    assert outputs.policy.digest is not None
    assert outputs.ledger_path is not None and outputs.ledger_path.exists()
    frame = pl.read_parquet(outputs.ledger_path)
    assert frame["adjustment"].to_list() == ["0.00", "0.00", "0.01"]


def test_runner_requires_a_policy() -> None:
    with pytest.raises(ValueError):
        AllocationRunner().run(total=Decimal("1.00"), quantity=1)


def test_runner_surfaces_inconsistent_state() -> None:
    policy = policy_from_mapping(
        {
            "policy_version": "2026-10-01",
            "base_allocator": {"kind": "even"},
            "remainder_strategy": {"kind": "sequential"},
        }
    )
    with pytest.raises(AllocationStateError):
        AllocationRunner().run(total=Decimal("100.005"), quantity=4, policy=policy)
