"""Ledger output for allocation breakdowns."""

from __future__ import annotations

from pathlib import Path

import polars as pl

from .types import AllocationBreakdown

__all__ = ["LEDGER_COLUMNS", "ledger_frame", "write_ledger"]

LEDGER_COLUMNS = ("position", "base_amount", "adjustment", "amount")


def ledger_frame(breakdown: AllocationBreakdown) -> pl.DataFrame:
    """One row per position; amounts are kept as exact decimal strings."""

    return pl.DataFrame(
        {
            "position": list(range(breakdown.quantity)),
            "base_amount": [str(value) for value in breakdown.base_amounts],
            "adjustment": [str(value) for value in breakdown.adjustments],
            "amount": [str(value) for value in breakdown.amounts],
        },
        schema={
            "position": pl.Int64,
            "base_amount": pl.Utf8,
            "adjustment": pl.Utf8,
            "amount": pl.Utf8,
        },
    )


def write_ledger(breakdown: AllocationBreakdown, path: Path) -> Path:
    """Write the ledger as parquet or CSV, chosen by file suffix."""

    output = Path(path).expanduser().resolve()
    output.parent.mkdir(parents=True, exist_ok=True)
    frame = ledger_frame(breakdown)
    suffix = output.suffix.lower()
    if suffix == ".parquet":
        frame.write_parquet(output, compression="zstd")
    elif suffix == ".csv":
        frame.write_csv(output)
    else:
        raise ValueError(f"unsupported ledger format '{suffix}' (use .parquet or .csv)")
    return output
