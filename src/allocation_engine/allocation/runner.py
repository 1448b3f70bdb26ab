"""Runner for policy-driven allocations."""

from __future__ import annotations

import time
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Optional

from allocation_engine.core.logging import get_logger

from .kernel import allocate_detailed
from .policy import AllocationPolicy, load_policy
from .types import AllocationBreakdown
from .writer import write_ledger

__all__ = ["AllocationRunOutputs", "AllocationRunner"]

logger = get_logger(__name__)


@dataclass(frozen=True)
class AllocationRunOutputs:
    """Materialised artefacts emitted by the allocation runner."""

    policy: AllocationPolicy
    breakdown: AllocationBreakdown
    ledger_path: Optional[Path]
    elapsed_seconds: float

    @property
    def amounts(self) -> tuple[Decimal, ...]:
        return self.breakdown.amounts


class AllocationRunner:
    """Apply a governed policy to a total and optionally persist the ledger."""

    def run(
        self,
        *,
        total: Decimal,
        quantity: int,
        policy: AllocationPolicy | None = None,
        policy_path: Path | None = None,
        output_path: Path | None = None,
    ) -> AllocationRunOutputs:
        if policy is None:
            if policy_path is None:
                raise ValueError("either policy or policy_path must be supplied")
            policy = load_policy(policy_path)

        started = time.perf_counter()
        logger.info(
            "allocation start: policy_version=%s total=%s quantity=%s precision=%s "
            "base=%s remainder=%s",
            policy.policy_version,
            total,
            quantity,
            policy.precision,
            policy.base_allocator.kind,
            policy.remainder_strategy.kind,
        )
        breakdown = allocate_detailed(
            total,
            quantity,
            policy.build_base_allocator(),
            policy.build_remainder_strategy(),
            policy.precision,
        )

        ledger_path: Path | None = None
        if output_path is not None:
            ledger_path = write_ledger(breakdown, output_path)
            logger.info("allocation ledger written: %s", ledger_path)

        elapsed = time.perf_counter() - started
        logger.info(
            "allocation complete: remainder=%s positions_adjusted=%d elapsed=%.3fs",
            breakdown.remainder,
            sum(1 for value in breakdown.adjustments if value != 0),
            elapsed,
        )
        return AllocationRunOutputs(
            policy=policy,
            breakdown=breakdown,
            ledger_path=ledger_path,
            elapsed_seconds=elapsed,
        )
