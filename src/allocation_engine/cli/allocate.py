"""CLI wrapper for a single allocation.

Either point it at a governed policy YAML, or name the strategies inline::

    allocation-engine-allocate --total 100.00 --quantity 3 \\
        --base weighted --weights 1,2,3 --remainder sequential

The final amounts are printed one per line, in position order.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from allocation_engine.allocation.constants import (
    BASE_EVEN,
    DEFAULT_PRECISION,
    REMAINDER_SEQUENTIAL,
)
from allocation_engine.allocation.exceptions import AllocationStateError
from allocation_engine.allocation.policy import (
    AllocationPolicy,
    load_policy,
    policy_from_mapping,
)
from allocation_engine.allocation.registry import BASE_ALLOCATORS, REMAINDER_STRATEGIES
from allocation_engine.allocation.runner import AllocationRunner
from allocation_engine.core.errors import EngineError
from allocation_engine.core.logging import add_file_handler, configure_logging, resolve_level

EXIT_OK = 0
EXIT_INCONSISTENT = 1
EXIT_INVALID = 2


def _split_decimals(raw: str | None) -> list[str] | None:
    if raw is None:
        return None
    values = [item.strip() for item in raw.split(",")]
    if not all(values):
        raise argparse.ArgumentTypeError(f"malformed decimal list '{raw}'")
    return values


def _inline_policy(args: argparse.Namespace) -> AllocationPolicy:
    base: dict[str, object] = {"kind": args.base}
    weights = _split_decimals(args.weights)
    if weights is not None:
        base["weights"] = weights

    remainder: dict[str, object] = {"kind": args.remainder}
    remainder_weights = _split_decimals(args.remainder_weights)
    if remainder_weights is not None:
        remainder["weights"] = remainder_weights
    if args.seed is not None:
        remainder["seed"] = args.seed
    if args.position is not None:
        remainder["position"] = args.position

    return policy_from_mapping(
        {
            "policy_version": "inline",
            "precision": args.precision,
            "base_allocator": base,
            "remainder_strategy": remainder,
        }
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Split an exact total into ordered parts that add up to it.",
    )
    parser.add_argument("--total", required=True, help="Total amount to split (exact decimal, >= 0).")
    parser.add_argument("--quantity", required=True, type=int, help="Number of parts (>= 1).")
    parser.add_argument(
        "--policy",
        dest="policy_path",
        type=Path,
        help="Allocation policy YAML; overrides the inline strategy options below.",
    )
    parser.add_argument("--base", choices=sorted(BASE_ALLOCATORS), default=BASE_EVEN, help="Base allocator.")
    parser.add_argument("--weights", help="Comma-separated weights for the weighted base allocator.")
    parser.add_argument(
        "--remainder",
        choices=sorted(REMAINDER_STRATEGIES),
        default=REMAINDER_SEQUENTIAL,
        help="Remainder strategy.",
    )
    parser.add_argument(
        "--remainder-weights",
        dest="remainder_weights",
        help="Comma-separated weights for the weighted remainder strategy.",
    )
    parser.add_argument("--seed", type=int, help="Shuffle seed for the random remainder strategy.")
    parser.add_argument("--position", type=int, help="Target index for the fixed_position remainder strategy.")
    parser.add_argument("--precision", default=str(DEFAULT_PRECISION), help="Minimal allocatable unit.")
    parser.add_argument("--output", type=Path, help="Optional ledger output (.parquet or .csv).")
    parser.add_argument(
        "--result-json",
        dest="result_json",
        type=Path,
        help="Optional JSON file capturing the breakdown for downstream tooling.",
    )
    parser.add_argument(
        "--log-level",
        type=resolve_level,
        default="WARNING",
        help="Logging level (default WARNING).",
    )
    parser.add_argument("--log-file", dest="log_file", type=Path, help="Also append logs to this file.")

    args = parser.parse_args(argv)
    configure_logging(level=args.log_level)
    if args.log_file is not None:
        add_file_handler(args.log_file, level=args.log_level)

    try:
        if args.policy_path is not None:
            policy = load_policy(args.policy_path)
        else:
            policy = _inline_policy(args)
        result = AllocationRunner().run(
            total=args.total,
            quantity=args.quantity,
            policy=policy,
            output_path=args.output,
        )
    except AllocationStateError as exc:
        print(
            f"[allocate] inconsistent allocation: {json.dumps(exc.failure_record(), sort_keys=True)}",
            file=sys.stderr,
        )
        return EXIT_INCONSISTENT
    except (argparse.ArgumentTypeError, ValueError, EngineError) as exc:
        # Policy and argument errors are ValueErrors; EngineError covers hashing.
        print(f"[allocate] invalid input: {exc}", file=sys.stderr)
        return EXIT_INVALID

    for amount in result.amounts:
        print(amount)

    if args.result_json:
        breakdown = result.breakdown
        payload = {
            "policy_version": result.policy.policy_version,
            "total": str(breakdown.total),
            "quantity": breakdown.quantity,
            "precision": str(breakdown.precision),
            "base_amounts": [str(value) for value in breakdown.base_amounts],
            "remainder": str(breakdown.remainder),
            "amounts": [str(value) for value in breakdown.amounts],
        }
        args.result_json.expanduser().resolve().write_text(
            json.dumps(payload, indent=2, sort_keys=True),
            encoding="utf-8",
        )

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
