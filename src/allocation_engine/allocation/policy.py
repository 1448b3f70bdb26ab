"""Policy loading and validation for governed allocation runs.

A policy pins the precision and the two strategies used for a family of
allocations (e.g. one payout ledger) so they can be reviewed and versioned
alongside the data.  Example::

    policy_version: "2026-10-01"
    precision: "0.01"
    base_allocator:
      kind: weighted
      weights: ["1", "2", "3"]
    remainder_strategy:
      kind: random
      seed: 7

Amounts and weights must be quoted strings or integers; YAML floats are
refused because they cannot carry exact decimals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Dict, Mapping, Tuple

import yaml
from jsonschema import Draft202012Validator

from allocation_engine.core.hashing import sha256_hex

from .constants import (
    BASE_WEIGHTED,
    DEFAULT_PRECISION,
    REMAINDER_FIXED_POSITION,
    REMAINDER_WEIGHTED,
)
from .exceptions import InvalidAllocationArgument
from .precision import as_decimal
from .registry import (
    BASE_ALLOCATORS,
    REMAINDER_STRATEGIES,
    resolve_base_allocator,
    resolve_remainder_strategy,
)
from .types import BaseAllocator, RemainderStrategy

__all__ = [
    "AllocationPolicy",
    "PolicyLoadingError",
    "StrategySpec",
    "load_policy",
    "policy_from_mapping",
]


class PolicyLoadingError(ValueError):
    """Raised when an allocation policy fails validation."""


_EXACT_NUMBER = {"type": ["string", "integer"]}

POLICY_SCHEMA: Mapping[str, object] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "required": ["policy_version", "base_allocator", "remainder_strategy"],
    "properties": {
        "policy_version": {"type": "string", "minLength": 1},
        "notes": {"type": "string"},
        "precision": _EXACT_NUMBER,
        "base_allocator": {
            "type": "object",
            "additionalProperties": False,
            "required": ["kind"],
            "properties": {
                "kind": {"enum": sorted(BASE_ALLOCATORS)},
                "weights": {"type": "array", "minItems": 1, "items": _EXACT_NUMBER},
            },
        },
        "remainder_strategy": {
            "type": "object",
            "additionalProperties": False,
            "required": ["kind"],
            "properties": {
                "kind": {"enum": sorted(REMAINDER_STRATEGIES)},
                "weights": {"type": "array", "minItems": 1, "items": _EXACT_NUMBER},
                "seed": {"type": "integer"},
                "position": {"type": "integer", "minimum": 0},
            },
        },
    },
}


@dataclass(frozen=True)
class StrategySpec:
    """Strategy name plus the options passed to its factory."""

    kind: str
    options: Mapping[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class AllocationPolicy:
    """Resolved allocation policy."""

    policy_version: str
    precision: Decimal
    base_allocator: StrategySpec
    remainder_strategy: StrategySpec
    path: Path | None = None
    digest: str | None = None

    def build_base_allocator(self) -> BaseAllocator:
        return resolve_base_allocator(
            self.base_allocator.kind, **dict(self.base_allocator.options)
        )

    def build_remainder_strategy(self) -> RemainderStrategy:
        return resolve_remainder_strategy(
            self.remainder_strategy.kind, **dict(self.remainder_strategy.options)
        )


def load_policy(path: Path | str) -> AllocationPolicy:
    """Load and validate an allocation policy YAML file."""

    policy_path = Path(path).expanduser().resolve()
    try:
        payload = yaml.safe_load(policy_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise PolicyLoadingError(f"policy file not found: {policy_path}") from exc
    except yaml.YAMLError as exc:
        raise PolicyLoadingError(f"failed to parse policy YAML: {exc}") from exc

    policy = policy_from_mapping(payload)
    return AllocationPolicy(
        policy_version=policy.policy_version,
        precision=policy.precision,
        base_allocator=policy.base_allocator,
        remainder_strategy=policy.remainder_strategy,
        path=policy_path,
        digest=sha256_hex(policy_path),
    )


def policy_from_mapping(payload: object) -> AllocationPolicy:
    """Validate an already-parsed policy payload."""

    if not isinstance(payload, dict):
        raise PolicyLoadingError("policy must be a mapping")
    validator = Draft202012Validator(POLICY_SCHEMA)
    errors = sorted(validator.iter_errors(payload), key=lambda error: list(error.path))
    if errors:
        first = errors[0]
        location = "/".join(str(part) for part in first.path) or "<root>"
        raise PolicyLoadingError(f"policy invalid at {location}: {first.message}")

    precision = _expect_decimal(payload.get("precision", str(DEFAULT_PRECISION)), "precision")
    if precision <= 0:
        raise PolicyLoadingError(f"precision must be > 0, got {precision}")

    base = _strategy_spec(payload["base_allocator"], "base_allocator")
    remainder = _strategy_spec(payload["remainder_strategy"], "remainder_strategy")
    if base.kind == BASE_WEIGHTED and "weights" not in base.options:
        raise PolicyLoadingError("base_allocator.weights is required for kind 'weighted'")
    if remainder.kind == REMAINDER_WEIGHTED and "weights" not in remainder.options:
        raise PolicyLoadingError(
            "remainder_strategy.weights is required for kind 'weighted'"
        )
    if remainder.kind == REMAINDER_FIXED_POSITION and "position" not in remainder.options:
        raise PolicyLoadingError(
            "remainder_strategy.position is required for kind 'fixed_position'"
        )

    policy = AllocationPolicy(
        policy_version=payload["policy_version"],
        precision=precision,
        base_allocator=base,
        remainder_strategy=remainder,
    )
    # Strategy options are checked at load time.
    try:
        policy.build_base_allocator()
        policy.build_remainder_strategy()
    except InvalidAllocationArgument as exc:
        raise PolicyLoadingError(str(exc)) from exc
    return policy


# ---------------------------------------------------------------------------#
# Helper utilities


def _strategy_spec(obj: Mapping[str, object], label: str) -> StrategySpec:
    options: Dict[str, object] = {}
    for key, value in obj.items():
        if key == "kind":
            continue
        if key == "weights":
            options[key] = _expect_weights(value, f"{label}.weights")
        else:
            options[key] = value
    return StrategySpec(kind=str(obj["kind"]), options=options)


def _expect_weights(obj: object, label: str) -> Tuple[Decimal, ...]:
    if not isinstance(obj, list):
        raise PolicyLoadingError(f"{label} must be a list")
    return tuple(
        _expect_decimal(value, f"{label}[{index}]", code="E_WEIGHTS_INVALID")
        for index, value in enumerate(obj)
    )


def _expect_decimal(obj: object, label: str, *, code: str = "E_PRECISION_INVALID") -> Decimal:
    try:
        return as_decimal(obj, label, code=code)
    except InvalidAllocationArgument as exc:
        raise PolicyLoadingError(f"{label} must be an exact decimal: {exc}") from exc
