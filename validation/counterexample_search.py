"""Counterexample search: differential testing against Python's ``int``.

This module runs independently of the test suite.  It systematically
searches for:

1. Postcondition violations: inputs where ``BigInteger`` disagrees with
   the reference ``int`` result or returns a non-canonical value.
2. Error condition violations: inputs that should raise but don't (or
   raise the wrong exception).
3. Property violations: algebraic relationships that fail for some
   input combination.

Inputs are edge values around limb boundaries, random multi-limb values
and, for division, adversarial dividend/divisor pairs built so that the
trial quotient digit has to be corrected.

Run directly::

    python -m validation.counterexample_search
"""
from __future__ import annotations

import itertools
import logging
import random
import sys
from dataclasses import dataclass, field

from pydantic import BaseModel, Field, field_validator

sys.path.insert(0, ".")

from big_integer import BigInteger
from errors import DivideByZero
from magnitude import BASE, LIMB_BITS, MASK
from spec import INVALID_LITERALS, BigIntegerSpec, MAX_SHIFT, build_spec

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class SearchConfig(BaseModel):
    """Knobs for one search run."""

    seed: int = 0
    random_pairs: int = Field(default=300, ge=0, le=1_000_000)
    max_limbs: int = Field(default=6, ge=1, le=256)
    include_adversarial: bool = True
    operations: list[str] | None = Field(
        default=None,
        description="Restrict the search to these operation names",
    )

    @field_validator("operations")
    @classmethod
    def known_operations(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        known = set(build_spec().operations)
        unknown = [name for name in v if name not in known]
        if unknown:
            raise ValueError(f"Unknown operations: {', '.join(unknown)}")
        return v


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    operation: str
    inputs: tuple
    expected: str
    actual: str
    description: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Counterexample Search Report",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category} / {cx.operation}")
                lines.append(f"      Inputs:   {cx.inputs}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
                lines.append(f"      {cx.description}")
        else:
            lines.append("\nNo counterexamples found, all checks passed.")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Input generation
# ---------------------------------------------------------------------------

def edge_values() -> list[int]:
    """Values on and around limb boundaries, both signs."""
    magnitudes = [
        0, 1, 2, 9, 10, MASK - 1, MASK, BASE, BASE + 1,
        (1 << 63) - 1, 1 << 63, (1 << 64) - 1, 1 << 64,
        (1 << 96) - 1, 1 << 96,
    ]
    values: list[int] = []
    for m in magnitudes:
        values.append(m)
        if m:
            values.append(-m)
    return values


def random_value(rng: random.Random, max_limbs: int) -> int:
    """A signed value whose limbs favour all-zero and all-one patterns."""
    limbs = rng.randint(1, max_limbs)
    value = 0
    for _ in range(limbs):
        kind = rng.random()
        if kind < 0.15:
            limb = 0
        elif kind < 0.3:
            limb = MASK
        elif kind < 0.4:
            limb = 1 << (LIMB_BITS - 1)
        else:
            limb = rng.getrandbits(LIMB_BITS)
        value = (value << LIMB_BITS) | limb
    return -value if rng.random() < 0.5 else value


def adversarial_division_pairs() -> list[tuple[int, int]]:
    """Dividend/divisor pairs that stress trial-digit correction."""
    divisors = [
        (1 << 63) + MASK,                       # top limb exactly 2**31
        (1 << 64) - 1,                          # all ones
        (1 << 32) + 1,
        (MASK << 32),                           # zero low limb
        (1 << 95) + (1 << 64) - 1,
        ((1 << 31) << 64) + 1,
        (1 << 96) - (1 << 32) + 1,
    ]
    pairs: list[tuple[int, int]] = [
        # trial digit 2**32 - 2 against a true digit of 2**32 - 4
        (39614081275578912866186559488, 9223372049739677694),
    ]
    for b in divisors:
        for q in (1, MASK, BASE - 2, BASE + 1, (1 << 64) - 1):
            for r in (0, 1, b - 1):
                a = b * q + r
                pairs.append((a, b))
                pairs.append((-a, b))
                pairs.append((a, -b))
    return pairs


def _pairs_for(
    op_name: str, config: SearchConfig, rng: random.Random,
) -> list[tuple[int, int]]:
    edges = edge_values()
    if op_name in ("lshift", "rshift"):
        counts = [0, 1, 31, 32, 33, 63, 64, 65, 100]
        pairs = [(a, k) for a in edges for k in counts]
        pairs += [
            (random_value(rng, config.max_limbs), rng.randint(0, MAX_SHIFT))
            for _ in range(config.random_pairs)
        ]
        return pairs

    pairs = list(itertools.product(edges, repeat=2))
    pairs += [
        (random_value(rng, config.max_limbs), random_value(rng, config.max_limbs))
        for _ in range(config.random_pairs)
    ]
    if op_name in ("div", "mod") and config.include_adversarial:
        pairs += adversarial_division_pairs()
    return pairs


def _unary_inputs(config: SearchConfig, rng: random.Random) -> list[int]:
    return edge_values() + [
        random_value(rng, config.max_limbs) for _ in range(config.random_pairs)
    ]


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_postcondition_violations(
    spec: BigIntegerSpec,
    config: SearchConfig,
    rng: random.Random,
) -> tuple[list[Counterexample], int]:
    """Check every postcondition over edge, random and adversarial inputs."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op_spec in _selected(spec, config):
        if op_spec.arity == 2:
            inputs = _pairs_for(op_name, config, rng)
        else:
            inputs = [(a,) for a in _unary_inputs(config, rng)]

        for args in inputs:
            if not op_spec.accepts(*args):
                continue
            checks += 1
            try:
                result = op_spec.apply(*args)
            except Exception as e:
                cxs.append(Counterexample(
                    category="unexpected_error",
                    operation=op_name,
                    inputs=args,
                    expected="no error",
                    actual=f"{type(e).__name__}: {e}",
                    description="Operation raised an unexpected exception",
                ))
                continue

            for post in op_spec.postconditions:
                if not post.check(*args, result):
                    cxs.append(Counterexample(
                        category="postcondition_violation",
                        operation=op_name,
                        inputs=args,
                        expected=post.description,
                        actual=f"result={result!r}",
                        description=f"Postcondition '{post.name}' violated",
                    ))

    return cxs, checks


def search_error_condition_violations(
    spec: BigIntegerSpec,
    config: SearchConfig,
    rng: random.Random,
) -> tuple[list[Counterexample], int]:
    """Verify every error condition raises the right exception."""
    cxs: list[Counterexample] = []
    checks = 0

    triggers: list[tuple[str, tuple, type, str]] = []
    for op_name, op_spec in _selected(spec, config):
        for ec in op_spec.error_conditions:
            if op_name == "text":
                for text in INVALID_LITERALS:
                    if ec.trigger(text):
                        triggers.append((op_name, (text,), ec.exception, ec.name))
                continue
            for a in edge_values():
                for b in (0, -1, -32, -BASE):
                    if ec.trigger(a, b):
                        triggers.append((op_name, (a, b), ec.exception, ec.name))

    for op_name, args, exc_type, ec_name in triggers:
        checks += 1
        try:
            if op_name == "text":
                result = BigInteger(args[0])
            else:
                result = spec.operations[op_name].apply(*args)
            cxs.append(Counterexample(
                category="missing_error",
                operation=op_name,
                inputs=args,
                expected=exc_type.__name__,
                actual=f"result={result!r}",
                description=f"Error condition '{ec_name}' should have triggered but didn't",
            ))
        except exc_type:
            pass  # expected
        except Exception as e:
            cxs.append(Counterexample(
                category="wrong_error",
                operation=op_name,
                inputs=args,
                expected=exc_type.__name__,
                actual=f"{type(e).__name__}: {e}",
                description=f"Wrong exception type for '{ec_name}'",
            ))

    return cxs, checks


def search_property_violations(
    spec: BigIntegerSpec,
    config: SearchConfig,
    rng: random.Random,
) -> tuple[list[Counterexample], int]:
    """Check every algebraic property on sampled values."""
    cxs: list[Counterexample] = []
    checks = 0
    values = _unary_inputs(config, rng)
    pairs = list(zip(values, reversed(values)))

    for op_name, op_spec in _selected(spec, config):
        for prop in op_spec.properties:
            inputs = [(a,) for a in values] if prop.arity == 1 else pairs
            for args in inputs:
                checks += 1
                try:
                    ok = prop.check(*(BigInteger(v) for v in args))
                except DivideByZero:
                    continue
                except Exception as e:
                    cxs.append(Counterexample(
                        category="unexpected_error",
                        operation=op_name,
                        inputs=args,
                        expected=prop.description,
                        actual=f"{type(e).__name__}: {e}",
                        description=f"Property '{prop.name}' raised",
                    ))
                    continue
                if not ok:
                    cxs.append(Counterexample(
                        category="property_violation",
                        operation=op_name,
                        inputs=args,
                        expected=prop.description,
                        actual="property does not hold",
                        description=f"Property '{prop.name}' violated",
                    ))

    return cxs, checks


def _selected(spec: BigIntegerSpec, config: SearchConfig):
    for name, op_spec in spec.operations.items():
        if config.operations is None or name in config.operations:
            yield name, op_spec


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(config: SearchConfig) -> SearchReport:
    """Run the complete counterexample search for one configuration."""
    spec = build_spec()
    rng = random.Random(config.seed)
    report = SearchReport()

    for search_fn in (
        search_postcondition_violations,
        search_error_condition_violations,
        search_property_violations,
    ):
        cxs, checks = search_fn(spec, config, rng)
        logger.info("%s: %d checks, %d counterexamples",
                    search_fn.__name__, checks, len(cxs))
        for cx in cxs:
            logger.warning("%s in %s for %s", cx.category, cx.operation, cx.inputs)
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


def main() -> None:
    """Run the counterexample search across several configurations."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    configs = [
        ("single limb, no adversarial pairs",
         SearchConfig(seed=1, random_pairs=200, max_limbs=1, include_adversarial=False)),
        ("up to 4 limbs",
         SearchConfig(seed=2, random_pairs=300, max_limbs=4)),
        ("up to 12 limbs, division only",
         SearchConfig(seed=3, random_pairs=500, max_limbs=12, operations=["div", "mod"])),
    ]

    all_passed = True
    for name, config in configs:
        print(f"\n--- Configuration: {name} ---")
        report = run_search(config)
        print(report.summary())
        if not report.passed:
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("ALL CONFIGURATIONS PASSED")
    else:
        print("SOME CONFIGURATIONS HAD COUNTEREXAMPLES")
        sys.exit(1)


if __name__ == "__main__":
    main()
