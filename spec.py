"""Formal contract for the big integer type.

Each operation is specified as a collection of:
- preconditions: what inputs must satisfy before the operation
- postconditions: what the output must satisfy given valid inputs
- error conditions: what inputs must cause specific exceptions
- algebraic properties: mathematical relationships that must hold

Inputs are plain Python ints; Python's own ``int`` is the reference
oracle the postconditions compare against.  The contract is
machine-readable: the conformance tests and the counterexample search
iterate over it instead of hard-coding expectations.

Layers
------
OperationSpec   per-operation contract (pre/post/error/properties)
BranchSpec      every decision point that white-box tests must cover
BigIntegerSpec  the full contract
build_spec()    constructs the BigIntegerSpec
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from big_integer import BigInteger
from errors import DivideByZero, InvalidFormat
from magnitude import MASK


# ---------------------------------------------------------------------------
# Spec building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Precondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[..., bool]
    exception: type


@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    arity: int          # how many free BigInteger values the check needs
    check: Callable[..., bool]


@dataclass(frozen=True)
class OperationSpec:
    name: str
    arity: int
    apply: Callable[..., Any]   # takes Python ints, returns the operation result
    preconditions: list[Precondition]
    postconditions: list[Postcondition]
    error_conditions: list[ErrorCondition]
    properties: list[AlgebraicProperty]

    def accepts(self, *args: int) -> bool:
        return all(pre.check(*args) for pre in self.preconditions)


@dataclass(frozen=True)
class BranchSpec:
    """A decision point in the implementation that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which operation / helper this belongs to


@dataclass(frozen=True)
class BigIntegerSpec:
    """Complete contract for the value type."""

    operations: dict[str, OperationSpec]
    branches: list[BranchSpec]

    @property
    def all_properties(self) -> list[tuple[str, AlgebraicProperty]]:
        out: list[tuple[str, AlgebraicProperty]] = []
        for name, op in self.operations.items():
            for prop in op.properties:
                out.append((name, prop))
        return out

    @property
    def all_postconditions(self) -> list[tuple[str, Postcondition]]:
        out: list[tuple[str, Postcondition]] = []
        for name, op in self.operations.items():
            for post in op.postconditions:
                out.append((name, post))
        return out

    @property
    def branch_ids(self) -> set[str]:
        return {b.id for b in self.branches}


# ---------------------------------------------------------------------------
# Helpers used inside the contract predicates
# ---------------------------------------------------------------------------

def truncdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero (not floor division).

    Python's ``//`` rounds toward negative infinity.  C, Java and Rust
    truncate toward zero instead, as does ``BigInteger``.
    """
    q, r = divmod(a, b)
    # divmod rounds toward -inf; adjust when the result is negative
    # and there is a remainder.
    if r != 0 and (a < 0) != (b < 0):
        q += 1
    return q


def truncmod(a: int, b: int) -> int:
    """Remainder matching ``truncdiv``: it takes the sign of ``a``."""
    return a - truncdiv(a, b) * b


def is_canonical(value: BigInteger) -> bool:
    """No most-significant zero limb, limbs in range, zero never negative."""
    limbs = value.limbs
    if not limbs:
        return False
    if any(not 0 <= limb <= MASK for limb in limbs):
        return False
    if len(limbs) > 1 and limbs[-1] == 0:
        return False
    if limbs == (0,) and value.negative:
        return False
    return True


def canonical_decimal(text: str) -> str:
    """The text a valid decimal literal must format back to."""
    negative = text.startswith("-")
    digits = text.lstrip("+-").lstrip("0")
    if not digits:
        return "0"
    return f"-{digits}" if negative else digits


def _matches(result: BigInteger, expected: int) -> bool:
    return is_canonical(result) and int(result) == expected


INVALID_LITERALS = (
    "", "-", "+", "--1", "+-1", "1-", "12a", "a12", " 1", "1 ", "1_000",
    "0x10", "1.0", "1e3", "١",
)

# shift counts are plain ints in [0, MAX_SHIFT] for sampled checks
MAX_SHIFT = 200


# ---------------------------------------------------------------------------
# Spec builder
# ---------------------------------------------------------------------------

def _binary(
    name: str,
    apply: Callable[[int, int], Any],
    oracle: Callable[[int, int], int],
    properties: list[AlgebraicProperty],
    preconditions: list[Precondition] | None = None,
    error_conditions: list[ErrorCondition] | None = None,
) -> OperationSpec:
    return OperationSpec(
        name=name,
        arity=2,
        apply=apply,
        preconditions=preconditions or [],
        postconditions=[
            Postcondition(
                "result_canonical",
                "Result is in canonical form",
                lambda a, b, result: is_canonical(result),
            ),
            Postcondition(
                "result_correct",
                f"Result equals the reference {name}",
                lambda a, b, result: _matches(result, oracle(a, b)),
            ),
        ],
        error_conditions=error_conditions or [],
        properties=properties,
    )


def _unary(
    name: str,
    apply: Callable[[int], Any],
    oracle: Callable[[int], int],
    properties: list[AlgebraicProperty],
) -> OperationSpec:
    return OperationSpec(
        name=name,
        arity=1,
        apply=apply,
        preconditions=[],
        postconditions=[
            Postcondition(
                "result_canonical",
                "Result is in canonical form",
                lambda a, result: is_canonical(result),
            ),
            Postcondition(
                "result_correct",
                f"Result equals the reference {name}",
                lambda a, result: _matches(result, oracle(a)),
            ),
        ],
        error_conditions=[],
        properties=properties,
    )


def build_spec() -> BigIntegerSpec:
    """Construct the full big integer contract."""

    B = BigInteger
    zero = B(0)

    nonzero_divisor = Precondition(
        "nonzero_divisor", "Divisor is not zero", lambda a, b: b != 0,
    )
    divide_by_zero = ErrorCondition(
        "divide_by_zero",
        "DivideByZero when the divisor is zero",
        lambda a, b: b == 0,
        DivideByZero,
    )
    nonnegative_shift = Precondition(
        "nonnegative_shift", "Shift count is >= 0", lambda a, b: b >= 0,
    )
    negative_shift = ErrorCondition(
        "negative_shift",
        "ValueError when the shift count is negative",
        lambda a, b: b < 0,
        ValueError,
    )

    # -------------------------------------------------------- arithmetic
    add_spec = _binary(
        "add", lambda a, b: B(a) + B(b), lambda a, b: a + b,
        properties=[
            AlgebraicProperty(
                "commutativity", "a + b == b + a", 2,
                lambda a, b: a + b == b + a,
            ),
            AlgebraicProperty(
                "identity", "a + 0 == a", 1,
                lambda a: a + zero == a,
            ),
            AlgebraicProperty(
                "additive_inverse", "a + (-a) == 0", 1,
                lambda a: a + (-a) == zero and not (a + (-a)).negative,
            ),
        ],
    )

    sub_spec = _binary(
        "sub", lambda a, b: B(a) - B(b), lambda a, b: a - b,
        properties=[
            AlgebraicProperty(
                "add_sub_inverse", "(a + b) - b == a", 2,
                lambda a, b: (a + b) - b == a,
            ),
            AlgebraicProperty(
                "self_inverse", "a - a == 0", 1,
                lambda a: a - a == zero,
            ),
            AlgebraicProperty(
                "anticommutativity", "a - b == -(b - a)", 2,
                lambda a, b: a - b == -(b - a),
            ),
        ],
    )

    mul_spec = _binary(
        "mul", lambda a, b: B(a) * B(b), lambda a, b: a * b,
        properties=[
            AlgebraicProperty(
                "commutativity", "a * b == b * a", 2,
                lambda a, b: a * b == b * a,
            ),
            AlgebraicProperty(
                "identity", "a * 1 == a", 1,
                lambda a: a * B(1) == a,
            ),
            AlgebraicProperty(
                "zero", "a * 0 == 0", 1,
                lambda a: a * zero == zero,
            ),
            AlgebraicProperty(
                "sign", "(-a) * b == -(a * b)", 2,
                lambda a, b: (-a) * b == -(a * b),
            ),
        ],
    )

    div_spec = _binary(
        "div", lambda a, b: B(a) / B(b), truncdiv,
        preconditions=[nonzero_divisor],
        error_conditions=[divide_by_zero],
        properties=[
            AlgebraicProperty(
                "division_identity", "(a / b) * b + a % b == a", 2,
                lambda a, b: b == zero or (a / b) * b + a % b == a,
            ),
            AlgebraicProperty(
                "truncation", "|a / b| <= |a|", 2,
                lambda a, b: b == zero or abs(a / b) <= abs(a),
            ),
            AlgebraicProperty(
                "identity", "a / 1 == a", 1,
                lambda a: a / B(1) == a,
            ),
            AlgebraicProperty(
                "self", "a / a == 1 for a != 0", 1,
                lambda a: a == zero or a / a == B(1),
            ),
        ],
    )

    mod_spec = _binary(
        "mod", lambda a, b: B(a) % B(b), truncmod,
        preconditions=[nonzero_divisor],
        error_conditions=[divide_by_zero],
        properties=[
            AlgebraicProperty(
                "bounded", "|a % b| < |b|", 2,
                lambda a, b: b == zero or abs(a % b) < abs(b),
            ),
            AlgebraicProperty(
                "dividend_sign", "a % b is zero or shares the sign of a", 2,
                lambda a, b: (
                    b == zero or (a % b) == zero
                    or (a % b).negative == a.negative
                ),
            ),
        ],
    )

    # ----------------------------------------------------------- bitwise
    and_spec = _binary(
        "and", lambda a, b: B(a) & B(b), lambda a, b: a & b,
        properties=[
            AlgebraicProperty(
                "idempotence", "a & a == a", 1, lambda a: a & a == a,
            ),
            AlgebraicProperty(
                "annihilator", "a & 0 == 0", 1, lambda a: a & zero == zero,
            ),
            AlgebraicProperty(
                "commutativity", "a & b == b & a", 2,
                lambda a, b: a & b == b & a,
            ),
        ],
    )

    or_spec = _binary(
        "or", lambda a, b: B(a) | B(b), lambda a, b: a | b,
        properties=[
            AlgebraicProperty(
                "idempotence", "a | a == a", 1, lambda a: a | a == a,
            ),
            AlgebraicProperty(
                "identity", "a | 0 == a", 1, lambda a: a | zero == a,
            ),
            AlgebraicProperty(
                "de_morgan", "~(a | b) == ~a & ~b", 2,
                lambda a, b: ~(a | b) == (~a) & (~b),
            ),
        ],
    )

    xor_spec = _binary(
        "xor", lambda a, b: B(a) ^ B(b), lambda a, b: a ^ b,
        properties=[
            AlgebraicProperty(
                "self_inverse", "a ^ a == 0", 1, lambda a: a ^ a == zero,
            ),
            AlgebraicProperty(
                "involution", "(a ^ b) ^ b == a", 2,
                lambda a, b: (a ^ b) ^ b == a,
            ),
        ],
    )

    invert_spec = _unary(
        "invert", lambda a: ~B(a), lambda a: ~a,
        properties=[
            AlgebraicProperty(
                "involution", "~~a == a", 1, lambda a: ~~a == a,
            ),
            AlgebraicProperty(
                "identity", "~a == -(a + 1)", 1,
                lambda a: ~a == -(a + B(1)),
            ),
        ],
    )

    neg_spec = _unary(
        "neg", lambda a: -B(a), lambda a: -a,
        properties=[
            AlgebraicProperty(
                "involution", "-(-a) == a", 1, lambda a: -(-a) == a,
            ),
        ],
    )

    # ------------------------------------------------------------ shifts
    lshift_spec = _binary(
        "lshift", lambda a, b: B(a) << b, lambda a, b: a << b,
        preconditions=[nonnegative_shift],
        error_conditions=[negative_shift],
        properties=[
            AlgebraicProperty(
                "doubling", "a << 1 == a + a", 1,
                lambda a: (a << 1) == a + a,
            ),
        ],
    )

    rshift_spec = _binary(
        "rshift", lambda a, b: B(a) >> b, lambda a, b: a >> b,
        preconditions=[nonnegative_shift],
        error_conditions=[negative_shift],
        properties=[
            AlgebraicProperty(
                "shift_roundtrip", "(a << k) >> k == a", 1,
                lambda a: all(((a << k) >> k) == a for k in (0, 1, 31, 32, 33, 64, 97)),
            ),
            AlgebraicProperty(
                "minus_one_fixed_point", "-1 >> k == -1", 1,
                lambda a: (B(-1) >> (int(abs(a)) % MAX_SHIFT)) == B(-1),
            ),
        ],
    )

    # -------------------------------------------------------------- text
    text_spec = OperationSpec(
        name="text",
        arity=1,
        apply=lambda a: B(str(a)).to_string(),
        preconditions=[],
        postconditions=[
            Postcondition(
                "roundtrip",
                "Formatting a parsed decimal gives the reference text",
                lambda a, result: result == str(a),
            ),
        ],
        error_conditions=[
            ErrorCondition(
                "invalid_format",
                "InvalidFormat for empty, sign-only or non-digit text",
                lambda text: text in INVALID_LITERALS,
                InvalidFormat,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "parse_format_roundtrip", "B(str(a)) == a", 1,
                lambda a: B(a.to_string()) == a,
            ),
        ],
    )

    # -------------------------------------------------------------- branches
    branches = [
        # Normalization (_commit)
        BranchSpec("NORM-STRIP", "Most-significant zero limbs removed",
                   "limbs[-1] == 0 and len(limbs) > 1", "normalize"),
        BranchSpec("NORM-ZERO", "Zero result forced non-negative",
                   "limbs == [0]", "normalize"),
        # Parsing
        BranchSpec("PARSE-EMPTY", "Empty text rejected", "text == ''", "parse"),
        BranchSpec("PARSE-SIGN-ONLY", "Bare sign rejected",
                   "text in ('+', '-')", "parse"),
        BranchSpec("PARSE-ALL-ZEROS", "Only zeros after the sign",
                   "text.lstrip('+-').strip('0') == ''", "parse"),
        BranchSpec("PARSE-NON-DIGIT", "Non-digit character rejected",
                   "any(c not in '0123456789' for c in digits)", "parse"),
        BranchSpec("PARSE-DIGITS", "Digits accumulated", "otherwise", "parse"),
        # Addition
        BranchSpec("ADD-SAME-SIGN", "Magnitudes added, common sign kept",
                   "a.negative == b.negative", "add"),
        BranchSpec("ADD-MIXED-LEFT", "Left magnitude larger",
                   "signs differ and |a| > |b|", "add"),
        BranchSpec("ADD-MIXED-RIGHT", "Right magnitude larger",
                   "signs differ and |a| < |b|", "add"),
        BranchSpec("ADD-MIXED-CANCEL", "Opposite values cancel to zero",
                   "signs differ and |a| == |b|", "add"),
        # Subtraction
        BranchSpec("SUB-MIXED-SIGN", "Magnitudes added, sign of a",
                   "a.negative != b.negative", "sub"),
        BranchSpec("SUB-SAME-LARGER", "|a| > |b|, sign of a",
                   "same sign and |a| > |b|", "sub"),
        BranchSpec("SUB-SAME-SMALLER", "|a| < |b|, sign flipped",
                   "same sign and |a| < |b|", "sub"),
        BranchSpec("SUB-SAME-EQUAL", "Equal values give zero",
                   "a == b", "sub"),
        # Multiplication
        BranchSpec("MUL-ZERO", "Zero operand short-circuits",
                   "a == 0 or b == 0", "mul"),
        BranchSpec("MUL-GENERAL", "Schoolbook product, sign is XOR",
                   "a != 0 and b != 0", "mul"),
        # Division
        BranchSpec("DIV-ZERO", "DivideByZero raised", "b == 0", "divmod"),
        BranchSpec("DIV-SMALLER", "Quotient 0, remainder is the dividend",
                   "|a| < |b|", "divmod"),
        BranchSpec("DIV-SHORT", "Single-limb divisor", "len(b.limbs) == 1",
                   "divmod"),
        BranchSpec("DIV-LONG", "Knuth long division", "len(b.limbs) > 1",
                   "divmod"),
        BranchSpec("DIV-CORRECTION", "Trial quotient digit decremented",
                   "remainder window < qhat * divisor", "divmod"),
        # Negation
        BranchSpec("NEG-ZERO", "Negating zero stays non-negative", "a == 0",
                   "neg"),
        BranchSpec("NEG-FLIP", "Sign flipped", "a != 0", "neg"),
        # Two's complement
        BranchSpec("TC-NONNEGATIVE", "Zero-extended pattern",
                   "not negative", "bitwise"),
        BranchSpec("TC-NEGATIVE", "Inverted and incremented pattern",
                   "negative", "bitwise"),
        # Right shift
        BranchSpec("SHR-NON-NEGATIVE", "Plain magnitude shift", "a >= 0",
                   "rshift"),
        BranchSpec("SHR-NEGATIVE-EXACT", "No set bit dropped",
                   "a < 0 and a % 2**k == 0", "rshift"),
        BranchSpec("SHR-NEGATIVE-ROUND", "Set bit dropped, round to -inf",
                   "a < 0 and a % 2**k != 0", "rshift"),
        # Comparison
        BranchSpec("CMP-SIGN", "Signs differ", "a.negative != b.negative",
                   "compare"),
        BranchSpec("CMP-LENGTH", "Limb counts differ",
                   "len(a.limbs) != len(b.limbs)", "compare"),
        BranchSpec("CMP-LIMBS", "First differing limb decides",
                   "same length, limbs differ", "compare"),
        BranchSpec("CMP-EQUAL", "Values equal", "a == b", "compare"),
        # Formatting
        BranchSpec("FMT-ZERO", "Zero formats as '0'", "a == 0", "format"),
        BranchSpec("FMT-DIGITS", "Repeated divide by ten", "a != 0",
                   "format"),
    ]

    return BigIntegerSpec(
        operations={
            "add": add_spec,
            "sub": sub_spec,
            "mul": mul_spec,
            "div": div_spec,
            "mod": mod_spec,
            "and": and_spec,
            "or": or_spec,
            "xor": xor_spec,
            "invert": invert_spec,
            "neg": neg_spec,
            "lshift": lshift_spec,
            "rshift": rshift_spec,
            "text": text_spec,
        },
        branches=branches,
    )
