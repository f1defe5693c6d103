"""Arbitrary-precision signed integer.

``BigInteger`` stores a sign flag and a magnitude of base 2**32 limbs
(least-significant first) and implements the full signed-integer operator
set on top of the magnitude primitives in ``magnitude``, ``division`` and
``twos_complement``.  Division and remainder truncate toward zero.

Every operator computes fresh limbs first and commits them through
``_commit`` last, which is the single place the canonical form is
enforced: no most-significant zero limbs, never an empty limb list, and
zero is never negative.  A failing in-place operator therefore leaves its
receiver untouched.

Decision branches are annotated with their branch ids (see
``spec.build_spec``) so white-box tests can trace coverage back to the
contract.
"""
from __future__ import annotations

import operator
import re
from enum import Enum
from typing import Any, Optional, TextIO

import division
import magnitude
import twos_complement
from errors import DivideByZero, InvalidFormat
from twos_complement import BitOp

_DIGITS = "0123456789"

# [[fill]align][sign][0][width][grouping][type], the subset of the int
# format mini-language that applies to decimal output
_FORMAT_SPEC = re.compile(
    r"(?:(?P<fill>.)?(?P<align>[<>=^]))?"
    r"(?P<sign>[-+ ])?"
    r"(?P<zero>0)?"
    r"(?P<width>\d+)?"
    r"(?P<grouping>[,_])?"
    r"(?P<type>[a-zA-Z%])?\Z",
    re.DOTALL,
)


# ---------------------------------------------------------------------------
# Fixed-width construction presets
# ---------------------------------------------------------------------------

class FixedWidth(Enum):
    """Standard machine integer widths accepted by ``BigInteger.from_fixed``."""

    INT8 = (8, True)
    INT16 = (16, True)
    INT32 = (32, True)
    INT64 = (64, True)
    UINT8 = (8, False)
    UINT16 = (16, False)
    UINT32 = (32, False)
    UINT64 = (64, False)

    def __init__(self, bits: int, signed: bool) -> None:
        self.bits = bits
        self.signed = signed

    @property
    def lo(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def hi(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    def contains(self, value: int) -> bool:
        return self.lo <= value <= self.hi


# ---------------------------------------------------------------------------
# Decimal parsing
# ---------------------------------------------------------------------------

def _parse_decimal(text: str) -> tuple[list[int], bool]:
    """Parse optionally signed decimal digits.

    Branches: PARSE-EMPTY, PARSE-SIGN-ONLY, PARSE-ALL-ZEROS,
              PARSE-NON-DIGIT, PARSE-DIGITS
    """
    if not text:                                                  # PARSE-EMPTY
        raise InvalidFormat(text, "empty string")

    i = 0
    negative = False
    if text[0] in "+-":
        if len(text) == 1:                                        # PARSE-SIGN-ONLY
            raise InvalidFormat(text, "sign without digits")
        negative = text[0] == "-"
        i = 1

    while i < len(text) and text[i] == "0":
        i += 1
    if i == len(text):                                            # PARSE-ALL-ZEROS
        return [0], False

    limbs = [0]
    for ch in text[i:]:
        if ch not in _DIGITS:                                     # PARSE-NON-DIGIT
            raise InvalidFormat(text, f"unexpected character {ch!r}")
        limbs = magnitude.add(magnitude.mul_small(limbs, 10), [_DIGITS.index(ch)])
    return limbs, negative                                        # PARSE-DIGITS


# ---------------------------------------------------------------------------
# Sign dispatch over magnitudes
# ---------------------------------------------------------------------------

def _add_parts(
    a: list[int], a_neg: bool, b: list[int], b_neg: bool,
) -> tuple[list[int], bool]:
    """Branches: ADD-SAME-SIGN, ADD-MIXED-LEFT, ADD-MIXED-RIGHT, ADD-MIXED-CANCEL"""
    if a_neg == b_neg:                                            # ADD-SAME-SIGN
        return magnitude.add(a, b), a_neg
    cmp = magnitude.compare(a, b)
    if cmp == 0:                                                  # ADD-MIXED-CANCEL
        return [0], False
    if cmp > 0:                                                   # ADD-MIXED-LEFT
        return magnitude.sub(a, b), a_neg
    return magnitude.sub(b, a), b_neg                             # ADD-MIXED-RIGHT


def _sub_parts(
    a: list[int], a_neg: bool, b: list[int], b_neg: bool,
) -> tuple[list[int], bool]:
    """Branches: SUB-MIXED-SIGN, SUB-SAME-LARGER, SUB-SAME-SMALLER, SUB-SAME-EQUAL"""
    if a_neg != b_neg:                                            # SUB-MIXED-SIGN
        # a - (-b) == a + b and (-a) - b == -(a + b)
        return magnitude.add(a, b), a_neg
    cmp = magnitude.compare(a, b)
    if cmp == 0:                                                  # SUB-SAME-EQUAL
        return [0], False
    if cmp > 0:                                                   # SUB-SAME-LARGER
        return magnitude.sub(a, b), a_neg
    return magnitude.sub(b, a), not a_neg                         # SUB-SAME-SMALLER


# ---------------------------------------------------------------------------
# The value type
# ---------------------------------------------------------------------------

class BigInteger:
    """Signed integer of unbounded size.

    Accepts a Python ``int``, another ``BigInteger`` (deep copy) or
    decimal text.  With no argument the value is zero.
    """

    __slots__ = ("_limbs", "_negative")

    # in-place operators mutate the receiver
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, value: Any = 0) -> None:
        if isinstance(value, BigInteger):
            limbs, negative = list(value._limbs), value._negative
        elif isinstance(value, int):
            limbs, negative = magnitude.from_int(abs(value)), value < 0
        elif isinstance(value, str):
            limbs, negative = _parse_decimal(value)
        else:
            raise TypeError(
                f"cannot build a BigInteger from {type(value).__name__}"
            )
        self._commit(limbs, negative)

    @classmethod
    def from_fixed(cls, value: int, width: FixedWidth) -> BigInteger:
        """Construct from a value that must fit the given machine width."""
        if not isinstance(value, int):
            raise TypeError(f"expected int, got {type(value).__name__}")
        if not width.contains(value):
            raise OverflowError(
                f"{value} does not fit {width.name} [{width.lo}, {width.hi}]"
            )
        return cls(value)

    @classmethod
    def _from_parts(cls, limbs: list[int], negative: bool) -> BigInteger:
        obj = cls.__new__(cls)
        obj._commit(limbs, negative)
        return obj

    def _commit(self, limbs: list[int], negative: bool) -> None:
        """Normalize and store a new value.

        Branches: NORM-STRIP, NORM-ZERO
        """
        magnitude.normalize(limbs)                                # NORM-STRIP
        if magnitude.is_zero(limbs):                              # NORM-ZERO
            negative = False
        self._limbs = limbs
        self._negative = negative

    # -- inspection ---------------------------------------------------------

    @property
    def limbs(self) -> tuple[int, ...]:
        """Magnitude limbs, least-significant first."""
        return tuple(self._limbs)

    @property
    def negative(self) -> bool:
        return self._negative

    def is_zero(self) -> bool:
        return magnitude.is_zero(self._limbs)

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __int__(self) -> int:
        value = magnitude.to_int(self._limbs)
        return -value if self._negative else value

    def __index__(self) -> int:
        """Lossless int conversion.

        Makes a value usable wherever Python wants an integer index:
        sequence subscripts and slices, ``hex``/``oct``/``bin`` and shift
        counts.
        """
        return int(self)

    # -- copying ------------------------------------------------------------

    def copy(self) -> BigInteger:
        return BigInteger._from_parts(list(self._limbs), self._negative)

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> BigInteger:
        return self.copy()

    def swap(self, other: BigInteger) -> None:
        """Exchange state with ``other`` in place."""
        self._limbs, other._limbs = other._limbs, self._limbs
        self._negative, other._negative = other._negative, self._negative

    # -- arithmetic core ----------------------------------------------------

    def _add(self, other: BigInteger) -> tuple[list[int], bool]:
        return _add_parts(self._limbs, self._negative, other._limbs, other._negative)

    def _sub(self, other: BigInteger) -> tuple[list[int], bool]:
        return _sub_parts(self._limbs, self._negative, other._limbs, other._negative)

    def _mul(self, other: BigInteger) -> tuple[list[int], bool]:
        """Branches: MUL-ZERO, MUL-GENERAL"""
        if self.is_zero() or other.is_zero():                     # MUL-ZERO
            return [0], False
        return (                                                  # MUL-GENERAL
            magnitude.mul(self._limbs, other._limbs),
            self._negative != other._negative,
        )

    def divmod(self, other: Any) -> tuple[BigInteger, BigInteger]:
        """Truncating division: ``(quotient, remainder)`` as independent values.

        The quotient rounds toward zero and the remainder takes the sign of
        the dividend, so ``q * other + r == self`` and ``|r| < |other|``.

        Branches: DIV-ZERO, DIV-SMALLER, DIV-SHORT, DIV-LONG
        """
        divisor = _coerce(other)
        if divisor is None:
            raise TypeError(f"unsupported divisor type {type(other).__name__}")
        if divisor.is_zero():                                     # DIV-ZERO
            raise DivideByZero(self.copy())
        # DIV-SMALLER / DIV-SHORT / DIV-LONG are chosen by the engine
        q, r = division.divmod_magnitude(self._limbs, divisor._limbs)
        return (
            BigInteger._from_parts(q, self._negative != divisor._negative),
            BigInteger._from_parts(r, self._negative),
        )

    # -- bitwise ------------------------------------------------------------

    def _bitwise(self, other: BigInteger, op: BitOp) -> tuple[list[int], bool]:
        return twos_complement.bitwise(
            self._limbs, self._negative, other._limbs, other._negative, op,
        )

    def _lshift(self, count: Any) -> tuple[list[int], bool]:
        bits = _shift_count(count)
        return twos_complement.shift_left(self._limbs, bits), self._negative

    def _rshift(self, count: Any) -> tuple[list[int], bool]:
        """Arithmetic right shift rounding toward negative infinity.

        Branches: SHR-NON-NEGATIVE, SHR-NEGATIVE-EXACT, SHR-NEGATIVE-ROUND
        """
        bits = _shift_count(count)
        limbs, lost = twos_complement.shift_right(self._limbs, bits)
        if self._negative and lost:                               # SHR-NEGATIVE-ROUND
            limbs = magnitude.add(limbs, [1])
        # SHR-NON-NEGATIVE / SHR-NEGATIVE-EXACT keep the truncated magnitude
        return limbs, self._negative

    # -- binary operators ---------------------------------------------------

    def __add__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return BigInteger._from_parts(*self._add(other))

    def __radd__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return BigInteger._from_parts(*other._add(self))

    def __sub__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return BigInteger._from_parts(*self._sub(other))

    def __rsub__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return BigInteger._from_parts(*other._sub(self))

    def __mul__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return BigInteger._from_parts(*self._mul(other))

    def __rmul__(self, other: Any) -> BigInteger:
        return self.__mul__(other)

    def __truediv__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.divmod(other)[0]

    def __rtruediv__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return other.divmod(self)[0]

    def __mod__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.divmod(other)[1]

    def __rmod__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return other.divmod(self)[1]

    def __divmod__(self, other: Any) -> tuple[BigInteger, BigInteger]:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.divmod(other)

    def __rdivmod__(self, other: Any) -> tuple[BigInteger, BigInteger]:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return other.divmod(self)

    def __and__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return BigInteger._from_parts(*self._bitwise(other, BitOp.AND))

    __rand__ = __and__

    def __or__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return BigInteger._from_parts(*self._bitwise(other, BitOp.OR))

    __ror__ = __or__

    def __xor__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return BigInteger._from_parts(*self._bitwise(other, BitOp.XOR))

    __rxor__ = __xor__

    def __lshift__(self, count: Any) -> BigInteger:
        return BigInteger._from_parts(*self._lshift(count))

    def __rlshift__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return other << self

    def __rshift__(self, count: Any) -> BigInteger:
        return BigInteger._from_parts(*self._rshift(count))

    def __rrshift__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return other >> self

    # -- in-place operators -------------------------------------------------

    def __iadd__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        self._commit(*self._add(other))
        return self

    def __isub__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        self._commit(*self._sub(other))
        return self

    def __imul__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        self._commit(*self._mul(other))
        return self

    def __itruediv__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        q = self.divmod(other)[0]
        self._commit(q._limbs, q._negative)
        return self

    def __imod__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        r = self.divmod(other)[1]
        self._commit(r._limbs, r._negative)
        return self

    def __iand__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        self._commit(*self._bitwise(other, BitOp.AND))
        return self

    def __ior__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        self._commit(*self._bitwise(other, BitOp.OR))
        return self

    def __ixor__(self, other: Any) -> BigInteger:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        self._commit(*self._bitwise(other, BitOp.XOR))
        return self

    def __ilshift__(self, count: Any) -> BigInteger:
        self._commit(*self._lshift(count))
        return self

    def __irshift__(self, count: Any) -> BigInteger:
        self._commit(*self._rshift(count))
        return self

    # -- unary operators ----------------------------------------------------

    def __pos__(self) -> BigInteger:
        return self.copy()

    def __neg__(self) -> BigInteger:
        """Branches: NEG-ZERO, NEG-FLIP"""
        if self.is_zero():                                        # NEG-ZERO
            return BigInteger()
        return BigInteger._from_parts(                            # NEG-FLIP
            list(self._limbs), not self._negative,
        )

    def __abs__(self) -> BigInteger:
        return BigInteger._from_parts(list(self._limbs), False)

    def __invert__(self) -> BigInteger:
        """``~x == -(x + 1)``."""
        return -(self + _ONE)

    # -- increment / decrement ----------------------------------------------

    def increment(self) -> BigInteger:
        """Pre-increment: add one in place and return self."""
        self._commit(*self._add(_ONE))
        return self

    def decrement(self) -> BigInteger:
        """Pre-decrement: subtract one in place and return self."""
        self._commit(*self._sub(_ONE))
        return self

    def post_increment(self) -> BigInteger:
        """Post-increment: add one in place and return the previous value."""
        previous = self.copy()
        self.increment()
        return previous

    def post_decrement(self) -> BigInteger:
        """Post-decrement: subtract one in place and return the previous value."""
        previous = self.copy()
        self.decrement()
        return previous

    # -- comparison ---------------------------------------------------------

    def _compare(self, other: BigInteger) -> int:
        """Three-way comparison.

        Branches: CMP-SIGN, CMP-LENGTH, CMP-LIMBS, CMP-EQUAL
        """
        if self._negative != other._negative:                     # CMP-SIGN
            return -1 if self._negative else 1
        cmp = magnitude.compare(self._limbs, other._limbs)        # CMP-LENGTH / CMP-LIMBS
        if cmp == 0:                                              # CMP-EQUAL
            return 0
        return -cmp if self._negative else cmp

    def __eq__(self, other: object) -> bool:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._negative == other._negative and self._limbs == other._limbs

    def __ne__(self, other: object) -> bool:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return not (self._negative == other._negative and self._limbs == other._limbs)

    def __lt__(self, other: Any) -> bool:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) < 0

    def __le__(self, other: Any) -> bool:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) <= 0

    def __gt__(self, other: Any) -> bool:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) > 0

    def __ge__(self, other: Any) -> bool:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) >= 0

    # -- text ---------------------------------------------------------------

    def to_string(self) -> str:
        """Canonical decimal text, most-significant digit first.

        Branches: FMT-ZERO, FMT-DIGITS
        """
        if self.is_zero():                                        # FMT-ZERO
            return "0"
        digits: list[str] = []                                    # FMT-DIGITS
        limbs = self._limbs
        while not magnitude.is_zero(limbs):
            limbs, digit = division.divmod_small(limbs, 10)
            digits.append(_DIGITS[digit])
        if self._negative:
            digits.append("-")
        return "".join(reversed(digits))

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"BigInteger('{self.to_string()}')"

    def __format__(self, format_spec: str) -> str:
        """Decimal formatting with the fill/align/sign/width/grouping options of ``int``.

        Padding from ``=`` alignment (or the ``0`` flag) goes between the
        sign and the digits.
        """
        match = _FORMAT_SPEC.match(format_spec)
        if match is None:
            raise ValueError(
                f"Invalid format specifier '{format_spec}' for object of type 'BigInteger'"
            )
        presentation = match["type"]
        if presentation not in (None, "d"):
            raise ValueError(
                f"Unknown format code '{presentation}' for object of type 'BigInteger'"
            )

        digits = self.to_string().lstrip("-")
        if match["grouping"]:
            head = len(digits) % 3 or 3
            groups = [digits[:head]]
            groups += [digits[i : i + 3] for i in range(head, len(digits), 3)]
            digits = match["grouping"].join(groups)

        if self._negative:
            sign = "-"
        elif match["sign"] in ("+", " "):
            sign = match["sign"]
        else:
            sign = ""

        fill = match["fill"] or " "
        align = match["align"] or ">"
        if match["zero"]:
            fill = match["fill"] or "0"
            align = match["align"] or "="
        pad = max(int(match["width"] or 0) - len(sign) - len(digits), 0)

        if align == "<":
            return sign + digits + fill * pad
        if align == "^":
            left = pad // 2
            return fill * left + sign + digits + fill * (pad - left)
        if align == "=":
            return sign + fill * pad + digits
        return fill * pad + sign + digits

    def write(self, sink: TextIO) -> TextIO:
        """Write the decimal text to ``sink`` and return it for chaining."""
        sink.write(self.to_string())
        return sink


# ---------------------------------------------------------------------------
# Module helpers
# ---------------------------------------------------------------------------

_ONE = BigInteger(1)


def _coerce(value: Any) -> Optional[BigInteger]:
    if isinstance(value, BigInteger):
        return value
    if isinstance(value, int):
        return BigInteger(value)
    return None


def _shift_count(count: Any) -> int:
    bits = operator.index(count)
    if bits < 0:
        raise ValueError("negative shift count")
    return bits


def to_string(value: BigInteger) -> str:
    return value.to_string()


def div_mod(dividend: Any, divisor: Any) -> tuple[BigInteger, BigInteger]:
    """``(quotient, remainder)`` with truncation toward zero."""
    return BigInteger(dividend).divmod(divisor)
