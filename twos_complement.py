"""Two's-complement emulation over sign-magnitude storage.

Bitwise operators treat a value as an infinitely wide two's-complement bit
pattern.  The pattern is materialized as a fixed number of limbs plus a
separate sign bit that stands for every limb above them (all zeros or all
ones).  ``to_twos_complement`` / ``from_twos_complement`` convert in each
direction; ``bitwise`` combines two values through them.

Shifts operate on magnitudes only; the sign-aware rounding lives in
``BigInteger.__rshift__``.
"""
from __future__ import annotations

import operator
from enum import Enum

import magnitude
from magnitude import LIMB_BITS, MASK


class BitOp(Enum):
    AND = "and"
    OR = "or"
    XOR = "xor"

    def apply(self, x: int, y: int) -> int:
        return _BIT_FUNCS[self](x, y)


_BIT_FUNCS = {
    BitOp.AND: operator.and_,
    BitOp.OR: operator.or_,
    BitOp.XOR: operator.xor,
}


# ---------------------------------------------------------------------------
# Conversion pair
# ---------------------------------------------------------------------------

def to_twos_complement(limbs: list[int], negative: bool, length: int) -> list[int]:
    """Return the low ``length`` limbs of the two's-complement pattern.

    Non-negative values are zero-extended.  Negative values are
    zero-extended, inverted limb by limb and incremented; the implied
    limbs above ``length`` are all ones.
    """
    if length < len(limbs):
        raise ValueError(f"length {length} is shorter than the value ({len(limbs)} limbs)")
    pattern = list(limbs) + [0] * (length - len(limbs))
    if not negative:                                              # TC-NONNEGATIVE
        return pattern
    carry = 1                                                     # TC-NEGATIVE
    for i in range(length):
        t = (~pattern[i] & MASK) + carry
        pattern[i] = t & MASK
        carry = t >> LIMB_BITS
    return pattern


def from_twos_complement(pattern: list[int], sign_bit: bool) -> tuple[list[int], bool]:
    """Recover ``(magnitude, negative)`` from a pattern and its sign bit."""
    if not sign_bit:
        return magnitude.normalize(list(pattern)), False
    inverted = magnitude.normalize([~limb & MASK for limb in pattern])
    return magnitude.add(inverted, [1]), True


def bitwise(
    a: list[int], a_negative: bool,
    b: list[int], b_negative: bool,
    op: BitOp,
) -> tuple[list[int], bool]:
    """Apply ``op`` to two sign-magnitude values as two's-complement patterns."""
    length = max(len(a), len(b))
    pa = to_twos_complement(a, a_negative, length)
    pb = to_twos_complement(b, b_negative, length)
    pattern = [op.apply(x, y) for x, y in zip(pa, pb)]
    sign_bit = bool(op.apply(int(a_negative), int(b_negative)))
    limbs, negative = from_twos_complement(pattern, sign_bit)
    if magnitude.is_zero(limbs):
        negative = False
    return limbs, negative


# ---------------------------------------------------------------------------
# Magnitude shifts
# ---------------------------------------------------------------------------

def shift_left(limbs: list[int], bits: int) -> list[int]:
    """``|x| * 2**bits``."""
    if bits < 0:
        raise ValueError("negative shift count")
    if bits == 0 or magnitude.is_zero(limbs):
        return list(limbs)
    limb_shift, bit_shift = divmod(bits, LIMB_BITS)
    result = [0] * (len(limbs) + limb_shift + 1)
    for i, limb in enumerate(limbs):
        wide = limb << bit_shift
        result[i + limb_shift] |= wide & MASK
        result[i + limb_shift + 1] |= wide >> LIMB_BITS
    return magnitude.normalize(result)


def shift_right(limbs: list[int], bits: int) -> tuple[list[int], bool]:
    """``|x| // 2**bits`` plus a flag telling whether any set bit was dropped."""
    if bits < 0:
        raise ValueError("negative shift count")
    if bits == 0:
        return list(limbs), False
    limb_shift, bit_shift = divmod(bits, LIMB_BITS)
    if limb_shift >= len(limbs):
        return [0], not magnitude.is_zero(limbs)

    lost = any(limbs[:limb_shift])
    if bit_shift:
        lost = lost or bool(limbs[limb_shift] & ((1 << bit_shift) - 1))

    size = len(limbs) - limb_shift
    result = [0] * size
    for i in range(size):
        lo = limbs[i + limb_shift] >> bit_shift
        hi = 0
        if bit_shift and i + limb_shift + 1 < len(limbs):
            hi = (limbs[i + limb_shift + 1] << (LIMB_BITS - bit_shift)) & MASK
        result[i] = lo | hi
    return magnitude.normalize(result), lost
