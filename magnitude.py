"""Sign-agnostic magnitude primitives.

A magnitude is a ``list[int]`` of base 2**32 limbs, least-significant
first.  Every function here treats its inputs as read-only and returns a
fresh, normalized list, so callers can commit results atomically.

Layers
------
normalize        strip most-significant zero limbs, never leave the list empty
from_int/to_int  conversion to and from non-negative Python ints
compare          three-way magnitude ordering
add / sub        limb-wise carry / borrow propagation
mul / mul_small  schoolbook convolution with 64-bit intermediates
"""
from __future__ import annotations

LIMB_BITS = 32
BASE = 1 << LIMB_BITS
MASK = BASE - 1


# ---------------------------------------------------------------------------
# Representation
# ---------------------------------------------------------------------------

def normalize(limbs: list[int]) -> list[int]:
    """Strip trailing zero limbs in place; an empty result becomes ``[0]``."""
    while limbs and limbs[-1] == 0:
        limbs.pop()
    if not limbs:
        limbs.append(0)
    return limbs


def is_zero(limbs: list[int]) -> bool:
    return len(limbs) == 1 and limbs[0] == 0


def from_int(value: int) -> list[int]:
    """Split a non-negative Python int into limbs."""
    if value < 0:
        raise ValueError(f"magnitude must be non-negative, got {value}")
    limbs: list[int] = []
    while value:
        limbs.append(value & MASK)
        value >>= LIMB_BITS
    return normalize(limbs)


def to_int(limbs: list[int]) -> int:
    value = 0
    for limb in reversed(limbs):
        value = (value << LIMB_BITS) | limb
    return value


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

def compare(a: list[int], b: list[int]) -> int:
    """Return -1, 0 or 1 as ``|a|`` is less than, equal to or greater than ``|b|``.

    Both inputs must be normalized: a longer list is then always larger.
    """
    if len(a) != len(b):
        return -1 if len(a) < len(b) else 1
    for i in range(len(a) - 1, -1, -1):
        if a[i] != b[i]:
            return -1 if a[i] < b[i] else 1
    return 0


# ---------------------------------------------------------------------------
# Addition / subtraction
# ---------------------------------------------------------------------------

def add(a: list[int], b: list[int]) -> list[int]:
    """``|a| + |b|``, growing by one limb on a final carry-out."""
    if len(a) < len(b):
        a, b = b, a
    result: list[int] = []
    carry = 0
    for i in range(len(a)):
        total = a[i] + carry
        if i < len(b):
            total += b[i]
        result.append(total & MASK)
        carry = total >> LIMB_BITS
    if carry:
        result.append(carry)
    return normalize(result)


def sub(a: list[int], b: list[int]) -> list[int]:
    """``|a| - |b|``; the caller guarantees ``|a| >= |b|``."""
    if compare(a, b) < 0:
        raise ValueError("magnitude subtraction would underflow")
    result: list[int] = []
    borrow = 0
    for i in range(len(a)):
        diff = a[i] - borrow
        if i < len(b):
            diff -= b[i]
        if diff < 0:
            diff += BASE
            borrow = 1
        else:
            borrow = 0
        result.append(diff)
    return normalize(result)


# ---------------------------------------------------------------------------
# Multiplication
# ---------------------------------------------------------------------------

def mul(a: list[int], b: list[int]) -> list[int]:
    """Schoolbook product, O(len(a) * len(b))."""
    if is_zero(a) or is_zero(b):
        return [0]
    acc = [0] * (len(a) + len(b))
    for i, ai in enumerate(a):
        carry = 0
        for j, bj in enumerate(b):
            # fits in 64 bits: (2**32-1)**2 + 2 * (2**32-1) == 2**64 - 1
            t = ai * bj + acc[i + j] + carry
            acc[i + j] = t & MASK
            carry = t >> LIMB_BITS
        acc[i + len(b)] += carry
    return normalize(acc)


def mul_small(a: list[int], factor: int) -> list[int]:
    """Multiply a magnitude by a single limb."""
    if not 0 <= factor <= MASK:
        raise ValueError(f"factor {factor} does not fit in one limb")
    result: list[int] = []
    carry = 0
    for limb in a:
        t = limb * factor + carry
        result.append(t & MASK)
        carry = t >> LIMB_BITS
    if carry:
        result.append(carry)
    return normalize(result)
