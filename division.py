"""Magnitude division engine.

Two algorithms, chosen by the divisor width:

* short division -- the divisor fits in one limb; a single pass from the
  most-significant limb down with a 64-bit running remainder.
* long division  -- Knuth's Algorithm D.  Both operands are scaled by
  ``f = 2**32 // (top + 1)`` so the divisor's leading limb is at least
  2**31, trial digits are estimated from the top two remainder limbs and
  corrected downwards, and the scaled remainder is divided by ``f`` at
  the end.

Everything here works on magnitudes; signs are handled by the caller.
"""
from __future__ import annotations

import logging

import magnitude
from errors import DivideByZero
from magnitude import BASE, LIMB_BITS, MASK

logger = logging.getLogger(__name__)

# Knuth, TAOCP vol. 2, 4.3.1 Theorem B: with a normalized divisor the
# trial digit overshoots by at most two.
MAX_CORRECTIONS = 2


def divmod_small(a: list[int], divisor: int) -> tuple[list[int], int]:
    """Divide a magnitude by a single non-zero limb.

    Returns ``(quotient_limbs, remainder)`` with the remainder as a plain
    int below ``divisor``.
    """
    if not 0 < divisor <= MASK:
        raise ValueError(f"short divisor must be in [1, {MASK}], got {divisor}")
    quotient = [0] * len(a)
    rem = 0
    for i in range(len(a) - 1, -1, -1):
        cur = (rem << LIMB_BITS) | a[i]
        quotient[i] = cur // divisor
        rem = cur % divisor
    return magnitude.normalize(quotient), rem


def divmod_long(a: list[int], b: list[int]) -> tuple[list[int], list[int]]:
    """Knuth long division for a divisor of at least two limbs, ``|a| >= |b|``."""
    n = len(b)
    if n < 2:
        raise ValueError("long division needs a divisor of at least two limbs")

    f = BASE // (b[-1] + 1)
    v = magnitude.mul_small(b, f)
    u = magnitude.mul_small(a, f)
    u.extend([0] * (len(a) + 1 - len(u)))
    # v keeps the same width as b; its top limb is now >= 2**31.
    v_top = v[-1]

    m = len(a) - n
    quotient = [0] * (m + 1)
    for j in range(m, -1, -1):
        top = (u[j + n] << LIMB_BITS) | u[j + n - 1]
        qhat = min(top // v_top, MASK)

        window = magnitude.normalize(u[j : j + n + 1])
        product = magnitude.mul_small(v, qhat)
        corrections = 0
        while magnitude.compare(window, product) < 0:           # DIV-CORRECTION
            qhat -= 1
            product = magnitude.sub(product, v)
            corrections += 1
        assert corrections <= MAX_CORRECTIONS, (
            f"trial digit needed {corrections} corrections at position {j}"
        )
        if corrections:
            logger.debug(
                "quotient digit at position %d corrected %d time(s) to %#x",
                j, corrections, qhat,
            )

        rem = magnitude.sub(window, product)
        rem.extend([0] * (n + 1 - len(rem)))
        u[j : j + n + 1] = rem
        quotient[j] = qhat

    scaled_rem = magnitude.normalize(u[: n + 1])
    remainder, leftover = divmod_small(scaled_rem, f)
    assert leftover == 0, "scaled remainder must be a multiple of the scale factor"
    return magnitude.normalize(quotient), remainder


def divmod_magnitude(a: list[int], b: list[int]) -> tuple[list[int], list[int]]:
    """Return ``(|a| // |b|, |a| % |b|)`` as two independent magnitudes.

    Branches: DIV-SMALLER, DIV-SHORT, DIV-LONG
    """
    if magnitude.is_zero(b):
        raise DivideByZero()
    if magnitude.compare(a, b) < 0:                               # DIV-SMALLER
        return [0], list(a)
    if len(b) == 1:                                               # DIV-SHORT
        quotient, rem = divmod_small(a, b[0])
        return quotient, [rem]
    return divmod_long(a, b)                                      # DIV-LONG
