"""Shared fixtures for big integer tests."""
from __future__ import annotations

import pytest

from big_integer import BigInteger
from spec import BigIntegerSpec, build_spec


@pytest.fixture(scope="session")
def spec() -> BigIntegerSpec:
    return build_spec()


@pytest.fixture
def two_limb_value() -> BigInteger:
    """2**32 + 5: the smallest kind of value that needs a second limb."""
    return BigInteger((1 << 32) + 5)


@pytest.fixture
def negative_wide() -> BigInteger:
    """A negative three-limb value with mixed limb patterns."""
    return BigInteger("-79228162514264337593543950335")   # -(2**96 - 1)
