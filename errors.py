"""Exceptions raised by the big integer type.

Both concrete errors also derive from the matching built-in exception so
callers that already handle ``ValueError`` / ``ZeroDivisionError`` keep
working.
"""
from __future__ import annotations


class BigIntegerError(Exception):
    """Base class for all big integer errors."""


class InvalidFormat(BigIntegerError, ValueError):
    """Raised when decimal text cannot be parsed."""

    def __init__(self, text: str, reason: str) -> None:
        self.text = text
        self.reason = reason
        super().__init__(f"invalid decimal literal {text!r}: {reason}")


class DivideByZero(BigIntegerError, ZeroDivisionError):
    """Raised by division and remainder when the divisor is zero."""

    def __init__(self, dividend: object = None) -> None:
        self.dividend = dividend
        super().__init__("division by zero")
