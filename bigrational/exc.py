"""
Exception types for bigrational.

Each error also derives from the builtin exception a caller would reach for,
so ``except ZeroDivisionError`` and friends keep working.
"""

import pickle

__all__ = [
    "RationalError",
    "NullArgumentError",
    "InvalidDenominatorError",
    "ParseError",
    "UnsupportedDeserializationError",
]


class RationalError(Exception):
    """Base class for every error raised by bigrational."""
    pass


class NullArgumentError(RationalError, TypeError):
    """Raised when ``None`` is passed where a value is required."""
    pass


class InvalidDenominatorError(RationalError, ZeroDivisionError):
    """Raised when a rational is constructed with a zero denominator."""
    pass


class ParseError(RationalError, ValueError):
    """Raised when text or external state is not a valid rational."""
    pass


class UnsupportedDeserializationError(RationalError, pickle.UnpicklingError):
    """Raised when raw state is restored without going through the constructor."""
    pass
