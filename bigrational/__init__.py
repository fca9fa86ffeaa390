"""Exact, immutable rational numbers."""

from .exc import (
    InvalidDenominatorError,
    NullArgumentError,
    ParseError,
    RationalError,
    UnsupportedDeserializationError,
)
from .guard import FIXED_WIDTH_DTYPE, safe_instance
from .rational import (
    DEFAULT_MAX_DENOMINATOR,
    Rational,
    as_rational_array,
    compare,
    rationalize,
    zeros,
    zeros_like,
)

__all__ = [
    "Rational",
    "compare",
    "rationalize",
    "safe_instance",
    "DEFAULT_MAX_DENOMINATOR",
    "FIXED_WIDTH_DTYPE",
    "as_rational_array",
    "zeros",
    "zeros_like",
    "RationalError",
    "NullArgumentError",
    "InvalidDenominatorError",
    "ParseError",
    "UnsupportedDeserializationError",
]
