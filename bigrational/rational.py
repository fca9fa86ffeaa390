"""Exact rational numbers on arbitrary-precision integers, with NumPy interoperability."""
from __future__ import annotations

import math
import numbers
import operator
import re
from fractions import Fraction
from typing import Any, Optional, Tuple, Union

import numpy as np

from .exc import InvalidDenominatorError, ParseError, UnsupportedDeserializationError
from .guard import FIXED_WIDTH_DTYPE, fixed_width, require_value, safe_instance

NumberLike = Union["Rational", Fraction, numbers.Integral]

DEFAULT_MAX_DENOMINATOR = 10**6

# Canonical text form: "<num>" or "<num>/<den>", ASCII digits, sign on the numerator only.
_RATIONAL_FORMAT = re.compile(r"(?P<num>-?[0-9]+)(?:/(?P<den>[0-9]+))?")


class Rational:
    """Immutable fraction kept in lowest terms with a positive denominator.

    ``Rational(numerator, denominator)`` is the only way to create an
    instance. Both arguments go through :func:`safe_instance` before the pair
    is reduced, so the stored fields are always plain ``int`` objects with
    ``denominator > 0`` and ``gcd(|numerator|, denominator) == 1`` (zero is
    stored as ``0/1``).
    """

    __slots__ = ("_numerator", "_denominator")
    __array_priority__ = 1000.0  # Prefer Rational semantics in NumPy expressions.

    def __new__(cls, numerator: Any = 0, denominator: Any = 1) -> "Rational":
        num = safe_instance(numerator, "numerator")
        den = safe_instance(denominator, "denominator")
        num, den = cls._normalize(num, den)

        self = super().__new__(cls)
        object.__setattr__(self, "_numerator", num)
        object.__setattr__(self, "_denominator", den)
        return self

    def __init_subclass__(cls, **kwargs: Any) -> None:
        raise TypeError("Rational cannot be subclassed")

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} objects are immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} objects are immutable")

    @staticmethod
    def _normalize(num: int, den: int) -> Tuple[int, int]:
        if den == 0:
            raise InvalidDenominatorError("denominator is zero")
        if num == 0:
            return 0, 1
        gcd = math.gcd(num, den)
        num //= gcd
        den //= gcd
        if den < 0:
            num, den = -num, -den
        return num, den

    # ------------------------------------------------------------------
    # Constructors
    @classmethod
    def from_integer(cls, value: numbers.Integral) -> "Rational":
        """Return ``value/1``."""
        return cls(require_value(value, "value"), 1)

    @classmethod
    def from_integer_pair(
        cls, numerator: numbers.Integral, denominator: numbers.Integral
    ) -> "Rational":
        """Return ``numerator/denominator`` in canonical form."""
        return cls(numerator, denominator)

    @classmethod
    def from_fixed_width_integer(cls, value: Any) -> "Rational":
        """Like :meth:`from_integer` for NumPy integer scalars or 64-bit ints."""
        return cls(fixed_width(value, "value"), 1)

    @classmethod
    def from_fixed_width_pair(cls, numerator: Any, denominator: Any) -> "Rational":
        """Like :meth:`from_integer_pair` for NumPy integer scalars or 64-bit ints."""
        return cls(
            fixed_width(numerator, "numerator"),
            fixed_width(denominator, "denominator"),
        )

    @classmethod
    def from_string(cls, text: str) -> "Rational":
        """Parse ``"n"`` or ``"n/d"`` as produced by :meth:`__str__`.

        The denominator must be unsigned; ``"1/-2"`` is rejected.
        """
        require_value(text, "text")
        if not isinstance(text, str):
            raise TypeError(f"text must be a str, got {type(text)!r}")
        match = _RATIONAL_FORMAT.fullmatch(text)
        if match is None:
            raise ParseError(f"invalid literal for Rational: {text!r}")
        try:
            num = int(match.group("num"))
            den = int(match.group("den")) if match.group("den") is not None else 1
        except ValueError as exc:  # digit count above sys.get_int_max_str_digits()
            raise ParseError(f"invalid literal for Rational: {text!r}") from exc
        return cls(num, den)

    @classmethod
    def from_pair(cls, state: Any) -> "Rational":
        """Rebuild a value exported by :meth:`to_pair`, re-validating it."""
        require_value(state, "state")
        if isinstance(state, (str, bytes, bytearray)):
            raise ParseError(f"expected a (numerator, denominator) pair, got {state!r}")
        try:
            numerator, denominator = state
        except (TypeError, ValueError) as exc:
            raise ParseError(
                f"expected a (numerator, denominator) pair, got {state!r}"
            ) from exc
        return cls(numerator, denominator)

    @classmethod
    def rationalize(cls, value: NumberLike) -> "Rational":
        """Coerce a Rational, Fraction or integral value into :class:`Rational`."""
        require_value(value, "value")
        result = cls._coerce_scalar(value)
        if result is None:
            raise TypeError(f"Cannot convert {type(value)!r} to Rational")
        return result

    # ------------------------------------------------------------------
    # Properties and helpers
    @property
    def numerator(self) -> int:
        return self._numerator

    @property
    def denominator(self) -> int:
        return self._denominator

    def to_pair(self) -> Tuple[int, int]:
        """Return the canonical ``(numerator, denominator)`` pair."""
        return self._numerator, self._denominator

    def as_fraction(self) -> Fraction:
        """Return a :class:`Fraction` with the same value."""
        return Fraction(self._numerator, self._denominator)

    def limit_denominator(self, max_denominator: int = DEFAULT_MAX_DENOMINATOR) -> "Rational":
        """Return the closest :class:`Rational` whose denominator is at most *max_denominator*."""
        fraction = self.as_fraction().limit_denominator(max_denominator)
        return Rational(fraction.numerator, fraction.denominator)

    def compare_to(self, other: "Rational") -> int:
        return compare(self, other)

    # ------------------------------------------------------------------
    # Numeric protocol
    def __float__(self) -> float:
        return self._numerator / self._denominator

    def __int__(self) -> int:
        quotient = abs(self._numerator) // self._denominator
        return -quotient if self._numerator < 0 else quotient

    def __bool__(self) -> bool:
        return self._numerator != 0

    def to_integer_exact(self) -> int:
        """Return the value as ``int``, raising ``ValueError`` if it has a fractional part."""
        if self._denominator != 1:
            raise ValueError(f"{self} is not an integer")
        return self._numerator

    def to_fixed_width(self, dtype: Any = FIXED_WIDTH_DTYPE) -> np.integer:
        """Return the truncated value as a NumPy integer scalar of *dtype*."""
        info = np.iinfo(dtype)
        value = int(self)
        if not info.min <= value <= info.max:
            raise OverflowError(f"{self} does not fit in {np.dtype(dtype).name}")
        return np.dtype(dtype).type(value)

    # ------------------------------------------------------------------
    # Representation
    def __repr__(self) -> str:
        return f"Rational({self._numerator}, {self._denominator})"

    def __str__(self) -> str:
        if self._denominator == 1:
            return str(self._numerator)
        return f"{self._numerator}/{self._denominator}"

    def __format__(self, format_spec: str) -> str:
        if format_spec in ("", "r", "R"):
            return str(self)
        try:
            return format(float(self), format_spec)
        except OverflowError:
            # Beyond float range; keep the exact text.
            return str(self)
        except (ValueError, TypeError):
            return format(str(self), format_spec)

    # ------------------------------------------------------------------
    # Pickle and copy support
    def __reduce__(self):
        return (Rational, (self._numerator, self._denominator))

    def __setstate__(self, state: Any) -> None:
        raise UnsupportedDeserializationError(
            "Rational state can only be restored through the Rational constructor"
        )

    def __copy__(self) -> "Rational":
        return self

    def __deepcopy__(self, memo: Any) -> "Rational":
        return self

    # ------------------------------------------------------------------
    # Internal helpers
    @staticmethod
    def _coerce_scalar(value: Any) -> Optional["Rational"]:
        if isinstance(value, Rational):
            return value
        if isinstance(value, Fraction):
            return Rational(value.numerator, value.denominator)
        if isinstance(value, numbers.Integral):
            return Rational(value, 1)
        return None

    def _binary_operation(self, other: Any, op):
        if isinstance(other, np.ndarray):
            vectorised = np.vectorize(
                lambda x: op(self, Rational.rationalize(x)),
                otypes=[object],
            )
            return vectorised(other)
        other_rat = self._coerce_scalar(other)
        if other_rat is None:
            return NotImplemented
        return op(self, other_rat)

    def _reflected_operation(self, other: Any, op):
        if isinstance(other, np.ndarray):
            vectorised = np.vectorize(
                lambda x: op(Rational.rationalize(x), self),
                otypes=[object],
            )
            return vectorised(other)
        other_rat = self._coerce_scalar(other)
        if other_rat is None:
            return NotImplemented
        return op(other_rat, self)

    @staticmethod
    def _coerce_power(value: Any) -> Optional[int]:
        if isinstance(value, numbers.Integral):
            return safe_instance(value, "exponent")
        if isinstance(value, Rational):
            if value._denominator != 1:
                raise ValueError("Exponent must be an integer")
            return value._numerator
        return None

    # ------------------------------------------------------------------
    # Arithmetic operators
    @staticmethod
    def _add(a: "Rational", b: "Rational") -> "Rational":
        return Rational(
            a._numerator * b._denominator + b._numerator * a._denominator,
            a._denominator * b._denominator,
        )

    @staticmethod
    def _sub(a: "Rational", b: "Rational") -> "Rational":
        return Rational(
            a._numerator * b._denominator - b._numerator * a._denominator,
            a._denominator * b._denominator,
        )

    @staticmethod
    def _mul(a: "Rational", b: "Rational") -> "Rational":
        return Rational(a._numerator * b._numerator, a._denominator * b._denominator)

    @staticmethod
    def _truediv(a: "Rational", b: "Rational") -> "Rational":
        if b._numerator == 0:
            raise ZeroDivisionError("division by zero")
        return Rational(a._numerator * b._denominator, a._denominator * b._numerator)

    def __add__(self, other: Any) -> Any:
        return self._binary_operation(other, self._add)

    def __radd__(self, other: Any) -> Any:
        return self._reflected_operation(other, self._add)

    def __sub__(self, other: Any) -> Any:
        return self._binary_operation(other, self._sub)

    def __rsub__(self, other: Any) -> Any:
        return self._reflected_operation(other, self._sub)

    def __mul__(self, other: Any) -> Any:
        return self._binary_operation(other, self._mul)

    def __rmul__(self, other: Any) -> Any:
        return self._reflected_operation(other, self._mul)

    def __truediv__(self, other: Any) -> Any:
        return self._binary_operation(other, self._truediv)

    def __rtruediv__(self, other: Any) -> Any:
        return self._reflected_operation(other, self._truediv)

    def __pow__(self, exponent: Any) -> Any:
        if isinstance(exponent, np.ndarray):
            vectorised = np.vectorize(lambda x: self.__pow__(x), otypes=[object])
            return vectorised(exponent)
        power = self._coerce_power(exponent)
        if power is None:
            return NotImplemented
        if power >= 0:
            return Rational(self._numerator ** power, self._denominator ** power)
        if self._numerator == 0:
            raise ZeroDivisionError("0 cannot be raised to a negative power")
        positive = -power
        return Rational(self._denominator ** positive, self._numerator ** positive)

    def __neg__(self) -> "Rational":
        return Rational(-self._numerator, self._denominator)

    def __pos__(self) -> "Rational":
        return self

    def __abs__(self) -> "Rational":
        return Rational(abs(self._numerator), self._denominator)

    # ------------------------------------------------------------------
    # Comparisons
    def _compare(self, other: Any, op) -> bool:
        if not isinstance(other, Rational):
            return NotImplemented
        return op(compare(self, other), 0)

    def __eq__(self, other: Any) -> bool:
        if self is other:
            return True
        if not isinstance(other, Rational):
            return NotImplemented
        return (
            self._numerator == other._numerator
            and self._denominator == other._denominator
        )

    def __lt__(self, other: Any) -> bool:
        return self._compare(other, operator.lt)

    def __le__(self, other: Any) -> bool:
        return self._compare(other, operator.le)

    def __gt__(self, other: Any) -> bool:
        return self._compare(other, operator.gt)

    def __ge__(self, other: Any) -> bool:
        return self._compare(other, operator.ge)

    def __hash__(self) -> int:
        return hash((self._numerator, self._denominator))

    # ------------------------------------------------------------------
    # NumPy interoperability
    _UFUNC_DISPATCH = {
        np.add: operator.add,
        np.subtract: operator.sub,
        np.multiply: operator.mul,
        np.divide: operator.truediv,
        np.true_divide: operator.truediv,
        np.negative: operator.neg,
        np.positive: operator.pos,
        np.absolute: abs,
        np.power: operator.pow,
    }

    @staticmethod
    def _array_equality(ufunc, inputs):
        # Element-wise __eq__: only a Rational can equal a Rational.
        def same(a: Any, b: Any) -> bool:
            return isinstance(a, Rational) and isinstance(b, Rational) and a == b

        if ufunc is np.equal:
            test = same
        else:
            test = lambda a, b: not same(a, b)  # noqa: E731
        result = np.vectorize(test, otypes=[bool])(*inputs)
        if np.ndim(result) == 0:
            return bool(result)
        return result

    def __array_ufunc__(self, ufunc, method, *inputs, **kwargs):
        if method != "__call__":
            return NotImplemented
        if kwargs.get("out") is not None:
            raise NotImplementedError("`out` argument is not supported for Rational ufuncs")
        if ufunc is np.equal or ufunc is np.not_equal:
            return self._array_equality(ufunc, inputs)
        op = self._UFUNC_DISPATCH.get(ufunc)
        if op is None:
            return NotImplemented

        coerced = []
        has_array = False
        for value in inputs:
            if isinstance(value, np.ndarray):
                vectorised = np.vectorize(Rational.rationalize, otypes=[object])
                coerced.append(vectorised(value))
                has_array = True
            else:
                scalar = self._coerce_scalar(value)
                if scalar is None:
                    return NotImplemented
                coerced.append(scalar)
        if has_array:
            vectorised = np.vectorize(lambda *args: op(*args), otypes=[object])
            return vectorised(*coerced)
        return op(*coerced)


def compare(a: Rational, b: Rational) -> int:
    """Return -1, 0 or 1 as *a* is less than, equal to or greater than *b*.

    Denominators are positive, so cross-multiplying preserves the sign of
    ``a - b`` and no common denominator is needed.
    """
    require_value(a, "a")
    require_value(b, "b")
    if not isinstance(a, Rational) or not isinstance(b, Rational):
        raise TypeError(f"cannot compare {type(a)!r} with {type(b)!r}")
    if a is b:
        return 0
    if a._denominator == b._denominator:
        left, right = a._numerator, b._numerator
    else:
        left = a._numerator * b._denominator
        right = b._numerator * a._denominator
    return (left > right) - (left < right)


def rationalize(value: NumberLike) -> Rational:
    """Public helper to convert *value* into :class:`Rational`."""

    return Rational.rationalize(value)


def as_rational_array(values: Any, *, copy: bool = True) -> np.ndarray:
    """Return a ``numpy.ndarray`` of :class:`Rational` values.

    ``values`` can be any iterable of integral, Fraction or Rational entries
    or an existing NumPy array. When ``copy`` is ``False`` and ``values`` is
    already an object array of :class:`Rational`, it is returned unchanged.
    """

    if isinstance(values, np.ndarray):
        array = values.copy() if copy else values
        if array.dtype == object and all(isinstance(item, Rational) for item in array.flat):
            return array
        array = array.astype(object, copy=False)
        vectorised = np.vectorize(Rational.rationalize, otypes=[object])
        return vectorised(array)

    if isinstance(values, (list, tuple)):
        coerced = [Rational.rationalize(item) for item in values]
        result = np.empty(len(coerced), dtype=object)
        result[:] = coerced
        return result

    return as_rational_array(list(values), copy=copy)


def zeros(length: int) -> np.ndarray:
    """Return a one-dimensional array of length ``length`` filled with zeros."""

    if length < 0:
        raise ValueError("length must be non-negative")
    return as_rational_array([Rational(0, 1) for _ in range(length)])


def zeros_like(values: Any) -> np.ndarray:
    """Return a zero-filled array that matches the shape of ``values``."""

    shape = np.shape(values)
    result = np.empty(shape, dtype=object)
    result.fill(Rational(0, 1))
    return result


__all__ = [
    "Rational",
    "compare",
    "rationalize",
    "DEFAULT_MAX_DENOMINATOR",
    "as_rational_array",
    "zeros",
    "zeros_like",
]
