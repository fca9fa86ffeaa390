"""Defensive handling of integers supplied by callers."""
from __future__ import annotations

import logging
import numbers
import operator
from typing import Any

import numpy as np

from .exc import NullArgumentError

LOG = logging.getLogger(__name__)

FIXED_WIDTH_DTYPE = np.int64

_FIXED_WIDTH_INFO = np.iinfo(FIXED_WIDTH_DTYPE)


def require_value(value: Any, name: str) -> Any:
    """Return *value*, raising :class:`NullArgumentError` when it is ``None``."""
    if value is None:
        raise NullArgumentError(f"{name} is None")
    return value


def _copy_int(value: int) -> int:
    # Unbound int methods read the underlying digits, never the subclass overrides.
    length = (int.bit_length(value) + 8) // 8
    raw = int.to_bytes(value, length, "big", signed=True)
    return int.from_bytes(raw, "big", signed=True)


def safe_instance(value: Any, name: str) -> int:
    """Return a plain ``int`` equal to *value*.

    Exact ``int`` instances are returned as-is. Subclasses of ``int`` (``bool``
    included) may override arithmetic, comparison or hashing and carry state
    their owner can change later, so they are rebuilt from their byte
    representation. Other :class:`numbers.Integral` implementations are
    converted with :func:`operator.index` and the result is checked again.
    """
    require_value(value, name)
    if type(value) is int:
        return value
    if isinstance(value, int):
        LOG.debug("copying %s of untrusted type %s", name, type(value).__qualname__)
        return _copy_int(value)
    if isinstance(value, numbers.Integral):
        return safe_instance(operator.index(value), name)
    raise TypeError(f"{name} must be an integer, got {type(value)!r}")


def fixed_width(value: Any, name: str) -> int:
    """Convert a fixed-width integer (NumPy scalar or small ``int``) to ``int``."""
    require_value(value, name)
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, numbers.Integral):
        result = safe_instance(value, name)
        if not _FIXED_WIDTH_INFO.min <= result <= _FIXED_WIDTH_INFO.max:
            raise OverflowError(f"{name} does not fit in {np.dtype(FIXED_WIDTH_DTYPE).name}")
        return result
    raise TypeError(f"{name} must be a fixed-width integer, got {type(value)!r}")


__all__ = ["FIXED_WIDTH_DTYPE", "require_value", "safe_instance", "fixed_width"]
