"""Domain-level value coercion helpers.

Line items arrive from editing surfaces that may transiently hold partial
numeric text (``"12."``, ``""``, ``"12 nos"``).  Missing or unparsable numbers
are never an error: every total and every copied record reads numbers through
:func:`number_or_zero`, so the zero-substitution policy lives in one place.

Text is read by its leading number and whatever follows is ignored, so
``"12abc"`` is 12 and ``"1,200"`` is 1.  Currency symbols in front of the
number make the text unparsable.
"""
from __future__ import annotations

import math
import re
from typing import Any

_LEADING_FLOAT_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def coerce_float_or_none(value: Any) -> float | None:
    """Attempt to coerce the given value to ``float`` returning ``None`` on failure."""

    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            numeric = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        match = _LEADING_FLOAT_RE.match(value)
        if match is None:
            return None
        try:
            numeric = float(match.group(1))
        except (ValueError, OverflowError):
            return None
    elif hasattr(value, "__float__"):
        try:
            numeric = float(value)
        except (TypeError, ValueError, OverflowError):
            return None
    else:
        return None

    if not math.isfinite(numeric):
        return None
    return numeric


def number_or_zero(value: Any) -> float:
    """Return ``value`` as a finite float, substituting ``0.0`` when it is not one."""

    numeric = coerce_float_or_none(value)
    return 0.0 if numeric is None else numeric


def to_int(value: Any) -> int | None:
    """Best-effort integer read: the leading digits of text, numbers truncated."""

    if isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        return int(match.group(1)) if match else None
    numeric = coerce_float_or_none(value)
    if numeric is None:
        return None
    return int(numeric)


def text_or_empty(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def is_blank(value: Any) -> bool:
    """True for ``None`` and for text that is empty after trimming."""

    if value is None:
        return True
    return not text_or_empty(value).strip()


__all__ = [
    "coerce_float_or_none",
    "is_blank",
    "number_or_zero",
    "text_or_empty",
    "to_int",
]
