"""Loose conversions for untyped query and body values.

Strings follow JavaScript number syntax: ASCII digits only, no ``_``
separators, and hex/octal/binary literals with a ``0x``/``0o``/``0b`` prefix.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_INFINITY = re.compile(r"[+-]?Infinity")
_RADIX_LITERAL = re.compile(r"0([xXoObB])([0-9a-fA-F]+)")
_RADIX = {"x": 16, "o": 8, "b": 2}


def parse_int(value: Any) -> Optional[int]:
    """Parse a leading integer the way query strings need (``"12abc"`` is 12)."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def to_number(value: Any) -> float:
    """Convert loosely typed input to a float; ``nan`` when it is not a number.

    ``None`` (JSON ``null``) and blank strings are zero.
    """

    if value is None:
        return 0.0
    if isinstance(value, (bool, int, float)):
        return float(value)
    if not isinstance(value, str):
        return math.nan
    text = value.strip()
    if not text:
        return 0.0
    if _DECIMAL.fullmatch(text):
        return float(text)
    if _INFINITY.fullmatch(text):
        return -math.inf if text.startswith("-") else math.inf
    literal = _RADIX_LITERAL.fullmatch(text)
    if literal:
        try:
            return float(int(literal.group(2), _RADIX[literal.group(1).lower()]))
        except ValueError:
            return math.nan
    return math.nan


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))
