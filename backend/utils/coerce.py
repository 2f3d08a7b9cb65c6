"""Defensive parsers for loosely-typed upstream JSON values."""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Any, Optional

import pandas as pd

_TOKEN_START = re.compile(r"(^|\s)(\S)")
_DECIMAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def finite_number(v: Any) -> Optional[float]:
    """Accept real JSON numbers only; strings and booleans are not coordinates."""
    if not is_number(v):
        return None
    value = float(v)
    return value if math.isfinite(value) else None


def to_float(v: Any) -> Optional[float]:
    """Parse a number or plain decimal string. Anything else, or a non-finite value, becomes None."""
    if is_number(v):
        value = float(v)
    elif isinstance(v, str):
        text = v.strip()
        if not _DECIMAL.fullmatch(text):
            return None
        value = float(text)
    else:
        return None
    return value if math.isfinite(value) else None


def positive_float(v: Any) -> Optional[float]:
    value = to_float(v)
    if value is None or value <= 0:
        return None
    return value


def to_int(v: Any) -> Optional[int]:
    value = to_float(v)
    if value is None or not value.is_integer():
        return None
    return int(value)


def to_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    if isinstance(v, str):
        return v
    if is_number(v):
        return str(int(v)) if float(v).is_integer() else str(v)
    return None


def title_case(value: Optional[str]) -> Optional[str]:
    if not value:
        return value
    return _TOKEN_START.sub(lambda m: m.group(1) + m.group(2).upper(), value.lower())


def to_datetime(v: Any) -> Optional[datetime]:
    if not isinstance(v, str) or not v.strip():
        return None
    ts = pd.to_datetime(v.strip(), errors="coerce")
    if pd.isna(ts):
        return None
    return ts.to_pydatetime()


__all__ = [
    "is_number",
    "finite_number",
    "to_float",
    "positive_float",
    "to_int",
    "to_str",
    "title_case",
    "to_datetime",
]
