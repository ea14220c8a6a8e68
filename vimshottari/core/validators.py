# vimshottari/core/validators.py
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from vimshottari.core.constants import RULER_YEARS

__all__ = [
    "DashaError",
    "InvalidInput",
    "ConfigError",
    "parse_longitude",
    "parse_instant",
    "parse_years",
    "parse_ruler",
]


# ───────────────────────── errors ─────────────────────────

class DashaError(ValueError):
    """Base engine error; carries a stable machine-readable `code`."""
    code = "dasha_error"

    def __init__(self, message: str, *, field: Optional[str] = None):
        self.field = field
        self.message = message
        super().__init__(f"{self.code}: {message}")

    def errors(self) -> List[Dict[str, Any]]:
        return [{
            "loc": [self.field] if self.field else [],
            "msg": self.message,
            "type": self.code,
        }]


class InvalidInput(DashaError):
    """Caller contract violation (bad longitude, naive instant, unknown ruler...)."""
    code = "invalid_input"


class ConfigError(DashaError):
    code = "config_error"


# ───────────────────────── atomic parsers ─────────────────────────

def _finite_float(v: Any, field: str) -> float:
    # bool is an int subclass; True is never a meaningful angle or span
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise InvalidInput(f"{field} must be a real number, got {type(v).__name__}", field=field)
    try:
        x = float(v)
    except OverflowError as e:
        raise InvalidInput(f"{field} is out of range, got an int of {v.bit_length()} bits", field=field) from e
    if not math.isfinite(x):
        raise InvalidInput(f"{field} must be finite, got {v!r}", field=field)
    return x

def parse_longitude(v: Any, field: str = "longitude") -> float:
    """Any finite real number of degrees; wrapping is the classifier's job."""
    return _finite_float(v, field)

def parse_years(v: Any, field: str = "span_years") -> float:
    x = _finite_float(v, field)
    if x < 0.0:
        raise InvalidInput(f"{field} must be >= 0, got {v!r}", field=field)
    return x

def parse_instant(v: Any, field: str = "instant") -> datetime:
    """
    Accept an aware datetime and return it in UTC.
    Naive datetimes are rejected: the engine works on absolute instants only.
    """
    if not isinstance(v, datetime):
        raise InvalidInput(f"{field} must be a datetime, got {type(v).__name__}", field=field)
    if v.tzinfo is None or v.utcoffset() is None:
        raise InvalidInput(f"{field} must be timezone-aware (absolute instant)", field=field)
    return v.astimezone(timezone.utc)

def parse_ruler(v: Any, field: str = "ruler") -> str:
    if not isinstance(v, str) or v not in RULER_YEARS:
        raise InvalidInput(f"unknown ruler {v!r}", field=field)
    return v
