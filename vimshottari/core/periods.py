# vimshottari/core/periods.py
# -----------------------------------------------------------------------------
# Period value objects and mean-year time arithmetic.
#
# Guarantees:
#   • Instants are timezone-aware UTC datetimes (microsecond resolution).
#   • A "year" is a fixed mean length (default 365.2425 d), never a calendar
#     year, so identical inputs always produce identical boundaries.
#   • Periods are immutable; equality is by (level, lineage, ruler, start, end, years).
# -----------------------------------------------------------------------------

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from vimshottari.core.constants import SECONDS_PER_DAY
from vimshottari.core.validators import InvalidInput
from vimshottari.utils.config import engine_config

__all__ = [
    "LEVELS",
    "RESOLUTION",
    "Period",
    "DashaState",
    "resolve_year_days",
    "years_to_delta",
    "delta_to_years",
    "to_utc_iso",
]

LEVELS: Tuple[str, ...] = ("major", "medium", "minor")

# Smallest representable step between two instants.
RESOLUTION = timedelta(microseconds=1)


# ───────────────────────────── Time arithmetic ─────────────────────────────

def resolve_year_days(year_days: Optional[float] = None) -> float:
    """Per-call override, else the configured mean year length."""
    if year_days is None:
        return engine_config().year_days
    if isinstance(year_days, bool) or not isinstance(year_days, (int, float)):
        raise InvalidInput(f"year_days must be a number, got {year_days!r}", field="year_days")
    if not math.isfinite(year_days) or year_days <= 0.0:
        raise InvalidInput(f"year_days must be finite and > 0, got {year_days!r}", field="year_days")
    return float(year_days)

def years_to_delta(years: float, year_days: float) -> timedelta:
    return timedelta(days=years * year_days)

def delta_to_years(delta: timedelta, year_days: float) -> float:
    return delta.total_seconds() / (year_days * SECONDS_PER_DAY)

def to_utc_iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


# ───────────────────────────── Dataclasses ─────────────────────────────

@dataclass(frozen=True)
class Period:
    level: str                    # "major" | "medium" | "minor"
    ruler: str
    start: datetime               # inclusive
    end: datetime                 # exclusive
    years: float                  # nominal length in mean years
    lineage: Tuple[str, ...] = () # enclosing rulers, outermost first

    @property
    def depth(self) -> int:
        return LEVELS.index(self.level)

    @property
    def parent_ruler(self) -> Optional[str]:
        return self.lineage[-1] if self.lineage else None

    @property
    def major_ruler(self) -> str:
        return self.lineage[0] if self.lineage else self.ruler

    @property
    def medium_ruler(self) -> Optional[str]:
        if self.level == "medium":
            return self.ruler
        if self.level == "minor":
            return self.lineage[1]
        return None

    @property
    def rulers(self) -> Tuple[str, ...]:
        return self.lineage + (self.ruler,)

    @property
    def label(self) -> str:
        return "/".join(self.rulers)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def duration_years(self, year_days: Optional[float] = None) -> float:
        """Actual (post-clamp) length in mean years."""
        return delta_to_years(self.duration, resolve_year_days(year_days))

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"level": self.level}
        if self.level == "medium":
            out["parent_ruler"] = self.parent_ruler
        elif self.level == "minor":
            out["major_ruler"] = self.major_ruler
            out["medium_ruler"] = self.medium_ruler
        out.update({
            "ruler": self.ruler,
            "start": to_utc_iso(self.start),
            "end": to_utc_iso(self.end),
            "years": self.years,
        })
        return out


@dataclass(frozen=True)
class DashaState:
    """Result of a point query; falsy when the instant is outside the span."""
    major: Optional[Period] = None
    medium: Optional[Period] = None
    minor: Optional[Period] = None

    def __bool__(self) -> bool:
        return self.major is not None

    @property
    def depth(self) -> int:
        """How many levels resolved (0..3)."""
        return sum(p is not None for p in (self.major, self.medium, self.minor))

    @property
    def deepest(self) -> Optional[Period]:
        return self.minor or self.medium or self.major

    def to_dict(self) -> Dict[str, Any]:
        return {
            name: p.to_dict()
            for name, p in (("major", self.major), ("medium", self.medium), ("minor", self.minor))
            if p is not None
        }
