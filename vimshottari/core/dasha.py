# vimshottari/core/dasha.py
"""
Period tree generator.

Public API:
    seed(longitude_deg) -> DashaSeed
    generate_majors(birth, longitude_deg, span_years=None, *, year_days=None) -> list[Period]
    subdivide(parent, *, year_days=None) -> list[Period]     # 9 children
    medium_periods(major) / minor_periods(medium)           # level-checked wrappers

Rules:
- The Moon's elapsed fraction of its sector equals the elapsed fraction of the
  first Major period at birth; that period therefore began `used_years` before
  birth.
- Majors follow the 9-ruler cycle from the seed ruler, each lasting its weight.
- Every subdivision restarts the cycle at the parent's own ruler; child k lasts
  parent_actual_years * weight(k) / 120. A child that would overrun the parent
  is clipped, and the final child always ends exactly at the parent's end.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from vimshottari.core.constants import (
    RULER_COUNT,
    RULER_YEARS,
    TOTAL_YEARS,
    cycle_from,
    ruler_at,
)
from vimshottari.core.nakshatra import SectorPosition, classify
from vimshottari.core.periods import (
    LEVELS,
    RESOLUTION,
    Period,
    delta_to_years,
    resolve_year_days,
    years_to_delta,
)
from vimshottari.core.validators import InvalidInput, parse_instant, parse_ruler, parse_years
from vimshottari.utils.config import engine_config

__all__ = [
    "DashaSeed",
    "seed",
    "generate_majors",
    "subdivide",
    "medium_periods",
    "minor_periods",
]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashaSeed:
    starting_ruler: str
    used_years: float       # elapsed in the first Major before birth
    remaining_years: float  # left in the first Major after birth
    full_years: float       # weight of the starting ruler
    position: SectorPosition

    def to_dict(self) -> Dict[str, Any]:
        return {
            "starting_ruler": self.starting_ruler,
            "used_years": self.used_years,
            "remaining_years": self.remaining_years,
            "full_years": self.full_years,
            "sector": self.position.sector.name,
            "sector_index": self.position.sector.index,
            "elapsed_fraction": self.position.elapsed_fraction,
        }


def seed(longitude_deg: float) -> DashaSeed:
    pos = classify(longitude_deg)
    ruler = pos.ruler
    full = float(RULER_YEARS[ruler])
    remaining = full * pos.remaining_fraction
    used = full - remaining
    log.debug(
        "seed lon=%.6f sector=%s ruler=%s used=%.6fy remaining=%.6fy",
        pos.longitude, pos.sector.name, ruler, used, remaining,
    )
    return DashaSeed(
        starting_ruler=ruler,
        used_years=used,
        remaining_years=remaining,
        full_years=full,
        position=pos,
    )


def generate_majors(
    birth: datetime,
    longitude_deg: float,
    span_years: Optional[float] = None,
    *,
    year_days: Optional[float] = None,
) -> List[Period]:
    """
    Major periods from the true start of the birth period until the cursor
    passes `birth + span_years` (the crossing period is included).
    """
    birth = parse_instant(birth, "birth")
    span = engine_config().default_span_years if span_years is None else parse_years(span_years)
    yd = resolve_year_days(year_days)
    sd = seed(longitude_deg)

    try:
        full = years_to_delta(sd.full_years, yd)
        used = years_to_delta(sd.used_years, yd)
        # keep birth strictly inside the first period after µs quantization
        if used >= full:
            used = full - RESOLUTION
        cursor = birth - used
        limit = birth + years_to_delta(span, yd)

        majors: List[Period] = []
        ruler = sd.starting_ruler
        while True:
            weight = RULER_YEARS[ruler]
            end = cursor + years_to_delta(weight, yd)
            majors.append(Period(level="major", ruler=ruler, start=cursor, end=end, years=float(weight)))
            cursor = end
            ruler = ruler_at(ruler, 1)
            if cursor > limit:
                break
    except OverflowError as e:
        raise InvalidInput(f"span_years={span} from {birth.isoformat()} leaves the datetime range", field="span_years") from e

    log.debug("generated %d major periods from %s (span=%.3fy)", len(majors), majors[0].start.isoformat(), span)
    return majors


def subdivide(parent: Period, *, year_days: Optional[float] = None) -> List[Period]:
    """
    Split one Major into 9 Mediums, or one Medium into 9 Minors.
    Independent of siblings; nothing is cached.
    """
    if not isinstance(parent, Period):
        raise InvalidInput(f"parent must be a Period, got {type(parent).__name__}", field="parent")
    parse_ruler(parent.ruler, "parent.ruler")
    if parent.level not in LEVELS:
        raise InvalidInput(f"unknown period level {parent.level!r}", field="parent.level")
    if parent.level == LEVELS[-1]:
        raise InvalidInput("minor periods are the finest level and cannot be subdivided", field="parent.level")

    yd = resolve_year_days(year_days)
    level = LEVELS[parent.depth + 1]
    lineage = parent.rulers
    parent_years = delta_to_years(parent.duration, yd)

    children: List[Period] = []
    cursor = parent.start
    for k, ruler in enumerate(cycle_from(parent.ruler)):
        child_years = parent_years * RULER_YEARS[ruler] / TOTAL_YEARS
        end = cursor + years_to_delta(child_years, yd)
        if end > parent.end or k == RULER_COUNT - 1:
            end = parent.end
        children.append(Period(level=level, ruler=ruler, start=cursor, end=end, years=child_years, lineage=lineage))
        cursor = end
    return children


def medium_periods(major: Period, *, year_days: Optional[float] = None) -> List[Period]:
    if getattr(major, "level", None) != "major":
        raise InvalidInput(f"expected a major period, got {major!r}", field="major")
    return subdivide(major, year_days=year_days)


def minor_periods(medium: Period, *, year_days: Optional[float] = None) -> List[Period]:
    if getattr(medium, "level", None) != "medium":
        raise InvalidInput(f"expected a medium period, got {medium!r}", field="medium")
    return subdivide(medium, year_days=year_days)
