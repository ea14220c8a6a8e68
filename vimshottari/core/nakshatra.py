# vimshottari/core/nakshatra.py
"""
Sky-position classifier: sidereal longitude -> one of 27 sectors (nakshatras).

Public API:
    classify(longitude_deg) -> SectorPosition
    sector_for_index(index) -> Sector
    sector_ruler(longitude_deg) -> str

Each sector spans exactly 13°20′ and is bound to a ruler through the constant
table in `constants.SECTOR_TABLE`. The elapsed fraction is how far the
position has moved through its sector, in [0, 1).
"""
from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, Tuple

from vimshottari.core.constants import (
    PADA_COUNT,
    SECTOR_COUNT,
    SECTOR_SPAN_DEG,
    SECTOR_TABLE,
    wrap_deg,
)
from vimshottari.core.validators import InvalidInput, parse_longitude

__all__ = ["Sector", "SectorPosition", "SECTORS", "classify", "sector_for_index", "sector_ruler"]


@dataclass(frozen=True)
class Sector:
    index: int
    name: str
    ruler: str
    start_deg: float  # inclusive
    end_deg: float    # exclusive

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SectorPosition:
    longitude: float           # normalized to [0, 360)
    sector: Sector
    offset_deg: float          # degrees past sector.start_deg
    elapsed_fraction: float    # [0, 1)
    remaining_fraction: float  # (0, 1]
    pada: int                  # quarter of the sector, 1..4

    @property
    def ruler(self) -> str:
        return self.sector.ruler

    @property
    def start_deg(self) -> float:
        return self.sector.start_deg

    @property
    def end_deg(self) -> float:
        return self.sector.end_deg

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


SECTORS: Tuple[Sector, ...] = tuple(
    Sector(
        index=i,
        name=name,
        ruler=ruler,
        start_deg=i * SECTOR_SPAN_DEG,
        end_deg=(i + 1) * SECTOR_SPAN_DEG,
    )
    for i, (name, ruler) in enumerate(SECTOR_TABLE)
)


def sector_for_index(index: int) -> Sector:
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < SECTOR_COUNT:
        raise InvalidInput(f"sector index must be an int in 0..{SECTOR_COUNT - 1}, got {index!r}", field="index")
    return SECTORS[index]


def classify(longitude_deg: float) -> SectorPosition:
    """
    Locate a sidereal longitude within the 27-sector tiling.

    Works on sector units rather than degrees so that the elapsed fraction is
    exactly `x - floor(x)` and therefore always in [0, 1).
    """
    lon = wrap_deg(parse_longitude(longitude_deg, "longitude_deg"))
    x = lon / SECTOR_SPAN_DEG
    idx = int(math.floor(x))
    if idx >= SECTOR_COUNT:
        # lon just below 360 can round up to a full 27 sector units
        idx, x, lon = 0, 0.0, 0.0
    elapsed = x - idx
    sector = SECTORS[idx]
    pada = min(PADA_COUNT, int(elapsed * PADA_COUNT) + 1)
    return SectorPosition(
        longitude=lon,
        sector=sector,
        offset_deg=elapsed * SECTOR_SPAN_DEG,
        elapsed_fraction=elapsed,
        remaining_fraction=1.0 - elapsed,
        pada=pada,
    )


def sector_ruler(longitude_deg: float) -> str:
    return classify(longitude_deg).ruler
