# vimshottari/core/constants.py
# -*- coding: utf-8 -*-
"""
Vimshottari — core constants & small helpers

Purpose
-------
Single source of truth for:
- the 9-ruler cyclic sequence and its year weights (sum = 120)
- the 27 sector (nakshatra) → ruler bindings, 13°20′ each
- the default mean year length used for all duration arithmetic
- tiny cyclic-index and angle helpers

Design
------
- Pure-Python, no external dependencies.
- Safe to import from any core module.
- Tables are read-only (tuples / MappingProxyType); there is no write path.
"""

from __future__ import annotations
from types import MappingProxyType
from typing import Mapping, Tuple
import math

__all__ = [
    # rulers
    "RULER_ORDER", "RULER_YEARS", "TOTAL_YEARS", "RULER_COUNT",
    # sectors
    "SECTOR_COUNT", "SECTOR_SPAN_DEG", "PADA_COUNT", "SECTOR_TABLE",
    # time
    "MEAN_YEAR_DAYS", "SECONDS_PER_DAY",
    # helpers
    "ruler_index", "ruler_years", "ruler_at", "cycle_from", "wrap_deg",
]

# ── rulers ───────────────────────────────────────────────────────────────────
# Canonical cyclic order; every level of the period tree walks this sequence.
RULER_ORDER: Tuple[str, ...] = (
    "Ketu", "Venus", "Sun", "Moon", "Mars",
    "Rahu", "Jupiter", "Saturn", "Mercury",
)
RULER_COUNT: int = len(RULER_ORDER)

# Major-period length per ruler, in mean years.
RULER_YEARS: Mapping[str, int] = MappingProxyType({
    "Ketu": 7,
    "Venus": 20,
    "Sun": 6,
    "Moon": 10,
    "Mars": 7,
    "Rahu": 18,
    "Jupiter": 16,
    "Saturn": 19,
    "Mercury": 17,
})

TOTAL_YEARS: int = 120

_RULER_INDEX: Mapping[str, int] = MappingProxyType({r: i for i, r in enumerate(RULER_ORDER)})

# ── sectors ──────────────────────────────────────────────────────────────────
SECTOR_COUNT: int = 27
SECTOR_SPAN_DEG: float = 360.0 / SECTOR_COUNT  # 13°20′
PADA_COUNT: int = 4                             # quarters per sector (3°20′ each)

# (name, ruler) from 0° sidereal Aries; the ruler column repeats every 9 rows.
SECTOR_TABLE: Tuple[Tuple[str, str], ...] = (
    ("Ashwini", "Ketu"),
    ("Bharani", "Venus"),
    ("Krittika", "Sun"),
    ("Rohini", "Moon"),
    ("Mrigashira", "Mars"),
    ("Ardra", "Rahu"),
    ("Punarvasu", "Jupiter"),
    ("Pushya", "Saturn"),
    ("Ashlesha", "Mercury"),
    ("Magha", "Ketu"),
    ("Purva Phalguni", "Venus"),
    ("Uttara Phalguni", "Sun"),
    ("Hasta", "Moon"),
    ("Chitra", "Mars"),
    ("Swati", "Rahu"),
    ("Vishakha", "Jupiter"),
    ("Anuradha", "Saturn"),
    ("Jyeshtha", "Mercury"),
    ("Mula", "Ketu"),
    ("Purva Ashadha", "Venus"),
    ("Uttara Ashadha", "Sun"),
    ("Shravana", "Moon"),
    ("Dhanishta", "Mars"),
    ("Shatabhisha", "Rahu"),
    ("Purva Bhadrapada", "Jupiter"),
    ("Uttara Bhadrapada", "Saturn"),
    ("Revati", "Mercury"),
)

# ── time constants ────────────────────────────────────────────────────────────
MEAN_YEAR_DAYS: float = 365.2425  # mean Gregorian/tropical year; overridable via config
SECONDS_PER_DAY: float = 86400.0

# ── cyclic-index helpers ──────────────────────────────────────────────────────
def ruler_index(ruler: str) -> int:
    """Position of `ruler` in RULER_ORDER. KeyError for unknown names."""
    return _RULER_INDEX[ruler]

def ruler_years(ruler: str) -> int:
    return RULER_YEARS[ruler]

def ruler_at(start: str, steps: int) -> str:
    """The ruler `steps` places after `start` in the cycle (mod 9)."""
    return RULER_ORDER[(_RULER_INDEX[start] + steps) % RULER_COUNT]

def cycle_from(start: str) -> Tuple[str, ...]:
    """All 9 rulers in cyclic order beginning with `start`."""
    i = _RULER_INDEX[start]
    return RULER_ORDER[i:] + RULER_ORDER[:i]

# ── tiny angle helper ────────────────────────────────────────────────────────
def wrap_deg(x: float) -> float:
    """
    Wrap any angle to [0, 360).
    """
    x = math.fmod(float(x), 360.0)
    if x < 0.0:
        x += 360.0
    # tiny negatives wrap to exactly 360.0 in floating point; -0.0 becomes 0.0
    return 0.0 if x >= 360.0 else x + 0.0
