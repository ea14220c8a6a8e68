# vimshottari/core/resolver.py
"""
Temporal query resolver over a Major-period list.

The period tree has depth 3 and branching factor 9 per Major; it is never
materialized. `resolve` builds only the 9 Mediums of the matching Major and
the 9 Minors of the matching Medium, so a query costs O(log n + 18) no matter
how wide the generated span is. Do not replace this with eager full-tree
generation: callers commonly hold 120-year spans and ask about one instant.

Public API:
    resolve(instant, majors, *, year_days=None) -> DashaState
    resolve_for_birth(instant, birth, longitude_deg, span_years=None, *, year_days=None) -> DashaState
    medium_timeline(majors, until=None, *, year_days=None) -> list[Period]
    period_windows(majors, around, *, look_back_years=None, look_ahead_years=None, year_days=None) -> list[Period]
"""
from __future__ import annotations

import logging
from bisect import bisect_right
from datetime import datetime
from typing import List, Optional, Sequence

from vimshottari.core.dasha import generate_majors, subdivide
from vimshottari.core.periods import DashaState, Period, resolve_year_days, years_to_delta
from vimshottari.core.validators import InvalidInput, parse_instant, parse_years
from vimshottari.utils.config import engine_config

__all__ = ["resolve", "resolve_for_birth", "medium_timeline", "period_windows"]

log = logging.getLogger(__name__)


def _check_majors(majors: Sequence[Period]) -> None:
    for p in majors:
        if getattr(p, "level", None) != "major":
            raise InvalidInput(f"majors must contain only major periods, got {p!r}", field="majors")
    for a, b in zip(majors, majors[1:]):
        if b.start < a.start:
            raise InvalidInput(f"majors must be ascending by start, {b.label} starts before {a.label}", field="majors")


def _find(periods: Sequence[Period], instant: datetime) -> Optional[Period]:
    """The period with start <= instant < end; `periods` ascending by start."""
    i = bisect_right([p.start for p in periods], instant) - 1
    if i >= 0 and periods[i].contains(instant):
        return periods[i]
    return None


def resolve(instant: datetime, majors: Sequence[Period], *, year_days: Optional[float] = None) -> DashaState:
    """
    Descend Major -> Medium -> Minor for `instant`.

    Returns an empty (falsy) DashaState when the instant lies outside the
    generated span; the caller should widen the span and retry. When a level
    cannot be matched the deepest resolved levels are still returned.
    """
    instant = parse_instant(instant)
    _check_majors(majors)
    yd = resolve_year_days(year_days)

    major = _find(majors, instant)
    if major is None:
        log.debug("instant %s outside generated span", instant.isoformat())
        return DashaState()

    medium = _find(subdivide(major, year_days=yd), instant)
    if medium is None:
        log.warning("no medium period covers %s inside %s", instant.isoformat(), major.label)
        return DashaState(major=major)

    minor = _find(subdivide(medium, year_days=yd), instant)
    if minor is None:
        log.warning("no minor period covers %s inside %s", instant.isoformat(), medium.label)
    return DashaState(major=major, medium=medium, minor=minor)


def resolve_for_birth(
    instant: datetime,
    birth: datetime,
    longitude_deg: float,
    span_years: Optional[float] = None,
    *,
    year_days: Optional[float] = None,
) -> DashaState:
    """One-shot query: generate the Majors for a birth context and resolve `instant`."""
    majors = generate_majors(birth, longitude_deg, span_years, year_days=year_days)
    return resolve(instant, majors, year_days=year_days)


def medium_timeline(
    majors: Sequence[Period],
    until: Optional[datetime] = None,
    *,
    year_days: Optional[float] = None,
) -> List[Period]:
    """
    Flattened Medium periods of every given Major, optionally only those
    starting before `until`. Eager by nature; bound `majors` accordingly.
    """
    _check_majors(majors)
    cutoff = None if until is None else parse_instant(until, "until")
    yd = resolve_year_days(year_days)
    out: List[Period] = []
    for major in majors:
        if cutoff is not None and major.start >= cutoff:
            break
        out.extend(m for m in subdivide(major, year_days=yd) if cutoff is None or m.start < cutoff)
    return out


def period_windows(
    majors: Sequence[Period],
    around: datetime,
    *,
    look_back_years: Optional[float] = None,
    look_ahead_years: Optional[float] = None,
    year_days: Optional[float] = None,
) -> List[Period]:
    """
    Minor periods overlapping [around - look_back, around + look_ahead],
    chronologically. Majors and Mediums entirely outside the window are
    skipped without being subdivided.
    """
    _check_majors(majors)
    around = parse_instant(around, "around")
    cfg = engine_config()
    back = cfg.look_back_years if look_back_years is None else parse_years(look_back_years, "look_back_years")
    ahead = cfg.look_ahead_years if look_ahead_years is None else parse_years(look_ahead_years, "look_ahead_years")
    yd = resolve_year_days(year_days)

    try:
        window_start = around - years_to_delta(back, yd)
        window_end = around + years_to_delta(ahead, yd)
    except OverflowError as e:
        raise InvalidInput("window leaves the datetime range", field="around") from e

    def _outside(p: Period) -> bool:
        return p.end < window_start or p.start > window_end

    windows: List[Period] = []
    for major in majors:
        if _outside(major):
            continue
        for medium in subdivide(major, year_days=yd):
            if _outside(medium):
                continue
            windows.extend(m for m in subdivide(medium, year_days=yd) if not _outside(m))

    windows.sort(key=lambda p: p.start)
    log.debug("period_windows: %d minor periods in [%s, %s]", len(windows), window_start.isoformat(), window_end.isoformat())
    return windows
