# tests/test_resolver.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, strategies as st

from vimshottari.core.constants import RULER_ORDER, RULER_YEARS
from vimshottari.core.dasha import generate_majors, seed, subdivide
from vimshottari.core.periods import DashaState, years_to_delta
from vimshottari.core.resolver import medium_timeline, period_windows, resolve, resolve_for_birth
from vimshottari.core.validators import InvalidInput

YEAR_DAYS = 365.2425
US = timedelta(microseconds=1)

births = st.datetimes(
    min_value=datetime(1900, 1, 1),
    max_value=datetime(2100, 12, 31),
    timezones=st.just(timezone.utc),
)
longitudes = st.floats(min_value=0.0, max_value=360.0, allow_nan=False, allow_infinity=False, exclude_max=True)


def _major_by_hand(lon: float, years_after_birth: float) -> str:
    """Walk the cycle in plain years from the seed ruler."""
    sd = seed(lon)
    i = RULER_ORDER.index(sd.starting_ruler)
    elapsed = -sd.used_years
    while True:
        ruler = RULER_ORDER[i % 9]
        elapsed += RULER_YEARS[ruler]
        if years_after_birth < elapsed:
            return ruler
        i += 1


# ─────────────────────────────────────────────────────────────────────────────
# Scenarios
# ─────────────────────────────────────────────────────────────────────────────

def test_fifty_years_after_birth_at_200_degrees(birth) -> None:
    majors = generate_majors(birth, 200.0, 120)
    instant = birth + years_to_delta(50, YEAR_DAYS)
    state = resolve(instant, majors)
    assert state
    assert state.major.ruler == _major_by_hand(200.0, 50.0) == "Mercury"
    # 50y = Jupiter 16 + Saturn 19 + 15y into Mercury; Mercury's 9th sub-period
    # (Saturn) covers 14.308..17.0y, and its Mercury minor covers 0.426..0.8075y of it
    assert state.medium.ruler == "Saturn"
    assert state.minor.ruler == "Mercury"
    assert state.depth == 3
    assert state.deepest is state.minor
    assert state.minor.label == "Mercury/Saturn/Mercury"

def test_instant_before_span_is_empty(birth) -> None:
    majors = generate_majors(birth, 200.0, 120)
    state = resolve(majors[0].start - US, majors)
    assert not state
    assert state == DashaState()
    assert state.to_dict() == {}
    assert state.depth == 0

def test_instant_far_after_span_is_empty(birth) -> None:
    majors = generate_majors(birth, 200.0, 120)
    assert resolve(birth + years_to_delta(500, YEAR_DAYS), majors).to_dict() == {}
    assert not resolve(majors[-1].end, majors)

def test_empty_major_list_is_empty_result(birth) -> None:
    assert not resolve(birth, [])

def test_boundary_instant_belongs_to_later_period(birth) -> None:
    majors = generate_majors(birth, 0.0, 120)
    state = resolve(majors[1].start, majors)
    assert state.major == majors[1]
    assert state.medium == subdivide(majors[1])[0]
    assert state.minor == subdivide(state.medium)[0]
    assert state.minor.ruler == majors[1].ruler

def test_state_to_dict_shape(birth) -> None:
    majors = generate_majors(birth, 0.0, 20)
    d = resolve(birth + timedelta(days=1), majors).to_dict()
    assert set(d) == {"major", "medium", "minor"}
    assert d["major"]["ruler"] == "Ketu"
    assert d["medium"]["parent_ruler"] == "Ketu"
    assert d["minor"]["major_ruler"] == "Ketu"
    assert d["major"]["start"].endswith("Z")

def test_resolve_for_birth_matches_two_step(birth) -> None:
    instant = birth + years_to_delta(33.3, YEAR_DAYS)
    assert resolve_for_birth(instant, birth, 145.0, 80) == resolve(instant, generate_majors(birth, 145.0, 80))

def test_resolve_rejects_bad_input(birth) -> None:
    majors = generate_majors(birth, 0.0, 20)
    with pytest.raises(InvalidInput):
        resolve(datetime(2000, 1, 1), majors)
    with pytest.raises(InvalidInput):
        resolve(birth, subdivide(majors[0]))

def test_resolve_rejects_unordered_majors(birth) -> None:
    majors = generate_majors(birth, 200.0, 120)
    instant = birth + years_to_delta(50, YEAR_DAYS)
    with pytest.raises(InvalidInput) as ei:
        resolve(instant, list(reversed(majors)))
    assert ei.value.errors()[0]["loc"] == ["majors"]
    with pytest.raises(InvalidInput):
        medium_timeline(majors[::-1])
    assert resolve(instant, majors).minor.label == "Mercury/Saturn/Mercury"


# ─────────────────────────────────────────────────────────────────────────────
# Properties
# ─────────────────────────────────────────────────────────────────────────────

@given(b=births, lon=longitudes, frac=st.floats(min_value=0.0, max_value=1.0, exclude_max=True))
def test_resolver_consistency(b, lon, frac) -> None:
    majors = generate_majors(b, lon, 100)
    first, last = majors[0].start, majors[-1].end
    instant = min(first + (last - first) * frac, last - US)
    state = resolve(instant, majors)
    assert state.major in majors
    assert state.major.start <= instant < state.major.end
    assert state.medium in subdivide(state.major)
    assert state.medium.start <= instant < state.medium.end
    assert state.minor in subdivide(state.medium)
    assert state.minor.start <= instant < state.minor.end

@given(b=births, lon=longitudes, offset_days=st.integers(min_value=-3000, max_value=60000))
def test_resolve_is_deterministic(b, lon, offset_days) -> None:
    majors = generate_majors(b, lon, 120)
    instant = b + timedelta(days=offset_days)
    assert resolve(instant, majors) == resolve(instant, list(majors))
    assert resolve(instant, majors).to_dict() == resolve(instant, majors).to_dict()


# ─────────────────────────────────────────────────────────────────────────────
# Timelines and windows
# ─────────────────────────────────────────────────────────────────────────────

def test_medium_timeline_full_and_cut(birth) -> None:
    majors = generate_majors(birth, 0.0, 30)  # Ketu 0-7, Venus 7-27, Sun 27-33
    assert [m.ruler for m in majors] == ["Ketu", "Venus", "Sun"]
    full = medium_timeline(majors)
    assert len(full) == 27
    for a, b in zip(full, full[1:]):
        assert a.end == b.start
    # Ketu's 9 + Venus/Venus (7y..10.33y); Venus/Sun starts after 10y
    until = birth + years_to_delta(10, YEAR_DAYS)
    cut = medium_timeline(majors, until)
    assert len(cut) == 10
    assert all(m.start < until for m in cut)
    assert cut[-1].label == "Venus/Venus"

def test_period_windows_cover_the_window(birth) -> None:
    majors = generate_majors(birth, 200.0, 120)
    around = birth + years_to_delta(50, YEAR_DAYS)
    windows = period_windows(majors, around)
    window_start = around - years_to_delta(0.25, YEAR_DAYS)
    window_end = around + years_to_delta(2.0, YEAR_DAYS)
    assert windows
    assert all(w.level == "minor" for w in windows)
    assert windows[0].start <= window_start
    assert windows[-1].end >= window_end
    for a, b in zip(windows, windows[1:]):
        assert a.end == b.start
    assert resolve(around, majors).minor in windows

def test_period_windows_custom_bounds(birth) -> None:
    majors = generate_majors(birth, 10.0, 40)
    around = birth + years_to_delta(12, YEAR_DAYS)
    narrow = period_windows(majors, around, look_back_years=0, look_ahead_years=0)
    assert resolve(around, majors).minor in narrow
    assert len(narrow) <= 2

def test_period_windows_rejects_negative_bounds(birth) -> None:
    majors = generate_majors(birth, 10.0, 40)
    with pytest.raises(InvalidInput):
        period_windows(majors, birth, look_back_years=-1)
    with pytest.raises(InvalidInput):
        period_windows(majors, birth, look_ahead_years=10**400)
