# tests/conftest.py
from __future__ import annotations

"""
Pytest configuration for the Vimshottari engine suite.

- Registers Hypothesis profiles for local dev and CI.
- Freezes the process TZ to UTC (defensive; the engine only takes aware instants).
- Isolates every test from VIMSHOTTARI_* environment overrides and the cached
  engine config.
"""

import os
from datetime import datetime, timezone

import pytest
from hypothesis import settings, HealthCheck

from vimshottari.utils.config import engine_config


# ──────────────────────────────────────────────────────────────────────────────
# Hypothesis profiles
# ──────────────────────────────────────────────────────────────────────────────
settings.register_profile(
    "dev",
    settings(
        deadline=None,           # avoid flaky timeouts on slower runners
        max_examples=60,         # fast local runs
        suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    ),
)
settings.register_profile(
    "ci",
    settings(
        deadline=None,
        max_examples=200,        # a bit more coverage in CI
        suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    ),
)

_profile = (
    "ci"
    if (os.getenv("CI") or os.getenv("GITHUB_ACTIONS"))
    else os.getenv("HYPOTHESIS_PROFILE", "dev")
)
settings.load_profile(_profile)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "slow: mark test as slow")


def pytest_report_header(config: pytest.Config) -> str:
    return f"Hypothesis profile: '{_profile}'"


# ──────────────────────────────────────────────────────────────────────────────
# Global fixtures
# ──────────────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="session", autouse=True)
def freeze_tz_env():
    """
    Ensure the process TZ is UTC so nothing that *might* consult TZ changes results.
    """
    prev = os.environ.get("TZ")
    os.environ["TZ"] = "UTC"
    try:
        yield
    finally:
        if prev is None:
            os.environ.pop("TZ", None)
        else:
            os.environ["TZ"] = prev


@pytest.fixture(autouse=True)
def clean_engine_config(monkeypatch):
    """Default settings for every test; no leakage from the developer's shell."""
    for name in ("VIMSHOTTARI_CONFIG", "VIMSHOTTARI_YEAR_DAYS", "VIMSHOTTARI_SPAN_YEARS"):
        monkeypatch.delenv(name, raising=False)
    engine_config.cache_clear()
    yield
    engine_config.cache_clear()


@pytest.fixture
def birth() -> datetime:
    return datetime(1990, 5, 17, 4, 30, tzinfo=timezone.utc)
