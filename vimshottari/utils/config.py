# vimshottari/utils/config.py
import math
import os
from dataclasses import dataclass, asdict
from functools import lru_cache

import yaml

from vimshottari.core.constants import MEAN_YEAR_DAYS
from vimshottari.core.validators import ConfigError

class AttrDict(dict):
    """Dict that also supports attribute access: cfg.year_days and cfg['year_days'] both work."""
    def __getattr__(self, item):
        try:
            return self[item]
        except KeyError as e:
            raise AttributeError(item) from e
    def __setattr__(self, key, value):
        self[key] = value

def _to_attr(obj):
    if isinstance(obj, dict):
        return AttrDict({k: _to_attr(v) for k, v in obj.items()})
    if isinstance(obj, list):
        return [_to_attr(x) for x in obj]
    return obj

def load_config(path: str):
    """
    Load YAML config from `path`. Engine settings live under the `engine:` key
    (or at top level for flat files). Returns an AttrDict for convenient access.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"cannot read config file {path!r}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path!r}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping in {path!r}")
    return _to_attr(data)


# ───────────────────────────── Engine settings ─────────────────────────────
@dataclass(frozen=True)
class EngineCfg:
    year_days: float            # mean year length for every duration conversion
    default_span_years: float   # generate_majors horizon when the caller gives none
    look_back_years: float      # period_windows defaults
    look_ahead_years: float

    def to_dict(self):
        return asdict(self)

_DEFAULTS = {
    "year_days": MEAN_YEAR_DAYS,
    "default_span_years": 120.0,
    "look_back_years": 0.25,
    "look_ahead_years": 2.0,
}

_ENV_OVERRIDES = {
    "VIMSHOTTARI_YEAR_DAYS": "year_days",
    "VIMSHOTTARI_SPAN_YEARS": "default_span_years",
}

def _positive(name: str, value) -> float:
    try:
        x = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(x) or x <= 0.0:
        raise ConfigError(f"{name} must be a finite positive number, got {value!r}")
    return x

def _non_negative(name: str, value) -> float:
    try:
        x = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(x) or x < 0.0:
        raise ConfigError(f"{name} must be a finite number >= 0, got {value!r}")
    return x

def build_engine_config(data=None, environ=None) -> EngineCfg:
    """
    Merge defaults <- `data` (mapping, e.g. from load_config) <- env overrides:
      - VIMSHOTTARI_YEAR_DAYS
      - VIMSHOTTARI_SPAN_YEARS
    """
    environ = os.environ if environ is None else environ
    merged = dict(_DEFAULTS)
    data = data or {}
    section = data.get("engine") or data
    if not isinstance(section, dict):
        raise ConfigError("'engine' section must be a mapping")
    for key in _DEFAULTS:
        if key in section and section[key] is not None:
            merged[key] = section[key]
    for env_name, key in _ENV_OVERRIDES.items():
        raw = environ.get(env_name)
        if raw:
            merged[key] = raw
    return EngineCfg(
        year_days=_positive("year_days", merged["year_days"]),
        default_span_years=_non_negative("default_span_years", merged["default_span_years"]),
        look_back_years=_non_negative("look_back_years", merged["look_back_years"]),
        look_ahead_years=_non_negative("look_ahead_years", merged["look_ahead_years"]),
    )

@lru_cache(maxsize=1)
def engine_config() -> EngineCfg:
    """
    Process-wide settings, read once. The YAML file named by VIMSHOTTARI_CONFIG
    is optional; when set it must exist. Call engine_config.cache_clear() after
    changing the environment (tests do).
    """
    path = os.getenv("VIMSHOTTARI_CONFIG")
    data = load_config(path) if path else {}
    return build_engine_config(data)
