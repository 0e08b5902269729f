# ========================
# file: wbox_mapgen/core/config.py
# ========================
from __future__ import annotations
import copy
import json
import math
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Union

from .constants import TOLERANCE_MAX, TOLERANCE_MIN
from .errors import ConfigError

# Keys used by the original web form (camelCase) -> dataclass fields.
_KEY_ALIASES: Dict[str, str] = {
    "playerName": "player_name",
    "population": "population",
    "worldTime": "world_time",
    "deaths": "deaths",
    "creaturesBorn": "creatures_born",
    "toleranceLevel": "tolerance_level",
}

_INT_FIELDS = ("population", "world_time", "deaths", "creatures_born", "tolerance_level")


@dataclass(frozen=True)
class StatsConfig:
    """User supplied map statistics. Every field is optional."""

    player_name: str = ""
    population: int = 0
    world_time: int = 0  # months
    deaths: int = 0
    creatures_born: int = 0
    tolerance_level: int = 0  # percent, 0..100

    def validate(self) -> None:
        for name in ("population", "world_time", "deaths", "creatures_born"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be >= 0, got {getattr(self, name)}")
        if not TOLERANCE_MIN <= self.tolerance_level <= TOLERANCE_MAX:
            raise ConfigError(
                f"tolerance_level must be in [{TOLERANCE_MIN}, {TOLERANCE_MAX}], got {self.tolerance_level}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_STATS: Dict[str, Any] = StatsConfig().to_dict()


def deep_merge(base: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursive dict merge. Lists/tuples are replaced, not merged element-wise."""
    out = copy.deepcopy(base)
    for k, v in overrides.items():
        if isinstance(v, Mapping) and isinstance(out.get(k), dict):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


def _coerce_int(value: Any) -> int:
    """Mirrors parseInt(value) || 0: garbage, empty and non-finite values become 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, int):
        return value
    text = str(value).strip()
    sign = ""
    if text[:1] in ("+", "-"):
        sign, text = text[0], text[1:]
    digits = ""
    for ch in text:
        # only ASCII digits, as parseInt does ('²'.isdigit() is True)
        if ch not in "0123456789":
            break
        digits += ch
    return int(sign + digits) if digits else 0


def normalize_stats_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Accepts both camelCase and snake_case keys; unknown keys are rejected."""
    out: Dict[str, Any] = {}
    for key, value in data.items():
        field_name = _KEY_ALIASES.get(key, key)
        if field_name not in DEFAULT_STATS:
            raise ConfigError(f"Unknown stats key '{key}'")
        out[field_name] = value
    return out


def _load_json_file(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read stats config '{path}': {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Stats config '{path}' must be a JSON object")
    return data


def load_stats_config(
    source: Union[str, os.PathLike, Mapping[str, Any], None] = None,
    overrides: Mapping[str, Any] | None = None,
) -> StatsConfig:
    """Load stats from a JSON path or a dict, merge over defaults and apply overrides.

    Args:
        source: path to a JSON file, a raw mapping, or None for defaults
        overrides: last layer, e.g. values given on the command line
    Returns:
        validated StatsConfig
    """
    if source is None:
        data: Mapping[str, Any] = {}
    elif isinstance(source, (str, os.PathLike)):
        data = _load_json_file(os.fspath(source))
    elif isinstance(source, Mapping):
        data = source
    else:
        raise TypeError("source must be a path, a mapping or None")

    merged = deep_merge(DEFAULT_STATS, normalize_stats_keys(data))
    if overrides:
        merged = deep_merge(merged, normalize_stats_keys(overrides))

    for name in _INT_FIELDS:
        try:
            merged[name] = _coerce_int(merged[name])
        except (ValueError, OverflowError) as e:
            raise ConfigError(f"{name}: cannot read {merged[name]!r} as a number") from e
    merged["player_name"] = "" if merged["player_name"] is None else str(merged["player_name"])

    config = StatsConfig(**merged)
    config.validate()
    return config
