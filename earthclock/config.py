from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping

try:
    import tomllib  # py3.11+
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

# EC_* environment variable -> (section, key, type)
ENV_OVERRIDES: Dict[str, tuple[str, str, type]] = {
    "EC_TEXTURE": ("paths", "texture", str),
    "EC_UNIX_SECONDS": ("time", "unix_seconds", float),
    "EC_TIME": ("time", "utc", str),
    "EC_PRESET": ("time", "preset", str),
    "EC_NIGHT_FLOOR": ("shading", "night_floor", float),
    "EC_GAMMA": ("shading", "gamma", float),
    "EC_EXPOSURE": ("shading", "exposure", float),
    "EC_DISABLE_SHADING": ("shading", "disabled", bool),
    "EC_TEX_LON_OFFSET_DEG": ("texture", "lon_offset_deg", float),
    "EC_WATER_BOOST": ("water", "boost", float),
    "EC_WATER_HUE_LO": ("water", "hue_lo_deg", float),
    "EC_WATER_HUE_HI": ("water", "hue_hi_deg", float),
    "EC_WATER_SAT_MIN": ("water", "sat_min", float),
    "EC_TEST_PATTERN": ("debug", "test_pattern", bool),
    "EC_DEBUG_OVERLAY": ("debug", "overlay", bool),
    "EC_SHOW_COORDS": ("debug", "show_coords", bool),
    "EC_FULLSCREEN": ("window", "fullscreen", bool),
}


@dataclass(frozen=True)
class Config:
    raw: Dict[str, Any]

    def _section(self, name: str) -> Dict[str, Any]:
        return dict(self.raw.get(name, {}))

    @property
    def time(self) -> Dict[str, Any]:
        return self._section("time")

    @property
    def paths(self) -> Dict[str, Any]:
        return self._section("paths")

    @property
    def window(self) -> Dict[str, Any]:
        return self._section("window")

    @property
    def shading(self) -> Dict[str, Any]:
        return self._section("shading")

    @property
    def texture(self) -> Dict[str, Any]:
        return self._section("texture")

    @property
    def water(self) -> Dict[str, Any]:
        return self._section("water")

    @property
    def debug(self) -> Dict[str, Any]:
        return self._section("debug")

    @property
    def calibration(self) -> Dict[str, Any]:
        return self._section("calibration")


def load_config(path: str | Path | None = None) -> Config:
    """Read a TOML scene file; None gives an empty config (all defaults)."""
    if path is None:
        return Config({})
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Missing config: {p}")
    raw = tomllib.loads(p.read_text(encoding="utf-8"))
    return Config(raw)


def apply_env_overrides(cfg: Config, environ: Mapping[str, str] | None = None) -> list[str]:
    """
    Copy EC_* variables into cfg.raw. Boolean variables are true only when "1".
    Empty variables are ignored. Returns the names that were applied.
    """
    env = os.environ if environ is None else environ
    applied: list[str] = []
    for name, (section, key, typ) in ENV_OVERRIDES.items():
        val = env.get(name, None)
        if val is None or val == "":
            continue
        if typ is bool:
            value: Any = val.strip() == "1"
        else:
            try:
                value = typ(val)
            except ValueError as e:
                raise ValueError(f"{name}={val!r} is not a valid {typ.__name__}") from e
        cfg.raw.setdefault(section, {})[key] = value
        applied.append(name)
    return applied
