from __future__ import annotations

import re
import time
from dataclasses import dataclass

from astropy.time import Time

# Named instants (UTC)
PRESETS = {
    "apollo11_landing": "1969-07-20T20:17:40Z",     # LM touchdown
    "apollo11_first_step": "1969-07-21T02:56:15Z",  # first step on the surface
}
PRESET_ALIASES = {
    "1stlanding": "apollo11_landing",
    "landing": "apollo11_landing",
    "firststep": "apollo11_first_step",
    "1ststep": "apollo11_first_step",
}


# trailing "Z" or a numeric UTC offset (+HH:MM, +HHMM, -HH)
_UTC_OFFSET_RE = re.compile(r"(?:Z|([+-])(\d{2})(?::?(\d{2}))?)$")


def _split_utc_offset(s: str) -> tuple[str, float]:
    """Separate an ISO-8601 time-of-day offset; returns (local part, offset in seconds east of UTC)."""
    if "T" not in s:
        return s, 0.0
    date, _, clock = s.partition("T")
    m = _UTC_OFFSET_RE.search(clock)
    if m is None:
        return s, 0.0
    local = f"{date}T{clock[: m.start()]}"
    if m.group(1) is None:
        return local, 0.0
    sign = 1.0 if m.group(1) == "+" else -1.0
    return local, sign * (int(m.group(2)) * 3600.0 + int(m.group(3) or 0) * 60.0)


def utc_to_unix(utc: str) -> float:
    """
    ISO-8601 time string -> Unix seconds.

    Accepts a trailing Z or a numeric offset (e.g. +00:00, +02:00, -0530);
    without either the time is taken as UTC.
    """
    s, offset = _split_utc_offset(str(utc).strip())
    try:
        return float(Time(s, format="isot", scale="utc").unix) - offset
    except ValueError as e:
        raise ValueError(f"Cannot parse UTC time {utc!r} (expected e.g. 1969-07-20T20:17:40Z)") from e


def unix_to_utc(unix_seconds: float) -> str:
    return Time(float(unix_seconds), format="unix", scale="utc").isot + "Z"


def preset_unix(name: str) -> float:
    key = str(name).strip().lower()
    key = PRESET_ALIASES.get(key, key)
    if key not in PRESETS:
        known = ", ".join(sorted(set(PRESETS) | set(PRESET_ALIASES)))
        raise ValueError(f"Unknown time preset {name!r}; known presets: {known}")
    return utc_to_unix(PRESETS[key])


def resolve_fixed_time(time_cfg: dict) -> float | None:
    """
    Fixed instant from a [time] table, or None for the live clock.

    Precedence: unix_seconds, then utc, then preset.
    """
    unix = time_cfg.get("unix_seconds", None)
    if unix not in (None, ""):
        return float(unix)
    utc = time_cfg.get("utc", None)
    if utc:
        return utc_to_unix(str(utc))
    preset = time_cfg.get("preset", None)
    if preset:
        return preset_unix(str(preset))
    return None


@dataclass(frozen=True)
class Clock:
    """Source of the instant to render: the real-time UTC clock unless fixed."""
    fixed_seconds: float | None = None

    def now_utc_seconds(self) -> float:
        if self.fixed_seconds is not None:
            return float(self.fixed_seconds)
        return time.time()
