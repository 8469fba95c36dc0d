from __future__ import annotations

import numpy as np

J2000_JD = 2451545.0
UNIX_EPOCH_JD = 2440587.5  # 1970-01-01T00:00:00Z
SECONDS_PER_DAY = 86_400.0
DAYS_PER_CENTURY = 36525.0
OBLIQUITY_DEG = 23.439  # fixed mean obliquity, adequate for ~1-2 deg accuracy
TWO_PI = 2.0 * np.pi


def julian_day(unix_seconds: float) -> float:
    return UNIX_EPOCH_JD + float(unix_seconds) / SECONDS_PER_DAY


def days_since_j2000(unix_seconds: float) -> float:
    return julian_day(unix_seconds) - J2000_JD


def sidereal_seconds(unix_seconds: float) -> float:
    """GMST in seconds of time (IAU 1982 polynomial), before reduction modulo one day."""
    t = days_since_j2000(unix_seconds) / DAYS_PER_CENTURY
    return (
        67310.54841
        + (876600.0 * 3600.0 + 8640184.812866) * t
        + 0.093104 * t**2
        - 6.2e-6 * t**3
    )


def sidereal_angle(unix_seconds: float) -> float:
    """Greenwich mean sidereal angle in radians, in [0, 2*pi)."""
    sec = sidereal_seconds(unix_seconds) % SECONDS_PER_DAY
    if sec < 0.0:
        sec += SECONDS_PER_DAY
    return (sec / SECONDS_PER_DAY) * TWO_PI


def _ecliptic_to_eci(lambda_rad: float, obliquity_deg: float = OBLIQUITY_DEG) -> np.ndarray:
    """Unit vector for ecliptic longitude lambda (latitude 0) in equatorial coords."""
    eps = np.deg2rad(obliquity_deg)
    alpha = np.arctan2(np.cos(eps) * np.sin(lambda_rad), np.cos(lambda_rad))
    delta = np.arcsin(np.clip(np.sin(eps) * np.sin(lambda_rad), -1.0, 1.0))
    cosd = np.cos(delta)
    return np.array([cosd * np.cos(alpha), cosd * np.sin(alpha), np.sin(delta)], dtype=float)


def sun_direction_eci(unix_seconds: float) -> np.ndarray:
    """
    Low-precision apparent Sun direction (unit vector, ECI).

    Mean longitude L and mean anomaly g are evaluated in degrees, then
    lambda = L + 1.915 sin g + 0.020 sin 2g.
    """
    n = days_since_j2000(unix_seconds)
    L = (280.460 + 0.9856474 * n) % 360.0
    g = np.deg2rad((357.528 + 0.9856003 * n) % 360.0)
    lambda_deg = L + 1.915 * np.sin(g) + 0.020 * np.sin(2.0 * g)
    return _ecliptic_to_eci(np.deg2rad(lambda_deg))


def moon_direction_eci(unix_seconds: float) -> np.ndarray:
    """Moon direction (unit vector, ECI) from a circular orbit in the ecliptic plane."""
    n = days_since_j2000(unix_seconds)
    lambda_deg = (218.316 + 13.176396 * n) % 360.0
    return _ecliptic_to_eci(np.deg2rad(lambda_deg))


def eci_to_ecef(vec: np.ndarray, gmst_rad: float) -> np.ndarray:
    """
    Rotate ECI vector(s) about +Z by +gmst.

    vec may be (3,) or (N,3).
    """
    cz, sz = np.cos(gmst_rad), np.sin(gmst_rad)
    R = np.array(
        [
            [cz, -sz, 0.0],
            [sz, cz, 0.0],
            [0.0, 0.0, 1.0],
        ],
        dtype=float,
    )
    v = np.asarray(vec, dtype=float)
    if v.ndim == 1:
        return R @ v
    return v @ R.T


def lon_lat_of(vec: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Longitude atan2(y, x) and latitude asin(z) in radians of unit vector(s)."""
    v = np.asarray(vec, dtype=float)
    lon = np.arctan2(v[..., 1], v[..., 0])
    lat = np.arcsin(np.clip(v[..., 2], -1.0, 1.0))
    return lon, lat


def sub_point_lon_lat(direction_eci: np.ndarray, gmst_rad: float) -> tuple[float, float]:
    """Ground-track (lon, lat) in radians of an ECI direction at sidereal angle gmst_rad."""
    lon, lat = lon_lat_of(eci_to_ecef(direction_eci, gmst_rad))
    return float(lon), float(lat)


def subsolar_lon_lat(unix_seconds: float) -> tuple[float, float]:
    return sub_point_lon_lat(sun_direction_eci(unix_seconds), sidereal_angle(unix_seconds))


def sublunar_lon_lat(unix_seconds: float) -> tuple[float, float]:
    return sub_point_lon_lat(moon_direction_eci(unix_seconds), sidereal_angle(unix_seconds))
