from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .ephemeris import days_since_j2000, eci_to_ecef, moon_direction_eci, sidereal_angle

# Apollo 11 landing site, selenographic (deg, east-positive longitude)
APOLLO11_LAT_DEG = 0.67408
APOLLO11_LON_DEG = 23.47297

# IAU mean lunar pole and prime meridian (no librations)
MOON_POLE_RA_DEG = 269.9949
MOON_POLE_DEC_DEG = 66.5392
MOON_W0_DEG = 38.3213
MOON_W_RATE_DEG_PER_DAY = 13.17635815

# Visual calibration against a reference renderer (Fourmilab Earth View).
# FUDGE_LON_DEG is a yaw about Earth's polar axis that absorbs the coarse
# lunar ephemeris and the texture seam convention; ROLL_DEG is a screen-plane
# roll putting lunar "up" where the reference has it. Neither is astronomy:
# re-tune both against the reference if the ephemeris or texture changes.
FUDGE_LON_DEG = -200.0
ROLL_DEG = 225.0


def _safe_normalize(v: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    n = np.linalg.norm(v)
    if n < eps:
        return v * 0.0
    return v / n


def rot_x(a: float) -> np.ndarray:
    ca, sa = np.cos(a), np.sin(a)
    return np.array(
        [
            [1.0, 0.0, 0.0],
            [0.0, ca, -sa],
            [0.0, sa, ca],
        ],
        dtype=float,
    )


def rot_z(a: float) -> np.ndarray:
    ca, sa = np.cos(a), np.sin(a)
    return np.array(
        [
            [ca, -sa, 0.0],
            [sa, ca, 0.0],
            [0.0, 0.0, 1.0],
        ],
        dtype=float,
    )


def site_vector_moon_fixed(lat_deg: float = APOLLO11_LAT_DEG, lon_east_deg: float = APOLLO11_LON_DEG) -> np.ndarray:
    """Unit site vector in the Moon body-fixed frame (west-positive longitude convention)."""
    phi = np.deg2rad(lat_deg)
    lam = np.deg2rad(-lon_east_deg)
    return np.array([np.cos(phi) * np.cos(lam), np.cos(phi) * np.sin(lam), np.sin(phi)], dtype=float)


def moon_fixed_to_eci(unix_seconds: float) -> np.ndarray:
    """
    Moon body-fixed -> ECI rotation from the IAU mean pole and prime meridian:

      M = Rz(alpha_p + 90deg) @ Rx(90deg - delta_p) @ Rz(W)
    """
    alpha_p = np.deg2rad(MOON_POLE_RA_DEG)
    delta_p = np.deg2rad(MOON_POLE_DEC_DEG)
    d = days_since_j2000(unix_seconds)
    w = np.deg2rad(MOON_W0_DEG + MOON_W_RATE_DEG_PER_DAY * d)
    return rot_z(alpha_p + np.pi / 2.0) @ rot_x(np.pi / 2.0 - delta_p) @ rot_z(w)


def site_normal_ecef(unix_seconds: float, gmst_rad: float) -> np.ndarray:
    n_eci = moon_fixed_to_eci(unix_seconds) @ site_vector_moon_fixed()
    return eci_to_ecef(n_eci, gmst_rad)


@dataclass(frozen=True)
class ViewBasis:
    """
    Observer frame in ECEF:
      r: screen right
      u: screen up (local lunar vertical projected on the sky plane)
      f: forward, Earth -> Moon (points out of the screen toward the viewer)
    """
    r: np.ndarray
    u: np.ndarray
    f: np.ndarray

    @property
    def matrix(self) -> np.ndarray:
        """ECEF -> View rotation (rows r, u, f)."""
        return np.vstack([self.r, self.u, self.f])


def view_basis(moon_ecef: np.ndarray, site_ecef: np.ndarray) -> ViewBasis:
    f = _safe_normalize(np.asarray(moon_ecef, dtype=float))

    # project local vertical onto the plane normal to f
    u0 = site_ecef - np.dot(site_ecef, f) * f
    if np.linalg.norm(u0) < 1e-12:
        # fallback: Earth's pole on the sky plane
        u0 = np.array([0.0, 0.0, 1.0]) - f[2] * f
    u = _safe_normalize(u0)

    # x = u cross f keeps the image from being mirrored
    r = _safe_normalize(np.cross(u, f))
    return ViewBasis(r=r, u=u, f=f)


def ecef_to_view_matrix(
    unix_seconds: float,
    fudge_lon_deg: float = FUDGE_LON_DEG,
    roll_deg: float = ROLL_DEG,
    gmst_rad: float | None = None,
) -> np.ndarray:
    """
    Calibrated ECEF -> View matrix for the Apollo 11 observer at unix_seconds:

      M = Rz(roll) @ [r; u; f] @ Rz(fudge)
    """
    gmst = sidereal_angle(unix_seconds) if gmst_rad is None else float(gmst_rad)
    moon_ecef = eci_to_ecef(moon_direction_eci(unix_seconds), gmst)
    basis = view_basis(moon_ecef, site_normal_ecef(unix_seconds, gmst))

    M = basis.matrix @ rot_z(np.deg2rad(fudge_lon_deg))
    return rot_z(np.deg2rad(roll_deg)) @ M


def ecef_to_view(M: np.ndarray, v: np.ndarray) -> np.ndarray:
    v = np.asarray(v, dtype=float)
    return M @ v if v.ndim == 1 else v @ M.T


def view_to_ecef(M: np.ndarray, v: np.ndarray) -> np.ndarray:
    # orthonormal: inverse is the transpose
    v = np.asarray(v, dtype=float)
    return M.T @ v if v.ndim == 1 else v @ M


@dataclass(frozen=True)
class DiskGrid:
    """
    Orthographic unprojection of every pixel of a (height, width) image.

    Pixels with dx^2 + dy^2 <= 1 lie on the visible hemisphere of a unit
    sphere; (dx, dy, dz) is then both the view-space point and its normal.
    """
    width: int
    height: int
    cx: float
    cy: float
    radius: float
    dx: np.ndarray    # (H,W)
    dy: np.ndarray    # (H,W), +Y is screen-up
    dz: np.ndarray    # (H,W), 0 outside the disk
    inside: np.ndarray  # (H,W) bool

    def normals_view(self) -> np.ndarray:
        """(N,3) view-space normals of the in-disk pixels, row-major order."""
        m = self.inside
        return np.stack([self.dx[m], self.dy[m], self.dz[m]], axis=1)


def disk_grid(width: int, height: int) -> DiskGrid:
    cx = width / 2.0
    cy = height / 2.0
    radius = min(width, height) / 2.0

    ii, jj = np.meshgrid(np.arange(width), np.arange(height))
    dx = (ii + 0.5 - cx) / radius
    dy = -(jj + 0.5 - cy) / radius  # flip: image rows increase downward

    r2 = dx * dx + dy * dy
    inside = r2 <= 1.0
    dz = np.sqrt(np.maximum(0.0, 1.0 - r2))
    dz[~inside] = 0.0
    return DiskGrid(width=int(width), height=int(height), cx=cx, cy=cy, radius=radius,
                    dx=dx, dy=dy, dz=dz, inside=inside)
