from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .camera import FUDGE_LON_DEG, ROLL_DEG, disk_grid, ecef_to_view_matrix
from .ephemeris import eci_to_ecef, lon_lat_of, moon_direction_eci, sidereal_angle, sun_direction_eci
from .ocean import WaterClassifier
from .overlay import draw_debug_overlay
from .shading import ShadingParameters
from .texture import EarthTexture


@dataclass(frozen=True)
class FrameGeometry:
    """Everything time-dependent a frame needs, built fresh per render."""
    unix_seconds: float
    gmst: float
    sun_eci: np.ndarray
    moon_eci: np.ndarray
    sun_ecef: np.ndarray
    moon_ecef: np.ndarray
    ecef_to_view: np.ndarray

    @property
    def view_to_ecef(self) -> np.ndarray:
        return self.ecef_to_view.T


def frame_geometry(
    unix_seconds: float,
    fudge_lon_deg: float = FUDGE_LON_DEG,
    roll_deg: float = ROLL_DEG,
) -> FrameGeometry:
    t = float(unix_seconds)
    gmst = sidereal_angle(t)
    sun_eci = sun_direction_eci(t)
    moon_eci = moon_direction_eci(t)
    return FrameGeometry(
        unix_seconds=t,
        gmst=gmst,
        sun_eci=sun_eci,
        moon_eci=moon_eci,
        sun_ecef=eci_to_ecef(sun_eci, gmst),
        moon_ecef=eci_to_ecef(moon_eci, gmst),
        ecef_to_view=ecef_to_view_matrix(t, fudge_lon_deg, roll_deg, gmst_rad=gmst),
    )


def compose_color(rgb8: np.ndarray, brightness: np.ndarray) -> np.ndarray:
    """Shaded colour in [0,1]: texture colour times brightness, clamped per channel."""
    c = np.asarray(rgb8, dtype=np.float64) * np.asarray(brightness, dtype=np.float64)[..., None] / 255.0
    return np.clip(c, 0.0, 1.0)


def to_uint8(color01: np.ndarray) -> np.ndarray:
    return np.round(np.clip(color01, 0.0, 1.0) * 255.0).astype(np.uint8)


class SublunarRenderer:
    """
    Orthographic image of the Earth as seen from the Apollo 11 site.

    The pixel grid (disk mask, view-space normals) depends only on the image
    size and is computed once; everything time-dependent is recomputed in
    render(), so render(t) is a pure function of t.
    """

    def __init__(
        self,
        width: int,
        height: int,
        texture: EarthTexture,
        shading: ShadingParameters | None = None,
        water: WaterClassifier | None = None,
        *,
        fudge_lon_deg: float = FUDGE_LON_DEG,
        roll_deg: float = ROLL_DEG,
        test_pattern: bool = False,
        debug_overlay: bool = False,
    ):
        self.width = int(width)
        self.height = int(height)
        self.texture = texture
        self.shading = shading if shading is not None else ShadingParameters.create()
        self.water = water if water is not None else WaterClassifier()
        self.fudge_lon_deg = float(fudge_lon_deg)
        self.roll_deg = float(roll_deg)
        self.test_pattern = bool(test_pattern)
        self.debug_overlay = bool(debug_overlay)

        self.grid = disk_grid(self.width, self.height)
        self._normals_view = self.grid.normals_view()

    def geometry(self, unix_seconds: float) -> FrameGeometry:
        return frame_geometry(unix_seconds, self.fudge_lon_deg, self.roll_deg)

    def shade_disk(self, geom: FrameGeometry) -> np.ndarray:
        """(N,3) colours in [0,1] for the in-disk pixels, row-major order."""
        n_view = self._normals_view
        if self.test_pattern:
            return np.stack([n_view[:, 0] * 0.5 + 0.5, n_view[:, 1] * 0.5 + 0.5, n_view[:, 2]], axis=1)

        n_ecef = n_view @ geom.ecef_to_view  # row-vector form of view_to_ecef @ n
        lon, lat = lon_lat_of(n_ecef)
        rgb8 = self.texture.sample_lonlat(lon, lat)
        bright = self.shading.brightness(n_ecef, geom.sun_ecef)
        color = compose_color(rgb8, bright)
        return self.water.apply(color, rgb8)

    def render(self, unix_seconds: float) -> np.ndarray:
        """Return a fresh (height, width, 3) uint8 RGB frame; black outside the Earth disk."""
        geom = self.geometry(unix_seconds)

        frame = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        frame[self.grid.inside] = to_uint8(self.shade_disk(geom))

        if self.debug_overlay:
            frame = draw_debug_overlay(frame, self.grid, geom.ecef_to_view, geom.sun_ecef)
        return frame
