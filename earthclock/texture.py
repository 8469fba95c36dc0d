from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError


@dataclass(frozen=True)
class EarthTexture:
    """
    Equirectangular Earth texture held as a flat byte buffer.

    Layout:
      - row 0 is the north pole (+90), last row the south pole (-90)
      - column 0 is longitude -180 (before lon_offset_rad is applied)
      - byte of (row, col, channel) = rowstride*row + channels*col + channel

    Sampling is nearest-neighbour; longitude wraps, latitude clamps.
    """
    pixels: np.ndarray      # (rowstride*height,) uint8, read-only
    width: int
    height: int
    rowstride: int
    channels: int
    lon_offset_rad: float = 0.0

    @staticmethod
    def from_buffer(
        pixels,
        width: int,
        height: int,
        rowstride: int | None = None,
        channels: int = 3,
        lon_offset_deg: float = 0.0,
    ) -> "EarthTexture":
        width, height, channels = int(width), int(height), int(channels)
        if width <= 0 or height <= 0:
            raise ValueError(f"Texture must have positive dimensions; got {width}x{height}")
        if channels < 3:
            raise ValueError(f"Texture needs at least 3 channels; got {channels}")
        stride = width * channels if rowstride is None else int(rowstride)
        if stride < width * channels:
            raise ValueError(f"rowstride {stride} is smaller than width*channels = {width * channels}")

        if isinstance(pixels, np.ndarray):
            buf = np.ascontiguousarray(pixels, dtype=np.uint8).ravel()
        else:
            buf = np.frombuffer(bytes(pixels), dtype=np.uint8)
        need = (height - 1) * stride + width * channels
        if buf.size < need:
            raise ValueError(f"Texture buffer holds {buf.size} bytes; {width}x{height} needs at least {need}")

        buf = buf.copy()
        buf.setflags(write=False)
        return EarthTexture(
            pixels=buf,
            width=width,
            height=height,
            rowstride=stride,
            channels=channels,
            lon_offset_rad=float(np.deg2rad(lon_offset_deg)),
        )

    @staticmethod
    def from_array(rgb: np.ndarray, lon_offset_deg: float = 0.0) -> "EarthTexture":
        """Build from an (H, W, C) uint8 array (C >= 3)."""
        a = np.asarray(rgb)
        if a.ndim != 3:
            raise ValueError(f"Texture array must be (H, W, C); got shape {a.shape}")
        h, w, c = a.shape
        return EarthTexture.from_buffer(a.astype(np.uint8, copy=False), w, h, w * c, c, lon_offset_deg)

    @property
    def lon_offset_deg(self) -> float:
        return float(np.rad2deg(self.lon_offset_rad))

    def pixel(self, col, row) -> np.ndarray:
        """RGB at integer (col, row); arrays broadcast. Returns (..., 3) uint8."""
        base = np.asarray(row, dtype=np.int64) * self.rowstride + np.asarray(col, dtype=np.int64) * self.channels
        return np.stack([self.pixels[base], self.pixels[base + 1], self.pixels[base + 2]], axis=-1)

    def lonlat_to_pixel(self, lon_rad, lat_rad) -> tuple[np.ndarray, np.ndarray]:
        lon = np.asarray(lon_rad, dtype=np.float64) + self.lon_offset_rad
        lat = np.asarray(lat_rad, dtype=np.float64)

        u = np.mod((lon + np.pi) / (2.0 * np.pi), 1.0)
        v = np.clip((np.pi / 2.0 - lat) / np.pi, 0.0, 1.0)

        ix = np.mod(np.floor(u * self.width).astype(np.int64), self.width)
        iy = np.clip(np.floor(v * self.height).astype(np.int64), 0, self.height - 1)
        return ix, iy

    def sample_lonlat(self, lon_rad, lat_rad) -> np.ndarray:
        """Nearest-neighbour RGB (uint8, shape (..., 3)) at lon/lat in radians."""
        ix, iy = self.lonlat_to_pixel(lon_rad, lat_rad)
        return self.pixel(ix, iy)

    def sample_direction(self, direction: np.ndarray) -> np.ndarray:
        """RGB for Earth-fixed unit vector(s), shape (3,) or (N,3)."""
        d = np.asarray(direction, dtype=np.float64)
        lon = np.arctan2(d[..., 1], d[..., 0])
        lat = np.arcsin(np.clip(d[..., 2], -1.0, 1.0))
        return self.sample_lonlat(lon, lat)

    def estimate_seam_offset(self) -> tuple[int, float]:
        """
        Find the column whose left neighbour matches it best (the map seam).

        Every max(height // 512, 1)-th row is compared. Returns
        (seam_column, suggested_offset_deg) where the offset moves the seam to column 0.
        """
        step = max(self.height // 512, 1)
        cols = np.arange(self.width)
        cols_prev = np.mod(cols - 1, self.width)

        score = np.zeros(self.width, dtype=np.int64)
        for y in range(0, self.height, step):
            cur = self.pixel(cols, y).astype(np.int64)
            prev = self.pixel(cols_prev, y).astype(np.int64)
            score += np.abs(cur - prev).sum(axis=1)

        best = int(np.argmin(score))  # first minimum wins
        return best, -best * 360.0 / float(self.width)


def load_texture(path: str | Path, lon_offset_deg: float = 0.0) -> EarthTexture:
    """Decode an image file (any format Pillow reads) into an EarthTexture."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Texture not found: {p}")
    try:
        with Image.open(p) as img:
            rgb = np.asarray(img.convert("RGB"), dtype=np.uint8)
    except Image.DecompressionBombError as e:
        raise ValueError(
            f"Texture {p} exceeds Pillow's pixel limit ({e}); "
            "downsample it, or raise PIL.Image.MAX_IMAGE_PIXELS for an image you trust"
        ) from e
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Cannot decode texture {p}: {e}") from e
    if rgb.ndim != 3 or rgb.shape[0] == 0 or rgb.shape[1] == 0:
        raise ValueError(f"Texture {p} has no pixels (shape {rgb.shape})")
    return EarthTexture.from_array(rgb, lon_offset_deg=lon_offset_deg)


def toy_land_ocean_rgb(
    nlon: int = 720,
    nlat: int = 360,
    ocean: tuple[int, int, int] = (18, 52, 120),
    land: tuple[int, int, int] = (96, 120, 60),
    ice: tuple[int, int, int] = (235, 235, 240),
) -> np.ndarray:
    """
    Deterministic "toy Earth" texture (no external data), shape (nlat, nlon, 3).

    NOT geographically accurate: broad continent-like blobs on a blue ocean
    with white polar caps, enough to see rotation and shading.
    """
    lon = np.deg2rad(np.linspace(-180.0, 180.0, nlon, endpoint=False) + 180.0 / nlon)
    lat = np.deg2rad(np.linspace(90.0, -90.0, nlat, endpoint=False) - 90.0 / nlat)
    LON, LAT = np.meshgrid(lon, lat)

    f = (
        0.55*np.sin(1.0*LON)*np.cos(1.3*LAT) +
        0.35*np.cos(2.0*LON + 0.7)*np.cos(0.8*LAT) +
        0.20*np.sin(3.0*LON - 1.1)*np.sin(1.1*LAT)
    )
    out = np.empty((nlat, nlon, 3), dtype=np.uint8)
    out[...] = np.asarray(ocean, dtype=np.uint8)
    out[f > 0.15] = np.asarray(land, dtype=np.uint8)
    out[np.abs(LAT) > np.deg2rad(72.0)] = np.asarray(ice, dtype=np.uint8)
    return out
