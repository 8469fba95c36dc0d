from __future__ import annotations

from dataclasses import dataclass

import numpy as np


def rgb_to_hsv(r, g, b) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Vectorised RGB (0..1) -> HSV.

    Returns hue in degrees [0,360), saturation [0,1], value [0,1].
    When several channels share the maximum, r wins over g, g over b.
    """
    r = np.asarray(r, dtype=np.float64)
    g = np.asarray(g, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)

    mx = np.maximum(np.maximum(r, g), b)
    mn = np.minimum(np.minimum(r, g), b)
    d = mx - mn

    s = np.where(mx > 0.0, d / np.where(mx > 0.0, mx, 1.0), 0.0)

    dd = np.where(d > 0.0, d, 1.0)
    h_r = (g - b) / dd + np.where(g < b, 6.0, 0.0)
    h_g = (b - r) / dd + 2.0
    h_b = (r - g) / dd + 4.0
    h = np.where(mx == r, h_r, np.where(mx == g, h_g, h_b))
    h = np.where(d > 0.0, h * 60.0, 0.0)
    return h, s, mx


@dataclass(frozen=True)
class WaterClassifier:
    """
    Heuristic ocean tint: texture colours with a blue/cyan hue and some
    saturation get their shaded colour multiplied by `boost`.

    Ice caps, shallow water and tinted clouds are misclassified now and then;
    this is cosmetic.
    """
    boost: float = 1.15
    hue_lo_deg: float = 180.0
    hue_hi_deg: float = 250.0
    sat_min: float = 0.2

    def is_ocean(self, rgb8: np.ndarray) -> np.ndarray:
        """rgb8: (..., 3) 8-bit texture colour(s). Returns bool (...)."""
        c = np.asarray(rgb8, dtype=np.float64) / 255.0
        h, s, _v = rgb_to_hsv(c[..., 0], c[..., 1], c[..., 2])
        return (h >= self.hue_lo_deg) & (h <= self.hue_hi_deg) & (s >= self.sat_min)

    def apply(self, color01: np.ndarray, rgb8: np.ndarray) -> np.ndarray:
        """Boost shaded colour(s) (..., 3) in [0,1] where the unshaded texture colour is ocean."""
        color = np.asarray(color01, dtype=np.float64)
        mask = self.is_ocean(rgb8)
        boosted = np.clip(color * self.boost, 0.0, 1.0)
        return np.where(mask[..., None], boosted, color)
