from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class ShadingParameters:
    """
    Lambert day side blended with a constant night floor:

      b = (night_floor + (1 - night_floor) * max(n.s, 0)**gamma) * exposure

    b is NOT clamped: exposure may push it above 1. Colour composition clamps.
    With disabled=True every point gets b = 1.
    """
    night_floor: float = 0.25
    gamma: float = 1.0
    exposure: float = 1.6
    disabled: bool = False

    @staticmethod
    def create(
        night_floor: float = 0.25,
        gamma: float = 1.0,
        exposure: float = 1.6,
        disabled: bool = False,
    ) -> "ShadingParameters":
        return ShadingParameters(
            night_floor=float(np.clip(float(night_floor), 0.0, 1.0)),
            gamma=float(gamma),
            exposure=float(exposure),
            disabled=bool(disabled),
        )

    def brightness(self, normals: np.ndarray, sun_dir: np.ndarray):
        """
        normals: (3,) or (N,3) unit vectors; sun_dir: (3,) unit vector (same frame).
        Returns a float for a single normal, else an (N,) array.
        """
        n = np.asarray(normals, dtype=np.float64)
        if self.disabled:
            return 1.0 if n.ndim == 1 else np.ones(n.shape[0], dtype=np.float64)

        s = np.asarray(sun_dir, dtype=np.float64)
        lit = np.maximum(n @ s, 0.0) ** self.gamma
        b = (self.night_floor + (1.0 - self.night_floor) * lit) * self.exposure
        return float(b) if n.ndim == 1 else b
