"""
Pytest configuration for the earthclock suite.

- Registers Hypothesis profiles for local dev and CI.
- Forces the non-interactive Agg backend so viewer tests never open a window.
- Provides small synthetic textures (no image files needed).
"""

from __future__ import annotations

import os

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest
from hypothesis import HealthCheck, settings

from earthclock.texture import EarthTexture, toy_land_ocean_rgb


settings.register_profile(
    "dev",
    settings(
        deadline=None,           # rendering examples can be slow on small runners
        max_examples=60,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)
settings.register_profile(
    "ci",
    settings(
        deadline=None,
        max_examples=120,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)

_profile = (
    "ci"
    if (os.getenv("CI") or os.getenv("GITHUB_ACTIONS"))
    else os.getenv("HYPOTHESIS_PROFILE", "dev")
)
settings.load_profile(_profile)


def pytest_report_header(config: pytest.Config) -> str:
    return f"Hypothesis profile: '{_profile}'"


# J2000.0 = 2000-01-01T12:00:00Z
J2000_UNIX = 946_728_000.0
# Apollo 11 LM touchdown, 1969-07-20T20:17:40Z
APOLLO11_LANDING_UNIX = -14_182_940.0


@pytest.fixture(scope="session")
def toy_texture() -> EarthTexture:
    return EarthTexture.from_array(toy_land_ocean_rgb(144, 72))


@pytest.fixture
def uniform_texture():
    """Factory: a texture filled with a single RGB colour."""
    def make(rgb=(100, 150, 200), width=16, height=8) -> EarthTexture:
        a = np.empty((height, width, 3), dtype=np.uint8)
        a[...] = np.asarray(rgb, dtype=np.uint8)
        return EarthTexture.from_array(a)
    return make
