from __future__ import annotations

import re

import matplotlib.pyplot as plt
import numpy as np
import pytest
from PIL import Image

from conftest import APOLLO11_LANDING_UNIX, J2000_UNIX
from earthclock.app import EarthClockViewer, coords_title
from earthclock.config import ENV_OVERRIDES
from earthclock.raster import SublunarRenderer
from earthclock.run import main
from earthclock.texture import toy_land_ocean_rgb
from earthclock.timekeeping import Clock, preset_unix


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_coords_title_format():
    title = coords_title(J2000_UNIX)
    assert re.fullmatch(
        r"EarthClock  SLon -?\d+\.\d°, SLat -?\d+\.\d° \| Sun Lon -?\d+\.\d°, Lat -?\d+\.\d°", title
    )


def test_viewer_tick_shows_rendered_frame(toy_texture, capsys):
    renderer = SublunarRenderer(32, 24, toy_texture)
    viewer = EarthClockViewer(renderer, Clock(APOLLO11_LANDING_UNIX), redraw_hz=4.0, show_coords=True)
    try:
        frame = viewer.tick()
        assert viewer.interval_ms == 250
        assert frame.tobytes() == renderer.render(APOLLO11_LANDING_UNIX).tobytes()
        assert np.array_equal(np.asarray(viewer.image.get_array()), frame)
        assert capsys.readouterr().out.strip() == coords_title(APOLLO11_LANDING_UNIX)
    finally:
        plt.close(viewer.fig)


def test_viewer_timer_start_stop(toy_texture):
    viewer = EarthClockViewer(SublunarRenderer(16, 16, toy_texture), Clock(J2000_UNIX))
    try:
        viewer.start()
        assert viewer.timer is not None
        viewer.stop()
        assert viewer.timer is None
    finally:
        plt.close(viewer.fig)


def test_viewer_timer_fires_and_redraws(toy_texture):
    clock_values = iter([J2000_UNIX, J2000_UNIX + 6 * 3600.0])

    class StepClock:
        def now_utc_seconds(self):
            return next(clock_values)

    renderer = SublunarRenderer(16, 16, toy_texture)
    viewer = EarthClockViewer(renderer, StepClock())
    try:
        viewer.start()
        first = np.array(viewer.image.get_array())
        viewer.timer._on_timer()  # what the GUI event loop calls every interval
        second = np.asarray(viewer.image.get_array())
        assert second.tobytes() == renderer.render(J2000_UNIX + 6 * 3600.0).tobytes()
        assert first.tobytes() != second.tobytes()
    finally:
        viewer.stop()
        plt.close(viewer.fig)


def test_fullscreen_needs_a_real_toggle(toy_texture, capsys):
    viewer = EarthClockViewer(SublunarRenderer(16, 16, toy_texture), Clock(J2000_UNIX), fullscreen=True)
    try:
        # Agg has only the base figure manager, whose toggle does nothing
        assert viewer.enter_fullscreen() is False
        assert "NOTE: fullscreen requested" in capsys.readouterr().out
    finally:
        plt.close(viewer.fig)


def test_once_renders_a_frame(clean_env, capsys):
    tex = clean_env / "earth.png"
    Image.fromarray(toy_land_ocean_rgb(72, 36)).save(tex)

    main(["--texture", str(tex), "--preset", "landing", "--size", "32", "--once"])

    out = capsys.readouterr().out
    assert "Config  : (defaults)" in out
    assert "Texture : 72x36" in out
    assert "Time    : fixed 1969-07-20T20:17:40.000Z" in out
    assert "Frame   : 32x32" in out
    assert coords_title(preset_unix("landing")) in out


def test_env_overrides_are_reported(clean_env, monkeypatch, capsys):
    tex = clean_env / "earth.png"
    Image.fromarray(toy_land_ocean_rgb(72, 36)).save(tex)
    monkeypatch.setenv("EC_TEXTURE", str(tex))
    monkeypatch.setenv("EC_UNIX_SECONDS", str(J2000_UNIX))

    main(["--size", "16", "--once"])

    out = capsys.readouterr().out
    assert "Env     : EC_TEXTURE, EC_UNIX_SECONDS" in out
    assert "Time    : fixed 2000-01-01T12:00:00.000Z" in out


def test_missing_texture_exits_with_hint(clean_env):
    with pytest.raises(SystemExit, match="make_test_texture"):
        main(["--texture", str(clean_env / "missing.jpg"), "--once"])
