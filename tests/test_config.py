from __future__ import annotations

from pathlib import Path

import pytest

from earthclock.camera import FUDGE_LON_DEG, ROLL_DEG
from earthclock.config import ENV_OVERRIDES, Config, apply_env_overrides, load_config
from earthclock.run import build_renderer, build_shading, build_water

SAMPLE = Path(__file__).resolve().parents[1] / "earthclock.toml"


def write_toml(tmp_path, text: str) -> Path:
    p = tmp_path / "scene.toml"
    p.write_text(text, encoding="utf-8")
    return p


def test_none_gives_empty_config():
    cfg = load_config(None)
    assert cfg.raw == {}
    assert cfg.shading == {}


def test_missing_config_raises(tmp_path):
    with pytest.raises(FileNotFoundError, match="Missing config"):
        load_config(tmp_path / "absent.toml")


def test_sample_scene_file_loads():
    cfg = load_config(SAMPLE)
    assert cfg.window["size"] == 800
    assert cfg.shading["exposure"] == 1.6
    assert cfg.calibration == {"fudge_lon_deg": FUDGE_LON_DEG, "roll_deg": ROLL_DEG}
    assert cfg.time == {}


def test_sections_are_copies(tmp_path):
    cfg = load_config(write_toml(tmp_path, "[shading]\ngamma = 2.0\n"))
    cfg.shading["gamma"] = 9.0
    assert cfg.shading["gamma"] == 2.0


def test_env_overrides_typed_values():
    cfg = Config({"shading": {"exposure": 1.0}})
    applied = apply_env_overrides(
        cfg,
        {
            "EC_EXPOSURE": "2.5",
            "EC_TEXTURE": "/data/blue_marble.jpg",
            "EC_DISABLE_SHADING": "1",
            "EC_TEST_PATTERN": "true",
            "EC_NIGHT_FLOOR": "",
            "UNRELATED": "x",
        },
    )
    assert set(applied) == {"EC_EXPOSURE", "EC_TEXTURE", "EC_DISABLE_SHADING", "EC_TEST_PATTERN"}
    assert cfg.shading == {"exposure": 2.5, "disabled": True}
    assert cfg.paths["texture"] == "/data/blue_marble.jpg"
    # only "1" switches a flag on
    assert cfg.debug["test_pattern"] is False


def test_env_override_bad_number():
    with pytest.raises(ValueError, match="EC_GAMMA"):
        apply_env_overrides(Config({}), {"EC_GAMMA": "steep"})


def test_env_override_table_targets_known_sections():
    sections = {"time", "paths", "window", "shading", "texture", "water", "debug", "calibration"}
    assert all(name.startswith("EC_") for name in ENV_OVERRIDES)
    assert {section for section, _key, _typ in ENV_OVERRIDES.values()} <= sections


def test_builders_read_sections(tmp_path, uniform_texture):
    cfg = load_config(write_toml(tmp_path, """
[window]
size = 24

[shading]
night_floor = 1.5
exposure = 1.0

[water]
boost = 1.3

[debug]
test_pattern = true

[calibration]
roll_deg = 0.0
"""))
    shading = build_shading(cfg)
    assert shading.night_floor == 1.0
    assert shading.gamma == 1.0
    assert build_water(cfg).boost == 1.3

    r = build_renderer(cfg, uniform_texture())
    assert (r.width, r.height) == (24, 24)
    assert r.test_pattern and not r.debug_overlay
    assert r.roll_deg == 0.0
    assert r.fudge_lon_deg == FUDGE_LON_DEG
