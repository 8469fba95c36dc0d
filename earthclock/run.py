from __future__ import annotations

import argparse
import time
from pathlib import Path

from .camera import FUDGE_LON_DEG, ROLL_DEG
from .config import Config, apply_env_overrides, load_config
from .ocean import WaterClassifier
from .raster import SublunarRenderer
from .shading import ShadingParameters
from .texture import EarthTexture, load_texture
from .timekeeping import Clock, resolve_fixed_time, unix_to_utc

DEFAULT_CONFIG = "earthclock.toml"


def build_shading(cfg: Config) -> ShadingParameters:
    s = cfg.shading
    return ShadingParameters.create(
        night_floor=float(s.get("night_floor", 0.25)),
        gamma=float(s.get("gamma", 1.0)),
        exposure=float(s.get("exposure", 1.6)),
        disabled=bool(s.get("disabled", False)),
    )


def build_water(cfg: Config) -> WaterClassifier:
    w = cfg.water
    return WaterClassifier(
        boost=float(w.get("boost", 1.15)),
        hue_lo_deg=float(w.get("hue_lo_deg", 180.0)),
        hue_hi_deg=float(w.get("hue_hi_deg", 250.0)),
        sat_min=float(w.get("sat_min", 0.2)),
    )


def build_texture(cfg: Config) -> EarthTexture:
    path = Path(str(cfg.paths.get("texture", "earth.jpg"))).expanduser().resolve()
    return load_texture(path, lon_offset_deg=float(cfg.texture.get("lon_offset_deg", 0.0)))


def build_renderer(cfg: Config, texture: EarthTexture) -> SublunarRenderer:
    size = int(cfg.window.get("size", 800))
    return SublunarRenderer(
        size,
        size,
        texture,
        build_shading(cfg),
        build_water(cfg),
        fudge_lon_deg=float(cfg.calibration.get("fudge_lon_deg", FUDGE_LON_DEG)),
        roll_deg=float(cfg.calibration.get("roll_deg", ROLL_DEG)),
        test_pattern=bool(cfg.debug.get("test_pattern", False)),
        debug_overlay=bool(cfg.debug.get("overlay", False)),
    )


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="earthclock: the Earth as seen from the Apollo 11 site")
    ap.add_argument("--config", default=None, help=f"Path to scene TOML (default: {DEFAULT_CONFIG} if present)")
    ap.add_argument("--texture", default=None, help="Override paths.texture (equirectangular Earth image)")
    ap.add_argument("--utc", default=None, help="Render a fixed instant (ISO-8601, e.g. 1969-07-20T20:17:40Z)")
    ap.add_argument("--preset", default=None, help="Render a named instant (apollo11_landing, apollo11_first_step)")
    ap.add_argument("--size", type=int, default=None, help="Override window.size (pixels)")
    ap.add_argument("--test-pattern", action="store_true", help="Colour pixels from their view-space normal")
    ap.add_argument("--debug-overlay", action="store_true", help="Draw Earth axis, Sun direction and terminator")
    ap.add_argument("--show-coords", action="store_true", help="Show sub-lunar/sub-solar coordinates in the title")
    ap.add_argument("--fullscreen", action="store_true", help="Start fullscreen")
    ap.add_argument("--once", action="store_true", help="Render one frame, print a summary and exit (no window)")
    args = ap.parse_args(argv)

    cfg_path = args.config
    if cfg_path is None and Path(DEFAULT_CONFIG).exists():
        cfg_path = DEFAULT_CONFIG
    cfg = load_config(cfg_path)
    applied = apply_env_overrides(cfg)

    # --- CLI overrides ---
    if args.texture:
        cfg.raw.setdefault("paths", {})["texture"] = str(args.texture)
    if args.utc:
        cfg.raw["time"] = {"utc": str(args.utc)}
    elif args.preset:
        cfg.raw["time"] = {"preset": str(args.preset)}
    if args.size is not None:
        cfg.raw.setdefault("window", {})["size"] = int(args.size)
    if args.test_pattern:
        cfg.raw.setdefault("debug", {})["test_pattern"] = True
    if args.debug_overlay:
        cfg.raw.setdefault("debug", {})["overlay"] = True
    if args.show_coords:
        cfg.raw.setdefault("debug", {})["show_coords"] = True
    if args.fullscreen:
        cfg.raw.setdefault("window", {})["fullscreen"] = True

    print(f"Config  : {cfg_path or '(defaults)'}")
    if applied:
        print(f"Env     : {', '.join(applied)}")

    try:
        texture = build_texture(cfg)
    except FileNotFoundError as e:
        raise SystemExit(f"{e}\nFix: pass --texture, set EC_TEXTURE, or run: python scripts/make_test_texture.py")
    print(f"Texture : {texture.width}x{texture.height}  lon offset {texture.lon_offset_deg:.2f} deg")

    clock = Clock(resolve_fixed_time(cfg.time))
    if clock.fixed_seconds is not None:
        print(f"Time    : fixed {unix_to_utc(clock.fixed_seconds)}")
    else:
        print("Time    : live UTC")

    renderer = build_renderer(cfg, texture)

    if args.once:
        from .app import coords_title

        now = clock.now_utc_seconds()
        t0 = time.perf_counter()
        frame = renderer.render(now)
        dt = time.perf_counter() - t0
        lit = int(renderer.grid.inside.sum())
        print(f"Frame   : {frame.shape[1]}x{frame.shape[0]}  disk px={lit}  {dt * 1000.0:.1f} ms")
        print(coords_title(now))
        return

    from .app import REDRAW_HZ, EarthClockViewer

    viewer = EarthClockViewer(
        renderer,
        clock,
        redraw_hz=float(cfg.window.get("redraw_hz", REDRAW_HZ)),
        show_coords=bool(cfg.debug.get("show_coords", False)),
        fullscreen=bool(cfg.window.get("fullscreen", False)),
    )
    viewer.show()


if __name__ == "__main__":
    main()
