from __future__ import annotations

import numpy as np
from PIL import Image, ImageDraw

from .camera import DiskGrid

AXIS_RGB = (0.2, 0.6, 1.0)
SUN_RGB = (1.0, 0.8, 0.1)
TERMINATOR_RGB = (0.5, 0.5, 0.5)


def _rgb255(rgb: tuple[float, float, float]) -> tuple[int, int, int]:
    return tuple(int(round(255.0 * c)) for c in rgb)


def _to_screen(grid: DiskGrid, vx: float, vy: float) -> tuple[float, float]:
    return grid.cx + vx * grid.radius, grid.cy - vy * grid.radius


def arrow_points(grid: DiskGrid, vec_view: np.ndarray, len_scale: float = 0.9):
    """
    Shaft end point and head triangle for a view-space vector drawn from the
    disk centre. None if the vector faces away (z <= 0) or has no sky-plane
    component.
    """
    vx, vy, vz = (float(c) for c in vec_view)
    if vz <= 0.0:
        return None
    mag = np.hypot(vx, vy)
    if mag < 1e-6:
        return None
    ux, uy = vx / mag, vy / mag

    x1 = grid.cx + ux * grid.radius * len_scale
    y1 = grid.cy - uy * grid.radius * len_scale
    ah = grid.radius * 0.04
    left = (x1 - uy * ah * 0.5 - ux * ah, y1 + ux * ah * 0.5 + uy * ah)
    right = (x1 + uy * ah * 0.5 - ux * ah, y1 - ux * ah * 0.5 + uy * ah)
    return (x1, y1), [(x1, y1), left, right]


def terminator_paths(grid: DiskGrid, ecef_to_view: np.ndarray, sun_ecef: np.ndarray) -> list[list[tuple[float, float]]]:
    """
    Screen-space polylines of the day/night great circle (plane normal = Sun).

    The circle is sampled every degree; consecutive visible samples (view z > 0)
    form one polyline, and a hidden sample ends it.
    """
    s = np.asarray(sun_ecef, dtype=float)
    tmp = np.array([0.0, 1.0, 0.0]) if abs(s[0]) > 0.9 else np.array([1.0, 0.0, 0.0])
    b1 = np.cross(s, tmp)
    b1 /= np.linalg.norm(b1)
    b2 = np.cross(s, b1)
    b2 /= np.linalg.norm(b2)

    a = np.deg2rad(np.arange(0, 361, dtype=float))
    pts = np.cos(a)[:, None] * b1[None, :] + np.sin(a)[:, None] * b2[None, :]
    v = pts @ ecef_to_view.T

    paths: list[list[tuple[float, float]]] = []
    current: list[tuple[float, float]] = []
    for vx, vy, vz in v:
        if vz > 0.0:
            current.append(_to_screen(grid, vx, vy))
        else:
            if len(current) >= 2:
                paths.append(current)
            current = []
    if len(current) >= 2:
        paths.append(current)
    return paths


def draw_debug_overlay(
    frame: np.ndarray,
    grid: DiskGrid,
    ecef_to_view: np.ndarray,
    sun_ecef: np.ndarray,
) -> np.ndarray:
    """Return a copy of frame (H,W,3 uint8) with axis, Sun and terminator drawn."""
    img = Image.fromarray(np.ascontiguousarray(frame, dtype=np.uint8))
    draw = ImageDraw.Draw(img)
    width = max(int(round(grid.radius * 0.002)), 1)

    axis_v = ecef_to_view @ np.array([0.0, 0.0, 1.0])
    sun_v = ecef_to_view @ np.asarray(sun_ecef, dtype=float)
    for vec, rgb in ((axis_v, AXIS_RGB), (sun_v, SUN_RGB)):
        arrow = arrow_points(grid, vec)
        if arrow is None:
            continue
        tip, head = arrow
        color = _rgb255(rgb)
        draw.line([(grid.cx, grid.cy), tip], fill=color, width=width)
        draw.polygon(head, fill=color)

    color = _rgb255(TERMINATOR_RGB)
    for path in terminator_paths(grid, ecef_to_view, sun_ecef):
        draw.line(path, fill=color, width=width)

    return np.array(img, dtype=np.uint8)
