from __future__ import annotations

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.backend_bases import FigureManagerBase

from .ephemeris import sublunar_lon_lat, subsolar_lon_lat
from .raster import SublunarRenderer
from .timekeeping import Clock

REDRAW_HZ = 1.0


def coords_title(unix_seconds: float) -> str:
    slon, slat = np.rad2deg(sublunar_lon_lat(unix_seconds))
    sslon, sslat = np.rad2deg(subsolar_lon_lat(unix_seconds))
    return (
        f"EarthClock  SLon {slon:.1f}°, SLat {slat:.1f}° | "
        f"Sun Lon {sslon:.1f}°, Lat {sslat:.1f}°"
    )


class EarthClockViewer:
    """
    matplotlib window showing renderer frames, redrawn on a canvas timer.

    The timer fires on the GUI thread, so a slow render delays the next frame
    instead of queueing one.
    """

    def __init__(
        self,
        renderer: SublunarRenderer,
        clock: Clock,
        redraw_hz: float = REDRAW_HZ,
        show_coords: bool = False,
        fullscreen: bool = False,
    ):
        self.renderer = renderer
        self.clock = clock
        self.interval_ms = max(int(1000.0 / float(redraw_hz)), 1)
        self.show_coords = bool(show_coords)
        self.fullscreen = bool(fullscreen)
        self.timer = None

        dpi = 100.0
        self.fig = plt.figure(
            figsize=(renderer.width / dpi, renderer.height / dpi),
            dpi=dpi,
            facecolor="black",
        )
        self.ax = self.fig.add_axes((0.0, 0.0, 1.0, 1.0))
        self.ax.set_axis_off()
        self.image = self.ax.imshow(
            np.zeros((renderer.height, renderer.width, 3), dtype=np.uint8),
            interpolation="nearest",
        )
        self._set_title("EarthClock Preview")

    def _set_title(self, title: str) -> None:
        manager = self.fig.canvas.manager
        if manager is not None:
            manager.set_window_title(title)

    def tick(self) -> np.ndarray:
        now = self.clock.now_utc_seconds()
        frame = self.renderer.render(now)
        self.image.set_data(frame)
        if self.show_coords:
            title = coords_title(now)
            self._set_title(title)
            print(title)
        self.fig.canvas.draw_idle()
        return frame

    def _on_timer(self) -> None:
        # matplotlib inspects the callback return value; keep it None
        self.tick()

    def start(self) -> None:
        self.tick()
        self.timer = self.fig.canvas.new_timer(interval=self.interval_ms)
        self.timer.add_callback(self._on_timer)
        self.timer.start()

    def stop(self) -> None:
        if self.timer is not None:
            self.timer.stop()
            self.timer = None

    def enter_fullscreen(self) -> bool:
        """Ask the window manager for fullscreen. False when the backend has no real toggle."""
        manager = self.fig.canvas.manager
        if manager is None or type(manager).full_screen_toggle is FigureManagerBase.full_screen_toggle:
            print("NOTE: fullscreen requested but this matplotlib backend cannot toggle it; staying windowed.")
            return False
        manager.full_screen_toggle()
        return True

    def show(self) -> None:
        if self.fullscreen:
            self.enter_fullscreen()
        self.start()
        plt.show()
        self.stop()
