from __future__ import annotations

from dataclasses import dataclass, replace

from mandelkernel.fractals.base import Viewport
from mandelkernel.utils.coords import pixel_to_world, world_to_pixel

U64_MAX = (1 << 64) - 1


@dataclass(frozen=True)
class CameraState:
    center_x: float
    center_y: float
    initial_zoom: int
    zoom: int
    width: int
    height: int

    def magnification(self) -> float:
        return self.zoom / self.initial_zoom


def _clamp(v: int, lo: int, hi: int) -> int:
    return lo if v < lo else (hi if v > hi else v)


def _step_zoom(current: int, delta: int) -> int:
    # saturates at 0 and U64_MAX
    if delta > 0:
        if U64_MAX - current <= delta:
            return U64_MAX
        return current + delta
    if -delta > current:
        return 0
    return current + delta


class Camera:
    """
    Pan/zoom state of an interactive view, producing kernel viewports.

    Zoom is pixels per world unit and is always kept in [min_zoom, max_zoom].
    """

    def __init__(self, initial: CameraState, min_zoom: int = 1, max_zoom: int = U64_MAX):
        if min_zoom < 1:
            raise ValueError(f"min_zoom must be >= 1, got {min_zoom}")
        if max_zoom <= min_zoom:
            raise ValueError(f"max_zoom must be > min_zoom, got {max_zoom} <= {min_zoom}")
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self._state = replace(initial, zoom=_clamp(initial.zoom, min_zoom, max_zoom))

    def snapshot(self) -> CameraState:
        return self._state

    def viewport(self) -> Viewport:
        s = self._state
        return Viewport(s.center_x, s.center_y, s.zoom, s.width, s.height)

    def set_viewport(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            return
        self._state = replace(self._state, width=width, height=height)

    def pan_by_pixels(self, dx: float, dy: float) -> None:
        """
        Grab-and-drag pan: dragging right moves the picture right, so the
        center moves left in world space; dragging down moves it up, since
        world Y grows upward.
        """
        s = self._state
        if s.width <= 0 or s.height <= 0:
            return
        inv_zoom = 1.0 / s.zoom
        self._state = replace(s,
                              center_x=s.center_x - dx * inv_zoom,
                              center_y=s.center_y + dy * inv_zoom)

    def zoom_at_pixel(self, px: float, py: float, delta: int) -> None:
        """
        Change zoom by ``delta`` while the world point under (px, py) stays
        under that pixel.
        """
        s = self._state
        if s.width <= 0 or s.height <= 0:
            return
        before = self._screen_to_world(px, py, s)
        s2 = replace(s, zoom=_clamp(_step_zoom(s.zoom, delta), self.min_zoom, self.max_zoom))
        after = self._screen_to_world(px, py, s2)
        self._state = replace(s2,
                              center_x=s2.center_x + (before[0] - after[0]),
                              center_y=s2.center_y + (before[1] - after[1]))

    def screen_to_world(self, px: float, py: float) -> tuple[float, float]:
        return self._screen_to_world(px, py, self._state)

    def world_to_screen(self, wx: float, wy: float) -> tuple[float, float]:
        s = self._state
        return world_to_pixel(wx, wy, s.center_x, s.center_y, s.zoom, s.width, s.height)

    @staticmethod
    def _screen_to_world(px, py, s: CameraState) -> tuple[float, float]:
        return pixel_to_world(px, py, s.center_x, s.center_y, s.zoom, s.width, s.height)
