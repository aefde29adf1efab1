"""
View transform between screen pixels and world units.

    screen = world * scale + pan
"""

from __future__ import annotations

from dataclasses import dataclass

from .geometry import Point
from .settings import ZoomSettings


@dataclass
class ViewTransform:
    """
    Pan and zoom state.

    Attributes:
        pan: Screen position of the world origin
        scale: Screen pixels per world unit
        limits: Zoom clamps and steps
    """

    pan: Point = (0.0, 0.0)
    scale: float = 1.0
    limits: ZoomSettings | None = None

    def __post_init__(self):
        if self.limits is None:
            self.limits = ZoomSettings()
        self.pan = (float(self.pan[0]), float(self.pan[1]))
        self.scale = self.clamp_scale(self.scale)

    def clamp_scale(self, scale: float) -> float:
        return min(self.limits.max_scale, max(self.limits.min_scale, float(scale)))

    def screen_to_world(self, point: Point) -> Point:
        return ((point[0] - self.pan[0]) / self.scale, (point[1] - self.pan[1]) / self.scale)

    def world_to_screen(self, point: Point) -> Point:
        return (point[0] * self.scale + self.pan[0], point[1] * self.scale + self.pan[1])

    def screen_delta_to_world(self, delta: Point) -> Point:
        """Pointer movement in pixels to a world-space delta."""
        return (delta[0] / self.scale, delta[1] / self.scale)

    def pan_by(self, dx: float, dy: float) -> None:
        """Pan by a raw screen delta."""
        self.pan = (self.pan[0] + dx, self.pan[1] + dy)

    def zoom_about(self, screen_point: Point, new_scale: float) -> float:
        """
        Zoom so the world point under ``screen_point`` stays under it.

        Returns:
            The clamped scale actually applied
        """
        new_scale = self.clamp_scale(new_scale)
        cx, cy = screen_point
        px, py = self.pan
        ratio = new_scale / self.scale
        self.pan = (cx - (cx - px) * ratio, cy - (cy - py) * ratio)
        self.scale = new_scale
        return new_scale

    def zoom_step(self, screen_point: Point, steps: float, step: float | None = None) -> float:
        """Zoom in (positive steps) or out by a number of zoom steps."""
        step = self.limits.button_step if step is None else step
        return self.zoom_about(screen_point, self.scale + steps * step)

    def wheel(self, screen_point: Point, notches: float) -> float:
        """Mouse-wheel zoom; positive notches zoom in."""
        return self.zoom_step(screen_point, notches, self.limits.wheel_step)
