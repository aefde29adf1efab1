"""
Axis-aligned bounding boxes in canvas world space.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .outline import Point


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned box. min_* <= max_* always holds."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_center(cls, center: Point, half_width: float, half_height: float) -> Bounds:
        cx, cy = center
        hw, hh = abs(half_width), abs(half_height)
        return cls(cx - hw, cy - hh, cx + hw, cy + hh)

    @classmethod
    def from_corners(cls, a: Point, b: Point) -> Bounds:
        """Box spanned by two opposite corners, in any drag direction."""
        return cls(
            min(a[0], b[0]),
            min(a[1], b[1]),
            max(a[0], b[0]),
            max(a[1], b[1]),
        )

    @classmethod
    def union(cls, boxes: Iterable[Bounds]) -> Bounds | None:
        boxes = list(boxes)
        if not boxes:
            return None
        return cls(
            min(b.min_x for b in boxes),
            min(b.min_y for b in boxes),
            max(b.max_x for b in boxes),
            max(b.max_y for b in boxes),
        )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    @property
    def is_empty(self) -> bool:
        """True for a zero-area box (a click rather than a drag)."""
        return self.width <= 0.0 or self.height <= 0.0

    def intersects(self, other: Bounds) -> bool:
        """Strict overlap test: touching edges do not count."""
        return (
            self.min_x < other.max_x
            and self.max_x > other.min_x
            and self.min_y < other.max_y
            and self.max_y > other.min_y
        )

    def expand(self, margin: float) -> Bounds:
        """Return a new box grown by margin on all sides."""
        return Bounds(
            self.min_x - margin,
            self.min_y - margin,
            self.max_x + margin,
            self.max_y + margin,
        )
