"""
Vector outlines for placed entities.

An Outline is an immutable sequence of contours. Each contour starts at a
point and continues through straight lines, quadratic curves and circular
arcs, mirroring the SVG path commands the canvas renders (M, L, Q, A, Z).

All coordinates are canvas world units with +Y pointing DOWN, the same
convention as the rendered SVG.

Arc sweep flags are stored with the segment and are never recomputed when a
point set is transformed. Rotations preserve orientation, so a rotated
outline keeps the flags of the original.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Callable, Iterable, TypeAlias

import numpy as np

Point: TypeAlias = tuple[float, float]

# Smallest extent a generator will draw with
MIN_EXTENT = 1e-3


# =============================================================================
# NUMERIC HELPERS
# =============================================================================


def clamp_extent(value: float, minimum: float = MIN_EXTENT) -> float:
    """Clamp a size to a finite, strictly positive value."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        return minimum
    if not math.isfinite(value) or value < minimum:
        return minimum
    return value


def format_number(value: float) -> str:
    """Format a coordinate for SVG path data (compact, no trailing zeros)."""
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def _fmt_point(point: Point) -> str:
    return f"{format_number(point[0])} {format_number(point[1])}"


# =============================================================================
# ROTATION UTILITIES
# =============================================================================


def rotation_matrix(angle_deg: float) -> np.ndarray:
    """Create a 2x2 rotation matrix (positive angle turns +X towards +Y)."""
    angle = math.radians(angle_deg)
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s], [s, c]])


def quadrant_rotation(quadrants: int) -> np.ndarray:
    """
    Exact rotation matrix for a whole number of 90° turns.

    Built from integer matrices so that quarter turns carry no
    floating-point residue (cos(90°) is not exactly zero).
    """
    quarter = np.array([[0, -1], [1, 0]])
    return np.linalg.matrix_power(quarter, int(quadrants) % 4).astype(float)


def transform_points(points: np.ndarray, matrix: np.ndarray, origin: Point = (0.0, 0.0)) -> np.ndarray:
    """
    Apply a 2x2 linear transform to local points and translate to origin.

    Args:
        points: (N, 2) array of points relative to origin
        matrix: 2x2 transform
        origin: World position of the local origin

    Returns:
        (N, 2) array of world points
    """
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    return pts @ np.asarray(matrix, dtype=float).T + np.asarray(origin, dtype=float)


# =============================================================================
# PATH SEGMENTS
# =============================================================================


@dataclass(frozen=True)
class LineTo:
    """Straight segment to end."""

    end: Point

    def points(self) -> tuple[Point, ...]:
        return (self.end,)

    def map_points(self, fn: Callable[[Point], Point]) -> LineTo:
        return LineTo(fn(self.end))

    def to_svg(self) -> str:
        return f"L {_fmt_point(self.end)}"


@dataclass(frozen=True)
class QuadTo:
    """Quadratic Bezier segment through a control point to end."""

    control: Point
    end: Point

    def points(self) -> tuple[Point, ...]:
        return (self.control, self.end)

    def map_points(self, fn: Callable[[Point], Point]) -> QuadTo:
        return QuadTo(fn(self.control), fn(self.end))

    def to_svg(self) -> str:
        return f"Q {_fmt_point(self.control)} {_fmt_point(self.end)}"


@dataclass(frozen=True)
class ArcTo:
    """
    Circular arc segment to end (SVG elliptical arc with rx == ry).

    Attributes:
        radius: Arc radius
        end: End point
        large_arc: SVG large-arc flag
        sweep: SVG sweep flag (True = positive-angle direction, which is
               clockwise on screen because +Y points down)
    """

    radius: float
    end: Point
    large_arc: bool = False
    sweep: bool = False

    def points(self) -> tuple[Point, ...]:
        return (self.end,)

    def map_points(self, fn: Callable[[Point], Point]) -> ArcTo:
        return replace(self, end=fn(self.end))

    def to_svg(self) -> str:
        r = format_number(self.radius)
        return f"A {r} {r} 0 {int(self.large_arc)} {int(self.sweep)} {_fmt_point(self.end)}"


Segment: TypeAlias = LineTo | QuadTo | ArcTo


# =============================================================================
# CONTOURS AND OUTLINES
# =============================================================================


@dataclass(frozen=True)
class Contour:
    """A single sub-path: a start point followed by segments."""

    start: Point
    segments: tuple[Segment, ...] = ()
    closed: bool = False

    def points(self) -> list[Point]:
        """All defining points in drawing order (controls included)."""
        pts = [self.start]
        for seg in self.segments:
            pts.extend(seg.points())
        return pts

    def map_points(self, fn: Callable[[Point], Point]) -> Contour:
        return Contour(
            start=fn(self.start),
            segments=tuple(seg.map_points(fn) for seg in self.segments),
            closed=self.closed,
        )

    def to_svg(self) -> str:
        parts = [f"M {_fmt_point(self.start)}"]
        parts.extend(seg.to_svg() for seg in self.segments)
        if self.closed:
            parts.append("Z")
        return " ".join(parts)


def polyline(points: Iterable[Point], closed: bool = False) -> Contour:
    """Build a contour of straight segments through points."""
    pts = [(float(x), float(y)) for x, y in points]
    return Contour(
        start=pts[0],
        segments=tuple(LineTo(p) for p in pts[1:]),
        closed=closed,
    )


@dataclass(frozen=True)
class Outline:
    """Immutable vector outline made of one or more contours."""

    contours: tuple[Contour, ...] = ()

    def __len__(self) -> int:
        return len(self.contours)

    def to_svg_path(self) -> str:
        """Serialize to SVG path data."""
        return " ".join(c.to_svg() for c in self.contours)

    def vertices(self) -> np.ndarray:
        """(N, 2) array of every defining point, controls included."""
        pts = [p for c in self.contours for p in c.points()]
        if not pts:
            return np.zeros((0, 2))
        return np.array(pts, dtype=float)

    def arcs(self) -> list[ArcTo]:
        """All arc segments in drawing order."""
        return [s for c in self.contours for s in c.segments if isinstance(s, ArcTo)]

    def sweep_flags(self) -> list[bool]:
        return [a.sweep for a in self.arcs()]

    def transformed(self, matrix: np.ndarray, origin: Point = (0.0, 0.0)) -> Outline:
        """
        Rotate the outline about origin.

        matrix must be a rotation: radii and sweep flags are carried over
        unchanged.
        """
        m = np.asarray(matrix, dtype=float)
        o = np.asarray(origin, dtype=float)

        def fn(p: Point) -> Point:
            x, y = (np.asarray(p, dtype=float) - o) @ m.T + o
            return (float(x), float(y))

        return Outline(tuple(c.map_points(fn) for c in self.contours))

    def translated(self, dx: float, dy: float) -> Outline:
        return Outline(
            tuple(c.map_points(lambda p: (p[0] + dx, p[1] + dy)) for c in self.contours)
        )

    def almost_equal(self, other: Outline, tol: float = 1e-9) -> bool:
        """Structural equality with a tolerance on coordinates and radii."""
        if len(self.contours) != len(other.contours):
            return False
        for a, b in zip(self.contours, other.contours):
            if a.closed != b.closed or len(a.segments) != len(b.segments):
                return False
            for sa, sb in zip(a.segments, b.segments):
                if type(sa) is not type(sb):
                    return False
                if isinstance(sa, ArcTo):
                    if (sa.large_arc, sa.sweep) != (sb.large_arc, sb.sweep):
                        return False
                    if abs(sa.radius - sb.radius) > tol:
                        return False
        va, vb = self.vertices(), other.vertices()
        return va.shape == vb.shape and bool(np.allclose(va, vb, rtol=0.0, atol=tol))
