"""
Straight pipe outline generator.

A pipe is drawn as a capsule: two straight walls separated by the pipe
diameter, capped at each end by a quadratic curve. The far end cap bulges
outward, the near end cap bulges inward, and an extra open contour draws the
visible near rim bulging outward, which together suggest a cylinder seen
from the side.

The vertical pipe is the horizontal construction with its axes swapped, so
both orientations always produce matching end caps.
"""

from __future__ import annotations

from .outline import Contour, LineTo, Outline, Point, QuadTo, clamp_extent

# =============================================================================
# CONSTANTS
# =============================================================================

# Depth of the end-cap curve as a fraction of the pipe radius
CAP_DEPTH_RATIO = 0.4

# Nominal pipe size (inches) -> drawn diameter (canvas units)
NOMINAL_PIPE_DIAMETERS: dict[str, float] = {
    "4": 10.0,
    "6": 15.0,
    "8": 20.0,
    "10": 25.0,
}

DEFAULT_NOMINAL_SIZE = "8"


def nominal_size_label(diameter: float) -> str:
    """
    Nominal size label for a drawn diameter.

    Diameters outside the table are labelled with the default size.
    """
    for label, size in NOMINAL_PIPE_DIAMETERS.items():
        if abs(size - diameter) < 1e-9:
            return label
    return DEFAULT_NOMINAL_SIZE


def cap_depth(diameter: float) -> float:
    """Bulge of an end cap for the given diameter."""
    return clamp_extent(diameter) / 2 * CAP_DEPTH_RATIO


# =============================================================================
# PIPE GEOMETRY
# =============================================================================


def make_pipe_outline(
    center: Point,
    length: float,
    diameter: float,
    vertical: bool = False,
) -> Outline:
    """
    Create the capsule outline of a straight pipe.

    Args:
        center: Midpoint of the pipe axis
        length: Pipe length along its axis
        diameter: Distance between the two walls
        vertical: Axis along Y instead of X

    Returns:
        Outline with a closed body contour and an open near-rim contour
    """
    length = clamp_extent(length)
    r = clamp_extent(diameter) / 2
    c = r * CAP_DEPTH_RATIO
    cx, cy = center

    # Local frame: u runs along the pipe axis, v across it
    if vertical:
        def place(u: float, v: float) -> Point:
            return (cx + v, cy + u)
    else:
        def place(u: float, v: float) -> Point:
            return (cx + u, cy + v)

    near = -length / 2
    far = length / 2

    body = Contour(
        start=place(near, -r),
        segments=(
            LineTo(place(far, -r)),
            QuadTo(place(far + c, 0.0), place(far, r)),
            LineTo(place(near, r)),
            QuadTo(place(near + c, 0.0), place(near, -r)),
        ),
        closed=True,
    )
    rim = Contour(
        start=place(near, -r),
        segments=(QuadTo(place(near - c, 0.0), place(near, r)),),
    )
    return Outline((body, rim))


def pipe_joint_points(center: Point, length: float, vertical: bool = False) -> tuple[Point, Point]:
    """
    Weld joint positions at the two pipe ends.

    Joint 0 is the near end (left or top), joint 1 the far end.
    """
    half = clamp_extent(length) / 2
    cx, cy = center
    if vertical:
        return (cx, cy - half), (cx, cy + half)
    return (cx - half, cy), (cx + half, cy)
