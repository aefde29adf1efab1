"""
90° long-radius elbow outline generator.

The elbow is constructed once in a local frame and then rotated as a rigid
point set into its quadrant:

    - Origin: the corner where the two pipe centerlines intersect
    - Leg 1 comes in along -Y (screen up), its face at y = -R
    - Leg 2 leaves along +X, its face at x = R
    - The bend pivot sits at (R, -R)

with bend radius R = 1.5 x diameter (long radius convention) and pipe
radius r = diameter / 2.

Because the whole point set is rotated, the arc sweep flags of the rotation 0
construction are valid for every quadrant and are never recomputed.
"""

from __future__ import annotations

import numpy as np

from .outline import (
    ArcTo,
    Contour,
    Outline,
    Point,
    QuadTo,
    clamp_extent,
    quadrant_rotation,
    transform_points,
)
from .pipe import CAP_DEPTH_RATIO

# =============================================================================
# CONSTANTS
# =============================================================================

# Center-to-face distance as a multiple of diameter (long radius)
LONG_RADIUS_FACTOR = 1.5

# Quarter turns available to an elbow
ROTATION_STEPS = 4


def bend_radius(diameter: float) -> float:
    """Centerline bend radius for a long-radius elbow."""
    return clamp_extent(diameter) * LONG_RADIUS_FACTOR


def normalize_rotation(rotation: int) -> int:
    """Fold any integer rotation into the range 0..3."""
    return int(rotation) % ROTATION_STEPS


# =============================================================================
# ELBOW GEOMETRY
# =============================================================================


def _local_key_points(diameter: float) -> np.ndarray:
    """
    Key points of the rotation 0 elbow relative to the corner.

    Rows: top outer, top inner, right inner, right outer,
    top cap control, right cap control.
    """
    r = clamp_extent(diameter) / 2
    R = bend_radius(diameter)
    c = r * CAP_DEPTH_RATIO
    return np.array(
        [
            (-r, -R),
            (r, -R),
            (R, -r),
            (R, r),
            # Top face bows towards +Y like the far cap of a vertical pipe
            (0.0, -R + c),
            # Right face bows towards +X like the far cap of a horizontal pipe
            (R + c, 0.0),
        ]
    )


def make_elbow_outline(center: Point, diameter: float, rotation: int = 0) -> Outline:
    """
    Create the outline of a 90° long-radius elbow.

    Args:
        center: Corner point where the two pipe centerlines intersect
        diameter: Pipe diameter
        rotation: Quarter turns (0..3) applied about center

    Returns:
        Outline with a single closed contour: outer arc, right face curve,
        inner arc, top face curve.
    """
    r = clamp_extent(diameter) / 2
    R = bend_radius(diameter)

    world = transform_points(
        _local_key_points(diameter),
        quadrant_rotation(normalize_rotation(rotation)),
        center,
    )
    top_outer, top_inner, right_inner, right_outer, top_ctrl, right_ctrl = (
        (float(x), float(y)) for x, y in world
    )

    contour = Contour(
        start=top_outer,
        segments=(
            ArcTo(R + r, right_outer, large_arc=False, sweep=False),
            QuadTo(right_ctrl, right_inner),
            ArcTo(R - r, top_inner, large_arc=False, sweep=True),
            QuadTo(top_ctrl, top_outer),
        ),
        closed=True,
    )
    return Outline((contour,))


def elbow_joint_points(center: Point, diameter: float, rotation: int = 0) -> tuple[Point, Point]:
    """
    Weld joint positions at the two elbow faces.

    Joint 0 is the incoming face, joint 1 the outgoing face, both rotated
    with the elbow.
    """
    R = bend_radius(diameter)
    world = transform_points(
        np.array([(0.0, -R), (R, 0.0)]),
        quadrant_rotation(normalize_rotation(rotation)),
        center,
    )
    first, second = ((float(x), float(y)) for x, y in world)
    return first, second
