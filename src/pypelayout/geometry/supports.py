"""
Pipe support outline generators.

All supports are TOP-anchored: center.y is the contact surface a pipe rests
on and the structure hangs down to center.y + height. Snapping and resizing
rely on this, so the anchor must not move to the visual centroid.
"""

from __future__ import annotations

from .outline import Outline, Point, clamp_extent, polyline

# =============================================================================
# RACK SUPPORT CONSTANTS
# =============================================================================

BEAM_THICKNESS = 6.0

# Legs are inset from the beam ends
LEG_INSET_OUTER = 4.0
LEG_INSET_INNER = 10.0

# Concrete foot under each leg
FOOT_OVERHANG = 2.0
FOOT_REACH = 16.0
FOOT_HEIGHT = 10.0

# Cross-bracing only on racks taller than this
BRACING_MIN_HEIGHT = 40.0
BRACE_INSET = 5.0

# =============================================================================
# CANTILEVER CONSTANTS
# =============================================================================

POST_THICKNESS = 6.0
BASE_PLATE_OVERHANG = 4.0
BASE_PLATE_HEIGHT = 6.0


def make_rack_outline(center: Point, width: float, height: float) -> Outline:
    """
    Create a rack support: top beam, two legs, two feet, optional bracing.

    Args:
        center: (x, top contact y)
        width: Beam span
        height: Distance from the beam top to the base of the legs
    """
    x, y = center
    hw = clamp_extent(width) / 2
    h = clamp_extent(height)
    t = BEAM_THICKNESS
    base = y + h

    contours = [
        polyline([(x - hw, y), (x + hw, y), (x + hw, y + t), (x - hw, y + t)], closed=True),
        polyline(
            [
                (x - hw + LEG_INSET_OUTER, y + t),
                (x - hw + LEG_INSET_OUTER, base),
                (x - hw + LEG_INSET_INNER, base),
                (x - hw + LEG_INSET_INNER, y + t),
            ]
        ),
        polyline(
            [
                (x + hw - LEG_INSET_INNER, y + t),
                (x + hw - LEG_INSET_INNER, base),
                (x + hw - LEG_INSET_OUTER, base),
                (x + hw - LEG_INSET_OUTER, y + t),
            ]
        ),
        polyline(
            [
                (x - hw - FOOT_OVERHANG, base),
                (x - hw + FOOT_REACH, base),
                (x - hw + FOOT_REACH, base + FOOT_HEIGHT),
                (x - hw - FOOT_OVERHANG, base + FOOT_HEIGHT),
            ],
            closed=True,
        ),
        polyline(
            [
                (x + hw - FOOT_REACH, base),
                (x + hw + FOOT_OVERHANG, base),
                (x + hw + FOOT_OVERHANG, base + FOOT_HEIGHT),
                (x + hw - FOOT_REACH, base + FOOT_HEIGHT),
            ],
            closed=True,
        ),
    ]

    if h > BRACING_MIN_HEIGHT:
        upper = y + t + BRACE_INSET
        lower = base - BRACE_INSET
        left = x - hw + LEG_INSET_INNER
        right = x + hw - LEG_INSET_INNER
        contours.append(polyline([(left, upper), (right, lower)]))
        contours.append(polyline([(left, lower), (right, upper)]))

    return Outline(tuple(contours))


def make_cantilever_outline(center: Point, width: float, height: float) -> Outline:
    """
    Create a cantilever bracket: a single post and its base plate.

    The post sits half the width to the left of center.x. Width encodes the
    stand-off between the post and the supported pipe, not a drawn arm.
    """
    x, y = center
    post_x = x - clamp_extent(width) / 2
    h = clamp_extent(height)
    t = POST_THICKNESS
    base = y + h

    post = polyline(
        [(post_x, y), (post_x + t, y), (post_x + t, base), (post_x, base)],
        closed=True,
    )
    plate = polyline(
        [
            (post_x - BASE_PLATE_OVERHANG, base),
            (post_x + t + BASE_PLATE_OVERHANG, base),
            (post_x + t + BASE_PLATE_OVERHANG, base + BASE_PLATE_HEIGHT),
            (post_x - BASE_PLATE_OVERHANG, base + BASE_PLATE_HEIGHT),
        ],
        closed=True,
    )
    return Outline((post, plate))


def make_floating_support_outline(center: Point, width: float, height: float) -> Outline:
    """Create a floating block support hanging down from center.y."""
    x, y = center
    hw = clamp_extent(width) / 2
    h = clamp_extent(height)
    block = polyline([(x - hw, y), (x + hw, y), (x + hw, y + h), (x - hw, y + h)], closed=True)
    return Outline((block,))
