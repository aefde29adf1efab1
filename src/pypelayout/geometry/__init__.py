"""
Geometry Generators

Pure functions turning an entity's center, dimensions and orientation into
a 2D vector outline.
"""

from .bounds import Bounds
from .elbow import (
    LONG_RADIUS_FACTOR,
    bend_radius,
    elbow_joint_points,
    make_elbow_outline,
    normalize_rotation,
)
from .outline import (
    MIN_EXTENT,
    ArcTo,
    Contour,
    LineTo,
    Outline,
    Point,
    QuadTo,
    clamp_extent,
    polyline,
    quadrant_rotation,
    rotation_matrix,
    transform_points,
)
from .pipe import (
    CAP_DEPTH_RATIO,
    NOMINAL_PIPE_DIAMETERS,
    make_pipe_outline,
    nominal_size_label,
    pipe_joint_points,
)
from .shapes import (
    callout_size,
    make_circle_outline,
    make_rectangle_outline,
    make_text_outline,
    make_zone_outline,
    text_extent,
)
from .supports import (
    BRACING_MIN_HEIGHT,
    make_cantilever_outline,
    make_floating_support_outline,
    make_rack_outline,
)

__all__ = [
    # Outline model
    'Point',
    'Outline',
    'Contour',
    'LineTo',
    'QuadTo',
    'ArcTo',
    'Bounds',
    'polyline',
    'clamp_extent',
    'MIN_EXTENT',
    # Transforms
    'rotation_matrix',
    'quadrant_rotation',
    'transform_points',
    # Generators
    'make_pipe_outline',
    'make_elbow_outline',
    'make_rack_outline',
    'make_cantilever_outline',
    'make_floating_support_outline',
    'make_rectangle_outline',
    'make_zone_outline',
    'make_circle_outline',
    'make_text_outline',
    # Helpers
    'bend_radius',
    'normalize_rotation',
    'pipe_joint_points',
    'elbow_joint_points',
    'nominal_size_label',
    'callout_size',
    'text_extent',
    # Constants
    'CAP_DEPTH_RATIO',
    'LONG_RADIUS_FACTOR',
    'NOMINAL_PIPE_DIAMETERS',
    'BRACING_MIN_HEIGHT',
]
