"""
Tests for the procedural outline generators.

Tests cover:
- Outline model and SVG path serialization
- Bounding boxes
- Pipe capsule construction and orientation symmetry
- Elbow construction and rotation invariance
- Support, shape and text generators
- Total generators (degenerate input never fails)
"""

import math

import numpy as np
import pytest

from pypelayout.geometry import (
    ArcTo,
    Bounds,
    LineTo,
    Outline,
    QuadTo,
    bend_radius,
    callout_size,
    clamp_extent,
    elbow_joint_points,
    make_cantilever_outline,
    make_circle_outline,
    make_elbow_outline,
    make_floating_support_outline,
    make_pipe_outline,
    make_rack_outline,
    make_rectangle_outline,
    make_text_outline,
    make_zone_outline,
    nominal_size_label,
    pipe_joint_points,
    polyline,
    quadrant_rotation,
    rotation_matrix,
    text_extent,
)
from pypelayout.geometry.outline import format_number


# =============================================================================
# OUTLINE MODEL TESTS
# =============================================================================


class TestOutlineModel:
    """Test the outline data model and its serialization."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (2.0, "2"),
            (1.23456, "1.2346"),
            (-0.0, "0"),
            (-0.00001, "0"),
            (150.5, "150.5"),
        ],
    )
    def test_format_number(self, value: float, expected: str):
        """Coordinates are written compactly without trailing zeros."""
        assert format_number(value) == expected

    @pytest.mark.parametrize("value", [0, -5, float("nan"), float("inf"), "abc", None])
    def test_clamp_extent_always_positive(self, value):
        """Degenerate sizes clamp to a small positive extent."""
        result = clamp_extent(value)
        assert result > 0
        assert math.isfinite(result)

    def test_polyline_svg(self):
        """A closed polyline serializes to M/L/Z commands."""
        outline = Outline((polyline([(0, 0), (10, 0), (10, 5)], closed=True),))
        assert outline.to_svg_path() == "M 0 0 L 10 0 L 10 5 Z"

    def test_segment_commands(self):
        """Each segment kind uses its SVG command letter."""
        assert LineTo((1, 2)).to_svg() == "L 1 2"
        assert QuadTo((1, 2), (3, 4)).to_svg() == "Q 1 2 3 4"
        assert ArcTo(5, (3, 4), large_arc=True, sweep=False).to_svg() == "A 5 5 0 1 0 3 4"

    def test_quadrant_rotation_is_exact(self):
        """Quarter turns carry no floating-point residue."""
        m = quadrant_rotation(1)
        np.testing.assert_array_equal(m, [[0.0, -1.0], [1.0, 0.0]])
        np.testing.assert_array_equal(quadrant_rotation(4), np.eye(2))

    def test_rotation_matrix_matches_quadrant(self):
        """A 90° rotation matrix agrees with the exact quadrant rotation."""
        np.testing.assert_allclose(rotation_matrix(90), quadrant_rotation(1), atol=1e-12)

    def test_translated(self):
        """Translation moves every point by the offset."""
        outline = make_rectangle_outline((0, 0), 10, 10).translated(5, -5)
        np.testing.assert_allclose(outline.vertices().mean(axis=0), [5, -5])


# =============================================================================
# BOUNDS TESTS
# =============================================================================


class TestBounds:
    """Test axis-aligned boxes."""

    def test_from_corners_any_direction(self):
        """Corner order does not matter."""
        assert Bounds.from_corners((10, 20), (0, 0)) == Bounds.from_corners((0, 0), (10, 20))
        assert Bounds.from_corners((10, 0), (0, 20)) == Bounds(0, 0, 10, 20)

    def test_touching_edges_do_not_intersect(self):
        """The overlap test is strict."""
        assert not Bounds(0, 0, 10, 10).intersects(Bounds(10, 0, 20, 10))
        assert Bounds(0, 0, 10, 10).intersects(Bounds(9.9, 0, 20, 10))

    def test_zero_area_is_empty(self):
        assert Bounds(5, 5, 5, 10).is_empty
        assert not Bounds(0, 0, 1, 1).is_empty

    def test_union(self):
        box = Bounds.union([Bounds(0, 0, 1, 1), Bounds(-5, 2, 0, 8)])
        assert box == Bounds(-5, 0, 1, 8)
        assert Bounds.union([]) is None


# =============================================================================
# PIPE TESTS
# =============================================================================


class TestPipeOutline:
    """Test the pipe capsule generator."""

    def test_horizontal_pipe_path(self):
        """Capsule body plus the open rim at the near end."""
        outline = make_pipe_outline((0, 0), 100, 20)
        assert outline.to_svg_path() == (
            "M -50 -10 L 50 -10 Q 54 0 50 10 L -50 10 Q -46 0 -50 -10 Z "
            "M -50 -10 Q -54 0 -50 10"
        )

    def test_cap_bulge_is_forty_percent_of_radius(self):
        """Far cap control point sits 0.4 r beyond the pipe end."""
        outline = make_pipe_outline((0, 0), 100, 20)
        far_cap = outline.contours[0].segments[1]
        assert far_cap.control == pytest.approx((50 + 0.4 * 10, 0))

    def test_end_caps_mirror_each_other(self):
        """Outer cap controls are symmetric about the center."""
        outline = make_pipe_outline((10, 20), 100, 20)
        far_ctrl = outline.contours[0].segments[1].control
        rim_ctrl = outline.contours[1].segments[0].control
        assert far_ctrl[0] - 10 == pytest.approx(-(rim_ctrl[0] - 10))
        assert far_ctrl[1] == rim_ctrl[1] == 20

    def test_vertical_is_diagonal_mirror_of_horizontal(self):
        """Swapping x and y of the horizontal pipe gives the vertical pipe."""
        cx, cy = 30.0, 40.0
        horizontal = make_pipe_outline((cx, cy), 120, 16)
        vertical = make_pipe_outline((cx, cy), 120, 16, vertical=True)

        def swap(p):
            return (cx + (p[1] - cy), cy + (p[0] - cx))

        mirrored = Outline(tuple(c.map_points(swap) for c in horizontal.contours))
        assert mirrored.almost_equal(vertical)

    def test_vertical_extent(self):
        outline = make_pipe_outline((0, 0), 100, 20, vertical=True)
        v = outline.vertices()
        assert v[:, 1].min() == pytest.approx(-54)
        assert v[:, 0].max() == pytest.approx(10)

    def test_joint_points(self):
        assert pipe_joint_points((0, 0), 100) == ((-50, 0), (50, 0))
        assert pipe_joint_points((0, 0), 100, vertical=True) == ((0, -50), (0, 50))

    @pytest.mark.parametrize(
        "diameter,label",
        [(10, "4"), (15, "6"), (20, "8"), (25, "10"), (33, "8")],
    )
    def test_nominal_size_label(self, diameter: float, label: str):
        assert nominal_size_label(diameter) == label


# =============================================================================
# ELBOW TESTS
# =============================================================================


class TestElbowOutline:
    """Test the 90° long-radius elbow generator."""

    def test_bend_radius_is_long_radius(self):
        assert bend_radius(20) == pytest.approx(30)

    def test_rotation_zero_key_points(self):
        """Outer arc runs from the top face to the right face."""
        outline = make_elbow_outline((0, 0), 20, 0)
        contour = outline.contours[0]
        assert contour.closed
        assert contour.start == pytest.approx((-10, -30))
        outer, right_cap, inner, top_cap = contour.segments
        assert isinstance(outer, ArcTo) and outer.radius == pytest.approx(40)
        assert outer.end == pytest.approx((30, 10))
        assert right_cap.control == pytest.approx((34, 0))
        assert isinstance(inner, ArcTo) and inner.radius == pytest.approx(20)
        assert inner.end == pytest.approx((10, -30))
        assert top_cap.end == contour.start

    def test_arc_endpoints_share_the_bend_pivot(self):
        """Both arcs are concentric about the pivot (R, -R)."""
        outline = make_elbow_outline((0, 0), 20, 0)
        pivot = np.array([30.0, -30.0])
        contour = outline.contours[0]
        outer, _, inner, _ = contour.segments
        assert np.linalg.norm(np.array(contour.start) - pivot) == pytest.approx(outer.radius)
        assert np.linalg.norm(np.array(outer.end) - pivot) == pytest.approx(outer.radius)
        assert np.linalg.norm(np.array(inner.end) - pivot) == pytest.approx(inner.radius)

    @pytest.mark.parametrize("rotation", [0, 1, 2, 3])
    def test_rotation_invariance(self, rotation: int):
        """Rotating the rotation 0 outline reproduces each quadrant exactly."""
        center = (120.0, -45.0)
        base = make_elbow_outline(center, 25, 0)
        rotated = make_elbow_outline(center, 25, rotation)
        assert base.transformed(quadrant_rotation(rotation), center).almost_equal(rotated)

    @pytest.mark.parametrize("rotation", [0, 1, 2, 3])
    def test_sweep_flags_fixed(self, rotation: int):
        """Outer arc sweeps one way, inner the other, in every quadrant."""
        outline = make_elbow_outline((0, 0), 20, rotation)
        assert outline.sweep_flags() == [False, True]

    def test_rotation_wraps(self):
        assert make_elbow_outline((0, 0), 20, 5) == make_elbow_outline((0, 0), 20, 1)

    @pytest.mark.parametrize(
        "rotation,expected",
        [
            (0, ((0, -30), (30, 0))),
            (1, ((30, 0), (0, 30))),
            (2, ((0, 30), (-30, 0))),
            (3, ((-30, 0), (0, -30))),
        ],
    )
    def test_joint_points(self, rotation: int, expected):
        first, second = elbow_joint_points((0, 0), 20, rotation)
        assert first == pytest.approx(expected[0])
        assert second == pytest.approx(expected[1])


# =============================================================================
# SUPPORT TESTS
# =============================================================================


class TestSupportOutlines:
    """Test the top-anchored support generators."""

    def test_rack_top_and_feet(self):
        """Beam top at center.y, feet hang below the leg base."""
        outline = make_rack_outline((0, 0), 100, 80)
        v = outline.vertices()
        assert v[:, 1].min() == pytest.approx(0)
        assert v[:, 1].max() == pytest.approx(90)
        assert v[:, 0].min() == pytest.approx(-52)
        assert v[:, 0].max() == pytest.approx(52)

    @pytest.mark.parametrize("height,contours", [(80, 7), (41, 7), (40, 5), (20, 5)])
    def test_rack_bracing_only_when_tall(self, height: float, contours: int):
        """Cross-bracing appears only above 40 units of height."""
        assert len(make_rack_outline((0, 0), 100, height)) == contours

    def test_rack_legs_are_open(self):
        outline = make_rack_outline((0, 0), 100, 80)
        assert [c.closed for c in outline.contours[:5]] == [True, False, False, True, True]

    def test_cantilever_post_offset(self):
        """The post sits half the width left of center."""
        outline = make_cantilever_outline((0, 0), 100, 120)
        post, plate = outline.contours
        assert post.start == (-50, 0)
        v = outline.vertices()
        assert v[:, 0].min() == pytest.approx(-54)
        assert v[:, 0].max() == pytest.approx(-40)
        assert v[:, 1].max() == pytest.approx(126)

    def test_floating_block(self):
        outline = make_floating_support_outline((10, 5), 30, 30)
        assert outline.to_svg_path() == "M -5 5 L 25 5 L 25 35 L -5 35 Z"


# =============================================================================
# SHAPE TESTS
# =============================================================================


class TestShapeOutlines:
    """Test rectangle, circle, zone and text generators."""

    def test_rectangle(self):
        assert make_rectangle_outline((0, 0), 10, 20).to_svg_path() == "M -5 -10 L 5 -10 L 5 10 L -5 10 Z"

    def test_circle_two_half_arcs(self):
        outline = make_circle_outline((0, 0), 10)
        assert outline.to_svg_path() == "M -5 0 A 5 5 0 1 0 5 0 A 5 5 0 1 0 -5 0"

    def test_zone_has_leader_and_callout(self):
        outline = make_zone_outline((0, 0), 100, 60, "Area")
        zone, leader, callout = outline.contours
        assert leader.points() == [(0, 30), (0, 70)]
        xs = [p[0] for p in callout.points()]
        ys = [p[1] for p in callout.points()]
        assert max(xs) - min(xs) == pytest.approx(160)
        assert max(ys) - min(ys) == pytest.approx(40)

    @pytest.mark.parametrize(
        "label,note,expected",
        [
            ("", "", (160, 40)),
            ("A" * 20, "", (210, 40)),
            ("Area", "n" * 30, (240, 60)),
            ("Area", "   ", (160, 40)),
        ],
    )
    def test_callout_size(self, label: str, note: str, expected):
        assert callout_size(label, note) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "text,font_size,expected",
        [
            ("abc", 10, (18, 10)),
            ("", 10, (50, 10)),
            ("abc", 0, (50, 12)),
        ],
    )
    def test_text_extent(self, text: str, font_size: float, expected):
        assert text_extent(text, font_size) == pytest.approx(expected)

    def test_text_box_is_centered(self):
        v = make_text_outline((100, 100), "abc", 10).vertices()
        np.testing.assert_allclose(v.mean(axis=0), [100, 100])


# =============================================================================
# TOTALITY TESTS
# =============================================================================


class TestGeneratorsAreTotal:
    """Every generator returns a finite outline for degenerate sizes."""

    @pytest.mark.parametrize(
        "make",
        [
            lambda d: make_pipe_outline((0, 0), d, d),
            lambda d: make_pipe_outline((0, 0), d, d, vertical=True),
            lambda d: make_elbow_outline((0, 0), d, 3),
            lambda d: make_rack_outline((0, 0), d, d),
            lambda d: make_cantilever_outline((0, 0), d, d),
            lambda d: make_floating_support_outline((0, 0), d, d),
            lambda d: make_rectangle_outline((0, 0), d, d),
            lambda d: make_zone_outline((0, 0), d, d),
            lambda d: make_circle_outline((0, 0), d),
        ],
    )
    @pytest.mark.parametrize("size", [0, -10, float("nan")])
    def test_degenerate_sizes(self, make, size):
        outline = make(size)
        assert len(outline) >= 1
        assert np.isfinite(outline.vertices()).all()
        assert "nan" not in outline.to_svg_path()


class TestGeneratorsAreDeterministic:
    """Calling a generator twice with the same input gives the same outline."""

    @pytest.mark.parametrize(
        "make",
        [
            lambda: make_pipe_outline((1, 2), 80, 15),
            lambda: make_pipe_outline((1, 2), 80, 15, vertical=True),
            lambda: make_elbow_outline((1, 2), 15, 0),
            lambda: make_elbow_outline((1, 2), 15, 3),
            lambda: make_rack_outline((1, 2), 150, 80),
            lambda: make_cantilever_outline((1, 2), 100, 120),
            lambda: make_floating_support_outline((1, 2), 30, 30),
            lambda: make_rectangle_outline((1, 2), 100, 60),
            lambda: make_zone_outline((1, 2), 200, 200, "Zone 1", "Hot work"),
            lambda: make_circle_outline((1, 2), 100),
            lambda: make_text_outline((1, 2), "Note", 14),
        ],
    )
    def test_same_input_same_outline(self, make):
        first, second = make(), make()
        assert first == second
        assert first.to_svg_path() == second.to_svg_path()
