"""
Tests for the screen/world view transform.
"""

import pytest

from pypelayout.settings import ZoomSettings
from pypelayout.view import ViewTransform


class TestConversions:
    def test_identity_by_default(self):
        view = ViewTransform()
        assert view.screen_to_world((12, 34)) == (12, 34)

    def test_pan_and_scale(self):
        view = ViewTransform(pan=(100, 50), scale=2)
        assert view.screen_to_world((300, 250)) == pytest.approx((100, 100))
        assert view.world_to_screen((100, 100)) == pytest.approx((300, 250))

    def test_delta_ignores_pan(self):
        view = ViewTransform(pan=(999, -999), scale=2)
        assert view.screen_delta_to_world((10, 20)) == pytest.approx((5, 10))

    def test_pan_by(self):
        view = ViewTransform()
        view.pan_by(5, -3)
        view.pan_by(1, 1)
        assert view.pan == (6, -2)


class TestZoom:
    @pytest.mark.parametrize("new_scale", [0.5, 1.7, 3.0])
    def test_zoom_point_stays_fixed(self, new_scale: float):
        view = ViewTransform(pan=(40, -20), scale=1.3)
        anchor = (200, 150)
        world_before = view.screen_to_world(anchor)
        view.zoom_about(anchor, new_scale)
        assert view.screen_to_world(anchor) == pytest.approx(world_before)

    @pytest.mark.parametrize("requested,applied", [(10, 3.0), (0.01, 0.2), (1.5, 1.5)])
    def test_zoom_clamped(self, requested: float, applied: float):
        view = ViewTransform()
        assert view.zoom_about((0, 0), requested) == pytest.approx(applied)
        assert view.scale == pytest.approx(applied)

    def test_button_and_wheel_steps(self):
        view = ViewTransform()
        assert view.zoom_step((0, 0), 1) == pytest.approx(1.2)
        assert view.wheel((0, 0), -1) == pytest.approx(1.1)

    def test_custom_limits(self):
        view = ViewTransform(limits=ZoomSettings(min_scale=0.5, max_scale=1.0))
        view.zoom_step((0, 0), 10)
        assert view.scale == 1.0

    def test_initial_scale_clamped(self):
        assert ViewTransform(scale=50).scale == 3.0
