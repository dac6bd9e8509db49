"""
Unit tests for gesture geometry: zoom, drag clamping, corner resize,
crop handles and the text edit session.
"""

import asyncio

import pytest

from zine_toolkit.core.models import CropInsets
from zine_toolkit.editor.interaction import (
    CropSide,
    ResizeCorner,
    TextEditSession,
    ZoomControl,
    canvas_delta,
    clamp_position,
    compute_crop,
    compute_resize,
    intrinsic_display_size,
)


class TestZoomAndDrag:
    def test_zoom_when_new_then_default_half(self):
        assert ZoomControl().scale == 0.5

    def test_on_wheel_when_modifier_then_scale_changes(self):
        zoom = ZoomControl()
        assert zoom.on_wheel(-500, modifier=True) == pytest.approx(1.0)

    def test_on_wheel_when_no_modifier_then_unchanged(self):
        zoom = ZoomControl()
        assert zoom.on_wheel(-500, modifier=False) == 0.5

    def test_set_scale_when_out_of_range_then_clamped(self):
        zoom = ZoomControl()
        assert zoom.set_scale(10) == 3.0
        assert zoom.set_scale(0.1) == 0.5

    def test_canvas_delta_when_zoomed_out_then_scaled_up(self):
        assert canvas_delta(50, -20, 0.5) == (100, -40)

    def test_clamp_position_when_past_right_edge_then_pinned(self):
        x, y = clamp_position(850, 0, 200, 100, 900, 1200)
        assert x <= 700
        assert (x, y) == (700, 0)

    def test_clamp_position_when_negative_then_zero(self):
        assert clamp_position(-30, -5, 100, 100, 900, 1200) == (0, 0)

    def test_clamp_position_when_larger_than_canvas_then_zero(self):
        assert clamp_position(40, 40, 1000, 1300, 900, 1200) == (0, 0)

    def test_intrinsic_display_size_when_large_then_fits_box(self):
        assert intrinsic_display_size(600, 300, 300) == (300, 150)

    def test_intrinsic_display_size_when_small_then_natural(self):
        assert intrinsic_display_size(120, 80, 300) == (120, 80)


class TestComputeResize:
    def test_resize_when_bottom_right_grows_then_both_axes_keep_aspect(self):
        result = compute_resize(ResizeCorner.BOTTOM_RIGHT, 100, 100, 10, 20, 50, 50)
        assert (result.width, result.height) == (150, 150)
        assert (result.position_x, result.position_y) == (10, 20)

    def test_resize_when_top_left_grows_then_bottom_right_anchored(self):
        result = compute_resize(ResizeCorner.TOP_LEFT, 100, 100, 100, 100, -50, -50)
        assert (result.width, result.height) == (150, 150)
        assert (result.position_x, result.position_y) == (50, 50)
        assert result.position_x + result.width == 200

    def test_resize_when_horizontal_drag_on_wide_image_then_height_follows(self):
        result = compute_resize(ResizeCorner.BOTTOM_RIGHT, 200, 100, 0, 0, 100, 0)
        assert (result.width, result.height) == (300, 150)

    def test_resize_when_vertical_drag_dominates_then_width_follows(self):
        result = compute_resize(ResizeCorner.BOTTOM_RIGHT, 200, 100, 0, 0, 0, 50)
        assert (result.width, result.height) == (300, 150)

    def test_resize_when_below_floor_then_rejected(self):
        assert compute_resize(ResizeCorner.BOTTOM_RIGHT, 100, 100, 0, 0, -60, -60) is None

    def test_resize_when_aspect_unlocked_then_axes_independent(self):
        result = compute_resize(
            ResizeCorner.TOP_RIGHT, 200, 100, 0, 100, 100, 0, preserve_aspect=False
        )
        assert (result.width, result.height) == (300, 100)
        assert result.position_y == 100


class TestComputeCrop:
    def test_crop_when_left_handle_dragged_in_then_left_inset(self):
        assert compute_crop(CropSide.LEFT, None, 30, 0, 300, 300).left == 30

    def test_crop_when_right_handle_dragged_left_then_right_inset(self):
        crop = compute_crop(CropSide.RIGHT, CropInsets(left=10), -30, 0, 300, 300)
        assert (crop.left, crop.right) == (10, 30)

    def test_crop_when_dragged_past_opposite_side_then_min_visible_kept(self):
        crop = compute_crop(CropSide.TOP, CropInsets(bottom=50), 0, 1000, 300, 300)
        assert crop.top == 300 - 20 - 50
        assert crop.visible_size(300, 300)[1] == 20

    def test_crop_when_dragged_outward_then_floor_zero(self):
        assert compute_crop(CropSide.BOTTOM, None, 0, 40, 300, 300).bottom == 0


class TestTextEditSession:
    def test_session_when_edited_then_streams_and_flushes_on_blur(self):
        calls = []

        async def sink(element_id, content):
            calls.append((element_id, content))

        async def scenario():
            session = TextEditSession(sink)
            session.begin("t1", "<p>a</p>")
            await session.on_change("<p>ab</p>")
            await session.on_change("<p>abc</p>")
            await session.on_blur()
            return session

        session = asyncio.run(scenario())
        assert calls == [("t1", "<p>ab</p>"), ("t1", "<p>abc</p>"), ("t1", "<p>abc</p>")]
        assert not session.active

    def test_session_when_inactive_then_changes_ignored(self):
        calls = []

        async def sink(element_id, content):
            calls.append(content)

        asyncio.run(TextEditSession(sink).on_change("x"))
        assert calls == []
