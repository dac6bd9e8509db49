"""
Tests for colour filter presets.
"""

import pytest
from PIL import Image

from zine_toolkit.images import FILTERS, apply_filter, available_filters


class TestApplyFilter:
    def test_available_filters_when_listed_then_none_first(self):
        names = available_filters()
        assert names[0] == "none"
        assert set(names[1:]) == set(FILTERS)

    def test_apply_filter_when_none_then_same_image(self):
        image = Image.new("RGBA", (4, 4), (10, 20, 30, 255))
        assert apply_filter(image, "none") is image

    def test_apply_filter_when_unknown_then_unfiltered(self):
        image = Image.new("RGBA", (4, 4), (10, 20, 30, 255))
        assert apply_filter(image, "hologram") is image

    @pytest.mark.parametrize("name", sorted(FILTERS))
    def test_apply_filter_when_preset_then_size_and_alpha_kept(self, name):
        image = Image.new("RGBA", (8, 6), (200, 120, 40, 90))

        result = apply_filter(image, name)

        assert result.mode == "RGBA"
        assert result.size == (8, 6)
        assert result.getpixel((0, 0))[3] == 90

    def test_noir_when_coloured_then_gray(self):
        r, g, b, _ = apply_filter(Image.new("RGB", (2, 2), "red"), "noir").getpixel((0, 0))
        assert r == g == b

    def test_duotone_when_black_then_low_end_of_ramp(self):
        pixel = apply_filter(Image.new("RGB", (2, 2), "black"), "teal-white").getpixel((0, 0))
        assert pixel[:3] == (8, 145, 125)

    def test_duotone_when_white_then_near_high_end(self):
        pixel = apply_filter(Image.new("RGB", (2, 2), "white"), "teal-white").getpixel((0, 0))
        assert all(channel >= 250 for channel in pixel[:3])

    def test_warm_when_neutral_gray_then_red_above_blue(self):
        r, _, b, _ = apply_filter(Image.new("RGB", (2, 2), (128, 128, 128)), "warm").getpixel((0, 0))
        assert r > b
