"""
Tests for raster compression against the byte budget.
"""

import numpy as np
import pytest
from PIL import Image

from zine_toolkit.output import ExportConfig, compress_raster


def _noise(size=(600, 800), seed=0):
    rng = np.random.default_rng(seed)
    return Image.fromarray(rng.integers(0, 256, (size[1], size[0], 3), dtype=np.uint8))


class TestCompressRaster:
    def test_compress_when_plain_page_then_start_quality_kept(self):
        raster = compress_raster(Image.new("RGB", (900, 1200), "white"))
        assert raster.quality == 90
        assert raster.byte_count <= 250_000
        assert raster.mime_type == "image/jpeg"

    def test_compress_when_over_budget_then_steps_down_to_floor(self):
        config = ExportConfig(target_bytes=1_000)
        raster = compress_raster(_noise(), config)
        assert raster.quality == 30
        assert raster.byte_count > 1_000

    def test_compress_when_budget_met_midway_then_stops_there(self):
        image = _noise()
        at_start = compress_raster(image, ExportConfig(target_bytes=10_000_000))
        config = ExportConfig(target_bytes=at_start.byte_count - 1)

        raster = compress_raster(image, config)

        assert raster.quality == 80
        assert raster.byte_count <= config.target_bytes

    def test_compress_when_webp_then_webp_bytes(self):
        raster = compress_raster(Image.new("RGB", (40, 40), "red"),
                                 ExportConfig(image_format="WEBP"))
        assert raster.data[:4] == b"RIFF"
        assert raster.mime_type == "image/webp"


class TestExportConfig:
    def test_config_when_unknown_format_then_rejected(self):
        with pytest.raises(ValueError):
            ExportConfig(image_format="PNG")

    def test_config_when_page_size_then_tuple(self):
        assert ExportConfig(page_width=300, page_height=400).page_size == (300, 400)
