"""
Module: output.compression

Purpose:
    Encode page rasters under a byte budget. Quality starts high and steps
    down until the encoded size fits the target or the floor is reached.

Key Classes:
    - CompressedRaster: Encoded bytes and the quality used

Key Functions:
    - compress_raster(): Quality step-down loop
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Optional

from PIL import Image

from .config import ExportConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompressedRaster:
    data: bytes
    quality: int
    image_format: str
    size: tuple[int, int]

    @property
    def byte_count(self) -> int:
        return len(self.data)

    @property
    def mime_type(self) -> str:
        return f"image/{self.image_format.lower()}"


def _encode(image: Image.Image, image_format: str, quality: int) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format=image_format, quality=quality)
    return buffer.getvalue()


def compress_raster(image: Image.Image, config: Optional[ExportConfig] = None) -> CompressedRaster:
    """
    Encode with the highest quality that fits the byte budget.

    The loop stops at the quality floor even if the result is still over
    budget.

    Example:
        >>> raster = compress_raster(Image.new("RGB", (900, 1200), "white"))
        >>> raster.quality
        90
    """
    config = config or ExportConfig()
    rgb = image.convert("RGB")
    quality = config.start_quality
    data = _encode(rgb, config.image_format, quality)
    while len(data) > config.target_bytes and quality > config.min_quality:
        quality = max(config.min_quality, quality - config.quality_step)
        data = _encode(rgb, config.image_format, quality)
    if len(data) > config.target_bytes:
        logger.debug(f"Raster still {len(data)} bytes at quality floor {quality}")
    return CompressedRaster(data=data, quality=quality, image_format=config.image_format, size=rgb.size)
