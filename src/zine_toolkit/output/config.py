"""
Module: output.config

Purpose:
    Configuration for page capture, compression and document export.

Key Classes:
    - ExportConfig: Immutable export configuration

Dependencies:
    - dataclasses (std)

Used By:
    - output.rasterizer: Page size, text font size
    - output.compression: Quality step-down loop
    - output.renderer / output.pipeline: Document assembly
"""

from __future__ import annotations

from dataclasses import dataclass

from zine_toolkit.editor.config import DEFAULT_CANVAS_HEIGHT, DEFAULT_CANVAS_WIDTH


@dataclass(frozen=True)
class ExportConfig:
    """
    Configuration for capture and export (immutable).

    Attributes:
        page_width: Canonical page width in pixels
        page_height: Canonical page height in pixels
        dpi: Dots per inch used to size PDF pages
        image_format: Compressed raster format ("JPEG" or "WEBP")
        start_quality: First quality tried by the compression loop
        quality_step: Quality decrement per attempt
        min_quality: Quality floor; the loop stops here regardless of size
        target_bytes: Byte budget for a compressed page
        background_color: Page fill colour
        text_font_size: Font size for text elements (px)
        text_padding: Inset of text inside its box (px)

    Example:
        >>> ExportConfig().page_size
        (900, 1200)
    """

    page_width: int = DEFAULT_CANVAS_WIDTH
    page_height: int = DEFAULT_CANVAS_HEIGHT
    dpi: int = 150

    # Compression loop
    image_format: str = "JPEG"
    start_quality: int = 90
    quality_step: int = 10
    min_quality: int = 30
    target_bytes: int = 250_000

    # Rendering
    background_color: str = "white"
    text_font_size: int = 28
    text_padding: int = 8

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_width <= 0 or self.page_height <= 0:
            raise ValueError(f"page size must be positive: {self.page_size}")
        if self.dpi <= 0:
            raise ValueError(f"dpi must be positive: {self.dpi}")
        if self.image_format not in ("JPEG", "WEBP"):
            raise ValueError(f"image_format must be JPEG or WEBP: {self.image_format!r}")
        if not 1 <= self.min_quality <= self.start_quality <= 100:
            raise ValueError(
                f"qualities must satisfy 1 <= min <= start <= 100: "
                f"{self.min_quality}, {self.start_quality}"
            )
        if self.quality_step <= 0:
            raise ValueError(f"quality_step must be positive: {self.quality_step}")
        if self.target_bytes <= 0:
            raise ValueError(f"target_bytes must be positive: {self.target_bytes}")

    @property
    def page_size(self) -> tuple[int, int]:
        return (self.page_width, self.page_height)
