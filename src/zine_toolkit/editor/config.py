"""
Module: editor.config

Purpose:
    Configuration for the editing engine. Immutable, validated on
    construction.

Key Classes:
    - EditorConfig: Canvas size, zoom limits, size floors and add defaults

Dependencies:
    - dataclasses (std)

Used By:
    - editor.interaction: Clamping, resize floor, zoom
    - editor.elements: Add defaults
    - editor.clipboard: Paste clamping
"""

from __future__ import annotations

from dataclasses import dataclass


# Canonical page size in canvas pixels (3:4 portrait)
DEFAULT_CANVAS_WIDTH = 900
DEFAULT_CANVAS_HEIGHT = 1200


@dataclass(frozen=True)
class EditorConfig:
    """
    Configuration for the editing engine (immutable).

    Attributes:
        canvas_width: Page width in canvas pixels
        canvas_height: Page height in canvas pixels
        min_element_size: Resize floor; smaller results are rejected
        min_crop_visible: Pixels a crop gesture must leave visible per axis
        default_zoom: Initial zoom scale
        min_zoom: Lowest zoom scale
        max_zoom: Highest zoom scale
        zoom_wheel_step: Scale change per wheel delta unit
        intrinsic_max_size: Box that unsized images are scaled down into
        sticker_width: Width given to new stickers
        default_text: Markup for new text elements
        text_box_width: Nominal width of a new text element
        text_box_height: Nominal height of a new text element
        fallback_element_size: Size assumed for clamping unsized elements

    Example:
        >>> config = EditorConfig()
        >>> config.canvas_width, config.canvas_height
        (900, 1200)
    """

    canvas_width: int = DEFAULT_CANVAS_WIDTH
    canvas_height: int = DEFAULT_CANVAS_HEIGHT

    # Geometry floors
    min_element_size: float = 50
    min_crop_visible: float = 20

    # Zoom
    default_zoom: float = 0.5
    min_zoom: float = 0.5
    max_zoom: float = 3.0
    zoom_wheel_step: float = 0.001

    # Add defaults
    intrinsic_max_size: int = 300
    sticker_width: float = 200
    default_text: str = "<p>Double click to edit</p>"
    text_box_width: float = 200
    text_box_height: float = 60
    fallback_element_size: float = 100

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.canvas_width <= 0:
            raise ValueError(f"canvas_width must be positive: {self.canvas_width}")
        if self.canvas_height <= 0:
            raise ValueError(f"canvas_height must be positive: {self.canvas_height}")
        if self.min_element_size <= 0:
            raise ValueError(f"min_element_size must be positive: {self.min_element_size}")
        if not 0 < self.min_zoom <= self.default_zoom <= self.max_zoom:
            raise ValueError(
                f"zoom limits must satisfy 0 < min <= default <= max: "
                f"{self.min_zoom}, {self.default_zoom}, {self.max_zoom}"
            )
