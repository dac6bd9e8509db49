"""
Module: layout.config

Purpose:
    Configuration for the auto-layout engine.
    Defines canvas dimensions, padding and the fixed container shape.

Key Classes:
    - LayoutConfig: Immutable layout configuration

Dependencies:
    - dataclasses (std)

Used By:
    - layout.templates: Template geometry
    - layout.autolayout: Page creation
"""

from __future__ import annotations

from dataclasses import dataclass

from zine_toolkit.editor.config import DEFAULT_CANVAS_HEIGHT, DEFAULT_CANVAS_WIDTH


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for template layout (immutable).

    Attributes:
        canvas_width: Page width in canvas pixels
        canvas_height: Page height in canvas pixels
        padding: Gap between containers and around the grid (px)
        container_aspect_ratio: Width / height of multi-image containers
        single_fraction: Share of each canvas axis a lone image fills
        z_index_start: Paint-order key of the first placed image

    Example:
        >>> config = LayoutConfig()
        >>> config.container_aspect_ratio
        0.75
    """

    canvas_width: int = DEFAULT_CANVAS_WIDTH
    canvas_height: int = DEFAULT_CANVAS_HEIGHT
    padding: float = 40
    container_aspect_ratio: float = 3 / 4  # Portrait containers
    single_fraction: float = 0.7
    z_index_start: int = 1

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.canvas_width <= 0:
            raise ValueError(f"canvas_width must be positive: {self.canvas_width}")
        if self.canvas_height <= 0:
            raise ValueError(f"canvas_height must be positive: {self.canvas_height}")
        if self.padding < 0:
            raise ValueError(f"padding must be non-negative: {self.padding}")
        if self.container_aspect_ratio <= 0:
            raise ValueError(
                f"container_aspect_ratio must be positive: {self.container_aspect_ratio}"
            )
        if not 0 < self.single_fraction <= 1:
            raise ValueError(f"single_fraction must be in (0, 1]: {self.single_fraction}")
        if self.canvas_width <= 4 * self.padding:
            raise ValueError("Padding exceeds canvas width")
