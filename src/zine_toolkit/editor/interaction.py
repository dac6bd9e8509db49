"""
Module: editor.interaction

Purpose:
    Pointer-gesture geometry for the canvas: zoom, drag, corner resize and
    crop handles, plus the text edit session. Everything here is pure maths
    over canvas pixels; stores apply the results.

Key Classes:
    - ZoomControl: Clamped zoom scale
    - ResizeCorner: Corner a resize gesture starts from
    - ResizeResult: Geometry produced by a resize
    - CropSide: Side a crop handle moves
    - TextEditSession: Edit-mode lifecycle for one text element

Key Functions:
    - canvas_delta(): Screen delta to canvas delta
    - clamp_position(): Keep an element inside the canvas
    - compute_resize(): Anchored corner resize with size floor
    - compute_crop(): One-sided crop gesture
    - intrinsic_display_size(): Natural size fitted into a box

Dependencies:
    - editor.config: EditorConfig
    - core.models: CropInsets

Used By:
    - editor.elements
    - editor.clipboard
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Tuple

from zine_toolkit.core.models import CropInsets

from .config import EditorConfig

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Zoom and drag
# ─────────────────────────────────────────────────────────────────────────────

class ZoomControl:
    """
    Zoom scale clamped to the configured range.

    Example:
        >>> zoom = ZoomControl()
        >>> zoom.scale
        0.5
        >>> zoom.on_wheel(-500, modifier=True)
        1.0
    """

    def __init__(self, config: Optional[EditorConfig] = None) -> None:
        self.config = config or EditorConfig()
        self.scale = self.config.default_zoom

    def set_scale(self, scale: float) -> float:
        self.scale = min(self.config.max_zoom, max(self.config.min_zoom, scale))
        return self.scale

    def on_wheel(self, delta_y: float, *, modifier: bool) -> float:
        """Wheel zooms only with the modifier held; otherwise it scrolls."""
        if modifier:
            self.set_scale(self.scale - delta_y * self.config.zoom_wheel_step)
        return self.scale

    def reset(self) -> float:
        self.scale = self.config.default_zoom
        return self.scale


def canvas_delta(dx: float, dy: float, zoom: float) -> Tuple[float, float]:
    """Screen-space pointer delta converted to canvas pixels."""
    return (dx / zoom, dy / zoom)


def clamp_position(
    x: float,
    y: float,
    width: float,
    height: float,
    canvas_width: float,
    canvas_height: float,
) -> Tuple[float, float]:
    """
    Clamp a top-left position into [0, canvas - size] on both axes.

    An element larger than the canvas is pinned to 0.

    Example:
        >>> clamp_position(850, 0, 200, 100, 900, 1200)
        (700, 0)
    """
    return (
        min(max(0, x), max(0, canvas_width - width)),
        min(max(0, y), max(0, canvas_height - height)),
    )


def intrinsic_display_size(
    natural_width: float,
    natural_height: float,
    max_size: float,
) -> Tuple[float, float]:
    """Natural size scaled down (never up) to fit a max_size square."""
    if natural_width <= 0 or natural_height <= 0:
        return (max_size, max_size)
    ratio = min(1.0, max_size / natural_width, max_size / natural_height)
    return (natural_width * ratio, natural_height * ratio)


# ─────────────────────────────────────────────────────────────────────────────
# Resize
# ─────────────────────────────────────────────────────────────────────────────

class ResizeCorner(str, Enum):
    TOP_LEFT = "topLeft"
    TOP_RIGHT = "topRight"
    BOTTOM_LEFT = "bottomLeft"
    BOTTOM_RIGHT = "bottomRight"

    @property
    def moves_left_edge(self) -> bool:
        return self in (ResizeCorner.TOP_LEFT, ResizeCorner.BOTTOM_LEFT)

    @property
    def moves_top_edge(self) -> bool:
        return self in (ResizeCorner.TOP_LEFT, ResizeCorner.TOP_RIGHT)


@dataclass(frozen=True)
class ResizeResult:
    width: float
    height: float
    position_x: float
    position_y: float


def compute_resize(
    corner: ResizeCorner,
    start_width: float,
    start_height: float,
    start_x: float,
    start_y: float,
    dx: float,
    dy: float,
    *,
    preserve_aspect: bool = True,
    min_size: float = 50,
) -> Optional[ResizeResult]:
    """
    Resize from a corner keeping the diagonally opposite corner fixed.

    dx, dy are canvas-space pointer deltas since the gesture started. With
    preserve_aspect the dominant axis drives the other through the starting
    aspect ratio.

    Returns:
        New geometry, or None when either side would drop below min_size
    """
    corner = ResizeCorner(corner)
    width_change = -dx if corner.moves_left_edge else dx
    height_change = -dy if corner.moves_top_edge else dy

    width = start_width + width_change
    height = start_height + height_change

    if preserve_aspect and start_width > 0 and start_height > 0:
        aspect = start_width / start_height
        if abs(width_change) / start_width >= abs(height_change) / start_height:
            height = width / aspect
        else:
            width = height * aspect

    if width < min_size or height < min_size:
        return None

    x = start_x + (start_width - width) if corner.moves_left_edge else start_x
    y = start_y + (start_height - height) if corner.moves_top_edge else start_y
    return ResizeResult(width=width, height=height, position_x=x, position_y=y)


# ─────────────────────────────────────────────────────────────────────────────
# Crop handles
# ─────────────────────────────────────────────────────────────────────────────

class CropSide(str, Enum):
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"


def compute_crop(
    side: CropSide,
    start: Optional[CropInsets],
    dx: float,
    dy: float,
    width: float,
    height: float,
    *,
    min_visible: float = 20,
) -> CropInsets:
    """
    Move one crop side by a canvas-space pointer delta.

    Dragging a handle inward grows that side's inset. The opposite inset is
    untouched and at least min_visible pixels stay visible on the axis.

    Example:
        >>> compute_crop(CropSide.LEFT, None, 30, 0, 300, 300).left
        30
    """
    start = start or CropInsets()
    side = CropSide(side)

    if side is CropSide.LEFT:
        left = _clamp(start.left + dx, 0, width - min_visible - start.right)
        return CropInsets(top=start.top, right=start.right, bottom=start.bottom, left=left)
    if side is CropSide.RIGHT:
        right = _clamp(start.right - dx, 0, width - min_visible - start.left)
        return CropInsets(top=start.top, right=right, bottom=start.bottom, left=start.left)
    if side is CropSide.TOP:
        top = _clamp(start.top + dy, 0, height - min_visible - start.bottom)
        return CropInsets(top=top, right=start.right, bottom=start.bottom, left=start.left)
    bottom = _clamp(start.bottom - dy, 0, height - min_visible - start.top)
    return CropInsets(top=start.top, right=start.right, bottom=bottom, left=start.left)


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(low, value), max(low, high))


# ─────────────────────────────────────────────────────────────────────────────
# Text editing
# ─────────────────────────────────────────────────────────────────────────────

ContentSink = Callable[[str, str], Awaitable[object]]


class TextEditSession:
    """
    Edit-mode lifecycle for text elements.

    Content changes stream to the sink on every edit; blur sends the final
    content once more and leaves edit mode. While an element is being edited
    it cannot be dragged.
    """

    def __init__(self, sink: ContentSink) -> None:
        self._sink = sink
        self.element_id: Optional[str] = None
        self.content: str = ""

    @property
    def active(self) -> bool:
        return self.element_id is not None

    def is_editing(self, element_id: str) -> bool:
        return self.element_id == element_id

    def begin(self, element_id: str, content: str) -> None:
        self.element_id = element_id
        self.content = content
        logger.debug(f"Editing text element {element_id}")

    async def on_change(self, content: str) -> None:
        if self.element_id is None:
            return
        self.content = content
        await self._sink(self.element_id, content)

    async def on_blur(self) -> None:
        if self.element_id is None:
            return
        element_id, content = self.element_id, self.content
        self.element_id = None
        await self._sink(element_id, content)
