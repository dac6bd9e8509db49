"""
Module: crop

Purpose:
    Provides the CropInsets dataclass - an inset rectangle measured inward
    from each edge of an image element. The visible region of a cropped
    element is what remains after the insets are removed; the underlying
    image is shifted by (-left, -top) inside a clip of that size.

Key Functions:
    - CropInsets.visible_size(width, height): Size of the visible region
    - CropInsets.validate_for(width, height): Check insets fit the element
    - CropInsets.clamped_to(width, height): Nearest valid insets
    - CropInsets.to_dict() / from_dict(): JSON serialization

Dependencies:
    - dataclasses (std)

Used By:
    - core.models.elements.Element
    - editor.interaction (crop gestures)
    - output.rasterizer (clip region)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from ..errors import ValidationError


@dataclass(frozen=True, slots=True)
class CropInsets:
    """
    Inset rectangle for cropping an image element.

    Attributes:
        top: Pixels hidden at the top edge
        right: Pixels hidden at the right edge
        bottom: Pixels hidden at the bottom edge
        left: Pixels hidden at the left edge

    Invariants:
        - every inset >= 0
        - top + bottom < height and left + right < width
          (checked against an element size by validate_for)

    Example:
        >>> crop = CropInsets(top=10, right=10, bottom=10, left=10)
        >>> crop.visible_size(300, 300)
        (280, 280)
    """

    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0

    def __post_init__(self) -> None:
        """Validate insets on construction."""
        for name in ("top", "right", "bottom", "left"):
            value = getattr(self, name)
            if value < 0:
                raise ValidationError(f"{name} inset must be >= 0: {value}")

    # ─────────────────────────────────────────────────────────────────────────
    # Geometry
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_empty(self) -> bool:
        """True when no edge is cropped."""
        return self.top == 0 and self.right == 0 and self.bottom == 0 and self.left == 0

    def visible_size(self, width: float, height: float) -> Tuple[float, float]:
        """
        Size of the region left visible on a width x height element.

        Args:
            width: Element width in canvas pixels
            height: Element height in canvas pixels

        Returns:
            (visible_width, visible_height)
        """
        return (width - self.left - self.right, height - self.top - self.bottom)

    def validate_for(self, width: float, height: float) -> None:
        """
        Check the insets leave a non-empty region on the element.

        Raises:
            ValidationError: If top+bottom >= height or left+right >= width
        """
        if self.top + self.bottom >= height:
            raise ValidationError(
                f"vertical insets {self.top}+{self.bottom} exceed height {height}"
            )
        if self.left + self.right >= width:
            raise ValidationError(
                f"horizontal insets {self.left}+{self.right} exceed width {width}"
            )

    def clamped_to(
        self,
        width: float,
        height: float,
        *,
        min_visible: float = 1,
    ) -> CropInsets:
        """
        Nearest insets that keep at least min_visible pixels on each axis.

        Each pair is shrunk proportionally when it eats into the minimum
        visible span.
        """
        top, bottom = _clamp_pair(self.top, self.bottom, height - min_visible)
        left, right = _clamp_pair(self.left, self.right, width - min_visible)
        return CropInsets(top=top, right=right, bottom=bottom, left=left)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, float]:
        return {
            "top": self.top,
            "right": self.right,
            "bottom": self.bottom,
            "left": self.left,
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional[CropInsets]:
        """Build insets from a record; None or an all-missing record gives None."""
        if not data:
            return None
        return cls(
            top=max(0, data.get("top", 0) or 0),
            right=max(0, data.get("right", 0) or 0),
            bottom=max(0, data.get("bottom", 0) or 0),
            left=max(0, data.get("left", 0) or 0),
        )


def _clamp_pair(first: float, second: float, budget: float) -> Tuple[float, float]:
    budget = max(0, budget)
    total = first + second
    if total <= budget:
        return first, second
    if total == 0:
        return 0, 0
    ratio = budget / total
    return first * ratio, second * ratio
