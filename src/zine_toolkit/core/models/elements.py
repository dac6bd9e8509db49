"""
Module: elements

Purpose:
    Provides the Element dataclass - a single text or image object placed
    on a page with position, size, paint order, filter and crop.

Key Classes:
    - ElementKind: text | image
    - Element: Immutable element value
    - ElementDraft: Element fields before the backend assigns an id

Dependencies:
    - dataclasses (std)
    - core.errors: ValidationError
    - core.models.crop: CropInsets

Used By:
    - core.models.pages.Page
    - editor (all stores)
    - layout.autolayout
    - output.snapshot / output.rasterizer
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from ..errors import ValidationError
from .crop import CropInsets


NO_FILTER = "none"


class ElementKind(str, Enum):
    """Kind of content an element carries."""

    TEXT = "text"
    IMAGE = "image"


@dataclass(frozen=True)
class ElementDraft:
    """
    Element fields awaiting an identity from the persistence collaborator.

    Attributes mirror Element, minus id.
    """

    page_id: str
    kind: ElementKind
    content: str
    position_x: float = 0
    position_y: float = 0
    width: Optional[float] = None
    height: Optional[float] = None
    scale: float = 1.0
    z_index: int = 1
    filter: str = NO_FILTER
    crop: Optional[CropInsets] = None

    def to_record(self) -> dict[str, Any]:
        """Persistence record (no id)."""
        return {
            "page_id": self.page_id,
            "kind": self.kind.value,
            "content": self.content,
            "position_x": self.position_x,
            "position_y": self.position_y,
            "width": self.width,
            "height": self.height,
            "scale": self.scale,
            "z_index": self.z_index,
            "filter": self.filter,
            "crop": self.crop.to_dict() if self.crop else None,
        }


@dataclass(frozen=True)
class Element:
    """
    A text or image object placed on a page (immutable).

    Positions are canvas-space pixels measured from the page's top-left.
    A width/height of None means "use the intrinsic size".

    Attributes:
        id: Backend-assigned identifier
        page_id: Owning page
        kind: ElementKind.TEXT or ElementKind.IMAGE
        content: Markup string (text) or image URI (image)
        position_x: Left edge in canvas pixels
        position_y: Top edge in canvas pixels
        width: Width in canvas pixels, or None
        height: Height in canvas pixels, or None
        scale: Extra scale factor applied at render time
        z_index: Paint-order key; higher paints later
        filter: Filter preset name or "none"
        crop: Optional inset rectangle (images only)

    Example:
        >>> el = Element("e1", "p1", ElementKind.IMAGE, "data:...", 10, 20, 300, 300)
        >>> el.with_changes(position_x=50).position_x
        50
    """

    id: str
    page_id: str
    kind: ElementKind
    content: str
    position_x: float = 0
    position_y: float = 0
    width: Optional[float] = None
    height: Optional[float] = None
    scale: float = 1.0
    z_index: int = 1
    filter: str = NO_FILTER
    crop: Optional[CropInsets] = None

    def __post_init__(self) -> None:
        """Validate stored size and crop."""
        for name in ("width", "height"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValidationError(f"Element {self.id} {name} must be > 0: {value}")
        if self.crop is not None and self.has_size:
            self.crop.validate_for(self.width, self.height)

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_text(self) -> bool:
        return self.kind is ElementKind.TEXT

    @property
    def is_image(self) -> bool:
        return self.kind is ElementKind.IMAGE

    @property
    def has_size(self) -> bool:
        """True when both width and height are stored."""
        return self.width is not None and self.height is not None

    def visible_size(self) -> Optional[Tuple[float, float]]:
        """
        Size of the visible region after cropping.

        Returns:
            (width, height), or None when the element has no stored size
        """
        if not self.has_size:
            return None
        if self.crop is None:
            return (self.width, self.height)
        return self.crop.visible_size(self.width, self.height)

    # ─────────────────────────────────────────────────────────────────────────
    # Copy-on-write updates
    # ─────────────────────────────────────────────────────────────────────────

    def with_changes(self, **changes: Any) -> Element:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_draft(self, page_id: Optional[str] = None, **overrides: Any) -> ElementDraft:
        """
        Detach this element into a draft for re-creation under a new identity.

        Args:
            page_id: Target page (defaults to this element's page)
            **overrides: Field overrides (e.g. z_index, position_x)
        """
        draft = ElementDraft(
            page_id=page_id or self.page_id,
            kind=self.kind,
            content=self.content,
            position_x=self.position_x,
            position_y=self.position_y,
            width=self.width,
            height=self.height,
            scale=self.scale,
            z_index=self.z_index,
            filter=self.filter,
            crop=self.crop,
        )
        return replace(draft, **overrides) if overrides else draft

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_record(self) -> dict[str, Any]:
        record = self.to_draft().to_record()
        record["id"] = self.id
        return record

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> Element:
        """
        Build an element from a persistence record.

        Missing filter/scale fall back to defaults, matching what older
        records hold.
        """
        return cls(
            id=str(data["id"]),
            page_id=str(data["page_id"]),
            kind=ElementKind(data.get("kind") or data.get("type")),
            content=data.get("content") or "",
            position_x=data.get("position_x", 0) or 0,
            position_y=data.get("position_y", 0) or 0,
            width=data.get("width"),
            height=data.get("height"),
            scale=data.get("scale", 1.0) or 1.0,
            z_index=int(data.get("z_index", 0) or 0),
            filter=data.get("filter") or NO_FILTER,
            crop=CropInsets.from_dict(data.get("crop")),
        )
