"""
Module: pages

Purpose:
    Provides the Page and Document dataclasses. A document owns an ordered
    sequence of pages; a page owns its elements and a cached preview raster.

Key Classes:
    - Visibility: public | private
    - Document: Top-level container
    - Page: Ordered unit of a document

Dependencies:
    - dataclasses (std)
    - core.models.elements: Element

Used By:
    - store (records)
    - editor.state / editor.pages
    - output.snapshot
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional

from .elements import Element


class Visibility(str, Enum):
    """Who can see a document."""

    PUBLIC = "public"
    PRIVATE = "private"

    def toggled(self) -> Visibility:
        return Visibility.PRIVATE if self is Visibility.PUBLIC else Visibility.PUBLIC


@dataclass(frozen=True)
class Document:
    """
    Top-level container owning an ordered sequence of pages (immutable).

    Attributes:
        id: Backend-assigned identifier
        title: Display title
        description: Free-form description
        owner: Owning user identifier
        visibility: Visibility.PUBLIC or Visibility.PRIVATE
        created_at: Creation timestamp
    """

    id: str
    title: str
    description: str = ""
    owner: str = ""
    visibility: Visibility = Visibility.PRIVATE
    created_at: datetime = field(default_factory=datetime.now)

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "owner": self.owner,
            "visibility": self.visibility.value,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> Document:
        created = data.get("created_at")
        if isinstance(created, str):
            created = datetime.fromisoformat(created)
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            description=data.get("description") or "",
            owner=data.get("owner") or "",
            visibility=Visibility(data.get("visibility") or Visibility.PRIVATE.value),
            created_at=created or datetime.now(),
        )


@dataclass(frozen=True)
class Page:
    """
    Ordered unit of a document (immutable).

    Elements are kept in insertion order; render order is derived from
    z_index by editor.layering.render_order.

    Attributes:
        id: Backend-assigned identifier
        document_id: Owning document
        ordinal: Position within the document (0-indexed)
        preview: Cached compressed preview raster, or None
        elements: Elements on this page, in insertion order

    Example:
        >>> page = Page(id="p1", document_id="d1", ordinal=0)
        >>> page.is_empty
        True
    """

    id: str
    document_id: str
    ordinal: int = 0
    preview: Optional[bytes] = None
    elements: tuple[Element, ...] = ()

    @property
    def is_empty(self) -> bool:
        return len(self.elements) == 0

    @property
    def element_count(self) -> int:
        return len(self.elements)

    def find(self, element_id: str) -> Optional[Element]:
        """Element with the given id, or None."""
        for element in self.elements:
            if element.id == element_id:
                return element
        return None

    # ─────────────────────────────────────────────────────────────────────────
    # Replace-by-id updates
    # ─────────────────────────────────────────────────────────────────────────

    def with_elements(self, elements: Iterable[Element]) -> Page:
        return replace(self, elements=tuple(elements))

    def with_element_added(self, element: Element) -> Page:
        return replace(self, elements=self.elements + (element,))

    def with_element_updated(
        self,
        element_id: str,
        update: Callable[[Element], Element],
    ) -> Page:
        """Apply update to the element with element_id; unknown ids are ignored."""
        return replace(
            self,
            elements=tuple(
                update(el) if el.id == element_id else el for el in self.elements
            ),
        )

    def with_element_removed(self, element_id: str) -> Page:
        return replace(
            self,
            elements=tuple(el for el in self.elements if el.id != element_id),
        )

    def with_changes(self, **changes: Any) -> Page:
        return replace(self, **changes)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_record(self) -> dict[str, Any]:
        """Page row without its elements."""
        return {
            "id": self.id,
            "document_id": self.document_id,
            "ordinal": self.ordinal,
            "preview": self.preview,
        }

    @classmethod
    def from_record(
        cls,
        data: Mapping[str, Any],
        elements: Iterable[Element] = (),
    ) -> Page:
        return cls(
            id=str(data["id"]),
            document_id=str(data["document_id"]),
            ordinal=int(data.get("ordinal", 0) or 0),
            preview=data.get("preview"),
            elements=tuple(elements),
        )
