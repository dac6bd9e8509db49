"""
Module: store.repository

Purpose:
    Abstract interface for the persistence collaborator. The backend is an
    opaque async CRUD store for documents, pages and elements; the editor
    only relies on the operations declared here.

Key Classes:
    - ZineRepository: Abstract async CRUD interface

Key Functions:
    - element_changes_record(): Convert model-level field changes to a record

Dependencies:
    - core.models: Document, Page, Element, ElementDraft
    - core.errors: PersistenceError

Used By:
    - editor (all stores)
    - layout.autolayout
    - output.pipeline (preview persistence)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from zine_toolkit.core.models import (
    CropInsets,
    Document,
    Element,
    ElementDraft,
    Page,
    Visibility,
)


class ZineRepository(ABC):
    """
    Abstract async CRUD store for documents, pages and elements.

    Implementations raise PersistenceError for every backend failure,
    including unknown ids and references to missing parents.
    """

    # ─────────────────────────────────────────────────────────────────────────
    # Documents
    # ─────────────────────────────────────────────────────────────────────────

    @abstractmethod
    async def insert_document(
        self,
        title: str,
        description: str = "",
        owner: str = "",
        visibility: Visibility = Visibility.PRIVATE,
    ) -> Document:
        """Insert a document and return it with its new id."""

    @abstractmethod
    async def get_document(self, document_id: str) -> Document:
        """
        Fetch a document by id.

        Raises:
            PersistenceError: If no such document exists
        """

    @abstractmethod
    async def list_documents(self, owner: Optional[str] = None) -> list[Document]:
        """Documents (optionally filtered by owner), newest first."""

    @abstractmethod
    async def update_document(self, document_id: str, **changes: Any) -> Document:
        """Partial update by id; returns the updated document."""

    @abstractmethod
    async def delete_document(self, document_id: str) -> None:
        """Delete a document and cascade to its pages and elements."""

    # ─────────────────────────────────────────────────────────────────────────
    # Pages
    # ─────────────────────────────────────────────────────────────────────────

    @abstractmethod
    async def insert_page(self, document_id: str, ordinal: Optional[int] = None) -> Page:
        """
        Insert an empty page.

        Args:
            document_id: Owning document
            ordinal: Position; None appends after the current last page

        Raises:
            PersistenceError: If the document does not exist
        """

    @abstractmethod
    async def get_page(self, page_id: str) -> Page:
        """Fetch a page with its elements."""

    @abstractmethod
    async def list_pages(self, document_id: str) -> list[Page]:
        """Pages of a document ordered by ordinal, then creation, with elements."""

    @abstractmethod
    async def update_page(self, page_id: str, **changes: Any) -> Page:
        """Partial update by id (ordinal, preview)."""

    @abstractmethod
    async def delete_page(self, page_id: str) -> None:
        """Delete a page and cascade to its elements."""

    @abstractmethod
    async def upsert_pages(self, records: Iterable[Mapping[str, Any]]) -> list[Page]:
        """
        Best-effort batch upsert with conflict on id.

        Existing rows get the given fields; unknown ids are inserted when the
        record carries a document_id. Records that cannot be written are
        skipped and logged.

        Returns:
            Pages actually written
        """

    # ─────────────────────────────────────────────────────────────────────────
    # Elements
    # ─────────────────────────────────────────────────────────────────────────

    @abstractmethod
    async def insert_element(self, draft: ElementDraft) -> Element:
        """
        Insert an element and return it with its new id.

        Raises:
            PersistenceError: If draft.page_id does not exist
        """

    @abstractmethod
    async def list_elements(self, page_id: str) -> list[Element]:
        """Elements of a page in creation order."""

    @abstractmethod
    async def update_element(self, element_id: str, **changes: Any) -> Element:
        """Partial update by id; values are model-level (CropInsets, enums)."""

    @abstractmethod
    async def delete_element(self, element_id: str) -> None:
        """Delete an element by id."""


def element_changes_record(changes: Mapping[str, Any]) -> dict[str, Any]:
    """
    Convert model-level element changes to record values.

    Example:
        >>> element_changes_record({"crop": CropInsets(1, 2, 3, 4)})
        {'crop': {'top': 1, 'right': 2, 'bottom': 3, 'left': 4}}
    """
    record: dict[str, Any] = {}
    for key, value in changes.items():
        if isinstance(value, CropInsets):
            value = value.to_dict()
        elif isinstance(value, Enum):
            value = value.value
        record[key] = value
    return record
