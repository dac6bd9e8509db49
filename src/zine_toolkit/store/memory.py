"""
Module: store.memory

Purpose:
    In-process implementation of ZineRepository. Rows are plain dicts keyed
    by id; every call suspends once so callers observe the same interleaving
    they would against a networked backend.

Key Classes:
    - InMemoryRepository: Dict-backed async CRUD store

Dependencies:
    - asyncio (std)
    - store.repository: ZineRepository

Used By:
    - store.json_store.JsonFileRepository
    - tests
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Iterable, Mapping, Optional

from zine_toolkit.core.errors import PersistenceError
from zine_toolkit.core.models import (
    Document,
    Element,
    ElementDraft,
    Page,
    Visibility,
)

from .repository import ZineRepository, element_changes_record

logger = logging.getLogger(__name__)

_PAGE_FIELDS = {"ordinal", "preview"}
_DOCUMENT_FIELDS = {"title", "description", "owner", "visibility"}
_ELEMENT_FIELDS = {
    "content", "position_x", "position_y", "width", "height",
    "scale", "z_index", "filter", "crop",
}


class InMemoryRepository(ZineRepository):
    """
    Dict-backed repository.

    Example:
        >>> repo = InMemoryRepository()
        >>> doc = asyncio.run(repo.insert_document("My zine"))
    """

    def __init__(self) -> None:
        self._documents: Dict[str, dict[str, Any]] = {}
        self._pages: Dict[str, dict[str, Any]] = {}
        self._elements: Dict[str, dict[str, Any]] = {}
        self._sequence = itertools.count()

    # ─────────────────────────────────────────────────────────────────────────
    # Hooks
    # ─────────────────────────────────────────────────────────────────────────

    async def _suspend(self) -> None:
        """One scheduling point per backend round trip."""
        await asyncio.sleep(0)

    def _commit(self) -> None:
        """Called after every successful write. No-op in memory."""

    def _new_id(self) -> str:
        return uuid.uuid4().hex

    # ─────────────────────────────────────────────────────────────────────────
    # Documents
    # ─────────────────────────────────────────────────────────────────────────

    async def insert_document(
        self,
        title: str,
        description: str = "",
        owner: str = "",
        visibility: Visibility = Visibility.PRIVATE,
    ) -> Document:
        await self._suspend()
        row = {
            "id": self._new_id(),
            "title": title,
            "description": description,
            "owner": owner,
            "visibility": Visibility(visibility).value,
            "created_at": datetime.now().isoformat(),
            "_seq": next(self._sequence),
        }
        self._documents[row["id"]] = row
        self._commit()
        return Document.from_record(row)

    async def get_document(self, document_id: str) -> Document:
        await self._suspend()
        return Document.from_record(self._document_row(document_id))

    async def list_documents(self, owner: Optional[str] = None) -> list[Document]:
        await self._suspend()
        rows = [
            row for row in self._documents.values()
            if owner is None or row["owner"] == owner
        ]
        rows.sort(key=lambda r: r["_seq"], reverse=True)
        return [Document.from_record(row) for row in rows]

    async def update_document(self, document_id: str, **changes: Any) -> Document:
        await self._suspend()
        row = self._document_row(document_id)
        _reject_unknown_fields(changes, _DOCUMENT_FIELDS, "document")
        row.update(element_changes_record(changes))
        self._commit()
        return Document.from_record(row)

    async def delete_document(self, document_id: str) -> None:
        await self._suspend()
        self._document_row(document_id)
        for page_id in [pid for pid, p in self._pages.items() if p["document_id"] == document_id]:
            self._drop_page(page_id)
        del self._documents[document_id]
        self._commit()
        logger.debug(f"Deleted document {document_id} with its pages")

    # ─────────────────────────────────────────────────────────────────────────
    # Pages
    # ─────────────────────────────────────────────────────────────────────────

    async def insert_page(self, document_id: str, ordinal: Optional[int] = None) -> Page:
        await self._suspend()
        self._document_row(document_id)
        if ordinal is None:
            ordinals = [
                p["ordinal"] for p in self._pages.values()
                if p["document_id"] == document_id
            ]
            ordinal = max(ordinals, default=-1) + 1
        row = {
            "id": self._new_id(),
            "document_id": document_id,
            "ordinal": ordinal,
            "preview": None,
            "_seq": next(self._sequence),
        }
        self._pages[row["id"]] = row
        self._commit()
        return Page.from_record(row)

    async def get_page(self, page_id: str) -> Page:
        await self._suspend()
        return self._page_model(self._page_row(page_id))

    async def list_pages(self, document_id: str) -> list[Page]:
        await self._suspend()
        rows = [p for p in self._pages.values() if p["document_id"] == document_id]
        rows.sort(key=lambda r: (r["ordinal"], r["_seq"]))
        return [self._page_model(row) for row in rows]

    async def update_page(self, page_id: str, **changes: Any) -> Page:
        await self._suspend()
        row = self._page_row(page_id)
        _reject_unknown_fields(changes, _PAGE_FIELDS, "page")
        row.update(changes)
        self._commit()
        return self._page_model(row)

    async def delete_page(self, page_id: str) -> None:
        await self._suspend()
        self._page_row(page_id)
        self._drop_page(page_id)
        self._commit()

    async def upsert_pages(self, records: Iterable[Mapping[str, Any]]) -> list[Page]:
        await self._suspend()
        written: list[Page] = []
        for record in records:
            page_id = record.get("id")
            if page_id in self._pages:
                row = self._pages[page_id]
                row.update({k: v for k, v in record.items() if k in _PAGE_FIELDS})
            elif page_id and record.get("document_id") in self._documents:
                row = {
                    "id": page_id,
                    "document_id": record["document_id"],
                    "ordinal": record.get("ordinal", 0),
                    "preview": record.get("preview"),
                    "_seq": next(self._sequence),
                }
                self._pages[page_id] = row
            else:
                logger.warning(f"Skipping page upsert without a known id or document: {record!r}")
                continue
            written.append(self._page_model(row))
        self._commit()
        return written

    # ─────────────────────────────────────────────────────────────────────────
    # Elements
    # ─────────────────────────────────────────────────────────────────────────

    async def insert_element(self, draft: ElementDraft) -> Element:
        await self._suspend()
        if draft.page_id not in self._pages:
            raise PersistenceError(f"Cannot insert element: page {draft.page_id} not found")
        row = draft.to_record()
        row["id"] = self._new_id()
        row["_seq"] = next(self._sequence)
        self._elements[row["id"]] = row
        self._commit()
        return Element.from_record(row)

    async def list_elements(self, page_id: str) -> list[Element]:
        await self._suspend()
        return self._elements_for(page_id)

    async def update_element(self, element_id: str, **changes: Any) -> Element:
        await self._suspend()
        row = self._elements.get(element_id)
        if row is None:
            raise PersistenceError(f"Element not found: {element_id}")
        _reject_unknown_fields(changes, _ELEMENT_FIELDS, "element")
        row.update(element_changes_record(changes))
        self._commit()
        return Element.from_record(row)

    async def delete_element(self, element_id: str) -> None:
        await self._suspend()
        if self._elements.pop(element_id, None) is None:
            raise PersistenceError(f"Element not found: {element_id}")
        self._commit()

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    def _document_row(self, document_id: str) -> dict[str, Any]:
        row = self._documents.get(document_id)
        if row is None:
            raise PersistenceError(f"Document not found: {document_id}")
        return row

    def _page_row(self, page_id: str) -> dict[str, Any]:
        row = self._pages.get(page_id)
        if row is None:
            raise PersistenceError(f"Page not found: {page_id}")
        return row

    def _page_model(self, row: Mapping[str, Any]) -> Page:
        return Page.from_record(row, self._elements_for(row["id"]))

    def _elements_for(self, page_id: str) -> list[Element]:
        rows = [e for e in self._elements.values() if e["page_id"] == page_id]
        rows.sort(key=lambda r: r["_seq"])
        return [Element.from_record(row) for row in rows]

    def _drop_page(self, page_id: str) -> None:
        for element_id in [eid for eid, e in self._elements.items() if e["page_id"] == page_id]:
            del self._elements[element_id]
        del self._pages[page_id]


def _reject_unknown_fields(changes: Mapping[str, Any], allowed: set[str], kind: str) -> None:
    unknown = set(changes) - allowed
    if unknown:
        raise PersistenceError(f"Unknown {kind} fields: {sorted(unknown)}")
