"""
Module: editor.pages

Purpose:
    Page Store: loading a document's pages into editor state, creating,
    deleting and reordering pages, navigation and preview caching.

Key Classes:
    - PageStore: Page operations over EditorState and a repository

Dependencies:
    - editor.state: EditorState
    - store.repository: ZineRepository

Used By:
    - editor.clipboard (page paste)
    - layout.autolayout
    - output.pipeline (preview persistence)
    - editor.session
"""

from __future__ import annotations

import logging
from typing import List, Optional

from zine_toolkit.core.errors import PersistenceError
from zine_toolkit.core.models import Page
from zine_toolkit.store.repository import ZineRepository

from .state import EditorState

logger = logging.getLogger(__name__)


class PageStore:
    """
    Page operations for the open document.

    Example:
        >>> pages = PageStore(state, repository)
        >>> asyncio.run(pages.load_document(document_id))
    """

    def __init__(self, state: EditorState, repository: ZineRepository) -> None:
        self.state = state
        self.repository = repository

    async def load_document(self, document_id: str) -> List[Page]:
        """
        Load every page of a document with its elements.

        A document with no pages gets one empty page so there is always
        something to edit.

        Raises:
            PersistenceError: If the backend read fails
        """
        pages = await self.repository.list_pages(document_id)
        if not pages:
            pages = [await self.repository.insert_page(document_id, 0)]
        self.state.document_id = document_id
        self.state.current_index = 0
        self.state.clear_selection()
        self.state.set_pages(pages)
        self.state.set_current_index(0)
        logger.info(f"Loaded document {document_id} with {len(pages)} pages")
        return pages

    async def add_page(self) -> Optional[Page]:
        """Append an empty page and make it current."""
        document_id = self.state.document_id
        if document_id is None:
            return None
        try:
            page = await self.repository.insert_page(document_id)
        except PersistenceError as e:
            logger.error(f"Error creating new page: {e}")
            return None
        self.state.insert_page(self.state.page_count, page)
        self.state.set_current_index(self.state.page_count - 1)
        return page

    async def insert_page_after(self, index: int) -> Page:
        """
        Create an empty page at index + 1 and reflect it immediately.

        Following pages keep their ordinals until renumber() runs.

        Raises:
            PersistenceError: If the backend insert fails
        """
        page = await self.repository.insert_page(self.state.document_id, index + 1)
        self.state.insert_page(index + 1, page)
        return page

    async def delete_page(self, page_id: str) -> bool:
        """Delete a page with its elements; remaining pages are renumbered."""
        if self.state.page_index(page_id) < 0:
            return False
        try:
            await self.repository.delete_page(page_id)
        except PersistenceError as e:
            logger.error(f"Error deleting page {page_id}: {e}")
            return False
        self.state.remove_page(page_id)
        await self.renumber()
        return True

    async def reorder_pages(self, page_ids: List[str]) -> bool:
        """
        Put pages in the given order.

        Args:
            page_ids: Every page id of the open document, in the new order
        """
        if sorted(page_ids) != sorted(page.id for page in self.state.pages):
            logger.warning("Reorder ignored: ids do not match the open pages")
            return False
        current = self.state.current_page
        by_id = {page.id: page for page in self.state.pages}
        self.state.set_pages([by_id[pid] for pid in page_ids])
        if current is not None:
            self.state.set_current_index(self.state.page_index(current.id))
        await self.renumber()
        return True

    async def renumber(self, start: int = 0) -> None:
        """
        Set ordinals to list positions from start onward.

        Applied to state at once, then persisted with a best-effort batch
        upsert. Duplicate ordinals left by interrupted inserts are resolved.
        """
        records = []
        for index, page in enumerate(self.state.pages):
            if index < start or page.ordinal == index:
                continue
            self.state.update_page(page.id, lambda p, i=index: p.with_changes(ordinal=i))
            records.append({"id": page.id, "document_id": page.document_id, "ordinal": index})
        if not records:
            return
        try:
            written = await self.repository.upsert_pages(records)
        except PersistenceError as e:
            logger.error(f"Error renumbering pages: {e}")
            return
        if len(written) != len(records):
            logger.warning(f"Renumbered {len(written)} of {len(records)} pages")

    def set_current_page(self, index: int) -> None:
        """Navigate to a page, leaving any text edit first."""
        self.state.clear_text_editing()
        self.state.clear_selection()
        self.state.set_current_index(index)

    async def save_preview(self, page_id: str, preview: bytes) -> bool:
        """Cache a compressed raster as the page's preview."""
        self.state.update_page(page_id, lambda p: p.with_changes(preview=preview))
        try:
            await self.repository.update_page(page_id, preview=preview)
        except PersistenceError as e:
            logger.error(f"Error saving preview for page {page_id}: {e}")
            return False
        return True
