"""
Module: editor.documents

Purpose:
    Document lifecycle: create, list, delete (with confirmation) and
    visibility toggling.
"""

from __future__ import annotations

import inspect
import logging
from typing import Awaitable, Callable, List, Optional, Union

from zine_toolkit.core.errors import PersistenceError
from zine_toolkit.core.models import Document, Visibility
from zine_toolkit.store.repository import ZineRepository

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[Document], Union[bool, Awaitable[bool]]]


class DocumentService:
    """Document operations for one owner."""

    def __init__(self, repository: ZineRepository, owner: str = "") -> None:
        self.repository = repository
        self.owner = owner

    async def create(self, title: str, description: str = "") -> Document:
        """
        Create a private document with one empty page.

        Raises:
            PersistenceError: If the backend insert fails
        """
        document = await self.repository.insert_document(
            title=title, description=description, owner=self.owner
        )
        await self.repository.insert_page(document.id, 0)
        logger.info(f"Created document {document.id} ({title!r})")
        return document

    async def list_documents(self) -> List[Document]:
        """The owner's documents, newest first; empty on backend failure."""
        try:
            return await self.repository.list_documents(owner=self.owner or None)
        except PersistenceError as e:
            logger.error(f"Error listing documents: {e}")
            return []

    async def delete(self, document_id: str, confirm: ConfirmCallback) -> bool:
        """
        Delete a document after the confirm callback agrees.

        Pages and elements cascade.
        """
        try:
            document = await self.repository.get_document(document_id)
        except PersistenceError as e:
            logger.error(f"Error loading document {document_id}: {e}")
            return False

        answer = confirm(document)
        if inspect.isawaitable(answer):
            answer = await answer
        if not answer:
            logger.debug(f"Deletion of {document_id} not confirmed")
            return False

        try:
            await self.repository.delete_document(document_id)
        except PersistenceError as e:
            logger.error(f"Error deleting document {document_id}: {e}")
            return False
        logger.info(f"Deleted document {document_id}")
        return True

    async def toggle_visibility(self, document_id: str) -> Optional[Visibility]:
        """Flip public/private; returns the new visibility or None on failure."""
        try:
            document = await self.repository.get_document(document_id)
            updated = await self.repository.update_document(
                document_id, visibility=document.visibility.toggled()
            )
        except PersistenceError as e:
            logger.error(f"Error updating document visibility: {e}")
            return None
        return updated.visibility
