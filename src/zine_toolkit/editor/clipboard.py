"""
Module: editor.clipboard

Purpose:
    Copy and paste of single elements and whole pages. The clipboard holds
    detached snapshots, so later edits to the source do not leak into a
    paste. Every pasted element gets a fresh identity from the backend and is
    reflected in state only after it is persisted.

Key Classes:
    - Clipboard: Element and page copy/paste

Dependencies:
    - editor.elements: Element creation
    - editor.pages: Page insertion and renumbering
    - editor.layering: Paint order

Used By:
    - editor.session (shortcuts)
"""

from __future__ import annotations

import logging
from typing import List, Optional

from zine_toolkit.core.errors import PersistenceError
from zine_toolkit.core.models import Element, Page

from .elements import ElementStore
from .layering import next_z_index, render_order
from .pages import PageStore

logger = logging.getLogger(__name__)


class Clipboard:
    """
    Element and page clipboard for the open document.

    Attributes:
        copied_element: Snapshot of the last copied element, or None
        copied_page: Snapshot of the last copied page, or None
    """

    def __init__(self, elements: ElementStore, pages: PageStore) -> None:
        self.elements = elements
        self.pages = pages
        self.copied_element: Optional[Element] = None
        self.copied_page: Optional[Page] = None

    @property
    def state(self):
        return self.elements.state

    # ─────────────────────────────────────────────────────────────────────────
    # Elements
    # ─────────────────────────────────────────────────────────────────────────

    def copy_element(self, element_id: Optional[str] = None) -> bool:
        """Snapshot an element (the selected one by default)."""
        element_id = element_id or self.state.selected_element_id
        element = self.state.find_element(element_id) if element_id else None
        if element is None:
            return False
        self.copied_element = element
        logger.debug(f"Copied element {element.id}")
        return True

    async def paste_element(self) -> Optional[Element]:
        """
        Paste the copied element onto the current page, on top of the stack.

        Geometry is kept and clamped into the canvas; crop and filter carry
        over. Failures are logged and leave state untouched.
        """
        source = self.copied_element
        page = self.state.current_page
        if source is None or page is None:
            return None

        width, height = self.elements.display_size(source)
        x, y = self.elements.clamp(source.position_x, source.position_y, width, height)
        draft = source.to_draft(
            page_id=page.id,
            position_x=x,
            position_y=y,
            z_index=next_z_index(page.elements),
        )
        try:
            element = await self.elements.create(draft)
        except PersistenceError as e:
            logger.error(f"Error pasting element: {e}")
            return None
        self.state.select_element(element.id)
        return element

    # ─────────────────────────────────────────────────────────────────────────
    # Pages
    # ─────────────────────────────────────────────────────────────────────────

    def copy_page(self, page_id: Optional[str] = None) -> bool:
        page = self.state.get_page(page_id) if page_id else self.state.current_page
        if page is None:
            return False
        self.copied_page = page
        logger.debug(f"Copied page {page.id} with {page.element_count} elements")
        return True

    async def paste_page(self) -> Optional[Page]:
        """
        Paste the copied page immediately after the current page.

        The new page row is awaited and reflected as an empty placeholder
        before any element is created. Elements are then recreated in paint
        order, each awaited before it appears. Ordinals are renumbered last.

        A failure part-way stops further creation; the pasted page keeps the
        elements created so far.

        Returns:
            The pasted page as it stands in state, or None if no page was made
        """
        source = self.copied_page
        if source is None or self.state.document_id is None:
            return None

        index = self.state.current_index
        try:
            page = await self.pages.insert_page_after(index)
        except PersistenceError as e:
            logger.error(f"Error pasting page: {e}")
            return None

        created: List[Element] = []
        for element in render_order(source.elements):
            try:
                created.append(await self.elements.create(element.to_draft(page_id=page.id)))
            except PersistenceError as e:
                logger.error(
                    f"Page paste stopped after {len(created)} of "
                    f"{source.element_count} elements: {e}"
                )
                break

        await self.pages.renumber(index + 1)
        self.state.set_current_index(index + 1)
        logger.info(f"Pasted page {source.id} as {page.id} with {len(created)} elements")
        return self.state.get_page(page.id)
