"""
Module: editor.state

Purpose:
    Holds the live editing state: the ordered pages of the open document,
    the active page, selection, text-edit focus and render mode.

    Every change goes through replace-by-id helpers applied to the latest
    state, so a handler that captured an older Page value cannot clobber
    edits made since (last writer wins per field).

Key Classes:
    - SinglePage / AllPagesForCapture: Render modes
    - EditorState: Mutable holder of immutable pages

Dependencies:
    - core.models: Page, Element

Used By:
    - editor (all stores)
    - layout.autolayout
    - output.snapshot / output.pipeline
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union

from zine_toolkit.core.models import Element, Page

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Render modes
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SinglePage:
    """Only the page at index is mounted for display."""

    index: int = 0


@dataclass(frozen=True)
class AllPagesForCapture:
    """Every page is mounted so each can be captured in turn."""


RenderMode = Union[SinglePage, AllPagesForCapture]

StateListener = Callable[["EditorState"], None]


class EditorState:
    """
    Live state of the open document.

    Pages are immutable values; this holder swaps them by id. The active page
    is tracked by index into the ordered pages.

    Example:
        >>> state = EditorState("d1", [Page("p1", "d1")])
        >>> state.current_page.id
        'p1'
    """

    def __init__(
        self,
        document_id: Optional[str] = None,
        pages: Optional[List[Page]] = None,
    ) -> None:
        self.document_id = document_id
        self.pages: Tuple[Page, ...] = tuple(pages or ())
        self.current_index = 0
        self.selected_element_id: Optional[str] = None
        self.page_selected = False
        self.editing_element_id: Optional[str] = None
        self.input_focused = False
        self.render_mode: RenderMode = SinglePage(0)
        self._listeners: list[StateListener] = []

    # ─────────────────────────────────────────────────────────────────────────
    # Listeners
    # ─────────────────────────────────────────────────────────────────────────

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a change listener; returns a function that unsubscribes."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def current_page(self) -> Optional[Page]:
        if 0 <= self.current_index < len(self.pages):
            return self.pages[self.current_index]
        return None

    @property
    def selected_element(self) -> Optional[Element]:
        if self.selected_element_id is None:
            return None
        return self.find_element(self.selected_element_id)

    def page_index(self, page_id: str) -> int:
        """Index of the page with page_id, or -1."""
        for index, page in enumerate(self.pages):
            if page.id == page_id:
                return index
        return -1

    def get_page(self, page_id: str) -> Optional[Page]:
        index = self.page_index(page_id)
        return self.pages[index] if index >= 0 else None

    def find_element(self, element_id: str) -> Optional[Element]:
        for page in self.pages:
            element = page.find(element_id)
            if element is not None:
                return element
        return None

    # ─────────────────────────────────────────────────────────────────────────
    # Replace-by-id updates
    # ─────────────────────────────────────────────────────────────────────────

    def set_pages(self, pages: List[Page]) -> None:
        self.pages = tuple(pages)
        self.current_index = min(self.current_index, max(0, len(self.pages) - 1))
        self.notify()

    def update_page(self, page_id: str, update: Callable[[Page], Page]) -> bool:
        """
        Apply update to the latest value of the page with page_id.

        Returns:
            False when the page is no longer present (update dropped)
        """
        index = self.page_index(page_id)
        if index < 0:
            logger.debug(f"Dropping update for missing page {page_id}")
            return False
        pages = list(self.pages)
        pages[index] = update(pages[index])
        self.pages = tuple(pages)
        self.notify()
        return True

    def update_element(self, element_id: str, update: Callable[[Element], Element]) -> bool:
        """Apply update to the latest value of an element, wherever it lives."""
        for page in self.pages:
            if page.find(element_id) is not None:
                return self.update_page(
                    page.id, lambda p: p.with_element_updated(element_id, update)
                )
        logger.debug(f"Dropping update for missing element {element_id}")
        return False

    def add_element(self, element: Element) -> bool:
        return self.update_page(element.page_id, lambda p: p.with_element_added(element))

    def remove_element(self, element_id: str) -> bool:
        for page in self.pages:
            if page.find(element_id) is not None:
                if self.selected_element_id == element_id:
                    self.selected_element_id = None
                if self.editing_element_id == element_id:
                    self.editing_element_id = None
                return self.update_page(page.id, lambda p: p.with_element_removed(element_id))
        return False

    def insert_page(self, index: int, page: Page) -> None:
        pages = list(self.pages)
        pages.insert(max(0, min(index, len(pages))), page)
        self.pages = tuple(pages)
        self.notify()

    def remove_page(self, page_id: str) -> bool:
        index = self.page_index(page_id)
        if index < 0:
            return False
        self.pages = self.pages[:index] + self.pages[index + 1:]
        if self.current_index >= len(self.pages):
            self.current_index = max(0, len(self.pages) - 1)
        self.notify()
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Selection and focus
    # ─────────────────────────────────────────────────────────────────────────

    def select_element(self, element_id: Optional[str]) -> None:
        self.selected_element_id = element_id
        if element_id is not None:
            self.page_selected = False
        self.notify()

    def select_page(self, selected: bool = True) -> None:
        self.page_selected = selected
        if selected:
            self.selected_element_id = None
        self.notify()

    def clear_selection(self) -> None:
        self.selected_element_id = None
        self.page_selected = False
        self.notify()

    def clear_text_editing(self) -> None:
        """Leave text-edit mode and drop input focus."""
        self.editing_element_id = None
        self.input_focused = False
        self.notify()

    def set_current_index(self, index: int) -> None:
        if not self.pages:
            self.current_index = 0
        else:
            self.current_index = max(0, min(index, len(self.pages) - 1))
        if isinstance(self.render_mode, SinglePage):
            self.render_mode = SinglePage(self.current_index)
        self.notify()

    def set_render_mode(self, mode: RenderMode) -> RenderMode:
        """Switch render mode; returns the previous mode."""
        previous = self.render_mode
        self.render_mode = mode
        self.notify()
        return previous
