"""
Module: output.snapshot

Purpose:
    Pure function from editor state and render mode to per-page snapshots.
    A snapshot is everything a rasterizer needs for one page, detached from
    the live state so later edits cannot change a capture in progress.

Key Classes:
    - PageSnapshot: Immutable view of one page

Key Functions:
    - snapshot_pages(): Snapshots of the pages the render mode mounts
    - snapshot_page(): Snapshot of a single page

Dependencies:
    - editor.state: EditorState, render modes
    - editor.layering: render_order

Used By:
    - output.pipeline
    - output.rasterizer
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from zine_toolkit.core.models import Element, Page
from zine_toolkit.editor.layering import render_order
from zine_toolkit.editor.state import (
    AllPagesForCapture,
    EditorState,
    RenderMode,
    SinglePage,
)


@dataclass(frozen=True)
class PageSnapshot:
    """
    One page ready for rasterization.

    Attributes:
        index: Position of the page in the document
        page_id: Page identifier
        elements: Elements in paint order (ascending z_index, stable)
    """

    index: int
    page_id: str
    elements: tuple[Element, ...]

    @property
    def image_sources(self) -> List[str]:
        return [el.content for el in self.elements if el.is_image]


def snapshot_page(page: Page, index: int) -> PageSnapshot:
    return PageSnapshot(index=index, page_id=page.id, elements=tuple(render_order(page.elements)))


def snapshot_pages(state: EditorState, mode: Optional[RenderMode] = None) -> List[PageSnapshot]:
    """
    Snapshots of the pages mounted under a render mode.

    Args:
        state: Editor state to read
        mode: Render mode (the state's own mode when None)

    Returns:
        All pages for AllPagesForCapture; the one indexed page (or nothing)
        for SinglePage
    """
    mode = mode if mode is not None else state.render_mode
    if isinstance(mode, AllPagesForCapture):
        return [snapshot_page(page, i) for i, page in enumerate(state.pages)]
    if isinstance(mode, SinglePage) and 0 <= mode.index < len(state.pages):
        return [snapshot_page(state.pages[mode.index], mode.index)]
    return []
