"""
Module: editor.session

Purpose:
    Wire the editor together for one open document: state, stores,
    clipboard, shortcut dispatch, auto-layout and export. A front end drives
    the engine through this facade.

Key Classes:
    - EditorSession: Facade over every editor component

Dependencies:
    - editor.*: Stores, clipboard, commands
    - layout.autolayout: Batch placement
    - output.pipeline: Capture and export
    - settings: ZineSettings

Used By:
    - Front ends
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Iterable, Optional, Sequence

from zine_toolkit.images.conversion import Upload
from zine_toolkit.images.provider import CachingImageLoader, ImageLoader
from zine_toolkit.layout.autolayout import auto_layout, auto_layout_uploads
from zine_toolkit.layout.models import LayoutResult
from zine_toolkit.output.pipeline import ExportPipeline, ExportResult, ProgressCallback
from zine_toolkit.output.rasterizer import PillowRasterizer, Rasterizer
from zine_toolkit.settings import ZineSettings
from zine_toolkit.store.repository import ZineRepository

from .clipboard import Clipboard
from .commands import (
    CommandDispatcher,
    InteractionContext,
    Shortcut,
    context_for,
    shortcut_for_key,
)
from .elements import ElementStore
from .interaction import ZoomControl
from .layering import LayerDirection
from .pages import PageStore
from .state import EditorState

logger = logging.getLogger(__name__)


class EditorSession:
    """
    Editing session for one document.

    Example:
        >>> session = EditorSession(InMemoryRepository())
        >>> await session.open(document.id)
        >>> await session.elements.add_text()
        >>> await session.handle_key("c", ctrl=True)
    """

    def __init__(
        self,
        repository: ZineRepository,
        settings: Optional[ZineSettings] = None,
        loader: Optional[ImageLoader] = None,
        rasterizer: Optional[Rasterizer] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings or ZineSettings()
        self.repository = repository
        self.loader = loader or CachingImageLoader()
        self.rng = rng or random.Random()

        self.state = EditorState()
        self.zoom = ZoomControl(self.settings.editor)
        self.pages = PageStore(self.state, repository)
        self.elements = ElementStore(
            self.state, repository, self.loader, self.settings.editor, self.zoom
        )
        self.clipboard = Clipboard(self.elements, self.pages)
        self.commands = CommandDispatcher()
        self.exporter = ExportPipeline(
            self.state,
            self.loader,
            rasterizer or PillowRasterizer(
                self.settings.export, self.settings.editor.intrinsic_max_size
            ),
            self.settings.export,
            self.pages,
        )
        self._register_default_shortcuts()

    async def open(self, document_id: str) -> None:
        await self.pages.load_document(document_id)

    # ─────────────────────────────────────────────────────────────────────────
    # Keyboard
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def context(self) -> InteractionContext:
        return context_for(self.state)

    async def handle_key(self, key: str, *, ctrl: bool = False, meta: bool = False) -> bool:
        """
        Route a key event through the dispatcher.

        Returns:
            True when a handler claimed the key
        """
        shortcut = shortcut_for_key(key, ctrl=ctrl, meta=meta)
        if shortcut is None:
            return False
        return await self.commands.dispatch(self.context, shortcut)

    def _register_default_shortcuts(self) -> None:
        register = self.commands.register
        selected = InteractionContext.ELEMENT_SELECTED
        page = InteractionContext.PAGE_SELECTED
        nothing = InteractionContext.NONE_SELECTED

        register(selected, Shortcut.COPY, self.clipboard.copy_element, name="copy element")
        register(selected, Shortcut.PASTE, self._paste_over_selection, name="paste element")
        register(selected, Shortcut.DELETE, self._delete_selected, name="delete element")
        register(selected, Shortcut.LAYER_UP, self._layer(LayerDirection.UP), name="layer up")
        register(selected, Shortcut.LAYER_DOWN, self._layer(LayerDirection.DOWN), name="layer down")

        register(page, Shortcut.COPY, self.clipboard.copy_page, name="copy page")
        register(page, Shortcut.PASTE, self._paste_on_page, name="paste page")

        register(nothing, Shortcut.PASTE, self.clipboard.paste_element, name="paste element")

    async def _paste_over_selection(self) -> None:
        selected = self.state.selected_element
        if selected is not None and selected.is_image:
            logger.debug("Paste suppressed while an image is selected")
            return
        await self.clipboard.paste_element()

    async def _paste_on_page(self) -> None:
        if self.clipboard.copied_page is not None:
            await self.clipboard.paste_page()
        else:
            await self.clipboard.paste_element()

    async def _delete_selected(self) -> None:
        if self.state.selected_element_id is not None:
            await self.elements.delete(self.state.selected_element_id)

    def _layer(self, direction: LayerDirection):
        async def handler() -> None:
            if self.state.selected_element_id is not None:
                await self.elements.move_layer(self.state.selected_element_id, direction)
        return handler

    # ─────────────────────────────────────────────────────────────────────────
    # Auto-layout and export
    # ─────────────────────────────────────────────────────────────────────────

    async def auto_layout(
        self,
        sources: Sequence[str],
        progress: Optional[ProgressCallback] = None,
    ) -> LayoutResult:
        return await auto_layout(
            sources, self.elements, self.pages, self.settings.layout, self.rng, progress
        )

    async def auto_layout_uploads(
        self,
        uploads: Iterable[Upload],
        progress: Optional[ProgressCallback] = None,
    ) -> LayoutResult:
        return await auto_layout_uploads(
            uploads, self.elements, self.pages, self.settings.layout, self.rng, progress
        )

    async def export_pdf(
        self,
        output_dir: Path,
        progress: Optional[ProgressCallback] = None,
        *,
        persist_previews: bool = True,
    ) -> Optional[ExportResult]:
        """Flush any text edit, then capture and export the document."""
        await self.elements.end_text_edit()
        return await self.exporter.export_pdf(
            output_dir, progress, persist_previews=persist_previews
        )
