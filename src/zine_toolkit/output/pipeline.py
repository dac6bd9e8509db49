"""
Module: output.pipeline

Purpose:
    Capture every page of the open document as a compressed raster and
    assemble the rasters into the exported PDF.

Key Classes:
    - ExportResult: Rasters and diagnostics of one run
    - ExportPipeline: Capture and export orchestration

Algorithm:
    1. Leave text editing and clear selection
    2. Preload image sources of every page concurrently; wait for all
    3. Switch to AllPagesForCapture, remembering the previous mode
    4. Yield once to the event loop
    5. Per page in order: snapshot, rasterize, compress
    6. Optionally store each raster as the page preview
    7. Restore the previous render mode and active page

    A failing page is logged and omitted. A missing rendering context aborts
    the run with an empty result. A second trigger while a run is in
    progress is a no-op.

Dependencies:
    - output.snapshot, output.rasterizer, output.compression, output.renderer
    - images.provider: Preload
    - editor.pages: Preview persistence

Used By:
    - editor.session
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from zine_toolkit.core.errors import ResourceError
from zine_toolkit.editor.pages import PageStore
from zine_toolkit.editor.state import AllPagesForCapture, EditorState
from zine_toolkit.images.provider import ImageLoader, LoadOutcome

from .compression import CompressedRaster, compress_raster
from .config import ExportConfig
from .rasterizer import PillowRasterizer, Rasterizer
from .renderer import export_filename, render_to_pdf
from .snapshot import PageSnapshot, snapshot_pages

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class ExportResult:
    """
    Outcome of a capture run.

    Attributes:
        rasters: Compressed rasters of captured pages, in page order
        page_ids: Page id of each raster
        failed_pages: Ids of pages omitted after a capture failure
        pdf_path: Written PDF, when the run exported one
        aborted: True when a missing rendering context stopped the run
    """

    rasters: tuple[CompressedRaster, ...] = ()
    page_ids: tuple[str, ...] = ()
    failed_pages: tuple[str, ...] = ()
    pdf_path: Optional[Path] = None
    aborted: bool = False
    warnings: List[str] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.rasters)


class ExportPipeline:
    """
    Capture and export for the open document.

    Args:
        state: Live editor state
        loader: Image loader used for preloading
        rasterizer: Page rasterizer (PillowRasterizer by default)
        config: Export configuration
        pages: Page store, required to persist previews

    Example:
        >>> pipeline = ExportPipeline(state, loader)
        >>> result = asyncio.run(pipeline.export_pdf(Path("out")))
        >>> result.pdf_path.name
        'zine-<document id>.pdf'
    """

    def __init__(
        self,
        state: EditorState,
        loader: ImageLoader,
        rasterizer: Optional[Rasterizer] = None,
        config: Optional[ExportConfig] = None,
        pages: Optional[PageStore] = None,
    ) -> None:
        self.state = state
        self.loader = loader
        self.config = config or ExportConfig()
        self.rasterizer = rasterizer or PillowRasterizer(self.config)
        self.pages = pages
        self.is_generating = False

    async def capture(
        self,
        progress: Optional[ProgressCallback] = None,
        *,
        persist_previews: bool = False,
    ) -> Optional[ExportResult]:
        """
        Capture every page as a compressed raster.

        Returns:
            ExportResult, or None when a run is already in progress
        """
        if self.is_generating:
            logger.debug("Capture already in progress, ignoring trigger")
            return None
        self.is_generating = True
        try:
            return await self._capture(progress, persist_previews)
        finally:
            self.is_generating = False

    async def export_pdf(
        self,
        output_dir: Path,
        progress: Optional[ProgressCallback] = None,
        *,
        persist_previews: bool = False,
        title: str = "",
    ) -> Optional[ExportResult]:
        """
        Capture every page and write zine-<document_id>.pdf into output_dir.

        Returns:
            ExportResult with pdf_path set on success; None when a run is
            already in progress
        """
        if self.is_generating:
            logger.debug("Export already in progress, ignoring trigger")
            return None
        self.is_generating = True
        try:
            result = await self._capture(progress, persist_previews)
            if result.aborted or not result.rasters:
                return result
            path = Path(output_dir) / export_filename(self.state.document_id or "untitled")
            try:
                render_to_pdf(result.rasters, path, self.config, title=title)
            except OSError as e:
                logger.error(f"Failed to write {path}: {e}")
                result.warnings.append(f"PDF not written: {e}")
                return result
            return ExportResult(
                rasters=result.rasters,
                page_ids=result.page_ids,
                failed_pages=result.failed_pages,
                pdf_path=path,
                warnings=result.warnings,
            )
        finally:
            self.is_generating = False

    # ─────────────────────────────────────────────────────────────────────────
    # Steps
    # ─────────────────────────────────────────────────────────────────────────

    async def _capture(
        self,
        progress: Optional[ProgressCallback],
        persist_previews: bool,
    ) -> ExportResult:
        state = self.state

        # 1. Leave text editing so no caret or selection is captured
        state.clear_text_editing()
        state.clear_selection()
        await asyncio.sleep(0)

        # 2. Preload every page's images; failures become placeholders
        images = await self._preload(snapshot_pages(state, AllPagesForCapture()))

        # 3. Mount every page
        previous_index = state.current_index
        previous_mode = state.set_render_mode(AllPagesForCapture())
        try:
            # 4. Let the mode switch settle
            await asyncio.sleep(0)

            try:
                self.rasterizer.prepare()
            except ResourceError as e:
                logger.error(f"Capture aborted: {e}")
                return ExportResult(aborted=True)

            return await self._capture_pages(images, progress, persist_previews)
        finally:
            # 7. Restore what the user was looking at
            state.set_render_mode(previous_mode)
            state.set_current_index(previous_index)

    async def _preload(self, snapshots: List[PageSnapshot]) -> Dict[str, LoadOutcome]:
        results = await asyncio.gather(
            *(self.loader.preload(snapshot.image_sources) for snapshot in snapshots)
        )
        images: Dict[str, LoadOutcome] = {}
        for outcome in results:
            images.update(outcome)
        return images

    async def _capture_pages(
        self,
        images: Dict[str, LoadOutcome],
        progress: Optional[ProgressCallback],
        persist_previews: bool,
    ) -> ExportResult:
        snapshots = snapshot_pages(self.state)
        total = len(snapshots)
        rasters: List[CompressedRaster] = []
        page_ids: List[str] = []
        failed: List[str] = []
        warnings: List[str] = []

        for snapshot in snapshots:
            # 5. Rasterize and compress
            try:
                raster = compress_raster(self.rasterizer.rasterize(snapshot, images), self.config)
            except ResourceError as e:
                logger.error(f"Capture aborted on page {snapshot.index + 1}: {e}")
                return ExportResult(aborted=True)
            except Exception as e:
                logger.exception(f"Failed to capture page {snapshot.index + 1}: {e}")
                failed.append(snapshot.page_id)
                warnings.append(f"Page {snapshot.index + 1} omitted: {e}")
            else:
                rasters.append(raster)
                page_ids.append(snapshot.page_id)

                # 6. Cache as preview
                if persist_previews and self.pages is not None:
                    await self.pages.save_preview(snapshot.page_id, raster.data)

            if progress is not None:
                progress(snapshot.index + 1, total)
            await asyncio.sleep(0)

        logger.info(f"Captured {len(rasters)} of {total} pages")
        return ExportResult(
            rasters=tuple(rasters),
            page_ids=tuple(page_ids),
            failed_pages=tuple(failed),
            warnings=warnings,
        )
