"""
Module: layout.autolayout

Purpose:
    Place many images at once. Sources are shuffled into weighted random
    batches; each batch is laid out with a fixed template on its own page
    and persisted element by element, strictly in batch order.

Key Functions:
    - auto_layout(): Lay out image sources across pages
    - auto_layout_uploads(): Prepare raw uploads, then lay them out

Algorithm:
    1. Partition sources into batches (layout.batching)
    2. First batch reuses the open page when it is empty, else a new page
    3. Every later batch gets a new page
    4. Plan slots per batch (layout.templates) and create one image per slot
    5. Report (batches_done, batch_count) after each batch

Dependencies:
    - layout.batching, layout.templates
    - editor.elements: Element creation
    - editor.pages: Page creation
    - images.conversion: Upload preparation

Used By:
    - editor.session
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Iterable, List, Optional, Sequence

from zine_toolkit.core.errors import PersistenceError
from zine_toolkit.core.models import ElementDraft, ElementKind, Page
from zine_toolkit.editor.elements import ElementStore
from zine_toolkit.editor.pages import PageStore
from zine_toolkit.images.conversion import Upload, prepare_uploads

from .batching import partition_batches
from .config import LayoutConfig
from .models import LayoutResult, PagePlan
from .templates import plan_page

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


async def auto_layout(
    sources: Sequence[str],
    elements: ElementStore,
    pages: PageStore,
    config: Optional[LayoutConfig] = None,
    rng: Optional[random.Random] = None,
    progress: Optional[ProgressCallback] = None,
) -> LayoutResult:
    """
    Lay out image sources across one or more pages.

    Args:
        sources: Image sources (data URIs or paths)
        elements: Element store of the open document
        pages: Page store of the open document
        config: Layout configuration
        rng: Random generator for shuffling and batch sizes
        progress: Called with (batches_done, batch_count)

    Returns:
        LayoutResult; on a persistence failure the run stops, keeps what was
        created and records the error
    """
    config = config or LayoutConfig()
    state = pages.state
    if not sources or state.document_id is None:
        return LayoutResult()

    batches = partition_batches(sources, rng)
    total = len(batches)
    logger.info(f"Auto-layout of {len(sources)} images in {total} batches")

    plans: List[PagePlan] = []
    page_ids: List[str] = []
    element_ids: List[str] = []
    warnings: List[str] = []

    def result(error: Optional[str] = None) -> LayoutResult:
        return LayoutResult(
            plans=tuple(plans),
            page_ids=tuple(page_ids),
            element_ids=tuple(element_ids),
            warnings=warnings,
            error=error,
        )

    for index, batch in enumerate(batches):
        page = await _target_page(pages, reuse_open=index == 0)
        if page is None:
            return result(f"Could not create a page for batch {index}")

        plan = plan_page(batch, config, index, warnings)
        plans.append(plan)
        page_ids.append(page.id)

        for slot in plan.placements:
            draft = ElementDraft(
                page_id=page.id,
                kind=ElementKind.IMAGE,
                content=slot.source,
                position_x=slot.x,
                position_y=slot.y,
                width=slot.width,
                height=slot.height,
                z_index=slot.z_index,
            )
            try:
                element = await elements.create(draft)
            except PersistenceError as e:
                logger.error(f"Auto-layout stopped in batch {index}: {e}")
                return result(str(e))
            element_ids.append(element.id)

        if progress is not None:
            progress(index + 1, total)

    logger.info(f"Auto-layout placed {len(element_ids)} images on {len(page_ids)} pages")
    return result()


async def auto_layout_uploads(
    uploads: Iterable[Upload],
    elements: ElementStore,
    pages: PageStore,
    config: Optional[LayoutConfig] = None,
    rng: Optional[random.Random] = None,
    progress: Optional[ProgressCallback] = None,
) -> LayoutResult:
    """Convert raw uploads to WebP data URIs and lay out the ones that decode."""
    sources, skipped = prepare_uploads(uploads)
    result = await auto_layout(sources, elements, pages, config, rng, progress)
    for name in skipped:
        result.warnings.append(f"Skipped undecodable upload {name}")
    return result


async def _target_page(pages: PageStore, *, reuse_open: bool) -> Optional[Page]:
    current = pages.state.current_page
    if reuse_open and current is not None and current.is_empty:
        return current
    return await pages.add_page()
