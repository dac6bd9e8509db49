"""
Module: layout.templates

Purpose:
    Fixed layout templates for a batch of images: one image centred, two side
    by side, three or more in a grid of portrait containers. Templates never
    overlap slots; a grid that does not fit the canvas height is top-aligned
    and reported as overflowing.

Key Functions:
    - choose_template(): Template for an image count
    - grid_shape(): (columns, rows) for an image count
    - plan_page(): Lay out one batch

Algorithm (grid):
    cols = 2 if count <= 4 else 3
    rows = ceil(count / cols)
    cell_w = (W - (cols + 1) * padding) / cols, cell_h = cell_w / aspect
    total = rows * cell_h + (rows + 1) * padding
    start_y = max(padding, (H - total) / 2)

Dependencies:
    - layout.config: LayoutConfig
    - layout.models: SlotPlacement, PagePlan

Used By:
    - layout.autolayout
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from .config import LayoutConfig
from .models import LayoutTemplate, PagePlan, SlotPlacement

logger = logging.getLogger(__name__)


def choose_template(count: int) -> LayoutTemplate:
    if count <= 1:
        return LayoutTemplate.SINGLE
    if count == 2:
        return LayoutTemplate.SIDE_BY_SIDE
    return LayoutTemplate.GRID


def grid_shape(count: int) -> Tuple[int, int]:
    """
    Columns and rows of the grid template.

    Example:
        >>> grid_shape(5)
        (3, 2)
    """
    columns = 2 if count <= 4 else 3
    return columns, math.ceil(count / columns)


def plan_single(source: str, config: LayoutConfig, index: int = 0) -> PagePlan:
    width = config.canvas_width * config.single_fraction
    height = config.canvas_height * config.single_fraction
    slot = SlotPlacement(
        source=source,
        x=(config.canvas_width - width) / 2,
        y=(config.canvas_height - height) / 2,
        width=width,
        height=height,
        z_index=config.z_index_start,
    )
    return PagePlan(index=index, template=LayoutTemplate.SINGLE, placements=(slot,))


def plan_side_by_side(
    sources: Sequence[str],
    config: LayoutConfig,
    index: int = 0,
) -> PagePlan:
    padding = config.padding
    width = (config.canvas_width - 3 * padding) / 2
    height = width / config.container_aspect_ratio
    y = (config.canvas_height - height) / 2
    slots = tuple(
        SlotPlacement(
            source=source,
            x=padding + i * (width + padding),
            y=y,
            width=width,
            height=height,
            z_index=config.z_index_start + i,
        )
        for i, source in enumerate(sources[:2])
    )
    return PagePlan(
        index=index, template=LayoutTemplate.SIDE_BY_SIDE, placements=slots, columns=2
    )


def plan_grid(sources: Sequence[str], config: LayoutConfig, index: int = 0) -> PagePlan:
    padding = config.padding
    columns, rows = grid_shape(len(sources))
    width = (config.canvas_width - (columns + 1) * padding) / columns
    height = width / config.container_aspect_ratio
    total_height = rows * height + (rows + 1) * padding
    start_y = max(padding, (config.canvas_height - total_height) / 2)

    slots = []
    for i, source in enumerate(sources):
        row, col = divmod(i, columns)
        slots.append(
            SlotPlacement(
                source=source,
                x=padding + col * (width + padding),
                y=start_y + row * (height + padding),
                width=width,
                height=height,
                z_index=config.z_index_start + i,
            )
        )
    return PagePlan(
        index=index,
        template=LayoutTemplate.GRID,
        placements=tuple(slots),
        columns=columns,
        rows=rows,
    )


def plan_page(
    sources: Sequence[str],
    config: Optional[LayoutConfig] = None,
    index: int = 0,
    warnings: Optional[List[str]] = None,
) -> PagePlan:
    """
    Lay out one batch of image sources on a page.

    Args:
        sources: Image sources in placement order
        config: Layout configuration
        index: Batch number recorded on the plan
        warnings: List that overflow warnings are appended to

    Returns:
        PagePlan with one slot per source
    """
    config = config or LayoutConfig()
    if not sources:
        return PagePlan(index=index, template=LayoutTemplate.SINGLE, placements=())

    template = choose_template(len(sources))
    if template is LayoutTemplate.SINGLE:
        plan = plan_single(sources[0], config, index)
    elif template is LayoutTemplate.SIDE_BY_SIDE:
        plan = plan_side_by_side(sources, config, index)
    else:
        plan = plan_grid(sources, config, index)

    if plan.bottom > config.canvas_height:
        message = (
            f"Batch {index}: {len(sources)} images overflow the page "
            f"({plan.bottom:.0f}px > {config.canvas_height}px)"
        )
        logger.warning(message)
        if warnings is not None:
            warnings.append(message)
    return plan
