"""
Module: editor.layering

Purpose:
    Paint order of elements on a page. Render order is ascending z_index
    with ties kept in insertion order; a layer move swaps z_index with the
    neighbour in that order.

Key Functions:
    - render_order(): Elements in paint order
    - next_z_index(): Key for an element placed on top
    - move_layer(): Swap with the neighbour above or below
    - shift_for_background(): Make room at z_index 0

Dependencies:
    - core.models: Element

Used By:
    - editor.elements: Layer moves, add operations
    - editor.clipboard: Paste on top
    - output.rasterizer: Paint order
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional, Tuple

from zine_toolkit.core.models import Element


class LayerDirection(str, Enum):
    UP = "up"
    DOWN = "down"


def render_order(elements: Iterable[Element]) -> List[Element]:
    """Elements sorted by z_index; sorted() is stable so ties keep insertion order."""
    return sorted(elements, key=lambda el: el.z_index)


def next_z_index(elements: Iterable[Element]) -> int:
    """max(z_index) + 1, or 1 on an empty page."""
    return max((el.z_index for el in elements), default=0) + 1


def is_top(elements: Iterable[Element], element_id: str) -> bool:
    ordered = render_order(elements)
    return bool(ordered) and ordered[-1].id == element_id


def is_bottom(elements: Iterable[Element], element_id: str) -> bool:
    ordered = render_order(elements)
    return bool(ordered) and ordered[0].id == element_id


def move_layer(
    elements: Iterable[Element],
    element_id: str,
    direction: LayerDirection,
) -> Optional[Tuple[Element, Element]]:
    """
    Swap an element's z_index with its neighbour in render order.

    Args:
        elements: Elements of one page
        element_id: Element to move
        direction: LayerDirection.UP or LayerDirection.DOWN

    Returns:
        (moved, neighbour) with swapped z_index values, or None when the
        element is unknown or already at the boundary
    """
    ordered = render_order(elements)
    index = next((i for i, el in enumerate(ordered) if el.id == element_id), -1)
    if index < 0:
        return None

    target = index + 1 if LayerDirection(direction) is LayerDirection.UP else index - 1
    if target < 0 or target >= len(ordered):
        return None

    moved, neighbour = ordered[index], ordered[target]
    return (
        moved.with_changes(z_index=neighbour.z_index),
        neighbour.with_changes(z_index=moved.z_index),
    )


def shift_for_background(elements: Iterable[Element]) -> List[Element]:
    """Every element with its z_index raised by one, freeing slot 0."""
    return [el.with_changes(z_index=el.z_index + 1) for el in elements]


def find_background(elements: Iterable[Element]) -> Optional[Element]:
    """The image element holding z_index 0, if any."""
    for element in elements:
        if element.is_image and element.z_index == 0:
            return element
    return None
