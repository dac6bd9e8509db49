"""
Module: layout.models

Purpose:
    Data models for template layout.
    Immutable dataclasses representing image slots and planned pages.

Key Classes:
    - LayoutTemplate: single | side_by_side | grid
    - SlotPlacement: Image source positioned on a page
    - PagePlan: Complete layout of one batch
    - LayoutResult: Output of an auto-layout run

Dependencies:
    - dataclasses (std)

Used By:
    - layout.templates: Creates PagePlans
    - layout.autolayout: Persists PagePlans
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class LayoutTemplate(str, Enum):
    SINGLE = "single"
    SIDE_BY_SIDE = "side_by_side"
    GRID = "grid"


@dataclass(frozen=True)
class SlotPlacement:
    """
    An image source positioned on a page.

    Attributes:
        source: Image source (data URI or path)
        x: Left edge in canvas pixels
        y: Top edge in canvas pixels
        width: Container width
        height: Container height
        z_index: Paint-order key

    Example:
        >>> slot = SlotPlacement("data:...", x=40, y=100, width=190, height=253.3, z_index=1)
        >>> slot.right
        230
    """

    source: str
    x: float
    y: float
    width: float
    height: float
    z_index: int

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def overlaps(self, other: SlotPlacement) -> bool:
        """True when the two rectangles share interior area."""
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )


@dataclass(frozen=True)
class PagePlan:
    """
    Layout plan for a single batch of images.

    Attributes:
        index: Batch number (0-indexed)
        template: Template used
        placements: Positioned slots in source order
        columns: Grid columns (1 for single, 2 for side by side)
        rows: Grid rows

    Example:
        >>> plan.placement_count
        5
    """

    index: int
    template: LayoutTemplate
    placements: tuple[SlotPlacement, ...]
    columns: int = 1
    rows: int = 1

    @property
    def placement_count(self) -> int:
        return len(self.placements)

    @property
    def is_empty(self) -> bool:
        return len(self.placements) == 0

    @property
    def bottom(self) -> float:
        """Lowest edge of any placement."""
        return max((p.bottom for p in self.placements), default=0)


@dataclass(frozen=True)
class LayoutResult:
    """
    Output of an auto-layout run with diagnostics.

    Attributes:
        plans: PagePlans in batch order
        page_ids: Page each plan was written to
        element_ids: Element ids created, in creation order
        warnings: Warning messages (overflow, skipped slots)
        error: Message of the failure that stopped the run, if any
    """

    plans: tuple[PagePlan, ...] = ()
    page_ids: tuple[str, ...] = ()
    element_ids: tuple[str, ...] = ()
    warnings: list[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def page_count(self) -> int:
        return len(self.page_ids)

    @property
    def total_placements(self) -> int:
        return sum(p.placement_count for p in self.plans)

    @property
    def completed(self) -> bool:
        return self.error is None
