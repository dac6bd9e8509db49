"""
Layout Package

Auto-layout of image batches: weighted random batching, fixed page
templates and the driver that persists the result.
"""

from .config import LayoutConfig
from .models import LayoutResult, LayoutTemplate, PagePlan, SlotPlacement
from .templates import choose_template, grid_shape, plan_page
from .batching import (
    BATCH_SIZE_TABLE,
    batch_size_distribution,
    partition_batches,
    sample_batch_size,
)
from .autolayout import auto_layout, auto_layout_uploads

__all__ = [
    "LayoutConfig",
    "LayoutResult",
    "LayoutTemplate",
    "PagePlan",
    "SlotPlacement",
    "choose_template",
    "grid_shape",
    "plan_page",
    "BATCH_SIZE_TABLE",
    "batch_size_distribution",
    "partition_batches",
    "sample_batch_size",
    "auto_layout",
    "auto_layout_uploads",
]
