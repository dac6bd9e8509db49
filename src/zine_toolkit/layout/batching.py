"""
Module: layout.batching

Purpose:
    Partition a set of images into randomly sized batches, one batch per
    page. The set is shuffled first; batch sizes come from a weighted table
    sampled with one cumulative-distribution draw each. Small batches dominate
    so most pages hold one or two images.

Key Functions:
    - sample_batch_size(): One weighted draw
    - partition_batches(): Shuffle and split
    - batch_size_distribution(): The table as (size, probability) pairs

Dependencies:
    - random (std): Seedable generator
    - bisect (std): Cumulative lookup

Used By:
    - layout.autolayout
"""

from __future__ import annotations

import bisect
import itertools
import logging
import random
from typing import List, Optional, Sequence, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Two tiers: 80% small pages (1-2 images), 20% busier pages split evenly
# between the 3/4, 5/6, 7 and 8/9 groups.
BATCH_SIZE_TABLE: Tuple[Tuple[int, float], ...] = (
    (1, 0.80 * 0.35),
    (2, 0.80 * 0.65),
    (3, 0.05 * 0.30),
    (4, 0.05 * 0.70),
    (5, 0.05 * 0.20),
    (6, 0.05 * 0.80),
    (7, 0.05),
    (8, 0.05 * 0.20),
    (9, 0.05 * 0.80),
)

_SIZES = [size for size, _ in BATCH_SIZE_TABLE]
_CUMULATIVE = list(itertools.accumulate(p for _, p in BATCH_SIZE_TABLE))


def batch_size_distribution() -> List[Tuple[int, float]]:
    return list(BATCH_SIZE_TABLE)


def sample_batch_size(rng: Optional[random.Random] = None) -> int:
    """
    Draw one batch size from the table.

    Args:
        rng: Random generator (module random when None)

    Example:
        >>> sample_batch_size(random.Random(42)) in range(1, 10)
        True
    """
    draw = (rng or random).random() * _CUMULATIVE[-1]
    index = bisect.bisect_right(_CUMULATIVE, draw)
    return _SIZES[min(index, len(_SIZES) - 1)]


def partition_batches(
    items: Sequence[T],
    rng: Optional[random.Random] = None,
) -> List[List[T]]:
    """
    Shuffle items and split them into weighted random batches.

    The last batch takes whatever remains, so it may be smaller than drawn.

    Args:
        items: Items to split (not modified)
        rng: Random generator; pass random.Random(seed) for reproducible runs

    Returns:
        Non-empty batches covering every item exactly once
    """
    rng = rng or random.Random()
    shuffled = list(items)
    rng.shuffle(shuffled)

    batches: List[List[T]] = []
    start = 0
    while start < len(shuffled):
        size = sample_batch_size(rng)
        batches.append(shuffled[start:start + size])
        start += size
    logger.debug(f"Partitioned {len(shuffled)} items into {len(batches)} batches")
    return batches
