"""
Tests for weighted random batching.

Distribution checks sample many draws from a seeded generator and compare
observed frequencies to the table within a tolerance.
"""

import random
from collections import Counter

import pytest

from zine_toolkit.layout import batch_size_distribution, partition_batches, sample_batch_size


class TestSampleBatchSize:
    def test_distribution_when_sampled_then_probabilities_sum_to_one(self):
        assert sum(p for _, p in batch_size_distribution()) == pytest.approx(1.0)

    def test_sample_when_many_draws_then_matches_table(self):
        rng = random.Random(1234)
        draws = 20000
        counts = Counter(sample_batch_size(rng) for _ in range(draws))

        for size, probability in batch_size_distribution():
            assert counts[size] / draws == pytest.approx(probability, abs=0.02)

    def test_sample_when_many_draws_then_small_pages_dominate(self):
        rng = random.Random(7)
        draws = [sample_batch_size(rng) for _ in range(5000)]
        small = sum(1 for size in draws if size <= 2)
        assert small / len(draws) == pytest.approx(0.8, abs=0.03)


class TestPartitionBatches:
    def test_partition_when_items_then_each_used_exactly_once(self):
        items = list(range(23))
        batches = partition_batches(items, random.Random(3))

        flattened = [item for batch in batches for item in batch]
        assert sorted(flattened) == items
        assert all(batch for batch in batches)

    def test_partition_when_same_seed_then_reproducible(self):
        items = list("abcdefghij")
        assert partition_batches(items, random.Random(9)) == partition_batches(
            items, random.Random(9)
        )

    def test_partition_when_called_then_input_not_modified(self):
        items = [1, 2, 3, 4]
        partition_batches(items, random.Random(0))
        assert items == [1, 2, 3, 4]

    def test_partition_when_empty_then_no_batches(self):
        assert partition_batches([], random.Random(0)) == []

    def test_partition_when_batches_then_never_larger_than_nine(self):
        batches = partition_batches(list(range(200)), random.Random(5))
        assert max(len(batch) for batch in batches) <= 9
