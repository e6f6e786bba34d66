"""Tests for the core shuffle engine — pure logic, no I/O."""

from __future__ import annotations

import random
from collections import Counter

import pytest

from core.shuffle import NestedShuffle, WeightedShuffle, fisher_yates_shuffle


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _weighted(weights: dict) -> WeightedShuffle:
    ws = WeightedShuffle()
    for item, weight in weights.items():
        ws.addn(item, weight)
    return ws


def _no_adjacent_repeats(seq) -> bool:
    return all(a != b for a, b in zip(seq, seq[1:]))


def _nested(buckets: list) -> NestedShuffle:
    nested = NestedShuffle()
    for weights in buckets:
        nested.add(_weighted(weights))
    return nested


# ---------------------------------------------------------------------------
# fisher_yates_shuffle
# ---------------------------------------------------------------------------

class TestFisherYatesShuffle:
    def test_shuffles_in_place(self):
        items = list("abcde")
        result = fisher_yates_shuffle(items, rng=random.Random(42))
        assert result is items  # same object

    def test_deterministic_with_seed(self):
        a = fisher_yates_shuffle(list("abcdefgh"), rng=random.Random(123))
        b = fisher_yates_shuffle(list("abcdefgh"), rng=random.Random(123))
        assert a == b

    def test_contains_same_elements(self):
        items = list(range(100))
        original = list(items)
        fisher_yates_shuffle(items, rng=random.Random(99))
        assert sorted(items) == sorted(original)

    def test_distribution_is_uniform(self):
        """Run many shuffles and check each element appears in each
        position roughly equally (chi-square-like sanity check)."""
        n = 4
        runs = 10_000
        rng = random.Random(7)
        position_counts: list[Counter] = [Counter() for _ in range(n)]

        for _ in range(runs):
            items = list(range(n))
            fisher_yates_shuffle(items, rng=rng)
            for pos, val in enumerate(items):
                position_counts[pos][val] += 1

        expected = runs / n
        for pos in range(n):
            for val in range(n):
                count = position_counts[pos][val]
                # Allow 20% deviation — generous for 10k samples
                assert abs(count - expected) / expected < 0.20, (
                    f"Element {val} at position {pos}: {count} vs expected ~{expected}"
                )


# ---------------------------------------------------------------------------
# WeightedShuffle — building
# ---------------------------------------------------------------------------

class TestWeightedShuffleBuild:
    def test_add_is_weight_one(self):
        ws = WeightedShuffle()
        ws.add("a")
        ws.add("b")
        assert len(ws) == 2
        assert list(ws) == ["a", "b"]

    def test_unshuffled_is_expansion_order(self):
        ws = _weighted({"a": 2, "b": 1, "c": 3})
        assert list(ws) == ["a", "a", "b", "c", "c", "c"]

    def test_max_same_tracks_largest_weight(self):
        ws = WeightedShuffle()
        assert ws.max_same == 1
        ws.addn("a", 3)
        ws.addn("b", 2)
        assert ws.max_same == 3

    def test_zero_weight_registers_without_slots(self):
        ws = _weighted({"a": 0, "b": 2})
        assert len(ws) == 2
        ws.shuffle(rng=random.Random(1))
        assert "a" not in list(ws)

    def test_negative_weight_raises(self):
        ws = WeightedShuffle()
        with pytest.raises(ValueError, match=">= 0"):
            ws.addn("a", -1)
        assert ws.is_empty()

    @pytest.mark.parametrize("weight", [1.5, "2", True])
    def test_non_int_weight_raises(self, weight):
        with pytest.raises(TypeError):
            WeightedShuffle().addn("a", weight)

    def test_items_are_opaque(self):
        # Unhashable, non-comparable items are fine.
        a, b = {"k": 1}, {"k": 2}
        ws = WeightedShuffle()
        ws.addn(a, 2)
        ws.addn(b, 2)
        ws.shuffle(rng=random.Random(3))
        assert sum(1 for x in ws if x is a) == 2
        assert sum(1 for x in ws if x is b) == 2


# ---------------------------------------------------------------------------
# WeightedShuffle — access
# ---------------------------------------------------------------------------

class TestWeightedShuffleAccess:
    def test_get_matches_iteration(self):
        ws = _weighted({"a": 2, "b": 3})
        ws.shuffle(rng=random.Random(5))
        assert [ws.get(i) for i in range(len(ws))] == list(ws)

    def test_get_out_of_range_is_none(self):
        ws = _weighted({"a": 2})
        assert ws.get(2) is None
        assert ws.get(100) is None
        assert ws.get(-1) is None

    def test_empty(self):
        ws = WeightedShuffle()
        assert ws.is_empty()
        assert len(ws) == 0
        ws.shuffle(rng=random.Random(1))
        assert list(ws) == []
        assert ws.get(0) is None

    def test_single_item(self):
        ws = _weighted({"only": 1})
        ws.shuffle(rng=random.Random(1))
        assert list(ws) == ["only"]

    def test_iteration_is_repeatable(self):
        ws = _weighted({"a": 3, "b": 2, "c": 4})
        ws.shuffle(rng=random.Random(11))
        assert list(ws) == list(ws)

    def test_independent_iterators(self):
        ws = _weighted({"a": 3, "b": 3})
        ws.shuffle(rng=random.Random(2))
        first, second = iter(ws), iter(ws)
        next(first)
        next(first)
        assert next(second) == ws.get(0)


# ---------------------------------------------------------------------------
# WeightedShuffle — shuffling
# ---------------------------------------------------------------------------

class TestWeightedShuffleShuffle:
    @pytest.mark.parametrize("seed", range(20))
    def test_preserves_multiset(self, seed):
        weights = {"a": 1, "b": 4, "c": 2, "d": 7, "e": 3}
        ws = _weighted(weights)
        ws.shuffle(rng=random.Random(seed))
        assert Counter(ws) == Counter(weights)
        assert len(ws) == sum(weights.values())

    @pytest.mark.parametrize("seed", range(50))
    def test_no_adjacent_repeats(self, seed):
        ws = WeightedShuffle()
        for i in range(4):
            ws.addn(i, i + 1)
        ws.shuffle(10, rng=random.Random(seed))
        assert _no_adjacent_repeats(list(ws))

    @pytest.mark.parametrize("seed", range(30))
    def test_no_adjacent_repeats_many_items(self, seed):
        weights = {f"t{i}": 1 + i % 3 for i in range(12)}
        ws = _weighted(weights)
        ws.shuffle(2, rng=random.Random(seed))
        out = list(ws)
        assert _no_adjacent_repeats(out)
        assert Counter(out) == Counter(weights)

    def test_deterministic_with_seed(self):
        a = _weighted({"a": 3, "b": 2, "c": 5})
        b = _weighted({"a": 3, "b": 2, "c": 5})
        a.shuffle(rng=random.Random(123))
        b.shuffle(rng=random.Random(123))
        assert list(a) == list(b)

    def test_reshuffle_keeps_multiset(self):
        ws = _weighted({"a": 3, "b": 3, "c": 1})
        rng = random.Random(8)
        for _ in range(5):
            ws.shuffle(rng=rng)
            assert Counter(ws) == Counter({"a": 3, "b": 3, "c": 1})

    def test_single_item_heavy_weight(self):
        # Nothing to separate; must not loop or fail.
        ws = _weighted({"x": 9})
        ws.shuffle(rng=random.Random(1))
        assert list(ws) == ["x"] * 9

    def test_dominant_item_still_completes(self):
        # More than half the slots belong to one item: some adjacency is
        # unavoidable, but nothing is lost.
        ws = _weighted({"big": 8, "small": 2})
        ws.shuffle(rng=random.Random(4))
        assert Counter(ws) == Counter({"big": 8, "small": 2})

    def test_lookahead_zero_is_plain_shuffle(self):
        ws = _weighted({"a": 2, "b": 2})
        ws.shuffle(0, rng=random.Random(9))
        assert Counter(ws) == Counter({"a": 2, "b": 2})


# ---------------------------------------------------------------------------
# NestedShuffle
# ---------------------------------------------------------------------------

class TestNestedShuffle:
    def test_two_buckets_of_two(self):
        nested = _nested([{"x": 1, "y": 1}, {"z": 1, "w": 1}])
        nested.shuffle(rng=random.Random(1))
        out = list(nested)
        assert len(out) == 4
        assert sorted(out) == ["w", "x", "y", "z"]

    @pytest.mark.parametrize("seed", range(10))
    def test_length_law_and_multiset(self, seed):
        buckets = [{"a1": 2, "a2": 1}, {"b1": 3}, {"c1": 1, "c2": 1, "c3": 2}]
        nested = _nested(buckets)
        nested.shuffle(rng=random.Random(seed))
        out = list(nested)
        expected = Counter()
        for weights in buckets:
            expected.update(weights)
        assert len(out) == len(nested) == sum(expected.values())
        assert Counter(out) == expected

    def test_each_bucket_emitted_in_its_own_order(self):
        nested = NestedShuffle()
        first = _weighted({"a1": 1, "a2": 2, "a3": 1})
        second = _weighted({"b1": 2, "b2": 1})
        nested.add(first)
        nested.add(second)
        nested.shuffle(rng=random.Random(6))
        out = list(nested)
        assert [x for x in out if x.startswith("a")] == list(first)
        assert [x for x in out if x.startswith("b")] == list(second)

    def test_iteration_is_repeatable(self):
        nested = _nested([{"a": 2, "b": 1}, {"c": 3}, {"d": 1}])
        nested.shuffle(rng=random.Random(21))
        assert list(nested) == list(nested)

    def test_interleaved_iterators_are_independent(self):
        nested = _nested([{"a": 1, "b": 1}, {"c": 1, "d": 1}])
        nested.shuffle(rng=random.Random(2))
        expected = list(nested)
        first, second = iter(nested), iter(nested)
        got_first, got_second = [], []
        for _ in range(len(expected)):
            got_first.append(next(first))
            got_second.append(next(second))
        assert got_first == expected
        assert got_second == expected

    @pytest.mark.parametrize("seed", range(30))
    def test_buckets_are_spread_out(self, seed):
        nested = NestedShuffle()
        for i in range(4):
            bucket = WeightedShuffle()
            bucket.addn(i, 4)
            nested.add(bucket)
        nested.shuffle(2, rng=random.Random(seed))
        visits = list(nested.buckets_in_order())
        assert all(a is not b for a, b in zip(visits, visits[1:]))
        assert _no_adjacent_repeats(list(nested))

    def test_bucket_weight_is_its_size(self):
        nested = _nested([{"a": 3}, {"b": 1, "c": 1}])
        visits = list(nested.buckets_in_order())
        assert len(visits) == 5
        assert nested.bucket_count() == 2

    def test_empty(self):
        nested = NestedShuffle()
        nested.shuffle(rng=random.Random(1))
        assert nested.is_empty()
        assert list(nested) == []

    def test_empty_bucket_contributes_nothing(self):
        nested = _nested([{}, {"a": 2}])
        nested.shuffle(rng=random.Random(1))
        assert list(nested) == ["a", "a"]

    def test_bucket_resized_after_add_raises(self):
        bucket = _weighted({"a": 1})
        nested = NestedShuffle()
        nested.add(bucket)
        bucket.add("b")
        with pytest.raises(RuntimeError, match="changed size"):
            nested.shuffle(rng=random.Random(1))

    def test_reshuffle_gives_fresh_order_with_same_content(self):
        nested = _nested([{f"a{i}": 1 for i in range(6)}, {f"b{i}": 1 for i in range(6)}])
        rng = random.Random(17)
        orders = []
        for _ in range(5):
            nested.shuffle(rng=rng)
            orders.append(list(nested))
        assert all(Counter(o) == Counter(orders[0]) for o in orders)
        assert len({tuple(o) for o in orders}) > 1
