"""Shuffle engine — pure business logic, no I/O.

Provides:
- Fisher–Yates shuffle (unbiased)
- WeightedShuffle: items with integer weights, shuffled so copies of the
  same item are spread out instead of clustering
- NestedShuffle: two-level shuffle (artists, then tracks) flattened into a
  single play order
"""

from __future__ import annotations

import logging
import random
from typing import Generic, Iterator, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_LOOKAHEAD = 10
_EXTRA_PASSES = 4


# ---------------------------------------------------------------------------
# Fisher–Yates Shuffle
# ---------------------------------------------------------------------------

def fisher_yates_shuffle(
    items: List[T],
    rng: Optional[random.Random] = None,
) -> List[T]:
    """In-place unbiased Fisher–Yates (Knuth) shuffle.

    Parameters
    ----------
    items:
        List to shuffle.  Will be **mutated** in place.
    rng:
        Optional ``random.Random`` instance for deterministic testing.

    Returns
    -------
    The same list (shuffled in place) for convenience.
    """
    rng = rng or random.Random()
    n = len(items)
    for i in range(n - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


# ---------------------------------------------------------------------------
# Anti-clustering repair
# ---------------------------------------------------------------------------

def _sweep(order: List[int], i: int, lookahead: int) -> int:
    """Push copies of ``order[i]`` out of the window that follows *i*.

    Returns the chain length (how far past *i* the last swap reached), or 0
    when the window held no copy.
    """
    n = len(order)
    current = order[i]
    swap = i
    hit = False
    for step in range(1, lookahead):
        j = (i + step) % n
        swap += 1
        attempts = 0
        while order[j] == current and attempts < n:
            hit = True
            swap += 1
            attempts += 1
            k = swap % n
            order[j], order[k] = order[k], order[j]
    return swap - i if hit else 0


def _repair(order: List[int], max_same: int, max_lookahead: int) -> int:
    """Run the bounded repair passes over *order* in place.

    Returns the effective lookahead.
    """
    n = len(order)
    lookahead = min(max_lookahead, n // max_same)
    if lookahead < 2:
        # Too skewed (or too small) to separate anything.
        return lookahead

    chain = 0
    for i in range(n):
        chain = max(chain - 1, _sweep(order, i, lookahead))

    passes = 1
    for _ in range(_EXTRA_PASSES):
        if chain < 1:
            break
        passes += 1
        for i in range(n):
            if chain < 1:
                break
            chain = max(chain - 1, _sweep(order, i, lookahead))

    logger.debug(
        "Repaired %d slots in %d pass(es), lookahead %d, residual chain %d",
        n, passes, lookahead, chain,
    )
    return lookahead


# ---------------------------------------------------------------------------
# WeightedShuffle
# ---------------------------------------------------------------------------

class WeightedShuffle(Generic[T]):
    """Items with integer weights, expanded into one slot per unit of weight.

    ``shuffle()`` permutes the slots and then spreads out slots that belong
    to the same item.  Iteration yields the items in slot order and is
    stable until the next ``shuffle()``.
    """

    def __init__(self) -> None:
        self._items: List[T] = []
        # One entry per slot, each a valid index into self._items.
        self._order: List[int] = []
        self._max_same = 1

    def add(self, item: T) -> None:
        self.addn(item, 1)

    def addn(self, item: T, weight: int) -> None:
        """Register *item* with *weight* slots.

        A zero weight registers the item without giving it any slot, so it
        never shows up in the output.
        """
        if isinstance(weight, bool) or not isinstance(weight, int):
            raise TypeError(f"weight must be an int, got {type(weight).__name__}")
        if weight < 0:
            raise ValueError(f"weight must be >= 0, got {weight}")
        index = len(self._items)
        self._items.append(item)
        self._order.extend([index] * weight)
        self._max_same = max(self._max_same, weight)

    @property
    def max_same(self) -> int:
        """Largest weight registered so far (at least 1)."""
        return self._max_same

    def shuffle(
        self,
        max_lookahead: int = DEFAULT_LOOKAHEAD,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Randomize the slot order, then break up runs of the same item.

        The repair window is ``min(max_lookahead, len(self) // max_same)``;
        when the heaviest item owns more than half the slots the window
        collapses and some adjacency is left in place.
        """
        if not self._order:
            return
        fisher_yates_shuffle(self._order, rng=rng)
        _repair(self._order, self._max_same, max_lookahead)

    def get(self, index: int) -> Optional[T]:
        """Item at shuffled position *index*, or ``None`` if out of range."""
        if 0 <= index < len(self._order):
            return self._items[self._order[index]]
        return None

    def is_empty(self) -> bool:
        return not self._order

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[T]:
        for slot in self._order:
            yield self._items[slot]

    def __repr__(self) -> str:
        return f"WeightedShuffle(items={len(self._items)}, slots={len(self._order)})"


# ---------------------------------------------------------------------------
# NestedShuffle
# ---------------------------------------------------------------------------

class NestedShuffle(Generic[T]):
    """A weighted shuffle of buckets, each bucket a ``WeightedShuffle``.

    Every bucket takes part in the outer shuffle with a weight equal to its
    slot count.  Iterating walks the outer order and, on each visit to a
    bucket, emits that bucket's next item.
    """

    def __init__(self) -> None:
        self._buckets: List[WeightedShuffle[T]] = []
        self._sizes: List[int] = []
        self._outer: WeightedShuffle[int] = WeightedShuffle()

    def add(self, bucket: WeightedShuffle[T]) -> None:
        """Take ownership of a populated *bucket*.

        The bucket must not be modified after this call.
        """
        size = len(bucket)
        self._outer.addn(len(self._buckets), size)
        self._buckets.append(bucket)
        self._sizes.append(size)

    def shuffle(
        self,
        max_lookahead: int = DEFAULT_LOOKAHEAD,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Shuffle every bucket, then the order in which buckets are visited."""
        rng = rng or random.Random()
        for index, bucket in enumerate(self._buckets):
            if len(bucket) != self._sizes[index]:
                raise RuntimeError(
                    f"bucket {index} changed size after it was added "
                    f"({self._sizes[index]} -> {len(bucket)})"
                )
            bucket.shuffle(max_lookahead, rng=rng)
        self._outer.shuffle(max_lookahead, rng=rng)

    def buckets_in_order(self) -> Iterator[WeightedShuffle[T]]:
        """Buckets in outer (visit) order, one entry per slot."""
        for index in self._outer:
            yield self._buckets[index]

    def bucket_count(self) -> int:
        return len(self._buckets)

    def is_empty(self) -> bool:
        return self._outer.is_empty()

    def __len__(self) -> int:
        return len(self._outer)

    def __iter__(self) -> Iterator[T]:
        cursors = [0] * len(self._buckets)
        for index in self._outer:
            item = self._buckets[index].get(cursors[index])
            cursors[index] += 1
            yield item  # type: ignore[misc]
