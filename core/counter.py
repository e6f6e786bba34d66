"""Multiset of hashable items — counts repeated occurrences."""

from __future__ import annotations

from collections import Counter
from typing import Dict, Generic, Hashable, Iterator, Tuple, TypeVar

K = TypeVar("K", bound=Hashable)


class Multiset(Generic[K]):
    """Accumulates ``(item, count)`` pairs.

    Iteration order is unspecified; the pairs themselves are stable between
    calls as long as nothing is added.
    """

    def __init__(self) -> None:
        self._counts: Dict[K, int] = Counter()

    def add(self, item: K) -> None:
        self.addn(item, 1)

    def addn(self, item: K, n: int) -> None:
        if n < 0:
            raise ValueError(f"count must be >= 0, got {n}")
        if n == 0:
            return
        self._counts[item] += n

    def count(self, item: K) -> int:
        return self._counts.get(item, 0)

    def total(self) -> int:
        return sum(self._counts.values())

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, item: object) -> bool:
        return item in self._counts

    def __iter__(self) -> Iterator[Tuple[K, int]]:
        return iter(list(self._counts.items()))
