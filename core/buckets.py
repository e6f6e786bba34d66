"""Bucket assembly — group items by artist and weight them by rating."""

from __future__ import annotations

import random
from typing import Dict, Generic, Hashable, List, Optional, TypeVar

from core.counter import Multiset
from core.models import Track
from core.shuffle import DEFAULT_LOOKAHEAD, NestedShuffle, WeightedShuffle

K = TypeVar("K", bound=Hashable)

RATING_STEP = 200


def normalize_artist(name: str) -> str:
    """Bucket key for an artist name: trimmed and case-folded."""
    return name.strip().casefold()


def rating_to_weight(rating: Optional[int], step: int = RATING_STEP) -> int:
    """Map a 0–255 rating to a play weight.

    Unrated and anything below *step* plays once; every full *step* above
    that adds one more play.
    """
    if rating is None:
        return 1
    return rating // step + 1


class ArtistBuckets(Generic[K]):
    """Items grouped per artist, ready to be turned into a ``NestedShuffle``."""

    def __init__(self, rating_step: int = RATING_STEP) -> None:
        self.rating_step = rating_step
        self._buckets: Dict[str, Multiset[K]] = {}

    def add(self, item: K, artist: str, weight: int = 1) -> None:
        """Add *item* under *artist*; adding the same item again adds weight."""
        key = normalize_artist(artist)
        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = self._buckets[key] = Multiset()
        bucket.addn(item, weight)

    def add_track(self, track: Track) -> None:
        self.add(track.path, track.artist, rating_to_weight(track.rating, self.rating_step))  # type: ignore[arg-type]

    def artists(self) -> List[str]:
        return list(self._buckets)

    def total(self) -> int:
        return sum(bucket.total() for bucket in self._buckets.values())

    def __len__(self) -> int:
        return len(self._buckets)

    def build(self) -> NestedShuffle[K]:
        """A fresh, not yet shuffled, two-level shuffle over all buckets."""
        nested: NestedShuffle[K] = NestedShuffle()
        for counts in self._buckets.values():
            bucket: WeightedShuffle[K] = WeightedShuffle()
            for item, weight in counts:
                bucket.addn(item, weight)
            nested.add(bucket)
        return nested

    def shuffled(
        self,
        max_lookahead: int = DEFAULT_LOOKAHEAD,
        rng: Optional[random.Random] = None,
    ) -> List[K]:
        """Build, shuffle, and flatten in one go."""
        nested = self.build()
        nested.shuffle(max_lookahead, rng=rng)
        return list(nested)
