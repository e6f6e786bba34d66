"""Routes for shuffling caller-supplied (bucket, item, weight) entries.

POST /shuffle           → JSON export of the order
POST /shuffle/playlist  → the same order as plain playlist text
"""

from __future__ import annotations

import logging
import random
from typing import List, Tuple

from fastapi import APIRouter
from fastapi.responses import Response

from core.buckets import ArtistBuckets
from core.exporter import export_order, render_playlist
from core.models import ShuffleRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shuffle", tags=["shuffle"])


def _shuffle(body: ShuffleRequest) -> Tuple[List[str], int]:
    buckets: ArtistBuckets[str] = ArtistBuckets()
    for entry in body.entries:
        buckets.add(entry.item, entry.bucket, entry.weight)
    order = buckets.shuffled(body.max_lookahead, rng=random.Random(body.seed))
    logger.info("Shuffled %d slot(s) across %d bucket(s)", len(order), len(buckets))
    return order, len(buckets)


# ---------------------------------------------------------------------------
# POST /shuffle — JSON export
# ---------------------------------------------------------------------------

@router.post("")
async def shuffle_endpoint(body: ShuffleRequest):
    """Shuffle the entries and return the order as an export payload."""
    order, bucket_count = _shuffle(body)
    json_str = export_order(
        order,
        bucket_count=bucket_count,
        max_lookahead=body.max_lookahead,
        seed=body.seed,
    )
    return Response(content=json_str, media_type="application/json")


# ---------------------------------------------------------------------------
# POST /shuffle/playlist — plain text
# ---------------------------------------------------------------------------

@router.post("/playlist")
async def shuffle_playlist_endpoint(body: ShuffleRequest):
    """Shuffle the entries and return one item per line."""
    order, _ = _shuffle(body)
    return Response(content=render_playlist(order), media_type="text/plain")
