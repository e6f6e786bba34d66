"""Pydantic models shared across the application."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class Track(BaseModel):
    """A playable file plus the metadata the shuffler cares about."""

    path: str  # as given on input; relative paths are relative to the cwd
    artist: str = ""
    rating: Optional[int] = Field(default=None, ge=0, le=255)  # POPM scale


class ShuffleEntry(BaseModel):
    """One input triple: which bucket, which item, how many times."""

    bucket: str
    item: str
    weight: int = Field(default=1, ge=1)


class ShuffleRequest(BaseModel):
    """Body of ``POST /shuffle``."""

    entries: List[ShuffleEntry] = Field(default_factory=list)
    max_lookahead: int = Field(default=10, ge=0)
    seed: Optional[int] = None


class ExportPayload(BaseModel):
    """JSON export of one shuffled order."""

    shuffled_order: List[str]
    bucket_count: int = 0
    max_lookahead: int = 10
    seed: Optional[int] = None
    exported_at: str = ""

    model_config = {
        "json_schema_extra": {
            "description": "One artist-spread play order, first item plays first."
        }
    }
