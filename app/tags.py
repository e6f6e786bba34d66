"""Audio metadata — artist and rating lookup via mutagen.

Supported tag families:
  - ID3v2 (MP3, WAV, AIFF): text frames, POPM rating (0–255)
  - Vorbis comments (FLAC, Ogg, Opus): text keys, RATING on a 0–100 scale
  - MP4 atoms (M4A, ALAC): ©ART/aART/©wrt, rate on a 0–100 scale
Anything mutagen cannot open falls back to the directory layout.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePath
from typing import Any, Optional, Tuple, Union

from mutagen import File as MutagenFile
from mutagen import MutagenError
from mutagen.id3 import ID3

logger = logging.getLogger(__name__)

PathLike = Union[str, PurePath]

# Track artist, album artist, original artist, performer, composer.
_ID3_ARTIST_FRAMES = ("TPE1", "TPE2", "TOPE", "TPE3", "TCOM")
_TEXT_ARTIST_KEYS = (
    "artist", "albumartist", "originalartist", "performer", "composer",
    "©ART", "aART", "©wrt",
)
_TEXT_RATING_KEYS = (
    "rating", "rate",
    "----:com.apple.iTunes:RATING", "----:com.apple.iTunes:rate",
)


# ---------------------------------------------------------------------------
# Path fallback
# ---------------------------------------------------------------------------

def artist_from_path(path: PathLike) -> str:
    """Guess the artist from the directory layout.

    ``Artist/Album/track.mp3`` gives ``Artist``; ``Artist/track.mp3`` gives
    ``Artist``; a bare file name gives ``""``.
    """
    pure = PurePath(path)
    dirs = [
        part for part in pure.parent.parts
        if part not in (pure.anchor, ".", "..")
    ]
    if len(dirs) >= 2:
        return dirs[-2]
    if dirs:
        return dirs[-1]
    return ""


# ---------------------------------------------------------------------------
# Tag parsing
# ---------------------------------------------------------------------------

def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, list):
        if not value:
            return None
        value = value[0]
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    text = str(value).strip()
    return text or None


def _fetch_text(tags: Any, *keys: str) -> Optional[str]:
    for key in keys:
        try:
            value = tags.get(key)
        except (KeyError, ValueError):
            continue
        if value is None:
            continue
        text = _as_text(value)
        if text:
            return text
    return None


def artist_from_tags(tags: Any) -> Optional[str]:
    """First non-empty artist-like field, or ``None``."""
    if tags is None:
        return None
    if isinstance(tags, ID3):
        for frame_id in _ID3_ARTIST_FRAMES:
            for frame in tags.getall(frame_id):
                text = _as_text(list(frame.text))
                if text:
                    return text
        return None
    return _fetch_text(tags, *_TEXT_ARTIST_KEYS)


def rating_from_text(text: str) -> Optional[int]:
    """Scale a 0–100 text rating onto the 0–255 POPM range (100 → 250)."""
    try:
        value = int(text.strip())
    except ValueError:
        return None
    if not 0 <= value <= 100:
        return None
    return value * 2 + value // 2


def rating_from_tags(tags: Any) -> Optional[int]:
    """Rating on the 0–255 scale, or ``None`` if the file is unrated."""
    if tags is None:
        return None
    if isinstance(tags, ID3):
        for frame in tags.getall("POPM"):
            rating = getattr(frame, "rating", None)
            if rating is not None:
                return int(rating)
        return None
    text = _fetch_text(tags, *_TEXT_RATING_KEYS)
    if text is None:
        return None
    return rating_from_text(text)


def read_tags(path: PathLike) -> Tuple[Optional[str], Optional[int]]:
    """Return ``(artist, rating)`` for *path*; either may be ``None``."""
    try:
        audio = MutagenFile(str(path))
    except (MutagenError, OSError) as exc:
        logger.warning("Failed to read tags for %s: %s", path, exc)
        return None, None
    if audio is None:
        logger.debug("Mutagen could not identify %s", path)
        return None, None

    tags = getattr(audio, "tags", None)
    return artist_from_tags(tags), rating_from_tags(tags)


def get_artist_and_rating(
    path: Path,
    base: Optional[Path] = None,
) -> Tuple[str, Optional[int]]:
    """Artist (tags first, then directory layout) and rating for *path*.

    When *base* is given the directory fallback looks only at the part of
    the path below *base*.
    """
    artist, rating = read_tags(path)
    if artist:
        return artist, rating
    layout = path
    if base is not None:
        try:
            layout = path.relative_to(base)
        except ValueError:
            layout = path
    return artist_from_path(layout), rating
