"""Input discovery — walk directories and read playlist files into Tracks.

Inputs are either directories (scanned recursively, hidden entries
skipped) or playlist files (.m3u/.txt/.csv, one path per line).  Every
file found becomes a ``Track`` with artist and rating taken from its tags,
falling back to the directory layout for the artist.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from app.config import Settings, get_settings
from app.tags import get_artist_and_rating
from core.models import Track

logger = logging.getLogger(__name__)


def _track(path: Path, base: Optional[Path] = None) -> Track:
    artist, rating = get_artist_and_rating(path, base)
    return Track(path=str(path), artist=artist, rating=rating)


# ---------------------------------------------------------------------------
# Directories
# ---------------------------------------------------------------------------

def scan_directory(root: Path, settings: Optional[Settings] = None) -> Iterator[Track]:
    """Yield a Track for every (non-hidden) file below *root*."""
    settings = settings or get_settings()
    root = Path(root)
    if not root.is_dir():
        return

    stack = [root]
    while stack:
        directory = stack.pop()
        try:
            entries = sorted(directory.iterdir())
        except OSError as exc:
            logger.warning("Cannot read directory %s: %s", directory, exc)
            continue
        for entry in entries:
            if entry.name.startswith(".") and not settings.include_hidden:
                continue
            if entry.is_dir():
                if entry.is_symlink() and not settings.follow_symlinks:
                    logger.debug("Skipping symlinked directory %s", entry)
                    continue
                stack.append(entry)
            elif entry.is_file() and settings.accepts(entry.name):
                yield _track(entry, root)


# ---------------------------------------------------------------------------
# Playlist files
# ---------------------------------------------------------------------------

def read_playlist(file: Path, settings: Optional[Settings] = None) -> Iterator[Track]:
    """Yield a Track per entry of a playlist file.

    Blank lines and ``#`` lines (extended M3U directives) are skipped.
    Relative entries are resolved against the playlist's directory.
    """
    settings = settings or get_settings()
    file = Path(file)
    parent = file.parent
    try:
        text = file.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.warning("Cannot read playlist %s: %s", file, exc)
        return

    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        entry = Path(line)
        if not settings.accepts(entry.name):
            continue
        path = entry if entry.is_absolute() else parent / entry
        yield _track(path, parent)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def load_inputs(
    inputs: Iterable[str],
    settings: Optional[Settings] = None,
) -> List[Track]:
    """Collect Tracks from every input path; missing inputs are skipped."""
    settings = settings or get_settings()
    tracks: List[Track] = []
    for raw in inputs:
        path = Path(raw)
        if path.is_dir():
            found = list(scan_directory(path, settings))
        elif path.is_file():
            found = list(read_playlist(path, settings))
        else:
            logger.warning("Input path %s doesn't exist", path)
            continue
        logger.info("Loaded %d track(s) from %s", len(found), path)
        tracks.extend(found)
    return tracks
