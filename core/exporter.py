"""Export/Import logic — shuffled orders as JSON or playlist text."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path, PurePath
from typing import Iterable, List, Optional

from core.models import ExportPayload


def export_order(
    shuffled_order: List[str],
    *,
    bucket_count: int,
    max_lookahead: int,
    seed: Optional[int] = None,
) -> str:
    """Serialize a shuffled order to JSON.

    Returns a JSON string.
    """
    payload = ExportPayload(
        shuffled_order=shuffled_order,
        bucket_count=bucket_count,
        max_lookahead=max_lookahead,
        seed=seed,
        exported_at=datetime.now(timezone.utc).isoformat(),
    )
    return payload.model_dump_json(indent=2)


def import_order(raw_json: str) -> ExportPayload:
    """Parse JSON back into an ExportPayload.

    Raises ``ValueError`` if the JSON is invalid or does not match the schema.
    """
    try:
        data = json.loads(raw_json)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("Invalid export: expected a JSON object")

    return ExportPayload(**data)


def _relative_to(path: str, directory: Path) -> str:
    try:
        return os.path.relpath(path, directory)
    except ValueError:
        # e.g. different drives on Windows
        return path


def render_playlist(paths: Iterable[str], target: Optional[Path] = None) -> str:
    """Render *paths* as playlist text, one per line.

    Absolute paths are written unchanged.  Relative paths (relative to the
    working directory) are rewritten relative to *target*'s directory so the
    playlist still resolves from where it is saved.
    """
    base = Path(target).parent if target is not None else None
    lines = []
    for path in paths:
        if base is None or PurePath(path).is_absolute():
            lines.append(path)
        else:
            lines.append(_relative_to(path, base))
    return "".join(f"{line}\n" for line in lines)
