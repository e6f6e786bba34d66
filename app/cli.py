"""Command-line entry point.

    artist-shuffle [options] INPUTS -- OUTPUTS

  1. Read every input (directories / playlist files) → Tracks
  2. Group by artist, weight by rating
  3. For every output: reshuffle → write playlist (or JSON export)
  4. No outputs after ``--`` → print the order to stdout
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from app.config import Settings, get_settings
from app.library import load_inputs
from core.buckets import ArtistBuckets
from core.exporter import export_order, render_playlist
from core.shuffle import NestedShuffle

logger = logging.getLogger(__name__)

_DESCRIPTION = """\
Create a shuffled playlist where songs from the same artist are spread out.
Artist names come from the files' tags; if a tag is missing the artist is
taken from the directory layout (Artist/Album/track). Rated songs are
repeated more often: every 200 points of rating (0-255) adds one play.
Output paths are absolute or relative to the playlist, like the inputs."""

_EPILOG = """\
arguments:
  INPUTS   directories or .m3u/.csv/.txt files ("." if empty)
  OUTPUTS  files (output to terminal if empty; *.json gets a JSON export)

examples:
  artist-shuffle ~/Music -- playlist.m3u
  artist-shuffle playlist1.m3u playlist2.m3u -- shuffled.m3u"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="artist-shuffle",
        usage="%(prog)s [options] INPUTS -- OUTPUTS",
        description=_DESCRIPTION,
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("inputs", nargs="*", help=argparse.SUPPRESS)
    parser.add_argument("--lookahead", type=int, default=None,
                        help="window for spreading out repeats (default from settings: 10)")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed the random generator for a reproducible order")
    parser.add_argument("--log-level", default=None,
                        help="logging level (DEBUG, INFO, WARNING, ...)")
    return parser


def _split_args(argv: Sequence[str]) -> Tuple[List[str], Optional[List[str]]]:
    """Split at the first ``--``; outputs is ``None`` if there is none."""
    argv = list(argv)
    if "--" not in argv:
        return argv, None
    idx = argv.index("--")
    return argv[:idx], argv[idx + 1:]


def _write_output(
    target: Path,
    nested: NestedShuffle[str],
    *,
    lookahead: int,
    seed: Optional[int],
) -> None:
    order = list(nested)
    if target.suffix.lower() == ".json":
        text = export_order(
            order,
            bucket_count=nested.bucket_count(),
            max_lookahead=lookahead,
            seed=seed,
        )
    else:
        text = render_playlist(order, target)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")
    logger.info("Wrote %d entries to %s", len(order), target)


def run(
    inputs: Sequence[str],
    outputs: Sequence[str],
    settings: Settings,
    *,
    lookahead: int,
    seed: Optional[int] = None,
) -> int:
    """Shuffle *inputs* into every output; returns the exit code."""
    tracks = load_inputs(inputs or ["."], settings)
    buckets: ArtistBuckets[str] = ArtistBuckets(rating_step=settings.rating_step)
    for track in tracks:
        buckets.add_track(track)
    logger.info("%d track(s) from %d artist(s), %d slot(s)",
                len(tracks), len(buckets), buckets.total())

    rng = random.Random(seed)
    nested = buckets.build()

    if not outputs:
        nested.shuffle(lookahead, rng=rng)
        sys.stdout.write(render_playlist(nested))
        return 0

    status = 0
    for raw in outputs:
        # Every output file gets its own order.
        nested.shuffle(lookahead, rng=rng)
        try:
            _write_output(Path(raw), nested, lookahead=lookahead, seed=seed)
        except OSError as exc:
            logger.error("Could not write %s: %s", raw, exc)
            status = 1
    return status


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = get_settings()
    head, outputs = _split_args(sys.argv[1:] if argv is None else argv)
    parser = _build_parser()
    args = parser.parse_intermixed_args(head)

    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if outputs is None:
        parser.print_help()
        return 2

    lookahead = args.lookahead if args.lookahead is not None else settings.max_lookahead
    seed = args.seed if args.seed is not None else settings.seed
    return run(args.inputs, outputs, settings, lookahead=lookahead, seed=seed)


if __name__ == "__main__":
    sys.exit(main())
