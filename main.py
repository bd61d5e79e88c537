"""CLI entrypoint for the Goodreads README reading card."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from config import CURRENTLY_READING_SHELF, READ_SHELF, Config
from document_patcher import (
    CURRENTLY_READING_TAG,
    LAST_UPDATED_TAG,
    READING_CARD_TAG,
    RECENT_READS_TAG,
    patch_document,
)
from goodreads_feed import fetch_shelves
from pace import average_rating, books_in_window, compute_velocity, estimate_eta
from progress import resolve_progress
from render import (
    render_current_book,
    render_last_updated,
    render_reading_card,
    render_recent_reads,
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Update README sections from Goodreads shelves")
    parser.add_argument("--readme", type=Path, default=None, help="Document to patch (default: README.md)")
    parser.add_argument("--cache", type=Path, default=None, help="Progress cache file")
    parser.add_argument("--user-id", default=None, help="Goodreads user id")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the patched document instead of writing it",
    )
    return parser.parse_args(argv)


def run(config: Config, dry_run: bool = False) -> str:
    """Run one update cycle and return the patched document text.

    Raises OSError when the target document cannot be read; every other
    failure degrades to whatever sections can still be rendered.
    """
    document = config.readme_path.read_text(encoding="utf-8")

    shelves = fetch_shelves(config)
    current_items = shelves[CURRENTLY_READING_SHELF]
    read_items = shelves[READ_SHELF]

    resolved = resolve_progress(document, current_items, config)
    velocity = compute_velocity(read_items)
    eta = estimate_eta(velocity, resolved.percent)
    logging.info(
        "Pace: velocity=%s eta=%s",
        "undefined" if velocity is None else f"{velocity:.2f}",
        eta.label if eta else "none",
    )

    sections = {
        CURRENTLY_READING_TAG: render_current_book(current_items, resolved),
        READING_CARD_TAG: render_reading_card(
            resolved,
            velocity=velocity,
            eta=eta,
            window_count=books_in_window(read_items),
            avg_rating=average_rating(read_items),
        ),
        RECENT_READS_TAG: render_recent_reads(read_items, config.recent_reads),
        LAST_UPDATED_TAG: render_last_updated(),
    }
    patched = patch_document(document, sections)

    if dry_run:
        logging.info("[dry-run] Not writing %s", config.readme_path)
    elif patched != document:
        config.readme_path.write_text(patched, encoding="utf-8")
        logging.info("Updated %s", config.readme_path)
    else:
        logging.info("%s already up to date", config.readme_path)

    return patched


def main(argv: list[str] | None = None) -> None:
    """Initialize config and execute the pipeline."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)

    config = Config.from_env().with_overrides(
        readme_path=args.readme,
        cache_path=args.cache,
        user_id=args.user_id,
    )

    try:
        patched = run(config, dry_run=args.dry_run)
    except OSError as exc:
        logging.error("Cannot update target document %s: %s", config.readme_path, exc)
        sys.exit(1)

    if args.dry_run:
        print(patched)


if __name__ == "__main__":
    main()
