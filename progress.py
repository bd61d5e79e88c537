"""Reading-progress resolution across manual, scraped, RSS and cached sources.

Sources are tried in a fixed order and the first usable one wins:

    manual override > scraped HTML > RSS fields > stale cache > unknown

Fresh results (the first three) are written back to the cache. A cached
value is reported as inferred and never rewritten. Nothing in here raises;
every failure falls through to the next source.
"""

from __future__ import annotations

import logging
import re
from typing import Callable

from config import Config
from html_scraper import PageFraction, scrape_page_fraction
from models import FeedItem, ProgressRecord, ProgressSource, ResolvedProgress
from progress_cache import load_cache, save_cache

LOGGER = logging.getLogger(__name__)

# Dedicated progress fields first, then free-text fields.
RSS_PROGRESS_FIELDS: tuple[str, ...] = (
    "user_reading_progress",
    "reading_progress",
    "progress",
    "percent_complete",
    "user_status",
    "description",
    "book_description",
    "user_review",
    "content",
)

_PERCENT_PATTERN = re.compile(r"(?<!\d)(\d{1,3})\s*%")

PageFetcher = Callable[[str, Config], PageFraction | None]


def find_manual_override(document: str, marker: str) -> int | None:
    """Return the ``<marker>:<0-100>`` value embedded in ``document``, if any.

    The marker may sit inside an HTML comment and tolerates whitespace
    around the colon, e.g. ``<!-- GOODREADS-PROGRESS-OVERRIDE: 42 -->``.
    """
    pattern = re.compile(
        r"(?:<!--\s*)?" + re.escape(marker) + r"\s*:\s*(\d{1,3})(?!\d)\s*(?:-->)?"
    )
    match = pattern.search(document)
    if match is None:
        return None

    value = int(match.group(1))
    if value > 100:
        LOGGER.warning("Ignoring manual override %s: out of range 0-100", value)
        return None
    return value


def extract_rss_percent(item: FeedItem) -> int | None:
    """Return the first in-range ``<digits>%`` found across RSS_PROGRESS_FIELDS."""
    for name in RSS_PROGRESS_FIELDS:
        text = item.fields.get(name)
        if not text:
            continue
        for match in _PERCENT_PATTERN.finditer(text):
            value = int(match.group(1))
            if value <= 100:
                LOGGER.debug("RSS progress %s%% found in field=%s", value, name)
                return value
    return None


def resolve_progress(
    document: str,
    current_items: list[FeedItem] | None,
    config: Config,
    fetch_page: PageFetcher = scrape_page_fraction,
) -> ResolvedProgress:
    """Resolve one progress value for the book currently being read.

    Args:
        document: Target document text, searched for the manual override marker.
        current_items: Parsed currently-reading shelf; None when the feed was
            unavailable or malformed, which skips the HTML and RSS sources.
        config: Run configuration (override marker, cache path, HTTP settings).
        fetch_page: Fetch-and-extract callable for the book's page.
    """
    override = find_manual_override(document, config.override_marker)
    if override is not None:
        record = ProgressRecord(percent=override, source=ProgressSource.MANUAL)
        _persist(config, record)
        LOGGER.info("Progress resolved from manual override: %s%%", override)
        return ResolvedProgress(record)

    first = current_items[0] if current_items else None
    if first is None:
        LOGGER.info("No currently-reading item available; skipping live progress sources")
    else:
        record = _from_html(first, config, fetch_page) or _from_rss(first)
        if record is not None:
            _persist(config, record)
            LOGGER.info(
                "Progress resolved from %s: %s%%", record.source.value, record.percent
            )
            return ResolvedProgress(record)

    cached = load_cache(config.cache_path)
    if cached is not None:
        LOGGER.info(
            "Progress inferred from cache: %s%% (source=%s)",
            cached.percent,
            cached.source.value,
        )
        return ResolvedProgress(cached, inferred=True)

    LOGGER.info("No progress available from any source")
    return ResolvedProgress(None)


def _from_html(
    item: FeedItem, config: Config, fetch_page: PageFetcher
) -> ProgressRecord | None:
    url = item.link or item.book_url
    if not url:
        return None

    try:
        fraction = fetch_page(url, config)
    except Exception as exc:  # a scraping bug must not abort the run
        LOGGER.warning("HTML progress scrape failed for url=%s: %s", url, exc)
        return None
    if fraction is None:
        return None

    try:
        return ProgressRecord(
            percent=fraction.percent,
            source=ProgressSource.HTML,
            current=fraction.current,
            total=fraction.total,
        )
    except ValueError as exc:
        LOGGER.warning("Rejected scraped progress %s/%s: %s", fraction.current, fraction.total, exc)
        return None


def _from_rss(item: FeedItem) -> ProgressRecord | None:
    percent = extract_rss_percent(item)
    if percent is None:
        return None
    return ProgressRecord(percent=percent, source=ProgressSource.RSS)


def _persist(config: Config, record: ProgressRecord) -> None:
    try:
        save_cache(config.cache_path, record)
    except OSError as exc:
        LOGGER.warning("Could not write progress cache %s: %s", config.cache_path, exc)
