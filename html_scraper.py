"""Page-fraction scraping from a book's Goodreads page.

Goodreads does not expose reading progress in a stable API, so this falls
back to pattern-matching "current of total" page counts in the raw HTML.
Extraction is kept separate from fetching so it can be tested offline.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from config import Config
from goodreads_feed import fetch_text

LOGGER = logging.getLogger(__name__)

# Anything above this is more likely a stray page number than a book length.
MAX_PLAUSIBLE_PAGES = 10_000

# Tried in order; the first valid match wins.
PAGE_FRACTION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bpage\s+(\d{1,6})\s+of\s+(\d{1,6})\b", re.IGNORECASE),
    re.compile(r"\b(\d{1,6})\s+of\s+(\d{1,6})\s+pages\b", re.IGNORECASE),
    re.compile(r"\b(\d{1,6})\s*/\s*(\d{1,6})\s+pages\b", re.IGNORECASE),
)


@dataclass(frozen=True, slots=True)
class PageFraction:
    current: int
    total: int

    @property
    def percent(self) -> int:
        return self.current * 100 // self.total


def extract_page_fraction(html: str | None) -> PageFraction | None:
    """Return the first plausible current/total page pair in ``html``.

    Each pattern contributes only its first match. A match with
    ``total <= 0``, ``total > MAX_PLAUSIBLE_PAGES`` or ``current > total``
    is rejected and the next pattern is tried.
    """
    if not html:
        return None

    for pattern in PAGE_FRACTION_PATTERNS:
        match = pattern.search(html)
        if match is None:
            continue

        current, total = int(match.group(1)), int(match.group(2))
        if 0 < total <= MAX_PLAUSIBLE_PAGES and 0 <= current <= total:
            return PageFraction(current=current, total=total)

        LOGGER.info(
            "Rejected page fraction %s/%s from pattern %r",
            current,
            total,
            pattern.pattern,
        )

    return None


def scrape_page_fraction(url: str, config: Config) -> PageFraction | None:
    """Fetch ``url`` and extract a page fraction; None if unreachable or absent."""
    html = fetch_text(url, config)
    if html is None:
        return None
    return extract_page_fraction(html)
