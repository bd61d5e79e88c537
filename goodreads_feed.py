"""Goodreads shelf RSS ingestion helpers."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

import requests

from config import CURRENTLY_READING_SHELF, READ_SHELF, Config
from models import FeedItem

LOGGER = logging.getLogger(__name__)

GOODREADS_BOOK_URL = "https://www.goodreads.com/book/show/{book_id}"


def fetch_text(url: str, config: Config) -> str | None:
    """GET ``url`` and return the body text, or None on any transport/HTTP error."""
    try:
        response = requests.get(
            url,
            headers={"User-Agent": config.user_agent},
            timeout=config.request_timeout,
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        LOGGER.warning("Fetch failed for url=%s: %s", url, exc)
        return None

    return response.text


def parse_feed(text: str | None) -> list[FeedItem] | None:
    """Parse Goodreads shelf RSS into FeedItems.

    Returns None when ``text`` is empty, has no ``<rss`` root, or is not
    well-formed XML. A well-formed feed with no items returns an empty list.
    """
    if not text or "<rss" not in text:
        return None

    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        LOGGER.warning("Feed is not well-formed XML: %s", exc)
        return None

    if root.tag != "rss":
        return None
    channel = root.find("channel")
    if channel is None:
        LOGGER.warning("Feed has no <channel> element")
        return None

    items: list[FeedItem] = []
    for element in channel.findall("item"):
        item = _parse_item(element)
        if item is not None:
            items.append(item)
    return items


def fetch_shelves(config: Config) -> dict[str, list[FeedItem] | None]:
    """Fetch and parse the currently-reading and read shelves concurrently.

    Both requests are in flight at once; this returns only after both have
    completed. A shelf maps to None when it could not be fetched or parsed.
    """
    shelves = (CURRENTLY_READING_SHELF, READ_SHELF)
    with ThreadPoolExecutor(max_workers=len(shelves)) as pool:
        futures = {
            shelf: pool.submit(fetch_text, config.feed_url(shelf), config)
            for shelf in shelves
        }
        raw = {shelf: future.result() for shelf, future in futures.items()}

    parsed: dict[str, list[FeedItem] | None] = {}
    for shelf in shelves:
        items = parse_feed(raw[shelf])
        parsed[shelf] = items
        LOGGER.info(
            "Goodreads feed: shelf=%s items=%s",
            shelf,
            "unavailable" if items is None else len(items),
        )
    return parsed


def _parse_item(element: ET.Element) -> FeedItem | None:
    fields = {
        child.tag: (child.text or "").strip()
        for child in element
        if len(child) == 0
    }

    title = fields.get("title", "")
    if not title:
        return None

    book_id = fields.get("book_id")
    return FeedItem(
        title=title,
        link=fields.get("link", ""),
        author=fields.get("author_name", ""),
        rating=_parse_rating(fields.get("user_rating")),
        finished_at=_parse_rfc822(fields.get("user_read_at")) or _parse_rfc822(fields.get("pubDate")),
        book_url=GOODREADS_BOOK_URL.format(book_id=book_id) if book_id else None,
        image_url=fields.get("book_large_image_url") or fields.get("book_image_url") or None,
        fields=fields,
    )


def _parse_rating(raw: str | None) -> int | None:
    # Goodreads reports an unrated book as 0.
    try:
        rating = int(raw or "")
    except ValueError:
        return None
    return rating if 1 <= rating <= 5 else None


def _parse_rfc822(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        parsed = parsedate_to_datetime(raw)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)
