"""Replace tagged regions of a Markdown document."""

from __future__ import annotations

import logging
import re

LOGGER = logging.getLogger(__name__)

CURRENTLY_READING_TAG = "GOODREADS-CURRENTLY-READING"
READING_CARD_TAG = "GOODREADS-READING-CARD"
RECENT_READS_TAG = "GOODREADS-RECENT-READS"
LAST_UPDATED_TAG = "GOODREADS-LAST-UPDATED"

SECTION_TAGS = (CURRENTLY_READING_TAG, READING_CARD_TAG, RECENT_READS_TAG, LAST_UPDATED_TAG)


def replace_section(content: str, tag: str, body: str) -> str:
    """Swap the whole ``<!-- TAG:START -->...<!-- TAG:END -->`` span for fresh content.

    The span is replaced, not appended to, so repeated runs are idempotent.
    A document without the region is returned unchanged.
    """
    start = f"<!-- {tag}:START -->"
    end = f"<!-- {tag}:END -->"
    pattern = re.compile(re.escape(start) + r".*?" + re.escape(end), re.DOTALL)
    replacement = f"{start}\n{body}\n{end}"

    patched, count = pattern.subn(lambda _m: replacement, content, count=1)
    if count == 0:
        LOGGER.info("Region %s not found in document; skipping", tag)
    return patched


def patch_document(content: str, sections: dict[str, str]) -> str:
    for tag, body in sections.items():
        content = replace_section(content, tag, body)
    return content
