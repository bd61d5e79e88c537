"""Flat JSON file holding the last resolved ProgressRecord."""

from __future__ import annotations

import json
import logging
import os
from json import JSONDecodeError
from pathlib import Path

from models import ProgressRecord

LOGGER = logging.getLogger(__name__)


def load_cache(path: Path) -> ProgressRecord | None:
    """Return the cached record, or None if absent, unreadable or invalid."""
    if not path.exists():
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, JSONDecodeError) as exc:
        LOGGER.warning("Ignoring unreadable progress cache %s: %s", path, exc)
        return None

    if not isinstance(data, dict):
        LOGGER.warning("Ignoring progress cache %s: expected a JSON object", path)
        return None

    try:
        return ProgressRecord.from_dict(data)
    except ValueError as exc:
        LOGGER.warning("Ignoring invalid progress cache %s: %s", path, exc)
        return None


def save_cache(path: Path, record: ProgressRecord) -> None:
    """Replace the cache file with ``record``; no history is kept."""
    tmp_path = path.with_name(path.name + ".tmp")
    tmp_path.write_text(json.dumps(record.to_dict(), indent=2) + "\n", encoding="utf-8")
    os.replace(tmp_path, path)
    LOGGER.info("Saved progress cache: percent=%s source=%s", record.percent, record.source.value)
