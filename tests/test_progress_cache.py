from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from models import ProgressRecord, ProgressSource
from progress_cache import load_cache, save_cache


@pytest.fixture
def cache_path(tmp_path: Path) -> Path:
    return tmp_path / ".goodreads-progress-cache.json"


def test_load_cache_missing_file(cache_path: Path) -> None:
    assert load_cache(cache_path) is None


def test_save_then_load(cache_path: Path) -> None:
    record = ProgressRecord(
        percent=34,
        source=ProgressSource.HTML,
        current=120,
        total=350,
        updated_at=datetime(2026, 10, 1, 12, 0, tzinfo=UTC),
    )

    save_cache(cache_path, record)

    assert load_cache(cache_path) == record
    assert not cache_path.with_name(cache_path.name + ".tmp").exists()


def test_save_cache_overwrites_wholesale(cache_path: Path) -> None:
    save_cache(cache_path, ProgressRecord(percent=34, source=ProgressSource.HTML, current=120, total=350))
    save_cache(cache_path, ProgressRecord(percent=60, source=ProgressSource.RSS))

    data = json.loads(cache_path.read_text(encoding="utf-8"))
    assert data["percent"] == 60
    assert data["source"] == "rss"
    assert "current" not in data
    assert "total" not in data
    assert "updatedAt" in data


def test_load_cache_accepts_epoch_millis(cache_path: Path) -> None:
    cache_path.write_text(json.dumps({"percent": 55, "source": "html", "updatedAt": 1_760_000_000_000}))

    record = load_cache(cache_path)

    assert record is not None
    assert record.percent == 55
    assert record.source is ProgressSource.HTML
    assert record.updated_at.year == 2025


@pytest.mark.parametrize("contents", [
    "not json",
    "[1, 2, 3]",
    '{"source": "html"}',
    '{"percent": 140, "source": "html"}',
    '{"percent": -1, "source": "rss"}',
    '{"percent": "50", "source": "rss"}',
])
def test_load_cache_rejects_bad_contents(cache_path: Path, contents: str) -> None:
    cache_path.write_text(contents)
    assert load_cache(cache_path) is None


def test_load_cache_unknown_source_becomes_cache(cache_path: Path) -> None:
    cache_path.write_text('{"percent": 20, "source": "kindle"}')

    record = load_cache(cache_path)

    assert record is not None
    assert record.source is ProgressSource.CACHE


@pytest.mark.parametrize("updated_at", ["1e300", "Infinity", "-Infinity", "NaN"])
def test_load_cache_out_of_range_timestamp_falls_back(cache_path: Path, updated_at: str) -> None:
    cache_path.write_text(f'{{"percent": 55, "source": "html", "updatedAt": {updated_at}}}')

    record = load_cache(cache_path)

    assert record is not None
    assert record.percent == 55
    assert record.source is ProgressSource.HTML
    assert record.updated_at.tzinfo is not None


@pytest.mark.parametrize("pages", [
    '"current": 500, "total": 100',
    '"current": 0, "total": 0',
    '"current": -3, "total": 100',
    '"current": 40',
    '"total": 100',
])
def test_load_cache_drops_inconsistent_page_pair(cache_path: Path, pages: str) -> None:
    cache_path.write_text(f'{{"percent": 40, "source": "html", {pages}}}')

    record = load_cache(cache_path)

    assert record is not None
    assert record.percent == 40
    assert record.current is None
    assert record.total is None
