"""Shared typed models for the reading-card pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ProgressSource(str, Enum):
    """Where a progress percentage came from."""

    MANUAL = "manual"
    HTML = "html"
    RSS = "rss"
    CACHE = "cache"


@dataclass(frozen=True, slots=True)
class FeedItem:
    """One shelf entry parsed from a Goodreads RSS feed."""

    title: str
    link: str
    author: str = ""
    rating: int | None = None
    finished_at: datetime | None = None
    book_url: str | None = None
    image_url: str | None = None
    fields: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ProgressRecord:
    """A resolved reading-progress value, as persisted in the cache file."""

    percent: int
    source: ProgressSource
    current: int | None = None
    total: int | None = None
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if isinstance(self.percent, bool) or not isinstance(self.percent, int):
            raise ValueError(f"percent must be an integer, got {self.percent!r}")
        if not 0 <= self.percent <= 100:
            raise ValueError(f"percent out of range 0-100: {self.percent}")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"percent": self.percent, "source": self.source.value}
        if self.current is not None:
            data["current"] = self.current
        if self.total is not None:
            data["total"] = self.total
        data["updatedAt"] = self.updated_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProgressRecord:
        """Build a record from cache JSON; raises ValueError on bad shape."""
        if "percent" not in data:
            raise ValueError("cache record is missing 'percent'")

        try:
            source = ProgressSource(data.get("source", ProgressSource.CACHE.value))
        except ValueError:
            source = ProgressSource.CACHE

        current = _optional_int(data.get("current"))
        total = _optional_int(data.get("total"))
        # Page counts are kept only as a consistent pair.
        if current is None or total is None or not 0 <= current <= total or total <= 0:
            current = total = None

        return cls(
            percent=data["percent"],
            source=source,
            current=current,
            total=total,
            updated_at=_parse_updated_at(data.get("updatedAt")),
        )


@dataclass(frozen=True, slots=True)
class ResolvedProgress:
    """Outcome of progress resolution; ``record is None`` means unknown."""

    record: ProgressRecord | None
    inferred: bool = False

    @property
    def percent(self) -> int | None:
        return self.record.percent if self.record is not None else None


@dataclass(frozen=True, slots=True)
class EtaEstimate:
    """Bucketed time-to-finish for the current book."""

    label: str
    confidence: str
    days: float


def _optional_int(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _parse_updated_at(raw: Any) -> datetime:
    # Older cache files stored epoch milliseconds.
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        try:
            return datetime.fromtimestamp(raw / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return datetime.now(UTC)
    if isinstance(raw, str):
        try:
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            return datetime.now(UTC)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return datetime.now(UTC)
