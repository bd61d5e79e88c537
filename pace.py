"""Reading velocity and time-to-finish estimates from the read shelf."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from models import EtaEstimate, FeedItem

NOMINAL_BOOK_PAGES = 350
VELOCITY_SAMPLE_SIZE = 3
MIN_VELOCITY = 0.05  # books/day
MAX_VELOCITY = 1.2
MIN_ETA_DAYS = 0.5
MAX_ETA_DAYS = 14.0
WINDOW_DAYS = 30

_SECONDS_PER_DAY = 86_400

# (minimum books/day, label), highest first.
_VELOCITY_BANDS: tuple[tuple[float, str], ...] = (
    (0.70, "locked in"),
    (0.35, "steady"),
    (0.15, "slow"),
)

# (exclusive upper bound in days, label)
_ETA_BUCKETS: tuple[tuple[float, str], ...] = (
    (1, "today / tomorrow"),
    (2, "1–2 days"),
    (4, "2–4 days"),
    (7, "within a week"),
)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def compute_velocity(read_items: list[FeedItem] | None) -> float | None:
    """Books per day across the most recently finished items (interval method).

    Uses up to VELOCITY_SAMPLE_SIZE dated items. Returns None with fewer than
    two dates or a non-positive span; otherwise ``(n - 1) / days`` clamped to
    [MIN_VELOCITY, MAX_VELOCITY].
    """
    dates = sorted(
        (item.finished_at for item in read_items or [] if item.finished_at is not None),
        reverse=True,
    )[:VELOCITY_SAMPLE_SIZE]
    if len(dates) < 2:
        return None

    days = (dates[0] - dates[-1]).total_seconds() / _SECONDS_PER_DAY
    if days <= 0:
        return None

    return clamp((len(dates) - 1) / days, MIN_VELOCITY, MAX_VELOCITY)


def velocity_label(velocity: float) -> str:
    for threshold, label in _VELOCITY_BANDS:
        if velocity >= threshold:
            return label
    return "slump"


def estimate_eta(velocity: float | None, percent: int | None) -> EtaEstimate | None:
    """Bucket the days left on the current book; None when velocity is unknown.

    Without a percent the book is assumed half read and confidence drops to
    "medium".
    """
    if velocity is None:
        return None

    if percent is None:
        remaining_pages = NOMINAL_BOOK_PAGES * 0.5
        confidence = "medium"
    else:
        remaining_pages = NOMINAL_BOOK_PAGES * (1 - percent / 100)
        confidence = "high"

    days = clamp(remaining_pages / (NOMINAL_BOOK_PAGES * velocity), MIN_ETA_DAYS, MAX_ETA_DAYS)

    label = "1–2 weeks"
    for upper, bucket in _ETA_BUCKETS:
        if days < upper:
            label = bucket
            break

    return EtaEstimate(label=label, confidence=confidence, days=days)


def books_in_window(
    read_items: list[FeedItem] | None,
    days: int = WINDOW_DAYS,
    now: datetime | None = None,
) -> int:
    """Count items finished within the trailing ``days`` window."""
    now = now or datetime.now(UTC)
    cutoff = now - timedelta(days=days)
    return sum(
        1
        for item in read_items or []
        if item.finished_at is not None and cutoff <= item.finished_at <= now
    )


def average_rating(read_items: list[FeedItem] | None) -> float | None:
    ratings = [item.rating for item in read_items or [] if item.rating is not None]
    if not ratings:
        return None
    return sum(ratings) / len(ratings)
