"""Markdown fragments for the README sections."""

from __future__ import annotations

from datetime import UTC, datetime
from email.utils import format_datetime

from models import EtaEstimate, FeedItem, ResolvedProgress
from pace import velocity_label

PROGRESS_BAR_CELLS = 10

_VELOCITY_EMOJI = {
    "locked in": "🔥",
    "steady": "📖",
    "slow": "🐢",
    "slump": "💤",
}
_CONFIDENCE_EMOJI = {"high": "🟢", "medium": "🟡"}


def progress_bar(percent: int) -> str:
    filled = round(percent / 100 * PROGRESS_BAR_CELLS)
    return "▰" * filled + "▱" * (PROGRESS_BAR_CELLS - filled)


def render_progress(resolved: ResolvedProgress) -> str:
    """One-line progress text; unknown progress never renders as 0%."""
    record = resolved.record
    if record is None:
        return "in progress, percentage unknown"

    if resolved.inferred:
        text = f"≈{record.percent}%, inferred from {record.source.value}"
    else:
        text = f"{record.percent}%"
    if record.current is not None and record.total is not None:
        text += f" (page {record.current} of {record.total})"
    return f"{text} {progress_bar(record.percent)}"


def render_current_book(items: list[FeedItem] | None, resolved: ResolvedProgress) -> str:
    if not items:
        return "_Not reading anything right now._"

    first, *others = items
    lines = [f"📖 {_book_link(first)}", "", f"Progress: {render_progress(resolved)}"]
    if others:
        lines.append("")
        lines.append("Also reading:")
        lines.extend(f"- {_book_link(item)}" for item in others)
    return "\n".join(lines)


def render_reading_card(
    resolved: ResolvedProgress,
    velocity: float | None = None,
    eta: EtaEstimate | None = None,
    window_count: int = 0,
    avg_rating: float | None = None,
) -> str:
    """Reading-insights table.

    The velocity and ETA rows are left out entirely when velocity is
    undefined; there is no zero state for either.
    """
    rows: list[str] = []

    if velocity is not None:
        label = velocity_label(velocity)
        rows.append(
            f"| **Reading velocity** | {label} {_VELOCITY_EMOJI[label]} ({velocity:.2f} books/day) |"
        )
    if eta is not None:
        rows.append(
            f"| **ETA** | {eta.label} · {_CONFIDENCE_EMOJI[eta.confidence]} "
            f"{eta.confidence} confidence |"
        )
    rows.append(f"| **Progress** | {render_progress(resolved)} |")
    if window_count > 0:
        noun = "book" if window_count == 1 else "books"
        rows.append(f"| **Last 30 days** | {window_count} {noun} finished |")
    if avg_rating is not None:
        rows.append(f"| **Average rating** | {avg_rating:.1f} ★ |")

    return "\n".join(["| 📊 **Reading insights** | |", "|---|---|", *rows])


def render_recent_reads(items: list[FeedItem] | None, limit: int) -> str:
    if not items:
        return "_No finished books yet._"

    lines = []
    for item in items[:limit]:
        line = f"- {_book_link(item)}"
        if item.rating is not None:
            line += f" {'★' * item.rating}{'☆' * (5 - item.rating)}"
        lines.append(line)
    return "\n".join(lines)


def render_last_updated(now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    return f"_⏳ last updated on {format_datetime(now.astimezone(UTC), usegmt=True)}_"


def _book_link(item: FeedItem) -> str:
    title = item.title.replace("[", "\\[").replace("]", "\\]")
    url = item.book_url or item.link
    text = f"[{title}]({url})" if url else title
    return f"**{text}** by {item.author}" if item.author else f"**{text}**"
