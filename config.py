"""Run configuration for the Goodreads reading-card pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

GOODREADS_RSS_URL = "https://www.goodreads.com/review/list_rss/{user_id}?shelf={shelf}"

CURRENTLY_READING_SHELF = "currently-reading"
READ_SHELF = "read"

_DEFAULT_USER_ID = "178629903"
_DEFAULT_README_PATH = "README.md"
_DEFAULT_CACHE_PATH = ".goodreads-progress-cache.json"
_DEFAULT_OVERRIDE_MARKER = "GOODREADS-PROGRESS-OVERRIDE"
_DEFAULT_REQUEST_TIMEOUT_SECONDS = 20.0
_DEFAULT_USER_AGENT = "GitHubActions/1.0"
_DEFAULT_RECENT_READS = 5


@dataclass(frozen=True, slots=True)
class Config:
    """Everything one run needs to know; built once and passed down."""

    user_id: str = _DEFAULT_USER_ID
    readme_path: Path = Path(_DEFAULT_README_PATH)
    cache_path: Path = Path(_DEFAULT_CACHE_PATH)
    override_marker: str = _DEFAULT_OVERRIDE_MARKER
    request_timeout: float = _DEFAULT_REQUEST_TIMEOUT_SECONDS
    user_agent: str = _DEFAULT_USER_AGENT
    recent_reads: int = _DEFAULT_RECENT_READS

    @classmethod
    def from_env(cls) -> Config:
        """Read GOODREADS_* environment variables (call load_dotenv() first)."""
        return cls(
            user_id=os.getenv("GOODREADS_USER_ID", _DEFAULT_USER_ID),
            readme_path=Path(os.getenv("GOODREADS_README_PATH", _DEFAULT_README_PATH)),
            cache_path=Path(os.getenv("GOODREADS_CACHE_PATH", _DEFAULT_CACHE_PATH)),
            override_marker=os.getenv("GOODREADS_OVERRIDE_MARKER", _DEFAULT_OVERRIDE_MARKER),
            request_timeout=float(
                os.getenv("GOODREADS_REQUEST_TIMEOUT", str(_DEFAULT_REQUEST_TIMEOUT_SECONDS))
            ),
            user_agent=os.getenv("GOODREADS_USER_AGENT", _DEFAULT_USER_AGENT),
            recent_reads=int(os.getenv("GOODREADS_RECENT_READS", str(_DEFAULT_RECENT_READS))),
        )

    def feed_url(self, shelf: str) -> str:
        return GOODREADS_RSS_URL.format(user_id=self.user_id, shelf=shelf)

    def with_overrides(self, **changes: object) -> Config:
        """Return a copy with the non-None ``changes`` applied (CLI flags)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
