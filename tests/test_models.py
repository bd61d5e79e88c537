from datetime import UTC, datetime

import pytest

from config import Config
from models import ProgressRecord, ProgressSource, ResolvedProgress


@pytest.mark.parametrize("percent", [-1, 101, 55.5, True, "50"])
def test_progress_record_rejects_invalid_percent(percent: object) -> None:
    with pytest.raises(ValueError):
        ProgressRecord(percent=percent, source=ProgressSource.RSS)


def test_progress_record_to_dict_omits_missing_pages() -> None:
    record = ProgressRecord(
        percent=37,
        source=ProgressSource.RSS,
        updated_at=datetime(2026, 10, 19, tzinfo=UTC),
    )
    assert record.to_dict() == {
        "percent": 37,
        "source": "rss",
        "updatedAt": "2026-10-19T00:00:00+00:00",
    }


def test_resolved_progress_percent() -> None:
    assert ResolvedProgress(None).percent is None
    assert ResolvedProgress(ProgressRecord(percent=0, source=ProgressSource.MANUAL)).percent == 0


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOODREADS_USER_ID", "12345")
    monkeypatch.setenv("GOODREADS_REQUEST_TIMEOUT", "3.5")
    monkeypatch.setenv("GOODREADS_RECENT_READS", "8")

    config = Config.from_env()

    assert config.feed_url("read") == "https://www.goodreads.com/review/list_rss/12345?shelf=read"
    assert config.request_timeout == 3.5
    assert config.recent_reads == 8


def test_config_with_overrides_ignores_none() -> None:
    config = Config(user_id="1").with_overrides(user_id=None, recent_reads=2)

    assert config.user_id == "1"
    assert config.recent_reads == 2
