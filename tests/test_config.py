"""Tests for settings loading and timezone resolution."""

from __future__ import annotations

from datetime import timedelta, timezone

import pytest
from pydantic import ValidationError

from trana.config import PULL_LIMIT, Settings
from trana.utils.datetime import _resolve_timezone


def test_defaults_keep_the_fifty_record_window(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NOTIFICATIONS_PULL_LIMIT", raising=False)

    settings = Settings(_env_file=None)

    assert settings.notifications_pull_limit == PULL_LIMIT == 50
    assert settings.notifications_table == "notifications"


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOTIFICATIONS_PULL_LIMIT", "20")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.notifications_pull_limit == 20
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("limit", ["0", "51"])
def test_pull_limit_outside_window_is_rejected(monkeypatch: pytest.MonkeyPatch, limit: str) -> None:
    monkeypatch.setenv("NOTIFICATIONS_PULL_LIMIT", limit)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_unknown_log_level_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


@pytest.mark.parametrize(
    ("name", "offset"),
    [("UTC-05:00", timedelta(hours=-5)), ("GMT+0530", timedelta(hours=5, minutes=30))],
)
def test_offset_timezones(name: str, offset: timedelta) -> None:
    assert _resolve_timezone(name) == timezone(offset)


def test_unknown_timezone_falls_back_to_utc() -> None:
    assert _resolve_timezone("Mars/Olympus_Mons").utcoffset(None) == timedelta(0)
