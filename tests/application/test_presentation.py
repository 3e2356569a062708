"""Tests for the notification display helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from trana.application.notifications import (
    format_relative_time,
    format_unread_badge,
    notification_icon,
)

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (timedelta(seconds=30), "Just now"),
        (timedelta(minutes=1), "1m ago"),
        (timedelta(minutes=59), "59m ago"),
        (timedelta(hours=1), "1h ago"),
        (timedelta(hours=23, minutes=59), "23h ago"),
        (timedelta(days=2), "2024-04-29"),
    ],
)
def test_format_relative_time(delta: timedelta, expected: str) -> None:
    assert format_relative_time(NOW - delta, NOW) == expected


def test_format_relative_time_treats_naive_values_as_utc() -> None:
    naive = (NOW - timedelta(minutes=5)).replace(tzinfo=None)

    assert format_relative_time(naive, NOW) == "5m ago"


@pytest.mark.parametrize(
    ("count", "expected"),
    [(0, None), (1, "1"), (99, "99"), (100, "99+")],
)
def test_format_unread_badge(count: int, expected: str | None) -> None:
    assert format_unread_badge(count) == expected


def test_notification_icon_by_type() -> None:
    assert notification_icon("emergency") == ("alert-triangle", "critical")
    assert notification_icon("appointment").name == "calendar"
    assert notification_icon("system").urgency == "low"
    assert notification_icon("alert").name == "bell"
