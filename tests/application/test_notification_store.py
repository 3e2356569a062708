"""Tests for the in-memory notification snapshot."""

from __future__ import annotations

import random

import pytest

from notification_fakes import make_notification
from trana.application.notifications import NotificationStore


def test_replace_all_keeps_caller_order() -> None:
    store = NotificationStore()
    records = [make_notification("b", minutes=5), make_notification("a", minutes=1)]

    store.replace_all(records)

    assert [n.id for n in store.notifications] == ["b", "a"]
    assert len(store) == 2


def test_replace_all_is_a_full_replacement() -> None:
    store = NotificationStore()
    store.replace_all([make_notification("a"), make_notification("b")])

    store.replace_all([make_notification("c")])

    assert [n.id for n in store.notifications] == ["c"]
    assert store.get("a") is None
    assert store.get("c") is not None


def test_snapshot_is_a_copy() -> None:
    store = NotificationStore()
    store.replace_all([make_notification("a")])

    store.notifications.clear()

    assert len(store) == 1


def test_replace_all_rejects_snapshots_larger_than_the_window() -> None:
    store = NotificationStore(capacity=3)
    store.replace_all([make_notification("keep")])

    with pytest.raises(ValueError):
        store.replace_all([make_notification(str(i)) for i in range(4)])

    assert [n.id for n in store.notifications] == ["keep"]


def test_default_window_is_fifty_records() -> None:
    store = NotificationStore()

    store.replace_all([make_notification(str(i)) for i in range(50)])

    assert store.capacity == 50
    assert len(store) == 50


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        NotificationStore(capacity=0)


@pytest.mark.parametrize("seed", range(20))
def test_unread_count_matches_unread_records(seed: int) -> None:
    rng = random.Random(seed)
    records = [
        make_notification(str(i), minutes=-i, is_read=rng.random() < 0.5)
        for i in range(rng.randint(0, 50))
    ]
    store = NotificationStore()

    store.replace_all(records)

    assert store.unread_count() == sum(1 for record in records if not record.is_read)


def test_unread_count_of_empty_store_is_zero() -> None:
    assert NotificationStore().unread_count() == 0
