"""Tests for the in-process live event feed."""

from __future__ import annotations

import threading

import pytest
from anyio import to_thread

from trana.domain.exceptions import SubscriptionError
from trana.infrastructure.notifications import EVENT_INSERT, FeedEvent, LiveEventFeed


def test_publish_reaches_matching_listeners_only() -> None:
    feed = LiveEventFeed()
    received: list[FeedEvent] = []
    feed.subscribe("notifications", EVENT_INSERT, received.append)
    feed.subscribe("ambulances", EVENT_INSERT, lambda event: pytest.fail("wrong table"))

    feed.publish("notifications", EVENT_INSERT, {"id": "1"})

    assert received == [FeedEvent("notifications", EVENT_INSERT, {"id": "1"})]


def test_unsubscribe_is_idempotent() -> None:
    feed = LiveEventFeed()
    received: list[FeedEvent] = []
    handle = feed.subscribe("notifications", EVENT_INSERT, received.append)

    feed.unsubscribe(handle)
    feed.unsubscribe(handle)
    feed.publish("notifications", EVENT_INSERT, {"id": "1"})

    assert received == []
    assert feed.listener_count() == 0


def test_failing_listener_does_not_block_others(caplog) -> None:
    feed = LiveEventFeed()
    received: list[FeedEvent] = []

    def broken(event: FeedEvent) -> None:
        raise RuntimeError("boom")

    feed.subscribe("notifications", EVENT_INSERT, broken)
    feed.subscribe("notifications", EVENT_INSERT, received.append)

    feed.publish("notifications", EVENT_INSERT, {"id": "1"})

    assert len(received) == 1
    assert "failed to handle insert event" in caplog.text


def test_listener_unsubscribed_during_delivery_is_skipped() -> None:
    feed = LiveEventFeed()
    received: list[str] = []
    handles = {}

    def first(event: FeedEvent) -> None:
        received.append("first")
        feed.unsubscribe(handles["second"])

    handles["first"] = feed.subscribe("notifications", EVENT_INSERT, first)
    handles["second"] = feed.subscribe(
        "notifications", EVENT_INSERT, lambda event: received.append("second")
    )

    feed.publish("notifications", EVENT_INSERT, {})

    assert received == ["first"]


def test_closed_feed_rejects_subscriptions() -> None:
    feed = LiveEventFeed()
    feed.subscribe("notifications", EVENT_INSERT, lambda event: None)

    feed.close()

    assert feed.closed
    assert feed.listener_count() == 0
    with pytest.raises(SubscriptionError):
        feed.subscribe("notifications", EVENT_INSERT, lambda event: None)


@pytest.mark.anyio
async def test_publish_from_worker_thread_is_delivered() -> None:
    feed = LiveEventFeed()
    received: list[FeedEvent] = []
    feed.subscribe("notifications", EVENT_INSERT, received.append)

    await to_thread.run_sync(feed.publish, "notifications", EVENT_INSERT, {"id": "7"})

    assert [event.record for event in received] == [{"id": "7"}]


def test_publish_without_event_loop_runs_listeners_inline() -> None:
    feed = LiveEventFeed()
    delivered_on: list[int] = []
    feed.subscribe(
        "notifications", EVENT_INSERT, lambda event: delivered_on.append(threading.get_ident())
    )

    feed.publish("notifications", EVENT_INSERT, {"id": "1"})

    assert delivered_on == [threading.get_ident()]


@pytest.mark.anyio
async def test_publish_from_plain_thread_hops_onto_the_loop() -> None:
    feed = LiveEventFeed()
    delivered_on: list[int] = []
    feed.subscribe(
        "notifications", EVENT_INSERT, lambda event: delivered_on.append(threading.get_ident())
    )
    publisher = threading.Thread(
        target=feed.publish, args=("notifications", EVENT_INSERT, {"id": "9"})
    )

    publisher.start()
    await to_thread.run_sync(publisher.join)

    assert delivered_on == [threading.get_ident()]
