"""In-process live feed of notifications table change events."""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Callable

from anyio import from_thread, lowlevel

from trana.domain.exceptions import SubscriptionError

logger = logging.getLogger(__name__)

EVENT_INSERT = "insert"


@dataclass(frozen=True)
class FeedHandle:
    """Identifies one listener registered on the feed."""

    id: int
    table: str
    event_kind: str


@dataclass(frozen=True)
class FeedEvent:
    """Change event delivered to listeners; ``record`` is the new row."""

    table: str
    event_kind: str
    record: Any


FeedCallback = Callable[[FeedEvent], None]


class LiveEventFeed:
    """Fan out table change events to the listeners subscribed to them."""

    def __init__(self) -> None:
        self._listeners: dict[int, tuple[FeedHandle, FeedCallback]] = {}
        self._ids = itertools.count(1)
        self._closed = False
        self._token: lowlevel.EventLoopToken | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(
        self, table: str, event_kind: str, callback: FeedCallback
    ) -> FeedHandle:
        """Register ``callback`` for ``event_kind`` events on ``table``."""

        if self._closed:
            raise SubscriptionError("The live event feed is closed")
        if _on_event_loop():
            self._token = lowlevel.current_token()
        handle = FeedHandle(id=next(self._ids), table=table, event_kind=event_kind)
        self._listeners[handle.id] = (handle, callback)
        logger.debug("Listener %s subscribed to %s:%s", handle.id, table, event_kind)
        return handle

    def unsubscribe(self, handle: FeedHandle) -> None:
        """Release ``handle``; unknown or already released handles are ignored."""

        if self._listeners.pop(handle.id, None) is not None:
            logger.debug("Listener %s unsubscribed", handle.id)

    def listener_count(self, table: str | None = None) -> int:
        return sum(
            1
            for handle, _ in self._listeners.values()
            if table is None or handle.table == table
        )

    def publish(self, table: str, event_kind: str, record: Any) -> None:
        """Deliver an event to every matching listener.

        Called from the event loop the delivery is immediate. Called from
        another thread it hops onto the loop the listeners subscribed from.
        Without any such loop the listeners run in the caller's thread.
        """

        event = FeedEvent(table=table, event_kind=event_kind, record=record)
        if _on_event_loop() or self._token is None:
            self._deliver(event)
        else:
            from_thread.run_sync(self._deliver, event, token=self._token)

    def close(self) -> None:
        """Drop every listener; later subscriptions fail."""

        self._closed = True
        dropped = len(self._listeners)
        self._listeners.clear()
        if dropped:
            logger.info("Live event feed closed, dropped %s listener(s)", dropped)

    def _deliver(self, event: FeedEvent) -> None:
        listeners = [
            (handle, callback)
            for handle, callback in self._listeners.values()
            if handle.table == event.table and handle.event_kind == event.event_kind
        ]
        for handle, callback in listeners:
            if handle.id not in self._listeners:
                continue
            try:
                callback(event)
            except Exception:
                logger.exception(
                    "Listener %s failed to handle %s event", handle.id, event.event_kind
                )


def _on_event_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


__all__ = [
    "EVENT_INSERT",
    "FeedCallback",
    "FeedEvent",
    "FeedHandle",
    "LiveEventFeed",
]
