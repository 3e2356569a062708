"""Keep a notification store in step with the table and its live feed."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol

from trana.application.notifications.store import NotificationStore
from trana.config import PULL_LIMIT, get_settings
from trana.domain.entities import Notification
from trana.domain.exceptions import SubscriptionError, SyncClosedError
from trana.infrastructure.notifications import (
    EVENT_INSERT,
    AlertSink,
    FeedEvent,
    FeedHandle,
    LiveEventFeed,
)
from trana.infrastructure.remote_table import UpdateOutcome

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[list[Notification]], None]


class RemoteTable(Protocol):
    """Operations the notification core needs from the notifications table."""

    table_name: str

    async def select(self, limit: int) -> list[Notification]: ...

    async def update(
        self, notification_id: str, values: Mapping[str, Any]
    ) -> UpdateOutcome: ...

    async def insert(self, notification: Notification) -> Notification: ...


class LiveSubscription:
    """Owned handle on the live feed; release it with ``close`` or ``with``."""

    def __init__(
        self,
        feed: LiveEventFeed,
        handle: FeedHandle,
        on_close: Callable[["LiveSubscription"], None] | None = None,
    ) -> None:
        self._feed = feed
        self._handle = handle
        self._on_close = on_close
        self._closed = False

    @property
    def active(self) -> bool:
        return not self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._feed.unsubscribe(self._handle)
        finally:
            if self._on_close is not None:
                self._on_close(self)

    def __enter__(self) -> "LiveSubscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    async def __aenter__(self) -> "LiveSubscription":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()


class SyncEngine:
    """Pull the newest notifications into ``store`` and react to live inserts.

    Only one pull runs at a time. Pulls requested while one is in flight are
    folded into a single follow-up round that starts as soon as the current
    one finishes, and every caller that joined it receives its outcome. Since
    rounds never overlap, the last round to complete is the one whose result
    stays in the store.
    """

    def __init__(
        self,
        table: RemoteTable,
        store: NotificationStore,
        *,
        limit: int = PULL_LIMIT,
        alert_sink: AlertSink | None = None,
        table_name: str | None = None,
    ) -> None:
        self._table = table
        self._store = store
        self._limit = min(limit, store.capacity)
        self._alert_sink = alert_sink
        self._table_name = (
            table_name
            or getattr(table, "table_name", None)
            or get_settings().notifications_table
        )
        self._listeners: list[SnapshotListener] = []
        self._worker: asyncio.Task[None] | None = None
        self._current_round: asyncio.Future[list[Notification]] | None = None
        self._next_round: asyncio.Future[list[Notification]] | None = None
        self._subscription: LiveSubscription | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pulling(self) -> bool:
        return self._worker is not None

    @property
    def subscription(self) -> LiveSubscription | None:
        return self._subscription

    def add_listener(self, listener: SnapshotListener) -> None:
        """Call ``listener`` with the new snapshot after every successful pull."""

        self._listeners.append(listener)

    async def pull(self) -> list[Notification]:
        """Refresh the store and return the snapshot it now holds.

        Raises :class:`RemoteTableError` when the select fails; the store then
        keeps its previous snapshot.
        """

        return await asyncio.shield(self._request_round())

    def schedule_pull(self) -> asyncio.Future[list[Notification]] | None:
        """Request a pull without waiting for it; ``None`` once closed."""

        if self._closed:
            return None
        return self._request_round()

    async def settle(self) -> None:
        """Wait until no pull is running or queued."""

        while self._worker is not None:
            await asyncio.wait([self._worker])

    def subscribe(self, feed: LiveEventFeed) -> LiveSubscription:
        """Listen for inserts on the notifications table.

        Each insert raises one alert with the record's title and message and
        schedules a pull. Only one subscription may be active at a time.
        """

        if self._closed:
            raise SubscriptionError("The sync engine is closed")
        if self._subscription is not None and self._subscription.active:
            raise SubscriptionError("The sync engine is already subscribed to the live feed")

        handle = feed.subscribe(self._table_name, EVENT_INSERT, self._on_insert)
        self._subscription = LiveSubscription(feed, handle, on_close=self._forget_subscription)
        return self._subscription

    async def close(self) -> None:
        """Release the subscription and stop every pending or running pull."""

        if self._closed:
            return
        self._closed = True
        if self._subscription is not None:
            self._subscription.close()

        pending = [self._current_round, self._next_round]
        self._next_round = None
        worker = self._worker
        if worker is not None:
            worker.cancel()
            await asyncio.wait([worker])
            # A worker cancelled before its first step never reaches its finally.
            self._worker = None
        for round_future in pending:
            if round_future is not None and not round_future.done():
                round_future.set_exception(SyncClosedError("The sync engine was closed"))
        self._current_round = None

    def _request_round(self) -> asyncio.Future[list[Notification]]:
        if self._closed:
            raise SyncClosedError("The sync engine is closed")

        loop = asyncio.get_running_loop()
        if self._worker is None:
            self._current_round = self._new_round(loop)
            self._worker = loop.create_task(self._drain())
            return self._current_round
        if self._next_round is None:
            self._next_round = self._new_round(loop)
        return self._next_round

    @staticmethod
    def _new_round(loop: asyncio.AbstractEventLoop) -> asyncio.Future[list[Notification]]:
        round_future: asyncio.Future[list[Notification]] = loop.create_future()
        round_future.add_done_callback(_log_round_failure)
        return round_future

    async def _drain(self) -> None:
        try:
            while self._current_round is not None:
                await self._run_round(self._current_round)
                self._current_round, self._next_round = self._next_round, None
        finally:
            self._worker = None

    async def _run_round(self, round_future: asyncio.Future[list[Notification]]) -> None:
        try:
            records = await self._table.select(self._limit)
        except Exception as exc:
            if not round_future.done():
                round_future.set_exception(exc)
            return

        self._store.replace_all(list(records)[: self._limit])
        snapshot = self._store.notifications
        if not round_future.done():
            round_future.set_result(snapshot)
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Snapshot listener failed")

    def _on_insert(self, event: FeedEvent) -> None:
        subscription = self._subscription
        if self._closed or subscription is None or not subscription.active:
            return

        title, message = _alert_text(event.record)
        if self._alert_sink is not None:
            try:
                self._alert_sink(title, message)
            except Exception:
                logger.exception("Alert sink failed for notification %r", title)
        self.schedule_pull()

    def _forget_subscription(self, subscription: LiveSubscription) -> None:
        if self._subscription is subscription:
            self._subscription = None


def _alert_text(record: Any) -> tuple[str, str]:
    if isinstance(record, Mapping):
        return str(record.get("title", "")), str(record.get("message", ""))
    return str(getattr(record, "title", "")), str(getattr(record, "message", ""))


def _log_round_failure(round_future: asyncio.Future[list[Notification]]) -> None:
    if round_future.cancelled():
        return
    exc = round_future.exception()
    if exc is None:
        return
    if isinstance(exc, SyncClosedError):
        logger.debug("Pull abandoned: %s", exc)
    else:
        logger.warning("Notifications pull failed: %s", exc)


__all__ = ["LiveSubscription", "RemoteTable", "SnapshotListener", "SyncEngine"]
