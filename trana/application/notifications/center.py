"""Notification centre context bundling store, sync engine and read mutator."""

from __future__ import annotations

import logging
from typing import Any

from trana.application.notifications.read_state import ReadStateMutator
from trana.application.notifications.store import NotificationStore
from trana.application.notifications.sync_engine import (
    LiveSubscription,
    RemoteTable,
    SnapshotListener,
    SyncEngine,
)
from trana.config import get_settings
from trana.domain.entities import NOTIFICATION_TYPES, Notification
from trana.domain.exceptions import RemoteTableError
from trana.infrastructure.notifications import AlertSink, LiveEventFeed
from trana.infrastructure.remote_table import UpdateOutcome
from trana.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


class NotificationCenter:
    """State for one consumer of notifications (the app or a browser tab).

    Opening the centre subscribes it to the live feed and loads the first
    snapshot; closing it always releases the subscription, also when the
    owner fails.
    """

    def __init__(
        self,
        table: RemoteTable,
        feed: LiveEventFeed,
        *,
        alert_sink: AlertSink | None = None,
        limit: int | None = None,
    ) -> None:
        limit = limit or get_settings().notifications_pull_limit
        self._table = table
        self._feed = feed
        self.store = NotificationStore(capacity=limit)
        self.engine = SyncEngine(table, self.store, limit=limit, alert_sink=alert_sink)
        self.mutator = ReadStateMutator(table, self.engine)
        self._subscription: LiveSubscription | None = None
        self._settled = False
        self._sending = 0

    @property
    def notifications(self) -> list[Notification]:
        return self.store.notifications

    @property
    def unread_count(self) -> int:
        return self.store.unread_count()

    @property
    def is_loading(self) -> bool:
        return not self._settled

    @property
    def is_marking_as_read(self) -> bool:
        return self.mutator.pending > 0

    @property
    def is_sending_notification(self) -> bool:
        return self._sending > 0

    def add_listener(self, listener: SnapshotListener) -> None:
        self.engine.add_listener(listener)

    async def open(self) -> "NotificationCenter":
        self._subscription = self.engine.subscribe(self._feed)
        try:
            await self.refresh()
        except RemoteTableError:
            logger.warning("Initial notifications pull failed; starting with an empty list")
        finally:
            self._settled = True
        return self

    async def close(self) -> None:
        try:
            if self._subscription is not None:
                self._subscription.close()
        finally:
            await self.engine.close()

    async def __aenter__(self) -> "NotificationCenter":
        try:
            return await self.open()
        except BaseException:
            await self.close()
            raise

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def refresh(self) -> list[Notification]:
        return await self.engine.pull()

    async def mark_as_read(self, notification_id: str) -> UpdateOutcome:
        return await self.mutator.mark_as_read(notification_id)

    async def send_notification(
        self,
        notification_type: str,
        title: str,
        message: str,
        *,
        user_id: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> Notification:
        """Insert a new unread notification and refresh this centre."""

        if notification_type not in NOTIFICATION_TYPES:
            raise ValueError(f"Unknown notification type: {notification_type}")
        title = (title or "").strip()
        message = (message or "").strip()
        if not title or not message:
            raise ValueError("Notifications need a title and a message")

        self._sending += 1
        try:
            saved = await self._table.insert(
                Notification(
                    id=None,
                    type=notification_type,
                    title=title,
                    message=message,
                    user_id=user_id,
                    data=data or {},
                    is_read=False,
                    created_at=now_in_app_timezone(),
                )
            )
        finally:
            self._sending -= 1
        self.engine.schedule_pull()
        return saved


__all__ = ["NotificationCenter"]
