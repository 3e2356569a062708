"""Async access to the notifications table used by the notification core."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any, TypeVar

from anyio import to_thread
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from trana.config import get_settings
from trana.domain.entities import Notification
from trana.domain.exceptions import RemoteTableError
from trana.infrastructure.notifications.feed import EVENT_INSERT, LiveEventFeed
from trana.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UpdateOutcome(str, Enum):
    """Result of a keyed update against the table."""

    UPDATED = "updated"
    NOT_FOUND = "not_found"


class NotificationTable:
    """Run notification queries off the event loop.

    Each call opens its own session in a worker thread. Database failures are
    reported as :class:`RemoteTableError`; a successful insert is announced on
    the live feed so subscribed contexts can refetch.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        feed: LiveEventFeed | None = None,
        table_name: str | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._feed = feed
        self.table_name = table_name or get_settings().notifications_table

    async def select(self, limit: int) -> list[Notification]:
        """Return up to ``limit`` records ordered by ``created_at`` descending."""

        return await self._run(
            "select", lambda repository: list(repository.list_recent(limit=limit))
        )

    async def update(
        self, notification_id: str, values: Mapping[str, Any]
    ) -> UpdateOutcome:
        """Apply ``values`` to the record identified by ``notification_id``."""

        unsupported = set(values) - {"is_read"}
        if unsupported:
            raise ValueError(f"Unsupported notification columns: {sorted(unsupported)}")
        if values.get("is_read") is not True:
            raise ValueError("Notifications can only be marked as read")

        matched = await self._run(
            "update", lambda repository: repository.mark_as_read(notification_id)
        )
        return UpdateOutcome.UPDATED if matched else UpdateOutcome.NOT_FOUND

    async def insert(self, notification: Notification) -> Notification:
        """Store ``notification`` and publish the resulting insert event."""

        saved = await self._run(
            "insert", lambda repository: repository.create(notification)
        )
        if self._feed is not None:
            self._feed.publish(self.table_name, EVENT_INSERT, saved)
        return saved

    async def _run(self, action: str, operation: Callable[[NotificationRepository], T]) -> T:
        def work() -> T:
            session = self._session_factory()
            try:
                return operation(NotificationRepository(session))
            except SQLAlchemyError:
                session.rollback()
                raise
            finally:
                session.close()

        try:
            return await to_thread.run_sync(work)
        except SQLAlchemyError as exc:
            logger.warning("Notifications %s failed: %s", action, exc)
            raise RemoteTableError(f"Notifications {action} failed") from exc


__all__ = ["NotificationTable", "UpdateOutcome"]
