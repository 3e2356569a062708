"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from trana.domain.entities import Notification
from trana.infrastructure.models import NotificationModel
from trana.utils import ensure_app_timezone


class NotificationRepository:
    """Provide the select, update and insert operations on notifications."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_recent(self, *, limit: int) -> Sequence[Notification]:
        query = self.session.query(NotificationModel).order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def get(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return None
        return self._to_entity(model)

    def mark_as_read(self, notification_id: str) -> bool:
        """Flag the notification as read and report whether a row matched."""

        matched = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .update({NotificationModel.is_read: True}, synchronize_session=False)
        )
        self.session.commit()
        return bool(matched)

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        if notification.id is not None:
            model.id = notification.id
        model.type = notification.type
        model.title = notification.title
        model.message = notification.message
        model.user_id = notification.user_id
        model.data = notification.data or {}
        model.is_read = notification.is_read
        if notification.created_at is not None:
            model.created_at = _to_utc(notification.created_at)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            type=model.type,
            title=model.title,
            message=model.message,
            user_id=model.user_id,
            data=dict(model.data or {}),
            is_read=bool(model.is_read),
            created_at=ensure_app_timezone(model.created_at),
        )


def _to_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on write, so every stored value is normalised to UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


__all__ = ["NotificationRepository"]
