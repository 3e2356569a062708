"""SQLAlchemy model for persisted notifications."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, String, Text

from trana.config import get_settings
from trana.infrastructure.database import Base


def _new_notification_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class NotificationModel(Base):
    """Database representation for dashboard notifications."""

    __tablename__ = get_settings().notifications_table

    id = Column(String(36), primary_key=True, default=_new_notification_id)
    type = Column(String(20), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    user_id = Column(String(36), nullable=True, index=True)
    data = Column(JSON, nullable=False, default=dict)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=_utcnow, index=True
    )


__all__ = ["NotificationModel"]
