"""Utility script to insert a notification into the notifications table.

Rows written from this process are not announced on a running server's live
feed; dashboards pick them up on their next pull.
"""

from __future__ import annotations

import argparse
import json

from sqlalchemy.exc import SQLAlchemyError

from trana.domain.entities import NOTIFICATION_TYPES, Notification
from trana.infrastructure.database import SessionLocal, initialize_database
from trana.infrastructure.repositories import NotificationRepository
from trana.utils import now_in_app_timezone


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for the notification."""

    parser = argparse.ArgumentParser(
        description="Insert a notification for the Trana dashboard.",
    )
    parser.add_argument("title", help="Short title shown in the alert")
    parser.add_argument("message", help="Notification body")
    parser.add_argument(
        "--type",
        dest="notification_type",
        choices=NOTIFICATION_TYPES,
        default="system",
        help="Notification type (default: system)",
    )
    parser.add_argument(
        "--user-id",
        default=None,
        help="Recipient identifier; omit to broadcast",
    )
    parser.add_argument(
        "--data",
        default="{}",
        help="Extra JSON object stored with the notification",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Insert a notification using the provided command line arguments."""

    args = parse_args(argv)

    try:
        data = json.loads(args.data)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"--data is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise SystemExit("--data must be a JSON object")

    initialize_database()

    session = SessionLocal()
    try:
        notification = NotificationRepository(session).create(
            Notification(
                id=None,
                type=args.notification_type,
                title=args.title,
                message=args.message,
                user_id=args.user_id,
                data=data,
                is_read=False,
                created_at=now_in_app_timezone(),
            )
        )
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not store the notification: {exc}") from exc
    else:
        print(
            "Notification stored:\n"
            f"  ID: {notification.id}\n"
            f"  Type: {notification.type}\n"
            f"  Title: {notification.title}\n"
            f"  Recipient: {notification.user_id or 'everyone'}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
