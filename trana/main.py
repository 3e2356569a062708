"""FastAPI application factory for the notification centre service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from trana.application.notifications import NotificationCenter
from trana.config import get_settings
from trana.infrastructure import database
from trana.infrastructure.notifications import LiveEventFeed, LoggingAlertSink
from trana.infrastructure.remote_table import NotificationTable
from trana.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the tables, open the shared notification centre and release it on shutdown."""

    settings = get_settings()
    database.initialize_database()
    feed = LiveEventFeed()
    table = NotificationTable(
        database.SessionLocal, feed=feed, table_name=settings.notifications_table
    )
    app.state.notification_feed = feed
    app.state.notification_table = table
    try:
        async with NotificationCenter(
            table, feed, alert_sink=LoggingAlertSink()
        ) as center:
            app.state.notification_center = center
            logger.info("Notification centre ready with %s notification(s)", len(center.notifications))
            yield
    finally:
        app.state.notification_center = None
        feed.close()
        database.engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(title="Trana Notifications", lifespan=lifespan)

    # Lets the dashboard front end call the API from its own origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
