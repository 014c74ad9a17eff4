"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no business
logic here, only wiring of infrastructure (logging, notification sink, DB
engine dispose).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.persistence.database import dispose_engine
from app.infrastructure.services.notification_sink import (
    init_notification_sink,
    shutdown_notification_sink,
)
from app.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: logging, notification sink. Shutdown: notification sink
    close, SQL engine dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    setup_logging()
    app.state.notification_sink = init_notification_sink(settings)
    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    # ---- Shutdown ----
    await shutdown_notification_sink()
    app.state.notification_sink = None
    logger.info("Notification sink closed")

    await dispose_engine()
