"""
Application startup and shutdown (FastAPI lifespan).
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from agenda.config.settings import get_settings

logger = logging.getLogger(__name__)

# Created by alembic/versions/001_scheduling_schema.py
REQUIRED_TABLES = ("schedule_windows", "recurring_slots", "appointments", "appointment_type_availabilities")


class LifecycleManager:
    """
    Startup checks the database and schema; shutdown disposes the pool.

    Neither check blocks startup: an unreachable database only leaves a
    warning, and requests fail with 500 until it comes back.
    """

    def __init__(self) -> None:
        self._initialized = False

    async def startup(self) -> None:
        if self._initialized:
            logger.warning("Lifecycle already initialized, skipping startup")
            return

        settings = get_settings()
        logger.info(
            f"Starting {settings.PROJECT_NAME} - timezone {settings.APP_TIMEZONE}, "
            f"default slot duration {settings.DEFAULT_SLOT_DURATION_MINUTES} min"
        )
        await self._verify_database()

        self._initialized = True

    async def shutdown(self) -> None:
        if not self._initialized:
            logger.warning("Lifecycle not initialized, skipping shutdown")
            return

        from agenda.database.async_db import close_async_engine

        await close_async_engine()
        self._initialized = False
        logger.info("Application stopped")

    async def _verify_database(self) -> None:
        from agenda.database.async_db import async_engine

        try:
            async with async_engine.connect() as conn:
                missing = []
                for table in REQUIRED_TABLES:
                    result = await conn.execute(text("SELECT to_regclass(:name)"), {"name": table})
                    if result.scalar() is None:
                        missing.append(table)
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database connectivity check failed: {e}")
            return

        if missing:
            logger.warning(f"Scheduling tables missing: {missing}; run 'alembic upgrade head'")
        else:
            logger.info("Database connectivity and schema verified")


_lifecycle_manager: LifecycleManager | None = None


def get_lifecycle_manager() -> LifecycleManager:
    global _lifecycle_manager
    if _lifecycle_manager is None:
        _lifecycle_manager = LifecycleManager()
    return _lifecycle_manager


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    lifecycle = get_lifecycle_manager()
    await lifecycle.startup()
    yield
    await lifecycle.shutdown()
