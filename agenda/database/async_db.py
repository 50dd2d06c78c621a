"""
Engine y sesiones asíncronas (asyncpg) de la agenda.

El engine se crea al importar el módulo; las unidades de trabajo abren sus
sesiones con ``AsyncSessionLocal``.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool

from agenda.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def engine_options(settings: Settings) -> dict[str, Any]:
    """Sin pool en DEBUG; pool dimensionado por la configuración en el resto."""
    options: dict[str, Any] = {"echo": settings.DB_ECHO, "pool_pre_ping": True}
    if settings.DEBUG:
        options["poolclass"] = NullPool
    else:
        options.update(
            poolclass=AsyncAdaptedQueuePool,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_timeout=settings.DB_POOL_TIMEOUT,
        )
    return options


def create_async_database_engine(settings: Settings | None = None) -> AsyncEngine:
    settings = settings or get_settings()
    options = engine_options(settings)
    logger.info(
        f"Creating async engine for {settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME} "
        f"({options['poolclass'].__name__})"
    )
    return create_async_engine(settings.async_database_url, **options)


async_engine = create_async_database_engine()

AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def close_async_engine() -> None:
    """Libera las conexiones del pool al apagar la aplicación"""
    await async_engine.dispose()
    logger.info("Async database engine disposed")
