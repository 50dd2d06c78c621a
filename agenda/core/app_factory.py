"""
FastAPI application factory for the appointment engine.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agenda.api.exception_handlers import register_exception_handlers
from agenda.api.middleware import RequestLoggingMiddleware
from agenda.api.middleware.logging_middleware import CORRELATION_HEADER
from agenda.api.router import api_router
from agenda.config.settings import Settings, get_settings
from agenda.core.lifecycle import lifespan

logger = logging.getLogger(__name__)

# Methods exposed by the scheduling routes
ALLOWED_METHODS = ["GET", "POST", "DELETE", "OPTIONS"]


class AppFactory:
    """Builds the FastAPI app: middleware, error mapping, routes and health."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    def create_app(self) -> FastAPI:
        app = self._create_base_app()

        self._configure_middleware(app)
        register_exception_handlers(app)
        app.include_router(api_router, prefix=self._settings.API_V1_STR)
        self._configure_health_endpoint(app)

        logger.info(
            f"Application created: {self._settings.PROJECT_NAME} v{self._settings.VERSION} "
            f"({self._settings.ENVIRONMENT})"
        )
        return app

    def _create_base_app(self) -> FastAPI:
        # Interactive docs only outside production
        show_docs = self._settings.DEBUG or self._settings.is_development
        prefix = self._settings.API_V1_STR
        return FastAPI(
            title=self._settings.PROJECT_NAME,
            description=self._settings.PROJECT_DESCRIPTION,
            version=self._settings.VERSION,
            docs_url=f"{prefix}/docs" if show_docs else None,
            redoc_url=None,
            openapi_url=f"{prefix}/openapi.json" if show_docs else None,
            lifespan=lifespan,
        )

    def _configure_middleware(self, app: FastAPI) -> None:
        """
        Starlette runs the last added middleware first, so CORS is added last
        to answer preflight requests before they are logged.
        """
        app.add_middleware(RequestLoggingMiddleware)
        origins = ["*"] if self._settings.is_development else self._settings.CORS_ORIGINS
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials="*" not in origins,
            allow_methods=ALLOWED_METHODS,
            allow_headers=["Content-Type", "Authorization", CORRELATION_HEADER],
            expose_headers=[CORRELATION_HEADER, "X-Response-Time-Ms"],
        )

    def _configure_health_endpoint(self, app: FastAPI) -> None:
        settings = self._settings

        @app.get("/health", tags=["health"])
        async def health_check() -> dict[str, str]:
            """Liveness check; also reports the timezone appointment times are read in."""
            return {
                "status": "ok",
                "version": settings.VERSION,
                "environment": settings.ENVIRONMENT,
                "timezone": settings.APP_TIMEZONE,
            }


def create_app(settings: Settings | None = None) -> FastAPI:
    return AppFactory(settings).create_app()
