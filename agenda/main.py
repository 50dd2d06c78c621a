"""
ASGI entry point: ``uvicorn agenda.main:app`` or the ``agenda-api`` script.
"""

import logging

import sentry_sdk

from agenda.config.settings import get_settings
from agenda.core.app_factory import create_app
from agenda.core.shared import setup_logging

settings = get_settings()

setup_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)
logger = logging.getLogger(__name__)

if settings.SENTRY_DSN:
    # Patient ids travel in request bodies; keep them out of Sentry events
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        send_default_pii=False,
        environment=settings.ENVIRONMENT,
        release=f"agenda-turnos@{settings.VERSION}",
    )

app = create_app()


def run() -> None:
    import uvicorn

    logger.info(f"Starting agenda API in {settings.ENVIRONMENT} mode")
    uvicorn.run("agenda.main:app", host="0.0.0.0", port=8001, reload=settings.DEBUG)


if __name__ == "__main__":
    run()
