"""
Tests for application settings.
"""

from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from agenda.config.settings import Settings


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


@pytest.mark.unit
def test_defaults():
    settings = _settings()

    assert settings.timezone == ZoneInfo("America/Argentina/Buenos_Aires")
    assert settings.DEFAULT_SLOT_DURATION_MINUTES == 30
    assert settings.ALIGNMENT_SUGGESTIONS == 3


@pytest.mark.unit
def test_database_urls_quote_credentials():
    settings = _settings(DB_USER="agenda", DB_PASSWORD="p@ss:word", DB_HOST="db", DB_NAME="turnos")

    assert settings.async_database_url == "postgresql+asyncpg://agenda:p%40ss%3Aword@db:5432/turnos"
    assert settings.database_url == "postgresql://agenda:p%40ss%3Aword@db:5432/turnos"


@pytest.mark.unit
@pytest.mark.parametrize(
    "overrides",
    [
        {"APP_TIMEZONE": "Mars/Olympus_Mons"},
        {"DEFAULT_SLOT_DURATION_MINUTES": 0},
        {"ALIGNMENT_SUGGESTIONS": -1},
        {"DB_POOL_SIZE": 0},
        {"DB_MAX_OVERFLOW": 201},
    ],
)
def test_invalid_values(overrides):
    with pytest.raises(ValidationError):
        _settings(**overrides)


@pytest.mark.unit
@pytest.mark.parametrize(
    "environment,debug,expected",
    [("development", False, True), ("production", True, True), ("production", False, False)],
)
def test_is_development(environment, debug, expected):
    assert _settings(ENVIRONMENT=environment, DEBUG=debug).is_development is expected


@pytest.mark.unit
def test_log_level_is_normalized():
    assert _settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"
    with pytest.raises(ValidationError):
        _settings(LOG_LEVEL="verbose")


@pytest.mark.unit
def test_engine_options_follow_debug_flag():
    from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool

    from agenda.database.async_db import engine_options

    assert engine_options(_settings(DEBUG=True))["poolclass"] is NullPool

    pooled = engine_options(_settings(DB_POOL_SIZE=5, DB_MAX_OVERFLOW=2))
    assert pooled["poolclass"] is AsyncAdaptedQueuePool
    assert (pooled["pool_size"], pooled["max_overflow"]) == (5, 2)
