from urllib.parse import quote_plus
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configuración de la agenda, leída de variables de entorno y de ``.env``.

    Las fechas y horas de turnos se interpretan siempre en ``APP_TIMEZONE``.
    """

    # API
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Agenda de Turnos API"
    PROJECT_DESCRIPTION: str = "Motor de disponibilidad y reserva de turnos médicos"
    VERSION: str = "0.1.0"
    CORS_ORIGINS: list[str] = Field(
        default_factory=list, description="Orígenes permitidos por CORS fuera de desarrollo"
    )

    # PostgreSQL
    DB_HOST: str = Field("localhost", description="Host de PostgreSQL")
    DB_PORT: int = Field(5432, description="Puerto de PostgreSQL")
    DB_NAME: str = Field("agenda", description="Nombre de la base de datos")
    DB_USER: str = Field("postgres", description="Usuario de PostgreSQL")
    DB_PASSWORD: str | None = Field(None, description="Contraseña de PostgreSQL")
    DB_ECHO: bool = Field(False, description="Loguear SQL (solo para debug)")
    DB_POOL_SIZE: int = Field(20, ge=1, le=100, description="Tamaño del pool de conexiones")
    DB_MAX_OVERFLOW: int = Field(30, ge=0, le=200, description="Conexiones extra sobre el pool")
    DB_POOL_RECYCLE: int = Field(3600, ge=0, description="Reciclar conexiones cada X segundos")
    DB_POOL_TIMEOUT: int = Field(30, ge=1, description="Espera máxima por una conexión del pool")

    # Runtime
    DEBUG: bool = Field(False, description="Modo de depuración")
    ENVIRONMENT: str = Field("production", description="Entorno de ejecución")
    LOG_LEVEL: str = Field("INFO", description="Nivel de logging")
    LOG_JSON: bool = Field(False, description="Emitir logs en formato JSON")
    SENTRY_DSN: str | None = Field(None, description="DSN de Sentry; vacío desactiva el reporte")

    # Agenda
    APP_TIMEZONE: str = Field(
        "America/Argentina/Buenos_Aires",
        description="Zona horaria única en la que se interpretan fechas y horas de los turnos",
    )
    DEFAULT_SLOT_DURATION_MINUTES: int = Field(
        30, gt=0, description="Duración de turno cuando el slot no indica una"
    )
    ALIGNMENT_SUGGESTIONS: int = Field(
        3, ge=0, description="Cantidad de horarios válidos sugeridos cuando la hora pedida no cae en la grilla"
    )

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("APP_TIMEZONE")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"APP_TIMEZONE '{v}' is not a valid IANA timezone") from e
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"LOG_LEVEL '{v}' is not a logging level")
        return level

    def _url(self, scheme: str) -> str:
        credentials = quote_plus(self.DB_USER)
        if self.DB_PASSWORD:
            credentials += f":{quote_plus(self.DB_PASSWORD)}"
        return f"{scheme}://{credentials}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @computed_field
    @property
    def database_url(self) -> str:
        """URL síncrona (psycopg2), usada por Alembic"""
        return self._url("postgresql")

    @computed_field
    @property
    def async_database_url(self) -> str:
        """URL asíncrona (asyncpg), usada por la aplicación"""
        return self._url("postgresql+asyncpg")

    @computed_field
    @property
    def is_development(self) -> bool:
        return self.DEBUG or self.ENVIRONMENT.lower() in ("development", "dev", "local")

    @property
    def timezone(self) -> ZoneInfo:
        return ZoneInfo(self.APP_TIMEZONE)


_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Instancia única de la configuración, cargada en el primer uso."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
