"""
Application configuration models and helpers.

Centralizes settings management so the read APIs and the background workers
(token refresh, ingestion) share a consistent configuration surface.
"""

from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_FILE_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    populate_by_name=True,
)


class FitbitSettings(BaseSettings):
    """Configuration required for interacting with the Fitbit Web API."""

    model_config = _ENV_FILE_CONFIG

    api_base_url: AnyHttpUrl = Field(
        "https://api.fitbit.com", validation_alias="FITBIT_API_BASE_URL"
    )
    token_url: AnyHttpUrl = Field(
        "https://api.fitbit.com/oauth2/token", validation_alias="FITBIT_TOKEN_URL"
    )
    timeout_seconds: float = Field(10.0, validation_alias="FITBIT_TIMEOUT_SECONDS")
    retry_attempts: int = Field(
        3,
        validation_alias="FITBIT_RETRY_ATTEMPTS",
        description="Attempts made for transient failures (transport errors, 429, 5xx).",
    )
    retry_backoff_seconds: float = Field(
        1.0, validation_alias="FITBIT_RETRY_BACKOFF_SECONDS"
    )


class AWSSettings(BaseSettings):
    """Settings for the AWS services backing the document and secret stores."""

    model_config = _ENV_FILE_CONFIG

    region_name: str = Field("us-east-1", validation_alias="AWS_REGION")
    document_store_backend: Literal["dynamodb", "sqlite"] = Field(
        "dynamodb",
        validation_alias="DOCUMENT_STORE_BACKEND",
        description="Use 'sqlite' for local development without AWS.",
    )
    dynamodb_table_name: str = Field(
        "biotrackr-records", validation_alias="DYNAMODB_TABLE_NAME"
    )
    sqlite_db_path: str = Field(
        "data/biotrackr.db", validation_alias="SQLITE_DB_PATH"
    )
    secrets_prefix: str = Field(
        "biotrackr/",
        validation_alias="SECRETS_PREFIX",
        description="Prefix prepended to logical secret names in Secrets Manager.",
    )
    connect_timeout_seconds: float = Field(
        5.0, validation_alias="AWS_CONNECT_TIMEOUT_SECONDS"
    )
    read_timeout_seconds: float = Field(
        10.0, validation_alias="AWS_READ_TIMEOUT_SECONDS"
    )


class SchedulerSettings(BaseSettings):
    """Intervals and bounds for the background loops."""

    model_config = _ENV_FILE_CONFIG

    token_refresh_interval_minutes: float = Field(
        360, validation_alias="TOKEN_REFRESH_INTERVAL_MINUTES"
    )
    ingestion_interval_minutes: float = Field(
        1440, validation_alias="INGESTION_INTERVAL_MINUTES"
    )
    cycle_timeout_seconds: float = Field(
        120.0,
        validation_alias="CYCLE_TIMEOUT_SECONDS",
        description="Upper bound for a single refresh or ingestion cycle.",
    )
    health_degraded_threshold_ms: float = Field(
        1000.0, validation_alias="HEALTH_DEGRADED_THRESHOLD_MS"
    )

    @field_validator(
        "token_refresh_interval_minutes",
        "ingestion_interval_minutes",
        "cycle_timeout_seconds",
    )
    @classmethod
    def _require_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Scheduler intervals and timeouts must be positive.")
        return value


class AppSettings(BaseSettings):
    """Root settings object shared by the APIs and workers."""

    model_config = _ENV_FILE_CONFIG

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    fitbit: FitbitSettings = Field(default_factory=FitbitSettings)
    aws: AWSSettings = Field(default_factory=AWSSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()


__all__ = [
    "AppSettings",
    "AWSSettings",
    "FitbitSettings",
    "SchedulerSettings",
    "get_settings",
]
