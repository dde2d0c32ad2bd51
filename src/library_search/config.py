"""Centralized configuration for library-search using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration loaded from ``LIBRARY_SEARCH_*`` environment variables.

    Cascade tier scores and length gates are not configurable: they are the
    ranking contract callers and tests rely on.
    """

    model_config = SettingsConfigDict(
        env_prefix="LIBRARY_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Result sizes
    default_search_limit: int = Field(default=50, ge=1, description="Maximum matches returned by search()")
    default_suggest_limit: int = Field(default=8, ge=1, description="Maximum candidates returned by suggest()")

    # Indexing
    unknown_developer_label: str = Field(
        default="Unknown Developer",
        description="Placeholder developer entry for records without a developer",
    )

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON log lines")

    # Observability
    service_name: str = Field(default="library-search", description="Service name reported to OpenTelemetry")
    tracing_enabled: bool = Field(default=True, description="Wrap index/search/suggest calls in spans")
    metrics_enabled: bool = Field(default=True, description="Record Prometheus/OpenTelemetry metrics")

    @field_validator("unknown_developer_label")
    @classmethod
    def _label_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("UNKNOWN_DEVELOPER_LABEL must not be blank")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        if value.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return value.lower()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
