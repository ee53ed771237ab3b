"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated configuration from environment variables
with sensible defaults. Supports .env files and nested configuration.

Example:
    >>> from promise_utils.foundation.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.retry.base_delay)
    100.0
    >>> print(settings.logging.level)
    'WARNING'

    # Or with environment variables:
    # PROMISE_UTILS_RETRY_BASE_DELAY=250
    # PROMISE_UTILS_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, NonNegativeFloat, PositiveFloat, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PROMISE_UTILS_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["json", "text"] = "text"
    include_timestamps: bool = True

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class RetrySettings(BaseSettings):
    """Defaults for the backoff policy objects. All delays in milliseconds."""

    model_config = SettingsConfigDict(
        env_prefix="PROMISE_UTILS_RETRY_",
        extra="ignore",
    )

    max_retries: Annotated[int, Field(ge=0, le=25)] = 5
    base_delay: NonNegativeFloat = Field(default=100.0, description="First backoff delay in ms")
    max_delay: PositiveFloat = Field(default=10_000.0, description="Backoff cap in ms")
    multiplier: PositiveFloat = Field(default=2.0, description="Exponential growth factor")
    jitter: bool = False


class PromiseUtilsSettings(BaseSettings):
    """Root settings for promise_utils.

    Loads configuration from environment variables with PROMISE_UTILS_ prefix.

    Example environment variables:
        PROMISE_UTILS_DEBUG=true
        PROMISE_UTILS_LOG_LEVEL=DEBUG
        PROMISE_UTILS_LOG_FORMAT=json
        PROMISE_UTILS_RETRY_MAX_RETRIES=8
    """

    model_config = SettingsConfigDict(
        env_prefix="PROMISE_UTILS_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Log at DEBUG regardless of logging.level")
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)

    @computed_field
    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.logging.level


@lru_cache(maxsize=1)
def get_settings() -> PromiseUtilsSettings:
    """Get the global settings instance (cached)."""
    return PromiseUtilsSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
