"""
Core configuration module for datacommand.

This module defines the settings used to build command options and to
configure logging. Values are loaded from environment variables prefixed
with ``DATACOMMAND_`` or from a .env file, with sensible defaults.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DataCommandSettings(BaseSettings):
    """
    Settings loaded from environment variables.

    All settings can be overridden via environment variables or a .env file.
    The settings are validated using Pydantic's type system.
    """

    model_config = SettingsConfigDict(
        env_prefix="DATACOMMAND_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database Settings
    connection_string: str = Field(
        default="", description="Database connection URL used by commands"
    )
    database_echo: bool = Field(
        default=False, description="Echo SQL statements (useful for debugging)"
    )
    database_pool_pre_ping: bool = Field(
        default=True, description="Verify pooled connections before handing them out"
    )

    # Retry Settings
    max_retries: int = Field(
        default=3, ge=0, description="Retries allowed after the first attempt"
    )
    retry_backoff_seconds: float = Field(
        default=0.0,
        ge=0.0,
        description="Base delay for exponential back-off (0 disables waiting)",
    )
    retry_max_backoff_seconds: float = Field(
        default=30.0, gt=0.0, description="Upper bound for a single back-off delay"
    )

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Minimum level for emitted log records"
    )
    log_json: bool = Field(
        default=False, description="Render log records as JSON instead of console text"
    )


@lru_cache()
def get_settings() -> DataCommandSettings:
    """
    Get cached settings instance.

    This function returns a cached instance of the settings class,
    ensuring that environment variables are only read once.

    Returns:
        DataCommandSettings: Application settings instance
    """
    return DataCommandSettings()
