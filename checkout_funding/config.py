"""Application configuration via pydantic-settings.

Settings are loaded from environment variables (.env file), organized into
logical groups and composed into a single Settings object.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MetadataSettings(BaseSettings):
    """Remembered-funding metadata endpoint."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    metadata_url: str = Field(
        default="",
        description="Remembered-funding metadata URL (empty = bypass mode)",
    )
    metadata_timeout: float = Field(default=10.0, description="Metadata request timeout in seconds")


class StorageSettings(BaseSettings):
    """Durable remembered-funding storage."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection string",
    )
    storage_key: str = Field(
        default="checkout:remembered_funding",
        description="Prefix of the per-buyer Redis keys holding remembered funding",
    )
    storage_ttl_seconds: int | None = Field(
        default=60 * 60 * 24 * 365,
        description="Expiry of the durable state (None = never)",
    )


class Settings(BaseSettings):
    """Root settings composing all sub-settings.

    Usage:
        settings = Settings()
        settings.metadata.metadata_url
        settings.storage.redis_url
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    environment: str = Field(default="production")
    log_level: str = Field(default="INFO")
    funding_config_path: str | None = Field(
        default=None,
        description="JSON funding config replacing the built-in tables",
    )

    metadata: MetadataSettings = Field(default_factory=MetadataSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            msg = f"Invalid log level: {v}. Must be one of {valid}"
            raise ValueError(msg)
        return upper


# Module-level singleton, import this wherever settings are needed.
settings = Settings()
