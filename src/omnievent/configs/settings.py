"""Centralized settings management for OmniEvent."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings powered by pydantic-settings.

    Loads configuration from ``OMNIEVENT_*`` environment variables and an
    optional .env file in the working directory.
    """

    # -------------------------------------------------------------------------
    # LOGGING
    # -------------------------------------------------------------------------
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    # -------------------------------------------------------------------------
    # PROVIDER RESOLUTION
    # -------------------------------------------------------------------------
    # provider key -> strategy class name, checked before camel-casing
    CAMELIZATIONS: dict[str, str] = Field(default_factory=dict)

    # -------------------------------------------------------------------------
    # DISPATCH
    # -------------------------------------------------------------------------
    RAISE_ON_UNAUTHORIZED: bool = False

    # -------------------------------------------------------------------------
    # PATHS
    # -------------------------------------------------------------------------
    # YAML file activating providers at start-up (see Builder.from_config)
    PROVIDERS_CONFIG_PATH: Path | None = None

    model_config = SettingsConfigDict(
        env_prefix="OMNIEVENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        # Allow extra fields in .env but ignore them in the model
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns
    -------
    Settings
        The singleton settings instance.
    """
    return Settings()
