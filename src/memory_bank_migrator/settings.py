from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_CONFIG_PATH, ENV_PREFIX


class Settings(BaseSettings):
    """Process settings sourced from ``MBM_*`` environment variables."""

    config_path: Path = DEFAULT_CONFIG_PATH
    enable_local_api: bool | None = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, env_file=".env", extra="ignore")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


def read_settings() -> Settings:
    return Settings()


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return read_settings()


__all__ = ["Settings", "get_settings", "read_settings"]
