"""Application-wide configuration loading and validation."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from twism.errors import ConfigurationError


class Settings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    environment: Literal["local", "dev", "prod"] = Field(default="local")
    log_level: str = Field(default="INFO")

    # Session cookie signing
    twism_secret: str | None = Field(
        default=None,
        min_length=16,
        description="Deployment-fixed key used to sign the session cookie.",
    )

    # Webhook mount point; each flow lives under <mount>/<flow>/<STATE>.
    twism_mount_path: str = Field(default="/twism")

    @field_validator("twism_mount_path")
    @classmethod
    def normalize_mount_path(cls, value: str) -> str:
        value = "/" + value.strip("/")
        return value.rstrip("/") if value != "/" else ""


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()


def get_cookie_secret() -> str:
    settings = get_settings()
    if not settings.twism_secret:
        raise ConfigurationError("TWISM_SECRET is required to sign session cookies")
    return settings.twism_secret
