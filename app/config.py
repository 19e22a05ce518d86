"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key used to verify session JWT tokens", min_length=1
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Connection URL of the Redis instance backing the notification cache",
    )
    notification_cache_ttl_seconds: int = Field(
        default=86_400,
        description="Lifetime of cached notification copies",
        gt=0,
    )
    vapid_public_key: str | None = Field(
        default=None,
        description="Base64url encoded VAPID public key handed to browsers",
    )
    vapid_private_key: str | None = Field(
        default=None,
        description="VAPID private key used to sign Web Push requests",
    )
    vapid_subject: str = Field(
        default="mailto:admin@gaiathon.org",
        description="Contact URI sent in the VAPID ``sub`` claim",
    )
    stub_channel_outcome: Literal["sent", "failed", "pending"] = Field(
        default="sent",
        description="Status recorded for channels without a delivery implementation (email, slack)",
    )
    app_timezone: str = Field(default="UTC", description="Timezone used for timestamps")
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    log_level: str = Field(default="INFO")

    @model_validator(mode="after")
    def _validate_vapid_pair(self) -> "Settings":
        if bool(self.vapid_public_key) ^ bool(self.vapid_private_key):
            raise ValueError(
                "VAPID_PUBLIC_KEY and VAPID_PRIVATE_KEY must both be provided to enable push"
            )
        if not self.vapid_subject.startswith(("mailto:", "https:")):
            raise ValueError("VAPID_SUBJECT must be a mailto: or https: URI")
        return self

    @property
    def push_enabled(self) -> bool:
        return bool(self.vapid_public_key and self.vapid_private_key)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
