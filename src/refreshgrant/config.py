# Configuration for the refresh grant.
# Created: 2026-02-20
#
# Values load from REFRESHGRANT_* environment variables (or .env).

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Refresh grant settings."""

    model_config = SettingsConfigDict(
        env_prefix="REFRESHGRANT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    always_issue_new_refresh_token: bool = Field(
        default=True,
        description="Rotate the refresh token on every use (revoke old, issue new)",
    )
    access_token_lifetime: int = Field(
        default=3600, gt=0, description="Access token lifetime in seconds"
    )
    refresh_token_lifetime: int = Field(
        default=1209600, gt=0, description="Refresh token lifetime in seconds"
    )
    config_dir: Path = Field(
        default_factory=lambda: Path.home() / ".refreshgrant",
        description="Directory for token storage and the audit log",
    )
    audit_enabled: bool = True


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_config_dir() -> Path:
    """Get/create the data directory."""
    d = get_settings().config_dir
    d.mkdir(parents=True, exist_ok=True)
    return d
