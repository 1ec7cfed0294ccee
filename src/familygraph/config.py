# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    database_url: str
    environment: str = "production"
    log_level: str = "info"
    log_format: str = "json"
    cors_origins: list[str] = []
    database_pool_size: int = 20

    # Requests whose Host header (port stripped) is listed here are treated
    # as the administrator. Anything else is anonymous or a logged-in user.
    admin_hosts: list[str] = ["localhost", "127.0.0.1", "::1"]

    # Snapshots
    snapshots_dir: Path = Path("snapshots")

    # Backfill missing nodeId / edgeId values when the app starts.
    migrate_ids_on_startup: bool = True

    # Auth
    jwt_secret_key: str
    access_token_expire_minutes: int = 1440
    session_cookie_name: str = "familygraph_session"
    session_cookie_secure: bool = False

    model_config = {"env_file": ".env"}

    @model_validator(mode="after")
    def _validate_jwt_secret(self) -> "Settings":
        if len(self.jwt_secret_key) < 32:
            raise ValueError("jwt_secret_key must be at least 32 characters")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance. Lazy-loaded to avoid import-time failures."""
    return Settings()
