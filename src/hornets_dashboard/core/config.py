"""
Configuration management for the Hornets dashboard.

Uses Pydantic settings for type-safe configuration with environment variable support.
All settings can be overridden via environment variables or a ``.env`` file.
"""

import logging
import os
import secrets
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Secrets that must never sign a production session cookie
PLACEHOLDER_SESSION_SECRETS = frozenset({"", "change-me", "changeme", "secret"})


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Every field maps to the upper-cased environment variable of the same
    name, e.g. ``BALLDONTLIE_API_KEY`` or ``LEADERBOARD_SIZE``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # Application Metadata
    # ==========================================================================
    app_name: str = "Hornets Stats Dashboard"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", description="development, staging, production")

    # ==========================================================================
    # Server
    # ==========================================================================
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    base_url: str = Field(
        default="http://localhost:8000",
        description="Public URL of this app, used to build OAuth callback URLs",
    )

    # ==========================================================================
    # CORS Configuration
    # ==========================================================================
    cors_allow_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:8000",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:8000",
        ],
    )
    cors_allow_methods: list[str] = ["GET", "HEAD", "OPTIONS"]
    cors_allow_headers: list[str] = ["Accept", "Accept-Encoding", "Content-Type"]
    cors_allow_credentials: bool = True
    cors_expose_headers: list[str] = ["X-Process-Time"]

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Get CORS origins, adding production URLs if in production."""
        origins = list(self.cors_allow_origins)

        if self.environment == "production":
            prod_origins = os.getenv("CORS_PRODUCTION_ORIGINS", "")
            if prod_origins:
                origins.extend(prod_origins.split(","))

        return origins

    # ==========================================================================
    # BallDontLie API
    # ==========================================================================
    balldontlie_api_key: Optional[str] = Field(
        default=None,
        description="BallDontLie API key (sent as the Authorization header)",
    )
    balldontlie_base_url: str = "https://api.balldontlie.io/v1"
    balldontlie_requests_per_minute: int = Field(default=600, ge=1)
    balldontlie_timeout: float = Field(default=30.0, gt=0)

    # ==========================================================================
    # Team / Season
    # ==========================================================================
    team_name: str = Field(default="Hornets", description="Team whose roster is shown")
    season: int = Field(default=2024, description="Season year (2024 for 2024-25)")
    active_players_only: bool = Field(
        default=False,
        description="Use /players/active instead of /players for the roster",
    )

    # ==========================================================================
    # Stats fetching
    # ==========================================================================
    stats_source: Literal["game_logs", "season_averages"] = "game_logs"
    batch_size: int = Field(default=5, ge=1, description="Players fetched concurrently per batch")
    batch_delay_seconds: float = Field(default=0.5, ge=0, description="Pause between batches")
    stats_per_page: int = Field(default=100, ge=1, le=100)

    # ==========================================================================
    # Views
    # ==========================================================================
    leaderboard_size: int = Field(default=5, ge=1)

    # ==========================================================================
    # Authentication (Auth0)
    # ==========================================================================
    auth_enabled: bool = True
    auth0_domain: Optional[str] = Field(default=None, description="e.g. my-tenant.us.auth0.com")
    auth0_client_id: Optional[str] = None
    auth0_client_secret: Optional[str] = None
    auth0_scope: str = "openid profile email"
    session_secret_key: Optional[str] = Field(
        default=None,
        description="Secret used to sign the session cookie (required in production)",
    )
    session_max_age: int = Field(default=7 * 24 * 3600, description="Session lifetime (seconds)")

    @computed_field
    @property
    def auth_callback_url(self) -> str:
        """Absolute URL Auth0 redirects back to after login."""
        return f"{self.base_url.rstrip('/')}/auth/callback"

    @model_validator(mode="after")
    def _ensure_session_secret(self) -> "Settings":
        """Refuse a guessable cookie secret in production; elsewhere use a random one.

        A generated secret lives only as long as the process, so sessions
        end on restart.
        """
        if (self.session_secret_key or "") not in PLACEHOLDER_SESSION_SECRETS:
            return self
        if self.auth_enabled and self.environment == "production":
            raise ValueError("SESSION_SECRET_KEY must be set to a random value in production")
        if self.session_secret_key:
            logger.warning("SESSION_SECRET_KEY is a placeholder; using a random per-process secret")
        self.session_secret_key = secrets.token_urlsafe(32)
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
