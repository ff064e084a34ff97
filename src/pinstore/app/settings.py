"""
Centralized configuration using Pydantic Settings.

All configuration is loaded from environment variables (or a .env file).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_WEBHASH_API_URL = "http://52.38.175.117:5000"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================================================
    # Application
    # ========================================================================
    app_name: str = Field(default="pinstore")
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)

    # ========================================================================
    # WebHash upload API
    # ========================================================================
    webhash_api_url: str = Field(default=DEFAULT_WEBHASH_API_URL)
    webhash_api_key: str | None = Field(
        default=None,
        description="Bearer credential sent to the WebHash API",
    )
    webhash_timeout_seconds: float = Field(default=50.0)

    # ========================================================================
    # Database (MongoDB)
    # ========================================================================
    mongodb_uri: str | None = Field(
        default=None,
        description="MongoDB connection string",
    )
    mongodb_db: str = Field(default="pinstore")
    mongodb_server_selection_timeout_ms: int = Field(default=5000)

    # ========================================================================
    # Caching and deadlines
    # ========================================================================
    list_cache_ttl_seconds: float = Field(default=30.0)
    proxy_route_timeout_seconds: float = Field(default=60.0)
    metadata_route_timeout_seconds: float = Field(default=10.0)

    # ========================================================================
    # Logging
    # ========================================================================
    log_level: str | None = Field(default=None)
    log_format: Literal["plain", "json"] | None = Field(default=None)


@lru_cache
def get_settings(**kwargs) -> Settings:
    # Only include kwargs that are not None, so defaults in Settings are used
    filtered_kwargs = {k: v for k, v in kwargs.items() if v is not None}
    return Settings(**filtered_kwargs)
