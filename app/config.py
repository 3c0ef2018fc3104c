# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module is the single place where the server's configuration lives.
# Connection strings, the session secret, the static asset folder and the
# HTTP port are all resolved here instead of being hardcoded in the bootstrap.
#
# Usage:
#   from app.config import get_settings
#   settings = get_settings()
#   print(settings.MONGODB_URI)
#
# Values are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# 3. The defaults below, which target a local development machine
#
# Empty environment variables are ignored, so `PORT=` falls back to 3000.
# =============================================================================

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Repository root; templates ship with the code, not with the working directory
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Asset folders per environment. Development serves the clientDev images
# (loud placeholder art for layout work), production serves the real ones.
STATIC_ASSETS_PATHS: dict[str, str] = {
    "development": "client_dev/",
    "production": "client/",
}


class Settings(BaseSettings):
    """
    Server configuration resolved from the environment.

    Every field has a development default, so the server starts on a laptop
    with nothing set. Deployments override individual values through env vars.

    Instances are frozen: the configuration is built once at startup and then
    passed by reference to the connectors and the app factory.
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "production"] = Field(
        default="development",
        description="Deployment environment (selects the static asset folder)"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable verbose logging"
    )

    HOST: str = Field(
        default="0.0.0.0",
        min_length=1,
        description="Address to bind the HTTP server to"
    )

    PORT: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="HTTP listen port"
    )

    # -------------------------------------------------------------------------
    # Connections
    # -------------------------------------------------------------------------

    MONGODB_URI: str = Field(
        default="mongodb://localhost/ConfigExample",
        min_length=1,
        description="MongoDB connection string"
    )

    DB_CONNECT_TIMEOUT_MS: int = Field(
        default=5000,
        ge=1,
        description="How long the startup ping waits for a MongoDB server"
    )

    REDISCLOUD_URL: str = Field(
        default="redis://localhost:6379",
        min_length=1,
        description="Redis connection URL for the session store"
    )

    CACHE_REQUIRED: bool = Field(
        default=False,
        description="Abort startup when Redis is unreachable instead of running without sessions"
    )

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    SECRET: str = Field(
        default="Config Example Secret",
        min_length=1,
        description="Secret used to sign the session cookie"
    )

    SESSION_TTL_SECONDS: int = Field(
        default=86400,
        ge=1,
        description="Expiry of session records in Redis"
    )

    # -------------------------------------------------------------------------
    # Static Assets & Views
    # -------------------------------------------------------------------------

    # Defaults to the folder for ENVIRONMENT
    STATIC_ASSETS_PATH: str = Field(
        default_factory=lambda data: STATIC_ASSETS_PATHS[data.get("ENVIRONMENT", "development")],
        min_length=1,
        description="Folder served under /assets (also holds img/favicon.png)"
    )

    VIEWS_PATH: str = Field(
        default=str(PROJECT_ROOT / "views"),
        min_length=1,
        description="Folder holding the Jinja2 templates"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Empty env vars fall back to the defaults above
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def favicon_path(self) -> str:
        """Location of the favicon inside the static asset folder."""
        return f"{self.STATIC_ASSETS_PATH.rstrip('/')}/img/favicon.png"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Resolve the settings once per process.

    Returns:
        Settings: The resolved configuration
    """
    return Settings()
