"""Application configuration."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, model_validator
from typing import Optional, Union
from pathlib import Path
import os

from quickvote.core.constants import (
    CLEANUP_INTERVAL_HOURS as DEFAULT_CLEANUP_INTERVAL_HOURS,
    DATABASE_FILENAME,
    SESSION_TTL_DAYS as DEFAULT_SESSION_TTL_DAYS,
)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # Database - Support both a full URL and a storage directory for SQLite
    DATABASE_URL: Optional[str] = None
    DB_PATH: Optional[str] = None  # Directory holding voting.db (e.g. a mounted volume)

    # Frontend origin allowed to call the API and open realtime connections
    FRONTEND_URL: str = "http://localhost:5173"

    # CORS - Can be a list or comma-separated string; defaults to FRONTEND_URL
    CORS_ORIGINS: Union[list, str, None] = None

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            # Split by comma and strip whitespace
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    @model_validator(mode='after')
    def default_cors_to_frontend(self):
        """Fall back to the frontend origin when CORS_ORIGINS is not set."""
        if not self.CORS_ORIGINS:
            self.CORS_ORIGINS = [self.FRONTEND_URL]
        return self

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3001

    # Application
    APP_TITLE: str = "QuickVote"
    APP_DESCRIPTION: str = "Ad-hoc voting sessions with live results"
    APP_VERSION: str = "1.0.0"

    # Environment
    ENVIRONMENT: str = "development"  # development, staging, production

    # Logging
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL

    # Session lifecycle
    SESSION_TTL_DAYS: int = DEFAULT_SESSION_TTL_DAYS
    CLEANUP_INTERVAL_HOURS: float = DEFAULT_CLEANUP_INTERVAL_HOURS

    # Server-Sent Events (SSE) Configuration
    SSE_KEEPALIVE_INTERVAL: int = 15  # Comment line sent when no updates arrive

    # Database Connection Pool Configuration (ignored for SQLite)
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    def get_database_url(self) -> str:
        """
        Get database URL from either DATABASE_URL or DB_PATH.
        Priority: DATABASE_URL > DB_PATH > current working directory
        """
        if self.DATABASE_URL:
            # Handle Heroku/Railway postgres:// URL format
            if self.DATABASE_URL.startswith("postgres://"):
                return self.DATABASE_URL.replace("postgres://", "postgresql://", 1)
            return self.DATABASE_URL

        db_dir = Path(self.DB_PATH) if self.DB_PATH else Path.cwd()
        # Volumes may be mounted empty, make sure the directory exists
        db_dir.mkdir(parents=True, exist_ok=True)
        return f"sqlite:///{db_dir / DATABASE_FILENAME}"

    def validate_production_config(self) -> None:
        """Validate that production-critical settings are properly configured."""
        if self.ENVIRONMENT == "production":
            issues = []

            if "*" in (self.CORS_ORIGINS or []):
                issues.append("CORS_ORIGINS should be restricted to specific domains")

            if self.SESSION_TTL_DAYS < 1:
                issues.append("SESSION_TTL_DAYS must be at least 1")

            if issues:
                raise ValueError(
                    "Production configuration errors:\n" +
                    "\n".join(f"  - {issue}" for issue in issues)
                )


settings = Settings()

# Validate production configuration on startup
if os.getenv("ENVIRONMENT") == "production":
    settings.validate_production_config()
