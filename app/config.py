# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# The Settings class validates all values at startup, catching configuration
# errors early rather than at runtime.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from lib.utils import split_csv


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key (used for Auth sign-in calls)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret for verifying Supabase access tokens"
    )

    STORAGE_BUCKET: str = Field(
        default="uploads",
        description="Supabase Storage bucket for resumes, images and videos"
    )

    # -------------------------------------------------------------------------
    # Access Control
    # -------------------------------------------------------------------------

    # No default: an empty list means nobody is an admin
    ADMIN_USER_IDS: str = Field(
        default="",
        description="Comma-separated Supabase user ids with admin privileges"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=5001,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Upload Limits
    # -------------------------------------------------------------------------

    MAX_RESUME_SIZE_MB: int = Field(default=5, ge=1, le=50)

    RESUME_EXTENSIONS: str = Field(
        default=".pdf,.doc,.docx",
        description="Allowed resume extensions (comma-separated)"
    )

    MAX_IMAGE_SIZE_MB: int = Field(default=5, ge=1, le=50)

    MAX_VIDEO_SIZE_MB: int = Field(default=200, ge=1, le=2048)

    # -------------------------------------------------------------------------
    # Feedback / Listing
    # -------------------------------------------------------------------------

    VOTE_MAX_RETRIES: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Compare-and-swap attempts before a vote reports a conflict"
    )

    TESTIMONIALS_PAGE_SIZE: int = Field(default=6, ge=1, le=100)

    ADMIN_PAGE_SIZE: int = Field(default=10, ge=1, le=100)

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return split_csv(self.CORS_ORIGINS)

    @property
    def admin_user_ids(self) -> frozenset[str]:
        """Parse ADMIN_USER_IDS into a set."""
        return frozenset(split_csv(self.ADMIN_USER_IDS))

    @property
    def resume_extensions_list(self) -> list[str]:
        """
        Parse RESUME_EXTENSIONS into a list.

        Example: ".pdf, .DOCX" -> [".pdf", ".docx"]
        """
        return [ext.lower() for ext in split_csv(self.RESUME_EXTENSIONS)]

    @property
    def max_resume_size_bytes(self) -> int:
        return self.MAX_RESUME_SIZE_MB * 1024 * 1024

    @property
    def max_image_size_bytes(self) -> int:
        return self.MAX_IMAGE_SIZE_MB * 1024 * 1024

    @property
    def max_video_size_bytes(self) -> int:
        return self.MAX_VIDEO_SIZE_MB * 1024 * 1024

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
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
