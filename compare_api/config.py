"""Configuration management for the comparison API.

Centralizes all environment variable access for better testability and maintainability.
Values are read on every call so tests can patch the environment.
"""

import os
from typing import Optional

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


class Config:
    """Application configuration loaded from environment variables."""

    # Supabase configuration
    @staticmethod
    def supabase_url() -> Optional[str]:
        """Get Supabase project URL from environment."""
        return os.environ.get("SUPABASE_URL")

    @staticmethod
    def supabase_service_role_key() -> Optional[str]:
        """Get Supabase service role key from environment."""
        return os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

    @staticmethod
    def supabase_jwt_secret() -> Optional[str]:
        """Get Supabase JWT secret for token verification."""
        return os.environ.get("SUPABASE_JWT_SECRET")

    @staticmethod
    def storage_bucket() -> str:
        """Get the Storage bucket holding post images."""
        return os.environ.get("SUPABASE_STORAGE_BUCKET", "images")

    # Runtime
    @staticmethod
    def app_env() -> str:
        """Get deployment environment name (development, production, ...)."""
        return os.environ.get("APP_ENV", "production").lower()

    @staticmethod
    def is_development() -> bool:
        return Config.app_env() == "development"

    @staticmethod
    def log_level() -> str:
        """Get log level name (DEBUG, INFO, WARNING, ...)."""
        return os.environ.get("LOG_LEVEL", "INFO")

    # Rate limiting
    @staticmethod
    def rate_limit_enabled() -> bool:
        """Whether request throttling is active."""
        return _flag("RATE_LIMIT_ENABLED", True)

    @staticmethod
    def rate_limit_sweep_seconds() -> float:
        """Interval between sweeps of expired rate limit windows."""
        return float(os.environ.get("RATE_LIMIT_SWEEP_SECONDS", "300"))

    # Uploads and errors
    @staticmethod
    def allow_gif_uploads() -> bool:
        """Accept image/gif uploads in addition to JPEG, PNG and WebP."""
        return _flag("ALLOW_GIF_UPLOADS", False)

    @staticmethod
    def expose_upstream_errors() -> bool:
        """Return raw Supabase error messages to callers instead of a generic one."""
        return _flag("EXPOSE_UPSTREAM_ERRORS", False)

    # Helper methods
    @staticmethod
    def is_configured() -> bool:
        """Check if all required configuration is present."""
        return not Config.get_missing_config()

    @staticmethod
    def get_missing_config() -> list[str]:
        """Get list of missing required configuration keys."""
        missing = []
        if not Config.supabase_url():
            missing.append("SUPABASE_URL")
        if not Config.supabase_service_role_key():
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        if not Config.supabase_jwt_secret():
            missing.append("SUPABASE_JWT_SECRET")
        return missing


# Singleton instance for easy access
config = Config()
