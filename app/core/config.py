"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here: upstream endpoints, timeouts,
rate limits and guard policy.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.shared.errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        supabase_url: Base URL of the Supabase project (REST + Auth).
        supabase_anon_key: Public anon key sent as ``apikey``.
        dependency_timeout_seconds: Deadline for a single upstream call.
        create_bookmark_max_bytes: Maximum accepted create request body.
        rate_limit_window_ms: Window shared by the bookmark rate limits.
        rate_limit_read: Requests per window for listing bookmarks.
        rate_limit_create: Requests per window for creating bookmarks.
        rate_limit_delete: Requests per window for deleting bookmarks.
        rate_limit_storage_uri: Storage backend for rate-limit counters.
        ready_retries: Guard retries used by the readiness check.
        ready_retry_delay_ms: Guard backoff base used by the readiness check.
        ready_failure_threshold: Failures that trip a readiness circuit.
        ready_cooldown_ms: Cooldown of a tripped readiness circuit.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    project_name: str = "Bookmark API"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    dependency_timeout_seconds: float = 3.0

    create_bookmark_max_bytes: int = 16 * 1024

    rate_limit_window_ms: int = 60_000
    rate_limit_read: int = 120
    rate_limit_create: int = 30
    rate_limit_delete: int = 30
    rate_limit_storage_uri: str = "memory://"

    ready_retries: int = 2
    ready_retry_delay_ms: int = 250
    ready_failure_threshold: int = 3
    ready_cooldown_ms: int = 15_000

    def require(self, name: str) -> str:
        """Return a required setting or fail with CONFIGURATION_ERROR.

        Args:
            name: Attribute name of the setting, e.g. ``supabase_url``.

        Raises:
            ConfigurationError: If the setting is unset or empty.
        """
        value = getattr(self, name, None)
        if not value:
            raise ConfigurationError(name.upper())
        return str(value)


settings = Settings()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings (overridable in FastAPI dependencies)."""
    return settings
