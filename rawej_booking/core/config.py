"""Application configuration using pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from rawej_booking.utils.errors import ConfigError

# Get the project root directory (two levels up from this file)
PROJECT_ROOT = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Remote scheduling / identity API base URL (REMOTE_API_URL)
    remote_api_url: str | None = None
    request_timeout: float = 10.0

    # Upstream fetch cache horizon in seconds (API_CACHE_REVALIDATE)
    api_cache_revalidate: int = Field(default=300, ge=0)

    # CDN hints for the public doctors listing
    cdn_max_age: int = 300
    cdn_stale_while_revalidate: int = 600

    # Serve static data instead of calling upstream (ENABLE_MOCK_FALLBACK)
    enable_mock_fallback: bool = False

    # Localization
    default_locale: str = "en"
    supported_languages: list[str] = ["en", "de", "fr", "ku-sor", "ku-kur", "fa"]

    # Session persistence
    app_name: str = "Rawej"
    session_ttl_seconds: int = Field(default=3600, gt=0)
    session_cookie_name: str = "auth-session"
    session_cookie_secure: bool = True
    # Optional file-backed session blob, relative paths resolve against the project root
    token_file_path: str | None = None

    # Shared secret for GET /api/v1/revalidate
    revalidate_secret: str | None = None

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),  # Load from project root .env file
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def require_remote_api_url(self) -> str:
        """Return the upstream base URL without a trailing slash.

        Raises:
            ConfigError: If REMOTE_API_URL is not configured
        """
        if not self.remote_api_url or not self.remote_api_url.strip():
            raise ConfigError("REMOTE_API_URL environment variable is not configured")
        return self.remote_api_url.strip().rstrip("/")

    def resolve_locale(self, language: str | None) -> str:
        """Map a requested language onto a supported one."""
        if language and language in self.supported_languages:
            return language
        return self.default_locale

    @property
    def token_file(self) -> Path | None:
        if not self.token_file_path:
            return None
        path = Path(self.token_file_path)
        return path if path.is_absolute() else PROJECT_ROOT / path


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
