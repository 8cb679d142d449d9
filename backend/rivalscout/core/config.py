"""
Centralized configuration for the RivalScout backend.
Uses Pydantic Settings to load from environment variables and .env file.
"""

from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Provider credentials ──
    dataforseo_login: str = ""
    dataforseo_password: str = ""
    serper_api_key: str = ""

    # ── Site profile collaborator ──
    site_profile_url: str = ""         # empty → built-in homepage profiler

    # ── SERP ──
    serp_depth: int = 10
    serp_max_results: int = 12
    provider_timeout: float = 20.0

    # ── Intent classifier ──
    page_fetch_timeout: float = 6.5
    user_agent: str = "RivalScout/1.0 (+competitor-profiler)"

    # ── Cache ──
    cache_ttl_seconds: int = 600
    cache_max_size: int = 200

    # ── CORS ──
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    # ── Rate Limiting ──
    rate_limit_per_minute: int = 30

    # ── Application ──
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parent.parent.parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def dataforseo_configured(self) -> bool:
        return bool(self.dataforseo_login and self.dataforseo_password)


@lru_cache()
def get_settings() -> Settings:
    """Cached singleton for application settings."""
    return Settings()
