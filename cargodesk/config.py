"""
CargoDesk - Configuration

Application settings loaded from CARGODESK_* environment variables and an
optional .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CARGODESK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    # App
    app_name: str = "CargoDesk"
    host: str = "0.0.0.0"
    port: int = 8000

    # Backend REST API
    api_base_url: str = "http://localhost:3000/api/v1"
    request_timeout_seconds: int = 30
    verify_ssl: bool = True

    # Admin sessions
    session_cookie_name: str = "cargodesk_session"
    session_lifetime_hours: int = 24

    # Tables and dropdowns
    default_page_size: int = 25
    dropdown_debounce_ms: int = 300

    # Backend query cache
    query_cache_max_age_seconds: int = 60

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"


@lru_cache
def GetSettings() -> Settings:
    return Settings()
