"""
Centralized configuration for the Hearth backend.

All settings are loaded from environment variables with sensible defaults.
Every variable is prefixed with HEARTH_ (e.g., HEARTH_SESSION_SECRET).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HEARTH_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Hearth API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase (identity store backend)
    supabase_url: str = ""
    supabase_service_role_key: str = ""

    # Sessions
    session_secret: str = ""
    session_ttl_minutes: int = 60
    persistent_session_ttl_days: int = 30

    # Lockout policy
    lockout_max_failures: int = 5
    lockout_minutes: int = 5

    # Secret hashing
    bcrypt_rounds: int = 12

    # Development
    seed_dev_data: bool = False


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
