"""
Application configuration using environment variables.
"""
import os
import secrets
from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "SocialSync API"
    debug: bool = False
    environment: str = "development"

    # Security
    secret_key: str = os.getenv("SECRET_KEY", secrets.token_urlsafe(32))
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24  # matches the 24h session lifetime
    refresh_token_expire_days: int = 7

    # Storage
    storage_backend: str = "memory"  # memory or database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./socialsync.db")
    seed_demo_data: bool = True

    # Scheduling
    enforce_future_schedule: bool = True

    # CORS
    cors_origins: List[str] = [
        "http://localhost:5173",
        "http://localhost:5000",
        "http://localhost:3000",
    ]

    # Client
    api_base_url: str = "http://localhost:8000"
    request_timeout: float = 10.0
    offline_cache_path: str = "./data/offline_cache.json"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def validate_settings(settings: Settings) -> None:
    """Refuse to start a production deployment with an unsafe configuration."""
    if settings.environment == "production" and not os.getenv("SECRET_KEY"):
        raise ValueError(
            "SECRET_KEY must be set in production! "
            "Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\""
        )
    if settings.storage_backend not in ("memory", "database"):
        raise ValueError(
            f"Unknown STORAGE_BACKEND '{settings.storage_backend}' (expected 'memory' or 'database')"
        )
