"""Configuration management using Pydantic Settings"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables

    DATABASE_URL and JWT_SECRET have no defaults: a process started without
    them fails at startup with a validation error.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str

    # Auth
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    token_ttl_days: int = 30
    bcrypt_rounds: int = 10

    # Service
    service_name: str = "finance-tracker"
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process"""
    return Settings()
