"""Configuration settings for Nomad Service."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./nomad.db"
    database_echo: bool = False

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8002
    debug: bool = False
    graphql_path: str = "/graphql"
    cors_origins: list[str] = ["*"]

    # Service
    service_name: str = "nomad-service"
    service_version: str = "0.1.0"
    timezone: str = "UTC"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
