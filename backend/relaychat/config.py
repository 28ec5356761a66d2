"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = "relaychat"
    app_version: str = "1.0.0"
    status_message: str = "relaychat backend running"

    host: str = "0.0.0.0"
    port: int = 9000
    log_level: str = "INFO"

    # Persistence is disabled when unset
    redis_url: Optional[str] = None
    messages_key: str = "chat:messages"

    cors_origins: list[str] = ["*"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
