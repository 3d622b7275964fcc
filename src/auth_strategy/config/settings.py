"""Configuration Settings for the authentication strategies

Manages environment variables and engine-wide defaults.
"""

import logging
from functools import lru_cache
from typing import Literal

from pydantic import PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings"""

    model_config = SettingsConfigDict(
        env_prefix="AUTH_STRATEGY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Pending OAuth state
    state_ttl_seconds: PositiveInt = 300  # 5 minutes between redirect and callback
    state_entropy_bytes: int = 32

    # Credential cache
    cache_backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"
    cache_key_prefix: str = "auth-strategy"

    # Outbound HTTP
    http_verify_tls: bool = True

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "text"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance

    Returns:
        Settings instance
    """
    return Settings()


_TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_JSON_FORMAT = (
    '{"time": "%(asctime)s", "logger": "%(name)s", '
    '"level": "%(levelname)s", "message": "%(message)s"}'
)


def configure_logging(settings: Settings = None) -> None:
    """Configure root logging from settings.

    Hosts embedding the engine usually own logging; this is a convenience
    for scripts and tests.
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format=_JSON_FORMAT if settings.log_format == "json" else _TEXT_FORMAT,
    )
