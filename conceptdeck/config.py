"""Application configuration."""

import logging
import sys
from collections.abc import Callable
from functools import lru_cache
from typing import Any, Literal

import structlog
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Environment
    ENVIRONMENT: Literal["development", "production", "test"] = "development"

    # Database
    DATABASE_URL: str = "sqlite:///./conceptdeck.db"

    # Which concept shard store implementation to wire
    SHARD_STORE_BACKEND: Literal["memory", "sql"] = "memory"

    # Concept ids per mastery provider call
    MASTERY_LOOKUP_BATCH_SIZE: int = 30

    # Point reads and writes against the store; None waits indefinitely
    STORE_CALL_TIMEOUT_SECONDS: float | None = 10.0

    PREFETCH_ENABLED: bool = True

    DEFAULT_CONCEPT_SOURCE: str = "Manual"

    @field_validator("MASTERY_LOOKUP_BATCH_SIZE", mode="after")
    @classmethod
    def validate_batch_size(cls, value: int) -> int:
        """Batch size must be positive."""
        if value < 1:
            msg = "MASTERY_LOOKUP_BATCH_SIZE must be at least 1"
            raise ValueError(msg)
        return value

    @field_validator("STORE_CALL_TIMEOUT_SECONDS", mode="after")
    @classmethod
    def validate_timeout(cls, value: float | None) -> float | None:
        """Timeout must be positive when set."""
        if value is not None and value <= 0:
            msg = "STORE_CALL_TIMEOUT_SECONDS must be positive"
            raise ValueError(msg)
        return value

    @field_validator("DEFAULT_CONCEPT_SOURCE", mode="after")
    @classmethod
    def strip_default_source(cls, value: str) -> str:
        """Strip whitespace and fall back to 'Manual' when blank."""
        return value.strip() or "Manual"


def configure_logging(environment: str = "development") -> None:
    """Configure structured logging with structlog."""
    use_json = environment == "production"

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if environment == "development" else logging.INFO,
    )

    processors: list[Callable[..., Any]] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
