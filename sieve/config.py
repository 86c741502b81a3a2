"""Configuration management with Pydantic settings."""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Defaults for building and querying an index.

    Precedence: CLI flag > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="SIEVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    num_trees: int = Field(
        default=10,
        ge=1,
        description="Number of partition trees in the forest",
    )

    max_leaf_size: int = Field(
        default=16,
        ge=2,
        description="Largest number of vectors a leaf may hold",
    )

    max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Worker threads for build and search (defaults to the executor's choice)",
    )

    seed: int | None = Field(
        default=None,
        ge=0,
        description="Seed for hyperplane sampling; unset draws fresh OS entropy",
    )

    default_top_k: int = Field(
        default=10,
        ge=0,
        description="Result count used when a query does not specify one",
    )

    log_level: LogLevel = Field(
        default="WARNING",
        description="Logging level applied by the CLI",
    )

    def configure_logging(self) -> None:
        """Install a root handler at ``log_level``."""
        logging.basicConfig(
            level=getattr(logging, self.log_level),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
