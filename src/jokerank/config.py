"""
Configuration management for jokerank.

Uses Pydantic Settings to load configuration from environment variables
with sensible defaults. The ELO engine itself never reads these settings
implicitly; callers build an EloConfig from them when they want
environment-driven behaviour.

Usage:
    from jokerank.config import settings
    print(settings.elo_base_k)
"""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from jokerank.elo.constants import DEFAULT_RATING, ENGINE_DEFAULTS

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
JSON_LOG_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", '
    '"logger": "%(name)s", "message": "%(message)s"}'
)
LOG_DATE_FORMAT = "%H:%M:%S"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables can be set directly or via a .env file
    in the project root directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ==========================================================================
    # ELO Engine Configuration
    # ==========================================================================

    elo_base_k: float = Field(
        default=ENGINE_DEFAULTS["base_k"],
        gt=0,
        description="Base step size (K-factor) before adaptive scaling",
    )
    elo_volatility_decay: float = Field(
        default=ENGINE_DEFAULTS["volatility_decay"],
        gt=0,
        le=1,
        description="Smoothing factor applied when updating stored volatility",
    )
    elo_min_games: int = Field(
        default=ENGINE_DEFAULTS["min_games"],
        gt=0,
        description="Comparisons before the new-joke experience boost fades out",
    )
    elo_confidence_threshold: float = Field(
        default=ENGINE_DEFAULTS["confidence_threshold"],
        ge=0,
        le=1,
        description="Confidence above which callers treat an update as trustworthy",
    )
    elo_form_window: int = Field(
        default=ENGINE_DEFAULTS["form_window"],
        gt=0,
        description="Number of recent outcomes kept per joke for form tracking",
    )
    elo_mean_rating: float = Field(
        default=float(DEFAULT_RATING),
        description="Population mean that inactivity compression pulls toward",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_format: str = Field(
        default="console",
        description="Log format: 'json' for production, 'console' for dev",
    )

    # ==========================================================================
    # Validators
    # ==========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Ensure log format is one we know how to render."""
        valid_formats = {"json", "console"}
        lower_v = v.lower()
        if lower_v not in valid_formats:
            raise ValueError(f"log_format must be one of {valid_formats}")
        return lower_v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures we only load settings once,
    which is important because loading from .env can be slow.
    """
    return Settings()


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure root logging for scripts and services embedding the engine.

    Args:
        level: Logging level name. Defaults to settings.log_level.
        log_format: 'json' or 'console'. Defaults to settings.log_format.
    """
    log_format = log_format or get_settings().log_format
    logging.basicConfig(
        level=level or get_settings().log_level,
        format=JSON_LOG_FORMAT if log_format == "json" else LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )


# Convenience alias for importing
settings = get_settings()
