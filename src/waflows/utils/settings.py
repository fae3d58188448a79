"""
Runtime settings and logging setup shared by the command line and the flow builder.
"""
import os
import sys
from typing import Optional

from loguru import logger
from pydantic import BaseModel, field_validator

from ..validation.rules import DEFAULT_RULESET, StrictnessLevel

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    """Defaults applied when a caller does not pass explicit options."""

    ruleset: str = DEFAULT_RULESET
    strictness: StrictnessLevel = StrictnessLevel.LENIENT
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value):
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got '{value}'")
        return value

    @field_validator("strictness", mode="before")
    @classmethod
    def normalize_strictness(cls, value):
        return value.lower() if isinstance(value, str) else value


def get_settings() -> Settings:
    """
    Read settings from the environment.

    Entry points call ``load_dotenv`` first, so a ``.env`` file is honoured.
    """
    return Settings(
        ruleset=os.getenv("WAFLOWS_SCHEMA_VERSION", DEFAULT_RULESET),
        strictness=os.getenv("WAFLOWS_STRICTNESS", StrictnessLevel.LENIENT.value),
        log_level=os.getenv("WAFLOWS_LOG_LEVEL", "INFO"),
    )


def configure_logging(level: Optional[str] = None, verbose: Optional[int] = None) -> None:
    """Route loguru output to stderr at the requested level."""
    if verbose:
        level = "TRACE" if verbose > 1 else "DEBUG"
    level = level or get_settings().log_level
    logger.remove()
    logger.add(sys.stderr, level=level)
