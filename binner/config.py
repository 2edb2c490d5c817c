"""
Binner Configuration Management

Settings are loaded from environment variables prefixed with ``BINNER_`` and
from an optional ``.env`` file in the working directory.
"""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """
    Runtime settings for the histogram builder.
    Values can be overridden with e.g. ``BINNER_LABEL_PRECISION=2``.
    """

    model_config = SettingsConfigDict(
        env_prefix="BINNER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # === LOGGING ===
    LOG_LEVEL: str = "INFO"
    CONSOLE_LOG_LEVEL: str = "WARNING"
    LOG_FILE: Optional[str] = None  # No file logging unless set
    LOG_MAX_BYTES: int = 10 * 1024 * 1024
    LOG_BACKUP_COUNT: int = 5

    # === OUTPUT ===
    LABEL_PRECISION: int = 3
    NULL_TOKEN: str = "null"

    # === BINNING DEFAULTS ===
    DEFAULT_NUM_BINS: int = 5
    DEFAULT_STD_DEV_SIZE: float = 1.0
    HEAD_TAIL_RATIO: float = 0.4

    # Jenks is quadratic in the number of values, larger inputs are sampled
    JENKS_MAX_SAMPLE: int = 5000
    RANDOM_SEED: int = 42

    # rescan: recompute min/max per bin, single_pass: track them while filling
    STATS_STRATEGY: str = "rescan"

    @field_validator("LOG_LEVEL", "CONSOLE_LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        normalized = v.upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {', '.join(sorted(_LOG_LEVELS))}")
        return normalized

    @field_validator("LABEL_PRECISION")
    @classmethod
    def validate_label_precision(cls, v: int) -> int:
        if v < 0:
            raise ValueError("LABEL_PRECISION must be zero or a positive integer")
        return v

    @field_validator("NULL_TOKEN")
    @classmethod
    def validate_null_token(cls, v: str) -> str:
        token = v.strip().lower()
        if not token:
            raise ValueError("NULL_TOKEN must not be empty")
        return token

    @field_validator("DEFAULT_NUM_BINS", "JENKS_MAX_SAMPLE")
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        if v < 1:
            raise ValueError("value must be a positive integer")
        return v

    @field_validator("DEFAULT_STD_DEV_SIZE")
    @classmethod
    def validate_std_dev_size(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("DEFAULT_STD_DEV_SIZE must be greater than zero")
        return v

    @field_validator("HEAD_TAIL_RATIO")
    @classmethod
    def validate_head_tail_ratio(cls, v: float) -> float:
        if not 0 < v < 1:
            raise ValueError("HEAD_TAIL_RATIO must be between 0 and 1")
        return v

    @field_validator("STATS_STRATEGY")
    @classmethod
    def validate_stats_strategy(cls, v: str) -> str:
        normalized = v.lower().replace("-", "_")
        if normalized not in {"rescan", "single_pass"}:
            raise ValueError("STATS_STRATEGY must be one of: rescan, single_pass")
        return normalized


@lru_cache()
def get_settings() -> Settings:
    """
    Get the process settings.
    Uses lru_cache to avoid re-reading the environment on every call.
    """
    return Settings()
