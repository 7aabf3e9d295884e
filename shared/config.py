"""
Shared configuration management for the rating prompt service.
"""

from functools import lru_cache
from typing import Tuple

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="RATING_PROMPT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")


class RatingPromptConfig(BaseConfig):
    """Rating prompt policy configuration."""

    service_name: str = Field(default="rating_prompt")

    # Policy gates
    min_days_between_review_request: int = Field(default=60, ge=0)
    first_threshold: int = Field(default=30, ge=0)
    second_threshold: int = Field(default=90, ge=0)
    third_threshold: int = Field(default=120, ge=0)
    crash_cooldown_hours: int = Field(default=72, ge=0)

    # App store
    app_store_id: str = Field(default="989804926")

    # Persistence
    store_backend: str = Field(default="memory")
    redis_url: str = Field(default="redis://localhost:6379/0")

    # Persisted key names; changing these orphans existing data
    last_request_date_key: str = Field(default="ratingPromptLastRequestDate")
    request_count_key: str = Field(default="ratingPromptRequestCount")
    threshold_key: str = Field(default="ratingPromptThreshold")
    last_crash_date_key: str = Field(default="lastCrashDateKey")
    force_show_override_key: str = Field(default="ForceShowAppReviewPromptOverride")
    session_count_key: str = Field(default="sessionCount")

    @model_validator(mode="after")
    def _check_thresholds(self) -> "RatingPromptConfig":
        if not (self.first_threshold < self.second_threshold < self.third_threshold):
            raise ValueError("thresholds must be strictly increasing")
        return self

    @property
    def thresholds(self) -> Tuple[int, int, int]:
        return (self.first_threshold, self.second_threshold, self.third_threshold)


@lru_cache(maxsize=1)
def get_config() -> RatingPromptConfig:
    """Get the process-wide configuration."""
    return RatingPromptConfig()
