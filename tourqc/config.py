"""Typed settings configuration - single source of truth."""

from datetime import date
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables (QC_ prefix)."""

    model_config = SettingsConfigDict(
        env_prefix="QC_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Satisfaction cutoff: a response is below threshold when overall < this value
    satisfaction_threshold: float = 8.0

    # Period bucketing
    epoch_start: date = date(2024, 11, 1)
    series_periods: int = 12
    delta_lookback_periods: int = 1

    # Trend classification (absolute delta magnitudes)
    worsening_delta: float = 0.2
    improving_delta: float = 0.2

    # An issue tag is "hot" when its count exceeds this value
    hot_issue_min_count: int = 5

    # Corrective actions
    corrective_action_id_prefix: str = "ca"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
