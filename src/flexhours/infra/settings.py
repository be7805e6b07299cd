"""
Application settings for flexhours.

This module defines all configuration settings using Pydantic BaseSettings.
Defaults reproduce the host page's standard policy (40 hour week, Monday to
Thursday fixed, Friday flexible).
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from flexhours.domain.policy import WorkPolicy
from flexhours.runtime.config import AcquisitionTiming


class Settings(BaseSettings):
    """Main application settings using Pydantic BaseSettings."""

    # Work schedule
    lunch_break_minutes: int = Field(default=60, alias="FLEXHOURS_LUNCH_BREAK_MINUTES", ge=0)
    weekly_target_hours: int = Field(default=40, alias="FLEXHOURS_WEEKLY_TARGET_HOURS", ge=0)
    daily_work_hours: int = Field(default=8, alias="FLEXHOURS_DAILY_WORK_HOURS", ge=0)
    regular_days: frozenset[int] = Field(
        default=frozenset({0, 1, 2, 3}), alias="FLEXHOURS_REGULAR_DAYS"
    )  # JSON list, Monday == 0
    flex_day: int = Field(default=4, alias="FLEXHOURS_FLEX_DAY", ge=0, le=6)
    weekend_days: frozenset[int] = Field(default=frozenset({5, 6}), alias="FLEXHOURS_WEEKEND_DAYS")

    # Acquisition timing (milliseconds)
    retry_interval_ms: int = Field(default=500, alias="FLEXHOURS_RETRY_INTERVAL_MS", gt=0)
    max_interval_retries: int = Field(default=5, alias="FLEXHOURS_MAX_INTERVAL_RETRIES", ge=0)
    max_notification_retries: int = Field(default=20, alias="FLEXHOURS_MAX_NOTIFICATION_RETRIES", ge=0)
    notification_timeout_ms: int = Field(default=10000, alias="FLEXHOURS_NOTIFICATION_TIMEOUT_MS", gt=0)
    initial_delay_ms: int = Field(default=3500, alias="FLEXHOURS_INITIAL_DELAY_MS", ge=0)

    # Validation
    plausibility_factor: float = Field(default=2.0, alias="FLEXHOURS_PLAUSIBILITY_FACTOR", gt=0)

    # Logging
    debug: bool = Field(default=False, alias="FLEX_EXTENSION_DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config: SettingsConfigDict = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    def policy(self) -> WorkPolicy:
        return WorkPolicy(
            lunch_break_minutes=self.lunch_break_minutes,
            weekly_target_hours=self.weekly_target_hours,
            daily_work_hours=self.daily_work_hours,
            regular_days=frozenset(self.regular_days),
            flex_day=self.flex_day,
            weekend_days=frozenset(self.weekend_days),
        )

    def timing(self) -> AcquisitionTiming:
        return AcquisitionTiming(
            initial_delay_ms=self.initial_delay_ms,
            retry_interval_ms=self.retry_interval_ms,
            max_interval_retries=self.max_interval_retries,
            max_notification_retries=self.max_notification_retries,
            notification_timeout_ms=self.notification_timeout_ms,
        )

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level.upper()


def _resolve_env_file() -> str | None:
    # 1) Explicit override
    explicit = os.getenv("FLEXHOURS_ENV_FILE")
    if explicit and Path(explicit).is_file():
        return explicit

    # 2) CWD .env
    cwd_env = Path.cwd() / ".env"
    if cwd_env.is_file():
        return str(cwd_env)
    return None


# Global settings instance (load from best-effort .env discovery)
_env_file = _resolve_env_file()
settings = Settings(_env_file=_env_file) if _env_file else Settings()  # type: ignore[call-arg]
