"""
Acquisition timing data structure.

Defines AcquisitionTiming, the retry budget of the acquisition controller. It
is an immutable value; Settings in flexhours.infra.settings builds it from the
environment.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AcquisitionTiming:
    """Retry budget for the acquisition controller. All durations in milliseconds."""
    initial_delay_ms: int = 3500
    retry_interval_ms: int = 500
    max_interval_retries: int = 5
    max_notification_retries: int = 20
    notification_timeout_ms: int = 10000

    def __post_init__(self) -> None:
        if self.initial_delay_ms < 0:
            raise ValueError("initial_delay_ms must be non-negative")
        if self.retry_interval_ms <= 0:
            raise ValueError("retry_interval_ms must be greater than zero")
        if self.notification_timeout_ms <= 0:
            raise ValueError("notification_timeout_ms must be greater than zero")
        if self.max_interval_retries < 0 or self.max_notification_retries < 0:
            raise ValueError("retry caps must be non-negative")


DEFAULT_ACQUISITION_TIMING = AcquisitionTiming()
