"""
End-of-day projection under the weekly flexible-hours policy.

Regular days end a flat ``daily_work_hours`` plus lunch after the start time.
The flex day absorbs the difference between the flat schedule and the weekly
target: it ends once the remaining minutes (plus lunch) have elapsed, or
reports that the target is met or exceeded. Weekends get no projection.

The flex-day arithmetic subtracts both ``week_minutes`` and ``today_minutes``
from the target. That is correct only while the page's week figure excludes
today; see DESIGN.md.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .policy import DEFAULT_WORK_POLICY, WorkPolicy
from .timetext import ClockTime, add_minutes, format_worded_duration

EXACTLY_MET_LABEL = "정시 퇴근 가능"


@dataclass(frozen=True)
class NoProjection:
    def label(self) -> str | None:
        return None


@dataclass(frozen=True)
class EndTime:
    clock: ClockTime

    def label(self) -> str | None:
        return str(self.clock)


@dataclass(frozen=True)
class ExactlyMet:
    def label(self) -> str | None:
        return EXACTLY_MET_LABEL


@dataclass(frozen=True)
class Overtime:
    minutes: int

    def __post_init__(self) -> None:
        if self.minutes <= 0:
            raise ValueError("overtime minutes must be positive")

    def label(self) -> str | None:
        return f"초과근무 중 ({format_worded_duration(self.minutes)} 초과)"


Projection = Union[NoProjection, EndTime, ExactlyMet, Overtime]


def project(
    today_minutes: int,
    week_minutes: int,
    start_time: ClockTime | None,
    weekday: int,
    policy: WorkPolicy = DEFAULT_WORK_POLICY,
) -> Projection:
    """Project today's end of work. ``weekday`` uses Python numbering (Monday == 0)."""
    if start_time is None:
        return NoProjection()

    if weekday in policy.regular_days:
        return EndTime(
            add_minutes(start_time, policy.daily_work_minutes + policy.lunch_break_minutes)
        )

    if weekday == policy.flex_day:
        remaining = policy.weekly_target_minutes - (week_minutes + today_minutes)
        if remaining > 0:
            return EndTime(add_minutes(start_time, remaining + policy.lunch_break_minutes))
        if remaining == 0:
            return ExactlyMet()
        return Overtime(abs(remaining))

    return NoProjection()
