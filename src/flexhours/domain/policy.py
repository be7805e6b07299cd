"""
Weekly flexible-hours policy.

WorkPolicy is an immutable value; Settings in flexhours.infra.settings builds
it from the environment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Python weekday numbering: Monday == 0 ... Sunday == 6.
MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(7)


@dataclass(frozen=True)
class WorkPolicy:
    """
    Weekly flexible-hours policy.

    Regular days end after a flat ``daily_work_hours`` plus lunch. The flex day
    ends once the weekly target is reached.
    """
    lunch_break_minutes: int = 60
    weekly_target_hours: int = 40
    daily_work_hours: int = 8
    regular_days: frozenset[int] = field(
        default_factory=lambda: frozenset({MONDAY, TUESDAY, WEDNESDAY, THURSDAY})
    )
    flex_day: int = FRIDAY
    weekend_days: frozenset[int] = field(default_factory=lambda: frozenset({SATURDAY, SUNDAY}))

    def __post_init__(self) -> None:
        if self.flex_day in self.regular_days:
            raise ValueError(f"flex_day {self.flex_day} is also listed as a regular day")
        for day in (*self.regular_days, self.flex_day, *self.weekend_days):
            if not 0 <= day <= 6:
                raise ValueError(f"weekday out of range: {day}")
        if self.lunch_break_minutes < 0 or self.daily_work_hours < 0 or self.weekly_target_hours < 0:
            raise ValueError("policy durations must be non-negative")

    @property
    def weekly_target_minutes(self) -> int:
        return self.weekly_target_hours * 60

    @property
    def daily_work_minutes(self) -> int:
        return self.daily_work_hours * 60

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WorkPolicy:
        """Deserialize from dict (e.g. loaded from JSON). Missing keys use defaults."""
        defaults = cls()
        return cls(
            lunch_break_minutes=int(data.get("lunch_break_minutes", defaults.lunch_break_minutes)),
            weekly_target_hours=int(data.get("weekly_target_hours", defaults.weekly_target_hours)),
            daily_work_hours=int(data.get("daily_work_hours", defaults.daily_work_hours)),
            regular_days=frozenset(data.get("regular_days", defaults.regular_days)),
            flex_day=int(data.get("flex_day", defaults.flex_day)),
            weekend_days=frozenset(data.get("weekend_days", defaults.weekend_days)),
        )


DEFAULT_WORK_POLICY = WorkPolicy()
