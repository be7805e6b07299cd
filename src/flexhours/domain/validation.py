"""
Sanity checks for parsed time data.

Pure validation. Errors halt the cycle; warnings are only logged.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from .timetext import ClockTime

NO_DATA_ERROR = "근무 시간 데이터가 없습니다."
START_TIME_FORMAT_ERROR = "출근시간 형식이 올바르지 않습니다."

_START_TIME_RE = re.compile(r"^\d{2}:\d{2}$")
_NEXT_DAY_START_TIME_RE = re.compile(r"^익일 \d{2}:\d{2}$")


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


def validate(
    today_minutes: int,
    week_minutes: int,
    start_time: ClockTime | str | None,
    *,
    weekly_target_hours: int = 40,
    plausibility_factor: float = 2.0,
) -> ValidationResult:
    """Check a (today, week, start time) triple.

    A present start time allows zero worked minutes (first minutes of the
    week). A total above ``plausibility_factor`` times the weekly target is
    flagged as a warning.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if today_minutes == 0 and week_minutes == 0 and start_time is None:
        errors.append(NO_DATA_ERROR)

    total_hours = (today_minutes + week_minutes) / 60
    if total_hours > weekly_target_hours * plausibility_factor:
        warnings.append(f"주간 근무시간이 {math.floor(total_hours + 0.5)}시간으로 매우 높습니다.")

    if start_time is not None:
        text = str(start_time)
        if not _START_TIME_RE.match(text) and not _NEXT_DAY_START_TIME_RE.match(text):
            errors.append(START_TIME_FORMAT_ERROR)

    return ValidationResult(valid=not errors, errors=tuple(errors), warnings=tuple(warnings))
