"""
Conversion between the host page's time texts and minute counts.

The page renders durations in three shapes: ``"9시간 47분"``, ``"23:20"`` and
``"9시간"``. Clock times are ``"HH:MM"``, or ``"익일 HH:MM"`` once a computed
time rolls past midnight.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

NEXT_DAY_PREFIX = "익일"

_HOUR_MINUTE_RE = re.compile(r"(\d+)시간\s*(\d+)분")
_COLON_RE = re.compile(r"(\d+):(\d+)")
_HOURS_ONLY_RE = re.compile(r"(\d+)시간")
_CLOCK_RE = re.compile(rf"^(?:({NEXT_DAY_PREFIX}) )?(\d{{1,2}}):(\d{{2}})$")


@dataclass(frozen=True)
class ClockTime:
    """24-hour wall clock time, optionally on the following day."""

    hour: int
    minute: int
    next_day: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23:
            raise ValueError(f"hour out of range: {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"minute out of range: {self.minute}")

    @property
    def sort_key(self) -> tuple[bool, int, int]:
        """Chronological ordering key; next-day times sort last."""
        return (self.next_day, self.hour, self.minute)

    @property
    def minutes_of_day(self) -> int:
        return self.hour * 60 + self.minute

    def __str__(self) -> str:
        clock = format_clock(self.minutes_of_day)
        return f"{NEXT_DAY_PREFIX} {clock}" if self.next_day else clock


def parse_to_minutes(text: str | None) -> int:
    """Return the duration in ``text`` as minutes, or 0 if nothing matches."""
    if not text:
        return 0

    m = _HOUR_MINUTE_RE.search(text)
    if m:
        return int(m.group(1)) * 60 + int(m.group(2))

    m = _COLON_RE.search(text)
    if m:
        return int(m.group(1)) * 60 + int(m.group(2))

    m = _HOURS_ONLY_RE.search(text)
    if m:
        return int(m.group(1)) * 60

    return 0


def format_worded_duration(minutes: int) -> str:
    """``545`` -> ``"9시간 05분"``."""
    hours, mins = divmod(minutes, 60)
    return f"{hours}시간 {mins:02d}분"


def format_clock(minutes: int) -> str:
    """``545`` -> ``"09:05"``."""
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def parse_clock(text: str) -> ClockTime:
    """Parse ``"HH:MM"`` or ``"익일 HH:MM"``; raise ValueError otherwise."""
    m = _CLOCK_RE.match(text.strip())
    if not m:
        raise ValueError(f"Invalid clock time: {text!r}")
    return ClockTime(int(m.group(2)), int(m.group(3)), next_day=m.group(1) is not None)


def add_minutes(clock: ClockTime | str, delta: int) -> ClockTime:
    """Add ``delta`` minutes to ``clock``.

    A sum reaching hour 24 or beyond is tagged ``next_day`` and wrapped into
    ``[0, 23]``. Negative sums wrap without the tag.
    """
    start = parse_clock(clock) if isinstance(clock, str) else clock
    hours, mins = divmod(start.minutes_of_day + delta, 60)
    next_day = start.next_day
    if hours >= 24:
        next_day = True
    return ClockTime(hours % 24, mins, next_day=next_day)
