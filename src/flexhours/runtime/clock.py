"""Wall clock abstractions used to pick today's work-policy branch.

The projection only needs the local weekday. The clock is injectable so tests
and the CLI can pin a specific day.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Protocol, runtime_checkable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


@runtime_checkable
class WallClock(Protocol):
    """Protocol implemented by clock providers."""

    def now_local(self) -> datetime:
        """Return the current timezone-aware local time."""

    def weekday(self) -> int:
        """Return today's weekday, Monday == 0."""


class MasterClock:
    """System clock providing timezone-aware timestamps."""

    def __init__(self, tz: str | tzinfo | None = None) -> None:
        self._tz = self._resolve_timezone(tz)

    def now_utc(self) -> datetime:
        """Return current UTC time as an aware datetime."""
        return datetime.now(timezone.utc)

    def now_local(self) -> datetime:
        """Return current time in the configured timezone (defaults to system local)."""
        return self.now_utc().astimezone(self._tz)

    def weekday(self) -> int:
        return self.now_local().weekday()

    @staticmethod
    def _resolve_timezone(tz: str | tzinfo | None) -> tzinfo:
        if tz is None:
            return datetime.now().astimezone().tzinfo or timezone.utc
        if isinstance(tz, tzinfo):
            return tz
        try:
            return ZoneInfo(tz)
        except (ZoneInfoNotFoundError, ValueError):
            return timezone.utc


class FixedClock:
    """Deterministic clock used for tests and pinned CLI runs."""

    def __init__(self, moment: datetime) -> None:
        if moment.tzinfo is None or moment.tzinfo.utcoffset(moment) is None:
            raise ValueError("Datetime must be timezone-aware")
        self._moment = moment

    @classmethod
    def on_weekday(cls, weekday: int) -> FixedClock:
        """A clock pinned to noon UTC on the given weekday (Monday == 0)."""
        if not 0 <= weekday <= 6:
            raise ValueError(f"weekday out of range: {weekday}")
        # 2024-01-01 was a Monday.
        base = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        return cls(base + timedelta(days=weekday))

    def now_local(self) -> datetime:
        return self._moment

    def weekday(self) -> int:
        return self._moment.weekday()
