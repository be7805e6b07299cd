"""
Start-of-work time lookup.

The host page shows the tracked start time as a ``"오전 9:05"`` style label
inside the live tracking-status widget. Other widgets repeat similar clock
texts, so the search is confined to the marker fragment's scope (by default
the marker and its descendants) and the earliest time in that scope wins:
the widget may also show later timestamps such as the current time.
"""

from __future__ import annotations

import logging
import re

from .snapshot import Scope, TextFragment, TimeSnapshot, subtree
from .timetext import ClockTime

NO_BREAK_MARKER = "휴게 없음"
BREAK_TOKEN = "휴게"
NONE_TOKEN = "없음"
RECORDING_MARKER = "기록 중"

MARKER_MAX_LENGTH = 20
CLOCK_TEXT_MAX_LENGTH = 30

_AM = "오전"
_PM = "오후"
_MERIDIEM_CLOCK_RE = re.compile(rf"^({_AM}|{_PM})\s*(\d{{1,2}}):(\d{{2}})$")

logger = logging.getLogger(__name__)


def _is_no_break_marker(text: str) -> bool:
    return text == NO_BREAK_MARKER or (
        BREAK_TOKEN in text and NONE_TOKEN in text and len(text) < MARKER_MAX_LENGTH
    )


def _is_recording_marker(text: str) -> bool:
    return RECORDING_MARKER in text and len(text) < MARKER_MAX_LENGTH


def find_marker(snapshot: TimeSnapshot) -> TextFragment | None:
    """Return the first "no break" marker, else the first "recording" marker."""
    for fragment in snapshot:
        if _is_no_break_marker(fragment.text):
            logger.debug("No-break marker found: <%s> %r", fragment.tag, fragment.text)
            return fragment

    for fragment in snapshot:
        if _is_recording_marker(fragment.text):
            logger.debug("Recording marker found: <%s> %r", fragment.tag, fragment.text)
            return fragment

    return None


def parse_meridiem_clock(text: str) -> ClockTime | None:
    """``"오후 1:30"`` -> 13:30. Returns None when ``text`` is not exactly that shape."""
    m = _MERIDIEM_CLOCK_RE.match(text)
    if not m:
        return None
    period, hour, minute = m.group(1), int(m.group(2)), int(m.group(3))
    if period == _PM and hour != 12:
        hour += 12
    elif period == _AM and hour == 12:
        hour = 0
    try:
        return ClockTime(hour, minute)
    except ValueError:
        # "오후 13:75" and the like are not clock labels.
        return None


def collect_clock_times(fragments: list[TextFragment] | TimeSnapshot) -> list[ClockTime]:
    found: list[ClockTime] = []
    for fragment in fragments:
        if len(fragment.text) > CLOCK_TEXT_MAX_LENGTH:
            continue
        clock = parse_meridiem_clock(fragment.text)
        if clock is not None:
            logger.debug("Clock pattern found: %s (from %r)", clock, fragment.text)
            found.append(clock)
    return found


def locate_start_time(snapshot: TimeSnapshot, *, scope: Scope = subtree) -> ClockTime | None:
    """Return the earliest clock time within the tracking marker's scope, or None."""
    marker = find_marker(snapshot)
    if marker is None:
        logger.debug("Neither no-break nor recording marker present")
        return None

    found = collect_clock_times(list(scope(marker)))
    if not found:
        logger.debug("No clock time within marker scope")
        return None

    start = min(found, key=lambda clock: clock.sort_key)
    logger.debug("Start time resolved to %s (candidates: %s)", start, ", ".join(map(str, found)))
    return start
