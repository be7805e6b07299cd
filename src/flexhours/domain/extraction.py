"""
Worked-time text extraction.

Finds the two duration texts the host page renders:

- today: the "근무중" status button (``"근무중 1시간 5분"`` or ``"근무중 56분"``),
  falling back to the first ``<time>`` element;
- week: the cumulative ``"23:20"`` button, falling back to any short fragment
  that is exactly ``H:MM``.

Texts are returned raw; flexhours.domain.timetext turns them into minutes.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .snapshot import TimeSnapshot

WORKING_MARKER = "근무중"
HOUR_WORD = "시간"
WEEK_TEXT_MAX_LENGTH = 30

_WORKING_DURATION_RE = re.compile(r"(\d+)시간\s*(\d+)분|(\d+)분")
_COLON_RE = re.compile(r"(\d+):(\d+)")
_BARE_COLON_RE = re.compile(r"^\d+:\d+$")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkedTimeTexts:
    today: str | None
    week: str | None

    @property
    def empty(self) -> bool:
        return not self.today and not self.week


def find_today_text(snapshot: TimeSnapshot) -> str | None:
    for button in snapshot.by_tag("button"):
        if WORKING_MARKER not in button.text:
            continue
        m = _WORKING_DURATION_RE.search(button.text)
        if not m:
            continue
        if m.group(1) and m.group(2):
            text = f"{m.group(1)}시간 {m.group(2)}분"
        else:
            text = f"0시간 {m.group(3)}분"
        logger.debug("Today's time found (status button): %s from %r", text, button.text)
        return text

    element = next(snapshot.by_tag("time"), None)
    if element is not None and element.text:
        logger.debug("Today's time found (<time> element): %s", element.text)
        return element.text
    return None


def find_week_text(snapshot: TimeSnapshot) -> str | None:
    for button in snapshot.by_tag("button"):
        m = _COLON_RE.search(button.text)
        if m and WORKING_MARKER not in button.text and HOUR_WORD not in button.text:
            logger.debug("Week total found (button): %s from %r", m.group(0), button.text)
            return m.group(0)

    for fragment in snapshot:
        text = fragment.text
        if len(text) < WEEK_TEXT_MAX_LENGTH and _BARE_COLON_RE.match(text):
            logger.debug("Week total found (any element): %s", text)
            return text
    return None


def extract_worked_time(snapshot: TimeSnapshot) -> WorkedTimeTexts:
    return WorkedTimeTexts(today=find_today_text(snapshot), week=find_week_text(snapshot))
