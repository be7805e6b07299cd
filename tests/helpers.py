"""Snapshot builders shaped like the tracking page."""

from __future__ import annotations

from flexhours.domain.snapshot import TextFragment, TimeSnapshot


def el(tag: str, text: str = "", *children: TextFragment, classes: tuple[str, ...] = ()) -> TextFragment:
    return TextFragment.element(tag, text, *children, classes=classes)


def make_page(
    today: str | None = "근무중 1시간 5분",
    week: str | None = "23:20",
    times: tuple[str, ...] = ("오전 9:05",),
    marker: str | None = "기록 중",
) -> TimeSnapshot:
    """A snapshot laid out like the tracking page.

    The header holds the today/week buttons; a separate section holds the
    tracking widget whose marker element contains the clock labels.
    """
    header_buttons = []
    if today is not None:
        header_buttons.append(el("button", today, classes=("status-time",)))
    if week is not None:
        header_buttons.append(el("button", week, classes=("week-total",)))
    header = el("header", "", *header_buttons)

    widget_children = []
    if marker is not None:
        widget_children.append(el("div", marker, *(el("span", t) for t in times), classes=("status",)))
    section = el(
        "section",
        "",
        el("h2", "오늘의 근무 기록 현황과 일정을 확인하세요"),
        *widget_children,
    )
    return TimeSnapshot.of(header, section)
