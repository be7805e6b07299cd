from __future__ import annotations

from flexhours.domain.extraction import (
    WorkedTimeTexts,
    extract_worked_time,
    find_today_text,
    find_week_text,
)
from flexhours.domain.snapshot import TimeSnapshot
from flexhours.domain.timetext import parse_to_minutes

from helpers import el, make_page


def test_extracts_both_texts_from_page():
    texts = extract_worked_time(make_page())
    assert texts == WorkedTimeTexts(today="1시간 5분", week="23:20")
    assert parse_to_minutes(texts.today) == 65
    assert parse_to_minutes(texts.week) == 1400


class TestTodayText:
    def test_minutes_only_status_is_normalized(self):
        assert find_today_text(make_page(today="근무중 56분")) == "0시간 56분"

    def test_status_without_duration_falls_back_to_time_element(self):
        snapshot = TimeSnapshot.of(el("button", "근무중"), el("time", "2시간 10분"))
        assert find_today_text(snapshot) == "2시간 10분"

    def test_first_time_element_wins(self):
        snapshot = TimeSnapshot.of(el("time", "3시간 0분"), el("time", "4시간 0분"))
        assert find_today_text(snapshot) == "3시간 0분"

    def test_buttons_without_marker_are_ignored(self):
        snapshot = TimeSnapshot.of(el("button", "휴식 1시간 5분"))
        assert find_today_text(snapshot) is None

    def test_not_working_yet(self):
        assert find_today_text(make_page(today=None)) is None


class TestWeekText:
    def test_colon_inside_longer_button(self):
        snapshot = TimeSnapshot.of(el("button", "누적 ", el("span", "12:30")))
        assert find_week_text(snapshot) == "12:30"

    def test_buttons_with_status_or_hour_word_are_skipped(self):
        snapshot = TimeSnapshot.of(
            el("button", "근무중 09:00"),
            el("button", "8시간 (12:30)"),
            el("button", "31:10"),
        )
        assert find_week_text(snapshot) == "31:10"

    def test_falls_back_to_bare_fragment(self):
        snapshot = TimeSnapshot.of(el("div", "", el("p", "회의 10:00 - 11:00"), el("span", "40:00")))
        assert find_week_text(snapshot) == "40:00"

    def test_nothing_found(self):
        assert find_week_text(make_page(week=None)) is None


def test_empty_snapshot_yields_empty_texts():
    texts = extract_worked_time(TimeSnapshot())
    assert texts.empty
    assert texts == WorkedTimeTexts(today=None, week=None)


def test_one_text_is_not_empty():
    assert not extract_worked_time(make_page(today=None)).empty
