from __future__ import annotations

import pytest

from flexhours.domain.timetext import (
    ClockTime,
    add_minutes,
    format_clock,
    format_worded_duration,
    parse_clock,
    parse_to_minutes,
)


class TestParseToMinutes:
    def test_hour_and_minute_words(self):
        assert parse_to_minutes("9시간 47분") == 587

    def test_hour_and_minute_words_without_space(self):
        assert parse_to_minutes("2시간5분") == 125

    def test_colon_form(self):
        assert parse_to_minutes("23:20") == 1400

    def test_hours_only(self):
        assert parse_to_minutes("3시간") == 180

    def test_hour_minute_words_take_precedence_over_colon(self):
        """First pattern in order wins, wherever it sits in the text."""
        assert parse_to_minutes("10:00 기준 2시간 5분") == 125

    def test_colon_takes_precedence_over_hours_only(self):
        assert parse_to_minutes("8시간 (누적 12:30)") == 750

    @pytest.mark.parametrize("text", [None, "", "근무중", "abc", "5분", "시간 분"])
    def test_unmatched_text_is_zero(self, text):
        assert parse_to_minutes(text) == 0

    @pytest.mark.parametrize("minutes", [0, 1, 59, 60, 61, 545, 2400, 10_000])
    def test_round_trips_with_worded_format(self, minutes):
        assert parse_to_minutes(format_worded_duration(minutes)) == minutes


class TestFormatting:
    def test_worded_duration_pads_minutes(self):
        assert format_worded_duration(545) == "9시간 05분"
        assert format_worded_duration(0) == "0시간 00분"
        assert format_worded_duration(6000) == "100시간 00분"

    def test_clock_pads_both_parts(self):
        assert format_clock(545) == "09:05"
        assert format_clock(0) == "00:00"
        assert format_clock(23 * 60 + 59) == "23:59"


class TestClockTime:
    def test_str_plain_and_next_day(self):
        assert str(ClockTime(9, 5)) == "09:05"
        assert str(ClockTime(0, 10, next_day=True)) == "익일 00:10"

    @pytest.mark.parametrize("hour,minute", [(24, 0), (-1, 0), (9, 60), (9, -1)])
    def test_out_of_range_rejected(self, hour, minute):
        with pytest.raises(ValueError):
            ClockTime(hour, minute)

    def test_sort_key_is_chronological(self):
        times = [ClockTime(9, 10), ClockTime(0, 5, next_day=True), ClockTime(9, 5)]
        assert sorted(times, key=lambda c: c.sort_key) == [
            ClockTime(9, 5),
            ClockTime(9, 10),
            ClockTime(0, 5, next_day=True),
        ]

    def test_parse_clock(self):
        assert parse_clock("09:00") == ClockTime(9, 0)
        assert parse_clock("익일 01:30") == ClockTime(1, 30, next_day=True)

    @pytest.mark.parametrize("text", ["", "9시", "09:00 AM", "25:00", "09:75", "내일 01:00"])
    def test_parse_clock_rejects_malformed(self, text):
        with pytest.raises(ValueError):
            parse_clock(text)


class TestAddMinutes:
    def test_past_midnight_is_next_day(self):
        result = add_minutes("23:50", 20)
        assert result == ClockTime(0, 10, next_day=True)
        assert str(result) == "익일 00:10"

    def test_same_day(self):
        result = add_minutes("09:00", 540)
        assert result == ClockTime(18, 0)
        assert str(result) == "18:00"

    def test_exactly_midnight_is_next_day(self):
        assert add_minutes("23:00", 60) == ClockTime(0, 0, next_day=True)

    def test_accepts_clock_time(self):
        assert add_minutes(ClockTime(8, 30), 45) == ClockTime(9, 15)

    def test_next_day_input_stays_next_day(self):
        assert add_minutes("익일 01:00", 30) == ClockTime(1, 30, next_day=True)

    def test_negative_delta_wraps_without_tag(self):
        assert add_minutes("00:30", -60) == ClockTime(23, 30)
