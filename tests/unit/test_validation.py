from __future__ import annotations

import pytest

from flexhours.domain.timetext import ClockTime
from flexhours.domain.validation import (
    NO_DATA_ERROR,
    START_TIME_FORMAT_ERROR,
    ValidationResult,
    validate,
)


def test_all_zero_without_start_time_is_invalid():
    result = validate(0, 0, None)
    assert result == ValidationResult(valid=False, errors=(NO_DATA_ERROR,), warnings=())


def test_week_minutes_with_start_time_is_valid():
    result = validate(0, 480, "09:00")
    assert result.valid
    assert result.errors == ()


def test_start_time_alone_allows_zero_minutes():
    assert validate(0, 0, ClockTime(9, 0)).valid


def test_minutes_without_start_time_are_valid():
    assert validate(65, 1400, None).valid


@pytest.mark.parametrize("start", ["09:00", "익일 01:30", ClockTime(1, 30, next_day=True)])
def test_accepted_start_time_shapes(start):
    assert validate(60, 0, start).valid


@pytest.mark.parametrize("start", ["9:00", "09:00 AM", "익일01:30", "오전 9:00"])
def test_malformed_start_time_is_invalid(start):
    result = validate(60, 0, start)
    assert not result.valid
    assert result.errors == (START_TIME_FORMAT_ERROR,)


def test_present_start_time_suppresses_no_data_error():
    result = validate(0, 0, None)
    assert list(result.errors) == [NO_DATA_ERROR]
    result = validate(0, 0, "bad")
    assert list(result.errors) == [START_TIME_FORMAT_ERROR]


def test_implausible_total_is_only_a_warning():
    result = validate(0, 81 * 60, "09:00")
    assert result.valid
    assert len(result.warnings) == 1
    assert "81시간" in result.warnings[0]


def test_threshold_is_exclusive():
    assert validate(0, 80 * 60, "09:00").warnings == ()


def test_threshold_follows_weekly_target():
    assert validate(0, 61 * 60, "09:00", weekly_target_hours=30).warnings
    assert not validate(0, 61 * 60, "09:00", weekly_target_hours=35).warnings


def test_warning_rounds_half_hours_up():
    result = validate(30, 80 * 60, "09:00")
    assert result.warnings == ("주간 근무시간이 81시간으로 매우 높습니다.",)
