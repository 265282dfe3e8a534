"""Tests for HH:MM arithmetic."""

from shiftboard.timeutils import (
    duration_minutes,
    format_minutes,
    from_minutes,
    is_valid_hhmm,
    overlaps,
    span,
    to_minutes,
)


def test_to_minutes():
    assert to_minutes("00:00") == 0
    assert to_minutes("09:30") == 570
    assert to_minutes("23:59") == 1439
    assert to_minutes("") == 0
    assert to_minutes(None) == 0


def test_from_minutes_wraps_past_midnight():
    assert from_minutes(570) == "09:30"
    assert from_minutes(0) == "00:00"
    assert from_minutes(1440 + 480) == "08:00"


def test_overlaps_is_half_open():
    assert overlaps("09:00", "17:00", "10:00", "11:00")
    assert not overlaps("09:00", "10:00", "10:00", "11:00")
    assert not overlaps("10:00", "11:00", "09:00", "10:00")


def test_overlaps_ignores_overnight():
    # Plain same-day comparison: 20:00-08:00 ends "before" it starts
    assert not overlaps("20:00", "08:00", "21:00", "22:00")


def test_duration_minutes():
    assert duration_minutes("09:00", "17:00") == 480
    assert duration_minutes("22:00", "06:00") == 480
    assert duration_minutes("20:00", "08:00") == 720


def test_duration_equal_times_is_full_day():
    assert duration_minutes("08:00", "08:00") == 1440


def test_span_corrects_overnight():
    assert span("09:00", "17:00") == (540, 1020)
    assert span("22:00", "06:00") == (1320, 1800)


def test_is_valid_hhmm():
    assert is_valid_hhmm("07:05")
    assert is_valid_hhmm("23:59")
    assert not is_valid_hhmm("7:05")
    assert not is_valid_hhmm("24:00")
    assert not is_valid_hhmm("12:60")
    assert not is_valid_hhmm("")
    assert not is_valid_hhmm(None)


def test_format_minutes():
    assert format_minutes(1200) == "20h 00m"
    assert format_minutes(65) == "1h 05m"
