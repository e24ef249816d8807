"""Tests for focusplan/clock.py and ClockTime."""

import pytest

from focusplan.clock import (
    format_12h,
    format_duration,
    format_hhmm,
    from_minute_of_day,
    parse_hhmm,
    to_minute_of_day,
)
from focusplan.errors import InputError
from focusplan.models import ClockTime


def test_to_minute_of_day_midnight_and_noon():
    assert to_minute_of_day(ClockTime(12, 0, "AM")) == 0
    assert to_minute_of_day(ClockTime(12, 0, "PM")) == 720
    assert to_minute_of_day(ClockTime(11, 59, "PM")) == 1439
    assert to_minute_of_day(ClockTime(8, 30, "AM")) == 510


def test_from_minute_of_day():
    assert from_minute_of_day(0) == ClockTime(12, 0, "AM")
    assert from_minute_of_day(720) == ClockTime(12, 0, "PM")
    assert from_minute_of_day(1085) == ClockTime(6, 5, "PM")


def test_minute_of_day_round_trip_every_minute():
    for total in range(0, 1440):
        assert to_minute_of_day(from_minute_of_day(total)) == total


def test_from_minute_of_day_out_of_range():
    with pytest.raises(InputError):
        from_minute_of_day(1440)
    with pytest.raises(InputError):
        from_minute_of_day(-1)


def test_clock_time_rejects_bad_values():
    with pytest.raises(InputError):
        ClockTime(0, 0, "AM")
    with pytest.raises(InputError):
        ClockTime(13, 0, "PM")
    with pytest.raises(InputError):
        ClockTime(9, 60, "AM")
    with pytest.raises(InputError):
        ClockTime(9, 0, "XM")


def test_clock_time_from_dict_strings():
    t = ClockTime.from_dict({"hour": "08", "minute": "05", "period": "pm"})
    assert t == ClockTime(8, 5, "PM")
    assert t.to_dict() == {"hour": "08", "minute": "05", "period": "PM"}


def test_clock_time_from_dict_garbage():
    with pytest.raises(InputError):
        ClockTime.from_dict({"hour": "eight", "minute": "00", "period": "AM"})


def test_parse_hhmm():
    assert parse_hhmm("00:00") == 0
    assert parse_hhmm("9:05") == 545
    assert parse_hhmm("23:59") == 1439


@pytest.mark.parametrize("value", ["24:00", "12:60", "noon", "1230", ""])
def test_parse_hhmm_invalid(value):
    with pytest.raises(InputError):
        parse_hhmm(value)


def test_format_hhmm_and_12h():
    assert format_hhmm(785) == "13:05"
    assert format_12h(785) == "01:05 pm"
    assert format_12h(0) == "12:00 am"
    assert format_12h(720) == "12:00 pm"
    assert format_12h(1440) == "12:00 am"


def test_format_duration():
    assert format_duration(90) == "1h 30m"
    assert format_duration(120) == "2h"
    assert format_duration(45) == "45m"
    assert format_duration(0) == "0m"
