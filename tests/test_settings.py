"""Tests for focusplan/settings.py — loading, validation and partial updates."""

import pytest
import yaml

from focusplan.errors import InputError
from focusplan.models import ClockTime, Settings
from focusplan.settings import apply_changes, load_settings, save_settings, update_settings, validate_settings
from focusplan.workspace import get_user_timezone


def test_load_settings(workspace):
    settings = load_settings(workspace)
    assert settings.start_time == ClockTime(8, 0, "AM")
    assert settings.end_time == ClockTime(6, 0, "PM")
    assert settings.focus_goal_minutes == 420
    assert settings.peak_window == "Morning"


def test_load_settings_missing_file(tmp_path):
    assert load_settings(tmp_path) == Settings()


def test_settings_round_trip_keys():
    d = Settings(focus_goal_hours=6.5).to_dict()
    assert d["focusGoal"] == 6.5
    assert d["startTime"] == {"hour": "08", "minute": "00", "period": "AM"}
    assert Settings.from_dict(d).focus_goal_minutes == 390


def test_update_settings_flat_keys(workspace):
    settings = update_settings(
        {"startHour": "9", "startMinute": "30", "startPeriod": "AM", "endHour": 5, "endPeriod": "PM", "focusGoal": 5},
        root=workspace,
    )
    assert settings.start_time == ClockTime(9, 30, "AM")
    assert settings.end_time == ClockTime(5, 0, "PM")
    assert settings.focus_goal_hours == 5

    stored = yaml.safe_load((workspace / "settings.yaml").read_text(encoding="utf-8"))
    assert stored["startTime"] == {"hour": "09", "minute": "30", "period": "AM"}
    assert stored["focusGoal"] == 5


def test_update_settings_nested_clock(workspace):
    settings = update_settings({"endTime": {"hour": "07", "minute": "15", "period": "PM"}}, root=workspace)
    assert settings.end_time == ClockTime(7, 15, "PM")
    assert settings.start_time == ClockTime(8, 0, "AM")


def test_update_settings_canonicalizes_peak_window(workspace):
    settings = update_settings({"peakWindow": "late night"}, root=workspace)
    assert settings.peak_window == "Late Night"
    assert load_settings(workspace).peak_window == "Late Night"


@pytest.mark.parametrize("changes", [
    {"focusGoal": 25},
    {"focusGoal": -1},
    {"shortBreak": 0},
    {"longBreak": 500},
    {"peakWindow": "Dawn"},
    {"timezone": "Mars/Olympus_Mons"},
    {"startHour": 13},
    {"endMinute": "sixty"},
    {"shortBreak": "five"},
])
def test_update_settings_rejects_invalid(workspace, changes):
    before = (workspace / "settings.yaml").read_text(encoding="utf-8")
    with pytest.raises(InputError):
        update_settings(changes, root=workspace)
    assert (workspace / "settings.yaml").read_text(encoding="utf-8") == before


def test_apply_changes_ignores_unknown_keys():
    settings = Settings()
    assert apply_changes(settings, {"colour": "blue"}) == settings


def test_validate_settings_returns_normalized():
    assert validate_settings(Settings(peak_window="evening")).peak_window == "Evening"


def test_save_settings_validates(workspace):
    with pytest.raises(InputError):
        save_settings(Settings(short_break=0), workspace)


def test_user_timezone(workspace):
    update_settings({"timezone": "Europe/Berlin"}, root=workspace)
    assert get_user_timezone(workspace).key == "Europe/Berlin"


def test_user_timezone_unknown_falls_back(workspace, caplog):
    (workspace / "settings.yaml").write_text("timezone: Nowhere/Special\n", encoding="utf-8")
    assert get_user_timezone(workspace).key == "UTC"
    assert "Unknown timezone" in caplog.text


def test_load_settings_rejects_hand_edited_numbers(workspace):
    (workspace / "settings.yaml").write_text("focusGoal: lots\n", encoding="utf-8")
    with pytest.raises(InputError, match="Invalid settings"):
        load_settings(workspace)


def test_settings_from_dict_bad_break():
    with pytest.raises(InputError):
        Settings.from_dict({"shortBreak": [5]})
