"""Tests for focusplan/peak.py."""

from focusplan.peak import PEAK_RANGES, canonical_window_name, in_peak, resolve_peak_range


def test_peak_ranges():
    assert resolve_peak_range("Morning") == (420, 720)
    assert resolve_peak_range("Afternoon") == (720, 1020)
    assert resolve_peak_range("Evening") == (1020, 1260)
    assert resolve_peak_range("Late Night") == (1260, 1380)


def test_canonical_window_name():
    assert canonical_window_name("late night") == "Late Night"
    assert canonical_window_name("  EVENING ") == "Evening"
    assert canonical_window_name("Dawn") is None


def test_unknown_window_falls_back_to_morning(caplog):
    assert resolve_peak_range("Dawn") == PEAK_RANGES["Morning"]
    assert "Unknown peak window" in caplog.text


def test_in_peak_half_open():
    assert in_peak(420, (420, 720))
    assert in_peak(719, (420, 720))
    assert not in_peak(720, (420, 720))
    assert not in_peak(419, (420, 720))
