"""Tests for time label parsing and formatting."""

from datetime import date

import pytest

from app.core.timelabels import (
    clock_hour,
    day_of_week,
    format_label,
    parse_label,
    range_labels,
    sort_labels,
)
from app.errors import InvalidTimeFormat


class TestParseLabel:
    @pytest.mark.parametrize(
        "label, minutes",
        [
            ("12:00 AM", 0),
            ("12:30 AM", 30),
            ("7:00 AM", 420),
            ("11:59 AM", 719),
            ("12:00 PM", 720),
            ("1:15 PM", 795),
            ("7:00 PM", 1140),
            ("11:00 PM", 1380),
        ],
    )
    def test_parses_twelve_hour_labels(self, label, minutes):
        assert parse_label(label) == minutes

    @pytest.mark.parametrize(
        "label",
        ["", "7:00", "07:00 AM", "13:00 PM", "0:00 AM", "7:60 AM", "7:00 am", "7:00AM", "seven", None],
    )
    def test_rejects_malformed_labels(self, label):
        with pytest.raises(InvalidTimeFormat):
            parse_label(label)

    def test_invalid_time_format_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_label("25:00 PM")


class TestFormatLabel:
    def test_zero_pads_minutes(self):
        assert format_label(7 * 60 + 5) == "7:05 AM"

    def test_midnight_and_noon(self):
        assert format_label(0) == "12:00 AM"
        assert format_label(12 * 60) == "12:00 PM"

    @pytest.mark.parametrize("minutes", [-1, 24 * 60])
    def test_out_of_range(self, minutes):
        with pytest.raises(InvalidTimeFormat):
            format_label(minutes)

    def test_every_label_formats_back_to_itself(self):
        for minutes in range(0, 24 * 60, 7):
            label = format_label(minutes)
            assert format_label(parse_label(label)) == label


class TestRanges:
    def test_end_hour_is_excluded(self):
        assert range_labels(7, 10) == ["7:00 AM", "8:00 AM", "9:00 AM"]

    def test_empty_when_start_not_before_end(self):
        assert range_labels(12, 12) == []
        assert range_labels(15, 12) == []

    def test_clock_hour_truncates_minutes(self):
        assert clock_hour("07:45") == 7
        assert clock_hour("19:00") == 19

    @pytest.mark.parametrize("value", ["7:00", "24:00", "07:00 AM", ""])
    def test_clock_hour_rejects_bad_values(self, value):
        with pytest.raises(InvalidTimeFormat):
            clock_hour(value)

    def test_sort_labels_orders_chronologically_and_dedupes(self):
        assert sort_labels(["3:00 PM", "10:00 AM", "9:00 AM", "3:00 PM"]) == [
            "9:00 AM",
            "10:00 AM",
            "3:00 PM",
        ]

    def test_day_of_week_starts_on_sunday(self):
        assert day_of_week(date(2030, 1, 6)) == 0  # Sunday
        assert day_of_week(date(2030, 1, 2)) == 3  # Wednesday
        assert day_of_week(date(2030, 1, 5)) == 6  # Saturday
