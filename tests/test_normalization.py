"""Unit tests for title/date/time canonicalization.

Pure functions, no database.
"""

import pytest

from devevent.domain.errors import (
    InvalidDateFormatError,
    InvalidTimeFormatError,
    InvalidTimeValuesError,
    NormalizationError,
)
from devevent.domain.normalization import (
    generate_slug,
    normalize_date,
    normalize_event_fields,
    normalize_time,
    requires_event_check,
)

TITLES = [
    "Hello, World!!! 2024",
    "  Leading and trailing  ",
    "Multiple     spaces\tand\ttabs",
    "--Already-Hyphenated--Title--",
    "Café & Crème: Ünïcode Meetup",
    "React Summit - Amsterdam (2026)",
    "a - b - c",
    "!!!",
]


class TestGenerateSlug:
    def test_strips_punctuation_and_joins_words(self):
        assert generate_slug("Hello, World!!! 2024") == "hello-world-2024"

    def test_collapses_whitespace_and_hyphens(self):
        assert generate_slug("React Summit  -  Amsterdam") == "react-summit-amsterdam"

    def test_trims_leading_and_trailing_hyphens(self):
        assert generate_slug("--Already-Hyphenated--Title--") == "already-hyphenated-title"

    def test_drops_non_ascii_letters(self):
        assert generate_slug("Café Meetup") == "caf-meetup"

    def test_title_without_letters_gives_empty_slug(self):
        assert generate_slug("!!!") == ""

    @pytest.mark.parametrize("title", TITLES)
    def test_idempotent(self, title):
        once = generate_slug(title)
        assert generate_slug(once) == once


class TestNormalizeDate:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("March 5, 2024", "2024-03-05"),
            ("2024-03-05", "2024-03-05"),
            ("5 Mar 2024", "2024-03-05"),
            ("2024-03-05T23:30:00-05:00", "2024-03-05"),
            ("2024-03-05 08:00", "2024-03-05"),
        ],
    )
    def test_returns_iso_date(self, value, expected):
        assert normalize_date(value) == expected

    @pytest.mark.parametrize("value", ["not a date", "", "2024-13-45"])
    def test_rejects_unparseable(self, value):
        with pytest.raises(InvalidDateFormatError):
            normalize_date(value)

    def test_already_canonical_is_unchanged(self):
        assert normalize_date(normalize_date("July 4, 2026")) == "2026-07-04"

    @pytest.mark.parametrize(
        "value, expected",
        [("March 2024", "2024-03-01"), ("2024", "2024-01-01"), ("5", "2000-01-05")],
    )
    def test_missing_parts_use_fixed_default(self, value, expected):
        assert normalize_date(value) == expected

    @pytest.mark.parametrize("value", ["10:30", "9:30 PM"])
    def test_rejects_time_without_date(self, value):
        with pytest.raises(InvalidDateFormatError):
            normalize_date(value)

    def test_offset_keeps_written_calendar_date(self):
        # 23:30 at -05:00 is already the next day in UTC
        assert normalize_date("2024-03-05T23:30-05:00") == "2024-03-05"


class TestNormalizeTime:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2:30 PM", "14:30"),
            ("12:00 AM", "00:00"),
            ("12:15 PM", "12:15"),
            ("9:05", "09:05"),
            ("09:05", "09:05"),
            ("11:59pm", "23:59"),
            ("  7:45 am  ", "07:45"),
            ("23:00", "23:00"),
            ("0:00", "00:00"),
        ],
    )
    def test_converts_to_24_hour(self, value, expected):
        assert normalize_time(value) == expected

    @pytest.mark.parametrize("value", ["noon", "930", "9:5", "9:30 XM", "123:00", "9.30"])
    def test_rejects_bad_pattern(self, value):
        with pytest.raises(InvalidTimeFormatError) as exc_info:
            normalize_time(value)
        assert not isinstance(exc_info.value, InvalidTimeValuesError)

    def test_hour_out_of_range(self):
        with pytest.raises(InvalidTimeFormatError) as exc_info:
            normalize_time("25:00")
        assert isinstance(exc_info.value, InvalidTimeValuesError)

    def test_minute_out_of_range(self):
        with pytest.raises(InvalidTimeValuesError):
            normalize_time("10:60")

    def test_pm_suffix_on_24_hour_value_fails_range_check(self):
        # 13 + 12 = 25
        with pytest.raises(InvalidTimeValuesError):
            normalize_time("13:00 PM")

    def test_errors_are_normalization_errors(self):
        with pytest.raises(NormalizationError):
            normalize_time("later")


class TestEventHooks:
    BASE = {"title": "Hello World", "date": "March 5, 2024", "time": "2:30 PM", "mode": "online"}

    def test_new_record_derives_everything(self):
        result = normalize_event_fields(self.BASE)
        assert result["slug"] == "hello-world"
        assert result["date"] == "2024-03-05"
        assert result["time"] == "14:30"
        assert result["mode"] == "online"

    def test_does_not_mutate_input(self):
        values = dict(self.BASE)
        normalize_event_fields(values)
        assert values == self.BASE

    def test_title_change_regenerates_slug_only(self):
        stored = {**self.BASE, "slug": "old-slug", "date": "2024-03-05", "time": "raw"}
        result = normalize_event_fields({**stored, "title": "New Title"}, changed={"title"})
        assert result["slug"] == "new-title"
        assert result["time"] == "raw"

    def test_unrelated_change_leaves_slug_alone(self):
        stored = {**self.BASE, "slug": "custom", "date": "2024-03-05", "time": "14:30"}
        result = normalize_event_fields({**stored, "mode": "offline"}, changed={"mode"})
        assert result["slug"] == "custom"

    def test_date_and_time_changes_are_normalized(self):
        stored = {**self.BASE, "slug": "hello-world"}
        result = normalize_event_fields(
            {**stored, "date": "1 Jan 2027", "time": "12:00 AM"}, changed={"date", "time"}
        )
        assert result["date"] == "2027-01-01"
        assert result["time"] == "00:00"

    def test_invalid_time_aborts(self):
        with pytest.raises(InvalidTimeFormatError):
            normalize_event_fields({**self.BASE, "time": "soon"})


class TestBookingHook:
    def test_new_booking_checks_event(self):
        assert requires_event_check() is True

    def test_event_change_checks_event(self):
        assert requires_event_check({"event_id"}) is True

    def test_unrelated_change_skips_check(self):
        assert requires_event_check({"email"}) is False
