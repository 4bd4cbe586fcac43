"""Tests for day code translation and time normalization."""

import pytest

from fieldops.scheduling.day_codes import (
    WEEK_DAYS,
    code_to_day,
    codes_to_days,
    day_to_code,
    days_to_codes,
    normalize_time,
)


class TestDayCodes:
    @pytest.mark.parametrize("day", WEEK_DAYS)
    def test_day_round_trip(self, day):
        assert code_to_day(day_to_code(day)) == day

    @pytest.mark.parametrize("code", ["mon", "tue", "wed", "thu", "fri", "sat", "sun"])
    def test_code_round_trip(self, code):
        assert day_to_code(code_to_day(code)) == code

    def test_monday_maps_to_mon(self):
        assert day_to_code("monday") == "mon"
        assert code_to_day("sun") == "sunday"

    def test_unknown_day_passes_through(self):
        assert day_to_code("funday") == "funday"

    def test_unknown_code_passes_through(self):
        assert code_to_day("MON") == "MON"

    def test_days_to_codes_in_week_order(self):
        assert days_to_codes(["friday", "monday", "wednesday"]) == ["mon", "wed", "fri"]

    def test_codes_to_days_unknown_last(self):
        assert codes_to_days(["xyz", "sun", "mon"]) == ["monday", "sunday", "xyz"]


class TestNormalizeTime:
    def test_strips_seconds(self):
        assert normalize_time("09:30:00") == "09:30"

    def test_canonical_unchanged(self):
        assert normalize_time("17:00") == "17:00"

    def test_single_digit_hour_not_padded(self):
        assert normalize_time("9:00") == "9:00"

    def test_short_result_returns_original_with_seconds(self):
        assert normalize_time("9:00:00") == "9:00:00"

    def test_garbage_returned_as_is(self):
        assert normalize_time("noon") == "noon"

    @pytest.mark.parametrize(
        "raw", ["09:30:00", "9:00:00", "9:00", "", "12", "ab:cd:ef", "23:59:59.999", "noon"]
    )
    def test_idempotent(self, raw):
        once = normalize_time(raw)
        assert normalize_time(once) == once
