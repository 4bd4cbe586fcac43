"""Tests for the break, vacation and service-area editors."""

import pytest

from fieldops.scheduling.editors import (
    BreakEditor,
    ResolvedAddress,
    ServiceAreaEditor,
    VacationEditor,
    area_label,
)
from fieldops.schemas.availability_schema import BreakEntry, VacationEntry


class TestBreakEditor:
    def test_add_normalizes_times(self):
        editor = BreakEditor()
        ok, _ = editor.add("2025-03-19", "13:00:00", "14:00:00")
        assert ok
        assert editor.breaks == [BreakEntry(date="2025-03-19", start_time="13:00", end_time="14:00")]

    def test_missing_date_rejected(self):
        editor = BreakEditor()
        ok, msg = editor.add("  ", "12:00", "13:00")
        assert not ok
        assert msg == "Please select a date."
        assert editor.breaks == []

    def test_blank_reason_dropped(self):
        editor = BreakEditor()
        editor.add("2025-03-19", "12:00", "13:00", "   ")
        assert editor.breaks[0].reason is None

    def test_end_before_start_not_checked(self):
        editor = BreakEditor()
        ok, _ = editor.add("2025-03-19", "15:00", "14:00")
        assert ok

    def test_seeded_and_remove_by_index(self):
        seed = [
            BreakEntry(date="2025-03-18", start_time="12:00", end_time="13:00"),
            BreakEntry(date="2025-03-19", start_time="12:00", end_time="13:00"),
        ]
        editor = BreakEditor(seed)
        editor.remove(0)
        assert [b.date for b in editor.breaks] == ["2025-03-19"]
        assert len(seed) == 2

    def test_nav_params(self):
        editor = BreakEditor()
        editor.add("2025-03-19", "12:00", "13:00", "Lunch")
        params = editor.to_nav_params()
        assert list(params) == ["breaks"]
        assert params["breaks"][0].reason == "Lunch"


class TestVacationEditor:
    def test_end_before_start_rejected(self):
        editor = VacationEditor()
        ok, msg = editor.add("2024-06-10", "2024-06-05")
        assert not ok
        assert msg == "End date must be on or after start date."
        assert editor.vacations == []

    def test_same_day_allowed(self):
        editor = VacationEditor()
        ok, _ = editor.add("2024-06-10", "2024-06-10")
        assert ok
        assert editor.vacations == [VacationEntry(start_date="2024-06-10", end_date="2024-06-10")]

    def test_missing_start(self):
        ok, msg = VacationEditor().add("", "2024-06-10")
        assert not ok
        assert msg == "Please select start date."

    def test_missing_end(self):
        ok, msg = VacationEditor().add("2024-06-10", "")
        assert not ok
        assert msg == "Please select end date."

    def test_unparseable_date(self):
        editor = VacationEditor()
        ok, _ = editor.add("10/06/2024", "2024-06-12")
        assert not ok
        assert editor.vacations == []

    def test_remove_out_of_range(self):
        with pytest.raises(IndexError):
            VacationEditor().remove(0)


class TestServiceAreaEditor:
    def test_dedupes_case_sensitively(self):
        editor = ServiceAreaEditor(["Dubai"])
        ok, _ = editor.add("Dubai")
        assert not ok
        ok, _ = editor.add("dubai")
        assert ok
        assert editor.areas == ["Dubai", "dubai"]

    def test_seed_dedupes_keeping_first_order(self):
        editor = ServiceAreaEditor(["Sharjah", "Dubai", "Sharjah"])
        assert editor.areas == ["Sharjah", "Dubai"]

    def test_add_from_address_prefers_city(self):
        editor = ServiceAreaEditor()
        editor.add_from_address(ResolvedAddress(city=" Abu Dhabi ", state="AD", country="UAE"))
        assert editor.areas == ["Abu Dhabi"]

    def test_nav_params(self):
        editor = ServiceAreaEditor(["Dubai", "Ajman"])
        editor.remove(0)
        assert editor.to_nav_params() == {"service_areas": ["Ajman"]}


class TestAreaLabel:
    def test_falls_back_to_state(self):
        assert area_label(ResolvedAddress(city="  ", state="Dubai")) == "Dubai"

    def test_falls_back_to_country(self):
        assert area_label(ResolvedAddress(country="UAE")) == "UAE"

    def test_falls_back_to_street(self):
        assert area_label(ResolvedAddress(street_address="12 Beach Rd")) == "12 Beach Rd"

    def test_nothing_known(self):
        assert area_label(ResolvedAddress()) == "Selected location"
