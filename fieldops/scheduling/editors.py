"""
List editors behind the break, vacation and service-area screens.

Each editor is seeded with the list the availability screen passed in,
supports validated append and remove-by-index, and hands its full list back
as a navigation parameter. Rejected input never touches the list.

Usage:
    editor = VacationEditor()
    ok, msg = editor.add("2024-06-10", "2024-06-14", "Family trip")
    nav_params = editor.to_nav_params()  # {"vacations": [...]}
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Optional

from fieldops.schemas.availability_schema import BreakEntry, VacationEntry

logger = logging.getLogger(__name__)

FALLBACK_AREA_LABEL = "Selected location"


def _clean_reason(reason: Optional[str]) -> Optional[str]:
    if reason is None:
        return None
    return reason.strip() or None


def _parse_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


class BreakEditor:
    """Collects one-off breaks. Entries are appended or removed, never edited."""

    def __init__(self, initial: Iterable[BreakEntry] = ()) -> None:
        self.breaks: list[BreakEntry] = list(initial)

    def add(
        self, date_str: str, start_time: str, end_time: str, reason: Optional[str] = None
    ) -> tuple[bool, str]:
        if not date_str or not date_str.strip():
            return False, "Please select a date."
        entry = BreakEntry(
            date=date_str.strip(),
            start_time=start_time,
            end_time=end_time,
            reason=_clean_reason(reason),
        )
        self.breaks.append(entry)
        logger.debug("Break added on %s %s-%s", entry.date, entry.start_time, entry.end_time)
        return True, f"Break added on {entry.date} from {entry.start_time} to {entry.end_time}."

    def remove(self, index: int) -> None:
        del self.breaks[index]

    def to_nav_params(self) -> dict[str, Any]:
        return {"breaks": list(self.breaks)}


class VacationEditor:
    """Collects vacation ranges; end date must be on or after start date."""

    def __init__(self, initial: Iterable[VacationEntry] = ()) -> None:
        self.vacations: list[VacationEntry] = list(initial)

    def add(
        self, start_date: str, end_date: str, reason: Optional[str] = None
    ) -> tuple[bool, str]:
        if not start_date or not start_date.strip():
            return False, "Please select start date."
        if not end_date or not end_date.strip():
            return False, "Please select end date."

        start, end = _parse_date(start_date), _parse_date(end_date)
        if start is None or end is None:
            return False, "Dates must be in YYYY-MM-DD format."
        if end < start:
            return False, "End date must be on or after start date."

        self.vacations.append(VacationEntry(
            start_date=start.isoformat(),
            end_date=end.isoformat(),
            reason=_clean_reason(reason),
        ))
        return True, f"Vacation added from {start.isoformat()} to {end.isoformat()}."

    def remove(self, index: int) -> None:
        del self.vacations[index]

    def to_nav_params(self) -> dict[str, Any]:
        return {"vacations": list(self.vacations)}


@dataclass(frozen=True)
class ResolvedAddress:
    """Address record returned by the map picker's geocoder."""

    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    street_address: Optional[str] = None


def area_label(address: ResolvedAddress) -> str:
    """Pick the coarsest useful label: city, then state, then country."""
    for value in (address.city, address.state, address.country, address.street_address):
        if value and value.strip():
            return value.strip()
    return FALLBACK_AREA_LABEL


class ServiceAreaEditor:
    """Ordered, case-sensitively deduplicated list of service area labels."""

    def __init__(self, initial: Iterable[str] = ()) -> None:
        self.areas: list[str] = []
        for label in initial:
            self.add(label)

    def add(self, label: str) -> tuple[bool, str]:
        label = label.strip()
        if not label:
            return False, "Please choose a location."
        if label in self.areas:
            return False, f"{label} is already in your service areas."
        self.areas.append(label)
        return True, f"Added {label}."

    def add_from_address(self, address: ResolvedAddress) -> tuple[bool, str]:
        return self.add(area_label(address))

    def remove(self, index: int) -> None:
        del self.areas[index]

    def to_nav_params(self) -> dict[str, Any]:
        return {"service_areas": list(self.areas)}
