"""Catalog of the fixed working-hour slots a technician can enable."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TimeSlot:
    """A named day-part with fixed clock times.

    ``duration_hours`` is the advertised duration and is kept as its own
    fact; it is never computed from ``start`` and ``end``.
    """

    id: str
    label: str
    start: str
    end: str
    duration_hours: int
    enabled_by_default: bool = True

    def to_payload(self) -> dict[str, str]:
        return {"slot": self.id, "start": self.start, "end": self.end}


TIME_SLOTS: tuple[TimeSlot, ...] = (
    TimeSlot("morning", "Morning", "09:00", "12:00", 3),
    TimeSlot("afternoon", "Afternoon", "12:00", "17:00", 5),
    TimeSlot("evening", "Evening", "17:00", "21:00", 4, enabled_by_default=False),
)

SLOT_IDS: tuple[str, ...] = tuple(slot.id for slot in TIME_SLOTS)


def get_slot(slot_id: str) -> Optional[TimeSlot]:
    """Look up a catalog slot by id. Returns None if not found."""
    for slot in TIME_SLOTS:
        if slot.id == slot_id:
            return slot
    return None


def default_slot_map() -> dict[str, bool]:
    return {slot.id: slot.enabled_by_default for slot in TIME_SLOTS}
