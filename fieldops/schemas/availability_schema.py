"""Availability wire models and the normalization step for inbound payloads."""

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fieldops.scheduling.day_codes import normalize_time

logger = logging.getLogger(__name__)


class BreakEntry(BaseModel):
    """A one-off break on a given date. start < end is not checked here."""

    model_config = ConfigDict(frozen=True)

    date: str
    start_time: str
    end_time: str
    reason: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _canonical_time(cls, value: str) -> str:
        return normalize_time(value)


class VacationEntry(BaseModel):
    """A vacation range; end_date >= start_date is checked by the editor."""

    model_config = ConfigDict(frozen=True)

    start_date: str
    end_date: str
    reason: Optional[str] = None


class SlotPayload(BaseModel):
    """One ``{slot, start, end}`` entry of ``working_hours_slots``."""

    slot: str
    start: str
    end: str


def dedupe_areas(areas: list[str]) -> tuple[str, ...]:
    """Drop repeated labels (case-sensitive), keeping first insertion order."""
    seen: list[str] = []
    for area in areas:
        if area not in seen:
            seen.append(area)
    return tuple(seen)


def _parse_entries(raw: Any, model: type[BaseModel], label: str) -> tuple:
    if not isinstance(raw, list):
        return ()
    entries = []
    for item in raw:
        try:
            entries.append(model.model_validate(item))
        except ValidationError:
            logger.debug("Skipping malformed %s entry: %r", label, item)
    return tuple(entries)


def _slot_id(item: Any) -> Optional[str]:
    if isinstance(item, str):
        return item
    if isinstance(item, dict) and isinstance(item.get("slot"), str):
        return item["slot"]
    return None


class AvailabilitySnapshot(BaseModel):
    """Server-authoritative availability, normalized on receipt.

    Snapshots are immutable: a newer fetch replaces the whole object.
    """

    model_config = ConfigDict(frozen=True)

    is_online: bool = False
    auto_accept_jobs: bool = False
    working_days: frozenset[str] = Field(default_factory=frozenset)
    working_hours_slots: frozenset[str] = Field(default_factory=frozenset)
    service_areas: tuple[str, ...] = ()
    breaks: tuple[BreakEntry, ...] = ()
    vacations: tuple[VacationEntry, ...] = ()

    @classmethod
    def from_payload(cls, body: dict[str, Any]) -> "AvailabilitySnapshot":
        """Collapse legacy and loosely-typed fields into the canonical shape."""
        areas = [a for a in body.get("service_areas") or [] if isinstance(a, str)]
        if not areas and isinstance(body.get("service_area"), str) and body["service_area"]:
            areas = [body["service_area"]]

        slots = {_slot_id(item) for item in body.get("working_hours_slots") or []}
        slots.discard(None)

        return cls(
            is_online=bool(body.get("is_online", False)),
            auto_accept_jobs=bool(body.get("auto_accept_jobs", False)),
            working_days=frozenset(
                d for d in body.get("working_days") or [] if isinstance(d, str)
            ),
            working_hours_slots=frozenset(slots),
            service_areas=dedupe_areas(areas),
            breaks=_parse_entries(body.get("breaks"), BreakEntry, "break"),
            vacations=_parse_entries(body.get("vacations"), VacationEntry, "vacation"),
        )


class SaveResult(BaseModel):
    """Outcome of an availability or service-area update."""

    success: bool
    message: str = ""
