"""
Availability reconciliation for the technician schedule screen.

An AvailabilitySession lives from screen mount to unmount. Each focus event
rebuilds the draft in precedence order, lowest first:

1. Seed from the freshly fetched server snapshot.
2. Re-apply local values the user changed this session (toggles, and list
   edits that came back from the editor screens). Unsaved intent beats the
   server until it is saved.
3. Apply navigation parameters from this focus event. ``None`` means "no
   edit pending", not "clear the list". Each parameter is consumed once.

Saving turns the draft into one outbound payload; on success the session
re-fetches instead of trusting its own draft.

Usage:
    session = AvailabilitySession.open(api)
    await session.on_focus({"breaks": editor.breaks})
    session.toggle_day("sunday")
    result = await session.save()
    session.close()
"""

import asyncio
import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from fieldops.config import settings
from fieldops.logging_context import get_session_logger, set_session_id
from fieldops.scheduling.day_codes import WEEK_DAYS, code_to_day, days_to_codes
from fieldops.scheduling.time_slots import SLOT_IDS, TIME_SLOTS, default_slot_map
from fieldops.scheduling.weekly_stats import WeeklyStats, derive_weekly_stats
from fieldops.schemas.availability_schema import (
    AvailabilitySnapshot,
    BreakEntry,
    SaveResult,
    VacationEntry,
    dedupe_areas,
)
from fieldops.tools.technician_api import TechnicianApi, TechnicianApiError

logger = get_session_logger(__name__)

SAVE_OK_MESSAGE = "Your availability schedule has been saved!"
SAVE_FAILED_MESSAGE = "Failed to save availability."
RETRY_MESSAGE = "Could not reach the server. Please try again."

# Fields whose local value, once touched, outranks the snapshot.
TOGGLE_FIELDS = ("is_online", "auto_accept_jobs", "selected_days", "slot_enabled")
LIST_FIELDS = ("breaks", "vacations", "service_areas")


def _ordered_days(days) -> list[str]:
    known = [d for d in WEEK_DAYS if d in days]
    return known + sorted(d for d in days if d not in WEEK_DAYS)


@dataclass
class DraftAvailability:
    """Screen-local working copy of the availability record."""

    is_online: bool = True
    auto_accept_jobs: bool = False
    selected_days: list[str] = field(
        default_factory=lambda: list(settings.schedule.default_working_days)
    )
    slot_enabled: dict[str, bool] = field(default_factory=default_slot_map)
    service_areas: list[str] = field(default_factory=list)
    breaks: list[BreakEntry] = field(default_factory=list)
    vacations: list[VacationEntry] = field(default_factory=list)


def _copy(value: Any) -> Any:
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, list):
        return list(value)
    return value


def _coerce_overlay(name: str, value: Any) -> list:
    if name == "breaks":
        return [BreakEntry.model_validate(v) if isinstance(v, dict) else v for v in value]
    if name == "vacations":
        return [VacationEntry.model_validate(v) if isinstance(v, dict) else v for v in value]
    return list(dedupe_areas([str(v) for v in value]))


class AvailabilitySession:
    """Session-scoped owner of the availability draft for one screen."""

    def __init__(self, api: TechnicianApi, session_id: Optional[str] = None) -> None:
        self._api = api
        self.session_id = session_id or f"AVAIL-{uuid.uuid4().hex[:6]}"
        self.draft = DraftAvailability()
        self.snapshot: Optional[AvailabilitySnapshot] = None
        self.completed_jobs = 0
        self.last_error: Optional[str] = None
        self.closed = False
        self._touched: set[str] = set()

    @classmethod
    def open(cls, api: TechnicianApi, session_id: Optional[str] = None) -> "AvailabilitySession":
        """Create the session when the screen mounts."""
        session = cls(api, session_id)
        set_session_id(session.session_id)
        logger.debug("Availability session opened")
        return session

    def close(self) -> None:
        """Discard the draft when the screen unmounts."""
        self.closed = True
        self._touched.clear()
        logger.debug("Availability session closed")

    def _ensure_open(self) -> None:
        if self.closed:
            raise RuntimeError(f"Availability session {self.session_id} is closed")

    # ------------------------------------------------------------------ #
    # Focus / fetch
    # ------------------------------------------------------------------ #

    async def on_focus(
        self, nav_params: Optional[Mapping[str, Any]] = None, with_stats: bool = False
    ) -> bool:
        """
        Fetch the snapshot and rebuild the draft.

        Navigation overlays are applied even when the fetch fails, so edits
        made on a child screen are not lost. Concurrent focus events are not
        cancelled; whichever fetch completes last becomes the snapshot.

        Returns:
            True if the snapshot was refreshed.
        """
        self._ensure_open()
        self._apply_overlays(nav_params or {})

        try:
            if with_stats:
                snapshot, dashboard = await asyncio.gather(
                    self._api.get_availability(), self._api.get_dashboard()
                )
                self.completed_jobs = dashboard.weekly_kpis.visits_done
            else:
                snapshot = await self._api.get_availability()
        except TechnicianApiError as exc:
            self.last_error = RETRY_MESSAGE
            logger.warning("Availability fetch failed: %s", exc)
            return False

        if self.closed:
            logger.debug("Discarding snapshot that arrived after close")
            return False

        self.last_error = None
        self.snapshot = snapshot
        self.draft = self._rebuild(snapshot)
        logger.info(
            "Snapshot applied: %d days, %d slots, %d areas",
            len(snapshot.working_days), len(snapshot.working_hours_slots),
            len(snapshot.service_areas),
        )
        return True

    def _apply_overlays(self, nav_params: Mapping[str, Any]) -> None:
        for name in LIST_FIELDS:
            value = nav_params.get(name)
            if value is None:
                continue
            setattr(self.draft, name, _coerce_overlay(name, value))
            self._touched.add(name)
            logger.debug("Applied local %s edit (%d entries)", name, len(value))

    def _rebuild(self, snapshot: AvailabilitySnapshot) -> DraftAvailability:
        previous = self.draft
        seeded = DraftAvailability(
            is_online=snapshot.is_online,
            auto_accept_jobs=snapshot.auto_accept_jobs,
            selected_days=(
                _ordered_days({code_to_day(c) for c in snapshot.working_days})
                if snapshot.working_days
                else list(previous.selected_days)
            ),
            slot_enabled={sid: sid in snapshot.working_hours_slots for sid in SLOT_IDS},
            service_areas=list(snapshot.service_areas),
            breaks=list(snapshot.breaks),
            vacations=list(snapshot.vacations),
        )
        for name in self._touched:
            setattr(seeded, name, _copy(getattr(previous, name)))
        return seeded

    # ------------------------------------------------------------------ #
    # Screen toggles
    # ------------------------------------------------------------------ #

    def set_online(self, value: bool) -> None:
        self.draft.is_online = value
        self._touched.add("is_online")

    def set_auto_accept(self, value: bool) -> None:
        self.draft.auto_accept_jobs = value
        self._touched.add("auto_accept_jobs")

    def toggle_day(self, day: str) -> bool:
        """Flip a working day. Returns the new selected state."""
        days = set(self.draft.selected_days)
        selected = day not in days
        if selected:
            days.add(day)
        else:
            days.discard(day)
        self.draft.selected_days = _ordered_days(days)
        self._touched.add("selected_days")
        return selected

    def toggle_slot(self, slot_id: str) -> bool:
        """Flip a catalog slot. Returns the new enabled state."""
        if slot_id not in SLOT_IDS:
            raise ValueError(f"Unknown time slot {slot_id!r}. Valid: {list(SLOT_IDS)}")
        enabled = not self.draft.slot_enabled.get(slot_id, False)
        self.draft.slot_enabled = {**self.draft.slot_enabled, slot_id: enabled}
        self._touched.add("slot_enabled")
        return enabled

    def remove_break(self, index: int) -> None:
        breaks = list(self.draft.breaks)
        del breaks[index]
        self.draft.breaks = breaks
        self._touched.add("breaks")

    def remove_vacation(self, index: int) -> None:
        vacations = list(self.draft.vacations)
        del vacations[index]
        self.draft.vacations = vacations
        self._touched.add("vacations")

    def editor_params(self) -> dict[str, Any]:
        """Initial lists to hand to the break, vacation and area editors."""
        return {
            "initial_breaks": list(self.draft.breaks),
            "initial_vacations": list(self.draft.vacations),
            "initial_service_areas": list(self.draft.service_areas),
        }

    @property
    def stats(self) -> WeeklyStats:
        return derive_weekly_stats(
            self.draft.selected_days, self.draft.slot_enabled, self.completed_jobs
        )

    # ------------------------------------------------------------------ #
    # Save
    # ------------------------------------------------------------------ #

    def build_payload(self) -> dict[str, Any]:
        """Translate the draft into the update request body."""
        draft = self.draft
        payload: dict[str, Any] = {
            "is_online": draft.is_online,
            "auto_accept_jobs": draft.auto_accept_jobs,
            "working_days": days_to_codes(draft.selected_days),
            "working_hours_slots": [
                slot.to_payload() for slot in TIME_SLOTS if draft.slot_enabled.get(slot.id)
            ],
            "service_areas": list(draft.service_areas),
        }
        if draft.breaks:
            payload["breaks"] = [b.model_dump(exclude_none=True) for b in draft.breaks]
        if draft.vacations:
            payload["vacations"] = [v.model_dump(exclude_none=True) for v in draft.vacations]
        if len(draft.service_areas) == 1:
            payload["service_area"] = draft.service_areas[0]
        return payload

    async def save(self) -> SaveResult:
        """
        Send the draft to the server.

        On failure the draft is left exactly as it was so the user can retry.
        On success local intent is considered persisted and the snapshot is
        re-fetched as the new truth.
        """
        self._ensure_open()
        payload = self.build_payload()
        sent = {name: _copy(getattr(self.draft, name)) for name in self._touched}
        try:
            result = await self._api.update_availability(payload)
        except TechnicianApiError as exc:
            logger.warning("Availability save failed: %s", exc)
            return SaveResult(success=False, message=RETRY_MESSAGE)

        if not result.success:
            logger.info("Availability save refused: %s", result.message)
            return SaveResult(success=False, message=result.message or SAVE_FAILED_MESSAGE)

        # Edits made while the request was in flight stay local.
        for name, value in sent.items():
            if getattr(self.draft, name) == value:
                self._touched.discard(name)

        if self.closed:
            logger.debug("Session closed during save; skipping refresh")
        else:
            await self.on_focus()
        return SaveResult(success=True, message=result.message or SAVE_OK_MESSAGE)
