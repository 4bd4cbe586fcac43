"""
Offline console demo: walks through the technician schedule and job screens
against the in-memory backend. No network, no API token.

Usage:
    python console_demo.py
    python console_demo.py --scenario availability
    python console_demo.py --scenario tasks
"""

import argparse
import asyncio

from fieldops.config import settings
from fieldops.jobs.controller import TaskListController
from fieldops.jobs.state_machine import InvalidTransitionError
from fieldops.scheduling.editors import (
    BreakEditor,
    ResolvedAddress,
    ServiceAreaEditor,
    VacationEditor,
)
from fieldops.scheduling.reconciler import AvailabilitySession
from fieldops.scheduling.time_slots import TIME_SLOTS
from fieldops.tools.mock_backend import MockTechnicianBackend
from fieldops.tools.technician_api import TechnicianApi

GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"


class ConsoleSession:
    """Drives the scheduling and task flows in the terminal."""

    def __init__(self) -> None:
        self.backend = MockTechnicianBackend()
        self.api = TechnicianApi(client=self.backend.client())

    def say(self, text: str, color: str = GREEN) -> None:
        print(f"{color}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {settings.app_name.upper()} - {title}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    def show_draft(self, session: AvailabilitySession) -> None:
        draft = session.draft
        self.system_log(f"online={draft.is_online} auto_accept={draft.auto_accept_jobs}")
        self.system_log(f"days: {', '.join(draft.selected_days)}")
        slots = [f"{s.label} ({s.start}-{s.end})" for s in TIME_SLOTS if draft.slot_enabled[s.id]]
        self.system_log(f"slots: {', '.join(slots) or 'none'}")
        self.system_log(f"areas: {draft.service_areas}")
        self.system_log(f"breaks: {len(draft.breaks)} vacations: {len(draft.vacations)}")
        stats = session.stats
        self.system_log(
            f"this week: {stats.available_days} days, {stats.total_hours}h capacity, "
            f"{stats.completed_jobs} visits done"
        )

    # ------------------------------------------------------------------ #
    # Scenarios
    # ------------------------------------------------------------------ #

    async def run_availability(self) -> None:
        self.banner("Availability")
        session = AvailabilitySession.open(self.api)
        await session.on_focus(with_stats=True)
        self.say("Loaded schedule from server:")
        self.show_draft(session)

        self.say("\nTechnician enables evening slot and Saturday.")
        session.toggle_slot("evening")
        session.toggle_day("saturday")

        breaks = BreakEditor(session.draft.breaks)
        ok, msg = breaks.add("2025-03-19", "13:00:00", "14:00:00", "Lunch")
        self.say(msg, GREEN if ok else RED)

        vacations = VacationEditor(session.draft.vacations)
        ok, msg = vacations.add("2024-06-10", "2024-06-05")
        self.say(msg, GREEN if ok else RED)
        ok, msg = vacations.add("2025-04-01", "2025-04-07", "Eid holiday")
        self.say(msg, GREEN if ok else RED)

        areas = ServiceAreaEditor(session.draft.service_areas)
        ok, msg = areas.add_from_address(ResolvedAddress(city="Abu Dhabi", country="UAE"))
        self.say(msg, GREEN if ok else RED)

        await session.on_focus({**breaks.to_nav_params(), **vacations.to_nav_params()})
        await session.on_focus(areas.to_nav_params())
        self.say("\nDraft after returning from the editors:")
        self.show_draft(session)

        self.system_log(f"payload: {session.build_payload()}")
        self.backend.fail_next = "network"
        result = await session.save()
        self.say(f"Save #1: {result.message}", RED)

        result = await session.save()
        self.say(f"Save #2: {result.message}", GREEN if result.success else RED)
        self.show_draft(session)
        session.close()

    async def run_tasks(self) -> None:
        self.banner("Today's tasks")
        tasks = TaskListController(self.api, window="today")
        await tasks.load()
        for task in tasks.tasks:
            self.system_log(
                f"#{task.id} {task.customer_name} | {task.service_name} | "
                f"{task.scheduled_time} | {task.duration} | {task.status.value}"
            )

        result = await tasks.accept("101")
        self.say(f"Accept #101: {result.message}", GREEN if result.success else RED)

        try:
            await tasks.accept("101")
        except InvalidTransitionError as exc:
            self.say(f"Accept #101 again: {exc}", YELLOW)

        self.backend.set_task_status("101", "pending")
        stale = TaskListController(self.api, window="week")
        await stale.load()
        self.backend.set_task_status("101", "completed")
        result = await stale.accept("101")
        self.say(f"Accept on a stale pending row: {result.message}", RED)

        history = TaskListController(self.api, window="year", rejected_only=True)
        await history.load()
        self.say(f"\nRejected this year: {[t.customer_name for t in history.tasks]}")

    async def run(self, scenario: str) -> None:
        try:
            if scenario in ("availability", "all"):
                await self.run_availability()
            if scenario in ("tasks", "all"):
                await self.run_tasks()
        finally:
            await self.api.aclose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline console demo")
    parser.add_argument(
        "--scenario",
        choices=["availability", "tasks", "all"],
        default="all",
        help="Which screen flow to play",
    )
    args = parser.parse_args()
    asyncio.run(ConsoleSession().run(args.scenario))


if __name__ == "__main__":
    main()
