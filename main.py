"""
Command-line entry point against the configured technician backend.

Reads FIELDOPS_API_BASE_URL / FIELDOPS_API_TOKEN from the environment (or
.env) and prints the live schedule or task list. Use console_demo.py for an
offline walkthrough.

Usage:
    python main.py availability
    python main.py tasks --window week --status in_progress
    python main.py console
"""

import argparse
import asyncio
import sys

from fieldops.config import settings


async def _show_availability() -> int:
    from fieldops.scheduling.reconciler import AvailabilitySession
    from fieldops.tools.technician_api import TechnicianApi

    async with TechnicianApi() as api:
        session = AvailabilitySession.open(api)
        if not await session.on_focus(with_stats=True):
            print(session.last_error)
            return 1
        draft, stats = session.draft, session.stats
        print(f"Online: {draft.is_online}  Auto-accept: {draft.auto_accept_jobs}")
        print(f"Days: {', '.join(draft.selected_days)}")
        print(f"Slots: {', '.join(s for s, on in draft.slot_enabled.items() if on)}")
        print(f"Service areas: {', '.join(draft.service_areas) or '-'}")
        print(f"Breaks: {len(draft.breaks)}  Vacations: {len(draft.vacations)}")
        print(
            f"This week: {stats.available_days} days x {stats.hours_per_day}h = "
            f"{stats.total_hours}h, {stats.completed_jobs} visits done"
        )
        session.close()
    return 0


async def _show_tasks(window: str, status: str) -> int:
    from fieldops.jobs.controller import TaskListController
    from fieldops.tools.technician_api import TechnicianApi

    async with TechnicianApi() as api:
        tasks = TaskListController(api, window=window, status_filter=status)
        if not await tasks.load():
            print(f"Could not load tasks: {tasks.last_error}")
            return 1
        for task in tasks.tasks:
            print(
                f"#{task.id:>6}  {task.status.value:<12} {task.scheduled_time:<8} "
                f"{task.customer_name} - {task.service_name} ({task.location})"
            )
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=settings.app_name)
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("availability", help="Show the saved weekly schedule")
    tasks = sub.add_parser("tasks", help="List assigned tasks")
    tasks.add_argument("--window", choices=["today", "week", "month", "year"], default="today")
    tasks.add_argument("--status", default="all")
    sub.add_parser("console", help="Run the offline console demo")
    args = parser.parse_args()

    if args.command == "console":
        from console_demo import ConsoleSession

        asyncio.run(ConsoleSession().run("all"))
        return 0
    if args.command == "availability":
        return asyncio.run(_show_availability())
    return asyncio.run(_show_tasks(args.window, args.status))


if __name__ == "__main__":
    sys.exit(main())
