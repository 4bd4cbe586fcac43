"""Weekly capacity statistics shown under the availability schedule."""

from dataclasses import dataclass
from typing import Collection, Mapping

from fieldops.scheduling.time_slots import TIME_SLOTS


@dataclass(frozen=True)
class WeeklyStats:
    """Projected capacity alongside the trailing completed-visit count.

    ``total_hours`` is a projection from the schedule; ``completed_jobs`` is
    the server's actual count for the week and is never derived locally.
    """

    available_days: int
    hours_per_day: int
    total_hours: int
    completed_jobs: int


def hours_per_day(slot_enabled: Mapping[str, bool]) -> int:
    """Sum the catalog durations of every enabled slot."""
    return sum(slot.duration_hours for slot in TIME_SLOTS if slot_enabled.get(slot.id, False))


def derive_weekly_stats(
    selected_days: Collection[str],
    slot_enabled: Mapping[str, bool],
    completed_jobs: int = 0,
) -> WeeklyStats:
    """Compute weekly stats from the current day and slot selection."""
    days = len(selected_days)
    per_day = hours_per_day(slot_enabled)
    return WeeklyStats(
        available_days=days,
        hours_per_day=per_day,
        total_hours=days * per_day,
        completed_jobs=completed_jobs,
    )
