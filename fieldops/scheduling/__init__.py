from fieldops.scheduling.day_codes import code_to_day, day_to_code, normalize_time
from fieldops.scheduling.time_slots import TIME_SLOTS, TimeSlot, get_slot
from fieldops.scheduling.weekly_stats import WeeklyStats, derive_weekly_stats
from fieldops.scheduling.editors import BreakEditor, ServiceAreaEditor, VacationEditor

__all__ = [
    "day_to_code",
    "code_to_day",
    "normalize_time",
    "TIME_SLOTS",
    "TimeSlot",
    "get_slot",
    "WeeklyStats",
    "derive_weekly_stats",
    "BreakEditor",
    "VacationEditor",
    "ServiceAreaEditor",
]
