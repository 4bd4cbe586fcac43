"""
Translation between app day names and server day codes, plus time-of-day
normalization.

The app works with full lowercase day names ("monday"); the backend stores
three-letter codes ("mon"). Unknown values pass through unchanged so an
unexpected server value never breaks the availability screen.
"""

from typing import Iterable

WEEK_DAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

DAY_TO_CODE: dict[str, str] = {day: day[:3] for day in WEEK_DAYS}
CODE_TO_DAY: dict[str, str] = {code: day for day, code in DAY_TO_CODE.items()}


def day_to_code(full_name: str) -> str:
    """Map ``"monday"`` to ``"mon"``; unrecognized input is returned as-is."""
    return DAY_TO_CODE.get(full_name, full_name)


def code_to_day(code: str) -> str:
    """Map ``"mon"`` to ``"monday"``; unrecognized input is returned as-is."""
    return CODE_TO_DAY.get(code, code)


def _week_order(day: str) -> int:
    return WEEK_DAYS.index(day) if day in WEEK_DAYS else len(WEEK_DAYS)


def days_to_codes(days: Iterable[str]) -> list[str]:
    """Translate day names to codes, Monday first, unknown values last."""
    return [day_to_code(d) for d in sorted(days, key=_week_order)]


def codes_to_days(codes: Iterable[str]) -> list[str]:
    """Translate server codes to day names, Monday first, unknown values last."""
    return sorted((code_to_day(c) for c in codes), key=_week_order)


def normalize_time(raw: str) -> str:
    """Reduce a time string to ``HH:mm`` by keeping its first two components.

    If the reduced form is shorter than five characters the original string
    is returned untouched, so ``"9:00"`` and ``"9:00:00"`` are not padded.

    Examples:
        >>> normalize_time("09:30:00")
        '09:30'
        >>> normalize_time("9:30")
        '9:30'
    """
    reduced = ":".join(raw.split(":")[:2])
    if len(reduced) < 5:
        return raw
    return reduced
