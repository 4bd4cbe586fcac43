"""Task, task page and dashboard models."""

import logging
import re
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from fieldops.utils import PLACEHOLDER, first_present

logger = logging.getLogger(__name__)


class TaskStatus(str, Enum):
    """Lifecycle status of an assigned task."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


def parse_status(raw: Any) -> TaskStatus:
    """Collapse server status spellings ("In Progress", "in-progress") to TaskStatus."""
    if raw is None or raw == "":
        return TaskStatus.PENDING
    if not isinstance(raw, str):
        logger.debug("Non-string task status %r", raw)
        return TaskStatus.UNKNOWN
    key = re.sub(r"[\s\-]+", "_", raw.strip().lower())
    try:
        return TaskStatus(key)
    except ValueError:
        logger.debug("Unrecognized task status %r", raw)
        return TaskStatus.UNKNOWN


def _text(value: Any) -> str:
    # Display fields arrive as numbers on some endpoints.
    if value is None or value == "":
        return PLACEHOLDER
    return str(value)


def _page_number(value: Any) -> int:
    try:
        return max(1, int(value))
    except (TypeError, ValueError):
        return 1


def _url(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


class Task(BaseModel):
    """A job assigned to the technician. Status is owned by the server."""

    id: str
    status: TaskStatus = TaskStatus.PENDING
    raw_status: Optional[str] = None
    customer_name: str = PLACEHOLDER
    service_name: str = PLACEHOLDER
    location: str = PLACEHOLDER
    scheduled_time: str = PLACEHOLDER
    duration: str = PLACEHOLDER

    @classmethod
    def from_payload(cls, item: dict[str, Any]) -> "Task":
        minutes = item.get("duration_minutes")
        if minutes is not None:
            duration = f"{minutes} min"
        else:
            duration = first_present(item, "estimated_duration", "estimatedDuration")

        raw_status = item.get("status")
        return cls(
            id=str(item["id"]),
            status=parse_status(raw_status),
            raw_status=None if raw_status is None else str(raw_status),
            customer_name=_text(first_present(item, "farm_name", "customer_name", "customerName")),
            service_name=_text(first_present(item, "service_name", "service")),
            location=_text(first_present(item, "location", "address")),
            scheduled_time=_text(first_present(item, "scheduled_time", "scheduledTime")),
            duration=_text(duration),
        )


def parse_tasks(raw: Any) -> list[Task]:
    if not isinstance(raw, list):
        return []
    tasks = []
    for item in raw:
        if not isinstance(item, dict) or item.get("id") is None:
            logger.debug("Skipping task without id: %r", item)
            continue
        try:
            tasks.append(Task.from_payload(item))
        except ValidationError:
            logger.debug("Skipping malformed task: %r", item)
    return tasks


class TaskPage(BaseModel):
    """One page of the paginated task list."""

    items: list[Task] = Field(default_factory=list)
    current_page: int = 1
    last_page: int = 1
    next_page_url: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return bool(self.next_page_url) and self.current_page < self.last_page

    @classmethod
    def from_payload(cls, body: Any) -> "TaskPage":
        """Accept either a Laravel paginator or the flattened client shape."""
        if isinstance(body, list):
            return cls(items=parse_tasks(body))
        if not isinstance(body, dict):
            return cls()
        items = first_present(body, "list", "data", "tasks")
        return cls(
            items=parse_tasks(items),
            current_page=_page_number(first_present(body, "current_page", "currentPage")),
            last_page=_page_number(first_present(body, "last_page", "lastPage")),
            next_page_url=_url(first_present(body, "next_page_url", "nextPageUrl")),
        )


class WeeklyKpis(BaseModel):
    earnings: float = 0
    visits_done: int = 0
    rating: float = 0


class DashboardSummary(BaseModel):
    """Subset of ``GET technician/dashboard`` used by the schedule screens."""

    name: str = PLACEHOLDER
    employee_id: str = PLACEHOLDER
    is_online: bool = False
    weekly_kpis: WeeklyKpis = Field(default_factory=WeeklyKpis)
    today_tasks: list[Task] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, body: dict[str, Any]) -> "DashboardSummary":
        try:
            kpis = WeeklyKpis.model_validate(body.get("weekly_kpis") or {})
        except ValidationError:
            logger.debug("Ignoring malformed weekly_kpis: %r", body.get("weekly_kpis"))
            kpis = WeeklyKpis()
        return cls(
            name=_text(body.get("name")),
            employee_id=_text(body.get("employee_id")),
            is_online=bool(body.get("is_online", False)),
            weekly_kpis=kpis,
            today_tasks=parse_tasks(body.get("today_tasks")),
        )


class ActionResult(BaseModel):
    """Outcome of an accept/reject command."""

    success: bool
    message: str = ""
