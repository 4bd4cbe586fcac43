"""
In-memory technician backend served through ``httpx.MockTransport``.

Stands in for the real REST API in the console demo and the tests. It keeps
one availability record and a task table, enforces task transitions on the
server side, and paginates like the production paginator.
"""

import json
import logging
import re
from copy import deepcopy
from datetime import date
from typing import Any, Optional

import httpx

from fieldops.schemas.task_schema import TaskStatus, parse_status

logger = logging.getLogger(__name__)

BASE_URL = "https://mock.fieldops.local/api/"

DEFAULT_AVAILABILITY: dict[str, Any] = {
    "is_online": True,
    "auto_accept_jobs": False,
    "working_days": ["mon", "tue", "wed", "thu", "fri"],
    "working_hours_slots": [
        {"slot": "morning", "start": "09:00:00", "end": "12:00:00"},
        {"slot": "afternoon", "start": "12:00:00", "end": "17:00:00"},
    ],
    "service_area": "Dubai",
    "breaks": [],
    "vacations": [],
}

DEFAULT_TASKS: list[dict[str, Any]] = [
    {
        "id": 101,
        "farm_name": "Palm Grove Farm",
        "service_name": "Irrigation Inspection",
        "location": "Al Barsha, Dubai",
        "scheduled_time": "09:30",
        "duration_minutes": 90,
        "status": "pending",
        "scheduled_date": "2025-03-19",
    },
    {
        "id": 102,
        "customerName": "Sarah Johnson",
        "service": "AC Maintenance",
        "address": "15 Marina Walk",
        "scheduledTime": "13:00",
        "estimated_duration": "2 hours",
        "status": "Accepted",
        "scheduled_date": "2025-03-19",
    },
    {
        "id": 103,
        "customer_name": "Omar Haddad",
        "service_name": "Pump Repair",
        "location": "Jumeirah 3",
        "scheduled_time": "15:00",
        "duration_minutes": 60,
        "status": "In Progress",
        "scheduled_date": "2025-03-19",
    },
    {
        "id": 104,
        "customer_name": "Lisa Wilson",
        "service_name": "Deep Cleaning",
        "location": "Business Bay",
        "scheduled_time": "10:00",
        "duration_minutes": 120,
        "status": "completed",
        "scheduled_date": "2025-03-17",
    },
    {
        "id": 105,
        "customer_name": "David Brown",
        "service_name": "Express Service",
        "location": "Deira",
        "scheduled_time": "11:00",
        "duration_minutes": 45,
        "status": "rejected",
        "scheduled_date": "2025-02-20",
    },
]

_TASK_ACTION = re.compile(r"^technician/tasks/(?P<task_id>[^/]+)/(?P<action>accept|reject)$")


def _in_window(task_date: date, today: date, window: str) -> bool:
    if window == "today":
        return task_date == today
    if window == "week":
        return task_date.isocalendar()[:2] == today.isocalendar()[:2]
    if window == "month":
        return (task_date.year, task_date.month) == (today.year, today.month)
    if window == "year":
        return task_date.year == today.year
    return True


def _json(status_code: int, body: Any) -> httpx.Response:
    return httpx.Response(status_code, json=body)


class MockTechnicianBackend:
    """Stateful fake of the technician API.

    ``fail_next`` makes the next request fail: an int status code returns
    that HTTP status with no body, ``"network"`` raises a transport error.
    """

    def __init__(self, today: date = date(2025, 3, 19)) -> None:
        self.today = today
        self.availability: dict[str, Any] = {}
        self.tasks: dict[str, dict[str, Any]] = {}
        self.visits_done = 0
        self.requests: list[httpx.Request] = []
        self.fail_next: Optional[Any] = None
        self.reset()

    def reset(self) -> None:
        """Restore seed data. Used by test fixtures for isolation."""
        self.availability = deepcopy(DEFAULT_AVAILABILITY)
        self.tasks = {str(t["id"]): deepcopy(t) for t in DEFAULT_TASKS}
        self.visits_done = 12
        self.requests.clear()
        self.fail_next = None

    def set_task_status(self, task_id: str, status: str) -> None:
        """Move a task server-side, e.g. field progress recorded elsewhere."""
        self.tasks[str(task_id)]["status"] = status

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=BASE_URL, transport=self.transport())

    # ------------------------------------------------------------------ #
    # Routing
    # ------------------------------------------------------------------ #

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_next is not None:
            failure, self.fail_next = self.fail_next, None
            if failure == "network":
                raise httpx.ConnectError("Connection refused", request=request)
            return httpx.Response(failure)

        path = request.url.path.split("/api/", 1)[-1].strip("/")
        method = request.method

        if path == "technician/availability":
            if method == "GET":
                return _json(200, {"success": True, "data": deepcopy(self.availability)})
            return self._update_availability(json.loads(request.content or b"{}"))
        if path == "technician/service-areas" and method == "POST":
            return self._update_service_areas(json.loads(request.content or b"{}"))
        if path == "technician/dashboard" and method == "GET":
            return self._dashboard()
        if path == "technician/tasks" and method == "GET":
            return self._list_tasks(request.url.params)
        if path == "technician/tasks/rejected" and method == "GET":
            return self._list_tasks(request.url.params, status="rejected")

        match = _TASK_ACTION.match(path)
        if match and method == "POST":
            body = json.loads(request.content or b"{}")
            return self._task_action(match["task_id"], match["action"], body)

        return _json(404, {"success": False, "message": "Not found."})

    # ------------------------------------------------------------------ #
    # Handlers
    # ------------------------------------------------------------------ #

    def _update_availability(self, payload: dict[str, Any]) -> httpx.Response:
        unknown = [d for d in payload.get("working_days", []) if d not in
                   ("mon", "tue", "wed", "thu", "fri", "sat", "sun")]
        if unknown:
            return _json(422, {"success": False, "message": f"Invalid working days: {unknown}"})

        record = {
            "is_online": payload.get("is_online", False),
            "auto_accept_jobs": payload.get("auto_accept_jobs", False),
            "working_days": payload.get("working_days", []),
            # Server echoes slot times with seconds.
            "working_hours_slots": [
                {"slot": s["slot"], "start": f"{s['start']}:00", "end": f"{s['end']}:00"}
                for s in payload.get("working_hours_slots", [])
            ],
            "service_areas": payload.get("service_areas", []),
            "breaks": payload.get("breaks", self.availability.get("breaks", [])),
            "vacations": payload.get("vacations", self.availability.get("vacations", [])),
        }
        self.availability = record
        logger.info("Availability updated: %s", record["working_days"])
        return _json(200, {"success": True, "message": "Availability updated."})

    def _update_service_areas(self, payload: dict[str, Any]) -> httpx.Response:
        self.availability["service_areas"] = payload.get("service_areas", [])
        self.availability.pop("service_area", None)
        return _json(200, {"success": True, "message": "Service areas updated."})

    def _dashboard(self) -> httpx.Response:
        today_tasks = [
            t for t in self.tasks.values()
            if date.fromisoformat(t["scheduled_date"]) == self.today
        ]
        return _json(200, {
            "success": True,
            "data": {
                "name": "Ahmed Khan",
                "email": "ahmed@fieldops.example.com",
                "employee_id": "TECH-0042",
                "is_online": self.availability.get("is_online", False),
                "weekly_kpis": {"earnings": 1840.5, "visits_done": self.visits_done, "rating": 4.8},
                "today_tasks": deepcopy(today_tasks),
            },
        })

    def _list_tasks(self, params: httpx.QueryParams, status: Optional[str] = None) -> httpx.Response:
        window = params.get("window", "today")
        page = int(params.get("page", "1"))
        per_page = int(params.get("per_page", "15"))
        wanted = status or params.get("status")

        rows = [
            t for t in self.tasks.values()
            if _in_window(date.fromisoformat(t["scheduled_date"]), self.today, window)
            and (not wanted or parse_status(t.get("status")).value == wanted)
        ]
        last_page = max(1, -(-len(rows) // per_page))
        chunk = rows[(page - 1) * per_page: page * per_page]
        next_url = f"{BASE_URL}technician/tasks?page={page + 1}" if page < last_page else None
        return _json(200, {
            "success": True,
            "data": {
                "data": deepcopy(chunk),
                "current_page": page,
                "last_page": last_page,
                "next_page_url": next_url,
            },
        })

    def _task_action(self, task_id: str, action: str, body: dict[str, Any]) -> httpx.Response:
        task = self.tasks.get(task_id)
        if task is None:
            return _json(404, {"success": False, "message": f"Task {task_id} not found."})
        if parse_status(task.get("status")) != TaskStatus.PENDING:
            return _json(422, {
                "success": False,
                "message": f"Task {task_id} cannot be {action}ed in its current state.",
            })
        if action == "reject" and not str(body.get("reason", "")).strip():
            return _json(422, {"success": False, "message": "A reason is required."})

        task["status"] = "accepted" if action == "accept" else "rejected"
        logger.info("Task %s %sed", task_id, action)
        return _json(200, {"success": True, "message": f"Task {task_id} {action}ed."})
