"""Shared test fixtures and helpers."""

from typing import Any, Callable, Optional

import httpx
import pytest

from fieldops.jobs.state_machine import TaskLifecycle
from fieldops.scheduling.reconciler import AvailabilitySession
from fieldops.tools.mock_backend import BASE_URL, MockTechnicianBackend
from fieldops.tools.technician_api import TechnicianApi


@pytest.fixture
def backend():
    return MockTechnicianBackend()


@pytest.fixture
def api(backend):
    return TechnicianApi(client=backend.client())


@pytest.fixture
def session(api):
    return AvailabilitySession.open(api, session_id="TEST-SESSION")


@pytest.fixture
def lifecycle():
    return TaskLifecycle()


def make_api(handler: Callable[[httpx.Request], Any]) -> TechnicianApi:
    """Build a client whose every request goes to ``handler`` (sync or async)."""
    client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return TechnicianApi(client=client)


def availability_body(
    working_days: Optional[list[str]] = None,
    slots: Optional[list[str]] = None,
    **overrides: Any,
) -> dict[str, Any]:
    """Server availability payload wrapped in the success envelope."""
    data: dict[str, Any] = {
        "is_online": True,
        "auto_accept_jobs": False,
        "working_days": ["mon", "tue", "wed"] if working_days is None else working_days,
        "working_hours_slots": [
            {"slot": s, "start": "09:00:00", "end": "12:00:00"}
            for s in (["morning"] if slots is None else slots)
        ],
        "service_areas": ["Dubai"],
    }
    data.update(overrides)
    return {"success": True, "data": data}
