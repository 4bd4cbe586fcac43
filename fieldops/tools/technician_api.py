"""
Async REST client for the technician endpoints.

Thin wrapper over ``httpx.AsyncClient``: it builds requests, unwraps the
``{success, data}`` envelope and turns transport failures into
TechnicianApiError. Reconciliation and lifecycle rules live elsewhere.
"""

import logging
from typing import Any, Optional

import httpx

from fieldops.config import settings
from fieldops.schemas.availability_schema import AvailabilitySnapshot, SaveResult
from fieldops.schemas.task_schema import ActionResult, DashboardSummary, TaskPage
from fieldops.utils import unwrap_data

logger = logging.getLogger(__name__)

TASK_WINDOWS = ("today", "week", "month", "year")


class TechnicianApiError(Exception):
    """Raised on transport failures and non-2xx responses without a usable body."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TechnicianApi:
    """Client for ``technician/*`` endpoints.

    Pass ``client`` to share a connection pool or to inject a mock transport;
    otherwise one is created from ``settings.api``.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None) -> None:
        if client is None:
            headers = {"Accept": "application/json"}
            if settings.api.auth_token:
                headers["Authorization"] = f"Bearer {settings.api.auth_token}"
            client = httpx.AsyncClient(
                base_url=settings.api.base_url.rstrip("/") + "/",
                timeout=httpx.Timeout(settings.api.timeout_sec),
                headers=headers,
            )
        self._client = client

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "TechnicianApi":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------ #
    # Request helpers
    # ------------------------------------------------------------------ #

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise TechnicianApiError(f"Network error calling {path}") from exc

    async def _get_json(self, path: str, **kwargs: Any) -> Any:
        response = await self._send("GET", path, **kwargs)
        try:
            response.raise_for_status()
            return unwrap_data(response.json())
        except httpx.HTTPStatusError as exc:
            logger.warning("GET %s returned %s", path, response.status_code)
            raise TechnicianApiError(
                f"{path} returned {response.status_code}", response.status_code
            ) from exc
        except ValueError as exc:
            raise TechnicianApiError(f"{path} returned invalid JSON") from exc

    async def _command(self, path: str, payload: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """POST a command and return its ``{success, message}`` body.

        4xx responses that carry a JSON body are server-reported refusals and
        are returned as-is; anything else non-2xx raises.
        """
        response = await self._send("POST", path, json=payload or {})
        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_success or (response.is_client_error and isinstance(body, dict)):
            if not isinstance(body, dict):
                return {"success": response.is_success}
            if not response.is_success:
                body = {**body, "success": False}
            return body

        logger.warning("POST %s returned %s", path, response.status_code)
        raise TechnicianApiError(f"{path} returned {response.status_code}", response.status_code)

    # ------------------------------------------------------------------ #
    # Availability
    # ------------------------------------------------------------------ #

    async def get_availability(self) -> AvailabilitySnapshot:
        body = await self._get_json("technician/availability")
        return AvailabilitySnapshot.from_payload(body if isinstance(body, dict) else {})

    async def update_availability(self, payload: dict[str, Any]) -> SaveResult:
        body = await self._command("technician/availability", payload)
        return SaveResult(success=bool(body.get("success")), message=body.get("message") or "")

    async def update_service_areas(self, areas: list[str]) -> SaveResult:
        """Save service areas from the standalone settings screen."""
        payload: dict[str, Any] = {"service_areas": list(areas)}
        if len(areas) == 1:
            payload["service_area"] = areas[0]
        body = await self._command("technician/service-areas", payload)
        return SaveResult(success=bool(body.get("success")), message=body.get("message") or "")

    # ------------------------------------------------------------------ #
    # Dashboard and tasks
    # ------------------------------------------------------------------ #

    async def get_dashboard(self) -> DashboardSummary:
        body = await self._get_json("technician/dashboard")
        return DashboardSummary.from_payload(body if isinstance(body, dict) else {})

    async def list_tasks(
        self,
        window: str = "today",
        page: int = 1,
        per_page: Optional[int] = None,
        status: Optional[str] = None,
    ) -> TaskPage:
        if window not in TASK_WINDOWS:
            raise ValueError(f"Unknown task window {window!r}. Valid: {list(TASK_WINDOWS)}")
        params: dict[str, Any] = {
            "window": window,
            "page": page,
            "per_page": per_page or settings.tasks.per_page,
        }
        if status and status != "all":
            params["status"] = status
        body = await self._get_json("technician/tasks", params=params)
        return TaskPage.from_payload(body)

    async def list_rejected_jobs(
        self, window: str = "month", page: int = 1, per_page: Optional[int] = None
    ) -> TaskPage:
        params = {"window": window, "page": page, "per_page": per_page or settings.tasks.per_page}
        body = await self._get_json("technician/tasks/rejected", params=params)
        return TaskPage.from_payload(body)

    async def accept_task(self, task_id: str) -> ActionResult:
        body = await self._command(f"technician/tasks/{task_id}/accept")
        return ActionResult(success=bool(body.get("success")), message=body.get("message") or "")

    async def reject_task(self, task_id: str, reason: str) -> ActionResult:
        body = await self._command(f"technician/tasks/{task_id}/reject", {"reason": reason})
        return ActionResult(success=bool(body.get("success")), message=body.get("message") or "")
