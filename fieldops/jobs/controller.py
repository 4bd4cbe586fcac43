"""
Task list and accept/reject commands for the technician's job screens.

The controller never sets a task's status itself: it checks the transition
locally, asks the server, and on success reloads page 1 so any server-side
side effects (reassigned or cancelled conflicts) show up.
"""

import logging
from typing import Optional

from fieldops.config import settings
from fieldops.jobs.state_machine import TaskAction, TaskLifecycle
from fieldops.schemas.task_schema import ActionResult, Task, TaskPage
from fieldops.tools.technician_api import TASK_WINDOWS, TechnicianApi, TechnicianApiError

logger = logging.getLogger(__name__)

TODAY_STATUS_FILTERS = ("all", "pending", "accepted", "in_progress")
HISTORY_STATUS_FILTERS = ("all", "in_progress", "completed", "cancelled")

_MESSAGES = {
    TaskAction.ACCEPT: (
        "Job has been accepted successfully!",
        "Failed to accept job.",
        "Failed to accept job. Please try again.",
    ),
    TaskAction.REJECT: (
        "Job has been rejected.",
        "Failed to reject job.",
        "Failed to reject job. Please try again.",
    ),
}


class TaskListController:
    """
    Paginated task list bound to one window and status filter.

    ``client_side_filter`` additionally keeps only tasks whose status equals
    the selected filter, for views whose endpoint ignores ``status``.
    ``rejected_only`` lists the rejected-jobs history instead.
    """

    def __init__(
        self,
        api: TechnicianApi,
        window: str = "today",
        status_filter: str = "all",
        client_side_filter: bool = False,
        rejected_only: bool = False,
        per_page: Optional[int] = None,
    ) -> None:
        self._api = api
        self._lifecycle = TaskLifecycle()
        self.window = self._check_window(window)
        self.status_filter = self._check_status(status_filter)
        self.client_side_filter = client_side_filter
        self.rejected_only = rejected_only
        self.per_page = per_page or settings.tasks.per_page
        self.page: Optional[TaskPage] = None
        self.loading_more = False
        self.last_error: Optional[str] = None

    @staticmethod
    def _check_window(window: str) -> str:
        if window not in TASK_WINDOWS:
            raise ValueError(f"Unknown window {window!r}. Valid: {list(TASK_WINDOWS)}")
        return window

    @staticmethod
    def _check_status(status: str) -> str:
        valid = set(TODAY_STATUS_FILTERS) | set(HISTORY_STATUS_FILTERS)
        if status not in valid:
            raise ValueError(f"Unknown status filter {status!r}. Valid: {sorted(valid)}")
        return status

    @property
    def tasks(self) -> list[Task]:
        items = self.page.items if self.page else []
        if self.client_side_filter and self.status_filter != "all":
            return [t for t in items if t.status.value == self.status_filter]
        return list(items)

    def find(self, task_id: str) -> Optional[Task]:
        for task in self.page.items if self.page else []:
            if task.id == str(task_id):
                return task
        return None

    # ------------------------------------------------------------------ #
    # Loading
    # ------------------------------------------------------------------ #

    async def _fetch(self, page: int) -> TaskPage:
        if self.rejected_only:
            return await self._api.list_rejected_jobs(self.window, page, self.per_page)
        return await self._api.list_tasks(self.window, page, self.per_page, self.status_filter)

    async def load(self, page: int = 1, append: bool = False) -> bool:
        """Fetch a page. Appending concatenates onto the pages already held.

        A failed fetch sets ``last_error`` and keeps whatever is on screen.
        """
        try:
            fetched = await self._fetch(page)
        except TechnicianApiError as exc:
            self.last_error = str(exc)
            logger.warning("Task page %d failed to load: %s", page, exc)
            return False

        self.last_error = None
        if append and self.page is not None and page > 1:
            fetched = fetched.model_copy(update={"items": self.page.items + fetched.items})
        self.page = fetched
        return True

    async def load_more(self) -> bool:
        """Load the next page unless one is already in flight or none remain."""
        if self.loading_more or self.page is None or not self.page.has_more:
            return False
        self.loading_more = True
        try:
            return await self.load(self.page.current_page + 1, append=True)
        finally:
            self.loading_more = False

    async def set_window(self, window: str) -> bool:
        self.window = self._check_window(window)
        return await self.load(1)

    async def set_status_filter(self, status: str) -> bool:
        self.status_filter = self._check_status(status)
        return await self.load(1)

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    async def accept(self, task_id: str) -> ActionResult:
        return await self._run(TaskAction.ACCEPT, str(task_id))

    async def reject(self, task_id: str, reason: str) -> ActionResult:
        if not reason or not reason.strip():
            raise ValueError("A rejection reason is required.")
        return await self._run(TaskAction.REJECT, str(task_id), reason.strip())

    async def _run(self, action: TaskAction, task_id: str, reason: str = "") -> ActionResult:
        ok_msg, refused_msg, retry_msg = _MESSAGES[action]

        # Tasks not in the local page (e.g. opened from a notification) are
        # left to the server to judge.
        task = self.find(task_id)
        if task is not None:
            self._lifecycle.next_state(task.status, action)

        try:
            if action == TaskAction.ACCEPT:
                result = await self._api.accept_task(task_id)
            else:
                result = await self._api.reject_task(task_id, reason)
        except TechnicianApiError:
            logger.warning("%s on task %s failed in transport", action.value, task_id)
            return ActionResult(success=False, message=retry_msg)

        if not result.success:
            logger.info("Server refused %s on task %s: %s", action.value, task_id, result.message)
            return ActionResult(success=False, message=result.message or refused_msg)

        logger.info("Task %s: %s succeeded", task_id, action.value)
        await self.load(1)
        return ActionResult(success=True, message=result.message or ok_msg)
