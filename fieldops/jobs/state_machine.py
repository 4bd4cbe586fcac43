"""
Transition table for the task lifecycle.

pending -> accepted | rejected is the technician's decision;
accepted -> in_progress -> completed is field progress. rejected, completed
and cancelled are terminal. Illegal actions are refused here, before any
request reaches the server.

Usage:
    lifecycle = TaskLifecycle()
    lifecycle.next_state(TaskStatus.PENDING, TaskAction.ACCEPT)  # -> ACCEPTED
"""

import logging
from dataclasses import dataclass
from enum import Enum

from fieldops.schemas.task_schema import TaskStatus

logger = logging.getLogger(__name__)


class TaskAction(str, Enum):
    """Actions a technician can request on a task."""
    ACCEPT = "accept"
    REJECT = "reject"
    START = "start"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Transition:
    """A single valid status transition."""
    from_state: TaskStatus
    to_state: TaskStatus
    action: TaskAction


class InvalidTransitionError(Exception):
    """Raised when an action is not valid from the task's current status."""


TERMINAL_STATES = frozenset({TaskStatus.REJECTED, TaskStatus.COMPLETED, TaskStatus.CANCELLED})


class TaskLifecycle:
    """Explicit transition table for assigned tasks."""

    TRANSITIONS: list[Transition] = [
        # --- Technician decision ---
        Transition(TaskStatus.PENDING, TaskStatus.ACCEPTED, TaskAction.ACCEPT),
        Transition(TaskStatus.PENDING, TaskStatus.REJECTED, TaskAction.REJECT),

        # --- Field progress ---
        Transition(TaskStatus.ACCEPTED, TaskStatus.IN_PROGRESS, TaskAction.START),
        Transition(TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED, TaskAction.COMPLETE),
    ]

    def next_state(self, status: TaskStatus, action: TaskAction) -> TaskStatus:
        """
        Resolve the status an action would lead to.

        Raises:
            InvalidTransitionError: If the action is not legal from ``status``.
        """
        for t in self.TRANSITIONS:
            if t.from_state == status and t.action == action:
                return t.to_state

        valid = [a.value for a in self.get_valid_actions(status)]
        logger.debug("Refused %s on task in %s", action.value, status.value)
        raise InvalidTransitionError(
            f"Cannot {action.value} a task that is '{status.value}'. "
            f"Valid actions: {valid}"
        )

    def can(self, status: TaskStatus, action: TaskAction) -> bool:
        return any(t.from_state == status and t.action == action for t in self.TRANSITIONS)

    def get_valid_actions(self, status: TaskStatus) -> list[TaskAction]:
        """Return all actions valid from ``status``."""
        return [t.action for t in self.TRANSITIONS if t.from_state == status]

    def is_terminal(self, status: TaskStatus) -> bool:
        return status in TERMINAL_STATES
