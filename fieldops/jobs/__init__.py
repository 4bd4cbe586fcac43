from fieldops.jobs.controller import TaskListController
from fieldops.jobs.state_machine import (
    InvalidTransitionError,
    TaskAction,
    TaskLifecycle,
)

__all__ = [
    "TaskListController",
    "TaskLifecycle",
    "TaskAction",
    "InvalidTransitionError",
]
