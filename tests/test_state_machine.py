"""Tests for the task lifecycle transition table."""

import pytest

from fieldops.jobs.state_machine import (
    InvalidTransitionError,
    TaskAction,
    TaskLifecycle,
)
from fieldops.schemas.task_schema import TaskStatus


class TestTechnicianDecision:
    def test_accept_from_pending(self, lifecycle):
        assert lifecycle.next_state(TaskStatus.PENDING, TaskAction.ACCEPT) == TaskStatus.ACCEPTED

    def test_reject_from_pending(self, lifecycle):
        assert lifecycle.next_state(TaskStatus.PENDING, TaskAction.REJECT) == TaskStatus.REJECTED

    def test_valid_actions_from_pending(self, lifecycle):
        assert lifecycle.get_valid_actions(TaskStatus.PENDING) == [
            TaskAction.ACCEPT, TaskAction.REJECT,
        ]


class TestFieldProgress:
    def test_start_from_accepted(self, lifecycle):
        assert lifecycle.next_state(TaskStatus.ACCEPTED, TaskAction.START) == TaskStatus.IN_PROGRESS

    def test_complete_from_in_progress(self, lifecycle):
        assert (
            lifecycle.next_state(TaskStatus.IN_PROGRESS, TaskAction.COMPLETE)
            == TaskStatus.COMPLETED
        )

    def test_cannot_complete_from_pending(self, lifecycle):
        with pytest.raises(InvalidTransitionError):
            lifecycle.next_state(TaskStatus.PENDING, TaskAction.COMPLETE)


class TestIllegalTransitions:
    @pytest.mark.parametrize("status", [
        TaskStatus.ACCEPTED, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED,
        TaskStatus.REJECTED, TaskStatus.CANCELLED, TaskStatus.UNKNOWN,
    ])
    def test_accept_only_from_pending(self, lifecycle, status):
        assert not lifecycle.can(status, TaskAction.ACCEPT)
        with pytest.raises(InvalidTransitionError, match="Cannot accept"):
            lifecycle.next_state(status, TaskAction.ACCEPT)

    def test_error_lists_valid_actions(self, lifecycle):
        with pytest.raises(InvalidTransitionError, match=r"Valid actions: \['start'\]"):
            lifecycle.next_state(TaskStatus.ACCEPTED, TaskAction.REJECT)


class TestTerminalStates:
    @pytest.mark.parametrize("status", [
        TaskStatus.COMPLETED, TaskStatus.REJECTED, TaskStatus.CANCELLED,
    ])
    def test_terminal_has_no_actions(self, lifecycle, status):
        assert lifecycle.is_terminal(status)
        assert lifecycle.get_valid_actions(status) == []

    def test_pending_not_terminal(self, lifecycle):
        assert not lifecycle.is_terminal(TaskStatus.PENDING)
