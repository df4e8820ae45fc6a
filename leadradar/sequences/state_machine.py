"""Allowed status transitions for sequence steps."""

from __future__ import annotations

from leadradar.core.enums import StepStatus
from leadradar.core.exceptions import ConflictError


class InvalidTransitionError(ConflictError):
    """Raised when a disallowed state transition is attempted."""


class StateMachine:
    """Simple in-memory state machine over string statuses."""

    def __init__(self, transitions: dict[str, set[str]]) -> None:
        self._transitions = transitions

    def can_transition(self, current: str, target: str) -> bool:
        return target in self._transitions.get(current, set())

    def assert_transition(self, current: str, target: str) -> None:
        if not self.can_transition(current=current, target=target):
            raise InvalidTransitionError(f"Transition not allowed: {current} -> {target}")


# A pending step may move to SENT or SKIPPED exactly once; a reschedule keeps it PENDING.
STEP_TRANSITIONS = StateMachine(
    {
        StepStatus.PENDING.value: {
            StepStatus.PENDING.value,
            StepStatus.SENT.value,
            StepStatus.SKIPPED.value,
        },
    }
)
