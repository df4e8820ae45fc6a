"""Pick the one pending outreach step to act on next."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any, TypeVar

from leadradar.core.enums import StepStatus

StepT = TypeVar("StepT")


def pick_next_sequence_step(steps: Sequence[StepT], now: datetime) -> StepT | None:
    """Return the next actionable step or None when nothing is pending.

    Steps need ``status`` and ``scheduled_at``. The earliest overdue step wins,
    then the earliest upcoming one; when no pending step is scheduled the first
    pending step in input order is returned. Sorting is stable, so equal
    timestamps keep their input order.
    """
    pending = [step for step in steps if _status(step) == StepStatus.PENDING.value]
    if not pending:
        return None

    overdue = [step for step in pending if _scheduled(step) is not None and _scheduled(step) < now]
    if overdue:
        return min(overdue, key=_scheduled)

    upcoming = [step for step in pending if _scheduled(step) is not None and _scheduled(step) >= now]
    if upcoming:
        return min(upcoming, key=_scheduled)

    return pending[0]


def _status(step: Any) -> str | None:
    status = getattr(step, "status", None)
    return getattr(status, "value", status)


def _scheduled(step: Any) -> datetime | None:
    return getattr(step, "scheduled_at", None)
