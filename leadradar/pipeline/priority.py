"""Board ordering for prospect projects by sequence urgency."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from functools import cmp_to_key
from typing import Any, TypeVar

ProjectT = TypeVar("ProjectT")

_EPOCH = datetime(1970, 1, 1)


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def _delta(left: datetime, right: datetime) -> int:
    return _sign((left - right).total_seconds())


def compare_projects(a: Any, b: Any) -> int:
    """Three-way comparator; negative means ``a`` ranks first.

    1. both overdue: earlier due date first (missing counts as epoch)
    2. exactly one overdue: that one first
    3. both have a due date: earlier first
    4. only one has a due date: that one first
    5. most recently updated first
    """
    a_overdue = bool(a.has_overdue_sequence_step)
    b_overdue = bool(b.has_overdue_sequence_step)
    a_due = a.next_sequence_step_due_at
    b_due = b.next_sequence_step_due_at

    if a_overdue and b_overdue:
        diff = _delta(a_due or _EPOCH, b_due or _EPOCH)
        if diff:
            return diff
    elif a_overdue != b_overdue:
        return -1 if a_overdue else 1

    if a_due is not None and b_due is not None:
        diff = _delta(a_due, b_due)
        if diff:
            return diff
    elif a_due is not None:
        return -1
    elif b_due is not None:
        return 1

    return _delta(b.updated_at or _EPOCH, a.updated_at or _EPOCH)


def sort_projects_by_priority(projects: Iterable[ProjectT]) -> list[ProjectT]:
    """Return a new, stably sorted list; the input is left untouched."""
    return sorted(projects, key=cmp_to_key(compare_projects))
