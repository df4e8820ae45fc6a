"""Roll pending sequence steps up into per-project due-date summaries."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class ProjectStepMeta:
    next_due_at: datetime | None = None
    has_overdue: bool = False
    overdue_count: int = 0


def _project_id(step: Any) -> str | None:
    project_id = getattr(step, "project_id", None)
    if project_id is not None:
        return project_id
    sequence = getattr(step, "sequence", None)
    return getattr(sequence, "project_id", None)


def build_step_meta(
    steps: Iterable[Any],
    project_ids: Iterable[str],
    now: datetime,
) -> dict[str, ProjectStepMeta]:
    """Return one ``ProjectStepMeta`` per requested project; steps for other projects are ignored."""
    meta = {project_id: ProjectStepMeta() for project_id in project_ids}
    for step in steps:
        entry = meta.get(_project_id(step))
        if entry is None:
            continue
        due = getattr(step, "scheduled_at", None)
        if due is None:
            continue
        if entry.next_due_at is None or due < entry.next_due_at:
            entry.next_due_at = due
        if due < now:
            entry.has_overdue = True
            entry.overdue_count += 1
    return meta
