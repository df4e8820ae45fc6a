"""Contact duplicate detection within a project.

Two contacts of the same project are duplicates when any supplied handle
(email, LinkedIn URL, Twitter handle, Telegram) matches exactly. A name alone
never dedupes. Callers normalize handles before building the predicate.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy import and_, or_

DEDUP_FIELDS = ("email", "linkedin_url", "twitter_handle", "telegram")
MERGE_FIELDS = ("role", "linkedin_url", "twitter_handle", "telegram", "email")


@dataclass(frozen=True)
class ContactHandles:
    email: str | None = None
    linkedin_url: str | None = None
    twitter_handle: str | None = None
    telegram: str | None = None


@dataclass(frozen=True)
class ContactDedupWhere:
    """``project_id == X AND (field1 == v1 OR field2 == v2 ...)``."""

    project_id: str
    clauses: tuple[tuple[str, str], ...]

    def matches(self, contact: Any) -> bool:
        if _read(contact, "project_id") != self.project_id:
            return False
        return any(_read(contact, field) == value for field, value in self.clauses)

    def to_sqlalchemy(self, model: Any):
        return and_(
            model.project_id == self.project_id,
            or_(*(getattr(model, field) == value for field, value in self.clauses)),
        )


def _read(source: Any, field: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(field)
    return getattr(source, field, None)


def build_contact_dedup_where(
    project_id: str,
    handles: ContactHandles | Mapping[str, str | None],
) -> ContactDedupWhere | None:
    """Return the duplicate predicate, or None when every handle is empty."""
    clauses = []
    for field in DEDUP_FIELDS:
        value = _read(handles, field)
        if value:
            clauses.append((field, value))
    if not clauses:
        return None
    return ContactDedupWhere(project_id=project_id, clauses=tuple(clauses))


def merge_contact_fields(existing: Any, incoming: Mapping[str, str | None]) -> dict[str, str]:
    """Return the updates that fill currently empty fields; set values are never overwritten."""
    updates: dict[str, str] = {}
    for field in MERGE_FIELDS:
        value = incoming.get(field)
        if value and not _read(existing, field):
            updates[field] = value
    return updates
