"""Session-holding base for LeadRadar services."""

from __future__ import annotations

from typing import TypeVar

from sqlalchemy.orm import Session

from leadradar.core.exceptions import NotFoundError
from leadradar.database import db as database

ModelT = TypeVar("ModelT")


class BaseService:
    """Owns one SQLAlchemy session; every read is scoped to the calling user."""

    def __init__(self, db: Session | None = None) -> None:
        # Resolved per instance so an engine rebound to the SQLite fallback is used.
        self.db = db or database.new_session()

    def get_owned(self, model: type[ModelT], record_id: str, user_id: str, label: str) -> ModelT:
        """Row ``record_id`` of ``model`` belonging to ``user_id``; another user's row is indistinguishable from a missing one."""
        record = self.db.query(model).filter(model.id == record_id, model.user_id == user_id).first()
        if record is None:
            raise NotFoundError(f"{label} not found: {record_id}")
        return record

    def commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def rollback(self) -> None:
        self.db.rollback()
