"""Account registration and credential checks."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from leadradar.auth.passwords import hash_password, verify_password
from leadradar.core.enums import UserPlan, UserRole
from leadradar.core.exceptions import AuthenticationError, ConflictError, ValidationError
from leadradar.database.models import User
from leadradar.services.base_service import BaseService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class UserService(BaseService):
    def get_user(self, user_id: str) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def register(self, email: str, password: str, name: str | None = None) -> User:
        normalized = (email or "").strip().lower()
        if "@" not in normalized:
            raise ValidationError("A valid email is required.")
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        if self.db.query(User.id).filter(User.email == normalized).first() is not None:
            raise ConflictError("An account with this email already exists.")

        user = User(
            email=normalized,
            name=(name or "").strip() or None,
            password_hash=hash_password(password),
            role=UserRole.MEMBER.value,
            plan=UserPlan.FREE.value,
        )
        self.db.add(user)
        try:
            self.commit()
        except IntegrityError as exc:
            raise ConflictError("An account with this email already exists.") from exc
        self.db.refresh(user)
        logger.info("user.registered", extra={"event": "user.registered", "user_id": user.id})
        return user

    def authenticate(self, email: str, password: str) -> User:
        user = self.db.query(User).filter(User.email == (email or "").strip().lower()).first()
        if user is None or not verify_password(password or "", user.password_hash):
            raise AuthenticationError("Invalid credentials.")
        return user
