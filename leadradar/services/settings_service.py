"""Per-user scoring inputs: the ICP profile, AI voice, representing project and playbooks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from leadradar.core.exceptions import NotFoundError, ValidationError
from leadradar.database.models import ICPProfile, Playbook, User
from leadradar.services.base_service import BaseService
from leadradar.utils.validators import optional_text, parse_json_string, serialize_json

logger = logging.getLogger(__name__)

_UNSET: Any = object()


@dataclass
class UserSettings:
    industries: str | None = None
    pain_points: str | None = None
    filters: dict[str, Any] | None = None
    ai_voice: dict[str, Any] | None = None
    representing_project: dict[str, Any] | None = None


def _clean_keywords(values: list[str] | None) -> list[str]:
    return [value.strip() for value in values or [] if value and value.strip()]


def _clean_representing(raw: dict[str, Any] | None) -> dict[str, Any] | None:
    """Blank names clear the representing project; reference accounts are trimmed strings."""
    if not raw or not str(raw.get("name") or "").strip():
        return None
    cleaned = {key: value for key, value in raw.items() if value is not None}
    cleaned["name"] = str(raw["name"]).strip()
    references = raw.get("referenceAccounts") or []
    cleaned["referenceAccounts"] = [item.strip() for item in references if isinstance(item, str) and item.strip()]
    return cleaned


class SettingsService(BaseService):
    def get_settings(self, user_id: str) -> UserSettings:
        user = self._user(user_id)
        icp = self.db.query(ICPProfile).filter(ICPProfile.user_id == user_id).first()
        filters = parse_json_string(icp.filters, fallback=None) if icp else None
        voice = parse_json_string(user.ai_voice, fallback=None)
        representing = parse_json_string(user.representing_project, fallback=None)
        return UserSettings(
            industries=icp.industries if icp else None,
            pain_points=icp.pain_points if icp else None,
            filters=filters if isinstance(filters, dict) else None,
            ai_voice=voice if isinstance(voice, dict) else None,
            representing_project=representing if isinstance(representing, dict) else None,
        )

    def update_settings(
        self,
        user_id: str,
        industries: str | None = None,
        pain_points: str | None = None,
        filters: dict[str, Any] | None = None,
        ai_voice: Any = _UNSET,
        representing_project: Any = _UNSET,
    ) -> UserSettings:
        """Upsert the ICP profile; omitted ICP text fields keep their stored values.

        ``ai_voice`` and ``representing_project`` are replaced when passed,
        including with None.
        """
        user = self._user(user_id)
        icp = self.db.query(ICPProfile).filter(ICPProfile.user_id == user_id).first()
        if icp is None:
            icp = ICPProfile(user_id=user_id)
            self.db.add(icp)

        if industries is not None:
            icp.industries = optional_text(industries, max_len=2000)
        if pain_points is not None:
            icp.pain_points = optional_text(pain_points, max_len=4000)
        icp.filters = serialize_json(filters)

        if ai_voice is not _UNSET:
            user.ai_voice = serialize_json(ai_voice)
        if representing_project is not _UNSET:
            user.representing_project = serialize_json(_clean_representing(representing_project))

        self.commit()
        logger.info("settings.updated", extra={"event": "settings.updated", "user_id": user_id})
        return self.get_settings(user_id)

    def list_playbooks(self, user_id: str) -> list[Playbook]:
        return (
            self.db.query(Playbook)
            .filter(Playbook.user_id == user_id)
            .order_by(Playbook.created_at.desc())
            .all()
        )

    def create_playbook(
        self,
        user_id: str,
        name: str,
        boosts: list[str] | None = None,
        penalties: list[str] | None = None,
        description: str | None = None,
    ) -> Playbook:
        playbook = Playbook(user_id=user_id)
        self._fill_playbook(playbook, name, boosts, penalties, description)
        self.db.add(playbook)
        self.commit()
        self.db.refresh(playbook)
        logger.info("playbook.created", extra={"event": "playbook.created", "playbook_id": playbook.id})
        return playbook

    def update_playbook(
        self,
        playbook_id: str,
        user_id: str,
        name: str,
        boosts: list[str] | None = None,
        penalties: list[str] | None = None,
        description: str | None = None,
    ) -> Playbook:
        playbook = self.get_owned(Playbook, playbook_id, user_id, "Playbook")
        self._fill_playbook(playbook, name, boosts, penalties, description)
        self.commit()
        self.db.refresh(playbook)
        return playbook

    def delete_playbook(self, playbook_id: str, user_id: str) -> None:
        playbook = self.get_owned(Playbook, playbook_id, user_id, "Playbook")
        self.db.delete(playbook)
        self.commit()
        logger.info("playbook.deleted", extra={"event": "playbook.deleted", "playbook_id": playbook_id})

    def _fill_playbook(
        self,
        playbook: Playbook,
        name: str,
        boosts: list[str] | None,
        penalties: list[str] | None,
        description: str | None,
    ) -> None:
        cleaned_name = optional_text(name, max_len=255)
        if not cleaned_name:
            raise ValidationError("Playbook name cannot be empty")
        playbook.name = cleaned_name
        playbook.description = optional_text(description)
        playbook.boosts = serialize_json(_clean_keywords(boosts))
        playbook.penalties = serialize_json(_clean_keywords(penalties))

    def _user(self, user_id: str) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise NotFoundError(f"User not found: {user_id}")
        return user
