"""ICP, voice and playbook settings endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Header, status
from sqlalchemy.orm import Session

from leadradar.api.v1._authz import authorize_or_raise
from leadradar.api.v1._errors import raise_http_error
from leadradar.core.exceptions import LeadRadarException
from leadradar.database.db import get_db_session
from leadradar.schemas.settings import PlaybookRequest, PlaybookResponse, SettingsResponse, SettingsUpdateRequest
from leadradar.services.settings_service import SettingsService

router = APIRouter(prefix="/settings", tags=["settings"])


def _authorize(authorization: str | None, scopes: list[str]):
    return authorize_or_raise(authorization, scopes)


def _settings(session: Session) -> SettingsService:
    return SettingsService(db=session)


@router.get("", response_model=SettingsResponse)
def get_settings(authorization: str | None = Header(default=None, alias="Authorization")) -> SettingsResponse:
    user = _authorize(authorization, ["settings.read"])
    with get_db_session() as session:
        try:
            current = _settings(session).get_settings(user.user_id)
        except LeadRadarException as exc:
            raise_http_error(exc, "load settings")
        return SettingsResponse(**vars(current))


@router.put("", response_model=SettingsResponse)
def update_settings(
    payload: SettingsUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> SettingsResponse:
    user = _authorize(authorization, ["settings.write"])
    with get_db_session() as session:
        try:
            # Voice and representing project are only replaced when sent.
            updated = _settings(session).update_settings(user.user_id, **payload.model_dump(exclude_unset=True))
        except LeadRadarException as exc:
            raise_http_error(exc, "update settings")
        return SettingsResponse(**vars(updated))


@router.get("/playbooks", response_model=list[PlaybookResponse])
def list_playbooks(authorization: str | None = Header(default=None, alias="Authorization")) -> list[PlaybookResponse]:
    user = _authorize(authorization, ["settings.read"])
    with get_db_session() as session:
        return [PlaybookResponse.model_validate(playbook) for playbook in _settings(session).list_playbooks(user.user_id)]


@router.post("/playbooks", response_model=PlaybookResponse, status_code=status.HTTP_201_CREATED)
def create_playbook(
    payload: PlaybookRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> PlaybookResponse:
    user = _authorize(authorization, ["settings.write"])
    with get_db_session() as session:
        try:
            playbook = _settings(session).create_playbook(user.user_id, **payload.model_dump())
        except LeadRadarException as exc:
            raise_http_error(exc, "create playbook")
        return PlaybookResponse.model_validate(playbook)


@router.put("/playbooks/{playbook_id}", response_model=PlaybookResponse)
def update_playbook(
    playbook_id: str,
    payload: PlaybookRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> PlaybookResponse:
    user = _authorize(authorization, ["settings.write"])
    with get_db_session() as session:
        try:
            playbook = _settings(session).update_playbook(playbook_id, user.user_id, **payload.model_dump())
        except LeadRadarException as exc:
            raise_http_error(exc, "update playbook")
        return PlaybookResponse.model_validate(playbook)


@router.delete("/playbooks/{playbook_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_playbook(
    playbook_id: str,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> None:
    user = _authorize(authorization, ["settings.write"])
    with get_db_session() as session:
        try:
            _settings(session).delete_playbook(playbook_id, user.user_id)
        except LeadRadarException as exc:
            raise_http_error(exc, "delete playbook")
