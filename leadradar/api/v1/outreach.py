"""Outreach generation endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Header
from sqlalchemy.orm import Session

from leadradar.api.v1._authz import authorize_or_raise
from leadradar.api.v1._errors import raise_http_error
from leadradar.core.exceptions import LeadRadarException
from leadradar.database.db import get_db_session
from leadradar.schemas.outreach import OutreachGenerateRequest, OutreachMessageResponse
from leadradar.services.outreach_service import OutreachService

router = APIRouter(prefix="/outreach", tags=["outreach"])


def _authorize(authorization: str | None, scopes: list[str]):
    return authorize_or_raise(authorization, scopes)


def _outreach(session: Session) -> OutreachService:
    return OutreachService(db=session)


@router.post("/generate", response_model=list[OutreachMessageResponse])
def generate(
    payload: OutreachGenerateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> list[OutreachMessageResponse]:
    user = _authorize(authorization, ["outreach.generate"])
    with get_db_session() as session:
        try:
            messages = _outreach(session).generate(
                user.user_id,
                payload.project_id,
                payload.contact_id,
                payload.channels,
                payload.custom_content,
            )
        except LeadRadarException as exc:
            raise_http_error(exc, "generate outreach")
        return [OutreachMessageResponse.model_validate(message) for message in messages]
