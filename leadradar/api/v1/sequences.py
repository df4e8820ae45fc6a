"""Sequence step endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Header
from sqlalchemy.orm import Session

from leadradar.api.v1._authz import authorize_or_raise
from leadradar.api.v1._errors import raise_http_error
from leadradar.core.exceptions import LeadRadarException
from leadradar.database.db import get_db_session
from leadradar.schemas.sequences import (
    NextStepResponse,
    SequenceStepResponse,
    StepActionRequest,
    StepActionResponse,
)
from leadradar.services.sequence_service import SequenceService

router = APIRouter(prefix="/sequences", tags=["sequences"])


def _authorize(authorization: str | None, scopes: list[str]):
    return authorize_or_raise(authorization, scopes)


def _sequences(session: Session) -> SequenceService:
    return SequenceService(db=session)


@router.get("/next-step", response_model=NextStepResponse)
def next_step(authorization: str | None = Header(default=None, alias="Authorization")) -> NextStepResponse:
    user = _authorize(authorization, ["sequences.read"])
    with get_db_session() as session:
        step = _sequences(session).get_next_step(user.user_id)
        if step is None:
            return NextStepResponse()
        sequence = step.sequence
        return NextStepResponse(
            step=SequenceStepResponse.model_validate(step),
            project_id=sequence.project_id,
            project_name=sequence.project.name if sequence.project else None,
            contact_id=sequence.contact_id,
            contact_name=sequence.contact.name if sequence.contact else None,
        )


@router.post("/next-step", response_model=StepActionResponse)
def apply_step_action(
    payload: StepActionRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> StepActionResponse:
    user = _authorize(authorization, ["sequences.write"])
    with get_db_session() as session:
        try:
            result = _sequences(session).apply_action(
                user.user_id,
                payload.step_id,
                payload.action,
                scheduled_at=payload.scheduled_at,
                expected_version=payload.version,
            )
        except LeadRadarException as exc:
            raise_http_error(exc, "update step")
        return StepActionResponse(
            step=SequenceStepResponse.model_validate(result.step),
            next_follow_up_at=result.next_follow_up_at,
        )
