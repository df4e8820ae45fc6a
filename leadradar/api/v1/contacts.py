"""Contact capture endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Header

from leadradar.api.v1._authz import authorize_or_raise
from leadradar.api.v1._errors import raise_http_error
from leadradar.core.exceptions import LeadRadarException
from leadradar.database.db import get_db_session
from leadradar.schemas.contacts import QuickCaptureRequest, QuickCaptureResponse
from leadradar.services.contact_service import ContactService

router = APIRouter(prefix="/contacts", tags=["contacts"])


def _authorize(authorization: str | None, scopes: list[str]):
    return authorize_or_raise(authorization, scopes)


@router.post("/quick-capture", response_model=QuickCaptureResponse)
def quick_capture(
    payload: QuickCaptureRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> QuickCaptureResponse:
    user = _authorize(authorization, ["contacts.write"])
    with get_db_session() as session:
        try:
            result = ContactService(db=session).quick_capture(user.user_id, **payload.model_dump())
        except LeadRadarException as exc:
            raise_http_error(exc, "quick-capture contact")
        return QuickCaptureResponse(**vars(result))
