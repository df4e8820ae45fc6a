"""Discovery and opportunity triage endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Header, Query, status
from sqlalchemy.orm import Session

from leadradar.api.v1._authz import authorize_or_raise
from leadradar.api.v1._errors import raise_http_error
from leadradar.core.enums import OpportunityStatus
from leadradar.core.exceptions import LeadRadarException
from leadradar.database.db import get_db_session
from leadradar.schemas.discover import (
    OpportunityResponse,
    ScanPageRequest,
    ScanResponse,
    ScanTextRequest,
    SnoozeRequest,
    WatchlistCreateRequest,
    WatchlistResponse,
)
from leadradar.schemas.projects import ProjectResponse
from leadradar.services.discovery_service import DiscoveryService, ScanResult
from leadradar.services.opportunity_service import OpportunityService

router = APIRouter(prefix="/discover", tags=["discover"])


def _authorize(authorization: str | None, scopes: list[str]):
    return authorize_or_raise(authorization, scopes)


def _discovery(session: Session) -> DiscoveryService:
    return DiscoveryService(db=session)


def _opportunities(session: Session) -> OpportunityService:
    return OpportunityService(db=session)


def _scan_response(result: ScanResult, message: str | None = None) -> ScanResponse:
    return ScanResponse(
        created_count=len(result.created),
        skipped_count=len(result.skipped),
        attempted=result.attempted,
        failed=result.failed,
        message=message,
        created=[OpportunityResponse.model_validate(item) for item in result.created],
    )


@router.post("/scan-text", response_model=ScanResponse)
def scan_text(
    payload: ScanTextRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> ScanResponse:
    user = _authorize(authorization, ["discover.scan"])
    with get_db_session() as session:
        try:
            result = _discovery(session).scan_text(user.user_id, payload.text, payload.source_label)
        except LeadRadarException as exc:
            raise_http_error(exc, "scan text")
        message = None if result.attempted else "No URLs detected"
        return _scan_response(result, message)


@router.post("/scan-page", response_model=ScanResponse)
def scan_page(
    payload: ScanPageRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> ScanResponse:
    user = _authorize(authorization, ["discover.scan"])
    with get_db_session() as session:
        try:
            result = _discovery(session).scan_page(user.user_id, payload.url, payload.source_label)
        except LeadRadarException as exc:
            raise_http_error(exc, "scan page")
        return _scan_response(result)


@router.post("/scan-watchlist", response_model=ScanResponse)
def scan_watchlist(authorization: str | None = Header(default=None, alias="Authorization")) -> ScanResponse:
    user = _authorize(authorization, ["discover.scan"])
    with get_db_session() as session:
        try:
            result = _discovery(session).scan_watchlist(user.user_id)
        except LeadRadarException as exc:
            raise_http_error(exc, "scan watchlist")
        return _scan_response(result)


@router.get("/watchlist")
def list_watchlist(authorization: str | None = Header(default=None, alias="Authorization")) -> dict:
    user = _authorize(authorization, ["opportunities.read"])
    with get_db_session() as session:
        items = _discovery(session).list_watchlist(user.user_id)
        return {"items": [WatchlistResponse.model_validate(item).model_dump() for item in items]}


@router.post("/watchlist", response_model=WatchlistResponse, status_code=status.HTTP_201_CREATED)
def add_watchlist_url(
    payload: WatchlistCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> WatchlistResponse:
    user = _authorize(authorization, ["opportunities.write"])
    with get_db_session() as session:
        try:
            item = _discovery(session).add_watchlist_url(user.user_id, payload.url, payload.label)
        except LeadRadarException as exc:
            raise_http_error(exc, "add watchlist url")
        return WatchlistResponse.model_validate(item)


@router.get("/opportunities")
def list_opportunities(
    status_filter: list[OpportunityStatus] | None = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=100),
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict:
    user = _authorize(authorization, ["opportunities.read"])
    statuses = [item.value for item in status_filter] if status_filter else None
    with get_db_session() as session:
        items = _opportunities(session).list_opportunities(user.user_id, statuses=statuses, limit=limit)
        return {"items": [OpportunityResponse.model_validate(item).model_dump() for item in items]}


@router.post("/{opportunity_id}/convert", response_model=ProjectResponse)
def convert(
    opportunity_id: str,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> ProjectResponse:
    user = _authorize(authorization, ["opportunities.write", "projects.write"])
    with get_db_session() as session:
        try:
            project = _opportunities(session).convert_to_project(opportunity_id, user.user_id)
        except LeadRadarException as exc:
            raise_http_error(exc, "convert opportunity")
        return ProjectResponse.model_validate(project)


@router.post("/{opportunity_id}/discard")
def discard(
    opportunity_id: str,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict:
    user = _authorize(authorization, ["opportunities.write"])
    with get_db_session() as session:
        try:
            opportunity = _opportunities(session).discard(opportunity_id, user.user_id)
        except LeadRadarException as exc:
            raise_http_error(exc, "discard opportunity")
        return {"success": True, "status": opportunity.status}


@router.post("/{opportunity_id}/snooze")
def snooze(
    opportunity_id: str,
    payload: SnoozeRequest | None = None,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict:
    user = _authorize(authorization, ["opportunities.write"])
    days = payload.days if payload else None
    with get_db_session() as session:
        try:
            opportunity = _opportunities(session).snooze(opportunity_id, user.user_id, days=days)
        except LeadRadarException as exc:
            raise_http_error(exc, "snooze opportunity")
        return {"success": True, "next_review_at": opportunity.next_review_at}
