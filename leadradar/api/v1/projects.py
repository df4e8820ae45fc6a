"""Project endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Header, HTTPException, Query, status
from sqlalchemy.orm import Session

from leadradar.api.v1._authz import authorize_or_raise
from leadradar.api.v1._errors import raise_http_error
from leadradar.core.exceptions import LeadRadarException
from leadradar.database.db import get_db_session
from leadradar.schemas.projects import (
    AccountPlaybookResponse,
    BoardItem,
    EnrichResponse,
    ImportOutcomeResponse,
    ImportResponse,
    ProjectCreateRequest,
    ProjectImportRequest,
    ProjectPlaybookResponse,
    ProjectResponse,
    ProjectSummary,
)
from leadradar.services.project_service import ProjectService

router = APIRouter(prefix="/projects", tags=["projects"])


def _authorize(authorization: str | None, scopes: list[str]):
    return authorize_or_raise(authorization, scopes)


def _projects(session: Session) -> ProjectService:
    return ProjectService(db=session)


@router.get("")
def list_projects(
    limit: int = Query(default=50, ge=1, le=100),
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict:
    user = _authorize(authorization, ["projects.read"])
    with get_db_session() as session:
        projects = _projects(session).list_projects(user.user_id, limit=limit)
        return {"projects": [ProjectSummary.model_validate(project).model_dump() for project in projects]}


@router.get("/board")
def board(authorization: str | None = Header(default=None, alias="Authorization")) -> dict:
    user = _authorize(authorization, ["projects.read"])
    with get_db_session() as session:
        entries = _projects(session).list_board(user.user_id)
        items = [
            BoardItem(
                project=ProjectSummary.model_validate(entry.project),
                next_sequence_step_due_at=entry.next_sequence_step_due_at,
                has_overdue_sequence_step=entry.has_overdue_sequence_step,
                overdue_count=entry.overdue_count,
            ).model_dump()
            for entry in entries
        ]
        return {"items": items}


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> ProjectResponse:
    user = _authorize(authorization, ["projects.write"])
    with get_db_session() as session:
        try:
            project = _projects(session).create_project(user.user_id, payload.url, payload.name)
        except LeadRadarException as exc:
            raise_http_error(exc, "create project")
        return ProjectResponse.model_validate(project)


@router.post("/import", response_model=ImportResponse)
def import_projects(
    payload: ProjectImportRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> ImportResponse:
    user = _authorize(authorization, ["projects.write"])
    if not payload.rows and not payload.csv_text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Provide rows or csv_text.")

    with get_db_session() as session:
        service = _projects(session)
        try:
            if payload.csv_text:
                result = service.import_csv(user.user_id, payload.csv_text)
            else:
                result = service.import_projects(user.user_id, [row.model_dump() for row in payload.rows])
        except LeadRadarException as exc:
            raise_http_error(exc, "import projects")

    return ImportResponse(
        created=result.count("created"),
        duplicate=result.count("duplicate"),
        invalid=result.count("invalid"),
        rows=[ImportOutcomeResponse(**vars(outcome)) for outcome in result.outcomes],
    )


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: str,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> ProjectResponse:
    user = _authorize(authorization, ["projects.read"])
    with get_db_session() as session:
        try:
            project = _projects(session).get_project(project_id, user.user_id)
        except LeadRadarException as exc:
            raise_http_error(exc, "load project")
        return ProjectResponse.model_validate(project)


@router.post("/{project_id}/enrich", response_model=EnrichResponse)
def enrich_project(
    project_id: str,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> EnrichResponse:
    user = _authorize(authorization, ["projects.write"])
    with get_db_session() as session:
        try:
            result = _projects(session).enrich_from_url(project_id, user.user_id)
        except LeadRadarException as exc:
            raise_http_error(exc, "enrich project")
        return EnrichResponse(
            project=ProjectResponse.model_validate(result.project),
            icp_score=result.scoring.score,
            icp_explanation=result.scoring.explanation,
        )


@router.post("/{project_id}/playbook", response_model=ProjectPlaybookResponse)
def generate_playbook(
    project_id: str,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> ProjectPlaybookResponse:
    user = _authorize(authorization, ["projects.write"])
    with get_db_session() as session:
        try:
            result = _projects(session).generate_playbook(project_id, user.user_id)
        except LeadRadarException as exc:
            raise_http_error(exc, "generate playbook")
        return ProjectPlaybookResponse(
            project=ProjectResponse.model_validate(result.project),
            playbook=AccountPlaybookResponse(**vars(result.playbook)),
        )
