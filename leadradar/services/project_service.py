"""Prospect projects: quick-create, CSV import, enrichment and the priority board."""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import datetime
from urllib.parse import urlsplit

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from leadradar.core.config import Config, get_config
from leadradar.core.enums import StepStatus
from leadradar.core.exceptions import ConflictError, FetchError, ValidationError
from leadradar.database.models import Project, Sequence, SequenceStep
from leadradar.discovery.urls import is_http_url
from leadradar.llm.ai_service import AIService
from leadradar.llm.types import AccountPlaybookDraft, ProjectAnalysis, ScoreResult
from leadradar.pipeline.priority import sort_projects_by_priority
from leadradar.pipeline.step_meta import build_step_meta
from leadradar.scraper.fetch_html import FetchResult, HtmlFetcher, fetch_html
from leadradar.scraper.metadata import extract_project_socials
from leadradar.services.base_service import BaseService
from leadradar.services.project_analysis import analysis_from_project, apply_analysis, apply_socials
from leadradar.services.user_context import UserContext, load_user_context
from leadradar.utils.clock import utcnow_naive
from leadradar.utils.validators import optional_text, serialize_json

logger = logging.getLogger(__name__)

MAX_IMPORT_ROWS = 50
UNFETCHED_TEXT = "Could not fetch site; using mock content for analysis."


@dataclass
class EnrichmentResult:
    project: Project
    analysis: ProjectAnalysis
    scoring: ScoreResult


@dataclass
class PlaybookResult:
    project: Project
    playbook: AccountPlaybookDraft


@dataclass
class ImportRowOutcome:
    row: int
    url: str | None
    status: str
    project_id: str | None = None
    detail: str | None = None


@dataclass
class ImportResult:
    outcomes: list[ImportRowOutcome] = field(default_factory=list)

    def count(self, status: str) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)


@dataclass
class BoardEntry:
    """A project plus the due-date facts the board is ordered by."""

    project: Project
    next_sequence_step_due_at: datetime | None = None
    has_overdue_sequence_step: bool = False
    overdue_count: int = 0

    @property
    def updated_at(self) -> datetime | None:
        return self.project.updated_at


def _is_person_profile(url: str) -> bool:
    parts = urlsplit(url)
    host = (parts.hostname or "").lower()
    path = parts.path.lower()
    return "linkedin.com" in host and ("/in/" in path or "/people/" in path)


class ProjectService(BaseService):
    def __init__(
        self,
        db: Session | None = None,
        fetcher: HtmlFetcher | None = None,
        ai: AIService | None = None,
        config: Config | None = None,
    ) -> None:
        super().__init__(db)
        self.config = config or get_config()
        self.fetcher = fetcher or fetch_html
        self.ai = ai or AIService(config=self.config)

    def get_project(self, project_id: str, user_id: str) -> Project:
        return self.get_owned(Project, project_id, user_id, "Project")

    def find_by_url(self, user_id: str, url: str) -> Project | None:
        return self.db.query(Project).filter(Project.user_id == user_id, Project.url == url).first()

    def list_projects(self, user_id: str, limit: int = 50) -> list[Project]:
        return (
            self.db.query(Project)
            .filter(Project.user_id == user_id)
            .order_by(Project.updated_at.desc())
            .limit(max(1, min(100, limit)))
            .all()
        )

    def _fetch_or_placeholder(self, url: str) -> FetchResult:
        try:
            return self.fetcher(url)
        except FetchError as exc:
            logger.warning(
                "project.fetch.failed",
                extra={"event": "project.fetch.failed", "url": url, "error": str(exc)},
            )
            return FetchResult(html="", text=UNFETCHED_TEXT)

    def _analyzed_project(
        self,
        user_id: str,
        url: str,
        name: str | None,
        context: UserContext,
    ) -> Project:
        page = self._fetch_or_placeholder(url)
        icp = context.icp_context
        analysis = self.ai.analyze_project(page.text, url, context.plan, icp, context.representing)
        scoring = self.ai.score_project(analysis, context.plan, icp, context.representing)

        project = Project(user_id=user_id, url=url, name=name or urlsplit(url).hostname or url)
        apply_analysis(project, analysis, scoring)
        apply_socials(project, extract_project_socials(page.html))
        return project

    def create_project(self, user_id: str, url: str, name: str | None = None) -> Project:
        """Quick-create a project from a URL; an existing URL raises ``ConflictError``."""
        url = (url or "").strip()
        if not is_http_url(url):
            raise ValidationError("Invalid URL")
        if _is_person_profile(url):
            raise ValidationError(
                "That looks like a person profile. Use Quick Capture for contacts instead of projects."
            )

        existing = self.find_by_url(user_id, url)
        if existing is not None:
            raise ConflictError("Project with this URL already exists", existing_id=existing.id)

        context = load_user_context(self.db, user_id)
        project = self._analyzed_project(user_id, url, optional_text(name), context)
        self.db.add(project)
        try:
            self.commit()
        except IntegrityError as exc:
            duplicate = self.find_by_url(user_id, url)
            raise ConflictError(
                "Project with this URL already exists",
                existing_id=duplicate.id if duplicate else None,
            ) from exc
        self.db.refresh(project)
        logger.info("project.created", extra={"event": "project.created", "project_id": project.id})
        return project

    def import_projects(self, user_id: str, rows: list[dict[str, str | None]]) -> ImportResult:
        """Create projects row by row; each row reports created, duplicate or invalid."""
        result = ImportResult()
        context = load_user_context(self.db, user_id)

        for index, row in enumerate(rows[:MAX_IMPORT_ROWS], start=1):
            url = (row.get("url") or "").strip()
            if not url or not is_http_url(url):
                result.outcomes.append(
                    ImportRowOutcome(row=index, url=url or None, status="invalid", detail="Missing or invalid url")
                )
                continue

            existing = self.find_by_url(user_id, url)
            if existing is not None:
                result.outcomes.append(ImportRowOutcome(row=index, url=url, status="duplicate", project_id=existing.id))
                continue

            project = self._analyzed_project(user_id, url, optional_text(row.get("name")), context)
            self.db.add(project)
            try:
                self.commit()
            except IntegrityError:
                result.outcomes.append(ImportRowOutcome(row=index, url=url, status="duplicate"))
                continue
            result.outcomes.append(ImportRowOutcome(row=index, url=url, status="created", project_id=project.id))

        logger.info(
            "project.import.completed",
            extra={
                "event": "project.import.completed",
                "user_id": user_id,
                "created_count": result.count("created"),
                "duplicate": result.count("duplicate"),
                "invalid": result.count("invalid"),
            },
        )
        return result

    def import_csv(self, user_id: str, text: str) -> ImportResult:
        reader = csv.DictReader(io.StringIO(text))
        rows = []
        for record in reader:
            cleaned = {(key or "").strip().lower(): (value or "").strip() for key, value in record.items() if key}
            if any(cleaned.values()):
                rows.append(cleaned)
        return self.import_projects(user_id, rows)

    def enrich_from_url(self, project_id: str, user_id: str) -> EnrichmentResult:
        """Re-run analysis and scoring from the project's site.

        A failed fetch analyses empty text; the AI layer falls back to its
        deterministic mocks, so enrichment only fails for a missing project or
        URL.
        """
        project = self.get_project(project_id, user_id)
        if not project.url:
            raise ValidationError("Project has no URL to enrich from.")

        try:
            page = self.fetcher(project.url)
        except FetchError as exc:
            logger.warning(
                "project.enrich.fetch_failed",
                extra={"event": "project.enrich.fetch_failed", "project_id": project.id, "error": str(exc)},
            )
            page = FetchResult(html="", text="")

        context = load_user_context(self.db, user_id)
        icp = context.icp_context
        analysis = self.ai.analyze_project(page.text, project.url, context.plan, icp, context.representing)
        scoring = self.ai.score_project(analysis, context.plan, icp, context.representing)

        apply_analysis(project, analysis, scoring)
        if page.html:
            apply_socials(project, extract_project_socials(page.html))
        self.commit()
        self.db.refresh(project)
        logger.info("project.enriched", extra={"event": "project.enriched", "project_id": project.id})
        return EnrichmentResult(project=project, analysis=analysis, scoring=scoring)

    def generate_playbook(self, project_id: str, user_id: str) -> PlaybookResult:
        """Draft an account playbook from the stored analysis and keep its summary, personas and angles."""
        project = self.get_project(project_id, user_id)
        if not project.summary:
            raise ValidationError("Project needs analysis before playbook")

        context = load_user_context(self.db, user_id)
        draft = self.ai.generate_account_playbook(
            analysis_from_project(project), context.plan, context.icp_context, context.representing
        )
        project.playbook_summary = draft.summary
        project.playbook_personas = serialize_json(draft.recommended_personas)
        project.playbook_angles = serialize_json(draft.primary_angles)
        self.commit()
        self.db.refresh(project)
        logger.info("project.playbook.generated", extra={"event": "project.playbook.generated", "project_id": project.id})
        return PlaybookResult(project=project, playbook=draft)

    def list_board(self, user_id: str, now: datetime | None = None) -> list[BoardEntry]:
        """Projects ordered by sequence urgency: overdue first, then next due, then recent."""
        current_time = now or utcnow_naive()
        projects = self.db.query(Project).filter(Project.user_id == user_id).all()
        if not projects:
            return []

        project_ids = [project.id for project in projects]
        pending = (
            self.db.query(SequenceStep.scheduled_at, Sequence.project_id)
            .join(Sequence, SequenceStep.sequence_id == Sequence.id)
            .filter(
                Sequence.user_id == user_id,
                Sequence.project_id.in_(project_ids),
                SequenceStep.status == StepStatus.PENDING.value,
                SequenceStep.scheduled_at.isnot(None),
            )
            .all()
        )
        meta = build_step_meta(pending, project_ids, current_time)

        entries = [
            BoardEntry(
                project=project,
                next_sequence_step_due_at=meta[project.id].next_due_at,
                has_overdue_sequence_step=meta[project.id].has_overdue,
                overdue_count=meta[project.id].overdue_count,
            )
            for project in projects
        ]
        return sort_projects_by_priority(entries)
