"""Opportunity lifecycle: batch creation from discovered URLs, conversion, triage."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from leadradar.core.config import Config, get_config
from leadradar.core.enums import OpportunityStatus
from leadradar.database.models import Opportunity, Project
from leadradar.discovery.page_title import extract_page_title
from leadradar.discovery.urls import normalize_url
from leadradar.llm.ai_service import AIService
from leadradar.opportunity.scoring import score_opportunity
from leadradar.scraper.fetch_html import HtmlFetcher, fetch_html
from leadradar.services.base_service import BaseService
from leadradar.services.project_analysis import apply_analysis
from leadradar.services.sequence_service import SequenceService
from leadradar.services.user_context import UserContext, load_user_context
from leadradar.utils.clock import utcnow_naive
from leadradar.utils.validators import optional_text, parse_string_list, serialize_json

logger = logging.getLogger(__name__)

DEFAULT_MAX_COUNT = 20
TITLE_SUMMARY_CHARS = 120
NAME_SUMMARY_CHARS = 80


@dataclass
class OpportunityBatchResult:
    created: list[Opportunity] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    attempted: int = 0


class OpportunityService(BaseService):
    """Creates, converts and triages opportunities for one user at a time."""

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

    def create_opportunities(
        self,
        user_id: str,
        urls: list[str],
        source_type: str,
        source_label: str | None = None,
        raw_context: str | None = None,
        max_count: int = DEFAULT_MAX_COUNT,
    ) -> OpportunityBatchResult:
        """Score and persist one opportunity per new URL.

        URLs already seen in the batch, or already stored as an opportunity or
        project for the user, are skipped. A URL whose fetch or analysis fails
        is still stored as a minimal record titled with its URL. Creation stops
        once ``max_count`` rows exist.
        """
        source_value = getattr(source_type, "value", source_type)
        context = load_user_context(self.db, user_id)
        result = OpportunityBatchResult(attempted=len(urls))
        seen: set[str] = set()

        for raw_url in urls:
            if len(result.created) >= max_count:
                break

            normalized = normalize_url(raw_url)
            if normalized is None:
                logger.warning(
                    "opportunity.normalize.failed",
                    extra={"event": "opportunity.normalize.failed", "url": raw_url},
                )
            url = normalized or raw_url

            if url in seen:
                result.skipped.append(raw_url)
                continue
            seen.add(url)

            if self._url_known(user_id, {raw_url, url}):
                result.skipped.append(raw_url)
                continue

            try:
                fields = self._derive_fields(url, raw_url, context, source_value, raw_context)
            except Exception as exc:
                logger.warning(
                    "opportunity.derive.failed",
                    extra={"event": "opportunity.derive.failed", "url": raw_url, "error": str(exc)},
                )
                fields = {"title": url}

            opportunity = Opportunity(
                user_id=user_id,
                url=url,
                source_type=source_value,
                source_label=optional_text(source_label),
                raw_context=optional_text(raw_context),
                status=OpportunityStatus.NEW.value,
                **fields,
            )
            self.db.add(opportunity)
            try:
                self.commit()
            except IntegrityError:
                logger.info(
                    "opportunity.duplicate.race",
                    extra={"event": "opportunity.duplicate.race", "url": raw_url},
                )
                result.skipped.append(raw_url)
                continue
            result.created.append(opportunity)

        logger.info(
            "opportunity.batch.completed",
            extra={
                "event": "opportunity.batch.completed",
                "user_id": user_id,
                "source_type": source_value,
                "created_count": len(result.created),
                "skipped": len(result.skipped),
                "attempted": result.attempted,
            },
        )
        return result

    def _url_known(self, user_id: str, urls: set[str]) -> bool:
        candidates = list(urls)
        opportunity = (
            self.db.query(Opportunity.id)
            .filter(Opportunity.user_id == user_id, Opportunity.url.in_(candidates))
            .first()
        )
        if opportunity is not None:
            return True
        project = self.db.query(Project.id).filter(Project.user_id == user_id, Project.url.in_(candidates)).first()
        return project is not None

    def _derive_fields(
        self,
        url: str,
        raw_url: str,
        context: UserContext,
        source_type: str,
        raw_context: str | None,
    ) -> dict[str, Any]:
        page = self.fetcher(raw_url)
        title = extract_page_title(page.html)
        icp = context.icp_context
        analysis = self.ai.analyze_project(page.text, raw_url, context.plan, icp, context.representing)
        scoring = self.ai.score_project(analysis, context.plan, icp, context.representing)
        lead = score_opportunity(analysis, context.icp, context.playbooks, source_type, raw_context)
        return {
            "title": title or analysis.summary[:TITLE_SUMMARY_CHARS] or url,
            "tags": serialize_json(analysis.category_tags),
            "icp_score": scoring.score,
            "mqa_score": analysis.mqa_score,
            "bd_angles": serialize_json(analysis.bd_angles),
            "lead_score": lead.lead_score,
            "lead_reasons": serialize_json(lead.lead_reasons),
            "signal_strength": lead.signal_strength,
            "playbook_matches": serialize_json(lead.playbook_matches),
            "icp_profile_id": context.icp.id if context.icp else None,
        }

    def get_opportunity(self, opportunity_id: str, user_id: str) -> Opportunity:
        return self.get_owned(Opportunity, opportunity_id, user_id, "Opportunity")

    def list_opportunities(
        self,
        user_id: str,
        statuses: list[str] | None = None,
        limit: int = 50,
        now: datetime | None = None,
    ) -> list[Opportunity]:
        """Radar listing, best lead score first.

        Snoozed rows come back once their review date has passed.
        """
        current_time = now or utcnow_naive()
        wanted = statuses or [OpportunityStatus.NEW.value, OpportunityStatus.SNOOZED.value]
        query = self.db.query(Opportunity).filter(Opportunity.user_id == user_id, Opportunity.status.in_(wanted))
        if OpportunityStatus.SNOOZED.value in wanted:
            query = query.filter(
                or_(
                    Opportunity.status != OpportunityStatus.SNOOZED.value,
                    Opportunity.next_review_at.is_(None),
                    Opportunity.next_review_at <= current_time,
                )
            )
        return (
            query.order_by(Opportunity.lead_score.desc(), Opportunity.created_at.desc())
            .limit(limit)
            .all()
        )

    def discard(self, opportunity_id: str, user_id: str) -> Opportunity:
        opportunity = self.get_opportunity(opportunity_id, user_id)
        opportunity.status = OpportunityStatus.DISCARDED.value
        self.commit()
        self.db.refresh(opportunity)
        return opportunity

    def snooze(
        self,
        opportunity_id: str,
        user_id: str,
        days: int | None = None,
        now: datetime | None = None,
    ) -> Opportunity:
        opportunity = self.get_opportunity(opportunity_id, user_id)
        current_time = now or utcnow_naive()
        opportunity.status = OpportunityStatus.SNOOZED.value
        opportunity.next_review_at = current_time + timedelta(days=days or self.config.SNOOZE_DAYS)
        self.commit()
        self.db.refresh(opportunity)
        return opportunity

    def convert_to_project(self, opportunity_id: str, user_id: str) -> Project:
        """Turn an opportunity into a tracked project; repeat calls return the same project."""
        opportunity = self.get_opportunity(opportunity_id, user_id)

        if opportunity.project_id:
            linked = (
                self.db.query(Project)
                .filter(Project.id == opportunity.project_id, Project.user_id == user_id)
                .first()
            )
            if linked is not None:
                return linked

        existing = (
            self.db.query(Project)
            .filter(Project.user_id == user_id, Project.url == opportunity.url)
            .first()
        )
        if existing is not None:
            self._mark_converted(opportunity, existing)
            return existing

        context = load_user_context(self.db, user_id)
        try:
            project = self._project_from_page(opportunity, context)
        except Exception as exc:
            self.rollback()
            logger.warning(
                "opportunity.convert.fallback",
                extra={"event": "opportunity.convert.fallback", "opportunity_id": opportunity.id, "error": str(exc)},
            )
            project = self._minimal_project(opportunity)
            self.db.add(project)
            self.db.flush()

        self._mark_converted(opportunity, project)
        logger.info(
            "opportunity.converted",
            extra={"event": "opportunity.converted", "opportunity_id": opportunity.id, "project_id": project.id},
        )

        SequenceService(db=self.db, ai=self.ai).seed_engagement(
            project,
            context,
            playbook_matches=parse_string_list(opportunity.playbook_matches),
        )
        self.db.refresh(project)
        return project

    def _project_from_page(self, opportunity: Opportunity, context: UserContext) -> Project:
        page = self.fetcher(opportunity.url)
        title = extract_page_title(page.html)
        icp = context.icp_context
        analysis = self.ai.analyze_project(page.text, opportunity.url, context.plan, icp, context.representing)
        scoring = self.ai.score_project(analysis, context.plan, icp, context.representing)

        project = Project(
            user_id=opportunity.user_id,
            url=opportunity.url,
            name=title or opportunity.title or analysis.summary[:NAME_SUMMARY_CHARS] or opportunity.url,
        )
        apply_analysis(project, analysis, scoring)
        self.db.add(project)
        self.db.flush()
        return project

    def _minimal_project(self, opportunity: Opportunity) -> Project:
        return Project(
            user_id=opportunity.user_id,
            url=opportunity.url,
            name=opportunity.title or opportunity.url,
            summary=opportunity.raw_context or "Imported from opportunity",
            category_tags=opportunity.tags,
            bd_angles=opportunity.bd_angles,
            mqa_score=opportunity.mqa_score,
            icp_score=opportunity.icp_score,
        )

    def _mark_converted(self, opportunity: Opportunity, project: Project) -> None:
        opportunity.status = OpportunityStatus.CONVERTED.value
        opportunity.project_id = project.id
        self.commit()
