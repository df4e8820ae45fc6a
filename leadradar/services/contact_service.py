"""Contact capture with per-project duplicate detection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlsplit

from sqlalchemy import func, or_

from leadradar.contacts.dedupe import build_contact_dedup_where, merge_contact_fields
from leadradar.contacts.socials import (
    classify_persona,
    normalize_linkedin_url,
    normalize_twitter_handle,
    normalize_url_maybe,
    stub_url_from_name,
)
from leadradar.core.enums import ProjectStatus
from leadradar.core.exceptions import ValidationError
from leadradar.database.models import Contact, Note, Project
from leadradar.services.base_service import BaseService
from leadradar.utils.validators import optional_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaptureResult:
    project_id: str
    project_name: str
    contact_id: str
    contact_name: str
    created: bool


class ContactService(BaseService):
    def quick_capture(
        self,
        user_id: str,
        name: str,
        role: str | None = None,
        project_id: str | None = None,
        project_url: str | None = None,
        company_name: str | None = None,
        linkedin_url: str | None = None,
        twitter: str | None = None,
        telegram: str | None = None,
        email: str | None = None,
        notes: str | None = None,
    ) -> CaptureResult:
        """Attach a person to a project, merging into an existing contact when a handle matches.

        The project is resolved by id, then URL (created when missing), then
        company name (created with a placeholder ``.invalid`` URL). A matched
        contact only has its empty fields filled in.
        """
        contact_name = (name or "").strip()
        if not contact_name:
            raise ValidationError("Name cannot be empty")

        project = self._resolve_project(user_id, project_id, project_url, company_name)
        incoming = {
            "role": optional_text(role),
            "linkedin_url": normalize_linkedin_url(linkedin_url),
            "twitter_handle": normalize_twitter_handle(twitter),
            "telegram": optional_text(telegram),
            "email": optional_text(email),
        }

        where = build_contact_dedup_where(project.id, incoming)
        existing = None
        if where is not None:
            existing = self.db.query(Contact).filter(where.to_sqlalchemy(Contact)).first()

        if existing is not None:
            for field, value in merge_contact_fields(existing, incoming).items():
                setattr(existing, field, value)
            contact = existing
            created = False
        else:
            contact = Contact(
                project_id=project.id,
                name=contact_name,
                persona=classify_persona(incoming["role"]),
                **incoming,
            )
            self.db.add(contact)
            created = True

        if notes and notes.strip():
            self.db.add(Note(project_id=project.id, content=notes.strip()))

        self.commit()
        self.db.refresh(contact)
        logger.info(
            "contact.captured",
            extra={"event": "contact.captured", "project_id": project.id, "contact_id": contact.id, "new_contact": created},
        )
        return CaptureResult(
            project_id=project.id,
            project_name=project.name or project.url,
            contact_id=contact.id,
            contact_name=contact_name,
            created=created,
        )

    def _resolve_project(
        self,
        user_id: str,
        project_id: str | None,
        project_url: str | None,
        company_name: str | None,
    ) -> Project:
        if project_id:
            project = self.get_owned(Project, project_id, user_id, "Project")
            return project

        url = normalize_url_maybe(project_url)
        if url:
            project = self.db.query(Project).filter(Project.user_id == user_id, Project.url == url).first()
            if project is not None:
                return project
            try:
                hostname = urlsplit(url).hostname or url
            except ValueError:
                hostname = url.split("://", 1)[-1]
            return self._create_stub(user_id, url, hostname)

        company = (company_name or "").strip()
        if company:
            stub_url = stub_url_from_name(company)
            # Names differing only in case or punctuation share one placeholder URL.
            project = (
                self.db.query(Project)
                .filter(
                    Project.user_id == user_id,
                    or_(func.lower(Project.name) == company.lower(), Project.url == stub_url),
                )
                .order_by(Project.created_at)
                .first()
            )
            if project is not None:
                return project
            return self._create_stub(user_id, stub_url, company)

        raise ValidationError("Provide project selection, URL, or company name.")

    def _create_stub(self, user_id: str, url: str, name: str) -> Project:
        project = Project(user_id=user_id, url=url, name=name, status=ProjectStatus.NOT_CONTACTED.value)
        self.db.add(project)
        self.db.flush()
        return project
