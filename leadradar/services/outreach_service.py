"""Per-channel outreach copy for one contact of a project."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from leadradar.contacts.socials import classify_persona
from leadradar.core.exceptions import NotFoundError, ValidationError
from leadradar.database.models import Contact, Note, OutreachMessage, Project
from leadradar.llm.ai_service import AIService
from leadradar.llm.types import ContactBrief
from leadradar.services.base_service import BaseService
from leadradar.services.project_analysis import analysis_from_project
from leadradar.services.user_context import load_user_context
from leadradar.utils.clock import utcnow_naive
from leadradar.utils.validators import parse_string_list

logger = logging.getLogger(__name__)


class OutreachService(BaseService):
    def __init__(self, db: Session | None = None, ai: AIService | None = None) -> None:
        super().__init__(db)
        self.ai = ai or AIService()

    def generate(
        self,
        user_id: str,
        project_id: str,
        contact_id: str,
        channels: list[str],
        custom_content: str | None = None,
    ) -> list[OutreachMessage]:
        """Store one message per channel and stamp the project's last contact time.

        ``custom_content`` is used verbatim for every channel instead of
        generated copy.
        """
        wanted = [channel.strip() for channel in channels if channel and channel.strip()]
        if not wanted:
            raise ValidationError("At least one channel is required.")

        project = self.get_owned(Project, project_id, user_id, "Project")
        contact = self.db.query(Contact).filter(Contact.id == contact_id, Contact.project_id == project.id).first()
        if contact is None:
            raise NotFoundError(f"Contact not found: {contact_id}")

        if custom_content and custom_content.strip():
            messages = {channel: custom_content.strip() for channel in wanted}
        else:
            context = load_user_context(self.db, user_id)
            angles = parse_string_list(project.playbook_angles) or parse_string_list(project.bd_angles)
            messages = self.ai.generate_outreach(
                analysis_from_project(project),
                ContactBrief(
                    name=contact.name,
                    role=contact.role,
                    linkedin_url=contact.linkedin_url,
                    twitter_handle=contact.twitter_handle,
                    email=contact.email,
                    telegram=contact.telegram,
                    channel_preference=contact.channel_preference,
                ),
                wanted,
                context.plan,
                representing=context.representing,
                voice_profile=context.voice_profile,
                persona=contact.persona or classify_persona(contact.role),
                primary_angle=angles[0] if angles else None,
            )

        created = [
            OutreachMessage(project_id=project.id, contact_id=contact.id, channel=channel, content=content)
            for channel, content in messages.items()
        ]
        self.db.add_all(created)
        project.last_contact_at = utcnow_naive()
        self.db.add(
            Note(
                project_id=project.id,
                content=f"Generated outreach for {contact.name} on channels: {', '.join(wanted)}",
            )
        )
        self.commit()
        for message in created:
            self.db.refresh(message)

        logger.info(
            "outreach.generated",
            extra={"event": "outreach.generated", "project_id": project.id, "channels": len(created)},
        )
        return created
