"""Outreach sequences: seeding new ones and advancing their steps."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import update
from sqlalchemy.orm import Session

from leadradar.contacts.channel_preference import decide_new_channel_preference
from leadradar.core.enums import StepAction, StepStatus
from leadradar.core.exceptions import ConflictError, NotFoundError, ValidationError
from leadradar.database.models import Contact, Interaction, Playbook, Project, Sequence, SequenceStep
from leadradar.llm.ai_service import AIService
from leadradar.llm.types import ContactBrief
from leadradar.sequences.next_step import pick_next_sequence_step
from leadradar.sequences.state_machine import STEP_TRANSITIONS
from leadradar.services.base_service import BaseService
from leadradar.services.project_analysis import analysis_from_project
from leadradar.services.user_context import UserContext
from leadradar.utils.clock import as_naive_utc, utcnow_naive
from leadradar.utils.validators import parse_string_list

logger = logging.getLogger(__name__)

SEED_TOUCHES = 3
SEED_SEND_HOUR = 9
DEFAULT_CONTACT_ROLE = "Point of contact"

_TARGET_STATUS = {
    StepAction.SENT.value: StepStatus.SENT.value,
    StepAction.SKIP.value: StepStatus.SKIPPED.value,
    StepAction.RESCHEDULE.value: StepStatus.PENDING.value,
}


@dataclass(frozen=True)
class StepActionResult:
    step: SequenceStep
    project: Project
    next_follow_up_at: datetime | None


class SequenceService(BaseService):
    """Creates seeded sequences and applies sent / skip / reschedule to steps."""

    def __init__(self, db: Session | None = None, ai: AIService | None = None) -> None:
        super().__init__(db)
        self.ai = ai or AIService()

    def seed_engagement(
        self,
        project: Project,
        context: UserContext,
        playbook_matches: list[str] | None = None,
        now: datetime | None = None,
    ) -> Sequence | None:
        """Give a new project a first contact and a three-touch sequence.

        Does nothing when the project already has a sequence. Failures are
        logged and rolled back; the caller's project is never affected.
        """
        try:
            return self._seed(project, context, playbook_matches or [], now or utcnow_naive())
        except Exception as exc:
            self.rollback()
            logger.warning(
                "sequence.seed.failed",
                extra={"event": "sequence.seed.failed", "project_id": project.id, "error": str(exc)},
            )
            return None

    def _seed(self, project: Project, context: UserContext, playbook_matches: list[str], now: datetime) -> Sequence | None:
        existing = self.db.query(Sequence).filter(Sequence.project_id == project.id).first()
        if existing is not None:
            return None

        playbook = None
        if playbook_matches:
            playbook = (
                self.db.query(Playbook)
                .filter(Playbook.user_id == context.user_id, Playbook.name == playbook_matches[0])
                .first()
            )

        contact = (
            self.db.query(Contact).filter(Contact.project_id == project.id).order_by(Contact.created_at).first()
        )
        if contact is None:
            contact = Contact(project_id=project.id, name=project.name or project.url, role=DEFAULT_CONTACT_ROLE)
            self.db.add(contact)
            self.db.flush()

        analysis = analysis_from_project(project)
        angles = parse_string_list(project.playbook_angles) or analysis.bd_angles
        specs = self.ai.generate_sequence_steps(
            analysis,
            plan=context.plan,
            contact=ContactBrief(
                name=contact.name,
                role=contact.role,
                channel_preference=contact.channel_preference,
            ),
            touches=SEED_TOUCHES,
            preferred_channel=None,
            playbook_name=playbook.name if playbook else None,
            representing=context.representing,
            persona=contact.persona,
            primary_angle=angles[0] if angles else None,
        )

        base = now.replace(hour=SEED_SEND_HOUR, minute=0, second=0, microsecond=0)
        sequence = Sequence(
            user_id=context.user_id,
            project_id=project.id,
            contact_id=contact.id,
            playbook_id=playbook.id if playbook else None,
        )
        sequence.steps = [
            SequenceStep(
                step_number=number,
                channel=spec.channel,
                content=spec.content_hint or spec.objective or "",
                status=StepStatus.PENDING.value,
                scheduled_at=base + timedelta(days=spec.offset_days),
            )
            for number, spec in enumerate(specs, start=1)
        ]
        self.db.add(sequence)

        first_pending = next((step for step in sequence.steps if step.scheduled_at is not None), None)
        if first_pending is not None:
            project.next_follow_up_at = first_pending.scheduled_at
        self.commit()

        logger.info(
            "sequence.seeded",
            extra={"event": "sequence.seeded", "project_id": project.id, "steps": len(sequence.steps)},
        )
        return sequence

    def get_next_step(self, user_id: str, now: datetime | None = None) -> SequenceStep | None:
        """The single pending step across all of the user's sequences to act on next."""
        steps = (
            self.db.query(SequenceStep)
            .join(Sequence, SequenceStep.sequence_id == Sequence.id)
            .filter(Sequence.user_id == user_id, SequenceStep.status == StepStatus.PENDING.value)
            .order_by(Sequence.created_at, SequenceStep.step_number)
            .all()
        )
        picked = pick_next_sequence_step(steps, now or utcnow_naive())
        if picked is None and steps:
            logger.warning(
                "sequence.next_step.none",
                extra={"event": "sequence.next_step.none", "user_id": user_id, "pending": len(steps)},
            )
        return picked

    def apply_action(
        self,
        user_id: str,
        step_id: str,
        action: str,
        scheduled_at: datetime | None = None,
        expected_version: int | None = None,
        now: datetime | None = None,
    ) -> StepActionResult:
        """Mark a step sent or skipped, or move its schedule.

        The write is conditional on the step still being PENDING at the
        version that was read; a concurrent writer makes it raise
        ``ConflictError``.
        """
        action_value = getattr(action, "value", action)
        if action_value not in _TARGET_STATUS:
            raise ValidationError(f"Unknown step action: {action_value}")
        if action_value == StepAction.RESCHEDULE.value and scheduled_at is None:
            raise ValidationError("scheduled_at is required to reschedule a step.")

        step = (
            self.db.query(SequenceStep)
            .join(Sequence, SequenceStep.sequence_id == Sequence.id)
            .filter(SequenceStep.id == step_id, Sequence.user_id == user_id)
            .first()
        )
        if step is None:
            raise NotFoundError(f"Sequence step not found: {step_id}")

        target = _TARGET_STATUS[action_value]
        STEP_TRANSITIONS.assert_transition(step.status, target)

        version = step.version if expected_version is None else expected_version
        current_time = now or utcnow_naive()
        values: dict = {"status": target, "version": version + 1}
        if action_value == StepAction.SENT.value:
            values["sent_at"] = current_time
        elif action_value == StepAction.RESCHEDULE.value:
            values["scheduled_at"] = as_naive_utc(scheduled_at)

        result = self.db.execute(
            update(SequenceStep)
            .where(
                SequenceStep.id == step.id,
                SequenceStep.status == StepStatus.PENDING.value,
                SequenceStep.version == version,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.rollback()
            logger.warning(
                "sequence.step.conflict",
                extra={"event": "sequence.step.conflict", "step_id": step.id, "action": action_value},
            )
            raise ConflictError("Sequence step was changed by another request.")
        self.db.refresh(step)

        sequence = step.sequence
        project = sequence.project
        next_due = self._earliest_pending_due(sequence.project_id, user_id)
        project.next_follow_up_at = next_due

        if action_value == StepAction.SENT.value:
            project.last_contact_at = current_time
            self._record_send(step, sequence, user_id, current_time)

        self.commit()
        self.db.refresh(step)
        logger.info(
            "sequence.step.updated",
            extra={"event": "sequence.step.updated", "step_id": step.id, "action": action_value, "status": step.status},
        )
        return StepActionResult(step=step, project=project, next_follow_up_at=next_due)

    def _earliest_pending_due(self, project_id: str, user_id: str) -> datetime | None:
        return (
            self.db.query(SequenceStep.scheduled_at)
            .join(Sequence, SequenceStep.sequence_id == Sequence.id)
            .filter(
                Sequence.project_id == project_id,
                Sequence.user_id == user_id,
                SequenceStep.status == StepStatus.PENDING.value,
                SequenceStep.scheduled_at.isnot(None),
            )
            .order_by(SequenceStep.scheduled_at)
            .limit(1)
            .scalar()
        )

    def _record_send(self, step: SequenceStep, sequence: Sequence, user_id: str, sent_at: datetime) -> None:
        contact = sequence.contact
        if contact is not None:
            preference = decide_new_channel_preference(contact.channel_preference, step.channel)
            if preference != contact.channel_preference:
                contact.channel_preference = preference
        self.db.add(
            Interaction(
                user_id=user_id,
                project_id=sequence.project_id,
                contact_id=sequence.contact_id,
                sequence_step_id=step.id,
                channel=step.channel,
                title=f"Sequence step {step.step_number} sent via {step.channel}",
                content=step.content,
                occurred_at=sent_at,
            )
        )
