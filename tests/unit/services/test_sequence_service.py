from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from leadradar.core.enums import StepAction, StepStatus
from leadradar.core.exceptions import ConflictError, NotFoundError, ValidationError
from leadradar.database.models import Contact, Interaction, Project, Sequence, User
from leadradar.sequences.state_machine import InvalidTransitionError
from leadradar.services.sequence_service import SequenceService
from leadradar.services.user_context import load_user_context

NOW = datetime(2024, 1, 10, 15, 30)


def _seeded(session, user, mock_ai):
    project = Project(user_id=user.id, url="https://alpha.xyz/", name="Alpha", summary="Alpha lends.")
    session.add(project)
    session.commit()
    service = SequenceService(db=session, ai=mock_ai)
    sequence = service.seed_engagement(project, load_user_context(session, user.id), now=NOW)
    return service, project, sequence


def test_seed_creates_contact_and_three_morning_steps(session, user, mock_ai):
    service, project, sequence = _seeded(session, user, mock_ai)

    assert sequence is not None
    assert [step.scheduled_at for step in sequence.steps] == [
        datetime(2024, 1, 10, 9, 0),
        datetime(2024, 1, 11, 9, 0),
        datetime(2024, 1, 12, 9, 0),
    ]
    assert [step.channel for step in sequence.steps] == ["telegram", "twitter", "email"]
    assert project.next_follow_up_at == datetime(2024, 1, 10, 9, 0)
    contact = session.query(Contact).filter(Contact.project_id == project.id).one()
    assert contact.name == "Alpha"
    assert contact.role == "Point of contact"
    assert sequence.contact_id == contact.id


def test_seed_is_skipped_when_sequence_exists(session, user, mock_ai):
    service, project, _ = _seeded(session, user, mock_ai)
    again = service.seed_engagement(project, load_user_context(session, user.id), now=NOW)
    assert again is None
    assert session.query(Sequence).count() == 1


def test_seed_reuses_existing_contact(session, user, mock_ai):
    project = Project(user_id=user.id, url="https://beta.io/", name="Beta")
    session.add(project)
    session.flush()
    session.add(Contact(project_id=project.id, name="Bea", role="CEO"))
    session.commit()

    sequence = SequenceService(db=session, ai=mock_ai).seed_engagement(
        project, load_user_context(session, user.id), now=NOW
    )

    assert sequence.contact.name == "Bea"
    assert session.query(Contact).count() == 1


def test_seed_failure_is_swallowed_and_rolled_back(session, user):
    class BrokenAI:
        def generate_sequence_steps(self, *args, **kwargs):
            raise RuntimeError("boom")

    project = Project(user_id=user.id, url="https://gamma.network/", name="Gamma")
    session.add(project)
    session.commit()

    result = SequenceService(db=session, ai=BrokenAI()).seed_engagement(
        project, load_user_context(session, user.id), now=NOW
    )

    assert result is None
    assert session.query(Sequence).count() == 0
    assert session.query(Project).count() == 1


def test_next_step_is_the_overdue_one(session, user, mock_ai):
    service, _, sequence = _seeded(session, user, mock_ai)
    picked = service.get_next_step(user.id, now=NOW)
    assert picked.id == sequence.steps[0].id
    assert service.get_next_step("someone-else", now=NOW) is None


def test_sent_updates_step_project_contact_and_logs_interaction(session, user, mock_ai):
    service, project, sequence = _seeded(session, user, mock_ai)
    first, second = sequence.steps[0], sequence.steps[1]

    result = service.apply_action(user.id, first.id, StepAction.SENT, now=NOW)

    assert result.step.status == StepStatus.SENT.value
    assert result.step.sent_at == NOW
    assert result.step.version == 2
    assert result.next_follow_up_at == second.scheduled_at
    assert result.project.next_follow_up_at == second.scheduled_at
    assert result.project.last_contact_at == NOW
    assert sequence.contact.channel_preference == "telegram:1"

    interaction = session.query(Interaction).one()
    assert interaction.title == "Sequence step 1 sent via telegram"
    assert interaction.sequence_step_id == first.id
    assert interaction.project_id == project.id


def test_skip_marks_step_without_interaction(session, user, mock_ai):
    service, _, sequence = _seeded(session, user, mock_ai)
    result = service.apply_action(user.id, sequence.steps[0].id, "skip", now=NOW)

    assert result.step.status == StepStatus.SKIPPED.value
    assert result.project.last_contact_at is None
    assert session.query(Interaction).count() == 0


def test_reschedule_moves_step_and_keeps_it_pending(session, user, mock_ai):
    service, _, sequence = _seeded(session, user, mock_ai)
    step = sequence.steps[0]

    with pytest.raises(ValidationError):
        service.apply_action(user.id, step.id, "reschedule", now=NOW)

    new_time = datetime(2024, 1, 20, 10, 0, tzinfo=timezone(timedelta(hours=2)))
    result = service.apply_action(user.id, step.id, "reschedule", scheduled_at=new_time, now=NOW)

    assert result.step.status == StepStatus.PENDING.value
    assert result.step.scheduled_at == datetime(2024, 1, 20, 8, 0)
    assert result.next_follow_up_at == datetime(2024, 1, 11, 9, 0)


def test_stale_version_is_rejected(session, user, mock_ai):
    service, _, sequence = _seeded(session, user, mock_ai)
    step = sequence.steps[0]

    with pytest.raises(ConflictError):
        service.apply_action(user.id, step.id, "sent", expected_version=step.version + 5, now=NOW)

    session.refresh(step)
    assert step.status == StepStatus.PENDING.value
    assert session.query(Interaction).count() == 0


def test_finished_step_cannot_be_acted_on_twice(session, user, mock_ai):
    service, _, sequence = _seeded(session, user, mock_ai)
    step_id = sequence.steps[0].id
    service.apply_action(user.id, step_id, "sent", now=NOW)

    with pytest.raises(InvalidTransitionError):
        service.apply_action(user.id, step_id, "sent", now=NOW)
    assert session.query(Interaction).count() == 1


def test_unknown_action_and_foreign_step(session, user, mock_ai):
    service, _, sequence = _seeded(session, user, mock_ai)
    other = User(email="other@example.com", password_hash="x")
    session.add(other)
    session.commit()

    with pytest.raises(ValidationError):
        service.apply_action(user.id, sequence.steps[0].id, "archive", now=NOW)
    with pytest.raises(NotFoundError):
        service.apply_action(other.id, sequence.steps[0].id, "sent", now=NOW)
