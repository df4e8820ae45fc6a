from __future__ import annotations

from datetime import datetime

import pytest
from fastapi import HTTPException

import leadradar.api.v1.auth as auth_endpoints
import leadradar.api.v1.contacts as contact_endpoints
import leadradar.api.v1.outreach as outreach_endpoints
import leadradar.api.v1.sequences as sequence_endpoints
from leadradar.api.v1.health import health
from leadradar.core.dependencies import CurrentUser
from leadradar.core.enums import StepAction, StepStatus
from leadradar.database.models import Contact, Project
from leadradar.main import create_app
from leadradar.schemas.auth import LoginRequest, RefreshRequest, RegisterRequest
from leadradar.schemas.contacts import QuickCaptureRequest
from leadradar.schemas.outreach import OutreachGenerateRequest
from leadradar.schemas.sequences import StepActionRequest
from leadradar.services.outreach_service import OutreachService
from leadradar.services.sequence_service import SequenceService
from leadradar.services.user_context import load_user_context

SEEDED_AT = datetime(2024, 1, 10, 15, 30)


@pytest.fixture
def wired(monkeypatch, patch_route_db, user, mock_ai):
    current = CurrentUser(user_id=user.id, role="member", plan="free", permissions_version=1, claims={})
    for module in (sequence_endpoints, contact_endpoints, outreach_endpoints):
        patch_route_db(module)
        monkeypatch.setattr(module, "_authorize", lambda authorization, scopes: current)
    monkeypatch.setattr(sequence_endpoints, "_sequences", lambda session: SequenceService(db=session, ai=mock_ai))
    monkeypatch.setattr(outreach_endpoints, "_outreach", lambda session: OutreachService(db=session, ai=mock_ai))
    return current


def _seed_sequence(session, user, mock_ai):
    project = Project(user_id=user.id, url="https://alpha.xyz/", name="Alpha", summary="Alpha lends.")
    session.add(project)
    session.commit()
    return SequenceService(db=session, ai=mock_ai).seed_engagement(
        project, load_user_context(session, user.id), now=SEEDED_AT
    )


def test_next_step_is_empty_without_sequences(wired):
    response = sequence_endpoints.next_step(authorization="Bearer test")
    assert response.step is None
    assert response.project_id is None


def test_next_step_then_mark_sent(wired, session, user, mock_ai):
    sequence = _seed_sequence(session, user, mock_ai)

    response = sequence_endpoints.next_step(authorization="Bearer test")
    assert response.step.id == sequence.steps[0].id
    assert response.project_name == "Alpha"
    assert response.contact_name == "Alpha"

    applied = sequence_endpoints.apply_step_action(
        payload=StepActionRequest(step_id=response.step.id, action=StepAction.SENT, version=response.step.version),
        authorization="Bearer test",
    )
    assert applied.success is True
    assert applied.step.status == StepStatus.SENT.value
    assert applied.step.version == response.step.version + 1
    assert applied.next_follow_up_at == datetime(2024, 1, 11, 9, 0)

    following = sequence_endpoints.next_step(authorization="Bearer test")
    assert following.step.id == sequence.steps[1].id


def test_stale_step_version_maps_to_conflict(wired, session, user, mock_ai):
    sequence = _seed_sequence(session, user, mock_ai)
    step = sequence.steps[0]

    with pytest.raises(HTTPException) as exc_info:
        sequence_endpoints.apply_step_action(
            payload=StepActionRequest(step_id=step.id, action=StepAction.SKIP, version=step.version + 1),
            authorization="Bearer test",
        )
    assert exc_info.value.status_code == 409


def test_reschedule_without_time_is_bad_request(wired, session, user, mock_ai):
    sequence = _seed_sequence(session, user, mock_ai)
    with pytest.raises(HTTPException) as exc_info:
        sequence_endpoints.apply_step_action(
            payload=StepActionRequest(step_id=sequence.steps[0].id, action=StepAction.RESCHEDULE),
            authorization="Bearer test",
        )
    assert exc_info.value.status_code == 400


def test_unknown_step_is_not_found(wired):
    with pytest.raises(HTTPException) as exc_info:
        sequence_endpoints.apply_step_action(
            payload=StepActionRequest(step_id="missing", action=StepAction.SENT),
            authorization="Bearer test",
        )
    assert exc_info.value.status_code == 404


def test_quick_capture_creates_then_merges(wired):
    payload = QuickCaptureRequest(name="Alice", role="CEO", project_url="alpha.xyz", telegram="@alice")
    first = contact_endpoints.quick_capture(payload=payload, authorization="Bearer test")
    assert first.created is True
    assert first.project_name == "alpha.xyz"

    second = contact_endpoints.quick_capture(payload=payload, authorization="Bearer test")
    assert second.created is False
    assert second.contact_id == first.contact_id


def test_quick_capture_needs_a_project_hint(wired):
    with pytest.raises(HTTPException) as exc_info:
        contact_endpoints.quick_capture(payload=QuickCaptureRequest(name="Alice"), authorization="Bearer test")
    assert exc_info.value.status_code == 400


def test_outreach_generate_returns_messages(wired, session, user):
    project = Project(user_id=user.id, url="https://alpha.xyz", name="Alpha")
    session.add(project)
    session.flush()
    contact = Contact(project_id=project.id, name="Alice", role="CEO")
    session.add(contact)
    session.commit()

    messages = outreach_endpoints.generate(
        payload=OutreachGenerateRequest(project_id=project.id, contact_id=contact.id, channels=["email"]),
        authorization="Bearer test",
    )
    assert [message.channel for message in messages] == ["email"]
    assert messages[0].contact_id == contact.id

    with pytest.raises(HTTPException) as exc_info:
        outreach_endpoints.generate(
            payload=OutreachGenerateRequest(project_id="missing", contact_id=contact.id, channels=["email"]),
            authorization="Bearer test",
        )
    assert exc_info.value.status_code == 404


def test_register_login_refresh_and_use_access_token(patch_route_db):
    patch_route_db(auth_endpoints)
    patch_route_db(sequence_endpoints)

    registered = auth_endpoints.register(RegisterRequest(email="founder@example.com", password="s3cret-pass"))
    assert registered.token_type == "bearer"
    assert registered.plan == "free"
    assert registered.expires_in > 0

    with pytest.raises(HTTPException) as exc_info:
        auth_endpoints.register(RegisterRequest(email="founder@example.com", password="s3cret-pass"))
    assert exc_info.value.status_code == 409

    with pytest.raises(HTTPException) as exc_info:
        auth_endpoints.login(LoginRequest(email="founder@example.com", password="wrong-pass"))
    assert exc_info.value.status_code == 401

    logged_in = auth_endpoints.login(LoginRequest(email="FOUNDER@example.com", password="s3cret-pass"))
    refreshed = auth_endpoints.refresh(RefreshRequest(refresh_token=logged_in.refresh_token))
    assert refreshed.access_token

    with pytest.raises(HTTPException) as exc_info:
        auth_endpoints.refresh(RefreshRequest(refresh_token=logged_in.access_token))
    assert exc_info.value.status_code == 401

    response = sequence_endpoints.next_step(authorization=f"Bearer {refreshed.access_token}")
    assert response.step is None


def test_refresh_rejects_garbage_token():
    with pytest.raises(HTTPException) as exc_info:
        auth_endpoints.refresh(RefreshRequest(refresh_token="not-a-jwt"))
    assert exc_info.value.status_code == 401


def test_health_and_app_routes():
    assert health()["status"] == "ok"

    paths = {route.path for route in create_app().routes}
    for path in (
        "/api/v1/health",
        "/api/v1/auth/register",
        "/api/v1/discover/scan-text",
        "/api/v1/discover/{opportunity_id}/convert",
        "/api/v1/projects/board",
        "/api/v1/projects/import",
        "/api/v1/contacts/quick-capture",
        "/api/v1/outreach/generate",
        "/api/v1/sequences/next-step",
    ):
        assert path in paths
