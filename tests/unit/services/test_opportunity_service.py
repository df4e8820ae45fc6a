from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from leadradar.core.enums import OpportunitySource, OpportunityStatus, StepStatus
from leadradar.core.exceptions import NotFoundError
from leadradar.database.models import Contact, Opportunity, Project, Sequence, User
from leadradar.services.opportunity_service import OpportunityService

ALPHA = "<html><head><title>Alpha Protocol</title></head><body><p>DeFi lending mainnet launching.</p></body></html>"
BETA = "<html><body><h1>Beta Wallet</h1><p>Wallet infra for builders.</p></body></html>"


def _service(session, fake_fetcher, mock_ai):
    return OpportunityService(db=session, fetcher=fake_fetcher, ai=mock_ai)


def _opportunity(session, user, url="https://alpha.xyz/", **fields):
    values = {
        "user_id": user.id,
        "url": url,
        "source_type": OpportunitySource.TEXT_SCAN.value,
        "status": OpportunityStatus.NEW.value,
    }
    values.update(fields)
    opportunity = Opportunity(**values)
    session.add(opportunity)
    session.commit()
    session.refresh(opportunity)
    return opportunity


def test_batch_dedupes_in_flight_and_isolates_failures(session, user, fake_fetcher, mock_ai):
    fake_fetcher.pages.update({"https://alpha.xyz": ALPHA, "https://beta.io/app": BETA})
    service = _service(session, fake_fetcher, mock_ai)

    result = service.create_opportunities(
        user.id,
        ["https://alpha.xyz", "https://www.alpha.xyz/", "https://beta.io/app", "https://down.example.org"],
        OpportunitySource.TEXT_SCAN.value,
        raw_context="pasted notes",
    )

    assert result.attempted == 4
    assert result.skipped == ["https://www.alpha.xyz/"]
    assert [opp.url for opp in result.created] == [
        "https://alpha.xyz/",
        "https://beta.io/app",
        "https://down.example.org/",
    ]
    alpha, beta, down = result.created
    assert alpha.title == "Alpha Protocol"
    assert beta.title == "Beta Wallet"
    assert alpha.lead_score is not None and 0 <= alpha.lead_score <= 100
    assert alpha.raw_context == "pasted notes"
    assert down.title == "https://down.example.org/"
    assert down.lead_score is None
    assert session.query(Opportunity).count() == 3


def test_known_urls_are_skipped(session, user, fake_fetcher, mock_ai):
    session.add(Project(user_id=user.id, url="https://beta.io/", name="Beta"))
    session.commit()
    _opportunity(session, user, url="https://alpha.xyz/")
    service = _service(session, fake_fetcher, mock_ai)

    result = service.create_opportunities(
        user.id, ["https://alpha.xyz", "https://beta.io"], OpportunitySource.PAGE_SCAN.value
    )

    assert result.created == []
    assert result.skipped == ["https://alpha.xyz", "https://beta.io"]


def test_other_users_urls_do_not_block_creation(session, user, fake_fetcher, mock_ai):
    other = User(email="other@example.com", password_hash="x")
    session.add(other)
    session.commit()
    _opportunity(session, other, url="https://alpha.xyz/")

    result = _service(session, fake_fetcher, mock_ai).create_opportunities(
        user.id, ["https://alpha.xyz"], OpportunitySource.TEXT_SCAN.value
    )
    assert len(result.created) == 1


def test_batch_stops_at_max_count(session, user, fake_fetcher, mock_ai):
    result = _service(session, fake_fetcher, mock_ai).create_opportunities(
        user.id,
        ["https://a.io", "https://b.io", "https://c.io"],
        OpportunitySource.WATCHLIST.value,
        max_count=2,
    )
    assert len(result.created) == 2
    assert result.attempted == 3


def test_listing_orders_by_lead_score_and_hides_future_snoozes(session, user, fake_fetcher, mock_ai):
    now = datetime(2024, 1, 10, 12, 0)
    _opportunity(session, user, url="https://low.io/", lead_score=10)
    _opportunity(session, user, url="https://high.io/", lead_score=90)
    _opportunity(
        session,
        user,
        url="https://later.io/",
        lead_score=99,
        status=OpportunityStatus.SNOOZED.value,
        next_review_at=now + timedelta(days=1),
    )
    _opportunity(
        session,
        user,
        url="https://due.io/",
        lead_score=50,
        status=OpportunityStatus.SNOOZED.value,
        next_review_at=now - timedelta(days=1),
    )
    _opportunity(session, user, url="https://gone.io/", lead_score=100, status=OpportunityStatus.DISCARDED.value)

    listed = _service(session, fake_fetcher, mock_ai).list_opportunities(user.id, now=now)
    assert [opp.url for opp in listed] == ["https://high.io/", "https://due.io/", "https://low.io/"]


def test_snooze_and_discard(session, user, fake_fetcher, mock_ai):
    service = _service(session, fake_fetcher, mock_ai)
    opportunity = _opportunity(session, user)
    now = datetime(2024, 1, 10, 12, 0)

    snoozed = service.snooze(opportunity.id, user.id, now=now)
    assert snoozed.status == OpportunityStatus.SNOOZED.value
    assert snoozed.next_review_at == now + timedelta(days=service.config.SNOOZE_DAYS)

    snoozed = service.snooze(opportunity.id, user.id, days=2, now=now)
    assert snoozed.next_review_at == now + timedelta(days=2)

    discarded = service.discard(opportunity.id, user.id)
    assert discarded.status == OpportunityStatus.DISCARDED.value


def test_triage_of_unknown_or_foreign_opportunity_is_not_found(session, user, fake_fetcher, mock_ai):
    other = User(email="other@example.com", password_hash="x")
    session.add(other)
    session.commit()
    foreign = _opportunity(session, other)
    service = _service(session, fake_fetcher, mock_ai)

    with pytest.raises(NotFoundError):
        service.discard(foreign.id, user.id)
    with pytest.raises(NotFoundError):
        service.snooze("missing", user.id)
    with pytest.raises(NotFoundError):
        service.convert_to_project("missing", user.id)


def test_convert_creates_project_seeds_sequence_and_is_idempotent(session, user, fake_fetcher, mock_ai):
    fake_fetcher.pages["https://alpha.xyz/"] = ALPHA
    opportunity = _opportunity(session, user, title="Alpha")
    service = _service(session, fake_fetcher, mock_ai)

    project = service.convert_to_project(opportunity.id, user.id)

    assert project.name == "Alpha Protocol"
    assert project.url == "https://alpha.xyz/"
    assert project.summary.startswith("Snapshot of https://alpha.xyz/")
    session.refresh(opportunity)
    assert opportunity.status == OpportunityStatus.CONVERTED.value
    assert opportunity.project_id == project.id

    sequence = session.query(Sequence).filter(Sequence.project_id == project.id).one()
    assert [step.status for step in sequence.steps] == [StepStatus.PENDING.value] * 3
    assert [step.step_number for step in sequence.steps] == [1, 2, 3]
    assert project.next_follow_up_at == sequence.steps[0].scheduled_at
    contact = session.query(Contact).filter(Contact.project_id == project.id).one()
    assert contact.name == "Alpha Protocol"

    again = service.convert_to_project(opportunity.id, user.id)
    assert again.id == project.id
    assert session.query(Project).count() == 1
    assert session.query(Sequence).count() == 1


def test_convert_links_existing_project_with_same_url(session, user, fake_fetcher, mock_ai):
    existing = Project(user_id=user.id, url="https://alpha.xyz/", name="Tracked Alpha")
    session.add(existing)
    session.commit()
    opportunity = _opportunity(session, user)

    project = _service(session, fake_fetcher, mock_ai).convert_to_project(opportunity.id, user.id)

    assert project.id == existing.id
    session.refresh(opportunity)
    assert opportunity.status == OpportunityStatus.CONVERTED.value
    assert opportunity.project_id == existing.id
    assert fake_fetcher.calls == []


def test_convert_falls_back_to_minimal_project_when_fetch_fails(session, user, fake_fetcher, mock_ai):
    opportunity = _opportunity(session, user, url="https://down.io/", title="Down Project", tags='["DeFi"]')

    project = _service(session, fake_fetcher, mock_ai).convert_to_project(opportunity.id, user.id)

    assert project.name == "Down Project"
    assert project.summary == "Imported from opportunity"
    assert project.category_tags == '["DeFi"]'
    session.refresh(opportunity)
    assert opportunity.status == OpportunityStatus.CONVERTED.value
    assert session.query(Sequence).filter(Sequence.project_id == project.id).count() == 1
