from __future__ import annotations

import pytest
from fastapi import HTTPException

import leadradar.api.v1.discover as discover_endpoints
import leadradar.api.v1.projects as project_endpoints
import leadradar.api.v1.settings as settings_endpoints
from leadradar.core.dependencies import CurrentUser
from leadradar.database.models import Project
from leadradar.llm.mocks import MOCK_TAGS
from leadradar.main import create_app
from leadradar.schemas.discover import ScanTextRequest
from leadradar.schemas.settings import PlaybookRequest, SettingsUpdateRequest
from leadradar.services.discovery_service import DiscoveryService
from leadradar.services.project_service import ProjectService

ALPHA = "<html><head><title>Alpha</title></head><body><p>Lending markets for everyone.</p></body></html>"


@pytest.fixture
def wired(monkeypatch, patch_route_db, user, fake_fetcher, mock_ai):
    current = CurrentUser(user_id=user.id, role="member", plan="free", permissions_version=1, claims={})
    for module in (settings_endpoints, discover_endpoints, project_endpoints):
        patch_route_db(module)
        monkeypatch.setattr(module, "_authorize", lambda authorization, scopes: current)
    monkeypatch.setattr(
        discover_endpoints,
        "_discovery",
        lambda session: DiscoveryService(db=session, fetcher=fake_fetcher, ai=mock_ai),
    )
    monkeypatch.setattr(
        project_endpoints,
        "_projects",
        lambda session: ProjectService(db=session, fetcher=fake_fetcher, ai=mock_ai),
    )
    return current


def test_settings_round_trip(wired):
    saved = settings_endpoints.update_settings(
        payload=SettingsUpdateRequest(industries="DeFi", filters={"stage": "seed"}, ai_voice={"tone": "direct"}),
        authorization="Bearer test",
    )
    assert saved.industries == "DeFi"

    loaded = settings_endpoints.get_settings(authorization="Bearer test")
    assert loaded.filters == {"stage": "seed"}
    assert loaded.ai_voice == {"tone": "direct"}

    # Omitting the voice leaves it in place.
    settings_endpoints.update_settings(payload=SettingsUpdateRequest(pain_points="Liquidity"), authorization="Bearer test")
    assert settings_endpoints.get_settings(authorization="Bearer test").ai_voice == {"tone": "direct"}


def test_playbook_endpoints(wired):
    created = settings_endpoints.create_playbook(
        payload=PlaybookRequest(name="Grants", boosts=["grant program"]),
        authorization="Bearer test",
    )
    assert created.boosts == ["grant program"]

    updated = settings_endpoints.update_playbook(
        created.id,
        payload=PlaybookRequest(name="Grants", boosts=["grant"], penalties=["memecoin"]),
        authorization="Bearer test",
    )
    assert updated.penalties == ["memecoin"]
    assert [item.id for item in settings_endpoints.list_playbooks(authorization="Bearer test")] == [created.id]

    settings_endpoints.delete_playbook(created.id, authorization="Bearer test")
    with pytest.raises(HTTPException) as exc_info:
        settings_endpoints.delete_playbook(created.id, authorization="Bearer test")
    assert exc_info.value.status_code == 404


def test_icp_and_playbooks_shape_lead_scores(wired, fake_fetcher):
    fake_fetcher.pages["https://alpha.xyz"] = ALPHA
    fake_fetcher.pages["https://alpha.xyz/"] = ALPHA
    settings_endpoints.update_settings(
        payload=SettingsUpdateRequest(industries=", ".join(MOCK_TAGS)),
        authorization="Bearer test",
    )
    settings_endpoints.create_playbook(payload=PlaybookRequest(name="Grants", boosts=["grant program"]), authorization="Bearer test")

    response = discover_endpoints.scan_text(
        payload=ScanTextRequest(text="Grant program applicant: https://alpha.xyz"),
        authorization="Bearer test",
    )

    opportunity = response.created[0]
    assert opportunity.lead_reasons[:2] == ["Matches ICP industries/tags", "Playbook boost: Grants (grant program)"]
    assert opportunity.playbook_matches == ["Grants"]


def test_project_playbook_endpoint(wired, session, user):
    project = Project(user_id=user.id, url="https://alpha.xyz", name="Alpha", summary="Alpha lends.")
    session.add(project)
    session.commit()

    response = project_endpoints.generate_playbook(project.id, authorization="Bearer test")
    assert response.project.playbook_summary == response.playbook.summary
    assert response.project.playbook_personas == response.playbook.recommended_personas

    bare = Project(user_id=user.id, url="https://beta.io", name="Beta")
    session.add(bare)
    session.commit()
    with pytest.raises(HTTPException) as exc_info:
        project_endpoints.generate_playbook(bare.id, authorization="Bearer test")
    assert exc_info.value.status_code == 400


def test_settings_routes_are_mounted():
    paths = {route.path for route in create_app().routes}
    assert "/api/v1/settings" in paths
    assert "/api/v1/settings/playbooks/{playbook_id}" in paths
    assert "/api/v1/projects/{project_id}/playbook" in paths
