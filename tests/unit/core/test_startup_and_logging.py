from __future__ import annotations

import dataclasses
import json
import logging

import pytest

from leadradar.core import startup
from leadradar.core.config import get_config
from leadradar.core.exceptions import ConfigurationError
from leadradar.core.logging_config import JsonFormatter


def _config(**overrides):
    return dataclasses.replace(get_config(), **overrides)


def test_startup_report_flags_risky_settings(monkeypatch):
    monkeypatch.setattr(startup, "verify_database_connection", lambda: True)
    monkeypatch.setattr(startup, "get_active_database_url", lambda: "sqlite:///./leadradar.db")
    cfg = _config(ENV="development", JWT_SECRET="change_me_jwt_secret", AI_PROVIDER_ENABLED=True, OPENAI_API_KEY="")

    report = startup.validate_startup_config(cfg)

    assert report.database_ok is True
    assert report.database_scheme == "sqlite"
    assert report.ai_mode == "provider-disabled"
    assert report.warnings == ["startup.jwt.placeholder_secret", "startup.ai.key_missing"]


def test_required_database_outage_stops_startup(monkeypatch):
    monkeypatch.setattr(startup, "verify_database_connection", lambda: False)
    with pytest.raises(ConfigurationError):
        startup.validate_startup_config(_config(DB_CONNECTIVITY_REQUIRED=True))


def test_optional_database_outage_is_a_warning(monkeypatch):
    monkeypatch.setattr(startup, "verify_database_connection", lambda: False)
    monkeypatch.setattr(startup, "get_active_database_url", lambda: "postgresql://db/leadradar")
    cfg = _config(ENV="development", DB_CONNECTIVITY_REQUIRED=False, JWT_SECRET="a-real-secret", AI_PROVIDER_ENABLED=False)

    report = startup.validate_startup_config(cfg)

    assert report.database_ok is False
    assert report.warnings == ["startup.database.connectivity_optional_failed"]


def test_json_formatter_carries_event_fields():
    record = logging.makeLogRecord(
        {
            "name": "leadradar.services.opportunity_service",
            "levelname": "INFO",
            "msg": "opportunity.batch.completed",
            "event": "opportunity.batch.completed",
            "created_count": 2,
        }
    )

    payload = json.loads(JsonFormatter({"service": "LeadRadar"}).format(record))

    assert payload["message"] == "opportunity.batch.completed"
    assert payload["event"] == "opportunity.batch.completed"
    assert payload["created_count"] == 2
    assert payload["service"] == "LeadRadar"
    assert payload["logger"] == "leadradar.services.opportunity_service"
    assert "msg" not in payload
    assert "created" not in payload
