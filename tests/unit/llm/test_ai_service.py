from __future__ import annotations

import dataclasses

from leadradar.core.config import get_config
from leadradar.core.exceptions import AIProviderError
from leadradar.llm import mocks
from leadradar.llm.ai_service import AIService, can_use_live_ai, describe_ai_mode
from leadradar.llm.types import ContactBrief, ProjectAnalysis


class RecordingChat:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.reply


def _always(value):
    return lambda plan, cfg: value


def test_capability_requires_enabled_provider_key_and_paid_plan():
    base = get_config()
    enabled = dataclasses.replace(base, AI_PROVIDER_ENABLED=True, OPENAI_API_KEY="sk-test")
    disabled = dataclasses.replace(base, AI_PROVIDER_ENABLED=False, OPENAI_API_KEY="sk-test")

    assert can_use_live_ai("pro", enabled) is True
    assert can_use_live_ai("free", enabled) is False
    assert can_use_live_ai(None, enabled) is False
    assert can_use_live_ai("pro", disabled) is False
    assert describe_ai_mode("pro", enabled) == "provider-active"
    assert describe_ai_mode("free", enabled) == "mock"
    assert describe_ai_mode("pro", disabled) == "provider-disabled"


def test_mock_path_never_calls_provider():
    chat = RecordingChat(reply={})
    service = AIService(capability=_always(False), chat=chat)

    analysis = service.analyze_project("DeFi lending", "https://alpha.xyz", "pro")

    assert analysis == mocks.mock_analyze_project("DeFi lending", "https://alpha.xyz")
    assert chat.calls == []


def test_live_analysis_is_normalized():
    chat = RecordingChat(
        reply={
            "summary": "Lending protocol",
            "categoryTags": "DeFi, Lending",
            "stage": "growth",
            "targetUsers": ["traders", "funds"],
            "painPoints": "liquidity",
            "bdAngles": ["Partnerships"],
            "mqaScore": 142,
            "mqaReasons": "Strong",
        }
    )
    service = AIService(capability=_always(True), chat=chat)

    analysis = service.analyze_project("text", "https://alpha.xyz", "pro")

    assert analysis.category_tags == ["DeFi", "Lending"]
    assert analysis.target_users == "traders, funds"
    assert analysis.mqa_score == 100
    assert chat.calls[0]["model"] == service.config.AI_MODEL_ANALYZE


def test_provider_failure_falls_back_to_mock():
    service = AIService(capability=_always(True), chat=RecordingChat(error=AIProviderError("down")))
    analysis = ProjectAnalysis(summary="s", category_tags=["DeFi"])

    assert service.analyze_project("t", "https://a.io", "pro") == mocks.mock_analyze_project("t", "https://a.io")
    assert service.score_project(analysis, "pro") == mocks.mock_score_project(analysis, None)
    steps = service.generate_sequence_steps(analysis, "pro", touches=2)
    assert steps == mocks.mock_generate_sequence_steps(analysis, None, 2, None)


def test_live_outreach_without_content_falls_back():
    service = AIService(capability=_always(True), chat=RecordingChat(reply={"email": "  "}))
    analysis = ProjectAnalysis(summary="s")
    contact = ContactBrief(name="Alice")

    messages = service.generate_outreach(analysis, contact, ["email"], "pro")

    assert messages == mocks.mock_generate_outreach(analysis, contact, ["email"], None)


def test_live_sequence_offsets_are_clamped_and_trimmed():
    chat = RecordingChat(
        reply={
            "steps": [
                {"offsetDays": 90, "channel": "email", "objective": "Intro", "contentHint": "Hi"},
                {"offsetDays": "bad", "channel": "telegram"},
                {"offsetDays": 3, "channel": "twitter"},
            ]
        }
    )
    service = AIService(capability=_always(True), chat=chat)

    steps = service.generate_sequence_steps(ProjectAnalysis(summary="s"), "pro", touches=2, persona="Founder")

    assert [step.offset_days for step in steps] == [60, 0]
    assert [step.channel for step in steps] == ["email", "telegram"]
    assert steps[0].persona == "Founder"


def test_capability_receives_plan_and_config():
    seen = []

    def capability(plan, cfg):
        seen.append((plan, cfg))
        return False

    service = AIService(capability=capability)
    service.score_project(ProjectAnalysis(summary="s"), "starter")
    assert seen == [("starter", service.config)]


def test_live_playbook_keeps_defaults_for_missing_parts():
    chat = RecordingChat(reply={"summary": "Lead with audits", "primaryAngles": ["a", "b", "c", "d"]})
    service = AIService(capability=_always(True), chat=chat)

    playbook = service.generate_account_playbook(ProjectAnalysis(summary="s"), "pro")

    assert playbook.summary == "Lead with audits"
    assert playbook.primary_angles == ["a", "b", "c"]
    assert playbook.recommended_personas == mocks.mock_account_playbook().recommended_personas
