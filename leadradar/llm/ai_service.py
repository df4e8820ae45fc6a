"""Live-or-mock AI operations used by the orchestrators."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from leadradar.core.config import Config, get_config
from leadradar.core.enums import PAID_PLANS
from leadradar.core.exceptions import AIProviderError

from . import mocks, prompts
from .client import call_chat_json
from .types import (
    AccountPlaybookDraft,
    ContactBrief,
    ICPContext,
    ProjectAnalysis,
    RepresentingProject,
    ScoreResult,
    SequenceStepSpec,
)

logger = logging.getLogger(__name__)

MAX_OFFSET_DAYS = 60


def can_use_live_ai(plan: str | None, config: Config | None = None) -> bool:
    """Live calls need the provider switched on, an API key and a paid plan."""
    cfg = config or get_config()
    if not cfg.AI_PROVIDER_ENABLED or not cfg.OPENAI_API_KEY:
        return False
    return bool(plan) and plan in PAID_PLANS


def describe_ai_mode(plan: str | None, config: Config | None = None) -> str:
    cfg = config or get_config()
    if not cfg.AI_PROVIDER_ENABLED or not cfg.OPENAI_API_KEY:
        return "provider-disabled"
    return "provider-active" if can_use_live_ai(plan, cfg) else "mock"


def _as_text(value: Any) -> str | None:
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    if isinstance(value, str):
        return value
    return None


def _as_list(value: Any) -> list[str]:
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str)]
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return []


def _as_score(value: Any) -> int | None:
    try:
        return max(0, min(100, int(round(float(value)))))
    except (TypeError, ValueError):
        return None


class AIService:
    """Runs each operation against the provider when allowed, else the deterministic mock.

    ``capability`` decides per plan whether live calls are allowed and
    ``chat`` performs the call; both are injectable so tests can drive
    either path without network access.
    """

    def __init__(
        self,
        capability: Callable[[str | None, Config], bool] = can_use_live_ai,
        chat: Callable[..., Any] = call_chat_json,
        config: Config | None = None,
    ) -> None:
        self.config = config or get_config()
        self.capability = capability
        self.chat = chat

    def _live(self, plan: str | None) -> bool:
        return self.capability(plan, self.config)

    def _call(self, system: str, user: str, model: str, max_tokens: int) -> Any:
        return self.chat(system=system, user=user, model=model, max_tokens=max_tokens, config=self.config)

    def _fallback(self, operation: str, exc: Exception) -> None:
        logger.warning(
            "ai.provider.fallback",
            extra={"event": "ai.provider.fallback", "operation": operation, "error": str(exc)},
        )

    def analyze_project(
        self,
        text: str,
        url: str,
        plan: str | None,
        icp: ICPContext | None = None,
        representing: RepresentingProject | None = None,
    ) -> ProjectAnalysis:
        if not self._live(plan):
            return mocks.mock_analyze_project(text, url)
        try:
            raw = self._call(
                prompts.ANALYZE_SYSTEM,
                prompts.build_analyze_prompt(text, url, icp, representing),
                self.config.AI_MODEL_ANALYZE,
                900,
            )
            if not isinstance(raw, dict):
                raise AIProviderError("Analysis reply is not an object")
            return ProjectAnalysis(
                summary=str(raw.get("summary") or ""),
                category_tags=_as_list(raw.get("categoryTags")),
                stage=_as_text(raw.get("stage")),
                target_users=_as_text(raw.get("targetUsers")),
                pain_points=_as_text(raw.get("painPoints")),
                bd_angles=_as_list(raw.get("bdAngles")),
                mqa_score=_as_score(raw.get("mqaScore")),
                mqa_reasons=_as_text(raw.get("mqaReasons")),
            )
        except AIProviderError as exc:
            self._fallback("analyze_project", exc)
            return mocks.mock_analyze_project(text, url)

    def score_project(
        self,
        analysis: ProjectAnalysis,
        plan: str | None,
        icp: ICPContext | None = None,
        representing: RepresentingProject | None = None,
    ) -> ScoreResult:
        if not self._live(plan):
            return mocks.mock_score_project(analysis, icp)
        try:
            raw = self._call(
                prompts.SCORE_SYSTEM,
                prompts.build_score_prompt(analysis, icp, representing),
                self.config.AI_MODEL_SCORE,
                400,
            )
            if not isinstance(raw, dict):
                raise AIProviderError("Score reply is not an object")
            return ScoreResult(score=_as_score(raw.get("score")) or 0, explanation=str(raw.get("explanation") or ""))
        except AIProviderError as exc:
            self._fallback("score_project", exc)
            return mocks.mock_score_project(analysis, icp)

    def generate_outreach(
        self,
        analysis: ProjectAnalysis,
        contact: ContactBrief,
        channels: list[str],
        plan: str | None,
        icp: ICPContext | None = None,
        representing: RepresentingProject | None = None,
        voice_profile: dict[str, Any] | None = None,
        persona: str | None = None,
        primary_angle: str | None = None,
    ) -> dict[str, str]:
        if not self._live(plan):
            return mocks.mock_generate_outreach(analysis, contact, channels, voice_profile)
        try:
            raw = self._call(
                prompts.OUTREACH_SYSTEM,
                prompts.build_outreach_prompt(
                    analysis, contact, channels, icp, representing, voice_profile, persona, primary_angle
                ),
                self.config.AI_MODEL_OUTREACH,
                900,
            )
            if not isinstance(raw, dict):
                raise AIProviderError("Outreach reply is not an object")
            safe = {
                channel: content
                for channel, content in raw.items()
                if isinstance(content, str) and content.strip()
            }
            if not safe:
                raise AIProviderError("AI returned empty outreach")
            return safe
        except AIProviderError as exc:
            self._fallback("generate_outreach", exc)
            return mocks.mock_generate_outreach(analysis, contact, channels, voice_profile)

    def generate_sequence_steps(
        self,
        analysis: ProjectAnalysis,
        plan: str | None,
        contact: ContactBrief | None = None,
        touches: int = 3,
        preferred_channel: str | None = None,
        playbook_name: str | None = None,
        representing: RepresentingProject | None = None,
        persona: str | None = None,
        primary_angle: str | None = None,
    ) -> list[SequenceStepSpec]:
        if not self._live(plan):
            return mocks.mock_generate_sequence_steps(analysis, contact, touches, preferred_channel)
        try:
            raw = self._call(
                prompts.SEQUENCE_SYSTEM,
                prompts.build_sequence_prompt(
                    analysis, contact, touches, playbook_name, representing, persona, primary_angle
                ),
                self.config.AI_MODEL_SEQUENCE,
                700,
            )
            raw_steps = raw.get("steps") if isinstance(raw, dict) else None
            if not isinstance(raw_steps, list) or not raw_steps:
                raise AIProviderError("AI returned no steps")
            steps: list[SequenceStepSpec] = []
            for item in raw_steps[:touches]:
                if not isinstance(item, dict):
                    continue
                try:
                    offset = int(float(item.get("offsetDays") or 0))
                except (TypeError, ValueError):
                    offset = 0
                steps.append(
                    SequenceStepSpec(
                        offset_days=max(0, min(MAX_OFFSET_DAYS, offset)),
                        channel=str(item.get("channel") or "email"),
                        objective=str(item.get("objective") or ""),
                        content_hint=str(item.get("contentHint") or ""),
                        persona=item.get("persona") or persona,
                        primary_angle=item.get("primaryAngle") or primary_angle,
                    )
                )
            if not steps:
                raise AIProviderError("AI returned no usable steps")
            return steps
        except AIProviderError as exc:
            self._fallback("generate_sequence_steps", exc)
            return mocks.mock_generate_sequence_steps(analysis, contact, touches, preferred_channel)

    def generate_account_playbook(
        self,
        analysis: ProjectAnalysis,
        plan: str | None,
        icp: ICPContext | None = None,
        representing: RepresentingProject | None = None,
    ) -> AccountPlaybookDraft:
        if not self._live(plan):
            return mocks.mock_account_playbook()
        try:
            raw = self._call(
                prompts.PLAYBOOK_SYSTEM,
                prompts.build_playbook_prompt(analysis, icp, representing),
                self.config.AI_MODEL_ANALYZE,
                700,
            )
            if not isinstance(raw, dict):
                raise AIProviderError("Playbook reply is not an object")
        except AIProviderError as exc:
            self._fallback("generate_account_playbook", exc)
            return mocks.mock_account_playbook()
        return _normalize_playbook(raw)


def _normalize_playbook(raw: dict[str, Any]) -> AccountPlaybookDraft:
    default = mocks.mock_account_playbook()
    personas = _as_list(raw.get("recommendedPersonas") or [])[:5]
    angles = _as_list(raw.get("primaryAngles") or [])[:3]
    channels: dict[str, list[str]] = {}
    by_persona = raw.get("recommendedChannelsByPersona")
    if isinstance(by_persona, dict):
        for persona, values in by_persona.items():
            if isinstance(values, list):
                channels[str(persona)] = [value for value in values if isinstance(value, str)][:4]
    return AccountPlaybookDraft(
        summary=str(raw.get("summary") or "Focus on clear value props and ICP-aligned angles."),
        recommended_personas=personas or default.recommended_personas,
        primary_angles=angles or default.primary_angles,
        recommended_channels_by_persona=channels or default.recommended_channels_by_persona,
    )
