"""AI provider client, prompts, deterministic mocks and the service facade."""

from leadradar.llm.ai_service import AIService, can_use_live_ai
from leadradar.llm.types import (
    AccountPlaybookDraft,
    ContactBrief,
    ICPContext,
    ProjectAnalysis,
    RepresentingProject,
    ScoreResult,
    SequenceStepSpec,
    parse_representing_project,
)

__all__ = [
    "AIService",
    "AccountPlaybookDraft",
    "ContactBrief",
    "ICPContext",
    "ProjectAnalysis",
    "RepresentingProject",
    "ScoreResult",
    "SequenceStepSpec",
    "can_use_live_ai",
    "parse_representing_project",
]
