"""Move AI analysis results in and out of ``Project`` rows."""

from __future__ import annotations

from leadradar.database.models import Project
from leadradar.llm.types import ProjectAnalysis, ScoreResult
from leadradar.scraper.metadata import ProjectSocials
from leadradar.utils.validators import parse_string_list, serialize_json


def analysis_from_project(project: Project) -> ProjectAnalysis:
    """Rebuild the analysis stored on a project for prompt input."""
    return ProjectAnalysis(
        summary=project.summary or project.url,
        category_tags=parse_string_list(project.category_tags),
        stage=project.stage or "unknown",
        target_users=project.target_users or "",
        pain_points=project.pain_points or "",
        bd_angles=parse_string_list(project.bd_angles),
        mqa_score=project.mqa_score or 0,
        mqa_reasons=project.mqa_reasons or "",
    )


def apply_analysis(project: Project, analysis: ProjectAnalysis, scoring: ScoreResult) -> None:
    """Overwrite the derived fields; status, contacts and sequences are untouched."""
    project.summary = analysis.summary
    project.category_tags = serialize_json(analysis.category_tags)
    project.stage = analysis.stage
    project.target_users = analysis.target_users
    project.pain_points = analysis.pain_points
    project.icp_score = scoring.score
    project.icp_explanation = scoring.explanation
    project.bd_angles = serialize_json(analysis.bd_angles)
    project.mqa_score = analysis.mqa_score
    project.mqa_reasons = analysis.mqa_reasons


def apply_socials(project: Project, socials: ProjectSocials) -> None:
    for name, value in socials.as_dict().items():
        setattr(project, name, value)
