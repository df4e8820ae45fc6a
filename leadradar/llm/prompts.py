"""Prompt builders for the live AI provider."""

from __future__ import annotations

import json
from typing import Any

from .types import ContactBrief, ICPContext, ProjectAnalysis, RepresentingProject

ANALYZE_SYSTEM = "You are an expert Web3 business analyst. Always reply with strict JSON."
SCORE_SYSTEM = "You score ICP fit. Reply with JSON only."
OUTREACH_SYSTEM = "You are a senior Web3 BD rep. Generate concise outreach for each channel. Reply with JSON only."
SEQUENCE_SYSTEM = "You design BD sequences. Reply with JSON only."
PLAYBOOK_SYSTEM = (
    "You are a senior Web3 BD strategist. Design account-level playbooks for a BD rep. "
    "Return ONLY valid JSON. No markdown, no backticks."
)
ANALYZE_TEXT_LIMIT = 4000


def _join(lines: list[str | None]) -> str:
    return "\n".join(line for line in lines if line is not None)


def representing_block(rep: RepresentingProject | None) -> str | None:
    if rep is None:
        return None
    lines = [
        "You represent this project when crafting BD insights:",
        f"- Name: {rep.name}",
        f"- One-liner: {rep.one_liner}" if rep.one_liner else None,
        f"- Category: {rep.product_category}" if rep.product_category else None,
        f"- Primary value prop: {rep.primary_value_prop}" if rep.primary_value_prop else None,
        f"- Ideal customer: {rep.ideal_customer}" if rep.ideal_customer else None,
        f"- Differentiators: {rep.key_differentiators}" if rep.key_differentiators else None,
        f"- Tone guidelines: {rep.tone_guidelines}" if rep.tone_guidelines else None,
        f"- Website: {rep.website}" if rep.website else None,
        (
            f"- Reference accounts (actual wins/clients): {', '.join(rep.reference_accounts)}"
            if rep.reference_accounts
            else None
        ),
        "",
    ]
    return _join(lines)


def _icp_lines(icp: ICPContext | None) -> list[str]:
    return [
        f"ICP industries: {(icp.industries if icp else None) or '-'}",
        f"ICP pain points: {(icp.pain_points if icp else None) or '-'}",
    ]


def _analysis_lines(analysis: ProjectAnalysis) -> list[str]:
    return [
        f"Project summary: {analysis.summary}",
        f"Tags: {', '.join(analysis.category_tags)}",
        f"Stage: {analysis.stage}",
        f"Target users: {analysis.target_users}",
        f"Pain points: {analysis.pain_points}",
    ]


def build_analyze_prompt(
    text: str,
    url: str,
    icp: ICPContext | None,
    representing: RepresentingProject | None,
) -> str:
    return _join(
        [
            representing_block(representing),
            "You will analyze a Web3 project website and return structured JSON only.",
            f"Website URL: {url}",
            *_icp_lines(icp),
            f"Extract from HTML body text (truncated): {text[:ANALYZE_TEXT_LIMIT]}",
            "Return ONLY valid JSON. No markdown, no prose, no extra keys.",
            "Expected keys: summary, categoryTags[], stage, targetUsers, painPoints, bdAngles[], "
            "mqaScore (0-100), mqaReasons.",
        ]
    )


def build_score_prompt(
    analysis: ProjectAnalysis,
    icp: ICPContext | None,
    representing: RepresentingProject | None,
) -> str:
    return _join(
        [
            representing_block(representing),
            'You score ICP fit. Return JSON: { "score": number, "explanation": string }. Score 0-100 only.',
            *_analysis_lines(analysis),
            *_icp_lines(icp),
            "Return ONLY valid JSON. No markdown, no backticks.",
        ]
    )


def build_outreach_prompt(
    analysis: ProjectAnalysis,
    contact: ContactBrief,
    channels: list[str],
    icp: ICPContext | None,
    representing: RepresentingProject | None,
    voice_profile: dict[str, Any] | None = None,
    persona: str | None = None,
    primary_angle: str | None = None,
) -> str:
    rep = representing_block(representing) or (
        "You are a senior Web3 BD rep. If the represented project is missing, "
        "keep messaging generic but professional.\n"
    )
    return _join(
        [
            rep,
            "Generate concise BD outreach for the specified channels. "
            "Return pure JSON with only the requested channels as keys.",
            f"Target persona: {persona or 'not specified'}",
            f"Primary BD angle to emphasize: {primary_angle or 'not specified'}",
            *_analysis_lines(analysis),
            *_icp_lines(icp),
            f"Contact: {contact.name} ({contact.role or 'unknown role'})",
            (
                f"Contact socials: LinkedIn={contact.linkedin_url or '-'}, Twitter={contact.twitter_handle or '-'}, "
                f"Email={contact.email or '-'}, Telegram={contact.telegram or '-'}"
            ),
            f"Channel preference: {contact.channel_preference or '-'}",
            f"Voice profile JSON: {json.dumps(voice_profile or {})}",
            f"Channels to generate: {', '.join(channels)}",
            "Return ONLY a JSON object keyed by channel. No markdown, no backticks, JSON only.",
        ]
    )


def build_sequence_prompt(
    analysis: ProjectAnalysis,
    contact: ContactBrief | None,
    touches: int,
    playbook_name: str | None,
    representing: RepresentingProject | None,
    persona: str | None = None,
    primary_angle: str | None = None,
) -> str:
    return _join(
        [
            representing_block(representing),
            f"Design a multi-touch BD sequence (max {touches} steps). Return JSON only: "
            '{ "steps": [ { "offsetDays": number, "channel": string, "objective": string, '
            '"contentHint": string, "persona"?: string, "primaryAngle"?: string } ] }.',
            f"Target persona for this campaign: {persona}" if persona else "Persona not provided.",
            f"Primary angle to lean on: {primary_angle}" if primary_angle else "Primary angle not provided.",
            f"Project summary: {analysis.summary}",
            f"Tags: {', '.join(analysis.category_tags)}",
            f"Pain points: {analysis.pain_points}",
            f"BD angles: {' | '.join(analysis.bd_angles)}",
            (
                f"Contact: {contact.name if contact else 'N/A'} ({(contact.role if contact else None) or 'N/A'}), "
                f"preference: {(contact.channel_preference if contact else None) or 'none'}"
            ),
            f"Playbook: {playbook_name or 'none'}",
            "Return ONLY valid JSON. No markdown or backticks.",
        ]
    )


def build_playbook_prompt(
    analysis: ProjectAnalysis,
    icp: ICPContext | None,
    representing: RepresentingProject | None,
) -> str:
    rep = representing_block(representing) or (
        "Represented Project missing; keep guidance generic but still professional."
    )
    return _join(
        [
            rep,
            "Prospect analysis:",
            *_analysis_lines(analysis),
            f"BD angles: {' | '.join(analysis.bd_angles)}",
            f"ICP industries: {icp.industries}" if icp and icp.industries else None,
            f"ICP pains: {icp.pain_points}" if icp and icp.pain_points else None,
            "",
            'Return ONLY JSON with keys "summary", "recommendedPersonas" (list), "primaryAngles" (list) '
            'and "recommendedChannelsByPersona" (object of persona -> channel list).',
        ]
    )
