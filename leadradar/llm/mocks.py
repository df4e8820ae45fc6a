"""Deterministic stand-ins used whenever live AI is unavailable.

Outputs depend only on the inputs, so the same page always yields the same
mock analysis and the test-suite can assert on exact values.
"""

from __future__ import annotations

from typing import Any

from .types import (
    AccountPlaybookDraft,
    ContactBrief,
    ICPContext,
    ProjectAnalysis,
    ScoreResult,
    SequenceStepSpec,
)

MOCK_KEYWORDS = ("defi", "l2", "nft", "wallet", "security", "infra", "gaming")
MOCK_STAGES = ("idea", "early", "growth", "mature")
MOCK_TAGS = ("DeFi", "L2", "Tooling", "NFT", "Infra", "Security", "Gaming")
SEQUENCE_CHANNELS = ("telegram", "twitter", "email", "linkedin")


def hash_string(value: str) -> int:
    """31-multiplier rolling hash over UTF-16 code units, wrapped to signed 32 bits."""
    encoded = value.encode("utf-16-le")
    result = 0
    for index in range(0, len(encoded), 2):
        unit = encoded[index] | (encoded[index + 1] << 8)
        result = ((result << 5) - result + unit) & 0xFFFFFFFF
    if result >= 0x80000000:
        result -= 0x100000000
    return abs(result)


def mock_analyze_project(text: str, url: str) -> ProjectAnalysis:
    base_text = text[:500].lower()
    seed = hash_string(url + base_text)
    keyword = next((candidate for candidate in MOCK_KEYWORDS if candidate in base_text), "web3")

    angle_seeds = [
        f"Lead with security concerns around {keyword}",
        "Mention scaling plans on L2 and infra readiness",
        f"Offer warm intros to partners in {keyword}",
        f"Highlight go-to-market co-marketing for {keyword}",
        f"Surface compliance and risk posture for {keyword}",
    ]
    start = seed % len(angle_seeds)
    stage = MOCK_STAGES[seed % len(MOCK_STAGES)]
    tags = list(dict.fromkeys([MOCK_TAGS[seed % len(MOCK_TAGS)], MOCK_TAGS[(seed + 3) % len(MOCK_TAGS)]]))

    return ProjectAnalysis(
        summary=f"Snapshot of {url} - {keyword} focus with early traction signals and partnership potential.",
        category_tags=tags,
        stage=stage,
        target_users="Protocols and Web3 growth teams" if seed % 2 == 0 else "Builders and infra teams",
        pain_points=(
            "Needs deeper liquidity, BD coverage, and clearer partner story."
            if seed % 3 == 0
            else "Needs faster integrations, better onboarding, and sharper monetization narrative."
        ),
        bd_angles=angle_seeds[start : start + 3],
        mqa_score=30 + (seed % 71),
        mqa_reasons=f"Score weighted by ICP match on {keyword}, stage {stage}, and traction signals.",
    )


def mock_score_project(analysis: ProjectAnalysis, icp: ICPContext | None) -> ScoreResult:
    icp_text = f"{(icp.industries if icp else None) or ''} {(icp.pain_points if icp else None) or ''}".strip().lower()
    signals = " ".join(
        part or "" for part in (analysis.summary, analysis.pain_points, analysis.target_users)
    ).lower()

    first_term = icp_text.split(" ")[0] if icp_text else ""
    overlap = 30 if first_term and first_term in signals else 0
    stage_bonus = 15 if analysis.stage in {"growth", "mature"} else 0
    score = max(0, min(100, 35 + overlap + stage_bonus))
    pains = "ICP pains" if icp and icp.pain_points else "generic pains"
    return ScoreResult(
        score=score,
        explanation=(
            f"Matched against ICP focus. Stage {analysis.stage}; tags {', '.join(analysis.category_tags)}; "
            f"pains aligned to {pains}."
        ),
    )


def mock_generate_outreach(
    analysis: ProjectAnalysis,
    contact: ContactBrief,
    channels: list[str],
    voice_profile: dict[str, Any] | None = None,
) -> dict[str, str]:
    voice = voice_profile or {}
    tone = voice.get("tone", "practical")
    length = voice.get("length", "short")
    formality = voice.get("formality", "casual")
    return {
        channel: (
            f"{channel.upper()} | {tone}/{formality}/{length}: {contact.name}, noticed your "
            f"{', '.join(analysis.category_tags)} focus. We help teams solve '{analysis.pain_points}'. "
            "Open to a quick chat?"
        )
        for channel in channels
    }


def mock_generate_sequence_steps(
    analysis: ProjectAnalysis,
    contact: ContactBrief | None = None,
    touches: int = 3,
    preferred_channel: str | None = None,
) -> list[SequenceStepSpec]:
    preferred = preferred_channel if preferred_channel in SEQUENCE_CHANNELS else None
    name = contact.name if contact and contact.name else "there"
    role = f" ({contact.role})" if contact and contact.role else ""
    angles = analysis.bd_angles

    steps: list[SequenceStepSpec] = []
    for number in range(1, touches + 1):
        channel = preferred if number == 1 and preferred else SEQUENCE_CHANNELS[(number - 1) % len(SEQUENCE_CHANNELS)]
        if channel in {"telegram", "twitter"}:
            tone = "concise DM"
        elif channel == "email":
            tone = "semi-formal email"
        else:
            tone = "brief intro"
        angle = (angles[number % len(angles)] if angles else None) or "value add"
        steps.append(
            SequenceStepSpec(
                offset_days=number - 1,
                channel=channel,
                objective=f"Step {number} touchpoint",
                content_hint=f"{tone}: Hi {name}{role}, re: {angle}. {analysis.summary[:120]}".strip(),
            )
        )
    return steps


def mock_account_playbook() -> AccountPlaybookDraft:
    return AccountPlaybookDraft(
        summary="Position this account with a focus on security, reliability, and fast BD cycles.",
        recommended_personas=["Technical founder", "Protocol engineer", "BD / ecosystem lead"],
        primary_angles=["De-risk launches with proactive security", "Speed up BD with credible case studies"],
        recommended_channels_by_persona={
            "Technical founder": ["email", "twitter", "telegram"],
            "Protocol engineer": ["telegram", "discord"],
            "BD / ecosystem lead": ["email", "linkedin"],
        },
    )
