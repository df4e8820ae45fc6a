"""Lead score for a discovered opportunity.

Weighted blend of four 0-100 components: ICP tag fit (30%), launch/funding
signals in the page text (20%), source quality (25%) and user playbook
boosts/penalties around a neutral 50 (25%).
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from leadradar.core.enums import OpportunitySource
from leadradar.llm.types import ProjectAnalysis
from leadradar.utils.validators import parse_string_list

SIGNAL_KEYWORDS = ("testnet", "mainnet", "launching", "audit", "raise", "funding", "announced", "beta", "alpha")
SOURCE_SCORES = {
    OpportunitySource.WATCHLIST.value: (100, "From watchlist source"),
    OpportunitySource.PAGE_SCAN.value: (60, "Found via page scan"),
    OpportunitySource.TEXT_SCAN.value: (30, "Found in pasted text"),
}
WEIGHTS = {"icp": 0.30, "signal": 0.20, "source": 0.25, "playbook": 0.25}
PLAYBOOK_BASELINE = 50
PLAYBOOK_STEP = 10
PLAYBOOK_MAX_ADJUSTMENT = 50
MAX_LEAD_REASONS = 3


@dataclass(frozen=True)
class LeadScore:
    lead_score: int
    signal_strength: int
    lead_reasons: list[str] = field(default_factory=list)
    playbook_matches: list[str] = field(default_factory=list)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _keywords(value: Any) -> list[str]:
    if isinstance(value, str):
        return parse_string_list(value)
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item]
    return []


def _icp_industries(icp: Any) -> list[str]:
    raw = getattr(icp, "industries", None) if icp is not None else None
    if not raw:
        return []
    return [part.strip().lower() for part in raw.split(",") if part.strip()]


def _matches_icp(tags: Iterable[str], industries: list[str]) -> bool:
    patterns = [re.compile(rf"\b{re.escape(industry)}\b", re.IGNORECASE) for industry in industries]
    return any(pattern.search(tag.lower()) for tag in tags for pattern in patterns)


def score_opportunity(
    analysis: ProjectAnalysis,
    icp: Any,
    playbooks: Iterable[Any],
    source_type: str,
    raw_context: str | None = None,
) -> LeadScore:
    """Deterministic lead score in 0..100 with at most three ranked reasons."""
    text_blob = " ".join(
        [
            analysis.summary or "",
            analysis.target_users or "",
            analysis.pain_points or "",
            raw_context or "",
            " ".join(analysis.category_tags),
        ]
    ).lower()

    icp_reasons: list[str] = []
    industries = _icp_industries(icp)
    icp_component = 0
    if industries and _matches_icp(analysis.category_tags, industries):
        icp_component = 100
        icp_reasons.append("Matches ICP industries/tags")

    signal_reasons = [f"Mentions {keyword}" for keyword in SIGNAL_KEYWORDS if keyword in text_blob]
    signal_count = len(signal_reasons)
    signal_component = min(100.0, signal_count / len(SIGNAL_KEYWORDS) * 200)

    source_value = getattr(source_type, "value", source_type)
    source_component, source_reason = SOURCE_SCORES.get(source_value, (0, None))

    boost_reasons: list[str] = []
    penalty_reasons: list[str] = []
    playbook_matches: list[str] = []
    adjustment = 0
    for playbook in playbooks:
        matched = False
        for boost in _keywords(getattr(playbook, "boosts", None)):
            if boost.lower() in text_blob:
                adjustment += PLAYBOOK_STEP
                boost_reasons.append(f"Playbook boost: {playbook.name} ({boost})")
                matched = True
        for penalty in _keywords(getattr(playbook, "penalties", None)):
            if penalty.lower() in text_blob:
                adjustment -= PLAYBOOK_STEP
                penalty_reasons.append(f"Playbook penalty: {playbook.name} ({penalty})")
                matched = True
        if matched:
            playbook_matches.append(playbook.name)

    adjustment = max(-PLAYBOOK_MAX_ADJUSTMENT, min(PLAYBOOK_MAX_ADJUSTMENT, adjustment))
    playbook_component = max(0, min(100, PLAYBOOK_BASELINE + adjustment))

    lead_score = _round_half_up(
        icp_component * WEIGHTS["icp"]
        + signal_component * WEIGHTS["signal"]
        + source_component * WEIGHTS["source"]
        + playbook_component * WEIGHTS["playbook"]
    )

    ranked = icp_reasons + boost_reasons + signal_reasons
    if source_reason:
        ranked.append(source_reason)
    ranked += penalty_reasons

    return LeadScore(
        lead_score=max(0, min(100, lead_score)),
        signal_strength=min(50, signal_count * 5),
        lead_reasons=ranked[:MAX_LEAD_REASONS],
        playbook_matches=playbook_matches,
    )
