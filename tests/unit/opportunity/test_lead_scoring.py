from __future__ import annotations

import json
from types import SimpleNamespace

from leadradar.core.enums import OpportunitySource
from leadradar.llm.types import ProjectAnalysis
from leadradar.opportunity.scoring import score_opportunity


def _playbook(name, boosts=(), penalties=()):
    return SimpleNamespace(name=name, boosts=json.dumps(list(boosts)), penalties=json.dumps(list(penalties)))


def test_icp_signals_source_and_playbook_are_blended():
    analysis = ProjectAnalysis(summary="Mainnet launching soon with audit complete", category_tags=["DeFi"])
    icp = SimpleNamespace(industries="defi, gaming")
    playbooks = [_playbook("Growth", boosts=["audit"], penalties=["memecoin"])]

    result = score_opportunity(analysis, icp, playbooks, OpportunitySource.WATCHLIST.value)

    assert result.lead_score == 83
    assert result.signal_strength == 15
    assert result.lead_reasons == [
        "Matches ICP industries/tags",
        "Playbook boost: Growth (audit)",
        "Mentions mainnet",
    ]
    assert result.playbook_matches == ["Growth"]


def test_bare_text_scan_scores_source_and_neutral_playbook_only():
    analysis = ProjectAnalysis(summary="A quiet site")
    result = score_opportunity(analysis, None, [], OpportunitySource.TEXT_SCAN)

    assert result.lead_score == 20
    assert result.signal_strength == 0
    assert result.lead_reasons == ["Found in pasted text"]
    assert result.playbook_matches == []


def test_icp_industry_must_match_whole_word():
    analysis = ProjectAnalysis(summary="x", category_tags=["DeFi"])
    result = score_opportunity(analysis, SimpleNamespace(industries="fi"), [], "PAGE_SCAN")
    assert "Matches ICP industries/tags" not in result.lead_reasons


def test_penalties_are_clamped_and_score_stays_in_bounds():
    words = ["one", "two", "three", "four", "five", "six"]
    analysis = ProjectAnalysis(summary=" ".join(words))
    result = score_opportunity(analysis, None, [_playbook("Avoid", penalties=words)], "UNKNOWN")

    assert result.lead_score == 0
    assert result.lead_reasons[0] == "Playbook penalty: Avoid (one)"
    assert len(result.lead_reasons) == 3


def test_raw_context_feeds_signal_detection():
    analysis = ProjectAnalysis(summary="Project page")
    result = score_opportunity(analysis, None, [], "PAGE_SCAN", raw_context="Testnet is live, funding announced")
    assert result.signal_strength == 15
    assert result.lead_reasons[:3] == ["Mentions testnet", "Mentions funding", "Mentions announced"]
    assert 0 <= result.lead_score <= 100
