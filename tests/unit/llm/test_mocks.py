from __future__ import annotations

from leadradar.llm.mocks import (
    hash_string,
    mock_analyze_project,
    mock_generate_outreach,
    mock_generate_sequence_steps,
    mock_score_project,
)
from leadradar.llm.types import ContactBrief, ICPContext, ProjectAnalysis


def test_hash_string_matches_rolling_31_hash():
    assert hash_string("") == 0
    assert hash_string("a") == 97
    assert hash_string("ab") == 97 * 31 + 98


def test_hash_string_stays_in_signed_32_bit_range():
    value = hash_string("https://alpha.xyz" + "x" * 400)
    assert 0 <= value <= 2**31


def test_mock_analysis_is_deterministic_and_keyword_aware():
    first = mock_analyze_project("We build DeFi lending rails", "https://alpha.xyz")
    second = mock_analyze_project("We build DeFi lending rails", "https://alpha.xyz")

    assert first == second
    assert first.summary.startswith("Snapshot of https://alpha.xyz - defi focus")
    assert 30 <= first.mqa_score <= 100
    assert 1 <= len(first.bd_angles) <= 3
    assert first.stage in {"idea", "early", "growth", "mature"}
    assert len(first.category_tags) == len(set(first.category_tags))


def test_mock_analysis_without_keyword_uses_web3():
    analysis = mock_analyze_project("Plain text", "https://beta.io")
    assert "web3 focus" in analysis.summary


def test_mock_score_rewards_icp_overlap_and_stage():
    analysis = ProjectAnalysis(summary="A defi protocol", stage="growth", category_tags=["DeFi"])
    assert mock_score_project(analysis, ICPContext(industries="defi")).score == 80
    assert mock_score_project(analysis, None).score == 50
    early = ProjectAnalysis(summary="Something else", stage="early")
    assert mock_score_project(early, ICPContext(industries="gaming")).score == 35


def test_mock_outreach_covers_every_channel_with_voice():
    analysis = ProjectAnalysis(summary="s", category_tags=["DeFi"], pain_points="liquidity")
    messages = mock_generate_outreach(
        analysis, ContactBrief(name="Alice"), ["email", "telegram"], {"tone": "warm"}
    )
    assert set(messages) == {"email", "telegram"}
    assert messages["email"].startswith("EMAIL | warm/casual/short: Alice")


def test_mock_sequence_cycles_channels_with_daily_offsets():
    analysis = ProjectAnalysis(summary="Summary", bd_angles=["angle one", "angle two"])
    steps = mock_generate_sequence_steps(analysis, ContactBrief(name="Bob", role="CTO"), touches=5)

    assert [step.channel for step in steps] == ["telegram", "twitter", "email", "linkedin", "telegram"]
    assert [step.offset_days for step in steps] == [0, 1, 2, 3, 4]
    assert steps[0].content_hint.startswith("concise DM: Hi Bob (CTO), re: angle two.")


def test_mock_sequence_honours_known_preferred_channel_on_first_step():
    analysis = ProjectAnalysis(summary="Summary")
    steps = mock_generate_sequence_steps(analysis, None, touches=2, preferred_channel="email")
    assert [step.channel for step in steps] == ["email", "twitter"]
    unknown = mock_generate_sequence_steps(analysis, None, touches=1, preferred_channel="fax")
    assert unknown[0].channel == "telegram"
