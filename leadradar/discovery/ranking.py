"""Order candidate URLs so likely project sites are processed first."""

from __future__ import annotations

from collections.abc import Iterable

from .urls import get_host

PROJECT_KEYWORDS = (
    "project",
    "app",
    "dao",
    "protocol",
    "labs",
    "xyz",
    "finance",
    "defi",
    "nft",
    "token",
    "chain",
    "swap",
    "bridge",
    "vault",
    "stake",
    "yield",
    "lend",
)
EXTERNAL_HOST_POINTS = 2
KEYWORD_POINTS = 3


def candidate_score(url: str, base_host: str | None) -> int:
    score = 0
    host = get_host(url)
    if host and host != base_host:
        score += EXTERNAL_HOST_POINTS
    lowered = url.lower()
    if any(keyword in lowered for keyword in PROJECT_KEYWORDS):
        score += KEYWORD_POINTS
    return score


def prioritize_candidates(urls: Iterable[str], base_url: str) -> list[str]:
    """Sort by score, highest first; equal scores keep input order."""
    base_host = get_host(base_url)
    return sorted(urls, key=lambda url: candidate_score(url, base_host), reverse=True)
