"""Data contracts exchanged with the AI provider and its mock fallbacks."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ICPContext:
    industries: str | None = None
    pain_points: str | None = None
    filters: dict[str, Any] | None = None


@dataclass(frozen=True)
class RepresentingProject:
    """The company the user does BD for; feeds prompt context."""

    name: str
    website: str | None = None
    one_liner: str | None = None
    product_category: str | None = None
    primary_value_prop: str | None = None
    ideal_customer: str | None = None
    key_differentiators: str | None = None
    tone_guidelines: str | None = None
    reference_accounts: tuple[str, ...] = ()


@dataclass
class ProjectAnalysis:
    summary: str
    category_tags: list[str] = field(default_factory=list)
    stage: str | None = None
    target_users: str | None = None
    pain_points: str | None = None
    bd_angles: list[str] = field(default_factory=list)
    mqa_score: int | None = None
    mqa_reasons: str | None = None


@dataclass(frozen=True)
class ScoreResult:
    score: int
    explanation: str


@dataclass(frozen=True)
class ContactBrief:
    name: str
    role: str | None = None
    linkedin_url: str | None = None
    twitter_handle: str | None = None
    email: str | None = None
    telegram: str | None = None
    channel_preference: str | None = None


@dataclass(frozen=True)
class SequenceStepSpec:
    offset_days: int
    channel: str
    objective: str
    content_hint: str
    persona: str | None = None
    primary_angle: str | None = None


@dataclass
class AccountPlaybookDraft:
    summary: str
    recommended_personas: list[str]
    primary_angles: list[str]
    recommended_channels_by_persona: dict[str, list[str]]


_REPRESENTING_KEYS = {
    "website": ("website",),
    "one_liner": ("oneLiner", "one_liner"),
    "product_category": ("productCategory", "product_category"),
    "primary_value_prop": ("primaryValueProp", "primary_value_prop"),
    "ideal_customer": ("idealCustomer", "ideal_customer"),
    "key_differentiators": ("keyDifferentiators", "key_differentiators"),
    "tone_guidelines": ("toneGuidelines", "tone_guidelines"),
}


def parse_representing_project(raw: Any) -> RepresentingProject | None:
    """Read the stored representing-project JSON; anything without a name is None."""
    if not raw:
        return None
    data = raw
    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except ValueError:
            return None
    if not isinstance(data, dict):
        return None

    name = str(data.get("name") or "").strip()
    if not name:
        return None

    values: dict[str, str | None] = {}
    for attr, keys in _REPRESENTING_KEYS.items():
        value = next((data[key] for key in keys if data.get(key)), None)
        values[attr] = str(value) if value else None

    references = data.get("referenceAccounts", data.get("reference_accounts"))
    accounts: tuple[str, ...] = ()
    if isinstance(references, list):
        accounts = tuple(item.strip() for item in references if isinstance(item, str) and item.strip())

    return RepresentingProject(name=name, reference_accounts=accounts, **values)
