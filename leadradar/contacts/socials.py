"""Normalizers for handles and URLs typed into capture forms."""

from __future__ import annotations

import re
from urllib.parse import urlparse

_PERSONA_RULES = (
    (re.compile(r"founder|ceo|cto|co[- ]founder", re.IGNORECASE), "Technical founder"),
    (re.compile(r"engineer|developer|dev|protocol", re.IGNORECASE), "Protocol engineer"),
    (re.compile(r"bd|business|growth|ecosystem", re.IGNORECASE), "BD / ecosystem lead"),
)


def normalize_twitter_handle(value: str | None) -> str | None:
    """Turn ``https://x.com/name`` or ``name`` into ``@name``."""
    if not value:
        return None
    handle = value.strip()
    if not handle:
        return None
    if handle.startswith("http"):
        try:
            parts = [part for part in urlparse(handle).path.split("/") if part]
        except ValueError:
            return None
        if parts:
            handle = f"@{parts[0]}"
    if not handle.startswith("@"):
        handle = f"@{handle}"
    return handle


def normalize_linkedin_url(value: str | None) -> str | None:
    if not value:
        return None
    url = value.strip()
    if not url:
        return None
    if not url.startswith("http"):
        url = f"https://{url}"
    return url


def normalize_url_maybe(value: str | None) -> str | None:
    """Prefix ``https://`` onto bare domains; blank input gives None."""
    if not value:
        return None
    url = value.strip()
    if not url:
        return None
    if not url.startswith("http"):
        url = f"https://{url}"
    return url


def stub_url_from_name(name: str | None) -> str:
    """Placeholder project URL for companies captured without a website."""
    if not name:
        return "https://placeholder.invalid"
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return f"https://{slug or 'placeholder'}.invalid"


def classify_persona(role: str | None) -> str | None:
    if not role:
        return None
    for pattern, persona in _PERSONA_RULES:
        if pattern.search(role):
            return persona
    return None
