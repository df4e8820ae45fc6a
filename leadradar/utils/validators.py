"""Deterministic sanitizers and JSON column helpers."""

from __future__ import annotations

import json
from typing import Any


def sanitize_text(value: str | None, max_len: int = 20000) -> str:
    """Sanitize free-form content before persistence/display."""
    if value is None:
        return ""
    cleaned = str(value).replace("\x00", "").strip()
    cleaned = cleaned[:max_len]
    return cleaned


def optional_text(value: str | None, max_len: int = 20000) -> str | None:
    """Sanitize and collapse blank values to None."""
    cleaned = sanitize_text(value, max_len=max_len)
    return cleaned or None


def serialize_json(value: Any) -> str | None:
    """Encode a value for a JSON-in-text column; None stays None."""
    if value is None:
        return None
    try:
        return json.dumps(value, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return None


def parse_json_string(value: str | None, fallback: Any = None) -> Any:
    """Decode a JSON-in-text column, returning ``fallback`` for anything unreadable."""
    if value is None or value == "":
        return fallback
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        return fallback


def parse_string_list(value: str | None) -> list[str]:
    """Decode a JSON list column into a list of non-empty strings."""
    parsed = parse_json_string(value, fallback=[])
    if not isinstance(parsed, list):
        return []
    return [str(item) for item in parsed if item is not None and str(item).strip()]


def split_csv(value: str | None) -> list[str]:
    """Split a comma-separated setting into trimmed, non-empty parts."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]
