"""Pull http(s) URLs out of pasted free text."""

from __future__ import annotations

import re

URL_PATTERN = re.compile(
    r"https?://[\w.-]+(?:\.[\w.-]+)+[\w\-._~:/?#\[\]@!$&'()*+,;=%]*",
    re.IGNORECASE,
)
_TRAILING_PUNCTUATION = re.compile(r"[),.;]+$")


def extract_urls_from_text(text: str | None) -> list[str]:
    """Return URLs in order of first appearance, trailing ``),.;`` trimmed, without repeats."""
    if not text:
        return []
    seen: dict[str, None] = {}
    for match in URL_PATTERN.findall(text):
        url = _TRAILING_PUNCTUATION.sub("", match.strip())
        if url:
            seen.setdefault(url, None)
    return list(seen)
