"""Social profile links advertised on a project's homepage."""

from __future__ import annotations

import re
from dataclasses import dataclass

from bs4 import BeautifulSoup

_MATCHERS = {
    "twitter": re.compile(r"twitter\.com|x\.com", re.IGNORECASE),
    "telegram": re.compile(r"t\.me|telegram\.me", re.IGNORECASE),
    "discord": re.compile(r"discord\.gg|discord\.com/invite", re.IGNORECASE),
    "github": re.compile(r"github\.com", re.IGNORECASE),
    "medium": re.compile(r"medium\.com", re.IGNORECASE),
}


@dataclass
class ProjectSocials:
    twitter: str | None = None
    telegram: str | None = None
    discord: str | None = None
    github: str | None = None
    medium: str | None = None

    def as_dict(self) -> dict[str, str]:
        return {name: value for name, value in vars(self).items() if value}


def extract_project_socials(html: str | None) -> ProjectSocials:
    """First link found for each social network, in document order."""
    socials = ProjectSocials()
    if not html:
        return socials
    soup = BeautifulSoup(html, "html.parser")
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        for name, pattern in _MATCHERS.items():
            if getattr(socials, name) is None and pattern.search(href):
                setattr(socials, name, href)
    return socials
