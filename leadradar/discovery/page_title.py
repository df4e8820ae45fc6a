from __future__ import annotations

from bs4 import BeautifulSoup


def extract_page_title(html: str | None) -> str | None:
    """Human-friendly title: og:title, then ``<title>``, then the first ``<h1>``."""
    if not html:
        return None
    soup = BeautifulSoup(html, "html.parser")

    og_title = soup.find("meta", attrs={"property": "og:title"})
    if og_title and (og_title.get("content") or "").strip():
        return og_title["content"].strip()

    for tag_name in ("title", "h1"):
        tag = soup.find(tag_name)
        if tag and tag.get_text().strip():
            return tag.get_text().strip()
    return None
