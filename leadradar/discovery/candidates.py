"""Candidate project links found in a fetched page."""

from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .urls import get_host, host_in_domains, is_http_url, normalize_url

SOCIAL_DOMAINS = (
    "twitter.com",
    "x.com",
    "facebook.com",
    "linkedin.com",
    "instagram.com",
    "t.me",
    "telegram.me",
    "discord.gg",
    "discord.com",
    "github.com",
    "medium.com",
)


def is_social_url(url: str) -> bool:
    return host_in_domains(url, SOCIAL_DOMAINS)


def resolve_href(href: str | None, base_url: str) -> str | None:
    """Absolute URL for an anchor ``href``; None for mail/phone/in-page links."""
    if not href:
        return None
    href = href.strip()
    if not href or href.startswith(("mailto:", "tel:", "#", "javascript:")):
        return None
    try:
        return urljoin(base_url, href)
    except ValueError:
        return None


def _meta_urls(soup: BeautifulSoup, base_url: str) -> list[str]:
    found: list[str] = []
    canonical = soup.find("link", rel="canonical")
    og_url = soup.find("meta", attrs={"property": "og:url"})
    for href in (
        canonical.get("href") if canonical else None,
        og_url.get("content") if og_url else None,
    ):
        resolved = resolve_href(href, base_url)
        normalized = normalize_url(resolved)
        if normalized:
            found.append(normalized)
    return found


def extract_candidate_urls_from_html(html: str, base_url: str) -> list[str]:
    """External, non-social links plus the page's canonical/og:url, normalized and de-duplicated."""
    soup = BeautifulSoup(html or "", "html.parser")
    base_host = get_host(base_url)
    urls: list[str] = []

    for anchor in soup.find_all("a", href=True):
        resolved = resolve_href(anchor.get("href"), base_url)
        if not resolved or not is_http_url(resolved):
            continue
        if is_social_url(resolved):
            continue
        if get_host(resolved) == base_host:
            continue
        if "#" in resolved:
            continue
        normalized = normalize_url(resolved)
        if normalized:
            urls.append(normalized)

    combined = urls + _meta_urls(soup, base_url)
    return list(dict.fromkeys(combined))


def extract_all_links(html: str, base_url: str) -> list[str]:
    """Every resolvable http(s) anchor, internal and external, normalized."""
    soup = BeautifulSoup(html or "", "html.parser")
    urls: list[str] = []
    for anchor in soup.find_all("a", href=True):
        normalized = normalize_url(resolve_href(anchor.get("href"), base_url))
        if normalized:
            urls.append(normalized)
    return list(dict.fromkeys(urls))
