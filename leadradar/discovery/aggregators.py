"""Two-stage extraction for crypto listing sites.

Aggregators (RootData, CryptoRank, DefiLlama, DappRadar, CoinGecko,
CoinMarketCap) list projects as internal detail pages. Each extractor returns
those detail-page links plus any outbound links that look like project sites;
the scanner then fetches the detail pages to find the project websites.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from .candidates import SOCIAL_DOMAINS, resolve_href
from .urls import get_host, host_in_domains, normalize_url

BLOCKED_DOMAINS = SOCIAL_DOMAINS + (
    "youtube.com",
    "reddit.com",
    "tiktok.com",
    "cloudflare.com",
    "googleapis.com",
    "gstatic.com",
    "googletagmanager.com",
    "google-analytics.com",
    "jsdelivr.net",
    "unpkg.com",
    "cdnjs.cloudflare.com",
    "apple.com",
    "play.google.com",
    "chrome.google.com",
    "docs.google.com",
)

PROJECT_URL_HINTS = (
    "protocol",
    "finance",
    "defi",
    ".fi",
    ".xyz",
    ".io",
    ".app",
    ".network",
    ".exchange",
    "swap",
    "dao",
    "token",
    "chain",
    "labs",
    "capital",
    "ventures",
    "fund",
    "wallet",
    "bridge",
    "stake",
    "yield",
    "lend",
    "borrow",
    "vault",
    "pool",
)


def is_blocked_domain(url: str) -> bool:
    return host_in_domains(url, BLOCKED_DOMAINS)


def is_likely_project_url(url: str) -> bool:
    lowered = url.lower()
    return any(hint in lowered for hint in PROJECT_URL_HINTS)


def _class_contains(tag: Tag, fragments: tuple[str, ...]) -> bool:
    classes = " ".join(tag.get("class") or [])
    return any(fragment in classes for fragment in fragments)


def _closest(anchor: Tag, fragments: tuple[str, ...]) -> bool:
    """True when the anchor's parent or any ancestor has a class containing a fragment."""
    return any(_class_contains(parent, fragments) for parent in anchor.parents if isinstance(parent, Tag))


def _in_table(anchor: Tag) -> bool:
    return anchor.find_parent(["table", "tr", "td"]) is not None


def _opens_new_tab(anchor: Tag) -> bool:
    return anchor.get("target") == "_blank"


def _rootdata_context(anchor: Tag) -> bool:
    return _closest(anchor, ("project", "card")) or _opens_new_tab(anchor)


def _cryptorank_context(anchor: Tag) -> bool:
    has_icon = any(
        _class_contains(child, ("external", "link")) for child in anchor.find_all(True)
    )
    return _in_table(anchor) or _closest(anchor, ("card", "project", "coin")) or has_icon


def _defillama_context(anchor: Tag) -> bool:
    return _in_table(anchor) or _closest(anchor, ("protocol", "row")) or _opens_new_tab(anchor)


def _no_context(anchor: Tag) -> bool:
    return False


@dataclass(frozen=True)
class SiteExtractor:
    name: str
    host_patterns: tuple[str, ...]
    detail_paths: tuple[str, ...]
    external_context: Callable[[Tag], bool] = _no_context
    # RootData keeps detail links on any host; the others only keep their own.
    detail_host_check: bool = True

    def owns_host(self, host: str) -> bool:
        return any(pattern in host for pattern in self.host_patterns)

    def extract(self, html: str, base_url: str) -> list[str]:
        soup = BeautifulSoup(html or "", "html.parser")
        urls: list[str] = []

        for detail_path in self.detail_paths:
            for anchor in soup.find_all("a", href=True):
                if detail_path not in anchor["href"]:
                    continue
                resolved = resolve_href(anchor["href"], base_url)
                if not resolved:
                    continue
                if self.detail_host_check and not any(pattern in resolved for pattern in self.host_patterns):
                    continue
                normalized = normalize_url(resolved)
                if normalized:
                    urls.append(normalized)

        for anchor in soup.find_all("a", href=True):
            href = anchor["href"]
            if not href.startswith("http"):
                continue
            host = get_host(href)
            if not host or self.owns_host(host):
                continue
            if is_blocked_domain(href):
                continue
            if self.external_context(anchor) or is_likely_project_url(href):
                normalized = normalize_url(href)
                if normalized:
                    urls.append(normalized)

        return list(dict.fromkeys(urls))


SITE_EXTRACTORS: tuple[SiteExtractor, ...] = (
    SiteExtractor(
        name="rootdata",
        host_patterns=("rootdata.com",),
        detail_paths=("/Projects/detail/",),
        external_context=_rootdata_context,
        detail_host_check=False,
    ),
    SiteExtractor(
        name="cryptorank",
        host_patterns=("cryptorank.io",),
        detail_paths=("/price/", "/ico/", "/currencies/", "/coin/"),
        external_context=_cryptorank_context,
    ),
    SiteExtractor(
        name="defillama",
        host_patterns=("defillama.com", "llama.fi"),
        detail_paths=("/protocol/", "/chain/"),
        external_context=_defillama_context,
    ),
    SiteExtractor(
        name="dappradar",
        host_patterns=("dappradar.com",),
        detail_paths=("/dapp/",),
    ),
    SiteExtractor(
        name="coingecko",
        host_patterns=("coingecko.com",),
        detail_paths=("/coins/",),
        external_context=_in_table,
    ),
    SiteExtractor(
        name="coinmarketcap",
        host_patterns=("coinmarketcap.com",),
        detail_paths=("/currencies/",),
    ),
)


def find_extractor(url: str) -> SiteExtractor | None:
    host = get_host(url)
    if not host:
        return None
    for extractor in SITE_EXTRACTORS:
        if extractor.owns_host(host):
            return extractor
    return None


def is_aggregator_site(url: str) -> bool:
    return find_extractor(url) is not None


def extract_with_site_specific(html: str, url: str) -> list[str] | None:
    """Site-specific candidates, or None when ``url`` is not a known aggregator."""
    extractor = find_extractor(url)
    if extractor is None:
        return None
    return extractor.extract(html, url)


def supported_aggregators() -> list[str]:
    return [pattern for extractor in SITE_EXTRACTORS for pattern in extractor.host_patterns]
