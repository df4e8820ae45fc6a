"""Turn one source page into a ranked, never-empty list of candidate URLs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from leadradar.core.config import Config, get_config
from leadradar.core.exceptions import FetchError
from leadradar.scraper.fetch_html import HtmlFetcher, fetch_html
from leadradar.utils.concurrency import settle_all

from .aggregators import find_extractor
from .candidates import extract_all_links, extract_candidate_urls_from_html
from .ranking import prioritize_candidates
from .urls import get_host, is_http_url

logger = logging.getLogger(__name__)


@dataclass
class CandidateScan:
    source_url: str
    candidates: list[str] = field(default_factory=list)
    aggregator: str | None = None
    detail_pages_fetched: int = 0
    detail_pages_failed: int = 0
    used_fallback: bool = False


class PageScanner:
    """Fetches a page and extracts candidates, with two-stage handling for aggregators."""

    def __init__(self, fetcher: HtmlFetcher | None = None, config: Config | None = None) -> None:
        self.config = config or get_config()
        self.fetcher = fetcher or fetch_html

    def collect_candidates(self, url: str) -> CandidateScan:
        scan = CandidateScan(source_url=url)
        try:
            page = self.fetcher(url)
        except FetchError as exc:
            logger.warning(
                "discovery.scan_page.fetch_failed",
                extra={"event": "discovery.scan_page.fetch_failed", "url": url, "error": str(exc)},
            )
            return self._fallback(scan)

        extractor = find_extractor(url)
        if extractor is None:
            candidates = extract_candidate_urls_from_html(page.html, url)
        else:
            scan.aggregator = extractor.name
            candidates = self._from_aggregator(scan, page.html, extractor)

        candidates = [candidate for candidate in candidates if is_http_url(candidate)]
        scan.candidates = prioritize_candidates(candidates, url)
        if not scan.candidates:
            return self._fallback(scan)

        logger.info(
            "discovery.scan_page.candidates",
            extra={
                "event": "discovery.scan_page.candidates",
                "url": url,
                "aggregator": scan.aggregator,
                "count": len(scan.candidates),
                "detail_pages_fetched": scan.detail_pages_fetched,
                "detail_pages_failed": scan.detail_pages_failed,
            },
        )
        return scan

    def _from_aggregator(self, scan: CandidateScan, html: str, extractor) -> list[str]:
        source_host = get_host(scan.source_url)
        site_links = extractor.extract(html, scan.source_url)
        internal = [link for link in site_links if get_host(link) == source_host]
        external = [link for link in site_links if get_host(link) != source_host]

        if not internal:
            internal = [
                link
                for link in extract_all_links(html, scan.source_url)
                if get_host(link) == source_host
                and any(path.lower() in link.lower() for path in extractor.detail_paths)
            ]

        direct = extract_candidate_urls_from_html(html, scan.source_url)
        if not internal:
            return list(dict.fromkeys(external + direct))

        detail_pages = internal[: self.config.DETAIL_PAGE_LIMIT]
        outcomes = settle_all(self._detail_candidates, detail_pages, max_workers=self.config.FETCH_CONCURRENCY)

        from_details: list[str] = []
        for outcome in outcomes:
            if not outcome.ok:
                scan.detail_pages_failed += 1
                continue
            scan.detail_pages_fetched += 1
            from_details.extend(link for link in outcome.value if get_host(link) != source_host)

        return list(dict.fromkeys(from_details + external + direct))

    def _detail_candidates(self, detail_url: str) -> list[str]:
        page = self.fetcher(detail_url)
        return extract_candidate_urls_from_html(page.html, detail_url)

    def _fallback(self, scan: CandidateScan) -> CandidateScan:
        scan.candidates = [scan.source_url]
        scan.used_fallback = True
        return scan
