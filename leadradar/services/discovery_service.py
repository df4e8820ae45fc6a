"""Discovery scans that feed the opportunity radar."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from leadradar.core.config import Config, get_config
from leadradar.core.enums import OpportunitySource
from leadradar.core.exceptions import ConflictError, ValidationError
from leadradar.database.models import Opportunity, WatchlistUrl
from leadradar.discovery.candidates import extract_candidate_urls_from_html
from leadradar.discovery.scanner import PageScanner
from leadradar.discovery.text import extract_urls_from_text
from leadradar.discovery.urls import is_http_url
from leadradar.llm.ai_service import AIService
from leadradar.scraper.fetch_html import HtmlFetcher, fetch_html
from leadradar.services.base_service import BaseService
from leadradar.services.opportunity_service import OpportunityService
from leadradar.utils.concurrency import settle_all

logger = logging.getLogger(__name__)

TEXT_SCAN_MAX = 10
PAGE_SCAN_MAX = 20
WATCHLIST_ITEM_MAX = 20


@dataclass
class ScanResult:
    created: list[Opportunity] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    attempted: int = 0
    failed: int = 0
    candidates: list[str] = field(default_factory=list)


class DiscoveryService(BaseService):
    """Finds candidate URLs and hands them to ``OpportunityService``."""

    def __init__(
        self,
        db: Session | None = None,
        fetcher: HtmlFetcher | None = None,
        ai: AIService | None = None,
        config: Config | None = None,
    ) -> None:
        super().__init__(db)
        self.config = config or get_config()
        self.fetcher = fetcher or fetch_html
        self.opportunities = OpportunityService(db=self.db, fetcher=self.fetcher, ai=ai, config=self.config)

    def scan_text(self, user_id: str, text: str, source_label: str | None = None) -> ScanResult:
        if not text or not text.strip():
            raise ValidationError("Text is required.")
        urls = extract_urls_from_text(text)
        if not urls:
            return ScanResult()

        batch = self.opportunities.create_opportunities(
            user_id,
            urls,
            OpportunitySource.TEXT_SCAN.value,
            source_label=source_label,
            raw_context=text,
            max_count=TEXT_SCAN_MAX,
        )
        return ScanResult(created=batch.created, skipped=batch.skipped, attempted=len(urls), candidates=urls)

    def scan_page(self, user_id: str, url: str, source_label: str | None = None) -> ScanResult:
        url = (url or "").strip()
        if not is_http_url(url):
            raise ValidationError("Invalid URL")

        scan = PageScanner(fetcher=self.fetcher, config=self.config).collect_candidates(url)
        batch = self.opportunities.create_opportunities(
            user_id,
            scan.candidates,
            OpportunitySource.PAGE_SCAN.value,
            source_label=source_label or url,
            raw_context="",
            max_count=PAGE_SCAN_MAX,
        )
        return ScanResult(
            created=batch.created,
            skipped=batch.skipped,
            attempted=batch.attempted,
            candidates=scan.candidates,
        )

    def list_watchlist(self, user_id: str) -> list[WatchlistUrl]:
        return (
            self.db.query(WatchlistUrl)
            .filter(WatchlistUrl.user_id == user_id)
            .order_by(WatchlistUrl.created_at)
            .all()
        )

    def add_watchlist_url(self, user_id: str, url: str, label: str | None = None) -> WatchlistUrl:
        url = (url or "").strip()
        if not is_http_url(url):
            raise ValidationError("Invalid URL")
        existing = (
            self.db.query(WatchlistUrl)
            .filter(WatchlistUrl.user_id == user_id, WatchlistUrl.url == url)
            .first()
        )
        if existing is not None:
            raise ConflictError("URL is already on the watchlist", existing_id=existing.id)
        item = WatchlistUrl(user_id=user_id, url=url, label=(label or "").strip() or None)
        self.db.add(item)
        self.commit()
        self.db.refresh(item)
        return item

    def scan_watchlist(self, user_id: str) -> ScanResult:
        """Scan every watchlist page; a failing page is counted, never fatal.

        Pages are fetched and parsed in parallel; opportunities are then
        written one page at a time on this thread.
        """
        items = self.list_watchlist(user_id)
        result = ScanResult(attempted=len(items))
        if not items:
            return result

        targets = [(item.url, item.label) for item in items]
        outcomes = settle_all(self._watchlist_candidates, targets, max_workers=self.config.FETCH_CONCURRENCY)

        for outcome in outcomes:
            url, label = outcome.item
            if not outcome.ok:
                result.failed += 1
                logger.warning(
                    "discovery.watchlist.item_failed",
                    extra={"event": "discovery.watchlist.item_failed", "url": url, "error": str(outcome.error)},
                )
                continue
            batch = self.opportunities.create_opportunities(
                user_id,
                outcome.value,
                OpportunitySource.WATCHLIST.value,
                source_label=label or url,
                raw_context="",
                max_count=WATCHLIST_ITEM_MAX,
            )
            result.created.extend(batch.created)
            result.skipped.extend(batch.skipped)
            result.candidates.extend(outcome.value)

        logger.info(
            "discovery.watchlist.completed",
            extra={
                "event": "discovery.watchlist.completed",
                "user_id": user_id,
                "created_count": len(result.created),
                "skipped": len(result.skipped),
                "attempted": result.attempted,
                "failed": result.failed,
            },
        )
        return result

    def _watchlist_candidates(self, target: tuple[str, str | None]) -> list[str]:
        url, _label = target
        page = self.fetcher(url)
        candidates = extract_candidate_urls_from_html(page.html, url)
        return candidates or [url]
