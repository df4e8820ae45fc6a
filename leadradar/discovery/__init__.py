"""Candidate URL discovery from free text, single pages and aggregator listings."""

from .aggregators import extract_with_site_specific, is_aggregator_site, is_likely_project_url
from .candidates import extract_all_links, extract_candidate_urls_from_html
from .page_title import extract_page_title
from .ranking import prioritize_candidates
from .scanner import CandidateScan, PageScanner
from .text import extract_urls_from_text
from .urls import get_host, is_http_url, normalize_url

__all__ = [
    "CandidateScan",
    "PageScanner",
    "extract_all_links",
    "extract_candidate_urls_from_html",
    "extract_page_title",
    "extract_urls_from_text",
    "extract_with_site_specific",
    "get_host",
    "is_aggregator_site",
    "is_http_url",
    "is_likely_project_url",
    "normalize_url",
    "prioritize_candidates",
]
