"""Guarded HTML fetcher used by discovery scans and project enrichment."""

from __future__ import annotations

import codecs
import ipaddress
import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from urllib.parse import urljoin, urlsplit

import requests
from bs4 import BeautifulSoup

from leadradar.core.config import Config, get_config
from leadradar.core.exceptions import FetchError

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = {301, 302, 303, 307, 308}
MAX_TEXT_CHARS = 20000
MIN_TEXT_CHARS = 10
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/118.0 Safari/537.36"
)
_PRIVATE_172 = re.compile(r"^172\.(1[6-9]|2[0-9]|3[0-1])\.")


@dataclass(frozen=True)
class FetchResult:
    html: str
    text: str


HtmlFetcher = Callable[[str], FetchResult]


def is_blocked_hostname(hostname: str) -> bool:
    """Loopback, link-local, private and ``.local`` hosts are never fetched."""
    host = hostname.lower().strip("[]")
    if host == "localhost" or host.endswith((".localhost", ".local")):
        return True
    if host.startswith("127.") or host in {"0.0.0.0", "::", "::1", "0:0:0:0:0:0:0:1"}:
        return True
    if host.startswith(("169.254.", "10.", "192.168.")) or _PRIVATE_172.match(host):
        return True
    if ":" in host and host.startswith(("fe80:", "fc", "fd")):
        return True
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return False
    return address.is_private or address.is_loopback or address.is_link_local or address.is_unspecified


def validate_fetch_url(url: str) -> str:
    """Return ``url`` unchanged when it is safe to request, else raise ``FetchError``."""
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise FetchError("Invalid URL") from exc
    if parts.scheme.lower() not in {"http", "https"}:
        raise FetchError("Only http/https URLs are allowed")
    if not parts.hostname:
        raise FetchError("Invalid URL")
    if is_blocked_hostname(parts.hostname):
        raise FetchError("Blocked host")
    return url


def _read_limited(response: requests.Response, max_bytes: int, deadline: float) -> bytes:
    chunks: list[bytes] = []
    total = 0
    for chunk in response.iter_content(chunk_size=65536):
        if time.monotonic() > deadline:
            raise FetchError("Timed out")
        total += len(chunk)
        if total > max_bytes:
            raise FetchError("Response too large")
        chunks.append(chunk)
    return b"".join(chunks)


def _decode(body: bytes, encoding: str | None) -> str:
    """Decode with the declared charset; unknown charsets read as utf-8."""
    try:
        codec = codecs.lookup(encoding or "utf-8").name
    except LookupError:
        codec = "utf-8"
    return body.decode(codec, errors="replace")


def _visible_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    root = soup.body or soup
    return re.sub(r"\s+", " ", root.get_text(" ")).strip()


def fetch_html(
    url: str,
    session: requests.Session | None = None,
    config: Config | None = None,
) -> FetchResult:
    """Fetch a page and return its HTML plus a readable text excerpt.

    Redirects are followed by hand so every hop is checked against the host
    blocklist. ``FETCH_TIMEOUT_SECONDS`` bounds the whole call, redirects and
    body included. Non-HTML responses, bodies past ``FETCH_MAX_BYTES`` and
    pages without visible text raise ``FetchError``.
    """
    cfg = config or get_config()
    current_url = validate_fetch_url(url)
    deadline = time.monotonic() + cfg.FETCH_TIMEOUT_SECONDS
    http = session or requests.Session()
    try:
        html, body_size, current_url = _fetch_following_redirects(http, current_url, cfg, deadline)
    finally:
        if session is None:
            http.close()

    text = _visible_text(html)
    if len(text) < MIN_TEXT_CHARS:
        raise FetchError("No meaningful content extracted from page")

    logger.debug(
        "scraper.fetch.completed",
        extra={"event": "scraper.fetch.completed", "url": current_url, "bytes": body_size},
    )
    return FetchResult(html=html, text=text[:MAX_TEXT_CHARS])


def _fetch_following_redirects(
    http: requests.Session,
    current_url: str,
    cfg: Config,
    deadline: float,
) -> tuple[str, int, str]:
    headers = {
        "User-Agent": USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    }

    for _ in range(cfg.FETCH_MAX_REDIRECTS + 1):
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise FetchError("Timed out")
        try:
            response = http.get(
                current_url,
                headers=headers,
                timeout=remaining,
                allow_redirects=False,
                stream=True,
            )
        except requests.RequestException as exc:
            raise FetchError(f"Failed to fetch URL: {exc}") from exc

        with response:
            if response.status_code in REDIRECT_STATUSES:
                location = response.headers.get("location")
                if not location:
                    raise FetchError(f"Redirect without location header ({response.status_code})")
                current_url = validate_fetch_url(urljoin(current_url, location))
                continue

            if not response.ok:
                raise FetchError(f"Failed to fetch URL ({response.status_code})")

            content_type = response.headers.get("content-type", "")
            if content_type and "text/html" not in content_type and "application/xhtml" not in content_type:
                raise FetchError(f"Invalid content type: {content_type} (expected text/html)")

            content_length = response.headers.get("content-length")
            if content_length and content_length.isdigit() and int(content_length) > cfg.FETCH_MAX_BYTES:
                raise FetchError("Response too large")

            try:
                body = _read_limited(response, cfg.FETCH_MAX_BYTES, deadline)
            except requests.RequestException as exc:
                raise FetchError(f"Failed to read response: {exc}") from exc
            return _decode(body, response.encoding), len(body), current_url

    raise FetchError(f"Too many redirects (max {cfg.FETCH_MAX_REDIRECTS})")
