"""URL predicates and the normalization used to dedupe candidates."""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

TRACKING_PARAMS = frozenset(
    {
        "utm_source",
        "utm_medium",
        "utm_campaign",
        "utm_term",
        "utm_content",
        "ref",
        "referrer",
        "fbclid",
        "gclid",
        "msclkid",
    }
)
_DEFAULT_PORTS = {"http": 80, "https": 443}
_HTTP_PREFIX = re.compile(r"^https?://", re.IGNORECASE)


def is_http_url(url: str | None) -> bool:
    return bool(url) and bool(_HTTP_PREFIX.match(url))


def _strip_www(host: str) -> str:
    while host.startswith("www."):
        host = host[4:]
    return host


def get_host(url: str | None) -> str | None:
    """Lower-cased hostname without ``www.``; None when unparsable."""
    if not url:
        return None
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return None
    if not host:
        return None
    return _strip_www(host.lower())


def host_in_domains(url: str | None, domains: Iterable[str]) -> bool:
    """True when the URL's host is one of ``domains`` or a subdomain of one."""
    host = get_host(url)
    if host is None:
        return False
    return any(host == domain or host.endswith("." + domain) for domain in domains)


def normalize_url(raw: str | None) -> str | None:
    """Canonical form for dedup; ``normalize_url(normalize_url(u)) == normalize_url(u)``.

    Lower-cases the host and drops ``www.``, the fragment, tracking query
    parameters, default ports and trailing slashes (the root path stays ``/``).
    Returns None for anything that is not an absolute http(s) URL.
    """
    if not is_http_url(raw):
        return None
    try:
        parts = urlsplit(raw.strip())
        host = parts.hostname
        port = parts.port
    except ValueError:
        return None
    if not host:
        return None

    scheme = parts.scheme.lower()
    netloc = _strip_www(host.lower())
    if ":" in netloc:
        netloc = f"[{netloc}]"
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        netloc = f"{netloc}:{port}"

    path = parts.path.rstrip("/") or "/"

    query = ""
    if parts.query:
        kept = [
            (key, value)
            for key, value in parse_qsl(parts.query, keep_blank_values=True)
            if key not in TRACKING_PARAMS
        ]
        query = urlencode(kept)

    return urlunsplit((scheme, netloc, path, query, ""))
