from __future__ import annotations

from leadradar.core.config import get_config
from leadradar.discovery.scanner import PageScanner

LISTING = """
<html><body>
  <a href="https://news.example.com/other">Internal</a>
  <a href="https://plain.io/">Plain</a>
  <a href="https://alpha-protocol.io/">Alpha</a>
</body></html>
"""

AGGREGATOR = """
<html><body>
  <table>
    <tr><td><a href="/protocol/alpha">Alpha</a></td></tr>
    <tr><td><a href="/protocol/beta">Beta</a></td></tr>
    <tr><td><a href="/protocol/broken">Broken</a></td></tr>
  </table>
</body></html>
"""


def test_candidates_are_ranked_for_regular_page(fake_fetcher):
    fake_fetcher.pages["https://news.example.com/post"] = LISTING
    scan = PageScanner(fetcher=fake_fetcher, config=get_config()).collect_candidates("https://news.example.com/post")

    assert scan.used_fallback is False
    assert scan.aggregator is None
    assert scan.candidates == ["https://alpha-protocol.io/", "https://plain.io/"]


def test_fetch_failure_falls_back_to_source_url(fake_fetcher):
    scan = PageScanner(fetcher=fake_fetcher).collect_candidates("https://down.example.com/")
    assert scan.candidates == ["https://down.example.com/"]
    assert scan.used_fallback is True


def test_page_without_candidates_falls_back_to_source_url(fake_fetcher):
    fake_fetcher.pages["https://quiet.example.com/"] = "<html><body><p>Nothing linked here.</p></body></html>"
    scan = PageScanner(fetcher=fake_fetcher).collect_candidates("https://quiet.example.com/")
    assert scan.candidates == ["https://quiet.example.com/"]
    assert scan.used_fallback is True


def test_aggregator_detail_pages_are_fetched_and_failures_isolated(fake_fetcher):
    fake_fetcher.pages.update(
        {
            "https://defillama.com/protocols": AGGREGATOR,
            "https://defillama.com/protocol/alpha": '<a href="https://alpha.finance/">Website</a>',
            "https://defillama.com/protocol/beta": '<a href="https://beta.xyz/">Website</a>',
        }
    )
    fake_fetcher.failing.add("https://defillama.com/protocol/broken")

    scan = PageScanner(fetcher=fake_fetcher).collect_candidates("https://defillama.com/protocols")

    assert scan.aggregator == "defillama"
    assert scan.detail_pages_fetched == 2
    assert scan.detail_pages_failed == 1
    assert set(scan.candidates) == {"https://alpha.finance/", "https://beta.xyz/"}
    assert scan.used_fallback is False
