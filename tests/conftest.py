from __future__ import annotations

from contextlib import contextmanager

import pytest
from bs4 import BeautifulSoup
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from leadradar.core.exceptions import FetchError
from leadradar.database.db import create_tables
from leadradar.database.models import User
from leadradar.llm.ai_service import AIService
from leadradar.scraper.fetch_html import FetchResult


class FakeFetcher:
    """Serves canned HTML by URL; anything unknown raises ``FetchError``."""

    def __init__(self, pages: dict[str, str] | None = None, failing: set[str] | None = None) -> None:
        self.pages = dict(pages or {})
        self.failing = set(failing or ())
        self.calls: list[str] = []

    def __call__(self, url: str) -> FetchResult:
        self.calls.append(url)
        if url in self.failing or url not in self.pages:
            raise FetchError(f"Failed to fetch URL: {url}")
        html = self.pages[url]
        text = " ".join(BeautifulSoup(html, "html.parser").get_text(" ").split())
        return FetchResult(html=html, text=text)


def _build_session():
    engine = create_engine("sqlite:///:memory:")
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    create_tables(engine)
    return TestingSessionLocal()


@pytest.fixture
def session():
    db = _build_session()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def user(session):
    account = User(email="bd@example.com", name="BD Lead", password_hash="x", role="member", plan="free")
    session.add(account)
    session.commit()
    session.refresh(account)
    return account


@pytest.fixture
def mock_ai():
    return AIService(capability=lambda plan, cfg: False)


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def patch_route_db(monkeypatch, session):
    """Point a route module's ``get_db_session`` at the test session."""

    @contextmanager
    def _get_db_session():
        yield session

    def _patch(module):
        monkeypatch.setattr(module, "get_db_session", _get_db_session)

    return _patch
