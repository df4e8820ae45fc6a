"""Engine, sessions and table creation for the LeadRadar store."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from leadradar.core.config import get_config

logger = logging.getLogger(__name__)

config = get_config()
FALLBACK_SQLITE_URL = "sqlite:///./leadradar.db"

Base = declarative_base()

DATABASE_URL = config.DATABASE_URL
engine: Engine
SessionLocal: sessionmaker


def _scheme(url: str) -> str:
    return url.split("://", 1)[0]


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        # The watchlist fetch pool runs beside request threads.
        built = create_engine(database_url, connect_args={"check_same_thread": False})
        event.listen(built, "connect", _enable_sqlite_foreign_keys)
        return built
    return create_engine(
        database_url,
        echo=config.DEBUG and not config.is_production,
        pool_pre_ping=True,
        pool_recycle=3600,
        pool_size=10,
        max_overflow=20,
    )


def _bind(database_url: str) -> None:
    global DATABASE_URL, engine, SessionLocal
    DATABASE_URL = database_url
    engine = build_engine(database_url)
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


_bind(DATABASE_URL)


def get_engine() -> Engine:
    return engine


def get_active_database_url() -> str:
    return DATABASE_URL


def new_session() -> Session:
    return SessionLocal()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """One session per request; services commit, the session is always closed."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def create_tables(bind: Engine | None = None) -> list[str]:
    """Create every LeadRadar table missing from ``bind`` and return the table names."""
    import leadradar.database.models  # noqa: F401  registers the mappers on Base

    target = bind or engine
    Base.metadata.create_all(bind=target)
    return sorted(Base.metadata.tables)


def _ping(target: Engine) -> None:
    with target.connect() as conn:
        conn.execute(text("SELECT 1"))


def verify_database_connection() -> bool:
    """Ping the configured store; when connectivity is optional, fall back to local SQLite."""
    try:
        _ping(engine)
        return True
    except Exception as exc:  # pragma: no cover - exercised in deployment.
        if config.DB_CONNECTIVITY_REQUIRED or DATABASE_URL.startswith("sqlite"):
            logger.error(
                "database.connection_failed",
                extra={"event": "database.connection_failed", "scheme": _scheme(DATABASE_URL), "error": str(exc)},
            )
            return False
        original_url = DATABASE_URL

    _bind(FALLBACK_SQLITE_URL)
    try:
        _ping(engine)
    except Exception as fallback_exc:  # pragma: no cover - deployment edge case.
        _bind(original_url)
        logger.error(
            "database.connection_fallback.failed",
            extra={"event": "database.connection_fallback.failed", "error": str(fallback_exc)},
        )
        return False

    logger.warning(
        "database.connection_fallback.sqlite",
        extra={"event": "database.connection_fallback.sqlite", "from_scheme": _scheme(original_url)},
    )
    return True
