"""Startup checks run before the API serves traffic."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from leadradar.core.config import Config, get_config
from leadradar.core.exceptions import ConfigurationError
from leadradar.core.logging_config import configure_logging
from leadradar.database.db import get_active_database_url, verify_database_connection
from leadradar.llm.ai_service import describe_ai_mode

logger = logging.getLogger(__name__)


@dataclass
class StartupReport:
    database_ok: bool
    database_scheme: str
    ai_mode: str
    warnings: list[str] = field(default_factory=list)


def _config_warnings(config: Config, database_url: str) -> list[str]:
    warnings: list[str] = []
    if config.is_production and database_url.startswith("sqlite"):
        warnings.append("startup.production.sqlite_detected")
    if not config.is_production and "change_me" in config.JWT_SECRET:
        warnings.append("startup.jwt.placeholder_secret")
    if config.AI_PROVIDER_ENABLED and not config.OPENAI_API_KEY:
        warnings.append("startup.ai.key_missing")
    return warnings


def validate_startup_config(config: Config | None = None) -> StartupReport:
    """Ping the store and flag risky settings; raise when the store is required but down."""
    cfg = config or get_config()
    database_ok = verify_database_connection()
    if not database_ok and cfg.DB_CONNECTIVITY_REQUIRED:
        raise ConfigurationError("Database connectivity check failed.")

    database_url = get_active_database_url()
    report = StartupReport(
        database_ok=database_ok,
        database_scheme=database_url.split("://", 1)[0],
        ai_mode=describe_ai_mode("pro", cfg),
        warnings=_config_warnings(cfg, database_url),
    )
    if not database_ok:
        report.warnings.append("startup.database.connectivity_optional_failed")

    for warning in report.warnings:
        logger.warning(warning, extra={"event": warning, "env": cfg.ENV})
    logger.info(
        "startup.config.validated",
        extra={
            "event": "startup.config.validated",
            "env": cfg.ENV,
            "database_url_scheme": report.database_scheme,
            "ai_mode": report.ai_mode,
            "fetch_concurrency": cfg.FETCH_CONCURRENCY,
        },
    )
    return report


def bootstrap() -> StartupReport:
    configure_logging()
    return validate_startup_config()
