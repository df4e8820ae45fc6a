"""Environment-driven settings for LeadRadar."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv

from leadradar.core.exceptions import ConfigurationError

load_dotenv()


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    """Settings read once from the environment (and `.env`); immutable afterwards."""

    APP_NAME: str
    APP_VERSION: str
    ENV: str
    DEBUG: bool
    DATABASE_URL: str
    DB_CONNECTIVITY_REQUIRED: bool
    AI_PROVIDER_ENABLED: bool
    OPENAI_API_KEY: str | None
    OPENAI_BASE_URL: str
    AI_MODEL_ANALYZE: str
    AI_MODEL_SCORE: str
    AI_MODEL_OUTREACH: str
    AI_MODEL_SEQUENCE: str
    LLM_TIMEOUT_SECONDS: int
    LLM_MAX_RETRIES: int
    LLM_MIN_INTERVAL_SECONDS: float
    FETCH_TIMEOUT_SECONDS: float
    FETCH_MAX_BYTES: int
    FETCH_MAX_REDIRECTS: int
    FETCH_CONCURRENCY: int
    DETAIL_PAGE_LIMIT: int
    SNOOZE_DAYS: int
    JWT_SECRET: str
    JWT_ACCESS_TTL_MINUTES: int
    JWT_REFRESH_TTL_DAYS: int
    JWT_PERMISSIONS_VERSION: int
    API_HOST: str
    API_PORT: int
    API_PREFIX: str
    LOG_LEVEL: str
    LOG_FILE: str

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    try:
        return int(raw) if raw not in (None, "") else default
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer.") from exc


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    try:
        return float(raw) if raw not in (None, "") else default
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number.") from exc


def _build_config(env: str | None = None) -> Config:
    resolved_env = (env or os.getenv("ENV", "development")).strip().lower()
    production = resolved_env == "production"
    default_model = os.getenv("AI_MODEL", "gpt-4.1-mini")

    config = Config(
        APP_NAME="LeadRadar",
        APP_VERSION=os.getenv("APP_VERSION", "1.0.0"),
        ENV=resolved_env,
        DEBUG=not production and _as_bool(os.getenv("DEBUG"), default=True),
        DATABASE_URL=os.getenv("DATABASE_URL", "sqlite:///./leadradar.db"),
        DB_CONNECTIVITY_REQUIRED=_as_bool(os.getenv("DB_CONNECTIVITY_REQUIRED"), default=production),
        AI_PROVIDER_ENABLED=_as_bool(os.getenv("AI_PROVIDER_ENABLED")),
        OPENAI_API_KEY=os.getenv("OPENAI_API_KEY") or None,
        OPENAI_BASE_URL=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/"),
        AI_MODEL_ANALYZE=os.getenv("AI_MODEL_ANALYZE", default_model),
        AI_MODEL_SCORE=os.getenv("AI_MODEL_SCORE", default_model),
        AI_MODEL_OUTREACH=os.getenv("AI_MODEL_OUTREACH", default_model),
        AI_MODEL_SEQUENCE=os.getenv("AI_MODEL_SEQUENCE", default_model),
        LLM_TIMEOUT_SECONDS=_env_int("LLM_TIMEOUT_SECONDS", 60),
        LLM_MAX_RETRIES=_env_int("LLM_MAX_RETRIES", 2),
        LLM_MIN_INTERVAL_SECONDS=_env_float("LLM_MIN_INTERVAL_SECONDS", 0.25),
        FETCH_TIMEOUT_SECONDS=_env_float("FETCH_TIMEOUT_SECONDS", 10.0),
        FETCH_MAX_BYTES=_env_int("FETCH_MAX_BYTES", 2_000_000),
        FETCH_MAX_REDIRECTS=_env_int("FETCH_MAX_REDIRECTS", 5),
        FETCH_CONCURRENCY=_env_int("FETCH_CONCURRENCY", 5),
        DETAIL_PAGE_LIMIT=_env_int("DETAIL_PAGE_LIMIT", 15),
        SNOOZE_DAYS=_env_int("SNOOZE_DAYS", 7),
        JWT_SECRET=os.getenv("JWT_SECRET", "change_me_jwt_secret"),
        JWT_ACCESS_TTL_MINUTES=_env_int("JWT_ACCESS_TTL_MINUTES", 60),
        JWT_REFRESH_TTL_DAYS=_env_int("JWT_REFRESH_TTL_DAYS", 14),
        JWT_PERMISSIONS_VERSION=_env_int("JWT_PERMISSIONS_VERSION", 1),
        API_HOST=os.getenv("API_HOST", "0.0.0.0"),
        API_PORT=_env_int("API_PORT", 8000),
        API_PREFIX="/" + os.getenv("API_PREFIX", "/api/v1").strip("/"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        LOG_FILE=os.getenv("LOG_FILE", ""),
    )
    _validate_config(config)
    return config


_DATABASE_SCHEMES = frozenset({"sqlite", "postgresql", "postgresql+psycopg2"})
_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# Lowest accepted value per numeric setting.
_MINIMUMS: tuple[tuple[str, float], ...] = (
    ("LLM_TIMEOUT_SECONDS", 1),
    ("LLM_MAX_RETRIES", 0),
    ("LLM_MIN_INTERVAL_SECONDS", 0),
    ("FETCH_TIMEOUT_SECONDS", 0.5),
    ("FETCH_MAX_BYTES", 1024),
    ("FETCH_MAX_REDIRECTS", 0),
    ("FETCH_CONCURRENCY", 1),
    ("DETAIL_PAGE_LIMIT", 0),
    ("SNOOZE_DAYS", 1),
    ("JWT_ACCESS_TTL_MINUTES", 1),
    ("JWT_REFRESH_TTL_DAYS", 1),
    ("JWT_PERMISSIONS_VERSION", 1),
)


def _validate_config(config: Config) -> None:
    parsed = urlparse(config.DATABASE_URL)
    if parsed.scheme not in _DATABASE_SCHEMES:
        raise ConfigurationError("DATABASE_URL must use sqlite:// or postgresql:// style URL.")
    if parsed.scheme.startswith("postgresql") and not parsed.hostname:
        raise ConfigurationError("PostgreSQL DATABASE_URL is missing hostname.")

    for name, minimum in _MINIMUMS:
        if getattr(config, name) < minimum:
            raise ConfigurationError(f"{name} must be >= {minimum}.")

    if config.LOG_LEVEL not in _LOG_LEVELS:
        raise ConfigurationError(f"LOG_LEVEL must be one of {', '.join(sorted(_LOG_LEVELS))}.")
    if config.is_production and "change_me" in config.JWT_SECRET:
        raise ConfigurationError("Production JWT_SECRET uses the placeholder value.")
    if config.is_production and config.AI_PROVIDER_ENABLED and not config.OPENAI_API_KEY:
        raise ConfigurationError("AI_PROVIDER_ENABLED requires OPENAI_API_KEY in production.")


@lru_cache(maxsize=8)
def get_config(env: str | None = None) -> Config:
    """Validated settings for ``env`` (default: ``$ENV``), cached per environment name."""
    return _build_config(env)
