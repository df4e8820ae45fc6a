"""Health endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter

from leadradar.core.config import get_config
from leadradar.llm.ai_service import describe_ai_mode

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict:
    cfg = get_config()
    return {
        "status": "ok",
        "service": cfg.APP_NAME,
        "version": cfg.APP_VERSION,
        "ai_mode": describe_ai_mode("pro", cfg),
    }
