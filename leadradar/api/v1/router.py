"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from leadradar.api.v1 import auth, contacts, discover, health, outreach, projects, sequences, settings
from leadradar.core.config import get_config

api_router = APIRouter(prefix=get_config().API_PREFIX)
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(discover.router)
api_router.include_router(projects.router)
api_router.include_router(contacts.router)
api_router.include_router(outreach.router)
api_router.include_router(sequences.router)
api_router.include_router(settings.router)


def get_api_router() -> APIRouter:
    return api_router
