"""Application entrypoint: FastAPI app factory and ``python -m leadradar.main``."""

from __future__ import annotations

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from leadradar.api.v1.router import get_api_router
from leadradar.core.config import get_config
from leadradar.database.init_db import init_db


@asynccontextmanager
async def _lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    cfg = get_config()
    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION, lifespan=_lifespan)
    app.include_router(get_api_router())

    @app.get("/")
    def root() -> dict:
        return {"service": cfg.APP_NAME, "version": cfg.APP_VERSION, "api_prefix": cfg.API_PREFIX}

    return app


# Expose ASGI app for `uvicorn leadradar.main:app`.
app = create_app()


if __name__ == "__main__":
    cfg = get_config()
    uvicorn.run("leadradar.main:app", host=cfg.API_HOST, port=cfg.API_PORT)
