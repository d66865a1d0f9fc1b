"""Application entrypoint for the FastAPI service."""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI

from salesdesk.api.v1.router import get_api_router
from salesdesk.core.config import get_config
from salesdesk.core.startup import bootstrap


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    cfg = get_config()
    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION)
    app.include_router(get_api_router())

    @app.get("/")
    def root() -> dict:
        return {"service": cfg.APP_NAME, "version": cfg.APP_VERSION, "api_prefix": cfg.API_PREFIX}

    return app


# Expose ASGI app for `uvicorn salesdesk.main:app`.
app = create_app()


def run() -> None:
    bootstrap()
    cfg = get_config()
    uvicorn.run("salesdesk.main:app", host=cfg.API_HOST, port=cfg.API_PORT)


if __name__ == "__main__":
    run()
