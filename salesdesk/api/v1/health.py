"""Health endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter

from salesdesk.core.config import get_config
from salesdesk.database.db import get_active_database_url

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict:
    cfg = get_config()
    return {
        "status": "ok",
        "service": cfg.APP_NAME,
        "version": cfg.APP_VERSION,
        "database": get_active_database_url().split("://", 1)[0],
    }
