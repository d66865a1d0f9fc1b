"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from salesdesk.api.v1 import activities, analytics, auth, calendar, deals, financial, goals, health, leads, members
from salesdesk.core.config import get_config

api_router = APIRouter(prefix=get_config().API_PREFIX)
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(leads.router)
api_router.include_router(deals.router)
api_router.include_router(financial.router)
api_router.include_router(goals.router)
api_router.include_router(members.router)
api_router.include_router(activities.router)
api_router.include_router(calendar.router)
api_router.include_router(analytics.router)


def get_api_router() -> APIRouter:
    return api_router
