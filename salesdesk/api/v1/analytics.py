"""Analytics and report endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Header, Query

from salesdesk.api.v1._authz import authorize_or_raise
from salesdesk.database.db import get_db_session
from salesdesk.schemas.activities import ActivityResponse
from salesdesk.schemas.analytics import (
    DashboardMetricsResponse,
    OverviewResponse,
    SalesPointResponse,
    StageBreakdownResponse,
    TeamPerformanceRow,
)
from salesdesk.services.analytics_service import RECENT_ACTIVITY_LIMIT, AnalyticsService
from salesdesk.services.report_service import ReportService

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/overview", response_model=OverviewResponse)
def overview(authorization: str | None = Header(default=None, alias="Authorization")) -> OverviewResponse:
    authorize_or_raise(authorization, scopes=["analytics.read"])
    with get_db_session() as session:
        return OverviewResponse.model_validate(AnalyticsService(db=session).overview())


@router.get("/metrics", response_model=DashboardMetricsResponse)
def dashboard_metrics(authorization: str | None = Header(default=None, alias="Authorization")) -> DashboardMetricsResponse:
    authorize_or_raise(authorization, scopes=["analytics.read"])
    with get_db_session() as session:
        return DashboardMetricsResponse.model_validate(AnalyticsService(db=session).dashboard_metrics())


@router.get("/pipeline", response_model=list[StageBreakdownResponse])
def pipeline_breakdown(authorization: str | None = Header(default=None, alias="Authorization")) -> list[StageBreakdownResponse]:
    authorize_or_raise(authorization, scopes=["analytics.read"])
    with get_db_session() as session:
        return [StageBreakdownResponse.model_validate(row) for row in AnalyticsService(db=session).pipeline_breakdown()]


@router.get("/sales-chart", response_model=list[SalesPointResponse])
def sales_chart(authorization: str | None = Header(default=None, alias="Authorization")) -> list[SalesPointResponse]:
    authorize_or_raise(authorization, scopes=["analytics.read"])
    with get_db_session() as session:
        return [SalesPointResponse.model_validate(point) for point in AnalyticsService(db=session).sales_chart()]


@router.get("/activities", response_model=list[ActivityResponse])
def recent_activities(
    limit: int = Query(default=RECENT_ACTIVITY_LIMIT, ge=1, le=100),
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> list[ActivityResponse]:
    authorize_or_raise(authorization, scopes=["analytics.read"])
    with get_db_session() as session:
        return [ActivityResponse.model_validate(row) for row in AnalyticsService(db=session).recent_activities(limit=limit)]


@router.get("/team-performance", response_model=list[TeamPerformanceRow])
def team_performance(authorization: str | None = Header(default=None, alias="Authorization")) -> list[TeamPerformanceRow]:
    authorize_or_raise(authorization, scopes=["analytics.read"])
    with get_db_session() as session:
        return [TeamPerformanceRow(**row) for row in ReportService(db=session).team_performance_records()]
