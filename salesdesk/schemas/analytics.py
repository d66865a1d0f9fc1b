"""Analytics response schemas."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict

from salesdesk.schemas.activities import ActivityResponse


class DashboardMetricsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_leads: int
    conversion_rate: int
    revenue: float
    goal_progress: int


class StageBreakdownResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    stage: str
    title: str
    count: int
    value: float


class SalesPointResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    deal_id: str
    title: str
    value: float
    closed_on: date
    month: str


class TeamPerformanceRow(BaseModel):
    responsible_id: str | None = None
    responsible_name: str
    lead_count: int
    closed_count: int
    closed_value: float


class OverviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    metrics: DashboardMetricsResponse
    pipeline: list[StageBreakdownResponse]
    recent_activities: list[ActivityResponse]
