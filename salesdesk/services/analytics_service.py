"""Dashboard and analytics figures derived from leads, deals, transactions and goals."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from sqlalchemy import select

from salesdesk.core.enums import DealStatus, TransactionStatus, TransactionType
from salesdesk.models import Activity, Deal, FinancialTransaction, Goal, Lead
from salesdesk.pipeline.metrics import leads_by_stage
from salesdesk.pipeline.stages import STAGE_TITLES
from salesdesk.services.base_service import BaseService

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 10


@dataclass(frozen=True)
class DashboardMetrics:
    total_leads: int
    conversion_rate: int
    revenue: float
    goal_progress: int


@dataclass(frozen=True)
class StageBreakdown:
    stage: str
    title: str
    count: int
    value: float


@dataclass(frozen=True)
class SalesPoint:
    deal_id: str
    title: str
    value: float
    closed_on: date
    month: str


def _percent(part: float, whole: float) -> int:
    if not whole:
        return 0
    return int(round(part / whole * 100.0))


def _close_date(deal: Deal) -> date:
    if deal.actual_close_date is not None:
        return deal.actual_close_date
    created = deal.created_at
    return created.date() if isinstance(created, datetime) else date.today()


class AnalyticsService(BaseService):
    """Read-only aggregate queries for the dashboard."""

    def dashboard_metrics(self) -> DashboardMetrics:
        total_leads = len(self.db.scalars(select(Lead.id)).all())
        won_deals = len(self.db.scalars(select(Deal.id).where(Deal.status == DealStatus.WON)).all())
        revenue = sum(
            float(amount)
            for amount in self.db.scalars(
                select(FinancialTransaction.amount)
                .where(FinancialTransaction.type == TransactionType.INCOME)
                .where(FinancialTransaction.status == TransactionStatus.COMPLETED)
            )
        )
        goals = list(self.db.scalars(select(Goal)))
        current = sum(float(goal.current_value or 0) for goal in goals)
        target = sum(float(goal.target_value or 0) for goal in goals)
        metrics = DashboardMetrics(
            total_leads=total_leads,
            conversion_rate=_percent(won_deals, total_leads),
            revenue=round(revenue, 2),
            goal_progress=_percent(current, target),
        )
        logger.debug("analytics.dashboard.computed", extra={"event": "analytics.dashboard.computed", "total_leads": total_leads})
        return metrics

    def pipeline_breakdown(self) -> list[StageBreakdown]:
        leads = list(self.db.scalars(select(Lead)).unique())
        return [
            StageBreakdown(
                stage=stage.value,
                title=STAGE_TITLES[stage],
                count=len(stage_leads),
                value=round(sum(float(lead.value or 0) for lead in stage_leads), 2),
            )
            for stage, stage_leads in leads_by_stage(leads).items()
        ]

    def sales_chart(self) -> list[SalesPoint]:
        """Won deals in close-date order; deals without a close date use their creation date."""
        deals = self.db.scalars(select(Deal).where(Deal.status == DealStatus.WON)).unique()
        points = []
        for deal in deals:
            closed_on = _close_date(deal)
            points.append(
                SalesPoint(
                    deal_id=deal.id,
                    title=deal.title,
                    value=float(deal.value or 0),
                    closed_on=closed_on,
                    month=closed_on.strftime("%Y-%m"),
                )
            )
        return sorted(points, key=lambda point: (point.closed_on, point.deal_id))

    def recent_activities(self, limit: int = RECENT_ACTIVITY_LIMIT) -> list[Activity]:
        query = select(Activity).order_by(Activity.created_at.desc()).limit(limit)
        return list(self.db.scalars(query).unique())

    def overview(self) -> dict[str, Any]:
        return {
            "metrics": self.dashboard_metrics(),
            "pipeline": self.pipeline_breakdown(),
            "recent_activities": self.recent_activities(),
        }
