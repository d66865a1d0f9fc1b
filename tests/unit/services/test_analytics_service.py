from __future__ import annotations

from datetime import date

from salesdesk.services.activity_service import ActivityService
from salesdesk.services.analytics_service import AnalyticsService
from salesdesk.services.deal_service import DealService
from salesdesk.services.financial_service import FinancialService
from salesdesk.services.goal_service import GoalService
from salesdesk.services.lead_service import LeadService


def _lead(service: LeadService, name: str, stage: str, value: float):
    return service.create(
        {"name": name, "company_name": f"{name} SA", "email": f"{name.lower()}@x.com", "phone": "1", "stage": stage, "value": value}
    ).data


def test_dashboard_metrics(db_session):
    leads = LeadService(db=db_session, allow_regression=True)
    for index in range(4):
        _lead(leads, f"Lead{index}", "prospeccao", 100)
    deals = DealService(db=db_session)
    deals.create_deal(title="Won", value=1000, status="won")
    deals.create_deal(title="Open", value=500)
    finance = FinancialService(db=db_session)
    finance.create_transaction(title="Paid", type="income", amount=1000)
    finance.create_transaction(title="Later", type="income", amount=700, status="pending")
    finance.create_transaction(title="Cost", type="expense", amount=300)
    goals = GoalService(db=db_session)
    goals.create_goal(title="A", target_value=100, current_value=50)
    goals.create_goal(title="B", target_value=300, current_value=50)

    metrics = AnalyticsService(db=db_session).dashboard_metrics()

    assert metrics.total_leads == 4
    assert metrics.conversion_rate == 25
    assert metrics.revenue == 1000
    assert metrics.goal_progress == 25


def test_empty_dashboard_is_zero(db_session):
    metrics = AnalyticsService(db=db_session).dashboard_metrics()
    assert (metrics.total_leads, metrics.conversion_rate, metrics.revenue, metrics.goal_progress) == (0, 0, 0, 0)


def test_pipeline_breakdown_and_sales_chart(db_session):
    leads = LeadService(db=db_session, allow_regression=True)
    _lead(leads, "Ana", "negociacao", 15000)
    _lead(leads, "Bia", "negociacao", 25000)
    deals = DealService(db=db_session)
    late = deals.create_deal(title="Late", value=900, status="won")
    deals.update_deal(late.id, {"actual_close_date": date(2026, 2, 10)})
    early = deals.create_deal(title="Early", value=400, status="won")
    deals.update_deal(early.id, {"actual_close_date": date(2026, 1, 5)})
    deals.create_deal(title="Lost", value=50, status="lost")

    service = AnalyticsService(db=db_session)
    breakdown = {row.stage: row for row in service.pipeline_breakdown()}
    chart = service.sales_chart()

    assert breakdown["negociacao"].count == 2
    assert breakdown["negociacao"].value == 40000
    assert breakdown["c7"].count == 0
    assert [(point.title, point.month) for point in chart] == [("Early", "2026-01"), ("Late", "2026-02")]


def test_recent_activities_default_limit(db_session):
    activities = ActivityService(db=db_session)
    for index in range(11):
        activities.create_activity(title=f"Call {index}", type="call")

    assert len(AnalyticsService(db=db_session).recent_activities()) == 10
