from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from salesdesk.core.enums import LeadStage, LeadStatus
from salesdesk.schemas.activities import EventCreateRequest
from salesdesk.schemas.goals import GoalResponse
from salesdesk.schemas.leads import LeadCreateRequest, LeadUpdateRequest


def _lead(**overrides):
    data = {"name": "Ana", "company_name": "Acme", "email": "ana@acme.com", "phone": "1"}
    data.update(overrides)
    return data


def test_lead_schema_defaults_and_value_coercion():
    payload = LeadCreateRequest(**_lead(value="abc"))
    assert payload.value == 0
    assert payload.stage is LeadStage.PROSPECCAO
    assert payload.status is LeadStatus.NOVO
    assert LeadCreateRequest(**_lead(value="1500,25")).value == 1500.25


def test_lead_schema_rejects_negative_value_and_blank_name():
    with pytest.raises(ValidationError):
        LeadCreateRequest(**_lead(value=-1))
    with pytest.raises(ValidationError):
        LeadCreateRequest(**_lead(name=""))
    assert LeadUpdateRequest(value=None).value is None


def test_event_schema_requires_ordered_range():
    start = datetime(2026, 5, 4, 9, tzinfo=timezone.utc)
    with pytest.raises(ValidationError):
        EventCreateRequest(title="Demo", start_date=start, end_date=start.replace(hour=8))
    assert EventCreateRequest(title="Demo", start_date=start, end_date=start).end_date == start


def test_goal_response_exposes_capped_progress():
    goal = GoalResponse(
        id="g1",
        title="Revenue",
        type="revenue",
        target_value=100,
        current_value=250,
        period="monthly",
        team_goal=False,
        status="active",
    )
    assert goal.progress == 100.0
