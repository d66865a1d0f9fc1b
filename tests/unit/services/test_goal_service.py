from __future__ import annotations

import pytest

from salesdesk.core.enums import GoalStatus
from salesdesk.core.exceptions import ValidationError
from salesdesk.services.goal_service import GoalService, calculate_progress


def test_progress_is_capped():
    assert calculate_progress(50, 200) == 25.0
    assert calculate_progress(500, 200) == 100.0
    assert calculate_progress(10, 0) == 0.0


def test_reaching_target_completes_goal(db_session):
    service = GoalService(db=db_session)
    goal = service.create_goal(title="Q2 revenue", target_value=100000, type="revenue", period="quarterly")

    assert goal.status is GoalStatus.ACTIVE
    assert service.update_progress(goal.id, 40000).status is GoalStatus.ACTIVE
    assert service.update_progress(goal.id, 100000).status is GoalStatus.COMPLETED


def test_paused_goal_is_not_completed_by_progress(db_session):
    service = GoalService(db=db_session)
    goal = service.create_goal(title="Calls", target_value=10, type="calls")
    service.update_goal(goal.id, {"status": "paused"})

    assert service.update_progress(goal.id, 20).status is GoalStatus.PAUSED


def test_validation_and_listing(db_session):
    service = GoalService(db=db_session)
    with pytest.raises(ValidationError):
        service.create_goal(title="Bad", target_value=0)
    service.create_goal(title="Team", target_value=5, team_goal=True)
    service.create_goal(title="Solo", target_value=5)

    assert [goal.title for goal in service.list_goals(team_goal=True)] == ["Team"]
    assert len(service.list_goals(status="active")) == 2
