"""Goals: CRUD and progress tracking."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from sqlalchemy import select

from salesdesk.core.enums import GoalPeriod, GoalStatus, GoalType
from salesdesk.core.exceptions import ValidationError
from salesdesk.models import Goal
from salesdesk.services.base_service import BaseService

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "target_value", "assignee", "target_date", "team_goal")


def calculate_progress(current: float | None, target: float | None) -> float:
    """Percent of target reached, capped at 100."""
    if not target or target <= 0:
        return 0.0
    return round(min((float(current or 0) / float(target)) * 100.0, 100.0), 1)


class GoalService(BaseService):
    """Service for sales goals."""

    def create_goal(
        self,
        title: str,
        target_value: float,
        type: str = GoalType.REVENUE.value,
        period: str = GoalPeriod.MONTHLY.value,
        assignee: str | None = None,
        target_date: date | None = None,
        description: str | None = None,
        team_goal: bool = False,
        current_value: float = 0.0,
        user_id: str | None = None,
    ) -> Goal:
        if target_value <= 0:
            raise ValidationError("Goal target must be positive.")
        goal = Goal(
            title=title,
            target_value=target_value,
            current_value=current_value,
            type=GoalType(type),
            period=GoalPeriod(period),
            assignee=assignee,
            target_date=target_date,
            description=description,
            team_goal=team_goal,
            user_id=user_id,
            status=GoalStatus.ACTIVE,
        )
        self._complete_if_reached(goal)
        self.db.add(goal)
        self.commit()
        self.db.refresh(goal)
        logger.info("goal.created", extra={"event": "goal.created", "goal_id": goal.id})
        return goal

    def get_goal(self, goal_id: str) -> Goal | None:
        return self.db.get(Goal, goal_id)

    def list_goals(self, status: str | None = None, team_goal: bool | None = None) -> list[Goal]:
        query = select(Goal).order_by(Goal.target_date.is_(None), Goal.target_date, Goal.created_at)
        if status:
            query = query.where(Goal.status == GoalStatus(status))
        if team_goal is not None:
            query = query.where(Goal.team_goal.is_(team_goal))
        return list(self.db.scalars(query))

    def update_goal(self, goal_id: str, changes: dict[str, Any]) -> Goal | None:
        goal = self.get_goal(goal_id)
        if goal is None:
            return None
        if changes.get("target_value") is not None and changes["target_value"] <= 0:
            raise ValidationError("Goal target must be positive.")
        for name in UPDATABLE_FIELDS:
            if name in changes and changes[name] is not None:
                setattr(goal, name, changes[name])
        if changes.get("type") is not None:
            goal.type = GoalType(changes["type"])
        if changes.get("period") is not None:
            goal.period = GoalPeriod(changes["period"])
        if changes.get("status") is not None:
            goal.status = GoalStatus(changes["status"])
        self.commit()
        self.db.refresh(goal)
        return goal

    def update_progress(self, goal_id: str, current_value: float) -> Goal | None:
        """Record progress; reaching the target completes an active goal."""
        goal = self.get_goal(goal_id)
        if goal is None:
            return None
        if current_value < 0:
            raise ValidationError("Goal progress cannot be negative.")
        goal.current_value = current_value
        self._complete_if_reached(goal)
        self.commit()
        self.db.refresh(goal)
        return goal

    def delete_goal(self, goal_id: str) -> bool:
        goal = self.get_goal(goal_id)
        if goal is None:
            return False
        self.db.delete(goal)
        self.commit()
        return True

    @staticmethod
    def _complete_if_reached(goal: Goal) -> None:
        if GoalStatus(goal.status) is GoalStatus.ACTIVE and calculate_progress(goal.current_value, goal.target_value) >= 100.0:
            goal.status = GoalStatus.COMPLETED
            logger.info("goal.completed", extra={"event": "goal.completed", "goal_id": goal.id})
