"""Goal schemas."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from salesdesk.core.enums import GoalPeriod, GoalStatus, GoalType
from salesdesk.services.goal_service import calculate_progress


class GoalCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    target_value: float = Field(gt=0)
    current_value: float = Field(default=0.0, ge=0)
    type: GoalType = GoalType.REVENUE
    period: GoalPeriod = GoalPeriod.MONTHLY
    assignee: str | None = Field(default=None, max_length=255)
    target_date: date | None = None
    description: str | None = Field(default=None, max_length=10000)
    team_goal: bool = False


class GoalUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    target_value: float | None = Field(default=None, gt=0)
    type: GoalType | None = None
    period: GoalPeriod | None = None
    status: GoalStatus | None = None
    assignee: str | None = Field(default=None, max_length=255)
    target_date: date | None = None
    description: str | None = Field(default=None, max_length=10000)
    team_goal: bool | None = None


class GoalProgressRequest(BaseModel):
    current_value: float = Field(ge=0)


class GoalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str | None = None
    type: GoalType
    target_value: float
    current_value: float
    period: GoalPeriod
    assignee: str | None = None
    target_date: date | None = None
    team_goal: bool
    status: GoalStatus
    created_at: datetime | None = None

    @computed_field
    @property
    def progress(self) -> float:
        return calculate_progress(self.current_value, self.target_value)
