"""Goal endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Header, Query, status

from salesdesk.api.v1._authz import authorize_or_raise, not_found, unprocessable
from salesdesk.core.exceptions import ValidationError
from salesdesk.database.db import get_db_session
from salesdesk.schemas.goals import GoalCreateRequest, GoalProgressRequest, GoalResponse, GoalUpdateRequest
from salesdesk.services.goal_service import GoalService

router = APIRouter(prefix="/goals", tags=["goals"])


@router.get("", response_model=list[GoalResponse])
def list_goals(
    status_filter: str | None = Query(default=None, alias="status"),
    team_goal: bool | None = Query(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> list[GoalResponse]:
    authorize_or_raise(authorization, scopes=["goals.read"])
    with get_db_session() as session:
        try:
            goals = GoalService(db=session).list_goals(status=status_filter, team_goal=team_goal)
        except ValueError as exc:
            raise unprocessable(exc) from exc
        return [GoalResponse.model_validate(goal) for goal in goals]


@router.post("", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
def create_goal(payload: GoalCreateRequest, authorization: str | None = Header(default=None, alias="Authorization")) -> GoalResponse:
    user = authorize_or_raise(authorization, scopes=["goals.write"])
    data = payload.model_dump()
    data["type"] = payload.type.value
    data["period"] = payload.period.value
    with get_db_session() as session:
        try:
            goal = GoalService(db=session).create_goal(user_id=user.user_id, **data)
        except ValidationError as exc:
            raise unprocessable(exc) from exc
        return GoalResponse.model_validate(goal)


@router.get("/{goal_id}", response_model=GoalResponse)
def get_goal(goal_id: str, authorization: str | None = Header(default=None, alias="Authorization")) -> GoalResponse:
    authorize_or_raise(authorization, scopes=["goals.read"])
    with get_db_session() as session:
        goal = GoalService(db=session).get_goal(goal_id)
        if goal is None:
            raise not_found("Goal", goal_id)
        return GoalResponse.model_validate(goal)


@router.patch("/{goal_id}", response_model=GoalResponse)
def update_goal(
    goal_id: str,
    payload: GoalUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> GoalResponse:
    authorize_or_raise(authorization, scopes=["goals.write"])
    with get_db_session() as session:
        try:
            goal = GoalService(db=session).update_goal(goal_id, payload.model_dump(exclude_unset=True))
        except ValidationError as exc:
            raise unprocessable(exc) from exc
        if goal is None:
            raise not_found("Goal", goal_id)
        return GoalResponse.model_validate(goal)


@router.post("/{goal_id}/progress", response_model=GoalResponse)
def update_goal_progress(
    goal_id: str,
    payload: GoalProgressRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> GoalResponse:
    authorize_or_raise(authorization, scopes=["goals.write"])
    with get_db_session() as session:
        try:
            goal = GoalService(db=session).update_progress(goal_id, payload.current_value)
        except ValidationError as exc:
            raise unprocessable(exc) from exc
        if goal is None:
            raise not_found("Goal", goal_id)
        return GoalResponse.model_validate(goal)


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_goal(goal_id: str, authorization: str | None = Header(default=None, alias="Authorization")) -> None:
    authorize_or_raise(authorization, scopes=["goals.write"])
    with get_db_session() as session:
        if not GoalService(db=session).delete_goal(goal_id):
            raise not_found("Goal", goal_id)
