"""Activity endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Header, Query, status

from salesdesk.api.v1._authz import authorize_or_raise, not_found
from salesdesk.database.db import get_db_session
from salesdesk.schemas.activities import ActivityCreateRequest, ActivityResponse, ActivityUpdateRequest
from salesdesk.services.activity_service import ActivityService

router = APIRouter(prefix="/activities", tags=["activities"])


@router.get("", response_model=list[ActivityResponse])
def list_activities(
    lead_id: str | None = Query(default=None),
    deal_id: str | None = Query(default=None),
    limit: int | None = Query(default=None, ge=1, le=500),
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> list[ActivityResponse]:
    authorize_or_raise(authorization, scopes=["activities.read"])
    with get_db_session() as session:
        rows = ActivityService(db=session).list_activities(lead_id=lead_id, deal_id=deal_id, limit=limit)
        return [ActivityResponse.model_validate(row) for row in rows]


@router.post("", response_model=ActivityResponse, status_code=status.HTTP_201_CREATED)
def create_activity(payload: ActivityCreateRequest, authorization: str | None = Header(default=None, alias="Authorization")) -> ActivityResponse:
    user = authorize_or_raise(authorization, scopes=["activities.write"])
    data = payload.model_dump()
    data["type"] = payload.type.value
    with get_db_session() as session:
        activity = ActivityService(db=session).create_activity(user_id=user.user_id, **data)
        return ActivityResponse.model_validate(activity)


@router.get("/{activity_id}", response_model=ActivityResponse)
def get_activity(activity_id: str, authorization: str | None = Header(default=None, alias="Authorization")) -> ActivityResponse:
    authorize_or_raise(authorization, scopes=["activities.read"])
    with get_db_session() as session:
        activity = ActivityService(db=session).get_activity(activity_id)
        if activity is None:
            raise not_found("Activity", activity_id)
        return ActivityResponse.model_validate(activity)


@router.patch("/{activity_id}", response_model=ActivityResponse)
def update_activity(
    activity_id: str,
    payload: ActivityUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> ActivityResponse:
    authorize_or_raise(authorization, scopes=["activities.write"])
    with get_db_session() as session:
        activity = ActivityService(db=session).update_activity(activity_id, payload.model_dump(exclude_unset=True))
        if activity is None:
            raise not_found("Activity", activity_id)
        return ActivityResponse.model_validate(activity)


@router.post("/{activity_id}/complete", response_model=ActivityResponse)
def complete_activity(activity_id: str, authorization: str | None = Header(default=None, alias="Authorization")) -> ActivityResponse:
    authorize_or_raise(authorization, scopes=["activities.write"])
    with get_db_session() as session:
        activity = ActivityService(db=session).complete_activity(activity_id)
        if activity is None:
            raise not_found("Activity", activity_id)
        return ActivityResponse.model_validate(activity)


@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_activity(activity_id: str, authorization: str | None = Header(default=None, alias="Authorization")) -> None:
    authorize_or_raise(authorization, scopes=["activities.write"])
    with get_db_session() as session:
        if not ActivityService(db=session).delete_activity(activity_id):
            raise not_found("Activity", activity_id)
