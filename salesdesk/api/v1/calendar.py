"""Calendar event endpoints for API v1."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Header, Query, status

from salesdesk.api.v1._authz import authorize_or_raise, not_found, unprocessable
from salesdesk.core.exceptions import ValidationError
from salesdesk.database.db import get_db_session
from salesdesk.schemas.activities import EventCreateRequest, EventResponse, EventUpdateRequest
from salesdesk.services.activity_service import ActivityService

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("/events", response_model=list[EventResponse])
def list_events(
    start: datetime | None = Query(default=None),
    end: datetime | None = Query(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> list[EventResponse]:
    authorize_or_raise(authorization, scopes=["activities.read"])
    with get_db_session() as session:
        return [EventResponse.model_validate(event) for event in ActivityService(db=session).list_events(start=start, end=end)]


@router.post("/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreateRequest, authorization: str | None = Header(default=None, alias="Authorization")) -> EventResponse:
    user = authorize_or_raise(authorization, scopes=["activities.write"])
    with get_db_session() as session:
        try:
            event = ActivityService(db=session).create_event(user_id=user.user_id, **payload.model_dump())
        except ValidationError as exc:
            raise unprocessable(exc) from exc
        return EventResponse.model_validate(event)


@router.get("/events/{event_id}", response_model=EventResponse)
def get_event(event_id: str, authorization: str | None = Header(default=None, alias="Authorization")) -> EventResponse:
    authorize_or_raise(authorization, scopes=["activities.read"])
    with get_db_session() as session:
        event = ActivityService(db=session).get_event(event_id)
        if event is None:
            raise not_found("Event", event_id)
        return EventResponse.model_validate(event)


@router.patch("/events/{event_id}", response_model=EventResponse)
def update_event(
    event_id: str,
    payload: EventUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> EventResponse:
    authorize_or_raise(authorization, scopes=["activities.write"])
    with get_db_session() as session:
        try:
            event = ActivityService(db=session).update_event(event_id, payload.model_dump(exclude_unset=True))
        except ValidationError as exc:
            raise unprocessable(exc) from exc
        if event is None:
            raise not_found("Event", event_id)
        return EventResponse.model_validate(event)


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: str, authorization: str | None = Header(default=None, alias="Authorization")) -> None:
    authorize_or_raise(authorization, scopes=["activities.write"])
    with get_db_session() as session:
        if not ActivityService(db=session).delete_event(event_id):
            raise not_found("Event", event_id)
