"""Activities (calls, emails, meetings...) and calendar events."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import select

from salesdesk.core.enums import ActivityType
from salesdesk.core.exceptions import ValidationError
from salesdesk.models import Activity, CalendarEvent
from salesdesk.models.base import as_utc, utcnow
from salesdesk.services.base_service import BaseService

logger = logging.getLogger(__name__)

ACTIVITY_FIELDS = ("title", "description", "lead_id", "deal_id", "scheduled_at")
EVENT_FIELDS = ("title", "description", "start_date", "end_date", "lead_id", "deal_id", "activity_id")


class ActivityService(BaseService):
    """Service for interaction history and the shared calendar."""

    def create_activity(
        self,
        title: str,
        type: str,
        user_id: str | None = None,
        description: str | None = None,
        lead_id: str | None = None,
        deal_id: str | None = None,
        scheduled_at: datetime | None = None,
    ) -> Activity:
        activity = Activity(
            title=title,
            type=ActivityType(type),
            user_id=user_id,
            description=description,
            lead_id=lead_id,
            deal_id=deal_id,
            scheduled_at=scheduled_at,
        )
        self.db.add(activity)
        self.commit()
        self.db.refresh(activity)
        logger.info("activity.created", extra={"event": "activity.created", "activity_id": activity.id, "lead_id": lead_id})
        return activity

    def get_activity(self, activity_id: str) -> Activity | None:
        return self.db.get(Activity, activity_id)

    def list_activities(self, lead_id: str | None = None, deal_id: str | None = None, limit: int | None = None) -> list[Activity]:
        query = select(Activity).order_by(Activity.created_at.desc())
        if lead_id:
            query = query.where(Activity.lead_id == lead_id)
        if deal_id:
            query = query.where(Activity.deal_id == deal_id)
        if limit:
            query = query.limit(limit)
        return list(self.db.scalars(query).unique())

    def recent_activities(self, limit: int = 10) -> list[Activity]:
        return self.list_activities(limit=limit)

    def update_activity(self, activity_id: str, changes: dict[str, Any]) -> Activity | None:
        activity = self.get_activity(activity_id)
        if activity is None:
            return None
        for name in ACTIVITY_FIELDS:
            if name in changes and changes[name] is not None:
                setattr(activity, name, changes[name])
        if changes.get("type") is not None:
            activity.type = ActivityType(changes["type"])
        self.commit()
        self.db.refresh(activity)
        return activity

    def complete_activity(self, activity_id: str, now: datetime | None = None) -> Activity | None:
        activity = self.get_activity(activity_id)
        if activity is None:
            return None
        if not activity.is_completed:
            activity.is_completed = True
            activity.completed_at = now or utcnow()
            self.commit()
            self.db.refresh(activity)
        return activity

    def delete_activity(self, activity_id: str) -> bool:
        activity = self.get_activity(activity_id)
        if activity is None:
            return False
        self.db.delete(activity)
        self.commit()
        return True

    # Calendar ---------------------------------------------------------------

    def create_event(
        self,
        title: str,
        start_date: datetime,
        end_date: datetime,
        user_id: str | None = None,
        description: str | None = None,
        lead_id: str | None = None,
        deal_id: str | None = None,
        activity_id: str | None = None,
    ) -> CalendarEvent:
        if as_utc(end_date) < as_utc(start_date):
            raise ValidationError("Event end must not precede its start.")
        event = CalendarEvent(
            title=title,
            start_date=start_date,
            end_date=end_date,
            user_id=user_id,
            description=description,
            lead_id=lead_id,
            deal_id=deal_id,
            activity_id=activity_id,
        )
        self.db.add(event)
        self.commit()
        self.db.refresh(event)
        return event

    def get_event(self, event_id: str) -> CalendarEvent | None:
        return self.db.get(CalendarEvent, event_id)

    def list_events(self, start: datetime | None = None, end: datetime | None = None) -> list[CalendarEvent]:
        """Events overlapping the [start, end] window, earliest first."""
        query = select(CalendarEvent).order_by(CalendarEvent.start_date)
        if start is not None:
            query = query.where(CalendarEvent.end_date >= start)
        if end is not None:
            query = query.where(CalendarEvent.start_date <= end)
        return list(self.db.scalars(query))

    def update_event(self, event_id: str, changes: dict[str, Any]) -> CalendarEvent | None:
        event = self.get_event(event_id)
        if event is None:
            return None
        start = changes.get("start_date") or event.start_date
        end = changes.get("end_date") or event.end_date
        if as_utc(end) < as_utc(start):
            raise ValidationError("Event end must not precede its start.")
        for name in EVENT_FIELDS:
            if name in changes and changes[name] is not None:
                setattr(event, name, changes[name])
        self.commit()
        self.db.refresh(event)
        return event

    def delete_event(self, event_id: str) -> bool:
        event = self.get_event(event_id)
        if event is None:
            return False
        self.db.delete(event)
        self.commit()
        return True
