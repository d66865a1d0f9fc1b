"""Activity and calendar event schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from salesdesk.core.enums import ActivityType
from salesdesk.models.base import as_utc


class ActivityCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    type: ActivityType
    description: str | None = Field(default=None, max_length=10000)
    lead_id: str | None = None
    deal_id: str | None = None
    scheduled_at: datetime | None = None


class ActivityUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    type: ActivityType | None = None
    description: str | None = Field(default=None, max_length=10000)
    lead_id: str | None = None
    deal_id: str | None = None
    scheduled_at: datetime | None = None


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    type: ActivityType
    description: str | None = None
    lead_id: str | None = None
    lead_name: str | None = None
    deal_id: str | None = None
    user_id: str | None = None
    scheduled_at: datetime | None = None
    is_completed: bool
    completed_at: datetime | None = None
    created_at: datetime | None = None


class EventCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    start_date: datetime
    end_date: datetime
    description: str | None = Field(default=None, max_length=10000)
    lead_id: str | None = None
    deal_id: str | None = None
    activity_id: str | None = None

    @model_validator(mode="after")
    def check_range(self) -> "EventCreateRequest":
        if as_utc(self.end_date) < as_utc(self.start_date):
            raise ValueError("end_date must not precede start_date")
        return self


class EventUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    start_date: datetime | None = None
    end_date: datetime | None = None
    description: str | None = Field(default=None, max_length=10000)
    lead_id: str | None = None
    deal_id: str | None = None
    activity_id: str | None = None


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str | None = None
    start_date: datetime
    end_date: datetime
    lead_id: str | None = None
    deal_id: str | None = None
    activity_id: str | None = None
    user_id: str | None = None
