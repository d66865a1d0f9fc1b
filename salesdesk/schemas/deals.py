"""Deal request/response schemas."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from salesdesk.core.enums import DealStatus


class DealCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    value: float = Field(default=0.0, ge=0)
    lead_id: str | None = None
    responsible_id: str | None = None
    status: DealStatus = DealStatus.OPEN
    probability: float | None = Field(default=0.0, ge=0.0, le=100.0)
    expected_close_date: date | None = None
    description: str | None = Field(default=None, max_length=10000)


class DealUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    value: float | None = Field(default=None, ge=0)
    lead_id: str | None = None
    responsible_id: str | None = None
    status: DealStatus | None = None
    probability: float | None = Field(default=None, ge=0.0, le=100.0)
    expected_close_date: date | None = None
    actual_close_date: date | None = None
    description: str | None = Field(default=None, max_length=10000)


class DealStatusRequest(BaseModel):
    status: DealStatus


class DealResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    lead_id: str | None = None
    responsible_id: str | None = None
    value: float
    status: DealStatus
    probability: float | None = None
    expected_close_date: date | None = None
    actual_close_date: date | None = None
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
