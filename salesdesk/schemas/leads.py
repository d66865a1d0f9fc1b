"""Lead request/response schemas for API contracts."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from salesdesk.core.enums import LeadStage, LeadStatus, StalenessLevel
from salesdesk.utils.validators import parse_money


def _coerce_value(value: Any) -> float:
    number = parse_money(value)
    if number < 0:
        raise ValueError("value must be non-negative")
    return number


class LeadCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    company_name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=320)
    phone: str = Field(min_length=1, max_length=40)
    value: float = 0.0
    status: LeadStatus = LeadStatus.NOVO
    stage: LeadStage = LeadStage.PROSPECCAO
    responsible_id: str | None = None
    source: str | None = Field(default=None, max_length=120)
    notes: str | None = Field(default=None, max_length=20000)

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, value: Any) -> float:
        return _coerce_value(value)


class LeadUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    company_name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, min_length=3, max_length=320)
    phone: str | None = Field(default=None, min_length=1, max_length=40)
    value: float | None = None
    status: LeadStatus | None = None
    stage: LeadStage | None = None
    responsible_id: str | None = None
    source: str | None = Field(default=None, max_length=120)
    notes: str | None = Field(default=None, max_length=20000)

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, value: Any) -> float | None:
        return None if value is None else _coerce_value(value)


class LeadMoveRequest(BaseModel):
    stage: LeadStage


class LeadResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    company_name: str | None = None
    email: str
    phone: str | None = None
    value: float
    status: LeadStatus
    stage: LeadStage
    responsible_id: str | None = None
    responsible_name: str | None = None
    source: str | None = None
    notes: str | None = None
    days_in_stage: int
    staleness: StalenessLevel = StalenessLevel.NORMAL
    stage_entered_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StageColumnResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    stage: LeadStage
    title: str
    count: int
    total_value: float
    wip_limit: int | None = None
    over_wip_limit: bool
    leads: list[LeadResponse] = Field(default_factory=list)


class FunnelStepResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    stage: LeadStage
    count: int
    percentage: float


class StageTransitionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    lead_id: str
    from_stage: LeadStage
    to_stage: LeadStage
    actor: str | None = None
    created_at: datetime
