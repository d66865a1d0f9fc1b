"""Financial transaction schemas."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from salesdesk.core.enums import TransactionStatus, TransactionType


class TransactionCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    type: TransactionType
    amount: float = Field(gt=0)
    transaction_date: date | None = None
    category: str | None = Field(default=None, max_length=120)
    status: TransactionStatus = TransactionStatus.COMPLETED
    deal_id: str | None = None
    lead_id: str | None = None
    description: str | None = Field(default=None, max_length=10000)


class TransactionUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    type: TransactionType | None = None
    amount: float | None = Field(default=None, gt=0)
    transaction_date: date | None = None
    category: str | None = Field(default=None, max_length=120)
    status: TransactionStatus | None = None
    deal_id: str | None = None
    lead_id: str | None = None
    description: str | None = Field(default=None, max_length=10000)


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    type: TransactionType
    category: str | None = None
    amount: float
    transaction_date: date
    status: TransactionStatus
    deal_id: str | None = None
    lead_id: str | None = None
    user_id: str | None = None
    description: str | None = None
    created_at: datetime | None = None


class FinancialSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_income: float
    total_expenses: float
    pending_income: float
    net_profit: float
    margin_percent: float
