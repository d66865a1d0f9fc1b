"""Financial transaction endpoints for API v1."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Header, Query, status

from salesdesk.api.v1._authz import authorize_or_raise, not_found, unprocessable
from salesdesk.core.exceptions import ValidationError
from salesdesk.database.db import get_db_session
from salesdesk.schemas.financial import (
    FinancialSummaryResponse,
    TransactionCreateRequest,
    TransactionResponse,
    TransactionUpdateRequest,
)
from salesdesk.services.financial_service import FinancialService

router = APIRouter(prefix="/financial", tags=["financial"])


@router.get("/transactions", response_model=list[TransactionResponse])
def list_transactions(
    type: str | None = Query(default=None),
    category: str | None = Query(default=None),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> list[TransactionResponse]:
    authorize_or_raise(authorization, scopes=["finance.read"])
    with get_db_session() as session:
        try:
            rows = FinancialService(db=session).list_transactions(
                type=type, category=category, start_date=start_date, end_date=end_date, status=status_filter
            )
        except ValueError as exc:
            raise unprocessable(exc) from exc
        return [TransactionResponse.model_validate(row) for row in rows]


@router.get("/summary", response_model=FinancialSummaryResponse)
def financial_summary(
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> FinancialSummaryResponse:
    authorize_or_raise(authorization, scopes=["finance.read"])
    with get_db_session() as session:
        summary = FinancialService(db=session).summary(start_date=start_date, end_date=end_date)
    return FinancialSummaryResponse.model_validate(summary)


@router.post("/transactions", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def create_transaction(
    payload: TransactionCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> TransactionResponse:
    user = authorize_or_raise(authorization, scopes=["finance.write"])
    data = payload.model_dump(mode="json")
    data["transaction_date"] = payload.transaction_date
    with get_db_session() as session:
        try:
            row = FinancialService(db=session).create_transaction(user_id=user.user_id, **data)
        except ValidationError as exc:
            raise unprocessable(exc) from exc
        return TransactionResponse.model_validate(row)


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
def get_transaction(transaction_id: str, authorization: str | None = Header(default=None, alias="Authorization")) -> TransactionResponse:
    authorize_or_raise(authorization, scopes=["finance.read"])
    with get_db_session() as session:
        row = FinancialService(db=session).get_transaction(transaction_id)
        if row is None:
            raise not_found("Transaction", transaction_id)
        return TransactionResponse.model_validate(row)


@router.patch("/transactions/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: str,
    payload: TransactionUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> TransactionResponse:
    authorize_or_raise(authorization, scopes=["finance.write"])
    with get_db_session() as session:
        try:
            row = FinancialService(db=session).update_transaction(transaction_id, payload.model_dump(exclude_unset=True))
        except ValidationError as exc:
            raise unprocessable(exc) from exc
        if row is None:
            raise not_found("Transaction", transaction_id)
        return TransactionResponse.model_validate(row)


@router.delete("/transactions/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(transaction_id: str, authorization: str | None = Header(default=None, alias="Authorization")) -> None:
    authorize_or_raise(authorization, scopes=["finance.write"])
    with get_db_session() as session:
        if not FinancialService(db=session).delete_transaction(transaction_id):
            raise not_found("Transaction", transaction_id)
