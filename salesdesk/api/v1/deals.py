"""Deal endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Header, Query, status

from salesdesk.api.v1._authz import authorize_or_raise, not_found, unprocessable
from salesdesk.core.exceptions import ValidationError
from salesdesk.database.db import get_db_session
from salesdesk.schemas.deals import DealCreateRequest, DealResponse, DealStatusRequest, DealUpdateRequest
from salesdesk.services.deal_service import DealService

router = APIRouter(prefix="/deals", tags=["deals"])


@router.get("", response_model=list[DealResponse])
def list_deals(
    status_filter: str | None = Query(default=None, alias="status"),
    lead_id: str | None = Query(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> list[DealResponse]:
    authorize_or_raise(authorization, scopes=["deals.read"])
    with get_db_session() as session:
        try:
            deals = DealService(db=session).list_deals(status=status_filter, lead_id=lead_id)
        except ValueError as exc:
            raise unprocessable(exc) from exc
        return [DealResponse.model_validate(deal) for deal in deals]


@router.post("", response_model=DealResponse, status_code=status.HTTP_201_CREATED)
def create_deal(payload: DealCreateRequest, authorization: str | None = Header(default=None, alias="Authorization")) -> DealResponse:
    user = authorize_or_raise(authorization, scopes=["deals.write"])
    data = payload.model_dump()
    data["status"] = payload.status.value
    data["responsible_id"] = payload.responsible_id or user.user_id
    with get_db_session() as session:
        try:
            deal = DealService(db=session).create_deal(**data)
        except ValidationError as exc:
            raise unprocessable(exc) from exc
        return DealResponse.model_validate(deal)


@router.get("/{deal_id}", response_model=DealResponse)
def get_deal(deal_id: str, authorization: str | None = Header(default=None, alias="Authorization")) -> DealResponse:
    authorize_or_raise(authorization, scopes=["deals.read"])
    with get_db_session() as session:
        deal = DealService(db=session).get_deal(deal_id)
        if deal is None:
            raise not_found("Deal", deal_id)
        return DealResponse.model_validate(deal)


@router.patch("/{deal_id}", response_model=DealResponse)
def update_deal(
    deal_id: str,
    payload: DealUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> DealResponse:
    authorize_or_raise(authorization, scopes=["deals.write"])
    with get_db_session() as session:
        deal = DealService(db=session).update_deal(deal_id, payload.model_dump(exclude_unset=True))
        if deal is None:
            raise not_found("Deal", deal_id)
        return DealResponse.model_validate(deal)


@router.post("/{deal_id}/status", response_model=DealResponse)
def update_deal_status(
    deal_id: str,
    payload: DealStatusRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> DealResponse:
    authorize_or_raise(authorization, scopes=["deals.write"])
    with get_db_session() as session:
        deal = DealService(db=session).update_status(deal_id, payload.status.value)
        if deal is None:
            raise not_found("Deal", deal_id)
        return DealResponse.model_validate(deal)


@router.delete("/{deal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_deal(deal_id: str, authorization: str | None = Header(default=None, alias="Authorization")) -> None:
    authorize_or_raise(authorization, scopes=["deals.write"])
    with get_db_session() as session:
        if not DealService(db=session).delete_deal(deal_id):
            raise not_found("Deal", deal_id)
