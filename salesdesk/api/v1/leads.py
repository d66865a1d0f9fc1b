"""Lead and pipeline endpoints for API v1."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Header, Query, status

from salesdesk.api.v1._authz import authorize_or_raise, not_found, raise_for_result
from salesdesk.core.enums import FILTER_ALL
from salesdesk.database.db import get_db_session
from salesdesk.models import Lead
from salesdesk.pipeline.metrics import StageSummary, classify_staleness
from salesdesk.schemas.leads import (
    FunnelStepResponse,
    LeadCreateRequest,
    LeadMoveRequest,
    LeadResponse,
    LeadUpdateRequest,
    StageColumnResponse,
    StageTransitionResponse,
)
from salesdesk.services.lead_service import LeadService

router = APIRouter(prefix="/leads", tags=["leads"])


def lead_to_response(lead: Lead) -> LeadResponse:
    response = LeadResponse.model_validate(lead)
    return response.model_copy(update={"staleness": classify_staleness(lead.days_in_stage)})


def _column_to_response(column: StageSummary) -> StageColumnResponse:
    return StageColumnResponse(
        stage=column.stage,
        title=column.title,
        count=column.count,
        total_value=column.total_value,
        wip_limit=column.wip_limit,
        over_wip_limit=column.over_wip_limit,
        leads=[lead_to_response(lead) for lead in column.leads],
    )


@router.get("", response_model=list[LeadResponse])
def list_leads(
    search: str = Query(default="", max_length=255),
    status_filter: str = Query(default=FILTER_ALL, alias="status"),
    stage: str = Query(default=FILTER_ALL),
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> list[LeadResponse]:
    authorize_or_raise(authorization, scopes=["leads.read"])
    with get_db_session() as session:
        result = LeadService(db=session).search(search=search, status=status_filter, stage=stage)
        raise_for_result(result)
        return [lead_to_response(lead) for lead in result.data or []]


@router.get("/board", response_model=list[StageColumnResponse])
def pipeline_board(authorization: str | None = Header(default=None, alias="Authorization")) -> list[StageColumnResponse]:
    authorize_or_raise(authorization, scopes=["leads.read"])
    with get_db_session() as session:
        result = LeadService(db=session).board()
        raise_for_result(result)
        return [_column_to_response(column) for column in result.data or []]


@router.get("/funnel", response_model=list[FunnelStepResponse])
def conversion_funnel(authorization: str | None = Header(default=None, alias="Authorization")) -> list[FunnelStepResponse]:
    authorize_or_raise(authorization, scopes=["leads.read"])
    with get_db_session() as session:
        result = LeadService(db=session).funnel()
        raise_for_result(result)
        return [FunnelStepResponse.model_validate(step) for step in result.data or []]


@router.post("/aging/refresh")
def refresh_aging(
    now: datetime | None = None,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict:
    authorize_or_raise(authorization, scopes=["pipeline.maintain"])
    with get_db_session() as session:
        result = LeadService(db=session).refresh_days_in_stage(now=now)
        raise_for_result(result)
        return {"status": "ok", "updated": result.data}


@router.post("", response_model=LeadResponse, status_code=status.HTTP_201_CREATED)
def create_lead(
    payload: LeadCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> LeadResponse:
    user = authorize_or_raise(authorization, scopes=["leads.write"])
    with get_db_session() as session:
        result = LeadService(db=session).create(payload.model_dump(mode="json"), actor_id=user.user_id)
        raise_for_result(result)
        return lead_to_response(result.data)


@router.get("/{lead_id}", response_model=LeadResponse)
def get_lead(lead_id: str, authorization: str | None = Header(default=None, alias="Authorization")) -> LeadResponse:
    authorize_or_raise(authorization, scopes=["leads.read"])
    with get_db_session() as session:
        lead = LeadService(db=session).get(lead_id)
        if lead is None:
            raise not_found("Lead", lead_id)
        return lead_to_response(lead)


@router.patch("/{lead_id}", response_model=LeadResponse)
def update_lead(
    lead_id: str,
    payload: LeadUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> LeadResponse:
    user = authorize_or_raise(authorization, scopes=["leads.write"])
    with get_db_session() as session:
        result = LeadService(db=session).update(lead_id, payload.model_dump(mode="json", exclude_unset=True), actor=user.user_id)
        raise_for_result(result)
        return lead_to_response(result.data)


@router.delete("/{lead_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_lead(lead_id: str, authorization: str | None = Header(default=None, alias="Authorization")) -> None:
    authorize_or_raise(authorization, scopes=["leads.delete"])
    with get_db_session() as session:
        raise_for_result(LeadService(db=session).delete(lead_id))


@router.post("/{lead_id}/advance", response_model=LeadResponse)
def advance_lead(lead_id: str, authorization: str | None = Header(default=None, alias="Authorization")) -> LeadResponse:
    user = authorize_or_raise(authorization, scopes=["leads.write"])
    with get_db_session() as session:
        result = LeadService(db=session).advance(lead_id, actor=user.user_id)
        raise_for_result(result)
        return lead_to_response(result.data)


@router.post("/{lead_id}/move", response_model=LeadResponse)
def move_lead(
    lead_id: str,
    payload: LeadMoveRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> LeadResponse:
    user = authorize_or_raise(authorization, scopes=["leads.write"])
    with get_db_session() as session:
        result = LeadService(db=session).request_move(lead_id, payload.stage, actor=user.user_id)
        raise_for_result(result)
        return lead_to_response(result.data)


@router.get("/{lead_id}/history", response_model=list[StageTransitionResponse])
def lead_history(lead_id: str, authorization: str | None = Header(default=None, alias="Authorization")) -> list[StageTransitionResponse]:
    authorize_or_raise(authorization, scopes=["leads.read"])
    with get_db_session() as session:
        service = LeadService(db=session)
        if service.get(lead_id) is None:
            raise not_found("Lead", lead_id)
        return [StageTransitionResponse.model_validate(row) for row in service.history(lead_id)]
