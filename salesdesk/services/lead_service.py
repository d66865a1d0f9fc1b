"""Lead repository: CRUD plus pipeline stage transitions."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from salesdesk.core.config import get_config
from salesdesk.core.enums import FILTER_ALL, LeadStage, LeadStatus
from salesdesk.models import Lead, StageTransition
from salesdesk.models.base import as_utc, utcnow
from salesdesk.pipeline.filters import filter_leads
from salesdesk.pipeline.metrics import FunnelStep, StageSummary, board_summary, conversion_funnel
from salesdesk.pipeline.stages import INITIAL_STAGE, TERMINAL_STAGE, parse_stage
from salesdesk.pipeline.state_machine import InvalidTransitionError, PipelineStateMachine, TransitionResult
from salesdesk.services.base_service import (
    ERROR_BACKEND,
    ERROR_NOT_FOUND,
    ERROR_TRANSITION,
    ERROR_VALIDATION,
    BaseService,
    ServiceResult,
)
from salesdesk.utils.validators import missing_fields, parse_money, sanitize_text

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "company_name", "email", "phone")
EDITABLE_TEXT_FIELDS = ("name", "company_name", "email", "phone", "source", "notes")


class LeadService(BaseService):
    """Repository over the lead collection.

    Every mutating operation returns a `ServiceResult`. When a write fails the
    session is rolled back and the result carries the lead as currently
    persisted, so callers never keep a locally mutated copy that the database
    rejected.
    """

    def __init__(self, db: Session | None = None, allow_regression: bool | None = None) -> None:
        super().__init__(db)
        if allow_regression is None:
            allow_regression = get_config().PIPELINE_ALLOW_REGRESSION
        self.state_machine = PipelineStateMachine(allow_regression=allow_regression)

    # Queries ---------------------------------------------------------------

    def get(self, lead_id: str) -> Lead | None:
        return self.db.get(Lead, lead_id)

    def load(self) -> ServiceResult[list[Lead]]:
        """Full collection, newest first, with the responsible profile expanded."""
        try:
            leads = list(self.db.scalars(select(Lead).order_by(Lead.created_at.desc(), Lead.id)).unique())
        except SQLAlchemyError as exc:
            logger.exception("lead.load_failed", extra={"event": "lead.load_failed"})
            return ServiceResult.fail(f"Could not load leads: {exc.__class__.__name__}", ERROR_BACKEND)
        return ServiceResult.ok(leads, changed=False)

    def search(self, search: str = "", status: str = FILTER_ALL, stage: str = FILTER_ALL) -> ServiceResult[list[Lead]]:
        loaded = self.load()
        if not loaded.success:
            return loaded
        return ServiceResult.ok(filter_leads(loaded.data or [], search=search, status=status, stage=stage), changed=False)

    def board(self, wip_limits: Mapping[str, int] | None = None) -> ServiceResult[list[StageSummary]]:
        loaded = self.load()
        if not loaded.success:
            return loaded
        limits = get_config().PIPELINE_WIP_LIMITS if wip_limits is None else wip_limits
        return ServiceResult.ok(board_summary(loaded.data or [], limits), changed=False)

    def funnel(self) -> ServiceResult[list[FunnelStep]]:
        loaded = self.load()
        if not loaded.success:
            return loaded
        return ServiceResult.ok(conversion_funnel(loaded.data or []), changed=False)

    def history(self, lead_id: str) -> list[StageTransition]:
        return list(
            self.db.scalars(
                select(StageTransition).where(StageTransition.lead_id == lead_id).order_by(StageTransition.id)
            )
        )

    # Mutations -------------------------------------------------------------

    def create(self, data: Mapping[str, Any], actor_id: str | None = None) -> ServiceResult[Lead]:
        missing = missing_fields(data, REQUIRED_FIELDS)
        if missing:
            return ServiceResult.fail(f"Missing required fields: {', '.join(missing)}", ERROR_VALIDATION)

        value = parse_money(data.get("value"))
        if value < 0:
            return ServiceResult.fail("Lead value must be non-negative.", ERROR_VALIDATION)

        try:
            stage = parse_stage(data.get("stage") or INITIAL_STAGE)
            status = LeadStatus(data.get("status") or LeadStatus.NOVO)
        except ValueError as exc:
            return ServiceResult.fail(str(exc), ERROR_VALIDATION)

        now = utcnow()
        lead = Lead(
            name=sanitize_text(data["name"], max_len=255),
            company_name=sanitize_text(data["company_name"], max_len=255),
            email=sanitize_text(data["email"], max_len=320),
            phone=sanitize_text(data["phone"], max_len=40),
            source=sanitize_text(data.get("source"), max_len=120) or None,
            notes=sanitize_text(data.get("notes")) or None,
            value=value,
            stage=stage,
            status=LeadStatus.FECHADO if stage is TERMINAL_STAGE else status,
            responsible_id=data.get("responsible_id") or actor_id,
            days_in_stage=0,
            stage_entered_at=now,
            created_at=now,
            updated_at=now,
        )
        self.db.add(lead)
        try:
            self.commit()
        except SQLAlchemyError as exc:
            logger.exception("lead.persist_failed", extra={"event": "lead.persist_failed", "operation": "create"})
            return ServiceResult.fail(f"Could not create lead: {exc.__class__.__name__}", ERROR_BACKEND)

        self.db.refresh(lead)
        logger.info("lead.created", extra={"event": "lead.created", "lead_id": lead.id, "stage": lead.stage.value})
        return ServiceResult.ok(lead)

    def update(self, lead_id: str, changes: Mapping[str, Any], actor: str | None = None) -> ServiceResult[Lead]:
        """Apply a manual edit. A stage change goes through the state machine.

        An edit that leaves every field as it was is a no-op: nothing is
        written and `updated_at` keeps its value.
        """
        lead = self.get(lead_id)
        if lead is None:
            return ServiceResult.fail(f"Lead not found: {lead_id}", ERROR_NOT_FOUND)
        if "id" in changes and changes["id"] != lead.id:
            return ServiceResult.fail("Lead id is immutable.", ERROR_VALIDATION)

        edited = False
        for name in EDITABLE_TEXT_FIELDS:
            if name not in changes:
                continue
            cleaned = sanitize_text(changes[name])
            if name in REQUIRED_FIELDS and not cleaned:
                self.rollback()
                return ServiceResult.fail(f"Field cannot be empty: {name}", ERROR_VALIDATION)
            edited |= self._assign(lead, name, cleaned or None)

        if "value" in changes:
            value = parse_money(changes["value"])
            if value < 0:
                self.rollback()
                return ServiceResult.fail("Lead value must be non-negative.", ERROR_VALIDATION)
            edited |= self._assign(lead, "value", value)
        if "responsible_id" in changes:
            edited |= self._assign(lead, "responsible_id", changes["responsible_id"] or None)

        try:
            if "status" in changes and changes["status"] is not None:
                edited |= self._assign(lead, "status", LeadStatus(changes["status"]))
            target = parse_stage(changes["stage"]) if changes.get("stage") is not None else None
        except ValueError as exc:
            self.rollback()
            return ServiceResult.fail(str(exc), ERROR_VALIDATION)

        now = utcnow()
        transition: TransitionResult | None = None
        if target is not None:
            try:
                transition = self.state_machine.move(lead, target, now=now)
            except InvalidTransitionError as exc:
                self.rollback()
                return ServiceResult.fail(str(exc), ERROR_TRANSITION, data=self.get(lead_id))
        if not edited and (transition is None or not transition.changed):
            return ServiceResult.ok(lead, changed=False)
        lead.updated_at = now
        return self._persist(lead, transition, actor, operation="update")

    def delete(self, lead_id: str) -> ServiceResult[None]:
        lead = self.get(lead_id)
        if lead is None:
            return ServiceResult.fail(f"Lead not found: {lead_id}", ERROR_NOT_FOUND)
        self.db.delete(lead)
        try:
            self.commit()
        except SQLAlchemyError as exc:
            logger.exception("lead.persist_failed", extra={"event": "lead.persist_failed", "operation": "delete"})
            return ServiceResult.fail(f"Could not delete lead: {exc.__class__.__name__}", ERROR_BACKEND, data=self.get(lead_id))
        logger.info("lead.deleted", extra={"event": "lead.deleted", "lead_id": lead_id})
        return ServiceResult.ok(None)

    def advance(self, lead_id: str, actor: str | None = None) -> ServiceResult[Lead]:
        lead = self.get(lead_id)
        if lead is None:
            return ServiceResult.fail(f"Lead not found: {lead_id}", ERROR_NOT_FOUND)
        transition = self.state_machine.advance(lead)
        if not transition.changed:
            return ServiceResult.ok(lead, changed=False)
        return self._persist(lead, transition, actor, operation="advance")

    def request_move(self, lead_id: str, target_stage: LeadStage | str, actor: str | None = None) -> ServiceResult[Lead]:
        """Drag-and-drop style move to any stage."""
        lead = self.get(lead_id)
        if lead is None:
            return ServiceResult.fail(f"Lead not found: {lead_id}", ERROR_NOT_FOUND)
        try:
            target = parse_stage(target_stage)
        except ValueError:
            return ServiceResult.fail(f"Unknown stage: {target_stage}", ERROR_VALIDATION)
        try:
            transition = self.state_machine.move(lead, target)
        except InvalidTransitionError as exc:
            return ServiceResult.fail(str(exc), ERROR_TRANSITION, data=lead)
        if not transition.changed:
            return ServiceResult.ok(lead, changed=False)
        return self._persist(lead, transition, actor, operation="move")

    def refresh_days_in_stage(self, now: datetime | None = None) -> ServiceResult[int]:
        """Recompute `days_in_stage` as whole days since the last stage change."""
        moment = as_utc(now or utcnow())
        updated = 0
        for lead in self.db.scalars(select(Lead)).unique():
            entered = as_utc(lead.stage_entered_at) if lead.stage_entered_at else moment
            days = max((moment - entered).days, 0)
            if days != lead.days_in_stage:
                lead.days_in_stage = days
                updated += 1
        try:
            self.commit()
        except SQLAlchemyError as exc:
            logger.exception("lead.persist_failed", extra={"event": "lead.persist_failed", "operation": "aging"})
            return ServiceResult.fail(f"Could not refresh lead aging: {exc.__class__.__name__}", ERROR_BACKEND)
        logger.info("lead.aging.refreshed", extra={"event": "lead.aging.refreshed", "updated": updated})
        return ServiceResult.ok(updated, changed=updated > 0)

    @staticmethod
    def _assign(lead: Lead, name: str, value: Any) -> bool:
        if getattr(lead, name) == value:
            return False
        setattr(lead, name, value)
        return True

    def _persist(
        self,
        lead: Lead,
        transition: TransitionResult | None,
        actor: str | None,
        operation: str,
    ) -> ServiceResult[Lead]:
        lead_id = lead.id
        if transition is not None and transition.changed:
            self.db.add(
                StageTransition(
                    lead_id=lead_id,
                    from_stage=transition.from_stage,
                    to_stage=transition.to_stage,
                    actor=actor,
                    created_at=lead.updated_at,
                )
            )
        try:
            self.commit()
        except SQLAlchemyError as exc:
            logger.exception(
                "lead.persist_failed",
                extra={"event": "lead.persist_failed", "operation": operation, "lead_id": lead_id},
            )
            return ServiceResult.fail(f"Could not save lead: {exc.__class__.__name__}", ERROR_BACKEND, data=self.get(lead_id))

        self.db.refresh(lead)
        if transition is not None and transition.changed:
            logger.info(
                "lead.stage.moved",
                extra={
                    "event": "lead.stage.moved",
                    "lead_id": lead_id,
                    "operation": operation,
                    "from_stage": transition.from_stage.value,
                    "to_stage": transition.to_stage.value,
                },
            )
        else:
            logger.info("lead.updated", extra={"event": "lead.updated", "lead_id": lead_id})
        return ServiceResult.ok(lead)
