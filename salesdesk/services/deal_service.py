"""Deal service: CRUD and status changes."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from sqlalchemy import select

from salesdesk.core.enums import DealStatus
from salesdesk.models import Deal
from salesdesk.services.base_service import BaseService

logger = logging.getLogger(__name__)

CLOSED_STATUSES = {DealStatus.WON, DealStatus.LOST}
UPDATABLE_FIELDS = (
    "title",
    "lead_id",
    "responsible_id",
    "value",
    "probability",
    "expected_close_date",
    "actual_close_date",
    "description",
)


class DealService(BaseService):
    """Service for deal CRUD and status transitions."""

    def create_deal(
        self,
        title: str,
        value: float,
        lead_id: str | None = None,
        responsible_id: str | None = None,
        status: str = DealStatus.OPEN.value,
        probability: float | None = 0.0,
        expected_close_date: date | None = None,
        description: str | None = None,
    ) -> Deal:
        deal = Deal(
            title=title,
            value=value,
            lead_id=lead_id,
            responsible_id=responsible_id,
            status=DealStatus(status),
            probability=probability,
            expected_close_date=expected_close_date,
            description=description,
        )
        self._stamp_close_date(deal)
        self.db.add(deal)
        self.commit()
        self.db.refresh(deal)
        logger.info("deal.created", extra={"event": "deal.created", "deal_id": deal.id, "lead_id": lead_id})
        return deal

    def get_deal(self, deal_id: str) -> Deal | None:
        return self.db.get(Deal, deal_id)

    def list_deals(self, status: str | None = None, lead_id: str | None = None) -> list[Deal]:
        query = select(Deal).order_by(Deal.created_at.desc())
        if status:
            query = query.where(Deal.status == DealStatus(status))
        if lead_id:
            query = query.where(Deal.lead_id == lead_id)
        return list(self.db.scalars(query).unique())

    def update_deal(self, deal_id: str, changes: dict[str, Any]) -> Deal | None:
        deal = self.get_deal(deal_id)
        if deal is None:
            return None
        for name in UPDATABLE_FIELDS:
            if name in changes and changes[name] is not None:
                setattr(deal, name, changes[name])
        if changes.get("status") is not None:
            deal.status = DealStatus(changes["status"])
            self._stamp_close_date(deal)
        self.commit()
        self.db.refresh(deal)
        return deal

    def update_status(self, deal_id: str, status: str) -> Deal | None:
        return self.update_deal(deal_id, {"status": status})

    def delete_deal(self, deal_id: str) -> bool:
        deal = self.get_deal(deal_id)
        if deal is None:
            return False
        self.db.delete(deal)
        self.commit()
        return True

    @staticmethod
    def _stamp_close_date(deal: Deal) -> None:
        if DealStatus(deal.status) in CLOSED_STATUSES and deal.actual_close_date is None:
            deal.actual_close_date = date.today()
