"""Financial transactions: CRUD, filtered listing and summary figures."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

from sqlalchemy import select

from salesdesk.core.enums import TransactionStatus, TransactionType
from salesdesk.core.exceptions import ValidationError
from salesdesk.models import FinancialTransaction
from salesdesk.services.base_service import BaseService

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "category", "amount", "transaction_date", "deal_id", "lead_id", "description")


@dataclass(frozen=True)
class FinancialSummary:
    total_income: float
    total_expenses: float
    pending_income: float
    net_profit: float
    margin_percent: float


def summarize(transactions: list[FinancialTransaction]) -> FinancialSummary:
    """Only completed transactions count toward income and expenses."""

    def _sum(kind: TransactionType, status: TransactionStatus) -> float:
        return round(
            sum(float(t.amount) for t in transactions if TransactionType(t.type) is kind and TransactionStatus(t.status) is status),
            2,
        )

    income = _sum(TransactionType.INCOME, TransactionStatus.COMPLETED)
    expenses = _sum(TransactionType.EXPENSE, TransactionStatus.COMPLETED)
    net = round(income - expenses, 2)
    return FinancialSummary(
        total_income=income,
        total_expenses=expenses,
        pending_income=_sum(TransactionType.INCOME, TransactionStatus.PENDING),
        net_profit=net,
        margin_percent=round(net / income * 100.0, 1) if income else 0.0,
    )


class FinancialService(BaseService):
    """Service for income/expense records."""

    def create_transaction(
        self,
        title: str,
        type: str,
        amount: float,
        transaction_date: date | None = None,
        category: str | None = None,
        status: str = TransactionStatus.COMPLETED.value,
        deal_id: str | None = None,
        lead_id: str | None = None,
        user_id: str | None = None,
        description: str | None = None,
    ) -> FinancialTransaction:
        if amount <= 0:
            raise ValidationError("Transaction amount must be positive.")
        transaction = FinancialTransaction(
            title=title,
            type=TransactionType(type),
            amount=amount,
            transaction_date=transaction_date or date.today(),
            category=category,
            status=TransactionStatus(status),
            deal_id=deal_id,
            lead_id=lead_id,
            user_id=user_id,
            description=description,
        )
        self.db.add(transaction)
        self.commit()
        self.db.refresh(transaction)
        logger.info(
            "transaction.created",
            extra={"event": "transaction.created", "transaction_id": transaction.id, "type": transaction.type.value},
        )
        return transaction

    def get_transaction(self, transaction_id: str) -> FinancialTransaction | None:
        return self.db.get(FinancialTransaction, transaction_id)

    def list_transactions(
        self,
        type: str | None = None,
        category: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        status: str | None = None,
    ) -> list[FinancialTransaction]:
        """Newest first; date bounds are inclusive."""
        query = select(FinancialTransaction).order_by(
            FinancialTransaction.transaction_date.desc(), FinancialTransaction.created_at.desc()
        )
        if type:
            query = query.where(FinancialTransaction.type == TransactionType(type))
        if category:
            query = query.where(FinancialTransaction.category == category)
        if status:
            query = query.where(FinancialTransaction.status == TransactionStatus(status))
        if start_date:
            query = query.where(FinancialTransaction.transaction_date >= start_date)
        if end_date:
            query = query.where(FinancialTransaction.transaction_date <= end_date)
        return list(self.db.scalars(query))

    def update_transaction(self, transaction_id: str, changes: dict[str, Any]) -> FinancialTransaction | None:
        transaction = self.get_transaction(transaction_id)
        if transaction is None:
            return None
        if changes.get("amount") is not None and changes["amount"] <= 0:
            raise ValidationError("Transaction amount must be positive.")
        for name in UPDATABLE_FIELDS:
            if name in changes and changes[name] is not None:
                setattr(transaction, name, changes[name])
        if changes.get("type") is not None:
            transaction.type = TransactionType(changes["type"])
        if changes.get("status") is not None:
            transaction.status = TransactionStatus(changes["status"])
        self.commit()
        self.db.refresh(transaction)
        return transaction

    def delete_transaction(self, transaction_id: str) -> bool:
        transaction = self.get_transaction(transaction_id)
        if transaction is None:
            return False
        self.db.delete(transaction)
        self.commit()
        return True

    def summary(self, start_date: date | None = None, end_date: date | None = None) -> FinancialSummary:
        return summarize(self.list_transactions(start_date=start_date, end_date=end_date))
