"""Financial transaction model module."""

from __future__ import annotations

from datetime import date

from sqlalchemy import Date, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from salesdesk.core.enums import TransactionStatus, TransactionType
from salesdesk.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin, enum_column


class FinancialTransaction(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "financial_transactions"
    __table_args__ = (Index("idx_transactions_type_date", "type", "transaction_date"),)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[TransactionType] = mapped_column(enum_column(TransactionType), nullable=False)
    category: Mapped[str | None] = mapped_column(String(120))
    amount: Mapped[float] = mapped_column(Numeric(14, 2, asdecimal=False), nullable=False)
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[TransactionStatus] = mapped_column(
        enum_column(TransactionStatus), default=TransactionStatus.COMPLETED, nullable=False
    )
    deal_id: Mapped[str | None] = mapped_column(ForeignKey("deals.id", ondelete="SET NULL"))
    lead_id: Mapped[str | None] = mapped_column(ForeignKey("leads.id", ondelete="SET NULL"))
    user_id: Mapped[str | None] = mapped_column(ForeignKey("profiles.id", ondelete="SET NULL"))
    description: Mapped[str | None] = mapped_column(Text)
