"""Deal model module."""

from __future__ import annotations

from datetime import date

from sqlalchemy import Date, Float, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salesdesk.core.enums import DealStatus
from salesdesk.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin, enum_column


class Deal(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "deals"
    __table_args__ = (Index("idx_deals_status", "status"),)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    lead_id: Mapped[str | None] = mapped_column(ForeignKey("leads.id", ondelete="SET NULL"))
    responsible_id: Mapped[str | None] = mapped_column(ForeignKey("profiles.id", ondelete="SET NULL"))
    value: Mapped[float] = mapped_column(Numeric(14, 2, asdecimal=False), default=0, nullable=False)
    status: Mapped[DealStatus] = mapped_column(enum_column(DealStatus), default=DealStatus.OPEN, nullable=False)
    probability: Mapped[float | None] = mapped_column(Float, default=0.0)
    expected_close_date: Mapped[date | None] = mapped_column(Date)
    actual_close_date: Mapped[date | None] = mapped_column(Date)
    description: Mapped[str | None] = mapped_column(Text)

    lead = relationship("Lead", lazy="joined")
