"""Lead model module."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salesdesk.core.enums import LeadStage, LeadStatus
from salesdesk.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin, enum_column, utcnow


class Lead(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "leads"
    __table_args__ = (
        Index("idx_leads_stage", "stage"),
        Index("idx_leads_status", "status"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(40))
    company_name: Mapped[str | None] = mapped_column(String(255))
    status: Mapped[LeadStatus] = mapped_column(enum_column(LeadStatus), default=LeadStatus.NOVO, nullable=False)
    stage: Mapped[LeadStage] = mapped_column(enum_column(LeadStage), default=LeadStage.PROSPECCAO, nullable=False)
    value: Mapped[float] = mapped_column(Numeric(14, 2, asdecimal=False), default=0, nullable=False)
    responsible_id: Mapped[str | None] = mapped_column(ForeignKey("profiles.id", ondelete="SET NULL"))
    source: Mapped[str | None] = mapped_column(String(120))
    notes: Mapped[str | None] = mapped_column(Text)
    days_in_stage: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    stage_entered_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    responsible = relationship("Profile", lazy="joined")
    transitions = relationship(
        "StageTransition",
        back_populates="lead",
        cascade="all, delete-orphan",
        order_by="StageTransition.id",
    )

    @property
    def responsible_name(self) -> str | None:
        return self.responsible.full_name if self.responsible is not None else None
