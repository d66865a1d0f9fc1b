"""Audit trail of lead stage changes."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salesdesk.core.enums import LeadStage
from salesdesk.models.base import Base, enum_column, utcnow


class StageTransition(Base):
    __tablename__ = "stage_transitions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lead_id: Mapped[str] = mapped_column(ForeignKey("leads.id", ondelete="CASCADE"), nullable=False, index=True)
    from_stage: Mapped[LeadStage] = mapped_column(enum_column(LeadStage), nullable=False)
    to_stage: Mapped[LeadStage] = mapped_column(enum_column(LeadStage), nullable=False)
    actor: Mapped[str | None] = mapped_column(String(120))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    lead = relationship("Lead", back_populates="transitions")
