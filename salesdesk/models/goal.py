"""Goal model module."""

from __future__ import annotations

from datetime import date

from sqlalchemy import Boolean, Date, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from salesdesk.core.enums import GoalPeriod, GoalStatus, GoalType
from salesdesk.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin, enum_column


class Goal(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "goals"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    type: Mapped[GoalType] = mapped_column(enum_column(GoalType), default=GoalType.REVENUE, nullable=False)
    target_value: Mapped[float] = mapped_column(Numeric(14, 2, asdecimal=False), nullable=False)
    current_value: Mapped[float] = mapped_column(Numeric(14, 2, asdecimal=False), default=0, nullable=False)
    period: Mapped[GoalPeriod] = mapped_column(enum_column(GoalPeriod), default=GoalPeriod.MONTHLY, nullable=False)
    assignee: Mapped[str | None] = mapped_column(String(255))
    target_date: Mapped[date | None] = mapped_column(Date)
    team_goal: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    status: Mapped[GoalStatus] = mapped_column(enum_column(GoalStatus), default=GoalStatus.ACTIVE, nullable=False)
    user_id: Mapped[str | None] = mapped_column(ForeignKey("profiles.id", ondelete="SET NULL"))
