"""SQLAlchemy model package for the SalesDesk schema."""

from salesdesk.models.activity import Activity, CalendarEvent
from salesdesk.models.base import Base
from salesdesk.models.deal import Deal
from salesdesk.models.financial_transaction import FinancialTransaction
from salesdesk.models.goal import Goal
from salesdesk.models.lead import Lead
from salesdesk.models.profile import Profile
from salesdesk.models.revoked_token import RevokedToken
from salesdesk.models.stage_transition import StageTransition

__all__ = [
    "Activity",
    "Base",
    "CalendarEvent",
    "Deal",
    "FinancialTransaction",
    "Goal",
    "Lead",
    "Profile",
    "RevokedToken",
    "StageTransition",
]
