"""Canonical enum values shared by models, services and API schemas."""

from __future__ import annotations

import enum


class LeadStatus(str, enum.Enum):
    """Coarse relationship state of a lead, independent of its stage."""

    NOVO = "novo"
    CONTATO = "contato"
    NEGOCIACAO = "negociacao"
    FECHADO = "fechado"
    PERDIDO = "perdido"


class LeadStage(str, enum.Enum):
    """Pipeline position of a lead. Ordering lives in `salesdesk.pipeline.stages`."""

    PROSPECCAO = "prospeccao"
    DIAGNOSTICO = "diagnostico"
    NEGOCIACAO = "negociacao"
    FECHAMENTO = "fechamento"
    C7 = "c7"


class StalenessLevel(str, enum.Enum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    SALES = "sales"
    USER = "user"


class DealStatus(str, enum.Enum):
    OPEN = "open"
    WON = "won"
    LOST = "lost"
    CANCELLED = "cancelled"


class TransactionType(str, enum.Enum):
    INCOME = "income"
    EXPENSE = "expense"


class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class GoalType(str, enum.Enum):
    REVENUE = "revenue"
    LEADS = "leads"
    CONVERSION = "conversion"
    CALLS = "calls"


class GoalPeriod(str, enum.Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


class GoalStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"


class ActivityType(str, enum.Enum):
    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"
    TASK = "task"
    NOTE = "note"


class AuthEvent(str, enum.Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


# Sentinel accepted by list filters meaning "do not filter on this field".
FILTER_ALL = "all"
