"""Shared service base with robust session lifecycle behavior."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy.orm import Session

import salesdesk.database.db as db_module

T = TypeVar("T")

ERROR_VALIDATION = "validation"
ERROR_NOT_FOUND = "not_found"
ERROR_TRANSITION = "transition"
ERROR_BACKEND = "backend"


@dataclass
class ServiceResult(Generic[T]):
    """Outcome of a repository operation; failures carry a kind and a message instead of raising."""

    success: bool
    data: T | None = None
    error: str | None = None
    error_kind: str | None = None
    changed: bool = False

    @classmethod
    def ok(cls, data: Any = None, changed: bool = True) -> "ServiceResult":
        return cls(success=True, data=data, changed=changed)

    @classmethod
    def fail(cls, error: str, kind: str, data: Any = None) -> "ServiceResult":
        return cls(success=False, data=data, error=error, error_kind=kind)


class BaseService:
    """Base class for services that operate on a SQLAlchemy session."""

    def __init__(self, db: Session | None = None) -> None:
        self.db = db or db_module.SessionLocal()

    def commit(self) -> None:
        """Commit current transaction and rollback on failure."""
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def rollback(self) -> None:
        self.db.rollback()

    def close(self) -> None:
        self.db.close()

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.rollback()
        self.close()
