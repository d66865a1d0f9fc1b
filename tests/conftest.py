from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import salesdesk.database.db as db_module
import salesdesk.services.auth_service as auth_module
from salesdesk.auth.jwt import create_token_pair
from salesdesk.core.config import get_config
from salesdesk.models import Base


@pytest.fixture
def session_factory(monkeypatch):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_module, "SessionLocal", TestingSessionLocal)
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def reset_auth_listeners(monkeypatch):
    monkeypatch.setattr(auth_module, "_listeners", [])


@pytest.fixture
def auth_header():
    def _build(role: str = "admin", user_id: str = "user-1") -> dict[str, str]:
        cfg = get_config()
        token = create_token_pair(user_id=user_id, role=role, secret=cfg.JWT_SECRET).access_token
        return {"Authorization": f"Bearer {token}"}

    return _build
