from __future__ import annotations

import pytest

from salesdesk.core.enums import UserRole
from salesdesk.core.exceptions import ValidationError
from salesdesk.services.profile_service import ProfileService


def test_create_normalizes_email_and_rejects_duplicates(db_session):
    service = ProfileService(db=db_session)
    profile = service.create_profile(full_name="Ana Lima", email=" Ana@Example.com ")

    assert profile.email == "ana@example.com"
    assert profile.role is UserRole.USER
    with pytest.raises(ValidationError):
        service.create_profile(full_name="Other", email="ANA@example.com")
    with pytest.raises(ValidationError):
        service.create_profile(full_name="No mail", email="not-an-email")


def test_promote_climbs_ladder_and_stops_at_admin(db_session):
    service = ProfileService(db=db_session)
    profile = service.create_profile(full_name="Bia", email="bia@example.com")

    roles = [service.promote(profile.id).role for _ in range(4)]

    assert roles == [UserRole.SALES, UserRole.MANAGER, UserRole.ADMIN, UserRole.ADMIN]
    assert service.promote("missing") is None


def test_update_rejects_taken_email_and_keeps_state(db_session):
    service = ProfileService(db=db_session)
    service.create_profile(full_name="Caio", email="caio@example.com")
    other = service.create_profile(full_name="Duda", email="duda@example.com")

    with pytest.raises(ValidationError):
        service.update_profile(other.id, {"full_name": "Renamed", "email": "caio@example.com"})
    assert service.get_profile(other.id).full_name == "Duda"


def test_team_stats(db_session):
    service = ProfileService(db=db_session)
    service.create_profile(full_name="A", email="a@example.com", role="sales")
    inactive = service.create_profile(full_name="B", email="b@example.com", role="sales")
    service.create_profile(full_name="C", email="c@example.com", role="admin")
    service.update_profile(inactive.id, {"is_active": False})

    stats = service.team_stats()

    assert stats["total"] == 3
    assert stats["active"] == 2
    assert stats["by_role"] == {"admin": 1, "manager": 0, "sales": 2, "user": 0}
