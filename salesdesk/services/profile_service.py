"""Team member (profile) management."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any

from sqlalchemy import func, select

from salesdesk.core.enums import UserRole
from salesdesk.core.exceptions import ValidationError
from salesdesk.models import Profile
from salesdesk.services.base_service import BaseService
from salesdesk.utils.validators import looks_like_email, sanitize_text

logger = logging.getLogger(__name__)

PROMOTION_LADDER: dict[UserRole, UserRole] = {
    UserRole.USER: UserRole.SALES,
    UserRole.SALES: UserRole.MANAGER,
    UserRole.MANAGER: UserRole.ADMIN,
    UserRole.ADMIN: UserRole.ADMIN,
}

UPDATABLE_FIELDS = ("full_name", "email", "role", "department", "phone", "avatar_url", "is_active")


def normalize_email(email: str) -> str:
    return sanitize_text(email, max_len=320).lower()


class ProfileService(BaseService):
    """Service for team member CRUD and role promotion."""

    def list_profiles(self, role: str | None = None, active: bool | None = None) -> list[Profile]:
        query = select(Profile).order_by(Profile.full_name)
        if role:
            query = query.where(Profile.role == UserRole(role))
        if active is not None:
            query = query.where(Profile.is_active.is_(active))
        return list(self.db.scalars(query))

    def get_profile(self, profile_id: str) -> Profile | None:
        return self.db.get(Profile, profile_id)

    def get_by_email(self, email: str) -> Profile | None:
        return self.db.scalars(select(Profile).where(func.lower(Profile.email) == normalize_email(email))).first()

    def create_profile(
        self,
        full_name: str,
        email: str,
        role: str = UserRole.USER.value,
        department: str | None = None,
        phone: str | None = None,
        password_hash: str | None = None,
    ) -> Profile:
        name = sanitize_text(full_name, max_len=255)
        address = normalize_email(email)
        if not name:
            raise ValidationError("full_name is required.")
        if not looks_like_email(address):
            raise ValidationError("A valid email is required.")
        if self.get_by_email(address) is not None:
            raise ValidationError(f"Email already registered: {address}")

        profile = Profile(
            full_name=name,
            email=address,
            role=UserRole(role),
            department=department,
            phone=phone,
            password_hash=password_hash,
        )
        self.db.add(profile)
        self.commit()
        self.db.refresh(profile)
        logger.info("profile.created", extra={"event": "profile.created", "profile_id": profile.id})
        return profile

    def update_profile(self, profile_id: str, changes: dict[str, Any]) -> Profile | None:
        profile = self.get_profile(profile_id)
        if profile is None:
            return None

        try:
            for name in UPDATABLE_FIELDS:
                if name not in changes or changes[name] is None:
                    continue
                value = changes[name]
                if name == "email":
                    value = normalize_email(value)
                    other = self.get_by_email(value)
                    if other is not None and other.id != profile.id:
                        raise ValidationError(f"Email already registered: {value}")
                elif name == "role":
                    value = UserRole(value)
                setattr(profile, name, value)
        except ValueError as exc:
            self.rollback()
            raise ValidationError(str(exc)) from exc
        except ValidationError:
            self.rollback()
            raise

        self.commit()
        self.db.refresh(profile)
        return profile

    def promote(self, profile_id: str) -> Profile | None:
        """Move one step up the role ladder; admins stay admins."""
        profile = self.get_profile(profile_id)
        if profile is None:
            return None
        previous = profile.role
        profile.role = PROMOTION_LADDER[UserRole(profile.role)]
        self.commit()
        self.db.refresh(profile)
        logger.info(
            "profile.promoted",
            extra={"event": "profile.promoted", "profile_id": profile.id, "from_role": previous.value, "to_role": profile.role.value},
        )
        return profile

    def delete_profile(self, profile_id: str) -> bool:
        profile = self.get_profile(profile_id)
        if profile is None:
            return False
        self.db.delete(profile)
        self.commit()
        logger.info("profile.deleted", extra={"event": "profile.deleted", "profile_id": profile_id})
        return True

    def team_stats(self) -> dict[str, Any]:
        profiles = self.list_profiles()
        by_role = Counter(UserRole(profile.role).value for profile in profiles)
        return {
            "total": len(profiles),
            "active": sum(1 for profile in profiles if profile.is_active),
            "by_role": {role.value: by_role.get(role.value, 0) for role in UserRole},
        }
