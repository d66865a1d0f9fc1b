"""Dependency providers for API handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from salesdesk.auth.jwt import decode_jwt
from salesdesk.core.config import Config, get_config
from salesdesk.core.enums import UserRole
from salesdesk.core.exceptions import AuthenticationError
from salesdesk.database.db import get_db_session
from salesdesk.models import Profile
from salesdesk.services.auth_service import AuthService


@dataclass(frozen=True)
class CurrentUser:
    user_id: str
    role: str
    claims: dict[str, Any]


def get_current_user(token: str, settings: Config | None = None) -> CurrentUser:
    """Resolve the current user from an access token.

    Signed-out tokens are rejected. When the subject has a profile, its stored
    role and active flag win over the role claim, so promotions and
    deactivations apply to tokens that were issued earlier.
    """
    cfg = settings or get_config()
    claims = decode_jwt(token=token, secret=cfg.JWT_SECRET)
    if claims.get("token_use") != "access":
        raise AuthenticationError("Token is not an access token.")

    try:
        user_id = str(claims["sub"])
        role = str(claims["role"]).lower()
    except (KeyError, TypeError) as exc:
        raise AuthenticationError("Invalid auth claims.") from exc

    with get_db_session() as session:
        if AuthService(db=session, settings=cfg).is_revoked(claims.get("jti")):
            raise AuthenticationError("Session has been signed out.")
        profile = session.get(Profile, user_id)
        if profile is not None:
            if not profile.is_active:
                raise AuthenticationError("Account is no longer active.")
            role = UserRole(profile.role).value

    return CurrentUser(user_id=user_id, role=role, claims=claims)
