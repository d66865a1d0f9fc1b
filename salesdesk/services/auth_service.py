"""Session-based authentication: sign up, sign in, sign out, current session."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from salesdesk.auth.jwt import TokenPair, create_token_pair, decode_jwt
from salesdesk.core.config import Config, get_config
from salesdesk.core.enums import AuthEvent, UserRole
from salesdesk.core.exceptions import AuthenticationError, ValidationError
from salesdesk.core.security import hash_password, verify_password
from salesdesk.models import Profile, RevokedToken
from salesdesk.services.base_service import BaseService
from salesdesk.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

AuthListener = Callable[[AuthEvent, "AuthSession | None"], None]

_listeners: list[AuthListener] = []

MIN_PASSWORD_LENGTH = 8


@dataclass(frozen=True)
class AuthSession:
    user_id: str
    email: str
    full_name: str
    role: str
    access_token: str
    refresh_token: str | None = None
    expires_at: int | None = None


def on_auth_state_change(listener: AuthListener) -> Callable[[], None]:
    """Subscribe to sign-in/sign-out events. Returns an unsubscribe callable."""
    _listeners.append(listener)

    def unsubscribe() -> None:
        if listener in _listeners:
            _listeners.remove(listener)

    return unsubscribe


def _emit(event: AuthEvent, session: AuthSession | None) -> None:
    for listener in list(_listeners):
        try:
            listener(event, session)
        except Exception:
            logger.exception("auth.listener_failed", extra={"event": "auth.listener_failed", "auth_event": event.value})


class AuthService(BaseService):
    """Authenticates profiles and issues bearer tokens."""

    def __init__(self, db: Session | None = None, settings: Config | None = None) -> None:
        super().__init__(db)
        self.settings = settings or get_config()
        self.profiles = ProfileService(db=self.db)

    def _issue(self, profile: Profile) -> AuthSession:
        role = UserRole(profile.role).value
        tokens: TokenPair = create_token_pair(
            user_id=profile.id,
            role=role,
            secret=self.settings.JWT_SECRET,
            access_ttl_minutes=self.settings.JWT_ACCESS_TTL_MINUTES,
            refresh_ttl_days=self.settings.JWT_REFRESH_TTL_DAYS,
        )
        claims = decode_jwt(tokens.access_token, secret=self.settings.JWT_SECRET)
        return AuthSession(
            user_id=profile.id,
            email=profile.email,
            full_name=profile.full_name,
            role=role,
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            expires_at=int(claims["exp"]),
        )

    def sign_up(self, email: str, password: str, full_name: str) -> AuthSession:
        """Self-service registration; new accounts always start with the `user` role."""
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise AuthenticationError(f"Password must have at least {MIN_PASSWORD_LENGTH} characters.")
        if self.profiles.get_by_email(email) is not None:
            raise AuthenticationError("Email already registered.")
        try:
            profile = self.profiles.create_profile(
                full_name=full_name,
                email=email,
                role=UserRole.USER.value,
                password_hash=hash_password(password, pepper=self.settings.PASSWORD_PEPPER),
            )
        except ValidationError as exc:
            raise AuthenticationError(str(exc)) from exc

        session = self._issue(profile)
        logger.info("auth.signed_up", extra={"event": "auth.signed_up", "user_id": profile.id})
        _emit(AuthEvent.SIGNED_IN, session)
        return session

    def sign_in(self, email: str, password: str) -> AuthSession:
        profile = self.profiles.get_by_email(email)
        if profile is None or not profile.is_active:
            raise AuthenticationError("Invalid credentials.")
        if not verify_password(password, profile.password_hash, pepper=self.settings.PASSWORD_PEPPER):
            raise AuthenticationError("Invalid credentials.")

        session = self._issue(profile)
        logger.info("auth.signed_in", extra={"event": "auth.signed_in", "user_id": profile.id})
        _emit(AuthEvent.SIGNED_IN, session)
        return session

    def refresh(self, refresh_token: str) -> AuthSession:
        claims = self._decode_active(refresh_token)
        if claims.get("token_use") != "refresh":
            raise AuthenticationError("Token is not a refresh token.")
        profile = self.profiles.get_profile(str(claims["sub"]))
        if profile is None or not profile.is_active:
            raise AuthenticationError("Account is no longer active.")
        self._revoke(claims)
        self.commit()
        return self._issue(profile)

    def sign_out(self, access_token: str, refresh_token: str | None = None) -> None:
        claims = self._decode_active(access_token)
        self._revoke(claims)
        if refresh_token:
            try:
                self._revoke(decode_jwt(refresh_token, secret=self.settings.JWT_SECRET))
            except AuthenticationError:
                logger.warning("auth.sign_out.refresh_ignored", extra={"event": "auth.sign_out.refresh_ignored"})
        self.commit()
        logger.info("auth.signed_out", extra={"event": "auth.signed_out", "user_id": claims.get("sub")})
        _emit(AuthEvent.SIGNED_OUT, None)

    def get_session(self, access_token: str) -> AuthSession:
        """Resolve the current session from an access token."""
        claims = self._decode_active(access_token)
        if claims.get("token_use") != "access":
            raise AuthenticationError("Token is not an access token.")
        profile = self.profiles.get_profile(str(claims.get("sub")))
        if profile is None or not profile.is_active:
            raise AuthenticationError("Account is no longer active.")
        return AuthSession(
            user_id=profile.id,
            email=profile.email,
            full_name=profile.full_name,
            role=UserRole(profile.role).value,
            access_token=access_token,
            expires_at=int(claims["exp"]),
        )

    def is_revoked(self, jti: str | None) -> bool:
        return bool(jti) and self.db.get(RevokedToken, jti) is not None

    def _decode_active(self, token: str) -> dict[str, Any]:
        claims = decode_jwt(token, secret=self.settings.JWT_SECRET)
        if self.is_revoked(claims.get("jti")):
            raise AuthenticationError("Session has been signed out.")
        return claims

    def _revoke(self, claims: dict[str, Any]) -> None:
        jti = claims.get("jti")
        if not jti or self.is_revoked(jti):
            return
        exp = claims.get("exp")
        expires_at = datetime.fromtimestamp(int(exp), tz=timezone.utc) if exp is not None else None
        self.db.add(RevokedToken(jti=jti, expires_at=expires_at))
