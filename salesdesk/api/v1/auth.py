"""Auth endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Header, HTTPException, status

from salesdesk.api.v1._authz import bearer_token
from salesdesk.core.exceptions import AuthenticationError
from salesdesk.database.db import get_db_session
from salesdesk.schemas.auth import (
    LoginRequest,
    RefreshRequest,
    SessionResponse,
    SignOutRequest,
    SignUpRequest,
    TokenResponse,
)
from salesdesk.services.auth_service import AuthService, AuthSession

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(session: AuthSession) -> TokenResponse:
    return TokenResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_at=session.expires_at,
        user_id=session.user_id,
        email=session.email,
        full_name=session.full_name,
        role=session.role,
    )


def _unauthorized(exc: AuthenticationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def sign_up(payload: SignUpRequest) -> TokenResponse:
    with get_db_session() as db:
        try:
            session = AuthService(db=db).sign_up(
                email=payload.email,
                password=payload.password,
                full_name=payload.full_name,
            )
        except AuthenticationError as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _token_response(session)


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest) -> TokenResponse:
    with get_db_session() as db:
        try:
            session = AuthService(db=db).sign_in(email=payload.email, password=payload.password)
        except AuthenticationError as exc:
            raise _unauthorized(exc) from exc
    return _token_response(session)


@router.post("/refresh", response_model=TokenResponse)
def refresh(payload: RefreshRequest) -> TokenResponse:
    with get_db_session() as db:
        try:
            session = AuthService(db=db).refresh(payload.refresh_token)
        except AuthenticationError as exc:
            raise _unauthorized(exc) from exc
    return _token_response(session)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    payload: SignOutRequest | None = None,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> None:
    token = bearer_token(authorization)
    with get_db_session() as db:
        try:
            AuthService(db=db).sign_out(token, refresh_token=payload.refresh_token if payload else None)
        except AuthenticationError as exc:
            raise _unauthorized(exc) from exc


@router.get("/session", response_model=SessionResponse)
def current_session(authorization: str | None = Header(default=None, alias="Authorization")) -> SessionResponse:
    token = bearer_token(authorization)
    with get_db_session() as db:
        try:
            session = AuthService(db=db).get_session(token)
        except AuthenticationError as exc:
            raise _unauthorized(exc) from exc
    return SessionResponse(
        user_id=session.user_id,
        email=session.email,
        full_name=session.full_name,
        role=session.role,
        expires_at=session.expires_at,
    )
