"""Shared authorization and error-mapping helpers for API v1 route modules."""

from __future__ import annotations

from fastapi import HTTPException, status

from salesdesk.auth.rbac import require_scopes
from salesdesk.core.config import get_config
from salesdesk.core.dependencies import CurrentUser, get_current_user
from salesdesk.core.exceptions import AuthenticationError, AuthorizationError
from salesdesk.services.base_service import (
    ERROR_BACKEND,
    ERROR_NOT_FOUND,
    ERROR_TRANSITION,
    ERROR_VALIDATION,
    ServiceResult,
)

RESULT_STATUS_CODES = {
    ERROR_VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ERROR_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ERROR_TRANSITION: status.HTTP_409_CONFLICT,
    ERROR_BACKEND: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _extract_bearer_token(authorization: str | None) -> str:
    if authorization is None or not authorization.strip():
        raise AuthenticationError("Authorization header is required.")
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError("Authorization header must use Bearer token.")
    return parts[1].strip()


def authorize(authorization: str | None, scopes: list[str]) -> CurrentUser:
    token = _extract_bearer_token(authorization)
    user = get_current_user(token=token, settings=get_config())
    require_scopes(user.role, scopes)
    return user


def map_auth_error(exc: Exception) -> tuple[int, str]:
    if isinstance(exc, AuthenticationError):
        return 401, str(exc)
    if isinstance(exc, AuthorizationError):
        return 403, str(exc)
    return 401, "Unauthorized."


def authorize_or_raise(authorization: str | None, scopes: list[str]) -> CurrentUser:
    try:
        return authorize(authorization=authorization, scopes=scopes)
    except (AuthenticationError, AuthorizationError) as exc:
        code, detail = map_auth_error(exc)
        raise HTTPException(status_code=code, detail=detail) from exc


def bearer_token(authorization: str | None) -> str:
    try:
        return _extract_bearer_token(authorization)
    except AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc


def raise_for_result(result: ServiceResult) -> None:
    """Translate a failed repository result into an HTTP error."""
    if result.success:
        return
    code = RESULT_STATUS_CODES.get(result.error_kind or "", status.HTTP_500_INTERNAL_SERVER_ERROR)
    detail = result.error if code != status.HTTP_500_INTERNAL_SERVER_ERROR else "Could not save changes. Please try again."
    raise HTTPException(status_code=code, detail=detail)


def not_found(entity: str, entity_id: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{entity} not found: {entity_id}")


def unprocessable(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
