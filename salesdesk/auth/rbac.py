"""Role-based authorization helpers."""

from __future__ import annotations

from salesdesk.core.enums import UserRole
from salesdesk.core.exceptions import AuthorizationError

READ_SCOPES = {
    "leads.read",
    "deals.read",
    "goals.read",
    "activities.read",
    "members.read",
    "analytics.read",
}

# Scope strings are kept explicit for endpoint-level declarations.
ROLE_SCOPES: dict[str, set[str]] = {
    UserRole.ADMIN.value: {
        "*",
    },
    UserRole.MANAGER.value: READ_SCOPES
    | {
        "leads.write",
        "leads.delete",
        "deals.write",
        "goals.write",
        "activities.write",
        "finance.read",
        "finance.write",
        "members.write",
        "pipeline.maintain",
    },
    UserRole.SALES.value: READ_SCOPES
    | {
        "leads.write",
        "deals.write",
        "activities.write",
        "finance.read",
    },
    UserRole.USER.value: set(READ_SCOPES),
}


def get_scopes_for_role(role: str) -> set[str]:
    """Return scopes granted to a role."""
    return ROLE_SCOPES.get(role.lower(), set())


def has_scopes(role: str, required_scopes: list[str] | set[str] | tuple[str, ...]) -> bool:
    """Check if role includes every required scope."""
    granted = get_scopes_for_role(role)
    if "*" in granted:
        return True
    return set(required_scopes).issubset(granted)


def require_scopes(role: str, required_scopes: list[str] | set[str] | tuple[str, ...]) -> None:
    """Raise when a role lacks required scopes."""
    if has_scopes(role=role, required_scopes=required_scopes):
        return
    missing = sorted(set(required_scopes) - get_scopes_for_role(role))
    raise AuthorizationError(f"Missing required scopes: {', '.join(missing)}")
