from __future__ import annotations

from salesdesk.core.config import get_config
from salesdesk.main import app


def test_required_endpoint_paths_are_registered():
    prefix = get_config().API_PREFIX
    paths = app.openapi()["paths"]
    registered = {(method.upper(), path) for path, operations in paths.items() for method in operations}
    required = [
        ("GET", "/leads"),
        ("POST", "/leads"),
        ("GET", "/leads/board"),
        ("GET", "/leads/funnel"),
        ("POST", "/leads/aging/refresh"),
        ("PATCH", "/leads/{lead_id}"),
        ("DELETE", "/leads/{lead_id}"),
        ("POST", "/leads/{lead_id}/advance"),
        ("POST", "/leads/{lead_id}/move"),
        ("GET", "/leads/{lead_id}/history"),
        ("POST", "/auth/signup"),
        ("POST", "/auth/login"),
        ("POST", "/auth/logout"),
        ("GET", "/auth/session"),
        ("GET", "/financial/summary"),
        ("POST", "/goals/{goal_id}/progress"),
        ("POST", "/members/{profile_id}/promote"),
        ("POST", "/activities/{activity_id}/complete"),
        ("GET", "/calendar/events"),
        ("GET", "/analytics/team-performance"),
    ]
    for method, path in required:
        assert (method, f"{prefix}{path}") in registered
