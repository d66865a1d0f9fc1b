"""Free-text and categorical filtering of the lead table."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from salesdesk.core.enums import FILTER_ALL


def _normalize(value: Any) -> str:
    raw = getattr(value, "value", value)
    return str(raw or "").strip().lower()


def matches_search(lead: Any, search: str | None) -> bool:
    term = (search or "").strip().lower()
    if not term:
        return True
    haystacks = (lead.name, lead.company_name, lead.email)
    return any(term in (field or "").lower() for field in haystacks)


def matches_category(actual: Any, wanted: Any) -> bool:
    expected = _normalize(wanted)
    return expected in {"", FILTER_ALL} or _normalize(actual) == expected


def filter_leads(
    leads: Iterable[Any],
    search: str | None = "",
    status: Any = FILTER_ALL,
    stage: Any = FILTER_ALL,
) -> list[Any]:
    """Keep leads matching the search term AND the status AND the stage filters."""
    return [
        lead
        for lead in leads
        if matches_search(lead, search)
        and matches_category(lead.status, status)
        and matches_category(lead.stage, stage)
    ]
