"""Deterministic validators and sanitizers for form input."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def sanitize_text(value: Any, max_len: int = 20000) -> str:
    """Sanitize free-form content before persistence/display."""
    if value is None:
        return ""
    cleaned = str(value).replace("\x00", "").strip()
    cleaned = cleaned[:max_len]
    return cleaned


def missing_fields(data: Mapping[str, Any], required: Iterable[str]) -> list[str]:
    """Return required keys whose value is absent or blank."""
    return [name for name in required if not sanitize_text(data.get(name))]


def parse_money(value: Any) -> float:
    """Parse a monetary estimate; anything unparsable counts as zero.

    Commas are accepted as decimal separators ("1500,50"). Negative amounts
    are returned as-is so callers can reject them explicitly.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = sanitize_text(value).replace(" ", "")
        if "," in text and "." not in text:
            text = text.replace(",", ".")
        try:
            number = float(text)
        except ValueError:
            return 0.0
    if number != number or number in (float("inf"), float("-inf")):
        return 0.0
    return round(number, 2)


def looks_like_email(value: str | None) -> bool:
    return bool(value) and EMAIL_PATTERN.match(value.strip()) is not None
