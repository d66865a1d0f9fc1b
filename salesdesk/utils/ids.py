"""Identifier generation helpers."""

from __future__ import annotations

import uuid


def new_id() -> str:
    """Create an opaque UUID4-based entity identifier."""
    return str(uuid.uuid4())
