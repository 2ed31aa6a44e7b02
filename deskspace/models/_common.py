"""Column helpers shared by the models."""

import uuid
from datetime import datetime, timezone


def new_id(prefix: str) -> str:
    """Opaque application-generated identifier, e.g. ``folder-3f9c0a1b2d4e``."""
    return f"{prefix}-{uuid.uuid4().hex[:16]}"


def utcnow() -> datetime:
    # Python-side default keeps microsecond resolution on SQLite.
    return datetime.now(timezone.utc)
