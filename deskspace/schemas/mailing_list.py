"""Mailing list schemas."""

import re
from datetime import datetime
from typing import List

from pydantic import field_validator

from .base import ApiModel, strip_required

# Pragmatic address check: one "@", no whitespace, a dot in the domain.
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_emails(values: List[str]) -> List[str]:
    """Lower-case, strip and de-duplicate (keeping order); reject invalid entries."""
    seen: list[str] = []
    for raw in values:
        email = (raw or "").strip().lower()
        if not _EMAIL_RE.match(email):
            raise ValueError(f"Invalid email address: {raw!r}")
        if email not in seen:
            seen.append(email)
    if not seen:
        raise ValueError("A mailing list needs at least one email address")
    return seen


class MailingListCreate(ApiModel):
    name: str
    emails: List[str]

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return strip_required(v)

    @field_validator('emails')
    @classmethod
    def validate_emails(cls, v: List[str]) -> List[str]:
        return normalize_emails(v)


class MailingListUpdate(MailingListCreate):
    """PUT replaces both name and emails."""
    pass


class MailingListResponse(ApiModel):
    id: str
    name: str
    emails: List[str]
    created_at: datetime
