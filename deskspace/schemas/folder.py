"""Folder schemas."""

from pydantic import field_validator
from typing import Optional

from .base import ApiModel, strip_required


class FolderCreate(ApiModel):
    """Schema for creating a folder."""
    name: str
    x: int = 0
    y: int = 0

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return strip_required(v)


class FolderUpdate(ApiModel):
    """Partial update: rename and/or move on the desktop."""
    name: Optional[str] = None
    x: Optional[int] = None
    y: Optional[int] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return strip_required(v) if v is not None else v


class FolderResponse(ApiModel):
    id: str
    name: str
    x: int
    y: int
