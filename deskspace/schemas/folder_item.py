"""Folder item schemas.

A folder item's variant data is a tagged union keyed by ``type``: each payload
class carries only its own fields, so "exactly one variant populated" holds by
construction. ``payload_columns`` flattens a payload into the table's nullable
column groups.
"""

from datetime import datetime
from typing import Annotated, Any, Dict, Literal, Optional, Union
from urllib.parse import urlsplit

from pydantic import ConfigDict, Field, field_validator, model_validator

from ..models.folder import VARIANT_COLUMNS
from .base import ApiModel, strip_required

FAVICON_SERVICE = "https://www.google.com/s2/favicons?domain={domain}&sz=64"


def normalize_bookmark_url(value: str) -> str:
    """Return an absolute http(s) URL or raise ValueError.

    Bare hosts ("example.com/page") get an https scheme.
    """
    value = (value or "").strip()
    if not value:
        raise ValueError("URL is required for bookmarks")
    if "://" not in value:
        value = f"https://{value}"
    parts = urlsplit(value)
    if parts.scheme not in ("http", "https") or not parts.netloc or " " in parts.netloc:
        raise ValueError(f"Invalid bookmark URL: {value}")
    return value


def favicon_for(url: str) -> str:
    return FAVICON_SERVICE.format(domain=urlsplit(url).hostname or "")


# ---------------------------------------------------------------------------
# Variant payloads
# ---------------------------------------------------------------------------

class _Payload(ApiModel):
    model_config = ConfigDict(extra="forbid")


class FilePayload(_Payload):
    """Reference to a blob that was already uploaded to object storage."""
    type: Literal["file"] = "file"
    file_url: str = Field(min_length=1)
    file_id: str = Field(min_length=1)
    original_name: str = Field(min_length=1)
    mime_type: str = "application/octet-stream"
    file_size: int = Field(ge=0)


class BookmarkPayload(_Payload):
    type: Literal["bookmark"] = "bookmark"
    url: str
    favicon_url: Optional[str] = None

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        return normalize_bookmark_url(v)

    @model_validator(mode="after")
    def derive_favicon(self) -> "BookmarkPayload":
        if not self.favicon_url:
            self.favicon_url = favicon_for(self.url)
        return self


class NotePayload(_Payload):
    type: Literal["note"] = "note"
    content: str = ""

    @field_validator('content', mode="before")
    @classmethod
    def default_content(cls, v: Any) -> Any:
        return "" if v is None else v


ItemPayload = Annotated[
    Union[FilePayload, BookmarkPayload, NotePayload],
    Field(discriminator="type"),
]


def payload_columns(payload: Union[FilePayload, BookmarkPayload, NotePayload]) -> Dict[str, Any]:
    """Flatten a payload into column values; other variants' columns are None."""
    columns: Dict[str, Any] = {name: None for name in VARIANT_COLUMNS}
    columns.update(payload.model_dump(exclude={"type"}))
    columns["type"] = payload.type
    return columns


# ---------------------------------------------------------------------------
# Request / response schemas
# ---------------------------------------------------------------------------

class BookmarkCreate(ApiModel):
    name: str
    url: str
    x: int = 0
    y: int = 0

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return strip_required(v)

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        return normalize_bookmark_url(v)


class NoteCreate(ApiModel):
    name: str
    content: Optional[str] = ""
    x: int = 0
    y: int = 0

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return strip_required(v)


class FolderItemUpdate(ApiModel):
    """Partial update. ``type`` and ``folderId`` are not updatable."""
    name: Optional[str] = None
    x: Optional[int] = None
    y: Optional[int] = None
    content: Optional[str] = None  # notes only
    url: Optional[str] = None      # bookmarks only

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return strip_required(v) if v is not None else v


class FolderItemResponse(ApiModel):
    id: str
    folder_id: str
    type: str
    name: str
    x: int
    y: int

    file_url: Optional[str] = None
    file_id: Optional[str] = None
    original_name: Optional[str] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = None

    url: Optional[str] = None
    favicon_url: Optional[str] = None

    content: Optional[str] = None

    created_at: datetime
    updated_at: datetime
