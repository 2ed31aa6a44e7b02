"""Document and document chat schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from .base import ApiModel, strip_required


class DocumentResponse(ApiModel):
    id: str
    name: str
    original_name: str
    content: str
    file_url: Optional[str] = None
    file_id: Optional[str] = None
    created_at: datetime


class DocumentListResponse(ApiModel):
    """Document without its full extracted text."""
    id: str
    name: str
    original_name: str
    file_url: Optional[str] = None
    created_at: datetime


class DocumentRename(ApiModel):
    name: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return strip_required(v)


class DocMessageResponse(ApiModel):
    id: str
    document_id: Optional[str] = None
    role: str
    content: str
    referenced_docs: Optional[List[str]] = None
    created_at: datetime


class ChatSendRequest(ApiModel):
    content: str
    referenced_doc_ids: List[str] = Field(default_factory=list)

    @field_validator('content')
    @classmethod
    def validate_content(cls, v: str) -> str:
        return strip_required(v, label="Message")

    @field_validator('referenced_doc_ids', mode="before")
    @classmethod
    def default_ids(cls, v):
        return [] if v is None else v


class ChatSendResponse(ApiModel):
    user_message: DocMessageResponse
    ai_message: DocMessageResponse
