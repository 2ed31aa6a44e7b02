"""Pydantic schemas for API validation."""

from .folder import FolderCreate, FolderUpdate, FolderResponse
from .folder_item import (
    FilePayload,
    BookmarkPayload,
    NotePayload,
    ItemPayload,
    BookmarkCreate,
    NoteCreate,
    FolderItemUpdate,
    FolderItemResponse,
)
from .document import (
    DocumentResponse,
    DocumentListResponse,
    DocumentRename,
    DocMessageResponse,
    ChatSendRequest,
    ChatSendResponse,
)
from .mailing_list import MailingListCreate, MailingListUpdate, MailingListResponse
from .vault import PasswordEntry, ApiKeyEntry, ValueEntry, VaultEntry, VaultItemResponse
from .assistant import AskRequest, AskResponse, UpdateContextResponse, QueryPlan

__all__ = [
    "FolderCreate", "FolderUpdate", "FolderResponse",
    "FilePayload", "BookmarkPayload", "NotePayload", "ItemPayload",
    "BookmarkCreate", "NoteCreate", "FolderItemUpdate", "FolderItemResponse",
    "DocumentResponse", "DocumentListResponse", "DocumentRename",
    "DocMessageResponse", "ChatSendRequest", "ChatSendResponse",
    "MailingListCreate", "MailingListUpdate", "MailingListResponse",
    "PasswordEntry", "ApiKeyEntry", "ValueEntry", "VaultEntry", "VaultItemResponse",
    "AskRequest", "AskResponse", "UpdateContextResponse", "QueryPlan",
]
