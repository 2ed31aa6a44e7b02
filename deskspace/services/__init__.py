"""Service layer: business logic on top of the repositories."""

from .folder_service import FolderService
from .document_service import DocumentService
from .chat_service import ChatService
from .assistant_service import AssistantService
from .mailing_list_service import MailingListService
from .vault_service import VaultService
from .llm_client import CompletionClient
from .object_storage import ObjectStorage, StoredObject
from .blob_fetcher import BlobFetcher

__all__ = [
    "FolderService",
    "DocumentService",
    "ChatService",
    "AssistantService",
    "MailingListService",
    "VaultService",
    "CompletionClient",
    "ObjectStorage",
    "StoredObject",
    "BlobFetcher",
]
