"""Data access repositories."""

from .base import BaseRepository
from .folder_repository import FolderRepository, FolderItemRepository
from .document_repository import DocumentRepository, DocMessageRepository
from .mailing_list_repository import MailingListRepository
from .vault_repository import VaultRepository
from .context_repository import ContextRepository

__all__ = [
    "BaseRepository",
    "FolderRepository",
    "FolderItemRepository",
    "DocumentRepository",
    "DocMessageRepository",
    "MailingListRepository",
    "VaultRepository",
    "ContextRepository",
]
