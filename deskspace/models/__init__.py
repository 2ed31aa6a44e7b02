"""Database models."""

from .folder import Folder, FolderItem
from .document import Document, DocMessage
from .mailing_list import MailingList
from .vault_item import VaultItem
from .context import ContextSnapshot

__all__ = [
    "Folder", "FolderItem",
    "Document", "DocMessage",
    "MailingList",
    "VaultItem",
    "ContextSnapshot",
]
