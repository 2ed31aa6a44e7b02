"""API routers."""

from . import assistant, chat, documents, folders, mailing_lists, vault

ROUTERS = (
    folders.router,
    documents.router,
    chat.router,
    mailing_lists.router,
    vault.router,
    assistant.router,
)

__all__ = ["ROUTERS"]
