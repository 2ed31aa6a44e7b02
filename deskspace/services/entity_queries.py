"""Read-only query operations the assistant may run.

Each operation has a name the planner refers to, a description that goes into
the planning prompt, and a function returning JSON-serialisable data. Vault
items are never exposed here.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from ..repositories.document_repository import DocumentRepository, DocMessageRepository
from ..repositories.folder_repository import FolderRepository, FolderItemRepository
from ..repositories.mailing_list_repository import MailingListRepository


@dataclass(frozen=True)
class QueryOperation:
    name: str
    description: str
    run: Callable[[Session], Any]


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def folder_item_dict(item) -> Dict[str, Any]:
    data: Dict[str, Any] = {"id": item.id, "folderId": item.folder_id, "type": item.type, "name": item.name}
    if item.type == "file":
        data.update(originalName=item.original_name, mimeType=item.mime_type, fileSize=item.file_size)
    elif item.type == "bookmark":
        data["url"] = item.url
    elif item.type == "note":
        data["content"] = item.content
    return data


def get_folders(db: Session) -> List[Dict[str, Any]]:
    return [{"id": f.id, "name": f.name} for f in FolderRepository(db).list_all()]


def get_folder_items(db: Session) -> List[Dict[str, Any]]:
    folders = {f.id: f.name for f in FolderRepository(db).list_all()}
    items = []
    for item in FolderItemRepository(db).list_all():
        data = folder_item_dict(item)
        data["folderName"] = folders.get(item.folder_id)
        items.append(data)
    return items


def get_documents(db: Session) -> List[Dict[str, Any]]:
    return [
        {
            "id": d.id,
            "name": d.name,
            "originalName": d.original_name,
            "characters": len(d.content or ""),
            "createdAt": _iso(d.created_at),
        }
        for d in DocumentRepository(db).list_all()
    ]


def get_chat_messages(db: Session) -> List[Dict[str, Any]]:
    return [
        {
            "role": m.role,
            "content": m.content,
            "referencedDocs": m.referenced_docs or [],
            "createdAt": _iso(m.created_at),
        }
        for m in DocMessageRepository(db).list_all()
    ]


def get_mailing_lists(db: Session) -> List[Dict[str, Any]]:
    return [
        {"id": m.id, "name": m.name, "emails": list(m.emails or [])}
        for m in MailingListRepository(db).list_all()
    ]


QUERY_OPERATIONS: Dict[str, QueryOperation] = {
    op.name: op
    for op in (
        QueryOperation("getFolders", "All desktop folders (id, name).", get_folders),
        QueryOperation(
            "getFolderItems",
            "Every item in every folder: files (name, type, size), bookmarks (url) and notes (content), "
            "with the owning folder's name.",
            get_folder_items,
        ),
        QueryOperation(
            "getDocuments",
            "Uploaded PDF documents (name, original file name, text length, upload date).",
            get_documents,
        ),
        QueryOperation(
            "getChatMessages",
            "The full document chat history (role, content, referenced document names).",
            get_chat_messages,
        ),
        QueryOperation("getMailingLists", "Mailing lists with their email addresses.", get_mailing_lists),
    )
}


def describe_operations() -> str:
    """Bullet list of operations for the planning prompt."""
    return "\n".join(f"- {op.name}: {op.description}" for op in QUERY_OPERATIONS.values())
