"""Repositories for documents and document chat messages."""

from typing import Iterable, List, Optional

from ..exceptions import DocumentNotFoundError
from ..models import Document, DocMessage
from ..models._common import new_id
from .base import BaseRepository


class DocumentRepository(BaseRepository[Document]):
    """Document CRUD. Cascades to messages are orchestrated by DocumentService."""

    model_class = Document
    not_found_error = DocumentNotFoundError

    def list_all(self) -> List[Document]:
        return self.db.query(Document).order_by(Document.created_at.desc()).all()

    def get_many(self, ids: Iterable[str]) -> List[Document]:
        """Resolve ids in the order given; unknown ids are dropped."""
        wanted = [i for i in dict.fromkeys(ids) if i]
        if not wanted:
            return []
        found = {d.id: d for d in self.db.query(Document).filter(Document.id.in_(wanted)).all()}
        return [found[i] for i in wanted if i in found]

    def create(
        self,
        name: str,
        original_name: str,
        content: str,
        file_url: Optional[str] = None,
        file_id: Optional[str] = None,
    ) -> Document:
        return self.add(Document(
            id=new_id("doc"),
            name=name,
            original_name=original_name,
            content=content,
            file_url=file_url,
            file_id=file_id,
        ))


class DocMessageRepository:
    """Append-only chat history."""

    def __init__(self, db):
        self.db = db

    def list_all(self) -> List[DocMessage]:
        return self.db.query(DocMessage).order_by(DocMessage.created_at, DocMessage.seq).all()

    def recent(self, limit: int, exclude_id: Optional[str] = None) -> List[DocMessage]:
        """The *limit* most recent messages, returned oldest-first."""
        if limit <= 0:
            return []
        query = self.db.query(DocMessage)
        if exclude_id:
            query = query.filter(DocMessage.id != exclude_id)
        newest_first = query.order_by(DocMessage.created_at.desc(), DocMessage.seq.desc()).limit(limit).all()
        return list(reversed(newest_first))

    def create(
        self,
        role: str,
        content: str,
        document_id: Optional[str] = None,
        referenced_docs: Optional[List[str]] = None,
    ) -> DocMessage:
        message = DocMessage(
            id=new_id("msg"),
            document_id=document_id,
            role=role,
            content=content,
            referenced_docs=referenced_docs,
        )
        self.db.add(message)
        self.db.flush()
        return message

    def delete_for_document(self, document_id: str) -> int:
        return (
            self.db.query(DocMessage)
            .filter(DocMessage.document_id == document_id)
            .delete(synchronize_session=False)
        )
