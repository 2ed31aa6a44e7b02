"""Uploaded documents and the document chat history."""

from sqlalchemy import Column, Index, Integer, String, Text, DateTime, JSON
from ..database import Base
from ._common import utcnow


class Document(Base):
    """An uploaded PDF with its extracted text."""

    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_created_at", "created_at"),
    )

    id = Column(String(50), primary_key=True)  # doc-{hex}
    name = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)

    # Stored blob; both NULL when the upload was kept without object storage.
    file_url = Column(Text, nullable=True)
    file_id = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class DocMessage(Base):
    """One turn of the document chat. Append-only.

    document_id is NULL for general chat; referenced_docs snapshots the
    referenced document names at send time.
    """

    __tablename__ = "doc_messages"
    __table_args__ = (
        Index("ix_doc_messages_created_at", "created_at"),
        Index("ix_doc_messages_document_id", "document_id"),
    )

    # Insertion order; breaks created_at ties.
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(50), unique=True, nullable=False)  # msg-{hex}
    document_id = Column(String(50), nullable=True)
    role = Column(String(20), nullable=False)  # 'user' | 'assistant'
    content = Column(Text, nullable=False)
    referenced_docs = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
