"""Uploaded PDF documents: upload with text extraction, rename, cascade delete."""

import logging
import os
import re
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..exceptions import DeskException, ValidationError
from ..models import Document
from ..repositories.document_repository import DocumentRepository, DocMessageRepository
from .object_storage import ObjectStorage
from .pdf_extraction import extract_text

DOCUMENT_STORAGE_FOLDER = "documents"
PDF_CONTENT_TYPES = frozenset({"application/pdf", "application/x-pdf"})

logger = logging.getLogger(__name__)


def display_name_for(filename: str) -> str:
    """Derive a readable document name from an upload file name.

    ``"q3_board-report.final.pdf"`` becomes ``"q3 board report.final"``.
    """
    stem, ext = os.path.splitext(os.path.basename(filename or ""))
    if ext.lower() != ".pdf":
        stem = os.path.basename(filename or "")
    name = re.sub(r"[_\-\s]+", " ", stem).strip()
    return name or "Untitled document"


def is_pdf_upload(filename: Optional[str], content_type: Optional[str]) -> bool:
    if content_type and content_type.split(";")[0].strip().lower() in PDF_CONTENT_TYPES:
        return True
    return bool(filename) and filename.lower().endswith(".pdf")


class DocumentService:
    """Document CRUD. Deleting a document also deletes its chat messages."""

    def __init__(self, db: Session, storage: Optional[ObjectStorage] = None):
        self.db = db
        self.storage = storage
        self.doc_repo = DocumentRepository(db)
        self.message_repo = DocMessageRepository(db)

    def list_documents(self) -> List[Document]:
        return self.doc_repo.list_all()

    def get_document(self, document_id: str) -> Document:
        return self.doc_repo.get_by_id(document_id)

    def upload_pdf(self, data: bytes, filename: str, content_type: Optional[str] = None) -> Document:
        """Extract text from a PDF upload and store it as a document.

        The blob goes to object storage when it is configured; without it
        the document is kept with its text only.
        """
        if not is_pdf_upload(filename, content_type):
            raise ValidationError("Only PDF files can be uploaded", field="file")
        if not data:
            raise ValidationError("File is empty", field="file")
        if len(data) > settings.max_upload_bytes:
            limit_mb = settings.max_upload_bytes // (1024 * 1024)
            raise ValidationError(f"File exceeds the {limit_mb}MB upload limit", field="file")

        text = extract_text(data)
        original_name = os.path.basename(filename or "") or "document.pdf"

        file_url = file_id = None
        if self.storage is not None and self.storage.is_configured():
            stored = self.storage.upload(data, original_name, DOCUMENT_STORAGE_FOLDER, content_type="application/pdf")
            file_url, file_id = stored.url, stored.id
        else:
            logger.info("Storage not configured, keeping document text only", extra={"original_name": original_name})

        try:
            document = self.doc_repo.create(
                name=display_name_for(original_name),
                original_name=original_name,
                content=text,
                file_url=file_url,
                file_id=file_id,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            self._discard_blob(file_id)
            raise

        logger.info(
            "Document uploaded",
            extra={"document_id": document.id, "chars": len(text), "stored": file_id is not None},
        )
        return document

    def rename_document(self, document_id: str, name: str) -> Document:
        document = self.doc_repo.get_by_id(document_id)
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name cannot be empty", field="name")
        document.name = name
        self.db.commit()
        return document

    def delete_document(self, document_id: str) -> None:
        """Delete the document, its chat messages and its blob. Idempotent."""
        document = self.doc_repo.get_by_id_optional(document_id)
        if document is None:
            logger.debug("Delete of unknown document ignored", extra={"document_id": document_id})
            return

        file_id = document.file_id
        removed = self.message_repo.delete_for_document(document.id)
        self.doc_repo.delete(document)
        self.db.commit()

        self._discard_blob(file_id)
        logger.info("Document deleted", extra={"document_id": document_id, "messages_deleted": removed})

    def _discard_blob(self, file_id: Optional[str]) -> None:
        if not file_id or self.storage is None or not self.storage.is_configured():
            return
        try:
            self.storage.delete(file_id)
        except DeskException as e:
            logger.warning("Blob deletion failed", extra={"file_id": file_id, "error": e.message})
