"""Document API: PDF upload, list, rename, delete."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Response, UploadFile
from sqlalchemy.orm import Session

from ..core.config import settings
from ..database import get_db
from ..schemas.document import DocumentListResponse, DocumentRename, DocumentResponse
from ..services.document_service import DocumentService
from ..services.object_storage import ObjectStorage
from .dependencies import get_storage

router = APIRouter(prefix="/api/documents", tags=["documents"])


def get_document_service(
    db: Session = Depends(get_db),
    storage: Optional[ObjectStorage] = Depends(get_storage),
) -> DocumentService:
    return DocumentService(db, storage)


@router.get("", response_model=List[DocumentListResponse])
def list_documents(service: DocumentService = Depends(get_document_service)):
    """All documents, newest first, without their extracted text."""
    return service.list_documents()


@router.post("/upload", response_model=DocumentResponse, status_code=201)
def upload_document(
    file: UploadFile = File(...),
    service: DocumentService = Depends(get_document_service),
):
    data = file.file.read(settings.max_upload_bytes + 1)
    return service.upload_pdf(data, file.filename or "", file.content_type)


@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(document_id: str, service: DocumentService = Depends(get_document_service)):
    return service.get_document(document_id)


@router.patch("/{document_id}/rename", response_model=DocumentResponse)
def rename_document(
    document_id: str,
    data: DocumentRename,
    service: DocumentService = Depends(get_document_service),
):
    return service.rename_document(document_id, data.name)


@router.delete("/{document_id}", status_code=204)
def delete_document(document_id: str, service: DocumentService = Depends(get_document_service)):
    """Delete a document and its chat messages."""
    service.delete_document(document_id)
    return Response(status_code=204)
