"""Folder API: folder CRUD and the items each folder owns.

Delegates to FolderService. Deletes answer 204 whether or not the id existed.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile
from sqlalchemy.orm import Session

from ..core.config import settings
from ..database import get_db
from ..schemas.folder import FolderCreate, FolderResponse, FolderUpdate
from ..schemas.folder_item import (
    BookmarkCreate,
    BookmarkPayload,
    FolderItemResponse,
    FolderItemUpdate,
    NoteCreate,
    NotePayload,
)
from ..services.folder_service import FolderService
from ..services.object_storage import ObjectStorage
from .dependencies import get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/folders", tags=["folders"])


def get_folder_service(
    db: Session = Depends(get_db),
    storage: Optional[ObjectStorage] = Depends(get_storage),
) -> FolderService:
    return FolderService(db, storage)


# -- Folders ---------------------------------------------------------------

@router.get("", response_model=List[FolderResponse])
def list_folders(service: FolderService = Depends(get_folder_service)):
    return service.list_folders()


@router.get("/{folder_id}", response_model=FolderResponse)
def get_folder(folder_id: str, service: FolderService = Depends(get_folder_service)):
    return service.get_folder(folder_id)


@router.post("", response_model=FolderResponse, status_code=201)
def create_folder(data: FolderCreate, service: FolderService = Depends(get_folder_service)):
    return service.create_folder(data.name, data.x, data.y)


@router.put("/{folder_id}", response_model=FolderResponse)
def update_folder(
    folder_id: str,
    data: FolderUpdate,
    service: FolderService = Depends(get_folder_service),
):
    """Rename and/or move a folder."""
    return service.update_folder(folder_id, name=data.name, x=data.x, y=data.y)


@router.delete("/{folder_id}", status_code=204)
def delete_folder(folder_id: str, service: FolderService = Depends(get_folder_service)):
    """Delete a folder and all of its items."""
    service.delete_folder(folder_id)
    return Response(status_code=204)


# -- Items -----------------------------------------------------------------

@router.get("/{folder_id}/items", response_model=List[FolderItemResponse])
def list_items(folder_id: str, service: FolderService = Depends(get_folder_service)):
    return service.list_items(folder_id)


@router.post("/{folder_id}/items/file", response_model=FolderItemResponse, status_code=201)
def upload_file_item(
    folder_id: str,
    file: UploadFile = File(...),
    x: int = Form(0),
    y: int = Form(0),
    service: FolderService = Depends(get_folder_service),
):
    """Multipart upload (field ``file``). Larger than the upload cap answers 400."""
    # One byte past the cap is enough to reject without reading everything.
    data = file.file.read(settings.max_upload_bytes + 1)
    return service.upload_file_item(
        folder_id, data, file.filename or "", mime_type=file.content_type, x=x, y=y
    )


@router.post("/{folder_id}/items/bookmark", response_model=FolderItemResponse, status_code=201)
def create_bookmark(
    folder_id: str,
    data: BookmarkCreate,
    service: FolderService = Depends(get_folder_service),
):
    return service.create_item(folder_id, data.name, BookmarkPayload(url=data.url), x=data.x, y=data.y)


@router.post("/{folder_id}/items/note", response_model=FolderItemResponse, status_code=201)
def create_note(
    folder_id: str,
    data: NoteCreate,
    service: FolderService = Depends(get_folder_service),
):
    return service.create_item(folder_id, data.name, NotePayload(content=data.content), x=data.x, y=data.y)


@router.patch("/{folder_id}/items/{item_id}", response_model=FolderItemResponse)
def update_item(
    folder_id: str,
    item_id: str,
    data: FolderItemUpdate,
    service: FolderService = Depends(get_folder_service),
):
    return service.update_item(
        folder_id,
        item_id,
        name=data.name,
        x=data.x,
        y=data.y,
        content=data.content,
        url=data.url,
    )


@router.delete("/{folder_id}/items/{item_id}", status_code=204)
def delete_item(
    folder_id: str,
    item_id: str,
    service: FolderService = Depends(get_folder_service),
):
    service.delete_item(folder_id, item_id)
    return Response(status_code=204)
