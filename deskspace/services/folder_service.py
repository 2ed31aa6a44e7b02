"""Deep module for folders and the items they own.

Cascades are explicit: deleting a folder fetches its items and removes each
one through the same path as a single item delete, so stored blobs are
cleaned up too. There are no implicit ORM or database cascades.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..exceptions import (
    DeskException,
    DuplicateNameError,
    ExternalServiceError,
    FolderItemNotFoundError,
    ServiceFailure,
    ValidationError,
)
from ..models import Folder, FolderItem
from ..repositories.folder_repository import FolderRepository, FolderItemRepository
from ..schemas.folder_item import (
    FilePayload,
    ItemPayload,
    favicon_for,
    normalize_bookmark_url,
    payload_columns,
)
from .object_storage import ObjectStorage

FILE_ITEM_STORAGE_FOLDER = "folder-items"

logger = logging.getLogger(__name__)


class FolderService:
    """All folder and folder item operations behind a simple interface.

    Public methods:
        list_folders / get_folder
        create_folder    -- unique name
        update_folder    -- rename and/or move; 404 on unknown id
        delete_folder    -- cascades to items; unknown id is a no-op
        list_items       -- 404 on unknown folder
        create_item      -- typed payload (file, bookmark or note)
        upload_file_item -- size cap, object storage upload, then create_item
        update_item      -- partial, scoped to the folder
        delete_item      -- scoped; unknown item is a no-op
    """

    def __init__(self, db: Session, storage: Optional[ObjectStorage] = None):
        self.db = db
        self.storage = storage
        self.folder_repo = FolderRepository(db)
        self.item_repo = FolderItemRepository(db)

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    def list_folders(self) -> List[Folder]:
        return self.folder_repo.list_all()

    def get_folder(self, folder_id: str) -> Folder:
        return self.folder_repo.get_by_id(folder_id)

    def create_folder(self, name: str, x: int = 0, y: int = 0) -> Folder:
        if self.folder_repo.get_by_name(name):
            raise DuplicateNameError("folder", name)
        folder = self.folder_repo.create(name, x, y)
        self._commit_unique("folder", name)
        logger.info("Folder created", extra={"folder_id": folder.id})
        return folder

    def update_folder(
        self,
        folder_id: str,
        name: Optional[str] = None,
        x: Optional[int] = None,
        y: Optional[int] = None,
    ) -> Folder:
        folder = self.folder_repo.get_by_id(folder_id)

        if name is not None and name != folder.name:
            other = self.folder_repo.get_by_name(name)
            if other is not None and other.id != folder.id:
                raise DuplicateNameError("folder", name)
            folder.name = name
        if x is not None:
            folder.x = x
        if y is not None:
            folder.y = y

        self._commit_unique("folder", folder.name)
        return folder

    def rename_folder(self, folder_id: str, name: str) -> Folder:
        return self.update_folder(folder_id, name=name)

    def delete_folder(self, folder_id: str) -> None:
        """Delete a folder and every item it owns. Idempotent."""
        folder = self.folder_repo.get_by_id_optional(folder_id)
        if folder is None:
            logger.debug("Delete of unknown folder ignored", extra={"folder_id": folder_id})
            return

        items = self.item_repo.list_by_folder(folder.id)
        blob_ids = [self._remove_item(item) for item in items]
        self.folder_repo.delete(folder)
        self.db.commit()

        self._discard_blobs(blob_ids)
        logger.info("Folder deleted", extra={"folder_id": folder_id, "items_deleted": len(items)})

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def list_items(self, folder_id: str) -> List[FolderItem]:
        self.folder_repo.get_by_id(folder_id)
        return self.item_repo.list_by_folder(folder_id)

    def create_item(
        self,
        folder_id: str,
        name: str,
        payload: ItemPayload,
        x: int = 0,
        y: int = 0,
    ) -> FolderItem:
        """Create an item whose variant columns come from *payload* alone."""
        self.folder_repo.get_by_id(folder_id)
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name cannot be empty", field="name")

        item = self.item_repo.create(folder_id, name, x, y, payload_columns(payload))
        self.db.commit()
        logger.info(
            "Folder item created",
            extra={"folder_id": folder_id, "item_id": item.id, "item_type": item.type},
        )
        return item

    def upload_file_item(
        self,
        folder_id: str,
        data: bytes,
        filename: str,
        mime_type: Optional[str] = None,
        x: int = 0,
        y: int = 0,
    ) -> FolderItem:
        """Upload *data* to object storage and create a ``file`` item for it."""
        self.folder_repo.get_by_id(folder_id)

        filename = (filename or "").strip() or "untitled"
        if not data:
            raise ValidationError("File is empty", field="file")
        if len(data) > settings.max_upload_bytes:
            limit_mb = settings.max_upload_bytes // (1024 * 1024)
            raise ValidationError(f"File exceeds the {limit_mb}MB upload limit", field="file")

        storage = self._require_storage()
        stored = storage.upload(data, filename, FILE_ITEM_STORAGE_FOLDER, content_type=mime_type)

        payload = FilePayload(
            file_url=stored.url,
            file_id=stored.id,
            original_name=filename,
            mime_type=mime_type or "application/octet-stream",
            file_size=len(data),
        )
        try:
            return self.create_item(folder_id, filename, payload, x=x, y=y)
        except Exception:
            self.db.rollback()
            self._discard_blobs([stored.id])
            raise

    def update_item(
        self,
        folder_id: str,
        item_id: str,
        name: Optional[str] = None,
        x: Optional[int] = None,
        y: Optional[int] = None,
        content: Optional[str] = None,
        url: Optional[str] = None,
    ) -> FolderItem:
        """Partial update. Never changes ``type`` or ``folder_id``."""
        item = self.item_repo.get_in_folder(folder_id, item_id)
        if item is None:
            raise FolderItemNotFoundError(item_id)

        if content is not None:
            if item.type != "note":
                raise ValidationError("Only notes have content", field="content")
            item.content = content
        if url is not None:
            if item.type != "bookmark":
                raise ValidationError("Only bookmarks have a URL", field="url")
            try:
                item.url = normalize_bookmark_url(url)
            except ValueError as e:
                raise ValidationError(str(e), field="url") from e
            item.favicon_url = favicon_for(item.url)
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Name cannot be empty", field="name")
            item.name = name
        if x is not None:
            item.x = x
        if y is not None:
            item.y = y

        self.db.commit()
        return item

    def delete_item(self, folder_id: str, item_id: str) -> None:
        """Delete an item of this folder. Items of other folders are left alone."""
        item = self.item_repo.get_in_folder(folder_id, item_id)
        if item is None:
            logger.debug(
                "Delete of unknown folder item ignored",
                extra={"folder_id": folder_id, "item_id": item_id},
            )
            return

        blob_id = self._remove_item(item)
        self.db.commit()
        self._discard_blobs([blob_id])

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _remove_item(self, item: FolderItem) -> Optional[str]:
        """Delete the row; return the blob id to clean up after commit."""
        blob_id = item.file_id if item.type == "file" else None
        self.item_repo.delete(item)
        return blob_id

    def _discard_blobs(self, blob_ids: Sequence[Optional[str]]) -> None:
        """Best-effort blob removal. Failures are logged, never raised."""
        for blob_id in blob_ids:
            if not blob_id:
                continue
            if self.storage is None or not self.storage.is_configured():
                logger.warning("Cannot delete blob, storage not configured", extra={"file_id": blob_id})
                continue
            try:
                self.storage.delete(blob_id)
            except DeskException as e:
                logger.warning("Blob deletion failed", extra={"file_id": blob_id, "error": e.message})

    def _require_storage(self) -> ObjectStorage:
        if self.storage is None or not self.storage.is_configured():
            raise ExternalServiceError(
                "storage",
                "File uploads need object storage, which is not configured.",
                category=ServiceFailure.NOT_CONFIGURED,
            )
        return self.storage

    def _commit_unique(self, entity: str, name: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateNameError(entity, name) from e
