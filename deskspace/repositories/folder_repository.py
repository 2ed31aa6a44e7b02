"""Repositories for folders and folder items."""

from typing import Any, Dict, List, Optional

from ..exceptions import FolderNotFoundError, FolderItemNotFoundError
from ..models import Folder, FolderItem
from ..models._common import new_id
from .base import BaseRepository


class FolderRepository(BaseRepository[Folder]):
    """Data access layer for folders."""

    model_class = Folder
    not_found_error = FolderNotFoundError
    default_order = ("y", "x", "name")

    def get_by_name(self, name: str) -> Optional[Folder]:
        return self.db.query(Folder).filter(Folder.name == name).first()

    def create(self, name: str, x: int = 0, y: int = 0) -> Folder:
        return self.add(Folder(id=new_id("folder"), name=name, x=x, y=y))

    def count(self) -> int:
        return self.db.query(Folder).count()


class FolderItemRepository(BaseRepository[FolderItem]):
    """Data access layer for folder items. Always scoped by folder where it matters."""

    model_class = FolderItem
    not_found_error = FolderItemNotFoundError
    default_order = ("folder_id", "created_at")

    def list_by_folder(self, folder_id: str) -> List[FolderItem]:
        return (
            self.db.query(FolderItem)
            .filter(FolderItem.folder_id == folder_id)
            .order_by(FolderItem.created_at, FolderItem.name)
            .all()
        )

    def get_in_folder(self, folder_id: str, item_id: str) -> Optional[FolderItem]:
        return (
            self.db.query(FolderItem)
            .filter(FolderItem.folder_id == folder_id, FolderItem.id == item_id)
            .first()
        )

    def create(self, folder_id: str, name: str, x: int, y: int, columns: Dict[str, Any]) -> FolderItem:
        item = FolderItem(id=new_id("item"), folder_id=folder_id, name=name, x=x, y=y, **columns)
        return self.add(item)
