"""Vault CRUD. Each item stores only the fields of its own type."""

import logging
from typing import Any, Dict, List, Union

from sqlalchemy.orm import Session

from ..models import VaultItem
from ..models.vault_item import VAULT_COLUMNS
from ..repositories.vault_repository import VaultRepository
from ..schemas.vault import ApiKeyEntry, PasswordEntry, ValueEntry

VaultEntryModel = Union[PasswordEntry, ApiKeyEntry, ValueEntry]

ALL_VAULT_COLUMNS = tuple(col for cols in VAULT_COLUMNS.values() for col in cols)

logger = logging.getLogger(__name__)


def entry_columns(entry: VaultEntryModel) -> Dict[str, Any]:
    """Column values for *entry*; columns of other types are cleared."""
    columns: Dict[str, Any] = {col: None for col in ALL_VAULT_COLUMNS}
    for col in VAULT_COLUMNS[entry.type]:
        columns[col] = getattr(entry, col)
    columns["type"] = entry.type
    return columns


class VaultService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = VaultRepository(db)

    def list_items(self) -> List[VaultItem]:
        return self.repo.list_all()

    def get_item(self, item_id: str) -> VaultItem:
        return self.repo.get_by_id(item_id)

    def create_item(self, entry: VaultEntryModel) -> VaultItem:
        item = self.repo.create(entry.name, entry_columns(entry))
        self.db.commit()
        # Never log secret values.
        logger.info("Vault item created", extra={"vault_item_id": item.id, "item_type": item.type})
        return item

    def update_item(self, item_id: str, entry: VaultEntryModel) -> VaultItem:
        """Replace the item's name, type and payload."""
        item = self.repo.get_by_id(item_id)
        item.name = entry.name
        for column, value in entry_columns(entry).items():
            setattr(item, column, value)
        self.db.commit()
        return item

    def delete_item(self, item_id: str) -> None:
        """Idempotent delete."""
        item = self.repo.get_by_id_optional(item_id)
        if item is None:
            return
        self.repo.delete(item)
        self.db.commit()
