"""Repository for vault items."""

from typing import Any, Dict

from ..exceptions import VaultItemNotFoundError
from ..models import VaultItem
from ..models._common import new_id
from .base import BaseRepository


class VaultRepository(BaseRepository[VaultItem]):
    model_class = VaultItem
    not_found_error = VaultItemNotFoundError
    default_order = ("name", "created_at")

    def create(self, name: str, columns: Dict[str, Any]) -> VaultItem:
        return self.add(VaultItem(id=new_id("vault"), name=name, **columns))
