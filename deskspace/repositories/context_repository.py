"""Repository for the singleton context snapshot."""

from typing import Optional

from ..models import ContextSnapshot
from ..models._common import new_id, utcnow


class ContextRepository:
    """Reads and upserts the current context snapshot."""

    def __init__(self, db):
        self.db = db

    def get_current(self) -> Optional[ContextSnapshot]:
        return (
            self.db.query(ContextSnapshot)
            .order_by(ContextSnapshot.updated_at.desc())
            .first()
        )

    def upsert(self, context_data: str) -> ContextSnapshot:
        """Overwrite the current snapshot, or insert the first one."""
        current = self.get_current()
        if current is None:
            current = ContextSnapshot(id=new_id("ctx"), context_data=context_data)
            self.db.add(current)
        else:
            current.context_data = context_data
            current.updated_at = utcnow()
        self.db.flush()
        return current
