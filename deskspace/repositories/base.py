"""Base repository with shared get-by-ID patterns.

Subclasses specify model_class and not_found_error; the base provides
get_by_id / get_by_id_optional / list_all / delete.
"""

from typing import TypeVar, Generic, List, Optional, Type
from sqlalchemy.orm import Session, Query

from ..database import Base
from ..exceptions import NotFoundError

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Shared repository logic for SQLAlchemy models.

    Class variables to set in subclasses:
        model_class:     The SQLAlchemy model (e.g., Folder)
        not_found_error: Exception class to raise from get_by_id
        default_order:   Column names used by list_all
    """

    model_class: Type[ModelT]
    not_found_error: Type[NotFoundError]
    default_order: tuple = ("id",)

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self) -> Query:
        return self.db.query(self.model_class)

    def get_by_id(self, entity_id: str) -> ModelT:
        """Get entity by primary key. Raises not_found_error if missing."""
        entity = self.get_by_id_optional(entity_id)
        if entity is None:
            raise self.not_found_error(entity_id)
        return entity

    def get_by_id_optional(self, entity_id: str) -> Optional[ModelT]:
        """Get entity by primary key, or None if not found."""
        if not entity_id:
            return None
        return self._base_query().filter(self.model_class.id == entity_id).first()

    def list_all(self) -> List[ModelT]:
        order = [getattr(self.model_class, col) for col in self.default_order]
        return self._base_query().order_by(*order).all()

    def add(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        self.db.flush()
        return entity

    def delete(self, entity: ModelT) -> None:
        self.db.delete(entity)
        self.db.flush()
