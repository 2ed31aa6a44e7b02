"""Mailing list CRUD with unique names."""

import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..exceptions import DuplicateNameError
from ..models import MailingList
from ..repositories.mailing_list_repository import MailingListRepository
from ..schemas.mailing_list import MailingListCreate, MailingListUpdate

logger = logging.getLogger(__name__)


class MailingListService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = MailingListRepository(db)

    def list_mailing_lists(self) -> List[MailingList]:
        return self.repo.list_all()

    def get_mailing_list(self, list_id: str) -> MailingList:
        return self.repo.get_by_id(list_id)

    def create_mailing_list(self, data: MailingListCreate) -> MailingList:
        if self.repo.get_by_name(data.name):
            raise DuplicateNameError("mailing list", data.name)
        mailing_list = self.repo.create(data.name, data.emails)
        self._commit(data.name)
        logger.info("Mailing list created", extra={"mailing_list_id": mailing_list.id, "emails": len(data.emails)})
        return mailing_list

    def update_mailing_list(self, list_id: str, data: MailingListUpdate) -> MailingList:
        mailing_list = self.repo.get_by_id(list_id)
        other = self.repo.get_by_name(data.name)
        if other is not None and other.id != mailing_list.id:
            raise DuplicateNameError("mailing list", data.name)
        mailing_list.name = data.name
        mailing_list.emails = list(data.emails)
        self._commit(data.name)
        return mailing_list

    def delete_mailing_list(self, list_id: str) -> None:
        """Idempotent delete."""
        mailing_list = self.repo.get_by_id_optional(list_id)
        if mailing_list is None:
            return
        self.repo.delete(mailing_list)
        self.db.commit()

    def _commit(self, name: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateNameError("mailing list", name) from e
