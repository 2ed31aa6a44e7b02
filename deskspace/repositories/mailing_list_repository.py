"""Repository for mailing lists."""

from typing import List, Optional

from ..exceptions import MailingListNotFoundError
from ..models import MailingList
from ..models._common import new_id
from .base import BaseRepository


class MailingListRepository(BaseRepository[MailingList]):
    model_class = MailingList
    not_found_error = MailingListNotFoundError
    default_order = ("name",)

    def get_by_name(self, name: str) -> Optional[MailingList]:
        return self.db.query(MailingList).filter(MailingList.name == name).first()

    def create(self, name: str, emails: List[str]) -> MailingList:
        return self.add(MailingList(id=new_id("list"), name=name, emails=list(emails)))
