"""Mailing list model."""

from sqlalchemy import Column, String, DateTime, JSON
from ..database import Base
from ._common import utcnow


class MailingList(Base):
    """A named list of email addresses."""

    __tablename__ = "mailing_lists"

    id = Column(String(50), primary_key=True)  # list-{hex}
    name = Column(String(255), nullable=False, unique=True)
    emails = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
