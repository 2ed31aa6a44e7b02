"""Cached assistant context snapshot."""

from sqlalchemy import Column, String, Text, DateTime
from ..database import Base
from ._common import utcnow


class ContextSnapshot(Base):
    """LLM-written summary of the whole store. One logical row, upserted."""

    __tablename__ = "contexts"

    id = Column(String(50), primary_key=True)  # ctx-{hex}
    context_data = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
