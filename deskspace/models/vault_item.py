"""Vault item model."""

from sqlalchemy import Column, String, Text, DateTime
from ..database import Base
from ._common import utcnow

# Columns written per vault item type.
VAULT_COLUMNS = {
    "password": ("username", "password"),
    "apikey": ("api_key",),
    "value": ("value",),
}


class VaultItem(Base):
    """A stored credential: a password, an API key or a plain value."""

    __tablename__ = "vault_items"

    id = Column(String(50), primary_key=True)  # vault-{hex}
    name = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)  # 'password' | 'apikey' | 'value'

    username = Column(Text, nullable=True)
    password = Column(Text, nullable=True)
    api_key = Column(Text, nullable=True)
    value = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
