"""Folder and folder item models."""

from sqlalchemy import Column, Index, String, Text, Integer, BigInteger, DateTime, ForeignKey
from ..database import Base
from ._common import utcnow

# Column groups per item variant. Exactly one group is populated, selected by
# FolderItem.type; see schemas.folder_item for the payload types that write them.
FILE_COLUMNS = ("file_url", "file_id", "original_name", "mime_type", "file_size")
BOOKMARK_COLUMNS = ("url", "favicon_url")
NOTE_COLUMNS = ("content",)
VARIANT_COLUMNS = FILE_COLUMNS + BOOKMARK_COLUMNS + NOTE_COLUMNS


class Folder(Base):
    """A named container positioned on the desktop."""

    __tablename__ = "folders"

    id = Column(String(50), primary_key=True)  # folder-{hex}
    name = Column(String(255), nullable=False, unique=True)

    # Desktop grid position
    x = Column(Integer, default=0, nullable=False)
    y = Column(Integer, default=0, nullable=False)


class FolderItem(Base):
    """A file, bookmark or note owned by exactly one folder.

    No database-level cascade: FolderService deletes items (and their stored
    blobs) explicitly before removing the folder.
    """

    __tablename__ = "folder_items"
    __table_args__ = (
        Index("ix_folder_items_folder_id", "folder_id"),
    )

    id = Column(String(50), primary_key=True)  # item-{hex}
    folder_id = Column(String(50), ForeignKey("folders.id"), nullable=False)
    type = Column(String(20), nullable=False)  # 'file' | 'bookmark' | 'note'
    name = Column(String(255), nullable=False)
    x = Column(Integer, default=0, nullable=False)
    y = Column(Integer, default=0, nullable=False)

    # File fields (type='file')
    file_url = Column(Text, nullable=True)
    file_id = Column(String(255), nullable=True)
    original_name = Column(String(255), nullable=True)
    mime_type = Column(String(255), nullable=True)
    file_size = Column(BigInteger, nullable=True)

    # Bookmark fields (type='bookmark')
    url = Column(Text, nullable=True)
    favicon_url = Column(Text, nullable=True)

    # Note fields (type='note')
    content = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
