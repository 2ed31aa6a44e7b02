"""Seed the default desktop folders on first startup.

Idempotent: skips if any folder already exists.
"""

import logging

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

DEFAULT_FOLDERS = (
    ("Projects", 20, 20),
    ("Documents", 20, 120),
    ("Photos", 20, 220),
)


def seed_default_folders(db: Session) -> int:
    """Create the default folders if the folder table is empty.

    Returns:
        Number of folders seeded (0 if skipped).
    """
    from ..repositories.folder_repository import FolderRepository

    repo = FolderRepository(db)
    existing = repo.count()
    if existing > 0:
        logger.debug("Database has %d folders, skipping seed", existing)
        return 0

    for name, x, y in DEFAULT_FOLDERS:
        repo.create(name, x, y)
    db.commit()
    return len(DEFAULT_FOLDERS)
