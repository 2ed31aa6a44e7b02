"""Database handle and session management.

A ``Database`` owns the engine (and therefore the connection pool) and the
session factory. The application factory creates one and stores it on
``app.state``; request handlers receive sessions through ``get_db``.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

# Create base class for models
Base = declarative_base()


def _build_engine(url: str, pool_size: int, max_overflow: int, pool_timeout: int, pool_recycle: int) -> Engine:
    if url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False})

        # SQLite defaults foreign_keys to OFF.
        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_timeout=pool_timeout,
        pool_recycle=pool_recycle,
        # Detects stale connections before use.
        pool_pre_ping=True,
    )


class Database:
    """Lifecycle-managed connection pool plus session factory."""

    def __init__(
        self,
        url: str,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        pool_recycle: int = 1800,
    ):
        self.url = url
        self.engine = _build_engine(url, pool_size, max_overflow, pool_timeout, pool_recycle)
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @classmethod
    def from_settings(cls, settings) -> "Database":
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
        )

    @property
    def dialect(self) -> str:
        return "PostgreSQL" if self.url.startswith("postgresql") else "SQLite"

    def create_all(self) -> None:
        # Import models so every table is registered on Base.metadata.
        from . import models  # noqa: F401
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Session scope that rolls back on error and always closes."""
        db = self.session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()


def get_database(request: Request) -> Database:
    """Dependency returning the application's database handle."""
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Application has no database configured")
    return database


def get_db(request: Request) -> Iterator[Session]:
    """Dependency for FastAPI routes to get a database session.

    Rolls back the transaction on unhandled exceptions so that the
    connection is returned to the pool in a clean state.
    """
    with get_database(request).session() as db:
        yield db
