"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine from the
`DATABASE_URL` setting (a local SQLite file by default) and provides
small helpers used by the application, the seeding script and tests.
"""

from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy.pool import StaticPool

from .config import settings


def _build_engine(url: str):
    """Create the engine, sharing one connection for in-memory SQLite.

    An in-memory SQLite database only lives as long as its connection,
    so every session must reuse the same one.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=settings.DB_ECHO, **kwargs)
    return create_engine(url, echo=settings.DB_ECHO, pool_pre_ping=True)


engine = _build_engine(settings.DATABASE_URL)


def create_db_and_tables():
    """Create database tables using SQLModel metadata.

    Intended for local development and tests; schema changes on a real
    deployment are applied outside the application.
    """
    # register table classes on the metadata
    from . import models  # noqa: F401
    SQLModel.metadata.create_all(engine)


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
