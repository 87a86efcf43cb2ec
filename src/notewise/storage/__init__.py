"""Storage layer for NoteWise.

Session-scoped key-value persistence for highlights and annotations, either
in memory or via SQLAlchemy (SQLite by default).
"""

from .database import (
    Base,
    close_db,
    create_session_engine,
    create_session_factory,
    get_session,
    init_db,
)
from .orm_models import SessionEntryORM
from .repositories import (
    MemorySessionStore,
    SessionEntryRepository,
    SessionStore,
    SQLSessionStore,
)

__all__ = [
    # Database
    "Base",
    "create_session_engine",
    "create_session_factory",
    "get_session",
    "init_db",
    "close_db",
    # ORM Models
    "SessionEntryORM",
    # Stores
    "SessionStore",
    "MemorySessionStore",
    "SessionEntryRepository",
    "SQLSessionStore",
]
