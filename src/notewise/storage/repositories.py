"""Repository layer for session key-value persistence."""

from typing import Optional, Protocol

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from .database import (
    close_db,
    create_session_engine,
    create_session_factory,
    get_session,
    init_db,
)
from .orm_models import SessionEntryORM


class SessionStore(Protocol):
    """Session-scoped key-value persistence."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemorySessionStore:
    """Session store held in a dict; lost when the process exits."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class SessionEntryRepository:
    """Repository for session entry operations."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, key: str) -> Optional[SessionEntryORM]:
        """Get an entry by key."""
        result = self.session.execute(
            select(SessionEntryORM).where(SessionEntryORM.key == key)
        )
        return result.scalar_one_or_none()

    def upsert(self, key: str, value: str) -> SessionEntryORM:
        """Create or replace an entry."""
        entry = self.get(key)
        if entry is None:
            entry = SessionEntryORM(key=key, value=value)
            self.session.add(entry)
        else:
            entry.value = value
        self.session.flush()
        return entry

    def delete(self, key: str) -> None:
        """Delete an entry if present."""
        self.session.execute(delete(SessionEntryORM).where(SessionEntryORM.key == key))

    def list_keys(self) -> list[str]:
        result = self.session.execute(select(SessionEntryORM.key).order_by(SessionEntryORM.key))
        return list(result.scalars())


class SQLSessionStore:
    """Session store backed by a SQL database (SQLite by default)."""

    def __init__(self, url: Optional[str] = None):
        """Initialize store.

        Args:
            url: SQLAlchemy database URL (default from settings).
        """
        self.engine = create_session_engine(url)
        init_db(self.engine)
        self._factory = create_session_factory(self.engine)

    def get(self, key: str) -> Optional[str]:
        with get_session(self._factory) as session:
            entry = SessionEntryRepository(session).get(key)
            return entry.value if entry is not None else None

    def set(self, key: str, value: str) -> None:
        with get_session(self._factory) as session:
            SessionEntryRepository(session).upsert(key, value)

    def remove(self, key: str) -> None:
        with get_session(self._factory) as session:
            SessionEntryRepository(session).delete(key)

    def keys(self) -> list[str]:
        with get_session(self._factory) as session:
            return SessionEntryRepository(session).list_keys()

    def close(self) -> None:
        close_db(self.engine)
