"""SQLAlchemy database setup and session management."""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import Engine, MetaData, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from notewise.config import settings


# Naming convention for constraints
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    metadata = MetaData(naming_convention=convention)


def create_session_engine(url: Optional[str] = None) -> Engine:
    """Create an engine for the session store.

    In-memory SQLite shares one connection so the data outlives each
    checkout.
    """
    url = url or settings.session_db_url
    kwargs = {"echo": settings.log_level == "DEBUG"}
    if url in IN_MEMORY_URLS:
        kwargs["connect_args"] = {"check_same_thread": False}
        kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to ``engine``."""
    return sessionmaker(engine, class_=Session, expire_on_commit=False)


@contextmanager
def get_session(factory: sessionmaker) -> Iterator[Session]:
    """Get a database session that commits on success."""
    with factory() as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise


def init_db(engine: Engine) -> None:
    """Initialize database tables."""
    # Register ORM models on Base.metadata
    from . import orm_models  # noqa: F401

    Base.metadata.create_all(engine)


def close_db(engine: Engine) -> None:
    """Close database connections."""
    engine.dispose()
