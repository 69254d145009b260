from typing import Generator

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from arena.config import get_settings


def create_engine_from_url(database_url: str, echo: bool = False) -> Engine:
    """
    Create SQLAlchemy engine from database URL.

    SQLite connections are shared across threads; an in-memory SQLite
    database is pinned to a single connection so every session sees it.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True, echo=echo)

    kwargs = {"connect_args": {"check_same_thread": False}, "echo": echo}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


_settings = get_settings()
engine = create_engine_from_url(_settings.database_url, echo=_settings.debug)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


def init_db():
    from arena import models  # ensure models are imported
    SQLModel.metadata.create_all(engine)
