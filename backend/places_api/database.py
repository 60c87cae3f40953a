from typing import Generator, Optional

from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from places_api.config import settings


def build_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Create an engine for ``url`` (defaults to ``settings.database_url``).

    SQLite connections are shared across FastAPI's worker threads, and an
    in-memory database is pinned to a single connection so every session
    sees the same tables.
    """
    url = make_url(url or settings.database_url)
    options = {"echo": settings.sql_echo if echo is None else echo}
    if url.get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
    return create_engine(url, **options)


engine: Engine = build_engine()


def get_session() -> Generator[Session, None, None]:
    """Get database session"""
    with Session(engine) as session:
        yield session


def init_db(bind: Engine = engine) -> None:
    """Create any missing tables for the registered models"""
    from places_api.models.place import Place  # noqa: F401
    from places_api.models.user import User, UserPlace  # noqa: F401

    SQLModel.metadata.create_all(bind)
