"""SQLite storage for the extracted-text key-value table."""

from __future__ import annotations

from pathlib import Path
from typing import Generator

from sqlalchemy.engine import Engine, make_url
from sqlmodel import Session, SQLModel, create_engine

from . import config as config_module
from .config import PROJECT_ROOT

_engine: Engine | None = None


def resolve_database_url(database_url: str, *, root: Path = PROJECT_ROOT) -> str:
    """Anchor a relative SQLite file path at ``root`` and create its directory.

    Non-SQLite URLs and in-memory databases are returned unchanged.
    """

    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return database_url
    database = url.database
    if not database or database == ":memory:":
        return database_url
    db_path = Path(database)
    if not db_path.is_absolute():
        db_path = (root / db_path).resolve()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return url.set(database=str(db_path)).render_as_string(hide_password=False)


def get_engine() -> Engine:
    """Return the process-wide engine for the stored-text database."""

    global _engine
    if _engine is None:
        database_url = resolve_database_url(config_module.get_settings().database_url)
        is_sqlite = make_url(database_url).get_backend_name() == "sqlite"
        # FastAPI may hand a session to a different worker thread.
        connect_args = {"check_same_thread": False} if is_sqlite else {}
        _engine = create_engine(database_url, connect_args=connect_args)
    return _engine


def get_session() -> Generator[Session, None, None]:
    """Yield a session for one request."""

    with Session(get_engine()) as session:
        yield session


def init_db() -> None:
    """Create the ``stored_values`` table when missing."""

    from .models import stored_text  # noqa: F401

    SQLModel.metadata.create_all(get_engine())


def reset_database_state() -> None:
    """Dispose the engine so the next call rebuilds it from fresh settings."""

    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None
