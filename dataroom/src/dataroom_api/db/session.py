"""Database session and engine helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Optional, TypeVar

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import URL, make_url
from sqlalchemy.orm import Session, sessionmaker

from .base import Base
from . import models  # noqa: F401  # ensure models are imported for metadata

PROJECT_ROOT = Path(__file__).resolve().parents[4]
DEFAULT_DB_PATH = PROJECT_ROOT / "var" / "data" / "dataroom.db"

T = TypeVar("T")


def _resolve_database_url() -> str:
    raw_url = os.getenv("DATAROOM_DATABASE_URL")
    if not raw_url:
        DEFAULT_DB_PATH.parent.mkdir(parents=True, exist_ok=True)
        return f"sqlite:///{DEFAULT_DB_PATH.as_posix()}"

    url: URL = make_url(raw_url)
    if url.drivername.startswith("sqlite") and url.database and url.database != ":memory:":
        db_path = Path(url.database)
        if not db_path.is_absolute():
            db_path = PROJECT_ROOT / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        url = url.set(database=str(db_path))
    return url.render_as_string(hide_password=False)


DATABASE_URL = _resolve_database_url()

_SQLITE_CONNECT_ARGS: dict[str, object] = (
    {"check_same_thread": False, "timeout": 30} if DATABASE_URL.startswith("sqlite") else {}
)

engine: Engine = create_engine(
    DATABASE_URL,
    echo=False,
    future=True,
    pool_pre_ping=True,
    connect_args=_SQLITE_CONNECT_ARGS,
)

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    future=True,
    expire_on_commit=False,
)

SessionFactory = Callable[[], Session]


def run_in_session(
    fn: Callable[[Session], T],
    *,
    session_factory: Optional[SessionFactory] = None,
) -> T:
    """Run ``fn`` inside a single transaction, committing on success."""

    factory = session_factory or SessionLocal
    with factory() as session:
        with session.begin():
            return fn(session)


__all__ = [
    "Base",
    "SessionFactory",
    "SessionLocal",
    "engine",
    "run_in_session",
    "DATABASE_URL",
]
