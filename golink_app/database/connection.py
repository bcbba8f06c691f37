"""
SQLAlchemy engine setup for the SQLite golink store.

SQLite is opened in WAL mode so readers are never blocked by a writer,
and with a busy timeout so concurrent writers queue up instead of failing.
"""

import logging
from pathlib import Path
from typing import Union

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

logger = logging.getLogger(__name__)

BUSY_TIMEOUT_SECONDS = 30


class Base(DeclarativeBase):
    pass


def resolve_database_path(database_path: Union[str, Path]) -> Path:
    """Resolve to an absolute path and create missing parent directories"""
    path = Path(database_path).expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _enable_wal(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute(f"PRAGMA busy_timeout={BUSY_TIMEOUT_SECONDS * 1000}")
    cursor.close()


def create_sqlite_engine(database_path: Union[str, Path]) -> Engine:
    """
    Create a pooled engine for a SQLite database file.

    Args:
        database_path: Path to the database file (relative paths allowed)

    Returns:
        Engine with WAL journaling enabled on every pooled connection
    """
    path = resolve_database_path(database_path)
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False, "timeout": BUSY_TIMEOUT_SECONDS},
        pool_pre_ping=True,
    )
    event.listen(engine, "connect", _enable_wal)
    logger.debug("SQLite engine created for %s", path)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
