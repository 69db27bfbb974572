"""Database engine setup for SQLite with WAL mode.

WAL mode lets readers proceed while a rebalance transaction writes.
Foreign keys are enforced so an animal can never point at a deleted barn.

SQLAlchemy Core (not ORM) is used: the farm's records are two flat
tables and every write happens inside an explicit ``engine.begin()``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from farmctl.infrastructure.database.schema import metadata


def create_db_engine(db_path: Path, *, busy_timeout_ms: int = 5000) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
        cursor.close()

    return engine


def init_database(db_path: Path, *, busy_timeout_ms: int = 5000) -> Engine:
    """Initialize the farm database at *db_path*.

    Creates the parent directory and all tables from
    :data:`schema.metadata`. Idempotent — safe to call on an existing farm.

    Returns the engine ready for use.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path, busy_timeout_ms=busy_timeout_ms)
    metadata.create_all(engine)
    return engine
