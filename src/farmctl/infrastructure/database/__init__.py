"""SQLite database engine and schema via SQLAlchemy Core."""

from farmctl.infrastructure.database.engine import create_db_engine, init_database
from farmctl.infrastructure.database.schema import animals, barns, metadata

__all__ = [
    "animals",
    "barns",
    "create_db_engine",
    "init_database",
    "metadata",
]
