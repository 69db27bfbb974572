"""Tests for database engine setup and initialization."""

from pathlib import Path

from sqlalchemy import inspect, text

from farmctl.infrastructure.database.engine import create_db_engine, init_database


class TestCreateDbEngine:
    def test_wal_mode_enabled(self, tmp_path: Path) -> None:
        engine = create_db_engine(tmp_path / "test.db")
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"

    def test_foreign_keys_enabled(self, tmp_path: Path) -> None:
        engine = create_db_engine(tmp_path / "test.db")
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    def test_busy_timeout(self, tmp_path: Path) -> None:
        engine = create_db_engine(tmp_path / "test.db", busy_timeout_ms=1234)
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA busy_timeout")).scalar() == 1234


class TestInitDatabase:
    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        db_path = tmp_path / ".farmctl" / "farmctl.db"
        init_database(db_path)
        assert db_path.exists()

    def test_creates_tables(self, tmp_path: Path) -> None:
        engine = init_database(tmp_path / "farm.db")
        assert {"animals", "barns"} <= set(inspect(engine).get_table_names())

    def test_idempotent(self, tmp_path: Path) -> None:
        init_database(tmp_path / "farm.db")
        engine = init_database(tmp_path / "farm.db")
        assert {"animals", "barns"} <= set(inspect(engine).get_table_names())
