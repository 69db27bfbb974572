"""Shared pytest fixtures for farmctl tests."""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from click.testing import CliRunner
from sqlalchemy import Connection
from sqlalchemy.engine import Engine

from farmctl.config.models import BarnsConfig
from farmctl.config.settings import FarmSettings
from farmctl.domain.invariants import InvariantIssue, find_issues
from farmctl.domain.models import Animal
from farmctl.domain.types import Color
from farmctl.infrastructure.database.engine import init_database
from farmctl.infrastructure.farm import Farm
from farmctl.infrastructure.repositories.farm import FarmRepository

TEST_CAPACITY = 10


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's FARMCTL_* environment out of tests."""
    monkeypatch.delenv("FARMCTL_CONFIG", raising=False)
    monkeypatch.delenv("FARMCTL_BARNS__CAPACITY", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / "farm.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def conn(db_engine: Engine) -> Generator[Connection]:
    """Connection inside a transaction that commits at teardown."""
    with db_engine.begin() as connection:
        yield connection


@pytest.fixture
def repo(conn: Connection) -> FarmRepository:
    """Repository with a uniform barn capacity of ``TEST_CAPACITY``."""
    return FarmRepository(conn, lambda _color: TEST_CAPACITY)


@pytest.fixture
def farm(tmp_path: Path) -> Generator[Farm]:
    """Farm on a temp directory with barn capacity ``TEST_CAPACITY``."""
    settings = FarmSettings.from_cli(
        farm_root=tmp_path,
        barns=BarnsConfig(capacity=TEST_CAPACITY),
    )
    f = Farm(settings)
    try:
        yield f
    finally:
        f.close()


@pytest.fixture
def raw_animals(farm: Farm) -> Callable[..., list[Animal]]:
    """Insert unassigned animals directly, without rebalancing."""

    def _insert(color: Color, count: int, *, prefix: str = "Critter") -> list[Animal]:
        with farm.transaction(color) as repo:
            return [repo.create_animal(f"{prefix} {i}", color) for i in range(count)]

    return _insert


@pytest.fixture
def farm_issues(farm: Farm) -> Callable[[], list[InvariantIssue]]:
    """Invariant issues in the farm's committed state."""

    def _issues() -> list[InvariantIssue]:
        with farm.reader() as repo:
            return find_issues(repo.find_all_animals(), repo.find_all_barns())

    return _issues


@pytest.fixture
def _isolated_farm(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp dir so the CLI creates an isolated farm.

    A ``farmctl.toml`` pins barn capacity to ``TEST_CAPACITY``.
    """
    (tmp_path / "farmctl.toml").write_text(
        f"[barns]\ncapacity = {TEST_CAPACITY}\n", encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)
