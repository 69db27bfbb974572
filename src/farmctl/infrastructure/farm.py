"""Farm — the repository with per-color transaction coordination.

The Farm is the single dependency injected into every service. It owns
the database engine and hands out :class:`FarmRepository` instances
bound to a connection. :meth:`Farm.transaction` is the atomic unit for
a rebalance:

- **DB**: Native SQLAlchemy ``engine.begin()`` with auto-commit/rollback,
  so no partial rebalance is ever committed.
- **Locks**: One ``threading.Lock`` per color, held for the whole
  transaction. Rebalances of the same color are serialized; different
  colors never wait on each other.
"""

from __future__ import annotations

import logging
import threading
from contextlib import ExitStack, contextmanager
from typing import TYPE_CHECKING

from farmctl.infrastructure.database.engine import init_database
from farmctl.infrastructure.repositories.farm import FarmRepository

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy.engine import Engine

    from farmctl.config.settings import FarmSettings
    from farmctl.domain.types import Color

logger = logging.getLogger(__name__)


class Farm:
    """Repository encapsulating database access and per-color locking.

    Constructed once at CLI startup from :class:`FarmSettings`. Services
    receive the Farm via their :class:`BaseService` constructor.
    """

    def __init__(self, settings: FarmSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(
            settings.db_path,
            busy_timeout_ms=settings.database.busy_timeout_ms,
        )
        self._locks: dict[Color, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @property
    def root(self) -> Path:
        """The farm root directory."""
        return self._settings.farm_root

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> FarmSettings:
        return self._settings

    def capacity_for(self, color: Color) -> int:
        """Configured capacity of every barn of *color*."""
        return self._settings.barns.capacity_for(color)

    def color_lock(self, color: Color) -> threading.Lock:
        """The lock serializing writes to *color*'s barns."""
        with self._locks_guard:
            lock = self._locks.get(color)
            if lock is None:
                lock = self._locks[color] = threading.Lock()
            return lock

    @contextmanager
    def transaction(self, *colors: Color) -> Iterator[FarmRepository]:
        """Atomic unit of work over the given colors.

        Locks for *colors* are taken in sorted order before the DB
        transaction begins and released after it commits or rolls back.
        Any exception raised inside the block rolls back every write.

        Usage::

            with farm.transaction(Color.RED) as repo:
                repo.create_animal("Daisy", Color.RED)
                Distributor(repo).rebalance(Color.RED)
        """
        with ExitStack() as stack:
            for color in sorted(set(colors)):
                stack.enter_context(self.color_lock(color))
            with self._engine.begin() as conn:
                yield FarmRepository(conn, self.capacity_for)

    @contextmanager
    def reader(self) -> Iterator[FarmRepository]:
        """Read-only repository on a fresh connection (no locks taken)."""
        with self._engine.connect() as conn:
            yield FarmRepository(conn, self.capacity_for)

    def close(self) -> None:
        """Release pooled connections."""
        logger.debug("Disposing engine for %s", self._settings.db_path)
        self._engine.dispose()
