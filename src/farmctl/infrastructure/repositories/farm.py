"""SQLite-backed farm store.

:class:`FarmRepository` implements the storage capability the
distributor consumes (find/create/delete barns, find/save animals) plus
the animal CRUD used by the farm service.

The caller owns the transaction — construct the repository on a
``Connection`` obtained from ``engine.begin()`` so every write joins the
same atomic unit. Commit or rollback is the caller's responsibility.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import bindparam, delete, func, insert, select, update

from farmctl.domain.models import Animal, Barn
from farmctl.domain.types import Color
from farmctl.infrastructure.database.schema import animals, barns

if TYPE_CHECKING:
    from sqlalchemy import Connection


def _to_barn(row: Any) -> Barn:
    return Barn(id=row.id, name=row.name, color=Color(row.color), capacity=row.capacity)


def _to_animal(row: Any) -> Animal:
    return Animal(
        id=row.id,
        name=row.name,
        favorite_color=Color(row.favorite_color),
        barn_id=row.barn_id,
    )


class FarmRepository:
    """Record-level access to animals and barns on one connection.

    Args:
        conn: Active SQLAlchemy connection (caller owns the transaction).
        capacity_for: Configured capacity per color, stamped on new barns.
    """

    def __init__(self, conn: Connection, capacity_for: Callable[[Color], int]) -> None:
        self._conn = conn
        self._capacity_for = capacity_for

    # ------------------------------------------------------------------
    # Barns
    # ------------------------------------------------------------------

    def find_barns_by_color(self, color: Color) -> list[Barn]:
        rows = self._conn.execute(
            select(barns).where(barns.c.color == color.value).order_by(barns.c.id)
        )
        return [_to_barn(row) for row in rows]

    def find_all_barns(self) -> list[Barn]:
        rows = self._conn.execute(select(barns).order_by(barns.c.color, barns.c.name))
        return [_to_barn(row) for row in rows]

    def create_barn(self, name: str, color: Color, capacity: int | None = None) -> Barn:
        """Insert a barn of *color*.

        Without an explicit *capacity* the barn gets the configured one.
        """
        if capacity is None:
            capacity = self._capacity_for(color)
        result = self._conn.execute(
            insert(barns).values(name=name, color=color.value, capacity=capacity)
        )
        barn_id = result.inserted_primary_key[0]
        return Barn(id=barn_id, name=name, color=color, capacity=capacity)

    def delete_barn(self, barn: Barn) -> None:
        self._conn.execute(delete(barns).where(barns.c.id == barn.id))

    def delete_barns(self, to_delete: Iterable[Barn]) -> None:
        ids = [barn.id for barn in to_delete]
        if ids:
            self._conn.execute(delete(barns).where(barns.c.id.in_(ids)))

    def count_barns(self, color: Color | None = None) -> int:
        stmt = select(func.count(barns.c.id))
        if color is not None:
            stmt = stmt.where(barns.c.color == color.value)
        return int(self._conn.execute(stmt).scalar_one())

    def barn_occupancy(self, color: Color | None = None) -> dict[int, int]:
        """Map barn id to the number of animals it houses (empty barns included)."""
        stmt = (
            select(barns.c.id, func.count(animals.c.id).label("occupants"))
            .select_from(barns.outerjoin(animals, animals.c.barn_id == barns.c.id))
            .group_by(barns.c.id)
        )
        if color is not None:
            stmt = stmt.where(barns.c.color == color.value)
        return {row.id: int(row.occupants) for row in self._conn.execute(stmt)}

    # ------------------------------------------------------------------
    # Animals
    # ------------------------------------------------------------------

    def find_animals_by_color(self, color: Color) -> list[Animal]:
        rows = self._conn.execute(
            select(animals)
            .where(animals.c.favorite_color == color.value)
            .order_by(animals.c.id)
        )
        return [_to_animal(row) for row in rows]

    def find_animals_by_barn(self, barn: Barn) -> list[Animal]:
        rows = self._conn.execute(
            select(animals).where(animals.c.barn_id == barn.id).order_by(animals.c.id)
        )
        return [_to_animal(row) for row in rows]

    def find_all_animals(self) -> list[Animal]:
        rows = self._conn.execute(select(animals).order_by(animals.c.id))
        return [_to_animal(row) for row in rows]

    def get_animal(self, animal_id: int) -> Animal | None:
        row = self._conn.execute(select(animals).where(animals.c.id == animal_id)).first()
        return _to_animal(row) if row is not None else None

    def create_animal(self, name: str, color: Color) -> Animal:
        """Insert an unassigned animal."""
        result = self._conn.execute(
            insert(animals).values(name=name, favorite_color=color.value, barn_id=None)
        )
        return Animal(id=result.inserted_primary_key[0], name=name, favorite_color=color)

    def delete_animal(self, animal: Animal) -> None:
        self._conn.execute(delete(animals).where(animals.c.id == animal.id))

    def save_animal(self, animal: Animal) -> None:
        """Persist the barn reference of *animal*."""
        self._conn.execute(
            update(animals).where(animals.c.id == animal.id).values(barn_id=animal.barn_id)
        )

    def save_animals(self, to_save: Sequence[Animal]) -> None:
        """Persist the barn references of many animals in one executemany."""
        if not to_save:
            return
        self._conn.execute(
            update(animals)
            .where(animals.c.id == bindparam("animal_id"))
            .values(barn_id=bindparam("new_barn_id")),
            [{"animal_id": a.id, "new_barn_id": a.barn_id} for a in to_save],
        )

    def count_animals(self, color: Color | None = None) -> int:
        stmt = select(func.count(animals.c.id))
        if color is not None:
            stmt = stmt.where(animals.c.favorite_color == color.value)
        return int(self._conn.execute(stmt).scalar_one())

    def delete_all(self) -> tuple[int, int]:
        """Delete every animal, then every barn. Returns ``(animals, barns)`` removed."""
        removed_animals = self._conn.execute(delete(animals)).rowcount
        removed_barns = self._conn.execute(delete(barns)).rowcount
        return removed_animals, removed_barns
