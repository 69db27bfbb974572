"""Distributor — rebalances the barns of one color.

Pipeline: FETCH -> SIZE -> RECONCILE -> CLEAR -> ASSIGN -> PRUNE -> VERIFY

After ``rebalance(color)`` the store satisfies, for that color:

- every barn holds between 1 and ``capacity`` animals;
- every animal is housed in exactly one barn;
- the barn count is ``ceil(animals / capacity)`` (zero when no animals);
- per-barn counts differ by at most one.

Every animal is cleared and re-dealt round-robin on each call. Churn is
O(n) per rebalance; which animal lands where is not stable across calls.

The distributor holds no state between calls and never opens a
transaction itself. Run it inside ``Farm.transaction(color)`` so the
whole rebalance commits or rolls back as one unit.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

import structlog

from farmctl.domain.models import Animal, Barn
from farmctl.domain.naming import barn_name, needed_barns, next_barn_names
from farmctl.domain.types import Color

log = structlog.get_logger(__name__)


class FarmStore(Protocol):
    """Storage capability the distributor rebalances through."""

    def find_barns_by_color(self, color: Color) -> list[Barn]: ...

    def find_animals_by_color(self, color: Color) -> list[Animal]: ...

    def find_animals_by_barn(self, barn: Barn) -> list[Animal]: ...

    def create_barn(self, name: str, color: Color, capacity: int | None = None) -> Barn: ...

    def delete_barn(self, barn: Barn) -> None: ...

    def delete_barns(self, to_delete: Iterable[Barn]) -> None: ...

    def save_animal(self, animal: Animal) -> None: ...

    def save_animals(self, to_save: Sequence[Animal]) -> None: ...


# ---------------------------------------------------------------------------
# Faults — sizing-logic defects, never expected at runtime
# ---------------------------------------------------------------------------


class FarmFault(RuntimeError):
    """A rebalance produced a plan that breaks the barn invariants.

    Unrecoverable: the enclosing transaction must roll back.
    """

    code = "FARM_FAULT"

    def detail(self) -> dict[str, Any]:
        return {}


class OverCapacityFault(FarmFault):
    """A barn would receive more animals than it can hold."""

    code = "OVER_CAPACITY"

    def __init__(self, barn: Barn, attempted: int, *, needed: int, animals: int) -> None:
        self.barn = barn
        self.attempted = attempted
        self.needed = needed
        self.animals = animals
        super().__init__(
            f"Barn {barn.name!r} would hold {attempted} animals but its capacity is "
            f"{barn.capacity} (barns needed: {needed}, animals: {animals})"
        )

    def detail(self) -> dict[str, Any]:
        return {
            "barn": self.barn.name,
            "capacity": self.barn.capacity,
            "attempted": self.attempted,
            "needed_barns": self.needed,
            "animals": self.animals,
        }


class EmptyBarnFault(FarmFault):
    """A barn kept by the rebalance ended up with no animals."""

    code = "EMPTY_BARN"

    def __init__(self, barn: Barn, *, needed: int, animals: int) -> None:
        self.barn = barn
        self.needed = needed
        self.animals = animals
        super().__init__(
            f"Barn {barn.name!r} is empty after rebalance "
            f"(barns needed: {needed}, animals: {animals})"
        )

    def detail(self) -> dict[str, Any]:
        return {"barn": self.barn.name, "needed_barns": self.needed, "animals": self.animals}


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


@dataclass
class RebalanceReport:
    """What one rebalance did to a color's barns."""

    color: Color
    animals: int = 0
    capacity: int | None = None
    barns: list[Barn] = field(default_factory=list)
    created: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    occupancy: dict[str, int] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return bool(self.animals or self.created or self.deleted)

    def to_dict(self) -> dict[str, Any]:
        return {
            "color": self.color.value,
            "animals": self.animals,
            "capacity": self.capacity,
            "barns": len(self.barns),
            "created": self.created,
            "deleted": self.deleted,
            "occupancy": self.occupancy,
        }


# ---------------------------------------------------------------------------
# Distributor
# ---------------------------------------------------------------------------


class Distributor:
    """Sizes and fills the barns of a color through a :class:`FarmStore`."""

    def __init__(self, store: FarmStore) -> None:
        self._store = store

    def rebalance(self, color: Color) -> RebalanceReport:
        """Bring the barns of *color* back in line with its animals.

        Safe to call redundantly. Raises :class:`OverCapacityFault` or
        :class:`EmptyBarnFault` only on a sizing defect; storage errors
        propagate unchanged.
        """
        # ── FETCH ─────────────────────────────────────────────────
        barns = self._store.find_barns_by_color(color)
        animals = self._store.find_animals_by_color(color)
        report = RebalanceReport(color=color, animals=len(animals))

        if not animals:
            self._store.delete_barns(barns)
            report.deleted = [barn.name for barn in barns]
            self._log(report)
            return report

        # ── SIZE ──────────────────────────────────────────────────
        # Only a seed barn reads the configured capacity; later barns copy
        # the capacity already in use for the color.
        if not barns:
            seed = self._store.create_barn(barn_name(color, 0), color)
            barns.append(seed)
            report.created.append(seed.name)

        capacity = min(barn.capacity for barn in barns)
        needed = needed_barns(len(animals), capacity)
        report.capacity = capacity

        # ── RECONCILE ─────────────────────────────────────────────
        kept, surplus = self._reconcile(color, barns, needed, capacity, report)

        # ── CLEAR ─────────────────────────────────────────────────
        cleared = [animal.unassigned() for animal in animals]
        self._store.save_animals(cleared)

        # ── ASSIGN ────────────────────────────────────────────────
        assigned, counts = self._deal(cleared, kept, needed)
        self._store.save_animals(assigned)

        # ── PRUNE ─────────────────────────────────────────────────
        self._store.delete_barns(surplus)
        report.deleted = [barn.name for barn in surplus]

        # ── VERIFY ────────────────────────────────────────────────
        for barn in kept:
            if not self._store.find_animals_by_barn(barn):
                raise EmptyBarnFault(barn, needed=needed, animals=len(animals))

        report.barns = kept
        report.occupancy = {barn.name: counts[barn.id] for barn in kept}
        self._log(report)
        return report

    def _reconcile(
        self,
        color: Color,
        barns: list[Barn],
        needed: int,
        capacity: int,
        report: RebalanceReport,
    ) -> tuple[list[Barn], list[Barn]]:
        """Grow or shrink *barns* to *needed*. Returns ``(kept, surplus)``.

        New barns are created with *capacity*, not the configured value.

        Shrinking keeps the lowest names, so the survivors of a shrink
        are reproducible.
        """
        if len(barns) < needed:
            taken = {barn.name for barn in barns}
            for name in next_barn_names(color, len(barns), needed - len(barns), taken):
                barns.append(self._store.create_barn(name, color, capacity))
                report.created.append(name)
            return barns, []

        if len(barns) > needed:
            ordered = sorted(barns, key=lambda barn: barn.name)
            return ordered[:needed], ordered[needed:]

        return barns, []

    def _deal(
        self,
        animals: list[Animal],
        kept: list[Barn],
        needed: int,
    ) -> tuple[list[Animal], dict[int, int]]:
        """Deal *animals* round-robin over *kept*, enforcing capacity."""
        counts = dict.fromkeys((barn.id for barn in kept), 0)
        assigned: list[Animal] = []
        for i, animal in enumerate(animals):
            barn = kept[i % len(kept)]
            if counts[barn.id] + 1 > barn.capacity:
                raise OverCapacityFault(
                    barn, counts[barn.id] + 1, needed=needed, animals=len(animals)
                )
            counts[barn.id] += 1
            assigned.append(animal.assigned_to(barn))
        return assigned, counts

    def _log(self, report: RebalanceReport) -> None:
        log.debug(
            "rebalance.complete",
            color=report.color.value,
            animals=report.animals,
            barns=len(report.barns),
            created=len(report.created),
            deleted=len(report.deleted),
        )
