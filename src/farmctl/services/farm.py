"""FarmService — add, remove, list, and rebalance animals.

Every write runs in ``Farm.transaction(...)`` over the colors it
touches and ends with a rebalance of each of those colors, so a
committed write always leaves its colors' barns consistent.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Any

from farmctl.domain.invariants import find_issues
from farmctl.domain.naming import animal_name, random_color
from farmctl.domain.types import Color, parse_color
from farmctl.services.base import BaseService
from farmctl.services.distributor import Distributor, FarmFault, RebalanceReport
from farmctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from farmctl.infrastructure.repositories.farm import FarmRepository

logger = logging.getLogger(__name__)


def _coerce_color(value: Color | str) -> Color:
    return value if isinstance(value, Color) else parse_color(value)


class FarmService(BaseService):
    """Use cases over the farm's animals and barns."""

    # ------------------------------------------------------------------
    # Adding animals
    # ------------------------------------------------------------------

    def add_animal(self, name: str, color: Color | str) -> ServiceResult:
        """Add one animal and rebalance its color."""
        op = "add_animal"
        try:
            color = _coerce_color(color)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_COLOR", str(exc))
        if not name.strip():
            return ServiceResult.failure(op, "VALIDATION_FAILED", "Animal name cannot be empty")

        try:
            with self._farm.transaction(color) as repo:
                created = repo.create_animal(name.strip(), color)
                report = Distributor(repo).rebalance(color)
                animal = repo.get_animal(created.id)
        except FarmFault as exc:
            return self._fault(op, exc)

        assert animal is not None
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "animal": animal.model_dump(mode="json"),
                "rebalance": report.to_dict(),
            },
        )

    def add_animals(
        self,
        items: Iterable[Mapping[str, Any]],
        *,
        partial: bool = False,
    ) -> ServiceResult:
        """Add many animals (``{"name": ..., "color": ...}`` items).

        All-or-nothing by default: one invalid item rejects the batch and
        the valid ones are added in a single transaction, rebalancing each
        touched color once. With *partial*, invalid items are skipped and
        reported while the rest are added.
        """
        op = "add_animals"
        valid: list[tuple[str, Color]] = []
        errors: list[dict[str, Any]] = []

        for i, item in enumerate(items):
            name = str(item.get("name", "")).strip()
            try:
                color = _coerce_color(item.get("color", ""))
            except ValueError as exc:
                errors.append({"index": i, "error": str(exc)})
                continue
            if not name:
                errors.append({"index": i, "error": "Animal name cannot be empty"})
                continue
            valid.append((name, color))

        if errors and not partial:
            return ServiceResult.failure(
                op,
                "BATCH_FAILED",
                f"Item {errors[0]['index']} failed: {errors[0]['error']}",
                errors=errors,
            )

        added: list[dict[str, Any]] = []
        reports: list[RebalanceReport] = []
        try:
            if valid:
                with self._farm.transaction(*{color for _, color in valid}) as repo:
                    added, reports = self._insert_and_rebalance(repo, valid)
        except FarmFault as exc:
            return self._fault(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "added": added,
                "errors": errors,
                "rebalanced": [r.to_dict() for r in reports],
            },
            warnings=[f"Skipped item {e['index']}: {e['error']}" for e in errors],
        )

    def populate(self, count: int, *, seed: int | None = None) -> ServiceResult:
        """Add *count* animals with generated names and random colors."""
        op = "populate"
        if count <= 0:
            return ServiceResult.failure(
                op, "VALIDATION_FAILED", f"Count must be positive, got {count}"
            )
        if seed is None:
            seed = self._farm.settings.populate.seed

        rng = random.Random(seed)
        colors = [random_color(rng) for _ in range(count)]

        try:
            # Every color is locked so the numbering offset cannot go stale.
            with self._farm.transaction(*Color) as repo:
                offset = repo.count_animals()
                animals = [(animal_name(offset + i), c) for i, c in enumerate(colors)]
                added, reports = self._insert_and_rebalance(repo, animals)
        except FarmFault as exc:
            return self._fault(op, exc)

        by_color: dict[str, int] = {}
        for color in colors:
            by_color[color.value] = by_color.get(color.value, 0) + 1
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "added": len(added),
                "by_color": dict(sorted(by_color.items())),
                "rebalanced": [r.to_dict() for r in reports],
            },
        )

    # ------------------------------------------------------------------
    # Removing animals
    # ------------------------------------------------------------------

    def remove_animal(self, animal_id: int) -> ServiceResult:
        """Remove one animal and rebalance its color."""
        result = self.remove_animals([animal_id])
        if not result.ok:
            return result.model_copy(update={"op": "remove_animal"})
        return ServiceResult(
            ok=True,
            op="remove_animal",
            data={
                "removed": result.data["removed"][0],
                "rebalance": result.data["rebalanced"][0],
            },
        )

    def remove_animals(self, animal_ids: Iterable[int]) -> ServiceResult:
        """Remove animals by id, all-or-nothing, rebalancing each touched color."""
        op = "remove_animals"
        ids = list(dict.fromkeys(animal_ids))

        with self._farm.reader() as repo:
            found = {i: repo.get_animal(i) for i in ids}
        missing = [i for i, animal in found.items() if animal is None]
        if missing:
            return ServiceResult.failure(
                op, "NOT_FOUND", f"No animal with id {missing[0]}", missing=missing
            )

        colors = sorted({animal.favorite_color for animal in found.values() if animal})
        removed: list[dict[str, Any]] = []
        try:
            with self._farm.transaction(*colors) as repo:
                # Re-read under the color locks; a concurrent remove may have won.
                current = [repo.get_animal(animal_id) for animal_id in ids]
                gone = [i for i, animal in zip(ids, current, strict=True) if animal is None]
                if gone:
                    return ServiceResult.failure(
                        op, "NOT_FOUND", f"No animal with id {gone[0]}", missing=gone
                    )
                for animal in current:
                    assert animal is not None
                    repo.delete_animal(animal)
                    removed.append(animal.model_dump(mode="json"))
                reports = self._rebalance_all(repo, colors)
        except FarmFault as exc:
            return self._fault(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={"removed": removed, "rebalanced": [r.to_dict() for r in reports]},
        )

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def list_animals(self, color: Color | str | None = None) -> ServiceResult:
        op = "list_animals"
        try:
            wanted = _coerce_color(color) if color is not None else None
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_COLOR", str(exc))

        with self._farm.reader() as repo:
            animals = (
                repo.find_animals_by_color(wanted) if wanted else repo.find_all_animals()
            )
            barn_names = {barn.id: barn.name for barn in repo.find_all_barns()}

        items = [
            {**animal.model_dump(mode="json"), "barn": barn_names.get(animal.barn_id)}
            for animal in animals
        ]
        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})

    def list_barns(self, color: Color | str | None = None) -> ServiceResult:
        op = "list_barns"
        try:
            wanted = _coerce_color(color) if color is not None else None
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_COLOR", str(exc))

        with self._farm.reader() as repo:
            barns = repo.find_barns_by_color(wanted) if wanted else repo.find_all_barns()
            occupancy = repo.barn_occupancy(wanted)

        items = [
            {**barn.model_dump(mode="json"), "occupants": occupancy.get(barn.id, 0)}
            for barn in sorted(barns, key=lambda b: (b.color.value, b.name))
        ]
        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})

    def verify(self) -> ServiceResult:
        """Re-check every barn invariant against stored state."""
        op = "verify"
        with self._farm.reader() as repo:
            animals = repo.find_all_animals()
            barns = repo.find_all_barns()

        issues = [issue.model_dump(mode="json") for issue in find_issues(animals, barns)]
        data = {"animals": len(animals), "barns": len(barns), "issues": issues}
        if issues:
            return ServiceResult(
                ok=False,
                op=op,
                data=data,
                error=ServiceError(
                    code="INVARIANT_VIOLATION",
                    message=f"{len(issues)} barn invariant(s) violated",
                ),
            )
        return ServiceResult(ok=True, op=op, data=data)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def rebalance(self, color: Color | str | None = None) -> ServiceResult:
        """Rebalance one color, or every color when *color* is None.

        Each color runs in its own transaction.
        """
        op = "rebalance"
        try:
            colors = [_coerce_color(color)] if color is not None else list(Color)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_COLOR", str(exc))

        reports: list[RebalanceReport] = []
        try:
            for c in colors:
                with self._farm.transaction(c) as repo:
                    reports.append(Distributor(repo).rebalance(c))
        except FarmFault as exc:
            return self._fault(op, exc)

        shown = reports if color is not None else [r for r in reports if r.changed]
        return ServiceResult(ok=True, op=op, data={"rebalanced": [r.to_dict() for r in shown]})

    def reset(self) -> ServiceResult:
        """Delete every animal and barn."""
        with self._farm.transaction(*Color) as repo:
            removed_animals, removed_barns = repo.delete_all()
        logger.info("Farm reset: %d animals, %d barns removed", removed_animals, removed_barns)
        return ServiceResult(
            ok=True,
            op="reset",
            data={"animals_removed": removed_animals, "barns_removed": removed_barns},
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @classmethod
    def _insert_and_rebalance(
        cls, repo: FarmRepository, animals: list[tuple[str, Color]]
    ) -> tuple[list[dict[str, Any]], list[RebalanceReport]]:
        """Insert *animals* and rebalance their colors within *repo*'s transaction."""
        colors = sorted({color for _, color in animals})
        created = [repo.create_animal(name, color).id for name, color in animals]
        reports = cls._rebalance_all(repo, colors)
        housed = {
            animal.id: animal
            for color in colors
            for animal in repo.find_animals_by_color(color)
        }
        return [housed[animal_id].model_dump(mode="json") for animal_id in created], reports

    @staticmethod
    def _rebalance_all(repo: FarmRepository, colors: Iterable[Color]) -> list[RebalanceReport]:
        distributor = Distributor(repo)
        return [distributor.rebalance(color) for color in colors]

    @staticmethod
    def _fault(op: str, exc: FarmFault) -> ServiceResult:
        """Report a rolled-back rebalance fault."""
        logger.error("Rebalance aborted: %s", exc)
        return ServiceResult.failure(op, exc.code, str(exc), **exc.detail())
