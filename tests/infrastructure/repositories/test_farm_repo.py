"""Tests for the SQLite farm repository."""

import pytest
from sqlalchemy import Connection
from sqlalchemy.exc import IntegrityError

from farmctl.domain.types import Color
from farmctl.infrastructure.repositories.farm import FarmRepository


class TestBarns:
    def test_create_barn_uses_configured_capacity(self, repo: FarmRepository) -> None:
        barn = repo.create_barn("Barn RED 0000", Color.RED)
        assert barn.id is not None
        assert barn.capacity == 10
        assert barn.color is Color.RED

    def test_capacity_per_color(self, conn: Connection) -> None:
        repo = FarmRepository(conn, lambda c: 3 if c is Color.RED else 8)
        assert repo.create_barn("Barn RED 0000", Color.RED).capacity == 3
        assert repo.create_barn("Barn BLUE 0000", Color.BLUE).capacity == 8

    def test_explicit_capacity_overrides_config(self, repo: FarmRepository) -> None:
        barn = repo.create_barn("Barn RED 0001", Color.RED, capacity=25)
        assert barn.capacity == 25
        assert repo.find_barns_by_color(Color.RED) == [barn]

    def test_find_barns_by_color(self, repo: FarmRepository) -> None:
        red = repo.create_barn("Barn RED 0000", Color.RED)
        repo.create_barn("Barn BLUE 0000", Color.BLUE)
        assert repo.find_barns_by_color(Color.RED) == [red]
        assert repo.find_barns_by_color(Color.GREEN) == []

    def test_names_unique(self, repo: FarmRepository) -> None:
        repo.create_barn("Barn RED 0000", Color.RED)
        with pytest.raises(IntegrityError):
            repo.create_barn("Barn RED 0000", Color.RED)

    def test_delete_barn(self, repo: FarmRepository) -> None:
        barn = repo.create_barn("Barn RED 0000", Color.RED)
        repo.delete_barn(barn)
        assert repo.count_barns() == 0

    def test_delete_barns(self, repo: FarmRepository) -> None:
        barns = [repo.create_barn(f"Barn RED {i:04d}", Color.RED) for i in range(3)]
        keep = repo.create_barn("Barn BLUE 0000", Color.BLUE)
        repo.delete_barns(barns)
        assert repo.find_all_barns() == [keep]

    def test_delete_barns_empty_is_noop(self, repo: FarmRepository) -> None:
        repo.create_barn("Barn RED 0000", Color.RED)
        repo.delete_barns([])
        assert repo.count_barns() == 1

    def test_occupancy_includes_empty_barns(self, repo: FarmRepository) -> None:
        full = repo.create_barn("Barn RED 0000", Color.RED)
        empty = repo.create_barn("Barn RED 0001", Color.RED)
        for i in range(2):
            repo.save_animal(repo.create_animal(f"A{i}", Color.RED).assigned_to(full))
        assert repo.barn_occupancy(Color.RED) == {full.id: 2, empty.id: 0}

    def test_count_barns_by_color(self, repo: FarmRepository) -> None:
        repo.create_barn("Barn RED 0000", Color.RED)
        repo.create_barn("Barn BLUE 0000", Color.BLUE)
        assert repo.count_barns(Color.RED) == 1
        assert repo.count_barns() == 2


class TestAnimals:
    def test_create_animal_unassigned(self, repo: FarmRepository) -> None:
        animal = repo.create_animal("Daisy", Color.RED)
        assert animal.barn_id is None
        assert repo.get_animal(animal.id) == animal

    def test_get_missing_animal(self, repo: FarmRepository) -> None:
        assert repo.get_animal(999) is None

    def test_find_animals_by_color_ordered_by_id(self, repo: FarmRepository) -> None:
        first = repo.create_animal("A", Color.RED)
        repo.create_animal("B", Color.BLUE)
        third = repo.create_animal("C", Color.RED)
        assert [a.id for a in repo.find_animals_by_color(Color.RED)] == [first.id, third.id]

    def test_save_animal_persists_barn(self, repo: FarmRepository) -> None:
        barn = repo.create_barn("Barn RED 0000", Color.RED)
        animal = repo.create_animal("Daisy", Color.RED)
        repo.save_animal(animal.assigned_to(barn))
        assert repo.find_animals_by_barn(barn) == [animal.assigned_to(barn)]

    def test_save_animals_bulk(self, repo: FarmRepository) -> None:
        barn = repo.create_barn("Barn RED 0000", Color.RED)
        animals = [repo.create_animal(f"A{i}", Color.RED) for i in range(4)]
        repo.save_animals([a.assigned_to(barn) for a in animals])
        assert len(repo.find_animals_by_barn(barn)) == 4
        repo.save_animals([a.unassigned() for a in animals])
        assert repo.find_animals_by_barn(barn) == []

    def test_barn_reference_enforced(self, repo: FarmRepository) -> None:
        barn = repo.create_barn("Barn RED 0000", Color.RED)
        repo.save_animal(repo.create_animal("Daisy", Color.RED).assigned_to(barn))
        with pytest.raises(IntegrityError):
            repo.delete_barn(barn)

    def test_delete_animal(self, repo: FarmRepository) -> None:
        animal = repo.create_animal("Daisy", Color.RED)
        repo.delete_animal(animal)
        assert repo.count_animals() == 0

    def test_count_animals_by_color(self, repo: FarmRepository) -> None:
        repo.create_animal("A", Color.RED)
        repo.create_animal("B", Color.BLUE)
        assert repo.count_animals(Color.BLUE) == 1

    def test_delete_all(self, repo: FarmRepository) -> None:
        barn = repo.create_barn("Barn RED 0000", Color.RED)
        repo.save_animal(repo.create_animal("Daisy", Color.RED).assigned_to(barn))
        repo.create_animal("Stray", Color.BLUE)
        assert repo.delete_all() == (2, 1)
        assert repo.count_animals() == 0
        assert repo.count_barns() == 0
