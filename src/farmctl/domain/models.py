"""Farm records — animals and the barns that house them.

Both models are frozen. The storage layer owns the persisted rows;
updates produce new instances (``Animal.assigned_to`` / ``Animal.unassigned``)
which are written back through the store.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from farmctl.domain.types import Color


class Barn(BaseModel):
    """A barn holding animals of a single favorite color."""

    model_config = {"frozen": True}

    id: int
    name: str
    color: Color
    capacity: int = Field(gt=0)


class Animal(BaseModel):
    """An animal, optionally assigned to a barn of its favorite color.

    Attributes:
        barn_id: Id of the housing barn, or None while unassigned.
    """

    model_config = {"frozen": True}

    id: int
    name: str
    favorite_color: Color
    barn_id: int | None = None

    def assigned_to(self, barn: Barn) -> Animal:
        """Return a copy of this animal housed in *barn*."""
        return self.model_copy(update={"barn_id": barn.id})

    def unassigned(self) -> Animal:
        """Return a copy of this animal with no barn."""
        return self.model_copy(update={"barn_id": None})
