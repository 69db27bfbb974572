"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, farmctl.toml only contains
overrides. A fresh farm needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, PositiveInt

from farmctl.domain.types import Color

DEFAULT_BARN_CAPACITY = 20


class BarnsConfig(BaseModel):
    """[barns] section.

    ``capacity`` applies to every color unless ``[barns.capacities]``
    overrides it for that color.
    """

    model_config = {"frozen": True}

    capacity: PositiveInt = DEFAULT_BARN_CAPACITY
    capacities: dict[Color, PositiveInt] = Field(default_factory=dict)

    def capacity_for(self, color: Color) -> int:
        """Capacity shared by all barns of *color*."""
        return self.capacities.get(color, self.capacity)


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    path: str = ""  # empty: {farm_root}/.farmctl/farmctl.db
    busy_timeout_ms: int = Field(default=5000, ge=0)


class PopulateConfig(BaseModel):
    """[populate] section."""

    model_config = {"frozen": True}

    seed: int | None = None


class FarmConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    barns: BarnsConfig = Field(default_factory=BarnsConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    populate: PopulateConfig = Field(default_factory=PopulateConfig)
