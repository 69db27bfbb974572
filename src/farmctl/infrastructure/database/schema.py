"""SQLAlchemy Core table definitions for the farmctl database."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Index, Integer, MetaData, Table, Text

metadata = MetaData()

barns = Table(
    "barns",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False, unique=True),
    Column("color", Text, nullable=False),
    Column("capacity", Integer, nullable=False),
)

animals = Table(
    "animals",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("favorite_color", Text, nullable=False),
    Column("barn_id", Integer, ForeignKey("barns.id")),  # NULL while unassigned
)

Index("ix_barns_color", barns.c.color)
Index("ix_animals_favorite_color", animals.c.favorite_color)
Index("ix_animals_barn_id", animals.c.barn_id)
