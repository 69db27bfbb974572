"""Domain layer — colors, farm records, and sizing rules.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
