"""Infrastructure layer — database engine, schema, and repositories.

This layer depends on stdlib, SQLAlchemy, and the domain models.
It must never import from services, commands, or output.
"""
