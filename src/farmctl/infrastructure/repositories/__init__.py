"""Repositories — SQL encapsulated behind record-level operations."""
