"""farmctl — color-grouped barn assignment for a farm of animals."""

__version__ = "0.1.0"
