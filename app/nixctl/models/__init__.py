"""Data models for nixctl.

This module exports the core data structures used throughout the application.
"""

from nixctl.models.generation import DeleteConstraints, Generation

__all__ = [
    "DeleteConstraints",
    "Generation",
]
