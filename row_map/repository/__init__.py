"""Repository layer - generic CRUD over registered entities."""

from __future__ import annotations

from row_map.repository.base import Repository

__all__ = [
    "Repository",
]
