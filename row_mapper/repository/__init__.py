"""Repository layer - the per-entity adapter façade."""

from __future__ import annotations

from row_mapper.repository.base import EntityAdapter

__all__ = [
    "EntityAdapter",
]
