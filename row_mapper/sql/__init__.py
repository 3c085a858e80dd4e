"""SQL generation - statement builder and join resolution."""

from __future__ import annotations

from row_mapper.sql.builder import BuiltStatement, QueryOptions, SQLBuilder
from row_mapper.sql.joins import JoinResolution, resolve_joins

__all__ = [
    "SQLBuilder",
    "BuiltStatement",
    "QueryOptions",
    "resolve_joins",
    "JoinResolution",
]
