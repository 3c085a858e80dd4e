"""Backend and relationship enumerations."""

from __future__ import annotations

from enum import Enum


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    ORACLE = "oracle"


class JoinKind(Enum):
    """Relationship categories, in the order their joins are emitted."""

    REQUIRE = "require"
    INCLUDE = "include"

    @property
    def keyword(self) -> str:
        return "JOIN" if self is JoinKind.REQUIRE else "LEFT JOIN"
