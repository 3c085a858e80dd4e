"""Database driver adapter protocol.

Every adapter module MUST implement this protocol so the statement layer
and the entity adapter stay backend-agnostic.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from row_mapper.core.connection import ConnectionConfig


@runtime_checkable
class SyncAdapter(Protocol):
    """Synchronous database adapter protocol."""

    @property
    def paramstyle(self) -> str:
        """Placeholder style: 'qmark' (?), 'format' (%s) or 'numeric' (:1)."""
        ...

    @property
    def error_types(self) -> tuple[type[BaseException], ...]:
        """Driver exception classes that signal an execution failure."""
        ...

    def create_pool(self, config: ConnectionConfig) -> Any:
        """Create a connection pool."""
        ...

    def acquire_connection(self, pool: Any) -> Any:
        """Acquire a connection from the pool."""
        ...

    def release_connection(self, connection: Any, pool: Any) -> None:
        """Release a connection back to the pool."""
        ...

    def close_pool(self, pool: Any) -> None:
        """Close the pool and release all connections."""
        ...

    def execute(
        self,
        connection: Any,
        sql: str,
        params: tuple[Any, ...] = (),
    ) -> Any:
        """Execute SQL with positional params and return a cursor-like object."""
        ...

    def last_insert_id(self, connection: Any, cursor: Any, table: str) -> Any:
        """Return the identifier generated by the last insert on *connection*.

        Raises:
            UnsupportedFeatureError: If the backend cannot report it.
        """
        ...
