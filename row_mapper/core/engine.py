"""Statement execution engine.

The Engine runs generated statements through its StatementCache on a
connection from the ConnectionManager and converts cursor results to row
dicts. Driver failures surface as EngineExecutionError; ``attempt`` turns
them into an explicit Outcome for callers that report success as a flag.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from row_mapper.core.connection import ConnectionManager
from row_mapper.core.exceptions import EngineExecutionError, UnsupportedFeatureError
from row_mapper.core.statement import StatementCache

T = TypeVar("T")

logger = logging.getLogger("row_mapper.engine")


def _rows_to_dicts(cursor: Any) -> list[dict[str, Any]]:
    """Convert cursor results to list of dicts.

    Handles both tuple-like rows and dict-like rows from different adapters.
    """
    if cursor.description is None:
        return []
    columns = [desc[0] for desc in cursor.description]
    rows = cursor.fetchall()
    if not rows:
        return []

    # Check if rows are already dict-like (e.g., psycopg dict_row, MySQL dict cursor)
    if isinstance(rows[0], dict):
        return [dict(row) for row in rows]

    # Tuple-like rows, zip with columns
    return [dict(zip(columns, row, strict=True)) for row in rows]


def _row_to_dict(cursor: Any) -> dict[str, Any] | None:
    """Convert the first cursor row to dict, or None."""
    if cursor.description is None:
        return None
    columns = [desc[0] for desc in cursor.description]
    row = cursor.fetchone()
    if row is None:
        return None

    if isinstance(row, dict):
        return dict(row)

    return dict(zip(columns, row, strict=True))


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either the value of a completed operation or the error that stopped it."""

    value: T | None = None
    error: EngineExecutionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Engine:
    """Synchronous statement execution engine with a private statement cache."""

    def __init__(self, connection_manager: ConnectionManager) -> None:
        self._connection_manager = connection_manager
        self._adapter = connection_manager.adapter
        self.statements = StatementCache(self._adapter)

    @property
    def adapter(self) -> Any:
        return self._adapter

    @property
    def connection_manager(self) -> ConnectionManager:
        return self._connection_manager

    def connection(self):  # type: ignore[no-untyped-def]
        """Context manager yielding a pooled connection."""
        return self._connection_manager.get_connection()

    @contextmanager
    def _rollback_on_error(
        self, connection: Any, *also: type[BaseException]
    ) -> Iterator[None]:
        try:
            yield
        except (EngineExecutionError, *also):
            # leave the connection usable for the next statement
            connection.rollback()
            raise

    def fetch_all(self, connection: Any, sql: str, values: tuple[Any, ...]) -> list[dict[str, Any]]:
        """Execute a SELECT and return every row."""
        statement = self.statements.get(sql)
        with self._rollback_on_error(connection):
            cursor = statement.execute(connection, values)
            return _rows_to_dicts(cursor)

    def fetch_one(self, connection: Any, sql: str, values: tuple[Any, ...]) -> dict[str, Any] | None:
        """Execute a SELECT and return its first row, or None."""
        statement = self.statements.get(sql)
        with self._rollback_on_error(connection):
            cursor = statement.execute(connection, values)
            return _row_to_dict(cursor)

    def execute(self, connection: Any, sql: str, values: tuple[Any, ...]) -> Any:
        """Execute a write statement and commit. Returns the cursor."""
        statement = self.statements.get(sql)
        with self._rollback_on_error(connection):
            cursor = statement.execute(connection, values)
            try:
                connection.commit()
            except self._adapter.error_types as e:
                raise EngineExecutionError(sql, f"commit failed: {e}") from e
            return cursor

    def last_insert_id(self, connection: Any, cursor: Any, table: str) -> Any:
        """Identifier generated by the last insert, from the driver adapter.

        A failed lookup rolls the connection back, as a failed statement does.
        """
        with self._rollback_on_error(connection, UnsupportedFeatureError):
            try:
                return self._adapter.last_insert_id(connection, cursor, table)
            except self._adapter.error_types as e:
                raise EngineExecutionError(f"<last insert id of {table}>", str(e)) from e

    @staticmethod
    def attempt(operation: Callable[..., T], *args: Any) -> Outcome[T]:
        """Run *operation*, capturing an EngineExecutionError as a failed Outcome."""
        try:
            return Outcome(value=operation(*args))
        except EngineExecutionError as e:
            logger.warning("%s", e)
            return Outcome(error=e)
