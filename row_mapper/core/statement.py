"""Prepared statement cache.

A PreparedStatement is created once per distinct generated SQL text and
reused for the lifetime of its cache. Preparation converts placeholders
to the driver's paramstyle and records the placeholder count used by the
value-count check.

The cache never evicts: generated SQL comes from a small number of
shapes per entity (operation, filter keys, options), not from query
volume.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from row_mapper.core.exceptions import EngineExecutionError, ParameterCountError
from row_mapper.core.params import count_placeholders, normalize_placeholders

logger = logging.getLogger("row_mapper.statement")


class PreparedStatement:
    """A generated SQL statement bound to one driver adapter."""

    def __init__(self, sql: str, adapter: Any) -> None:
        self.sql = sql
        self.native_sql = normalize_placeholders(sql, adapter.paramstyle)
        self.placeholder_count = count_placeholders(sql)
        self._adapter = adapter

    def execute(self, connection: Any, values: Sequence[Any]) -> Any:
        """Bind *values* positionally and execute on *connection*.

        Returns:
            The driver cursor.

        Raises:
            ParameterCountError: If the number of values does not match
                the number of placeholders.
            EngineExecutionError: If the driver rejects the statement.
        """
        if len(values) != self.placeholder_count:
            raise ParameterCountError(self.sql, self.placeholder_count, len(values))
        try:
            return self._adapter.execute(connection, self.native_sql, tuple(values))
        except self._adapter.error_types as e:
            raise EngineExecutionError(self.sql, str(e)) from e

    def __repr__(self) -> str:
        return f"PreparedStatement({self.sql!r})"


class StatementCache:
    """Maps generated SQL text to its PreparedStatement."""

    def __init__(self, adapter: Any) -> None:
        self._adapter = adapter
        self._statements: dict[str, PreparedStatement] = {}

    def get(self, sql: str) -> PreparedStatement:
        """Return the statement for *sql*, preparing it on first use."""
        statement = self._statements.get(sql)
        if statement is None:
            logger.debug("Preparing statement: %s", sql)
            statement = PreparedStatement(sql, self._adapter)
            self._statements[sql] = statement
        return statement

    def __contains__(self, sql: object) -> bool:
        return sql in self._statements

    def __len__(self) -> int:
        return len(self._statements)
