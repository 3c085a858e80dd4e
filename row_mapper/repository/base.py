"""Entity adapter.

The façade that maps one entity type to its table: builds statements
with SQLBuilder, executes them through a private Engine (and statement
cache), and hydrates rows back into entity instances.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Generic, TypeVar

from row_mapper.core.connection import ConnectionConfig, ConnectionManager
from row_mapper.core.engine import Engine, Outcome
from row_mapper.core.exceptions import EngineExecutionError, UnsupportedFeatureError
from row_mapper.core.statement import StatementCache
from row_mapper.mapping.descriptor import EntityDescriptor
from row_mapper.mapping.entity import Trackable
from row_mapper.mapping.model import EntityMapper
from row_mapper.sql.builder import BuiltStatement, QueryOptions, SQLBuilder

T = TypeVar("T")

logger = logging.getLogger("row_mapper.adapter")


class EntityAdapter(Generic[T]):
    """Loads and persists entities described by an EntityDescriptor.

    Query, create, update and delete report engine failures as ``None`` or
    ``False``; the error itself is logged and kept on ``last_error``. Load
    lets them propagate.

    Each adapter owns its statement cache. Adapters are not thread-safe;
    serialize access per instance.

    Args:
        connection_manager: Source of database connections.
        descriptor: The entity's table, fields, key and relationships.
    """

    def __init__(
        self,
        connection_manager: ConnectionManager,
        descriptor: EntityDescriptor,
    ) -> None:
        self._engine = Engine(connection_manager)
        self._builder = SQLBuilder(descriptor)
        self._descriptor = descriptor
        self._parameters: list[Any] = []
        self._last_error: EngineExecutionError | None = None

    @classmethod
    def from_config(cls, config: ConnectionConfig, descriptor: EntityDescriptor) -> EntityAdapter[T]:
        """Create an EntityAdapter from a ConnectionConfig and descriptor."""
        return cls(ConnectionManager(config), descriptor)

    @property
    def descriptor(self) -> EntityDescriptor:
        return self._descriptor

    @property
    def statements(self) -> StatementCache:
        return self._engine.statements

    @property
    def last_error(self) -> EngineExecutionError | None:
        """The engine error absorbed by the most recent operation, if any."""
        return self._last_error

    @property
    def additional_query_parameters(self) -> tuple[Any, ...]:
        return tuple(self._parameters)

    def set_additional_query_parameters(self, parameters: Sequence[Any]) -> None:
        """Values for ``?`` join conditions, bound ahead of query and load filters.

        Query and load raise ParameterCountError unless there is exactly one
        (flattened) value per ``?`` condition.
        """
        self._parameters = list(parameters)

    def _run(self, operation: Callable[..., Any], *args: Any) -> Outcome[Any]:
        outcome = self._engine.attempt(operation, *args)
        self._last_error = outcome.error
        return outcome

    # --- Reads ---

    def query(
        self,
        target: type[T] | T,
        filters: Mapping[str, Any] | None = None,
        options: QueryOptions | Mapping[str, Any] | None = None,
        ctor: Sequence[Any] = (),
    ) -> list[T] | None:
        """Fetch every row matching *filters* as new entity instances.

        Args:
            target: The entity class, or an instance of it.
            filters: ``{field: value}`` equality filters, ANDed together.
                Field names may be qualified with a table (``groups.name``).
            options: ``order``, ``limit`` and ``offset``.
            ctor: Positional constructor arguments for each instance.

        Returns:
            The instances in result order, or None if execution failed.
        """
        entity_class = target if isinstance(target, type) else type(target)
        statement = self._builder.select(filters or {}, options, self._parameters)
        outcome = self._run(self._fetch_all, statement)
        if not outcome.ok:
            return None
        return EntityMapper(entity_class, ctor).map_many(outcome.value)

    def _fetch_all(self, statement: BuiltStatement) -> list[dict[str, Any]]:
        with self._engine.connection() as conn:
            return self._engine.fetch_all(conn, statement.sql, statement.values)

    def load(self, instance: T) -> None:
        """Fill *instance* from the row matching its primary key, then mark it clean.

        Zero matching rows leave the instance as it was.

        Raises:
            MissingPrimaryKeyError: If a primary-key field is unset.
            EngineExecutionError: If the statement fails.
        """
        statement = self._builder.load(instance, self._parameters)
        with self._engine.connection() as conn:
            self._fill(conn, instance, statement)

    def _fill(self, connection: Any, instance: Any, statement: BuiltStatement | None = None) -> None:
        if statement is None:
            statement = self._builder.load(instance, self._parameters)
        row = self._engine.fetch_one(connection, statement.sql, statement.values)
        EntityMapper.fill(instance, row)
        if isinstance(instance, Trackable):
            instance.mark_clean()

    # --- Writes ---

    def create(self, instance: T) -> bool:
        """Insert *instance*, then reload it with database-assigned values.

        For single-column keys left unset, the generated identifier is
        assigned first. Backends that cannot report it skip the reload.
        """
        statement = self._builder.insert(instance)
        with self._engine.connection() as conn:
            outcome = self._run(
                self._engine.execute, conn, statement.sql, statement.values
            )
            if not outcome.ok:
                return False
            if len(self._descriptor.primary_key) == 1:
                self._refresh_created(conn, outcome.value, instance)
        return True

    def _refresh_created(self, connection: Any, cursor: Any, instance: Any) -> None:
        key = self._descriptor.primary_key[0]
        table = self._descriptor.table
        try:
            if getattr(instance, key, None) is None:
                setattr(instance, key, self._engine.last_insert_id(connection, cursor, table))
            self._fill(connection, instance)
        except UnsupportedFeatureError as e:
            logger.debug("Skipping reload after insert into %s: %s", table, e)
        except EngineExecutionError as e:
            logger.warning("Insert into %s succeeded but reload failed: %s", table, e)
            self._last_error = e

    def update(self, instance: T) -> bool:
        """Write every field of *instance* by primary key, then reload it."""
        statement = self._builder.update(instance)
        with self._engine.connection() as conn:
            outcome = self._run(self._update_and_reload, conn, statement, instance)
        return outcome.ok

    def _update_and_reload(self, connection: Any, statement: BuiltStatement, instance: Any) -> None:
        self._engine.execute(connection, statement.sql, statement.values)
        self._fill(connection, instance)

    def delete(self, instance: T) -> bool:
        """Delete the row matching *instance*'s primary key."""
        statement = self._builder.delete(instance)
        with self._engine.connection() as conn:
            outcome = self._run(self._engine.execute, conn, statement.sql, statement.values)
        return outcome.ok
