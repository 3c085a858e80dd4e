"""SQL statement builder.

Composes SELECT, INSERT, UPDATE and DELETE statements for one entity
descriptor. Identifiers come from the validated descriptor (or are
validated here, for filter keys); values are always returned separately
for positional binding and never interpolated. LIMIT and OFFSET are the
exception: they are rendered as integers, so each distinct value yields a
distinct statement text.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, NonNegativeInt

from row_mapper.core.exceptions import MissingPrimaryKeyError, ParameterCountError
from row_mapper.core.params import flatten_values
from row_mapper.core.sanitizer import sanitize_order, validate_identifier
from row_mapper.mapping.descriptor import EntityDescriptor
from row_mapper.sql.joins import resolve_joins

_ALWAYS_TRUE = "(1 = 1)"


class QueryOptions(BaseModel):
    """Ordering and paging for query()."""

    order: str | None = None
    limit: NonNegativeInt | None = None
    offset: NonNegativeInt | None = None


@dataclass(frozen=True)
class BuiltStatement:
    """Generated SQL text and the flat positional values to bind."""

    sql: str
    values: tuple[Any, ...] = ()


class SQLBuilder:
    """Generates statements for a single entity descriptor."""

    def __init__(self, descriptor: EntityDescriptor) -> None:
        self.descriptor = descriptor

    def _qualified_fields(self) -> list[str]:
        table = self.descriptor.table
        return [f"{table}.{name}" for name in self.descriptor.fields]

    def _select(self, where: str, leading: Sequence[Any]) -> tuple[str, list[Any]]:
        """Render the SELECT and flatten the values bound by its joins.

        Raises:
            ParameterCountError: If *leading* does not supply exactly one
                value per ``?`` join condition.
        """
        resolution = resolve_joins(self.descriptor, self._qualified_fields())
        bound = flatten_values(leading)
        if len(bound) != resolution.bound_parameter_count:
            raise ParameterCountError(
                resolution.clause or self.descriptor.table,
                resolution.bound_parameter_count,
                len(bound),
            )
        sql = "SELECT {fields} FROM {source} WHERE {where}".format(
            fields=", ".join(resolution.fields),
            source=resolution.source(self.descriptor.table),
            where=where,
        )
        return sql, bound

    def select(
        self,
        filters: Mapping[str, Any],
        options: QueryOptions | Mapping[str, Any] | None = None,
        leading: Sequence[Any] = (),
    ) -> BuiltStatement:
        """Build a multi-row SELECT.

        Args:
            filters: ``{field: value}`` equality filters. Keys without a
                ``.`` are qualified with the base table.
            options: Ordering and paging.
            leading: Values bound before the filter values, for ``?`` join
                conditions.
        """
        if not isinstance(options, QueryOptions):
            options = QueryOptions.model_validate(options or {})

        table = self.descriptor.table
        terms: list[str] = []
        values: list[Any] = []
        for key, value in filters.items():
            validate_identifier(key, "filter field")
            if "." not in key:
                key = f"{table}.{key}"
            terms.append(f"{key} = ?")
            values.append(value)

        sql, bound = self._select(" AND ".join(terms) if terms else _ALWAYS_TRUE, leading)
        if options.order is not None:
            order = sanitize_order(options.order).strip()
            if order:
                sql += f" ORDER BY {order}"
        if options.limit is not None:
            sql += f" LIMIT {int(options.limit)}"
        if options.offset is not None:
            sql += f" OFFSET {int(options.offset)}"
        return BuiltStatement(sql, tuple(bound + flatten_values(values)))

    def load(self, instance: Any, leading: Sequence[Any] = ()) -> BuiltStatement:
        """Build the single-row SELECT for *instance*'s primary key.

        Raises:
            MissingPrimaryKeyError: If any primary-key field is unset.
        """
        table = self.descriptor.table
        terms: list[str] = []
        values: list[Any] = []
        for key in self.descriptor.primary_key:
            value = getattr(instance, key, None)
            if value is None:
                raise MissingPrimaryKeyError(table, key)
            terms.append(f"{table}.{key} = ?")
            values.append(value)
        sql, bound = self._select(" AND ".join(terms), leading)
        return BuiltStatement(sql, tuple(bound + flatten_values(values)))

    def insert(self, instance: Any) -> BuiltStatement:
        """Build an INSERT of every writable field *instance* holds a value for.

        Unset and ``None`` fields are left out so database defaults apply.
        """
        columns: list[str] = []
        values: list[Any] = []
        for name in self.descriptor.writable_fields:
            if not hasattr(instance, name):
                continue
            value = getattr(instance, name)
            if value is None:
                continue
            columns.append(name)
            values.append(value)

        table = self.descriptor.table
        if not columns:
            return BuiltStatement(f"INSERT INTO {table} DEFAULT VALUES")
        sql = "INSERT INTO {table} ({columns}) VALUES ({placeholders})".format(
            table=table,
            columns=", ".join(columns),
            placeholders=", ".join("?" for _ in columns),
        )
        return BuiltStatement(sql, tuple(flatten_values(values)))

    def update(self, instance: Any) -> BuiltStatement:
        """Build an UPDATE touching every writable field present on *instance*.

        ``None`` values are written as a literal ``NULL``.
        """
        assignments: list[str] = []
        values: list[Any] = []
        for name in self.descriptor.writable_fields:
            if not hasattr(instance, name):
                continue
            value = getattr(instance, name)
            if value is None:
                assignments.append(f"{name} = NULL")
            else:
                assignments.append(f"{name} = ?")
                values.append(value)

        where, key_values = self._primary_key_terms(instance)
        sql = f"UPDATE {self.descriptor.table} SET {', '.join(assignments)} WHERE {where}"
        return BuiltStatement(sql, tuple(flatten_values(values + key_values)))

    def delete(self, instance: Any) -> BuiltStatement:
        """Build a DELETE by primary key."""
        where, key_values = self._primary_key_terms(instance)
        sql = f"DELETE FROM {self.descriptor.table} WHERE {where}"
        return BuiltStatement(sql, tuple(flatten_values(key_values)))

    def _primary_key_terms(self, instance: Any) -> tuple[str, list[Any]]:
        keys = self.descriptor.primary_key
        where = " AND ".join(f"{key} = ?" for key in keys)
        return where, [getattr(instance, key, None) for key in keys]
