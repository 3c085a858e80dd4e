"""Entity descriptor DSL builder.

Provides a fluent builder for declaring an entity's table, fields,
primary key, relationships and computed fields, and for loading the same
information from a nested metadata mapping.
"""

from __future__ import annotations

import dataclasses
import inspect
from collections.abc import Mapping
from typing import Any

from row_mapper.core.enums import JoinKind
from row_mapper.core.exceptions import DescriptorError, SQLSanitizationError
from row_mapper.core.sanitizer import validate_identifier
from row_mapper.mapping.descriptor import EntityDescriptor, JoinSpec
from row_mapper.mapping.metadata import coerce_conditions, computed_fields, iter_relationships


def _get_field_names(cls: type) -> list[str]:
    """Extract field names from a class (dataclass, Pydantic, annotated or plain)."""
    # Pydantic model
    if hasattr(cls, "model_fields"):
        return list(cls.model_fields.keys())

    # Dataclass
    if dataclasses.is_dataclass(cls):
        return [f.name for f in dataclasses.fields(cls)]

    # Annotated class attributes, base classes first
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        for name, hint in inspect.get_annotations(klass).items():
            if name.startswith("_") or name in names:
                continue
            if "ClassVar" in str(hint):
                continue
            names.append(name)
    if names:
        return names

    # Plain class - use __init__ parameters
    try:
        sig = inspect.signature(cls.__init__)  # type: ignore[misc]
        return [
            name
            for name, param in sig.parameters.items()
            if name != "self"
            and param.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        ]
    except (ValueError, TypeError):
        return []


def entity(table: str) -> EntityDescriptorBuilder:
    """Entry point for the entity descriptor DSL.

    Args:
        table: The base table identifier.

    Returns:
        A builder for chaining declarations.
    """
    return EntityDescriptorBuilder(table)


class EntityDescriptorBuilder:
    """Fluent builder for entity descriptors."""

    def __init__(self, table: str) -> None:
        self._table = table
        self._fields: list[str] = []
        self._key_fields: list[str] = []
        self._joins: list[tuple[JoinKind, str, Any]] = []
        self._computed: dict[str, str] = {}

    @classmethod
    def from_metadata(
        cls,
        table: str,
        fields: list[str] | tuple[str, ...],
        primary_key: list[str] | tuple[str, ...],
        metadata: Mapping[str, Any] | None = None,
    ) -> EntityDescriptorBuilder:
        """Seed a builder from class-level and per-property metadata."""
        builder = cls(table).fields(*fields).key(*primary_key)
        metadata = metadata or {}
        for kind, join_table, conditions in iter_relationships(metadata.get("class") or {}):
            builder._joins.append((kind, join_table, conditions))
        for name, expression in computed_fields(metadata.get("properties") or {}).items():
            builder.computed(name, expression)
        return builder

    def fields(self, *names: str) -> EntityDescriptorBuilder:
        """Declare fields, in column order."""
        for name in names:
            if name not in self._fields:
                self._fields.append(name)
        return self

    def auto_fields(self, entity_class: type) -> EntityDescriptorBuilder:
        """Declare every field of *entity_class* by attribute name."""
        return self.fields(*_get_field_names(entity_class))

    def key(self, *names: str) -> EntityDescriptorBuilder:
        """Set the primary key field(s), in declaration order."""
        self._key_fields = list(names)
        return self

    def require(self, table: str, conditions: Any) -> EntityDescriptorBuilder:
        """Declare an inner-joined relationship."""
        self._joins.append((JoinKind.REQUIRE, table, conditions))
        return self

    def include(self, table: str, conditions: Any) -> EntityDescriptorBuilder:
        """Declare a left-joined relationship."""
        self._joins.append((JoinKind.INCLUDE, table, conditions))
        return self

    def computed(self, name: str, expression: str) -> EntityDescriptorBuilder:
        """Select *name* from an SQL expression instead of the base column."""
        self._computed[name] = expression
        return self

    def build(self) -> EntityDescriptor:
        """Validate the declarations and compile an EntityDescriptor."""
        try:
            table = validate_identifier(self._table, "table identifier")
            for name in self._fields:
                validate_identifier(name, "field name")
                if "." in name:
                    raise DescriptorError(f"Field names must be unqualified: {name!r}")
        except SQLSanitizationError as e:
            raise DescriptorError(str(e)) from e

        if not self._fields:
            raise DescriptorError(f"Entity '{table}' declares no fields")

        primary_key = list(self._key_fields)
        if not primary_key:
            if "id" not in self._fields:
                raise DescriptorError(f"Entity '{table}' needs a primary key set via .key()")
            primary_key = ["id"]
        for name in primary_key:
            if name not in self._fields:
                raise DescriptorError(f"Primary key field '{name}' is not a field of '{table}'")

        for name in self._computed:
            if name not in self._fields:
                raise DescriptorError(f"Computed field '{name}' is not a field of '{table}'")

        joins: list[JoinSpec] = []
        for kind, join_table, conditions in self._joins:
            if not isinstance(join_table, str):
                raise DescriptorError(f"Relationship without a table identifier: {join_table!r}")
            try:
                validate_identifier(join_table, "join table identifier")
            except SQLSanitizationError as e:
                raise DescriptorError(str(e)) from e
            joins.append(
                JoinSpec(kind=kind, table=join_table, conditions=coerce_conditions(conditions))
            )

        return EntityDescriptor(
            table=table,
            fields=tuple(self._fields),
            primary_key=tuple(primary_key),
            joins=tuple(joins),
            computed=dict(self._computed),
        )


def descriptor_from_metadata(
    table: str,
    fields: list[str] | tuple[str, ...],
    primary_key: list[str] | tuple[str, ...],
    metadata: Mapping[str, Any] | None = None,
) -> EntityDescriptor:
    """Build an EntityDescriptor from a nested metadata mapping."""
    return EntityDescriptorBuilder.from_metadata(table, fields, primary_key, metadata).build()
