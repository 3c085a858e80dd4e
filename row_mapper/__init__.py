"""RowMapper - declarative entity mapping onto generated, parameterized SQL."""

from __future__ import annotations

from row_mapper.core.connection import ConnectionConfig, ConnectionManager
from row_mapper.core.engine import Engine, Outcome
from row_mapper.core.enums import DatabaseBackend, JoinKind
from row_mapper.core.exceptions import (
    AdapterError,
    ColumnMismatchError,
    ConnectionError,  # noqa: A004
    DescriptorError,
    EngineExecutionError,
    ExecutionError,
    MappingError,
    MissingPrimaryKeyError,
    ParameterCountError,
    PoolError,
    RowMapperError,
    SQLSanitizationError,
    UnsupportedFeatureError,
)
from row_mapper.core.statement import PreparedStatement, StatementCache
from row_mapper.mapping.builder import EntityDescriptorBuilder, descriptor_from_metadata, entity
from row_mapper.mapping.descriptor import EntityDescriptor, JoinCondition, JoinSpec
from row_mapper.mapping.entity import Entity
from row_mapper.mapping.model import EntityMapper
from row_mapper.repository.base import EntityAdapter
from row_mapper.sql.builder import QueryOptions, SQLBuilder

__all__ = [
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    # Engine
    "Engine",
    "Outcome",
    "StatementCache",
    "PreparedStatement",
    # Descriptors
    "entity",
    "descriptor_from_metadata",
    "EntityDescriptorBuilder",
    "EntityDescriptor",
    "JoinSpec",
    "JoinCondition",
    # Entities
    "Entity",
    "EntityMapper",
    "EntityAdapter",
    # SQL
    "SQLBuilder",
    "QueryOptions",
    # Enums
    "DatabaseBackend",
    "JoinKind",
    # Exceptions
    "RowMapperError",
    "DescriptorError",
    "ExecutionError",
    "EngineExecutionError",
    "ParameterCountError",
    "MissingPrimaryKeyError",
    "SQLSanitizationError",
    "MappingError",
    "ColumnMismatchError",
    "AdapterError",
    "ConnectionError",
    "PoolError",
    "UnsupportedFeatureError",
]
