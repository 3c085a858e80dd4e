"""RowMapper exception hierarchy.

All exceptions are RowMapper-specific. Raw driver exceptions are wrapped
in EngineExecutionError at the statement layer and chained, never raised
bare to callers.
"""

from __future__ import annotations


class RowMapperError(Exception):
    """Base exception for all RowMapper errors."""


# --- Descriptor ---


class DescriptorError(RowMapperError):
    """Raised when entity metadata cannot be turned into a descriptor."""


# --- Execution ---


class ExecutionError(RowMapperError):
    """Base for statement building and execution errors."""


class EngineExecutionError(ExecutionError):
    """Raised when the database driver fails to execute a statement.

    Covers malformed SQL, constraint violations and lost connections alike.
    """

    def __init__(self, sql: str, detail: str) -> None:
        self.sql = sql
        self.detail = detail
        super().__init__(f"Execution failed for '{sql}': {detail}")


class ParameterCountError(ExecutionError):
    """Raised when the bound values do not match the statement's placeholders."""

    def __init__(self, sql: str, expected: int, got: int) -> None:
        self.sql = sql
        self.expected = expected
        self.got = got
        super().__init__(f"Statement '{sql}' expects {expected} values, got {got}")


class MissingPrimaryKeyError(ExecutionError):
    """Raised when load() is asked for an entity without its primary key value."""

    def __init__(self, table: str, field: str) -> None:
        self.table = table
        self.field = field
        super().__init__(f"Cannot load from '{table}': primary key field '{field}' is not set")


class SQLSanitizationError(ExecutionError):
    """Raised when an identifier fails validation."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"SQL sanitization failed: {detail}")


# --- Mapping ---


class MappingError(RowMapperError):
    """Base for mapping errors."""


class ColumnMismatchError(MappingError):
    """Raised when row columns cannot be assigned onto the target entity."""

    def __init__(self, target_class: str, columns: list[str]) -> None:
        self.target_class = target_class
        self.columns = columns
        super().__init__(f"Cannot map to {target_class}: unassignable columns {columns}")


# --- Adapter ---


class AdapterError(RowMapperError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""


class PoolError(AdapterError):
    """Raised on connection pool failures."""


class UnsupportedFeatureError(AdapterError):
    """Raised when a backend does not support an optional feature."""

    def __init__(self, feature: str, backend: str) -> None:
        self.feature = feature
        self.backend = backend
        super().__init__(f"{feature} is not supported by the {backend} backend")
