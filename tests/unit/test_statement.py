"""Unit tests for PreparedStatement and StatementCache."""

from __future__ import annotations

from typing import Any

import pytest

from row_mapper.core.exceptions import EngineExecutionError, ParameterCountError
from row_mapper.core.statement import PreparedStatement, StatementCache


class DriverError(Exception):
    pass


class RecordingAdapter:
    """Adapter stand-in that records what reaches the driver."""

    def __init__(self, paramstyle: str = "qmark", fail: bool = False) -> None:
        self._paramstyle = paramstyle
        self.fail = fail
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    @property
    def paramstyle(self) -> str:
        return self._paramstyle

    @property
    def error_types(self) -> tuple[type[BaseException], ...]:
        return (DriverError,)

    def execute(self, connection: Any, sql: str, params: tuple[Any, ...] = ()) -> str:
        if self.fail:
            raise DriverError("no such table: t")
        self.calls.append((sql, params))
        return "cursor"


class TestPreparedStatement:
    def test_native_sql_for_format_drivers(self) -> None:
        statement = PreparedStatement("SELECT a FROM t WHERE a = ? AND b LIKE 'x%'", RecordingAdapter("format"))
        assert statement.native_sql == "SELECT a FROM t WHERE a = %s AND b LIKE 'x%%'"
        assert statement.placeholder_count == 1

    def test_native_sql_for_numeric_drivers(self) -> None:
        statement = PreparedStatement("UPDATE t SET a = ? WHERE b = ?", RecordingAdapter("numeric"))
        assert statement.native_sql == "UPDATE t SET a = :1 WHERE b = :2"

    def test_executes_with_positional_values(self) -> None:
        adapter = RecordingAdapter()
        statement = PreparedStatement("SELECT a FROM t WHERE a = ?", adapter)
        assert statement.execute(object(), [5]) == "cursor"
        assert adapter.calls == [("SELECT a FROM t WHERE a = ?", (5,))]

    def test_too_few_values(self) -> None:
        adapter = RecordingAdapter()
        statement = PreparedStatement("SELECT a FROM t WHERE a = ? AND b = ?", adapter)
        with pytest.raises(ParameterCountError) as exc_info:
            statement.execute(object(), [1])
        assert exc_info.value.expected == 2
        assert exc_info.value.got == 1
        assert adapter.calls == []

    def test_too_many_values(self) -> None:
        statement = PreparedStatement("SELECT a FROM t", RecordingAdapter())
        with pytest.raises(ParameterCountError):
            statement.execute(object(), [1])

    def test_placeholder_inside_literal_not_counted(self) -> None:
        statement = PreparedStatement("SELECT a FROM t WHERE b = '?'", RecordingAdapter())
        assert statement.placeholder_count == 0
        statement.execute(object(), [])

    def test_driver_error_wrapped(self) -> None:
        statement = PreparedStatement("SELECT a FROM t", RecordingAdapter(fail=True))
        with pytest.raises(EngineExecutionError) as exc_info:
            statement.execute(object(), [])
        assert exc_info.value.sql == "SELECT a FROM t"
        assert isinstance(exc_info.value.__cause__, DriverError)


class TestStatementCache:
    def test_same_text_same_statement(self) -> None:
        cache = StatementCache(RecordingAdapter())
        first = cache.get("SELECT a FROM t")
        assert cache.get("SELECT a FROM t") is first
        assert len(cache) == 1

    def test_distinct_text_distinct_statement(self) -> None:
        cache = StatementCache(RecordingAdapter())
        first = cache.get("SELECT a FROM t LIMIT 1")
        second = cache.get("SELECT a FROM t LIMIT 2")
        assert first is not second
        assert len(cache) == 2
        assert "SELECT a FROM t LIMIT 1" in cache
        assert "SELECT a FROM t" not in cache

    def test_failed_execution_keeps_entry(self) -> None:
        adapter = RecordingAdapter(fail=True)
        cache = StatementCache(adapter)
        with pytest.raises(EngineExecutionError):
            cache.get("SELECT a FROM t").execute(object(), [])
        assert "SELECT a FROM t" in cache
