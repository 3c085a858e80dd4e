"""Unit tests for the Engine against an in-memory SQLite database."""

from __future__ import annotations

import sqlite3
from typing import Any

import pytest

from row_mapper.adapters.sqlite import SqliteAdapter
from row_mapper.core.connection import ConnectionConfig, ConnectionManager
from row_mapper.core.engine import Engine, Outcome
from row_mapper.core.exceptions import EngineExecutionError, UnsupportedFeatureError


@pytest.fixture
def engine(manager: ConnectionManager) -> Engine:
    return Engine(manager)


class TestEngine:
    def test_new_engine_has_empty_cache(self, sqlite_config: ConnectionConfig) -> None:
        engine = Engine(ConnectionManager(sqlite_config))
        assert engine.adapter.paramstyle == "qmark"
        assert len(engine.statements) == 0

    def test_fetch_all(self, engine: Engine) -> None:
        with engine.connection() as conn:
            rows = engine.fetch_all(conn, "SELECT groups.id, groups.name FROM groups ORDER BY id", ())
        assert rows == [{"id": 1, "name": "admins"}, {"id": 2, "name": "staff"}]

    def test_fetch_one(self, engine: Engine) -> None:
        with engine.connection() as conn:
            row = engine.fetch_one(conn, "SELECT name FROM groups WHERE id = ?", (2,))
            missing = engine.fetch_one(conn, "SELECT name FROM groups WHERE id = ?", (9,))
        assert row == {"name": "staff"}
        assert missing is None

    def test_statements_cached_by_text(self, engine: Engine) -> None:
        with engine.connection() as conn:
            engine.fetch_one(conn, "SELECT name FROM groups WHERE id = ?", (1,))
            engine.fetch_one(conn, "SELECT name FROM groups WHERE id = ?", (2,))
        assert len(engine.statements) == 1

    def test_execute_commits(self, engine: Engine) -> None:
        with engine.connection() as conn:
            engine.execute(conn, "INSERT INTO groups (name) VALUES (?)", ("ops",))
            conn.rollback()
            row = engine.fetch_one(conn, "SELECT COUNT(*) AS n FROM groups", ())
        assert row == {"n": 3}

    def test_last_insert_id(self, engine: Engine) -> None:
        with engine.connection() as conn:
            cursor = engine.execute(conn, "INSERT INTO groups (name) VALUES (?)", ("ops",))
            assert engine.last_insert_id(conn, cursor, "groups") == 3

    def test_failure_raises_and_rolls_back(self, engine: Engine) -> None:
        with engine.connection() as conn:
            conn.execute("INSERT INTO groups (name) VALUES ('pending')")
            with pytest.raises(EngineExecutionError) as exc_info:
                engine.execute(conn, "INSERT INTO groups (name) VALUES (?)", (None,))
            assert "NOT NULL" in str(exc_info.value)
            row = engine.fetch_one(conn, "SELECT COUNT(*) AS n FROM groups", ())
        assert row == {"n": 2}

    def test_attempt_success(self) -> None:
        outcome = Engine.attempt(lambda a, b: a + b, 1, 2)
        assert outcome == Outcome(value=3)
        assert outcome.ok

    def test_attempt_failure(self, engine: Engine) -> None:
        with engine.connection() as conn:
            outcome = engine.attempt(engine.fetch_all, conn, "SELECT * FROM nowhere", ())
        assert not outcome.ok
        assert outcome.value is None
        assert isinstance(outcome.error, EngineExecutionError)

    def test_attempt_lets_other_errors_through(self) -> None:
        def broken() -> None:
            raise KeyError("x")

        with pytest.raises(KeyError):
            Engine.attempt(broken)


class DeniedInsertIdAdapter(SqliteAdapter):
    def last_insert_id(self, connection: Any, cursor: Any, table: str) -> Any:
        raise sqlite3.OperationalError("permission denied for sequence")


class NoInsertIdAdapter(SqliteAdapter):
    def last_insert_id(self, connection: Any, cursor: Any, table: str) -> Any:
        raise UnsupportedFeatureError("last insert id", "test")


class TestLastInsertIdFailure:
    @pytest.mark.parametrize(
        ("adapter", "error"),
        [
            (DeniedInsertIdAdapter(), EngineExecutionError),
            (NoInsertIdAdapter(), UnsupportedFeatureError),
        ],
    )
    def test_failed_lookup_rolls_back(
        self, sqlite_config: ConnectionConfig, adapter: SqliteAdapter, error: type[Exception]
    ) -> None:
        manager = ConnectionManager(sqlite_config, adapter=adapter)
        engine = Engine(manager)
        with engine.connection() as conn:
            conn.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, v TEXT)")
            conn.commit()
            conn.execute("INSERT INTO t (v) VALUES ('pending')")
            assert conn.in_transaction
            with pytest.raises(error):
                engine.last_insert_id(conn, None, "t")
            assert not conn.in_transaction
            row = engine.fetch_one(conn, "SELECT COUNT(*) AS n FROM t", ())
        assert row == {"n": 0}
        manager.close_pool()

    def test_driver_error_chained(self, sqlite_config: ConnectionConfig) -> None:
        manager = ConnectionManager(sqlite_config, adapter=DeniedInsertIdAdapter())
        engine = Engine(manager)
        with engine.connection() as conn:
            with pytest.raises(EngineExecutionError) as exc_info:
                engine.last_insert_id(conn, None, "t")
        assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)
        manager.close_pool()
