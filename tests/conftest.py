"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from row_mapper.core.connection import ConnectionConfig, ConnectionManager

SCHEMA = [
    "CREATE TABLE groups (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL)",
    "CREATE TABLE users ("
    " id INTEGER PRIMARY KEY AUTOINCREMENT,"
    " name TEXT NOT NULL,"
    " group_id INTEGER REFERENCES groups(id),"
    " created_at TEXT NOT NULL DEFAULT '2024-01-01')",
    "CREATE TABLE memberships ("
    " user_id INTEGER NOT NULL,"
    " group_id INTEGER NOT NULL,"
    " role TEXT,"
    " PRIMARY KEY (user_id, group_id))",
]


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config."""
    return ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)


@pytest.fixture
def manager(sqlite_config: ConnectionConfig) -> Iterator[ConnectionManager]:
    """Connection manager over an in-memory database with the test schema.

    Seeds two groups: 1 = admins, 2 = staff.
    """
    manager = ConnectionManager(sqlite_config)
    with manager.get_connection() as conn:
        for statement in SCHEMA:
            conn.execute(statement)
        conn.execute("INSERT INTO groups (name) VALUES ('admins'), ('staff')")
        conn.commit()
    yield manager
    manager.close_pool()
