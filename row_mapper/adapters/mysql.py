"""MySQL adapter using mysql-connector-python."""

from __future__ import annotations

from typing import Any

from row_mapper.core.connection import ConnectionConfig
from row_mapper.core.exceptions import PoolError, UnsupportedFeatureError


class MysqlAdapter:
    """Synchronous MySQL adapter using mysql-connector-python."""

    @property
    def paramstyle(self) -> str:
        return "format"

    @property
    def error_types(self) -> tuple[type[BaseException], ...]:
        import mysql.connector

        return (mysql.connector.Error,)

    def create_pool(self, config: ConnectionConfig) -> list[Any]:
        """Create a pool (list of connections) for MySQL."""
        import mysql.connector

        pool: list[Any] = []
        for _ in range(config.pool_size):
            conn = mysql.connector.connect(
                host=config.host,
                port=config.port,
                user=config.user,
                password=config.password,
                database=config.database,
                connection_timeout=config.pool_timeout,
                **config.extra,
            )
            pool.append(conn)
        return pool

    def acquire_connection(self, pool: list[Any]) -> Any:
        """Acquire a connection from the pool."""
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    def release_connection(self, connection: Any, pool: list[Any]) -> None:
        """Release a connection back to the pool."""
        pool.append(connection)

    def close_pool(self, pool: list[Any]) -> None:
        """Close all connections in the pool."""
        for conn in pool:
            conn.close()
        pool.clear()

    def execute(
        self,
        connection: Any,
        sql: str,
        params: tuple[Any, ...] = (),
    ) -> Any:
        """Execute SQL and return a cursor with dictionary results."""
        cursor = connection.cursor(dictionary=True)
        cursor.execute(sql, params)
        return cursor

    def last_insert_id(self, connection: Any, cursor: Any, table: str) -> Any:
        """AUTO_INCREMENT value generated by the insert."""
        row_id = getattr(cursor, "lastrowid", None)
        if not row_id:
            raise UnsupportedFeatureError("last insert id", "mysql")
        return row_id
