"""
Example 01: Basic CRUD

This example demonstrates creating, querying, updating and deleting entities
with RowMapper's EntityAdapter.
"""

from row_mapper import ConnectionConfig, Entity, EntityAdapter, entity
import tempfile
import sqlite3
from pathlib import Path


class User(Entity):
    """User entity"""
    id: int | None = None
    name: str | None = None
    email: str | None = None
    active: int | None = None


def main():
    # Create a temporary database
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    conn = sqlite3.connect(db_path)
    conn.execute("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            active INTEGER DEFAULT 1
        )
    """)
    conn.commit()
    conn.close()

    # Describe the entity and build an adapter for it
    config = ConnectionConfig(driver="sqlite", database=db_path)
    users = EntityAdapter.from_config(config, entity("users").auto_fields(User).build())

    print("=== Basic CRUD ===\n")

    # create: insert, then reload with database defaults
    for name in ("Alice", "Bob", "Charlie"):
        user = User(name=name, email=f"{name.lower()}@example.com")
        users.create(user)
        print(f"Created: {user}")
    print()

    # query: filters, ordering and paging
    active = users.query(User, {"active": 1}, {"order": "name DESC", "limit": 2})
    print(f"query result ({len(active)} rows):")
    for user in active:
        print(f"  - {user.name} ({user.email})")
    print()

    # load: fill an instance by primary key
    bob = User(id=2)
    users.load(bob)
    print(f"load result: {bob}\n")

    # update: every field is written, None becomes NULL
    bob.active = 0
    print(f"update succeeded: {users.update(bob)}")

    # delete: by primary key
    print(f"delete succeeded: {users.delete(User(id=3))}")
    print(f"Remaining: {[u.name for u in users.query(User)]}")

    # Failures are reported, not raised
    print(f"create without name: {users.create(User(email='x@example.com'))}")
    print(f"last_error: {users.last_error}")

    print(f"\nCached statements: {len(users.statements)}")

    Path(db_path).unlink()


if __name__ == "__main__":
    main()
