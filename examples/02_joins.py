"""
Example 02: Relationships and Computed Fields

This example demonstrates require/include joins, computed fields and
additional query parameters, with the descriptor loaded from metadata.
"""

from row_mapper import ConnectionConfig, Entity, EntityAdapter, descriptor_from_metadata
import logging
import tempfile
import sqlite3
from pathlib import Path


class Post(Entity):
    """Post with its author's name and the reader's vote"""
    id: int | None = None
    title: str | None = None
    author_id: int | None = None
    author: str | None = None
    vote: int | None = None


POST_METADATA = {
    "class": {
        "Require": {"authors": "id => author_id"},
        "Include": [{"votes": "post_id => id, reader_id => ?"}],
    },
    "properties": {
        "author": {"From": "authors.name"},
        "vote": {"From": "votes.value"},
    },
}


def main():
    # Show the statements as they are prepared
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    conn = sqlite3.connect(db_path)
    conn.executescript("""
        CREATE TABLE authors (id INTEGER PRIMARY KEY, name TEXT NOT NULL);
        CREATE TABLE posts (id INTEGER PRIMARY KEY, title TEXT, author_id INTEGER);
        CREATE TABLE votes (post_id INTEGER, reader_id INTEGER, value INTEGER);
        INSERT INTO authors (name) VALUES ('Ada'), ('Grace');
        INSERT INTO posts (title, author_id) VALUES ('Engines', 1), ('Compilers', 2), ('Orphan', 9);
        INSERT INTO votes VALUES (1, 100, 1), (2, 100, -1), (1, 200, 1);
    """)
    conn.close()

    descriptor = descriptor_from_metadata(
        "posts",
        ["id", "title", "author_id", "author", "vote"],
        ["id"],
        POST_METADATA,
    )
    config = ConnectionConfig(driver="sqlite", database=db_path)
    posts = EntityAdapter.from_config(config, descriptor)

    print("=== Relationships ===\n")

    # The reader id binds to the "reader_id => ?" condition
    posts.set_additional_query_parameters([100])
    for post in posts.query(Post, options={"order": "title"}):
        print(f"  - {post.title} by {post.author}, vote: {post.vote}")
    print()

    # Filters may name joined columns
    by_grace = posts.query(Post, {"authors.name": "Grace"})
    print(f"Posts by Grace: {[p.title for p in by_grace]}")

    # Orphan has no author row and is excluded by the required join
    post = Post(id=3)
    posts.load(post)
    print(f"Orphan loaded: {post.title is not None}")

    Path(db_path).unlink()


if __name__ == "__main__":
    main()
