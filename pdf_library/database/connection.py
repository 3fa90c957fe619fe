"""
SQLite connection management for the PDF Library Service.

Index generations live in private in-memory databases. A connection is
created on the rebuild thread and later read from request threads, so
it is opened with check_same_thread disabled; callers serialize access.
"""

import sqlite3

from ..core import get_logger, DatabaseError

logger = get_logger(__name__)


MEMORY_DATABASE = ":memory:"


def create_memory_connection() -> sqlite3.Connection:
    """
    Create a new private in-memory database connection.

    Returns:
        Connection with Row factory enabled.

    Raises:
        DatabaseError: If SQLite refuses the connection.
    """
    try:
        conn = sqlite3.connect(
            MEMORY_DATABASE,
            check_same_thread=False
        )

        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA temp_store=MEMORY")

        return conn

    except sqlite3.Error as e:
        raise DatabaseError(f"Failed to create in-memory database: {e}")


def fts5_available() -> bool:
    """Check whether the linked SQLite library was built with FTS5."""
    conn = sqlite3.connect(MEMORY_DATABASE)
    try:
        conn.execute("CREATE VIRTUAL TABLE probe USING fts5(content)")
        return True
    except sqlite3.OperationalError:
        return False
    finally:
        conn.close()


if __name__ == "__main__":
    print(f"FTS5 available: {fts5_available()}")

    conn = create_memory_connection()
    conn.execute("CREATE TABLE test (id INTEGER PRIMARY KEY, name TEXT)")
    conn.execute("INSERT INTO test (name) VALUES (?)", ("Alice",))
    for row in conn.execute("SELECT * FROM test"):
        print(f"  id={row['id']}, name={row['name']}")
    conn.close()
