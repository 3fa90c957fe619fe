"""
Database schema definitions for one index generation.

Defines the documents table, the FTS5 virtual table over its title and
body columns, and the trigger that feeds the FTS table on insert. Index
generations are never updated in place, so there are no update or
delete triggers.
"""

import sqlite3
from typing import Iterable, Tuple

from ..core import get_logger, DatabaseError

logger = get_logger(__name__)


DOCUMENTS_TABLE_NAME = "documents"
FTS_TABLE_NAME = "documents_fts"

DOCUMENTS_TABLE = f"""
CREATE TABLE {DOCUMENTS_TABLE_NAME} (
    id INTEGER PRIMARY KEY,
    doc_id TEXT NOT NULL UNIQUE,
    title TEXT NOT NULL,
    body TEXT NOT NULL
)
"""

FTS_INSERT_TRIGGER = f"""
CREATE TRIGGER documents_ai AFTER INSERT ON {DOCUMENTS_TABLE_NAME} BEGIN
    INSERT INTO {FTS_TABLE_NAME}(rowid, title, body)
    VALUES (new.id, new.title, new.body);
END
"""


def _get_fts_table_sql(tokenizer: str) -> str:
    """Generate FTS5 table creation SQL with the given tokenizer."""
    tokenizer = tokenizer.replace("'", "''")

    return f"""
    CREATE VIRTUAL TABLE {FTS_TABLE_NAME} USING fts5(
        title,
        body,
        content='{DOCUMENTS_TABLE_NAME}',
        content_rowid='id',
        tokenize='{tokenizer}'
    )
    """


def init_schema(conn: sqlite3.Connection, tokenizer: str = "unicode61") -> None:
    """
    Create the tables of a fresh index generation.

    Args:
        conn: Connection to an empty database.
        tokenizer: FTS5 tokenizer arguments.

    Raises:
        DatabaseError: If FTS5 is missing or the tokenizer is rejected.
    """
    try:
        conn.execute(DOCUMENTS_TABLE)
        conn.execute(_get_fts_table_sql(tokenizer))
        conn.execute(FTS_INSERT_TRIGGER)
        conn.commit()
    except sqlite3.Error as e:
        raise DatabaseError(
            f"Failed to create index schema: {e}",
            {"tokenizer": tokenizer}
        )


def insert_documents(
    conn: sqlite3.Connection,
    documents: Iterable[Tuple[str, str, str]]
) -> int:
    """
    Insert (doc_id, title, body) rows in a single transaction.

    Row ids follow insertion order, which callers rely on for
    deterministic tie-breaking.

    Args:
        conn: Connection with an initialized schema.
        documents: Rows to insert.

    Returns:
        Number of rows inserted.

    Raises:
        DatabaseError: On constraint violations or SQLite errors.
    """
    try:
        with conn:
            cursor = conn.executemany(
                f"INSERT INTO {DOCUMENTS_TABLE_NAME} (doc_id, title, body) VALUES (?, ?, ?)",
                documents
            )
            return cursor.rowcount
    except sqlite3.Error as e:
        raise DatabaseError(f"Failed to insert documents: {e}")
