"""
Tests for the index generation schema.

Tests table creation, tokenizer handling, and bulk inserts.
"""

import pytest

from pdf_library.core.exceptions import DatabaseError
from pdf_library.database.connection import create_memory_connection
from pdf_library.database.schema import (
    init_schema,
    insert_documents,
    DOCUMENTS_TABLE_NAME,
    FTS_TABLE_NAME
)


@pytest.fixture
def conn():
    """Connection with the schema installed."""
    connection = create_memory_connection()
    init_schema(connection, "unicode61 remove_diacritics 2")
    yield connection
    connection.close()


class TestInitSchema:
    """Tests for schema initialization."""

    def test_creates_tables_and_trigger(self, conn):
        names = {
            row["name"]
            for row in conn.execute("SELECT name FROM sqlite_master").fetchall()
        }

        assert DOCUMENTS_TABLE_NAME in names
        assert FTS_TABLE_NAME in names
        assert "documents_ai" in names

    def test_invalid_tokenizer_raises(self):
        connection = create_memory_connection()

        with pytest.raises(DatabaseError) as exc_info:
            init_schema(connection, "no_such_tokenizer")

        assert exc_info.value.details["tokenizer"] == "no_such_tokenizer"
        connection.close()


class TestInsertDocuments:
    """Tests for bulk insertion."""

    def test_insert_feeds_fts(self, conn):
        count = insert_documents(conn, [
            ("a.pdf", "a.pdf", "The quick fox"),
            ("b.pdf", "b.pdf", "A slow turtle"),
        ])

        matches = conn.execute(
            f"SELECT rowid FROM {FTS_TABLE_NAME} WHERE {FTS_TABLE_NAME} MATCH ?",
            ('"fox"',)
        ).fetchall()

        assert count == 2
        assert [row["rowid"] for row in matches] == [1]

    def test_rowids_follow_insert_order(self, conn):
        insert_documents(conn, [("x.pdf", "x", "one"), ("y.pdf", "y", "two")])

        rows = conn.execute(f"SELECT id, doc_id FROM {DOCUMENTS_TABLE_NAME} ORDER BY id").fetchall()

        assert [(r["id"], r["doc_id"]) for r in rows] == [(1, "x.pdf"), (2, "y.pdf")]

    def test_diacritics_removed(self, conn):
        insert_documents(conn, [("c.pdf", "c", "Sécurité aérienne")])

        matches = conn.execute(
            f"SELECT rowid FROM {FTS_TABLE_NAME} WHERE {FTS_TABLE_NAME} MATCH ?",
            ('"securite"',)
        ).fetchall()

        assert len(matches) == 1

    def test_duplicate_identity_raises_and_rolls_back(self, conn):
        with pytest.raises(DatabaseError):
            insert_documents(conn, [("a.pdf", "a", "one"), ("a.pdf", "a", "two")])

        count = conn.execute(f"SELECT COUNT(*) FROM {DOCUMENTS_TABLE_NAME}").fetchone()[0]
        assert count == 0
