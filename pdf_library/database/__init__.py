"""
Database module for the in-memory SQLite FTS5 index.

Provides connection creation and the schema of one index generation.
Each rebuild gets its own private in-memory database, so nothing here
is shared between generations.
"""

from .connection import create_memory_connection, fts5_available
from .schema import init_schema, insert_documents, DOCUMENTS_TABLE_NAME, FTS_TABLE_NAME

__all__ = [
    "create_memory_connection",
    "fts5_available",
    "init_schema",
    "insert_documents",
    "DOCUMENTS_TABLE_NAME",
    "FTS_TABLE_NAME"
]
