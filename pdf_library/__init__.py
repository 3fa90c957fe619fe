"""
PDF Library Service Package.

Exposes a directory of PDF files through listing, metadata, full-text
search, summarization and page-range extraction, backed by an in-memory
SQLite FTS5 index that is rebuilt whenever the directory changes.
"""

__version__ = "1.0.0"
