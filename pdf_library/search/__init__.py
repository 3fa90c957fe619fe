"""
Search module for lexical full-text search with BM25 ranking.

Provides query parsing, search execution against the published index
snapshot, and result models.
"""

from .models import SearchResult, SearchStats
from .query_parser import QueryParser
from .query_engine import QueryEngine

__all__ = [
    "SearchResult",
    "SearchStats",
    "QueryParser",
    "QueryEngine"
]
