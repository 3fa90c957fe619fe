"""
Indexer module for building and publishing the full-text index.

Coordinates store scanning, text extraction, and index construction,
and owns the lifecycle of the published index generation.
"""

from .models import DocumentRecord, IndexingStats, IndexSnapshot
from .document_index import DocumentIndex, IndexHit
from .index_builder import IndexBuilder, BuildResult
from .lifecycle import IndexManager, IndexState

__all__ = [
    "DocumentRecord",
    "IndexingStats",
    "IndexSnapshot",
    "DocumentIndex",
    "IndexHit",
    "IndexBuilder",
    "BuildResult",
    "IndexManager",
    "IndexState"
]
