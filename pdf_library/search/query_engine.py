"""
Query engine over the published document index.

Parses user input, runs it against one index snapshot and maps the hits
back to document records from that same snapshot.
"""

import time
from typing import List, Optional, Tuple

from ..core import get_logger, IndexNotReady, InvalidQuery
from ..indexer import IndexManager, IndexSnapshot
from .models import SearchResult, SearchStats
from .query_parser import QueryParser

logger = get_logger(__name__)


class QueryEngine:
    """
    Ranked full-text search over the current index generation.

    Results are ordered by descending BM25 score; equal scores are ordered
    by ascending document identity.
    """

    def __init__(self, manager: IndexManager, parser: QueryParser = None):
        """
        Initialize the query engine.

        Args:
            manager: Lifecycle manager publishing index snapshots.
            parser: Query parser. Defaults to a new QueryParser.
        """
        self.manager = manager
        self.parser = parser or QueryParser()

    def search(
        self,
        text: str,
        advanced: bool = False,
        limit: Optional[int] = None
    ) -> List[SearchResult]:
        """
        Execute a search.

        Args:
            text: Query text.
            advanced: Accept OR, AND, NOT, phrases and prefixes.
            limit: Maximum number of results, or None for all.

        Returns:
            Ordered list of SearchResult. Empty if nothing matches.

        Raises:
            InvalidQuery: If the query is empty or malformed.
            IndexNotReady: If no index has been published yet.
        """
        results, _ = self.search_with_stats(text, advanced=advanced, limit=limit)
        return results

    def search_with_stats(
        self,
        text: str,
        advanced: bool = False,
        limit: Optional[int] = None
    ) -> Tuple[List[SearchResult], SearchStats]:
        """
        Execute a search and report how it ran.

        Same arguments and errors as search().

        Returns:
            Tuple of (list of SearchResult, SearchStats).
        """
        start_time = time.time()

        if text is None or not text.strip():
            raise InvalidQuery("Query must not be empty", query=text or "")

        if limit is not None and limit < 0:
            raise InvalidQuery(f"Invalid result limit: {limit}", query=text)

        # One read of the published reference for the whole query.
        snapshot = self.manager.snapshot()
        if snapshot is None:
            raise IndexNotReady("Index has not finished its first build", query=text)

        if advanced:
            expression = self.parser.parse_advanced(text)
        else:
            expression = self.parser.parse(text)

        results = self._run(snapshot, expression, limit) if expression else []

        execution_time = (time.time() - start_time) * 1000

        stats = SearchStats(
            query=text,
            total_results=len(results),
            execution_time_ms=round(execution_time, 2),
            generation=snapshot.generation,
            documents_indexed=len(snapshot)
        )

        logger.debug(
            f"Search '{text}': {len(results)} results in {execution_time:.1f}ms "
            f"(generation {snapshot.generation})"
        )

        return results, stats

    def _run(
        self,
        snapshot: IndexSnapshot,
        expression: str,
        limit: Optional[int]
    ) -> List[SearchResult]:
        """Run a parsed expression against one snapshot."""
        hits = snapshot.index.search(expression, limit=limit)

        results = []
        for hit in hits:
            record = snapshot.get(hit.doc_id)
            if record is None:
                logger.error(f"Index hit {hit.doc_id} has no record in generation {snapshot.generation}")
                continue

            results.append(SearchResult(
                id=record.doc_id,
                score=hit.score,
                title=record.title,
                snippet=hit.snippet
            ))

        return results


if __name__ == "__main__":
    manager = IndexManager()
    manager.start().result()

    engine = QueryEngine(manager)
    for result in engine.search("fox"):
        print(f"  {result.id} ({result.score:.4g}) {result.snippet}")

    manager.close()
