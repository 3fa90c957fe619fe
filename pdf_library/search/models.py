"""
Data models for search functionality.

Defines dataclasses for search results and search statistics used
throughout the search module.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class SearchResult:
    """
    Represents a single search result.

    Attributes:
        id: Identity of the matching document (its filename).
        score: BM25 relevance, non-negative, higher is better.
        title: Display title of the document.
        snippet: Body excerpt with <mark> highlighted matches.
    """
    id: str
    score: float
    title: str
    snippet: str = ""

    def to_dict(self) -> Dict:
        """Serialize to the tool result layout."""
        return {"id": self.id, "score": self.score, "title": self.title}


@dataclass
class SearchStats:
    """
    Statistics about a search execution.

    Attributes:
        query: The original query text.
        total_results: Number of matching documents.
        execution_time_ms: Query execution time in milliseconds.
        generation: Index generation that answered the query.
        documents_indexed: Size of that generation.
    """
    query: str
    total_results: int
    execution_time_ms: float
    generation: int = 0
    documents_indexed: int = 0


if __name__ == "__main__":
    result = SearchResult(id="a.pdf", score=1.37, title="a.pdf", snippet="The quick <mark>fox</mark>")
    print(result.to_dict())
