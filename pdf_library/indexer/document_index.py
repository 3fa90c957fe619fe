"""
Immutable full-text index over document titles and bodies.

Each DocumentIndex owns a private in-memory SQLite database with an FTS5
table and ranks matches with BM25, weighted per field. Once build() returns
the index is read-only; a change to the document set means building a new
one.
"""

import sqlite3
import threading
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..core import get_logger, DatabaseError, InvalidQuery
from ..database import (
    create_memory_connection,
    init_schema,
    insert_documents,
    DOCUMENTS_TABLE_NAME,
    FTS_TABLE_NAME
)
from ..utils import index_prefix

logger = get_logger(__name__)


SNIPPET_OPEN = "<mark>"
SNIPPET_CLOSE = "</mark>"


@dataclass(frozen=True)
class IndexHit:
    """A matching document as seen by the index."""
    doc_id: str
    score: float
    snippet: str


class DocumentIndex:
    """
    Read-only BM25 index over (identity, title, body) documents.

    Queries on one instance are serialized by a lock, since the underlying
    connection is shared between request threads.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        doc_ids: Tuple[str, ...],
        title_weight: float = 1.0,
        body_weight: float = 10.0,
        snippet_tokens: int = 16
    ):
        """
        Wrap an already populated connection. Use build() instead.

        Args:
            conn: In-memory connection holding the index tables.
            doc_ids: Identities present in the index, in row order.
            title_weight: BM25 weight of the title column.
            body_weight: BM25 weight of the body column.
            snippet_tokens: Approximate snippet length in tokens.
        """
        self._conn = conn
        self._doc_ids = doc_ids
        self._lock = threading.RLock()
        self._closed = False

        self.title_weight = float(title_weight)
        self.body_weight = float(body_weight)
        self.snippet_tokens = max(1, min(int(snippet_tokens), 64))

    @classmethod
    def build(
        cls,
        documents: Iterable[Tuple[str, str, str]],
        max_body_chars: Optional[int] = None,
        tokenizer: str = "unicode61 remove_diacritics 2",
        title_weight: float = 1.0,
        body_weight: float = 10.0,
        snippet_tokens: int = 16
    ) -> "DocumentIndex":
        """
        Build an index from (identity, title, body) triples.

        Bodies are cut to max_body_chars before tokenization. Documents
        whose body is empty after the cut are left out.

        Args:
            documents: Triples to index. Identities must be unique.
            max_body_chars: Body length limit, or None for no limit.
            tokenizer: FTS5 tokenizer arguments.
            title_weight: BM25 weight of the title column.
            body_weight: BM25 weight of the body column.
            snippet_tokens: Approximate snippet length in tokens.

        Returns:
            The populated, read-only index.

        Raises:
            DatabaseError: On duplicate identities or SQLite failures.
        """
        rows = []
        for doc_id, title, body in documents:
            if max_body_chars is not None:
                body = index_prefix(body, max_body_chars)
            if not body or not body.strip():
                logger.debug(f"Not indexing {doc_id}: empty body")
                continue
            rows.append((doc_id, title or doc_id, body))

        # Row ids follow identity order, so equal scores sort by identity.
        rows.sort(key=lambda row: row[0])

        conn = create_memory_connection()
        try:
            init_schema(conn, tokenizer)
            insert_documents(conn, rows)
        except DatabaseError:
            conn.close()
            raise

        logger.debug(f"Built document index with {len(rows)} documents")

        return cls(
            conn,
            tuple(row[0] for row in rows),
            title_weight=title_weight,
            body_weight=body_weight,
            snippet_tokens=snippet_tokens
        )

    def __len__(self) -> int:
        return len(self._doc_ids)

    def __contains__(self, doc_id: str) -> bool:
        return doc_id in self._doc_ids

    @property
    def document_ids(self) -> Tuple[str, ...]:
        """Indexed identities in ascending order."""
        return self._doc_ids

    def search(self, match_expression: str, limit: Optional[int] = None) -> List[IndexHit]:
        """
        Run an FTS5 MATCH expression and rank the hits.

        Args:
            match_expression: Expression in FTS5 query syntax.
            limit: Maximum number of hits, or None for all.

        Returns:
            Hits ordered by descending score, then ascending identity.

        Raises:
            InvalidQuery: If FTS5 rejects the expression.
            DatabaseError: If the index has been closed.
        """
        if not match_expression or not self._doc_ids:
            return []

        sql = f"""
            SELECT
                d.doc_id,
                bm25({FTS_TABLE_NAME}, {self.title_weight}, {self.body_weight}) AS rank,
                snippet({FTS_TABLE_NAME}, 1, '{SNIPPET_OPEN}', '{SNIPPET_CLOSE}', '...', {self.snippet_tokens}) AS snippet
            FROM {FTS_TABLE_NAME}
            JOIN {DOCUMENTS_TABLE_NAME} d ON {FTS_TABLE_NAME}.rowid = d.id
            WHERE {FTS_TABLE_NAME} MATCH ?
            ORDER BY rank, d.id
        """
        params: tuple = (match_expression,)

        if limit is not None:
            sql += " LIMIT ?"
            params += (int(limit),)

        with self._lock:
            if self._closed:
                raise DatabaseError("Document index is closed")

            try:
                rows = self._conn.execute(sql, params).fetchall()
            except sqlite3.OperationalError as e:
                raise InvalidQuery(
                    f"Query rejected by the index: {e}",
                    query=match_expression
                )

        # FTS5 bm25() is negative for matches, lower meaning better. A term in
        # at least half of the documents has its IDF floored at 1e-6, so its
        # scores are tiny (about 1e-6) but keep their order.
        return [
            IndexHit(
                doc_id=row["doc_id"],
                score=max(0.0, -row["rank"]),
                snippet=row["snippet"] or ""
            )
            for row in rows
        ]

    def get_body(self, doc_id: str) -> Optional[str]:
        """Return the indexed body of a document."""
        with self._lock:
            if self._closed:
                raise DatabaseError("Document index is closed")
            row = self._conn.execute(
                f"SELECT body FROM {DOCUMENTS_TABLE_NAME} WHERE doc_id = ?",
                (doc_id,)
            ).fetchone()
        return row["body"] if row else None

    def close(self) -> None:
        """Release the in-memory database. Further queries fail."""
        with self._lock:
            if not self._closed:
                self._conn.close()
                self._closed = True


if __name__ == "__main__":
    index = DocumentIndex.build([
        ("a.pdf", "a.pdf", "The quick fox"),
        ("b.pdf", "b.pdf", "A slow turtle"),
    ])

    for hit in index.search('"fox"'):
        print(f"  {hit.doc_id} score={hit.score:.4g} snippet={hit.snippet}")

    index.close()
