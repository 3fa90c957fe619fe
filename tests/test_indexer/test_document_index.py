"""
Tests for the immutable document index.

Tests building, BM25 ranking, tie-breaking, truncation, snippets,
and error handling on the in-memory FTS5 index.
"""

import pytest

from pdf_library.core.exceptions import DatabaseError, InvalidQuery
from pdf_library.indexer.document_index import DocumentIndex, IndexHit


@pytest.fixture
def scenario_index():
    """Index over the two-document scenario."""
    index = DocumentIndex.build([
        ("a.pdf", "a.pdf", "The quick fox"),
        ("b.pdf", "b.pdf", "A slow turtle"),
    ])
    yield index
    index.close()


class TestBuild:
    """Tests for DocumentIndex.build."""

    def test_documents_indexed(self, scenario_index):
        assert len(scenario_index) == 2
        assert "a.pdf" in scenario_index
        assert scenario_index.document_ids == ("a.pdf", "b.pdf")

    def test_empty_bodies_left_out(self):
        index = DocumentIndex.build([
            ("a.pdf", "a.pdf", "text"),
            ("empty.pdf", "empty.pdf", ""),
            ("blank.pdf", "blank.pdf", "   \n  "),
        ])

        assert index.document_ids == ("a.pdf",)
        index.close()

    def test_identity_order_regardless_of_input_order(self):
        index = DocumentIndex.build([
            ("c.pdf", "c.pdf", "x"),
            ("a.pdf", "a.pdf", "x"),
            ("b.pdf", "b.pdf", "x"),
        ])

        assert index.document_ids == ("a.pdf", "b.pdf", "c.pdf")
        index.close()

    def test_duplicate_identity_raises(self):
        with pytest.raises(DatabaseError):
            DocumentIndex.build([
                ("a.pdf", "a.pdf", "one"),
                ("a.pdf", "a.pdf", "two"),
            ])

    def test_missing_title_defaults_to_identity(self):
        index = DocumentIndex.build([("report.pdf", None, "body text")])

        assert [hit.doc_id for hit in index.search('"report"')] == ["report.pdf"]
        index.close()

    def test_empty_index(self):
        index = DocumentIndex.build([])

        assert len(index) == 0
        assert index.search('"fox"') == []
        index.close()


class TestSearch:
    """Tests for DocumentIndex.search."""

    def test_scenario_fox(self, scenario_index):
        hits = scenario_index.search('"fox"')

        assert [hit.doc_id for hit in hits] == ["a.pdf"]
        assert isinstance(hits[0], IndexHit)
        assert hits[0].score > 0

    def test_no_match_is_empty(self, scenario_index):
        assert scenario_index.search('"zzz_no_match"') == []

    def test_empty_expression_is_empty(self, scenario_index):
        assert scenario_index.search("") == []

    def test_case_insensitive(self, scenario_index):
        assert [hit.doc_id for hit in scenario_index.search('"FOX"')] == ["a.pdf"]

    def test_title_matches(self):
        index = DocumentIndex.build([
            ("aviation.pdf", "aviation.pdf", "nothing relevant"),
            ("other.pdf", "other.pdf", "still nothing"),
        ])

        assert [hit.doc_id for hit in index.search('"aviation"')] == ["aviation.pdf"]
        index.close()

    def test_scores_non_increasing(self):
        index = DocumentIndex.build([
            ("one.pdf", "one.pdf", "fox dog cat bird"),
            ("three.pdf", "three.pdf", "fox fox fox bird"),
            ("two.pdf", "two.pdf", "fox fox cat bird"),
            ("none.pdf", "none.pdf", "dog cat cat bird"),
        ])

        hits = index.search('"fox"')
        scores = [hit.score for hit in hits]

        assert scores == sorted(scores, reverse=True)
        assert [hit.doc_id for hit in hits] == ["three.pdf", "two.pdf", "one.pdf"]
        index.close()

    def test_term_in_half_the_library_scores_tiny_but_positive(self):
        index = DocumentIndex.build([
            ("a.pdf", "a.pdf", "The quick fox"),
            ("b.pdf", "b.pdf", "A slow turtle"),
        ])

        hits = index.search('"fox"')

        assert [hit.doc_id for hit in hits] == ["a.pdf"]
        assert 0.0 < hits[0].score < 1e-4
        index.close()

    def test_rarer_term_scores_higher(self):
        index = DocumentIndex.build([
            ("a.pdf", "a.pdf", "common rare"),
            ("b.pdf", "b.pdf", "common filler"),
            ("c.pdf", "c.pdf", "common filler"),
        ])

        common = index.search('"common"')
        rare = index.search('"rare"')

        assert rare[0].score > common[0].score
        index.close()

    def test_ties_broken_by_identity(self):
        index = DocumentIndex.build([
            ("c.pdf", "c.pdf", "same words here"),
            ("a.pdf", "a.pdf", "same words here"),
            ("b.pdf", "b.pdf", "same words here"),
        ])

        hits = index.search('"words"')

        assert [hit.doc_id for hit in hits] == ["a.pdf", "b.pdf", "c.pdf"]
        assert len({hit.score for hit in hits}) == 1
        index.close()

    def test_limit(self):
        index = DocumentIndex.build([
            (f"doc{i}.pdf", f"doc{i}.pdf", "shared term") for i in range(5)
        ])

        assert len(index.search('"shared"', limit=2)) == 2
        index.close()

    def test_snippet_highlights_match(self, scenario_index):
        hit = scenario_index.search('"fox"')[0]

        assert "<mark>fox</mark>" in hit.snippet

    def test_malformed_expression_raises(self, scenario_index):
        with pytest.raises(InvalidQuery):
            scenario_index.search('"unterminated')

    def test_closed_index_raises(self):
        index = DocumentIndex.build([("a.pdf", "a.pdf", "fox")])
        index.close()

        with pytest.raises(DatabaseError):
            index.search('"fox"')


class TestTruncation:
    """Tests for the body length bound."""

    def test_terms_beyond_limit_not_indexed(self):
        body = "alpha " * 10 + "omega"
        index = DocumentIndex.build([("long.pdf", "long.pdf", body)], max_body_chars=30)

        assert index.search('"omega"') == []
        assert [hit.doc_id for hit in index.search('"alpha"')] == ["long.pdf"]
        assert index.get_body("long.pdf") == body[:30]
        index.close()

    def test_no_limit_keeps_everything(self):
        body = "alpha " * 10 + "omega"
        index = DocumentIndex.build([("long.pdf", "long.pdf", body)])

        assert [hit.doc_id for hit in index.search('"omega"')] == ["long.pdf"]
        index.close()

    def test_get_body_unknown_is_none(self, scenario_index):
        assert scenario_index.get_body("missing.pdf") is None
