"""
Tests for the named tool operations.

Tests parameter parsing, result layouts and error envelopes.
"""

from concurrent.futures import TimeoutError as FutureTimeout
from unittest.mock import patch

import pytest

from pdf_library.core.exceptions import InvalidParameter, UnknownTool
from pdf_library.library import LibraryService, TOOLS, get_tool, run_tool

TIMEOUT = 10


@pytest.fixture
def service(configured, fake_extractor, store):
    """Started service with a.pdf and b.pdf indexed."""
    store("a.pdf", "b.pdf")
    svc = LibraryService(configured, extractor=fake_extractor)
    svc.start().result(timeout=TIMEOUT)
    yield svc
    svc.close()


class TestRegistry:
    """Tests for tool lookup."""

    def test_all_tools_registered(self):
        assert set(TOOLS) == {
            "list_pdfs",
            "get_pdf_metadata",
            "extract_pdf_text",
            "search_in_pdfs",
            "summarize_pdf",
            "split_pdf",
            "convert_pdf_to_epub",
            "upload_pdf",
            "remove_pdf",
            "rebuild_index",
            "health",
        }

    def test_get_unknown_tool_raises(self):
        with pytest.raises(UnknownTool) as exc_info:
            get_tool("format_disk")

        assert "list_pdfs" in exc_info.value.details["available"]

    def test_run_unknown_tool_envelope(self, service):
        envelope = run_tool(service, "format_disk")

        assert envelope["ok"] is False
        assert envelope["type"] == "UnknownTool"


class TestEnvelopes:
    """Tests for successful tool results."""

    def test_list_pdfs(self, service):
        assert run_tool(service, "list_pdfs") == {
            "ok": True,
            "result": [{"name": "a.pdf"}, {"name": "b.pdf"}]
        }

    def test_search_in_pdfs(self, service):
        envelope = run_tool(service, "search_in_pdfs", {"q": "fox"})

        assert envelope["ok"] is True
        assert [hit["id"] for hit in envelope["result"]] == ["a.pdf"]
        assert set(envelope["result"][0]) == {"id", "score", "title"}

    def test_search_limit_from_string(self, service):
        envelope = run_tool(service, "search_in_pdfs", {"q": "fox turtle", "limit": "1"})

        assert len(envelope["result"]) == 1

    def test_search_advanced_flag(self, service):
        envelope = run_tool(service, "search_in_pdfs", {"q": "tur*", "advanced": "true"})

        assert [hit["id"] for hit in envelope["result"]] == ["b.pdf"]

    def test_extract_pdf_text(self, service):
        envelope = run_tool(service, "extract_pdf_text", {"file": "b.pdf"})

        assert envelope == {"ok": True, "result": {"text": "A slow turtle"}}

    def test_summarize_pdf(self, service):
        envelope = run_tool(service, "summarize_pdf", {"file": "a.pdf", "sentences": "1"})

        assert envelope == {"ok": True, "result": {"summary": "The quick fox"}}

    def test_get_pdf_metadata(self, service):
        envelope = run_tool(service, "get_pdf_metadata", {"file": "a.pdf"})

        assert envelope["result"]["numpages"] == 1

    def test_rebuild_index_waits(self, service):
        envelope = run_tool(service, "rebuild_index")

        assert envelope == {"ok": True, "result": {"generation": 2, "documents": 2}}

    def test_rebuild_index_queued(self, service):
        envelope = run_tool(service, "rebuild_index", {"wait": "false"})

        assert envelope == {"ok": True, "result": {"queued": True}}

    def test_health(self, service):
        result = run_tool(service, "health")["result"]

        assert result["status"] == "running"
        assert result["documents"] == 2

    def test_remove_pdf(self, service):
        envelope = run_tool(service, "remove_pdf", {"file": "b.pdf"})

        assert envelope == {"ok": True, "result": {"filename": "b.pdf"}}
        assert {"name": "b.pdf"} not in service.list_documents()

    def test_upload_pdf(self, service, sample_pdf):
        envelope = run_tool(service, "upload_pdf", {"source": str(sample_pdf), "filename": "new.pdf"})

        assert envelope == {"ok": True, "result": {"filename": "new.pdf"}}

    def test_convert_pdf_to_epub(self, service, data_dir):
        envelope = run_tool(service, "convert_pdf_to_epub", {"file": "a.pdf", "title": "Renard"})

        assert envelope == {
            "ok": True,
            "result": {"out_name": "a.epub", "out_path": str(data_dir / "a.epub")}
        }
        assert (data_dir / "a.epub").is_file()

    def test_split_pdf_defaults(self, service, data_dir, make_pdf):
        make_pdf(data_dir / "long.pdf", pages=4)

        envelope = run_tool(service, "split_pdf", {"file": "long.pdf", "end_page": "2"})

        assert envelope["result"]["out_name"] == "long_pages_1-2.pdf"


class TestErrors:
    """Tests for failure envelopes."""

    def test_empty_query(self, service):
        envelope = run_tool(service, "search_in_pdfs", {"q": "  "})

        assert envelope["ok"] is False
        assert envelope["type"] == "InvalidQuery"
        assert envelope["error"]

    def test_missing_query_parameter(self, service):
        assert run_tool(service, "search_in_pdfs")["type"] == "InvalidQuery"

    def test_missing_file(self, service):
        envelope = run_tool(service, "extract_pdf_text", {"file": "ghost.pdf"})

        assert envelope["type"] == "DocumentNotFound"

    def test_extraction_failure(self, service, store):
        store("broken.pdf")

        assert run_tool(service, "extract_pdf_text", {"file": "broken.pdf"})["type"] == "ExtractionError"

    def test_bad_integer(self, service):
        envelope = run_tool(service, "search_in_pdfs", {"q": "fox", "limit": "many"})

        assert envelope["type"] == "InvalidParameter"
        assert "limit" in envelope["error"]

    def test_bad_integer_raises_directly(self, service):
        with pytest.raises(InvalidParameter):
            get_tool("split_pdf")(service, {"file": "a.pdf", "start_page": "x"})

    def test_empty_page_range(self, service, data_dir, make_pdf):
        make_pdf(data_dir / "short.pdf", pages=2)

        envelope = run_tool(service, "split_pdf", {"file": "short.pdf", "start_page": 3})

        assert envelope["type"] == "InvalidPageRange"

    def test_remove_outside_store(self, service, temp_dir):
        outside = temp_dir / "outside"
        outside.mkdir()
        notes = outside / "notes.txt"
        notes.write_text("keep me")

        for target in (str(notes), "../config/config.json"):
            envelope = run_tool(service, "remove_pdf", {"file": target})
            assert envelope["ok"] is False
            assert envelope["type"] == "DocumentNotFound"

        assert notes.exists()
        assert (temp_dir / "config" / "config.json").exists()

    def test_upload_non_pdf(self, service, temp_dir):
        source = temp_dir / "x.txt"
        source.write_text("plain text")

        envelope = run_tool(service, "upload_pdf", {"source": str(source)})

        assert envelope["type"] == "InvalidParameter"
        assert service.list_documents() == [{"name": "a.pdf"}, {"name": "b.pdf"}]

    def test_convert_textless_document(self, service, store):
        store("broken.pdf")

        envelope = run_tool(service, "convert_pdf_to_epub", {"file": "broken.pdf"})

        assert envelope["type"] == "ExtractionError"

    def test_rebuild_timeout(self, service):
        with patch.object(service, "rebuild_index", side_effect=FutureTimeout()):
            envelope = run_tool(service, "rebuild_index")

        assert envelope["ok"] is False
        assert envelope["type"] == "Timeout"

    def test_unexpected_error(self, service):
        with patch.object(service, "list_documents", side_effect=RuntimeError("disk on fire")):
            envelope = run_tool(service, "list_pdfs")

        assert envelope == {"ok": False, "error": "disk on fire", "type": "RuntimeError"}

    def test_closed_service(self, service):
        service.close()

        envelope = run_tool(service, "rebuild_index")

        assert envelope["ok"] is False
        assert envelope["type"] == "PDFLibraryError"
