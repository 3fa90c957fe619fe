"""
Tests for the pdfplumber-based extraction backend.

Tests text extraction, metadata and error cases using
generated PDFs and mocks.
"""

import pytest
from pathlib import Path
from unittest.mock import patch, Mock, MagicMock

from pdf_library.extraction.pdfplumber_backend import PDFPlumberBackend
from pdf_library.core.exceptions import ExtractionError


@pytest.fixture
def backend():
    """Create a PDFPlumberBackend instance."""
    return PDFPlumberBackend()


def _mock_pdf(texts):
    """Build a context-manager mock standing in for pdfplumber.open()."""
    pages = []
    for text in texts:
        page = Mock()
        page.extract_text.return_value = text
        pages.append(page)

    pdf = MagicMock()
    pdf.pages = pages
    pdf.metadata = {"Title": "Mocked"}
    pdf.__enter__.return_value = pdf
    return pdf


class TestPDFPlumberBackend:
    """Tests for PDFPlumberBackend class."""

    def test_backend_name(self, backend):
        """Test that backend has correct name identifier."""
        assert backend.name == "pdfplumber"

    def test_blank_pages_yield_no_text(self, backend, sample_pdf: Path):
        """Test that pages without text are left out."""
        assert backend.extract(sample_pdf) == []

    def test_extract_nonexistent_file_raises(self, backend, temp_dir: Path):
        """Test that nonexistent file raises ExtractionError."""
        with pytest.raises(ExtractionError):
            backend.extract(temp_dir / "nonexistent.pdf")

    def test_page_count_from_metadata(self, backend, sample_pdf: Path):
        """Test that read_metadata counts pages."""
        _, page_count = backend.read_metadata(sample_pdf)

        assert page_count == 3

    @patch("pdf_library.extraction.pdfplumber_backend.pdfplumber.open")
    def test_extract_with_mock(self, mock_open, backend, sample_pdf):
        """Test page numbering and blank page skipping."""
        mock_open.return_value = _mock_pdf(["Alpha", "", "Gamma"])

        assert backend.extract(sample_pdf) == [(1, "Alpha"), (3, "Gamma")]

    @patch("pdf_library.extraction.pdfplumber_backend.pdfplumber.open")
    def test_metadata_with_mock(self, mock_open, backend, sample_pdf):
        """Test that info fields are stringified."""
        mock_open.return_value = _mock_pdf(["x", "y"])

        info, page_count = backend.read_metadata(sample_pdf)

        assert info == {"Title": "Mocked"}
        assert page_count == 2
