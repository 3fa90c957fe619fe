"""
pdfplumber text extraction backend.

Slower than pypdf but lays out multi-column pages more faithfully;
used as the fallback when pypdf fails or finds no text.
"""

from contextlib import contextmanager
from pathlib import Path

import pdfplumber

from .backend import PDFBackend


class PDFPlumberBackend(PDFBackend):
    """Extraction through pdfplumber's layout-aware text assembly."""

    name = "pdfplumber"

    @contextmanager
    def open_document(self, filepath: Path):
        with pdfplumber.open(filepath) as pdf:
            yield pdf.pages, pdf.metadata
