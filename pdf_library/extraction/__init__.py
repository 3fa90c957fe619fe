"""
PDF extraction module for the PDF Library Service.

Provides document store discovery and text extraction with two backends
(pypdf and pdfplumber) and automatic fallback support.
"""

from .models import StoreEntry, DocumentMetadata
from .file_scanner import FileScanner
from .backend import PDFBackend
from .pypdf_backend import PyPDFBackend
from .pdfplumber_backend import PDFPlumberBackend
from .extractor import PDFExtractor

__all__ = [
    "StoreEntry",
    "DocumentMetadata",
    "FileScanner",
    "PDFBackend",
    "PyPDFBackend",
    "PDFPlumberBackend",
    "PDFExtractor"
]
