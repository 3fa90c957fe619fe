"""
pypdf text extraction backend.

Fast and pure Python; the default primary backend. Encrypted files are
opened with the empty user password, which covers most "protected"
PDFs that still open without a prompt.
"""

from contextlib import contextmanager
from pathlib import Path

from pypdf import PdfReader

from ..core import ExtractionError
from .backend import PDFBackend


class PyPDFBackend(PDFBackend):
    """Extraction through pypdf.PdfReader."""

    name = "pypdf"

    @contextmanager
    def open_document(self, filepath: Path):
        reader = PdfReader(filepath)

        if reader.is_encrypted:
            try:
                reader.decrypt("")
            except Exception:
                raise ExtractionError(
                    "PDF is encrypted and cannot be decrypted",
                    filepath=str(filepath)
                )

        yield reader.pages, reader.metadata


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python pypdf_backend.py <pdf_file>")
        sys.exit(1)

    pdf_path = Path(sys.argv[1])
    backend = PyPDFBackend()

    try:
        info, page_count = backend.read_metadata(pdf_path)
        print(f"{pdf_path.name}: {page_count} pages, info={info}")

        for page_num, text in backend.extract(pdf_path)[:2]:
            print(f"\n=== Page {page_num} ===")
            print(text[:500])
    except ExtractionError as e:
        print(f"Extraction error: {e.message}")
