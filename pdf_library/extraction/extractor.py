"""
Text extraction with backend fallback.

Backends are tried in order (primary, then fallback); the first one
returning text wins. A document no backend gets text from raises
ExtractionError, which rebuilds absorb per document.
"""

from pathlib import Path
from typing import List, Tuple, Union

from ..core import get_config, get_logger, ExtractionError
from ..utils import clean_text
from .backend import PDFBackend
from .models import DocumentMetadata
from .pypdf_backend import PyPDFBackend
from .pdfplumber_backend import PDFPlumberBackend

logger = get_logger(__name__)


BACKENDS = {
    "pypdf": PyPDFBackend,
    "pdfplumber": PDFPlumberBackend
}

PAGE_SEPARATOR = "\n\n"


class PDFExtractor:
    """
    Extracts document text through an ordered list of backends.

    Safe to share between threads: backends keep no per-document state.
    """

    def __init__(self, primary_backend: str = None, fallback_backend: str = None):
        """
        Args:
            primary_backend: "pypdf" or "pdfplumber". Defaults to config.
            fallback_backend: Backend tried second, or "none". Naming the
                              primary again also disables the fallback.

        Raises:
            ExtractionError: If the primary backend name is unknown.
        """
        if primary_backend is None or fallback_backend is None:
            extraction = get_config().extraction
            primary_backend = primary_backend or extraction.primary_backend
            fallback_backend = fallback_backend or extraction.fallback_backend

        if primary_backend not in BACKENDS:
            raise ExtractionError(
                f"Unknown backend: {primary_backend}",
                details={"available": sorted(BACKENDS)}
            )

        self.primary: PDFBackend = BACKENDS[primary_backend]()
        self.fallback = None
        if fallback_backend in BACKENDS and fallback_backend != primary_backend:
            self.fallback = BACKENDS[fallback_backend]()

        logger.debug(f"Extractor backends: {primary_backend} -> {self.fallback.name if self.fallback else 'none'}")

    @property
    def backends(self) -> List[PDFBackend]:
        return [b for b in (self.primary, self.fallback) if b is not None]

    def extract(self, filepath: Union[str, Path]) -> List[Tuple[int, str]]:
        """
        Extract per-page text with the first backend that finds any.

        Returns:
            List of (page_number, text) tuples.

        Raises:
            ExtractionError: The first backend's error if every backend
                             failed, otherwise an "empty results" error.
        """
        filepath = Path(filepath)
        first_error = None

        for backend in self.backends:
            try:
                pages = backend.extract(filepath)
            except ExtractionError as e:
                logger.debug(f"{backend.name} failed on {filepath.name}: {e.message}")
                first_error = first_error or e
                continue

            if pages:
                return pages

            logger.debug(f"{backend.name} found no text in {filepath.name}")

        if first_error is not None:
            raise first_error

        raise ExtractionError("All backends returned empty results", filepath=str(filepath))

    def extract_text(self, filepath: Union[str, Path]) -> str:
        """
        Extract the whole document as one cleaned string.

        Returns:
            Cleaned page texts joined by blank lines.

        Raises:
            ExtractionError: If all backends fail or find no text.
        """
        cleaned = (clean_text(text) for _, text in self.extract(filepath))
        return PAGE_SEPARATOR.join(text for text in cleaned if text)

    def read_metadata(self, filepath: Union[str, Path], sample_chars: int = 500) -> DocumentMetadata:
        """
        Collect info fields, page count, and a text sample.

        A document without extractable text still yields metadata,
        with an empty sample.

        Raises:
            ExtractionError: If no backend can parse the file.
        """
        filepath = Path(filepath)
        errors = []

        for backend in self.backends:
            try:
                info, page_count = backend.read_metadata(filepath)
                break
            except ExtractionError as e:
                errors.append(e)
        else:
            raise errors[0]

        try:
            sample = self.extract_text(filepath)[:sample_chars]
        except ExtractionError as e:
            logger.debug(f"No text sample for {filepath.name}: {e.message}")
            sample = ""

        return DocumentMetadata(info=info, page_count=page_count, text_sample=sample)


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python extractor.py <pdf_file>")
        sys.exit(1)

    pdf_path = Path(sys.argv[1])
    extractor = PDFExtractor()

    try:
        metadata = extractor.read_metadata(pdf_path, sample_chars=300)
        print(f"{pdf_path.name}: {metadata.page_count} pages")
        print(metadata.text_sample)
    except ExtractionError as e:
        print(f"Extraction failed: {e.message}")
