"""
Common behavior of the text extraction backends.

A backend only knows how to open a document and hand back its pages and
info dictionary; page iteration, per-page failure handling and error
wrapping are shared here.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Any, ContextManager, Dict, Iterator, List, Mapping, Sequence, Tuple, Union

from ..core import get_logger, ExtractionError

logger = get_logger(__name__)


class PDFBackend:
    """
    Base class of the extraction backends.

    Subclasses implement open_document() and set name.
    """

    name = "base"

    def open_document(self, filepath: Path) -> ContextManager[Tuple[Sequence[Any], Mapping]]:
        """Open a PDF, yielding its pages and its raw info dictionary."""
        raise NotImplementedError

    def page_text(self, page: Any) -> str:
        return page.extract_text() or ""

    @contextmanager
    def _failures_as(self, filepath: Path, action: str) -> Iterator[None]:
        try:
            yield
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(f"{self.name} {action} failed: {e}", filepath=str(filepath))

    def extract(self, filepath: Union[str, Path]) -> List[Tuple[int, str]]:
        """
        Extract text from all pages of a PDF.

        Pages without text, and pages whose extraction raises, are left out.

        Args:
            filepath: Path to the PDF file.

        Returns:
            List of (page_number, text) tuples. Page numbers are 1-indexed.

        Raises:
            ExtractionError: If the document cannot be opened.
        """
        filepath = Path(filepath)

        with self._failures_as(filepath, "extraction"):
            with self.open_document(filepath) as (pages, _):
                logger.debug(f"{self.name}: {len(pages)} pages in {filepath.name}")
                return list(self._page_texts(pages, filepath))

    def _page_texts(self, pages: Sequence[Any], filepath: Path) -> Iterator[Tuple[int, str]]:
        for page_num, page in enumerate(pages, start=1):
            try:
                text = self.page_text(page)
            except Exception as e:
                logger.warning(f"Failed to extract page {page_num} from {filepath.name}: {e}")
                continue

            if text.strip():
                yield page_num, text

    def read_metadata(self, filepath: Union[str, Path]) -> Tuple[Dict[str, str], int]:
        """
        Read the embedded info dictionary and page count.

        Returns:
            Tuple of (info fields without the leading slash, page count).

        Raises:
            ExtractionError: If the file cannot be parsed.
        """
        filepath = Path(filepath)

        with self._failures_as(filepath, "metadata read"):
            with self.open_document(filepath) as (pages, raw_info):
                info = {str(key).lstrip("/"): str(value) for key, value in (raw_info or {}).items()}
                return info, len(pages)
