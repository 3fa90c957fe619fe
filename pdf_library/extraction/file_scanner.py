"""
File scanner for the document store directory.

The store is flat: only files sitting directly in the configured directory
count as documents, so a filename identifies a document unambiguously.
"""

from pathlib import Path
from typing import Iterator, List, Union

from ..core import get_config, get_logger, StoreUnavailable
from .models import StoreEntry

logger = get_logger(__name__)


class FileScanner:
    """
    Enumerates the PDF files of the document store.

    The scan result is the ground truth for which documents exist;
    an unreadable directory is reported, never retried.
    """

    def __init__(
        self,
        root_directory: Union[str, Path] = None,
        extensions: List[str] = None
    ):
        """
        Initialize the file scanner.

        Args:
            root_directory: Store directory. Defaults to config value.
            extensions: File suffixes to accept (e.g., [".pdf"]).
        """
        if root_directory is None or extensions is None:
            config = get_config()
            root_directory = root_directory or config.paths.data_directory
            extensions = extensions or config.extraction.supported_extensions

        self.root_directory = Path(root_directory)
        self.extensions = tuple(ext.lower() for ext in extensions)

    def scan(self) -> List[StoreEntry]:
        """
        List the store's PDF files.

        Returns:
            StoreEntry objects sorted by filename.

        Raises:
            StoreUnavailable: If the directory is missing or unreadable.
        """
        entries = sorted(self._iter_entries(), key=lambda entry: entry.name)

        logger.debug(f"Scan of {self.root_directory}: {len(entries)} documents")

        return entries

    def _iter_entries(self) -> Iterator[StoreEntry]:
        """Yield matching regular files, wrapping OS errors."""
        directory = self.root_directory

        if not directory.is_dir():
            raise StoreUnavailable(
                f"Document directory does not exist: {directory}",
                directory=str(directory)
            )

        try:
            children = list(directory.iterdir())
        except OSError as e:
            raise StoreUnavailable(
                f"Cannot read document directory {directory}: {e}",
                directory=str(directory)
            )

        for child in children:
            if not child.name.lower().endswith(self.extensions):
                continue

            try:
                if not child.is_file():
                    continue
            except OSError as e:
                logger.warning(f"Cannot access file {child}: {e}")
                continue

            yield StoreEntry(name=child.name, path=child.resolve())

    def count(self) -> int:
        """
        Count the documents currently in the store.

        Returns:
            Number of matching files.
        """
        return len(self.scan())

    def names(self) -> List[str]:
        """Filenames of the current store contents, sorted."""
        return [entry.name for entry in self.scan()]


if __name__ == "__main__":
    import sys

    test_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(".")

    scanner = FileScanner(root_directory=test_dir, extensions=[".pdf"])

    print(f"Scanning: {test_dir}")
    print("-" * 50)

    try:
        for entry in scanner.scan()[:10]:
            print(f"  {entry.name}")
    except StoreUnavailable as e:
        print(f"Store unavailable: {e.message}")
