"""
Document library service.

Facade over the document store, the extractor and the index lifecycle.
Every operation a client can invoke lives here; store mutations request
an index rebuild and hand back its future so callers may wait on it.
"""

import html
import shutil
import uuid
from concurrent.futures import Future
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from ebooklib import epub
from pypdf import PdfReader, PdfWriter

from ..core import (
    get_config,
    get_logger,
    Config,
    DocumentNotFound,
    ExtractionError,
    InvalidPageRange,
    InvalidParameter
)
from ..extraction import FileScanner, PDFExtractor
from ..indexer import IndexBuilder, IndexManager, IndexSnapshot
from ..search import QueryEngine, SearchResult
from ..utils import ensure_directory, safe_filename, summarize_text

logger = get_logger(__name__)


EPUB_CHAPTER_FILE = "chapter_1.xhtml"
EPUB_AUTHOR = "Converted"


class LibraryService:
    """
    Operations on a directory of PDF files.

    The service owns one IndexManager. Construct it, call start(), and
    call close() when done.
    """

    def __init__(
        self,
        config: Config = None,
        manager: IndexManager = None,
        extractor: PDFExtractor = None
    ):
        """
        Initialize the service.

        Args:
            config: Settings. Defaults to the global configuration.
            manager: Index lifecycle manager. Defaults to one rebuilding
                     from this service's store.
            extractor: Text extractor used by the tool operations and,
                       when the manager is built here, by rebuilds.
        """
        self.config = config or get_config()
        self.pdf_dir = Path(self.config.paths.data_directory)

        self.scanner = FileScanner(self.pdf_dir, self.config.extraction.supported_extensions)
        self.extractor = extractor or PDFExtractor(
            self.config.extraction.primary_backend,
            self.config.extraction.fallback_backend
        )

        self.manager = manager or IndexManager(IndexBuilder(
            scanner=self.scanner,
            extractor=self.extractor,
            config=self.config
        ))
        self.engine = QueryEngine(self.manager)

    def start(self) -> Future:
        """
        Prepare the store and trigger the initial rebuild.

        Returns:
            Future of the first index generation.
        """
        if self.config.paths.create_data_directory:
            ensure_directory(self.pdf_dir)

        logger.info(f"Library service starting on {self.pdf_dir}")

        return self.manager.start()

    def close(self) -> None:
        """Shut down the index manager."""
        self.manager.close()

    def __enter__(self) -> "LibraryService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # Store

    def list_documents(self) -> List[Dict[str, str]]:
        """
        List the documents in the store.

        Returns:
            One {"name": filename} per PDF, sorted by name.

        Raises:
            StoreUnavailable: If the directory cannot be read.
        """
        return [{"name": entry.name} for entry in self.scanner.scan()]

    def resolve_path(self, file: Union[str, Path]) -> Path:
        """
        Turn a tool's file argument into an existing path.

        Args:
            file: Absolute path, or a filename relative to the store.

        Returns:
            Path of the file.

        Raises:
            DocumentNotFound: If the argument is empty or names no file.
        """
        if not file:
            raise DocumentNotFound("Missing file parameter", filename="")

        path = Path(file)
        if not path.is_absolute():
            path = self.pdf_dir / path

        if not path.is_file():
            raise DocumentNotFound(f"File not found: {file}", filename=str(file))

        return path

    def store_name(self, file: Union[str, Path]) -> str:
        """
        Turn a file argument into the name of a document in the store.

        The argument may be a bare name or a path, absolute or relative to
        the store, but it must point directly into the store directory at
        a file the scanner lists.

        Raises:
            DocumentNotFound: If the argument names no document of the store.
        """
        if not file:
            raise DocumentNotFound("Missing file parameter", filename="")

        candidate = Path(file).expanduser()
        if not candidate.is_absolute():
            candidate = self.pdf_dir / candidate

        if candidate.parent.resolve() != self.pdf_dir.resolve() or candidate.name not in self.scanner.names():
            raise DocumentNotFound(f"Not a document of the library: {file}", filename=str(file))

        return candidate.name

    def is_supported(self, name: str) -> bool:
        """Whether a filename carries one of the configured document extensions."""
        return name.lower().endswith(tuple(ext.lower() for ext in self.config.extraction.supported_extensions))

    # Document tools

    def get_metadata(self, file: Union[str, Path]) -> Dict:
        """
        Read info fields, page count, and a leading text sample.

        Raises:
            DocumentNotFound: If the file does not exist.
            ExtractionError: If the file cannot be parsed.
        """
        path = self.resolve_path(file)
        metadata = self.extractor.read_metadata(path, self.config.library.metadata_sample_chars)
        return metadata.to_dict()

    def extract_text(self, file: Union[str, Path]) -> str:
        """
        Extract the full text of a document.

        Raises:
            DocumentNotFound: If the file does not exist.
            ExtractionError: If no text can be extracted.
        """
        path = self.resolve_path(file)
        return self.extractor.extract_text(path)

    def summarize(self, file: Union[str, Path], sentences: Optional[int] = None) -> str:
        """
        Summarize a document by its leading sentences.

        Args:
            file: Document to summarize.
            sentences: Number of sentences. Defaults to config value.

        Returns:
            The summary text.
        """
        if sentences is None:
            sentences = self.config.library.summary_sentences

        text = self.extract_text(file)
        return summarize_text(text, sentences)

    def split_pdf(
        self,
        file: Union[str, Path],
        start_page: Optional[int] = None,
        end_page: Optional[int] = None
    ) -> Tuple[Dict[str, str], Future]:
        """
        Copy a page range into a new document inside the store.

        The range is 1-indexed and inclusive, clamped to the document.
        The output is named <stem>_pages_<start>-<end>.pdf and replaces
        any file of that name.

        Args:
            file: Source document.
            start_page: First page. Defaults to 1.
            end_page: Last page. Defaults to the last page.

        Returns:
            Tuple of ({"out_name", "out_path"}, rebuild future).

        Raises:
            DocumentNotFound: If the source does not exist.
            InvalidPageRange: If the clamped range holds no page.
            ExtractionError: If the source cannot be parsed.
        """
        path = self.resolve_path(file)

        try:
            reader = PdfReader(path)
            if reader.is_encrypted:
                reader.decrypt("")
            total = len(reader.pages)
        except Exception as e:
            raise ExtractionError(f"Cannot open PDF for splitting: {e}", filepath=str(path))

        first = max(1, int(start_page or 1))
        last = min(int(end_page), total) if end_page else total

        if first > last:
            raise InvalidPageRange(
                f"Page range {first}-{last} is empty for {path.name} ({total} pages)",
                {"start_page": first, "end_page": last, "page_count": total}
            )

        writer = PdfWriter()
        for page_index in range(first - 1, last):
            writer.add_page(reader.pages[page_index])

        out_name = f"{path.stem}_pages_{first}-{last}.pdf"
        out_path = self.pdf_dir / out_name

        ensure_directory(self.pdf_dir)
        with open(out_path, "wb") as f:
            writer.write(f)

        logger.info(f"Wrote pages {first}-{last} of {path.name} to {out_name}")

        future = self.manager.request_rebuild(reason=f"split {path.name}")
        return {"out_name": out_name, "out_path": str(out_path)}, future

    def convert_to_epub(self, file: Union[str, Path], title: Optional[str] = None) -> Dict[str, str]:
        """
        Write the text of a document as a single-chapter EPUB in the store.

        The output is named <stem>.epub and replaces any file of that name.
        EPUB files are not indexed, so no rebuild is requested.

        Args:
            file: Source document.
            title: Book and chapter title. Defaults to the source stem.

        Returns:
            {"out_name", "out_path"} of the written book.

        Raises:
            DocumentNotFound: If the source does not exist.
            ExtractionError: If the source has no extractable text.
        """
        path = self.resolve_path(file)
        text = self.extractor.extract_text(path)
        title = (title or "").strip() or path.stem

        book = epub.EpubBook()
        book.set_identifier(f"urn:uuid:{uuid.uuid4()}")
        book.set_title(title)
        book.set_language(self.config.library.epub_language)
        book.add_author(EPUB_AUTHOR)

        chapter = epub.EpubHtml(
            title=title,
            file_name=EPUB_CHAPTER_FILE,
            lang=self.config.library.epub_language
        )
        paragraphs = (p.strip() for p in text.split("\n\n"))
        chapter.content = f"<h1>{html.escape(title)}</h1>" + "".join(
            "<p>{}</p>".format(html.escape(p).replace("\n", "<br/>")) for p in paragraphs if p
        )
        book.add_item(chapter)

        book.toc = [epub.Link(EPUB_CHAPTER_FILE, title, "chapter_1")]
        book.add_item(epub.EpubNcx())
        book.add_item(epub.EpubNav())
        book.spine = ["nav", chapter]

        out_name = f"{path.stem}.epub"
        out_path = self.pdf_dir / out_name

        ensure_directory(self.pdf_dir)
        epub.write_epub(str(out_path), book, {})

        logger.info(f"Converted {path.name} to {out_name}")

        return {"out_name": out_name, "out_path": str(out_path)}

    def add_document(
        self,
        source: Union[str, Path],
        filename: Optional[str] = None
    ) -> Tuple[Dict[str, str], Future]:
        """
        Copy a PDF into the store, replacing a file of the same name.

        Args:
            source: Path of the file to add.
            filename: Name inside the store. Defaults to the source name.

        Returns:
            Tuple of ({"filename"}, rebuild future).

        Raises:
            DocumentNotFound: If the source does not exist or the name
                              is unusable.
            InvalidParameter: If the name lacks a document extension.
        """
        source = Path(source) if source else None
        if source is None or not source.is_file():
            raise DocumentNotFound(f"Upload source not found: {source}", filename=str(source or ""))

        try:
            name = safe_filename(filename or source.name)
        except ValueError as e:
            raise DocumentNotFound(str(e), filename=filename)

        if not self.is_supported(name):
            raise InvalidParameter(
                f"Not a PDF filename: {name}",
                {"filename": name, "supported_extensions": self.config.extraction.supported_extensions}
            )

        ensure_directory(self.pdf_dir)
        dest = self.pdf_dir / name

        if source.resolve() != dest.resolve():
            shutil.copyfile(source, dest)

        logger.info(f"Added {name} to the library")

        future = self.manager.request_rebuild(reason=f"upload {name}")
        return {"filename": name}, future

    def remove_document(self, file: Union[str, Path]) -> Tuple[Dict[str, str], Future]:
        """
        Delete a document from the store.

        Only files listed in the store can be removed; a path leading
        anywhere else is reported as not found and nothing is deleted.

        Returns:
            Tuple of ({"filename"}, rebuild future).

        Raises:
            DocumentNotFound: If the argument names no document of the store.
        """
        name = self.store_name(file)
        (self.pdf_dir / name).unlink()

        logger.info(f"Removed {name} from the library")

        future = self.manager.request_rebuild(reason=f"remove {name}")
        return {"filename": name}, future

    # Index

    def search(
        self,
        query: str,
        advanced: bool = False,
        limit: Optional[int] = None
    ) -> List[SearchResult]:
        """
        Ranked full-text search over the published index.

        Raises:
            InvalidQuery: If the query is empty or malformed.
            IndexNotReady: If no index has been published yet.
        """
        return self.engine.search(query, advanced=advanced, limit=limit)

    def rebuild_index(self, wait: bool = True) -> Future:
        """
        Request a rebuild from the current store contents.

        Args:
            wait: Block until the rebuild finishes, up to the configured
                  timeout. The rebuild's error is raised if it failed.

        Returns:
            Future of the rebuilt generation.
        """
        future = self.manager.request_rebuild(reason="manual")

        if wait:
            future.result(timeout=self.config.library.rebuild_timeout_s)

        return future

    def snapshot(self) -> Optional[IndexSnapshot]:
        """The published index generation, if any."""
        return self.manager.snapshot()

    def health(self) -> Dict:
        """
        Report service status.

        Returns:
            Status, store directory, index state and indexed documents.
        """
        snapshot = self.manager.snapshot()

        return {
            "status": "running",
            "pdf_dir": str(self.pdf_dir),
            "index_state": self.manager.state.value,
            "generation": snapshot.generation if snapshot else 0,
            "documents": len(snapshot) if snapshot else 0
        }


if __name__ == "__main__":
    with LibraryService() as service:
        service.start().result()
        print(service.health())
        for doc in service.list_documents()[:10]:
            print(f"  {doc['name']}")
