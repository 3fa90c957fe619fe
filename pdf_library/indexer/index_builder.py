"""
Rebuild pipeline for the PDF Library Service.

Composes the three rebuild stages: scanning the store, extracting text
from every document (in parallel), and building a fresh DocumentIndex from
the bounded text prefixes. A failing document is logged and left out; a
failing scan aborts the rebuild.
"""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, Dict, List

from ..core import get_config, get_logger, Config, ExtractionError
from ..extraction import FileScanner, PDFExtractor, StoreEntry
from ..utils import index_prefix
from .document_index import DocumentIndex
from .models import DocumentRecord, IndexingStats

logger = get_logger(__name__)


@dataclass
class BuildResult:
    """Output of one rebuild, not yet published."""
    records: Dict[str, DocumentRecord]
    index: DocumentIndex
    stats: IndexingStats


class IndexBuilder:
    """
    Builds document records and their index from the current store.

    A builder holds no state between runs, so the same instance can
    serve every rebuild of a process.
    """

    def __init__(
        self,
        scanner: FileScanner = None,
        extractor: PDFExtractor = None,
        max_indexed_chars: int = None,
        max_workers: int = None,
        progress_callback: Callable[[int, int, str], None] = None,
        config: Config = None
    ):
        """
        Initialize the index builder.

        Args:
            scanner: Store scanner. Defaults to one on the configured directory.
            extractor: Text extractor. Defaults to configured backends.
            max_indexed_chars: Per-document indexed text limit.
            max_workers: Extraction threads per rebuild.
            progress_callback: Optional callback(current, total, filename)
                              called as each document finishes extracting.
            config: Settings to use instead of the global configuration.
        """
        self.config = config or get_config()

        self.scanner = scanner or FileScanner(
            self.config.paths.data_directory,
            self.config.extraction.supported_extensions
        )
        self.extractor = extractor or PDFExtractor(
            self.config.extraction.primary_backend,
            self.config.extraction.fallback_backend
        )
        self.progress_callback = progress_callback

        self.max_indexed_chars = max_indexed_chars or self.config.indexing.max_indexed_chars
        self.max_workers = max_workers or self.config.extraction.max_workers
        self.log_every = self.config.indexing.log_progress_every

    def build(self) -> BuildResult:
        """
        Run the complete rebuild pipeline.

        Returns:
            BuildResult with records, index and statistics.

        Raises:
            StoreUnavailable: If the store directory cannot be read.
            DatabaseError: If the index itself cannot be built.
        """
        start_time = time.monotonic()
        stats = IndexingStats()

        logger.info(f"Starting index rebuild of {self.scanner.root_directory}")

        entries = self.scanner.scan()
        stats.files_scanned = len(entries)

        texts = self._extract_all(entries, stats)

        records: Dict[str, DocumentRecord] = {}

        for entry in entries:
            text = texts.get(entry.name)

            if text is None:
                continue

            indexed_text = index_prefix(text, self.max_indexed_chars)

            if not indexed_text.strip():
                stats.files_empty += 1
                logger.info(f"No text to index in {entry.name}")
                continue

            record = DocumentRecord(
                doc_id=entry.name,
                path=entry.path,
                title=entry.name,
                text=indexed_text,
                text_length=len(text)
            )

            if record.truncated:
                stats.files_truncated += 1

            records[record.doc_id] = record
            stats.chars_indexed += len(indexed_text)

        search_config = self.config.search
        index = DocumentIndex.build(
            ((r.doc_id, r.title, r.text) for r in records.values()),
            max_body_chars=self.max_indexed_chars,
            tokenizer=search_config.tokenizer,
            title_weight=search_config.field_weights.title,
            body_weight=search_config.field_weights.body,
            snippet_tokens=search_config.snippet_tokens
        )

        stats.files_indexed = len(index)
        stats.duration_s = round(time.monotonic() - start_time, 3)

        logger.info(
            f"Index rebuild complete: {stats.files_indexed} indexed, "
            f"{stats.files_empty} empty, {stats.files_failed} failed, "
            f"{stats.files_truncated} truncated in {stats.duration_s:.2f}s"
        )

        return BuildResult(records=records, index=index, stats=stats)

    def _extract_all(self, entries: List[StoreEntry], stats: IndexingStats) -> Dict[str, str]:
        """
        Extract every document on a thread pool.

        Args:
            entries: Store entries to process.
            stats: Statistics updated with failures.

        Returns:
            Mapping of filename to extracted text for the documents
            that did not fail.
        """
        texts: Dict[str, str] = {}

        if not entries:
            return texts

        total = len(entries)
        workers = max(1, min(total, self.max_workers))

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pdf-extract") as executor:
            future_to_entry = {
                executor.submit(self.extractor.extract_text, entry.path): entry
                for entry in entries
            }

            for done, future in enumerate(as_completed(future_to_entry), start=1):
                entry = future_to_entry[future]

                try:
                    texts[entry.name] = future.result()

                except ExtractionError as e:
                    stats.files_failed += 1
                    error_msg = f"{entry.name}: {e.message}"
                    stats.errors.append(error_msg)
                    logger.warning(f"Failed to extract text for indexing: {error_msg}")

                except Exception as e:
                    stats.files_failed += 1
                    error_msg = f"{entry.name}: {e}"
                    stats.errors.append(error_msg)
                    logger.error(f"Unexpected error extracting {error_msg}")

                if self.progress_callback:
                    self.progress_callback(done, total, entry.name)

                if self.log_every and done % self.log_every == 0:
                    logger.info(f"Progress: {done}/{total} documents extracted")

        return texts


def progress_printer(current: int, total: int, filename: str) -> None:
    """Simple progress callback that prints to console."""
    percent = (current / total) * 100 if total > 0 else 0
    print(f"\r[{percent:5.1f}%] {current}/{total} - {filename[:50]:<50}", end="", flush=True)


if __name__ == "__main__":
    builder = IndexBuilder(progress_callback=progress_printer)
    result = builder.build()

    print()
    print(f"Indexed {result.stats.files_indexed} of {result.stats.files_scanned} documents")
    for error in result.stats.errors[:10]:
        print(f"  - {error}")

    result.index.close()
