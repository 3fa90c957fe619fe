"""
CLI script to rebuild the document index and report on it.

The index lives in memory, so this is a dry run of what the service
does at startup: scan the store, extract every document, build the
index, and print statistics. Optional queries run against the result.

Usage:
    python scripts/run_indexer.py
    python scripts/run_indexer.py --pdf-dir ~/Documents/PDF
    python scripts/run_indexer.py --query "aviation civile" --query fox
    python scripts/run_indexer.py --config path/to/config.json
"""

import argparse
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pdf_library.core import get_config, get_logger, ConfigurationError, PDFLibraryError
from pdf_library.core.config_loader import reload_config, DATA_DIRECTORY_ENV
from pdf_library.database import fts5_available
from pdf_library.indexer import IndexBuilder, IndexManager
from pdf_library.search import QueryEngine
from pdf_library.utils import format_score


RULE = "=" * 60
MAX_LISTED_ERRORS = 20
MAX_LISTED_RESULTS = 10


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Rebuild the full-text index of a PDF directory")
    parser.add_argument("--config", type=Path, help="Path to custom config.json file")
    parser.add_argument("--pdf-dir", type=Path, help="Document directory (overrides paths.data_directory)")
    parser.add_argument("--query", action="append", default=[], help="Query to run after the rebuild (repeatable)")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args(argv)


def progress_callback(current: int, total: int, filename: str) -> None:
    """Redraw a one-line progress bar."""
    ratio = current / total if total else 0.0
    bar = ("#" * int(30 * ratio)).ljust(30, ".")
    print(f"\r[{bar}] {ratio:6.1%} {current}/{total} {filename[:40]:<40}", end="", flush=True)


def load_config(args):
    """
    Resolve the configuration the CLI flags ask for.

    --pdf-dir goes through the same environment override the service
    honors, so it wins over any config file.
    """
    if args.pdf_dir:
        os.environ[DATA_DIRECTORY_ENV] = str(args.pdf_dir.expanduser().resolve())

    if args.config:
        if not args.config.is_file():
            raise ConfigurationError(f"Config file not found: {args.config}")
        return reload_config(args.config)

    return reload_config() if args.pdf_dir else get_config()


def print_section(title: str, rows) -> None:
    print(RULE)
    print(title)
    print(RULE)
    for label, value in rows:
        print(f"{label + ':':<19}{value}")
    print(RULE)


def print_errors(errors) -> None:
    if not errors:
        return

    print(f"\nErrors ({len(errors)}):")
    for error in errors[:MAX_LISTED_ERRORS]:
        print(f"  - {error}")
    hidden = len(errors) - MAX_LISTED_ERRORS
    if hidden > 0:
        print(f"  ... and {hidden} more errors")


def run_queries(manager, queries) -> None:
    engine = QueryEngine(manager)

    for query in queries:
        try:
            results = engine.search(query)
        except PDFLibraryError as e:
            print(f"\nQuery '{query}' failed: {e.message}")
            continue

        print(f"\nQuery '{query}': {len(results)} results")
        for result in results[:MAX_LISTED_RESULTS]:
            print(f"  {format_score(result.score):>10}  {result.id}")


def main(argv=None) -> int:
    """Rebuild once, report, and return the process exit code."""
    args = parse_args(argv)

    try:
        config = load_config(args)
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}")
        return 1

    logger = get_logger(__name__)

    if not fts5_available():
        print("Error: this Python's SQLite library was built without FTS5")
        return 1

    print_section("PDF Library - Indexer", [
        ("Data directory", config.paths.data_directory),
        ("Max indexed chars", f"{config.indexing.max_indexed_chars:,}"),
        ("Extraction", f"{config.extraction.primary_backend} -> {config.extraction.fallback_backend}"),
    ])

    builder = IndexBuilder(progress_callback=None if args.quiet else progress_callback, config=config)
    manager = IndexManager(builder)

    try:
        print("\nStarting rebuild...\n")
        try:
            stats = manager.start().result().stats
        except PDFLibraryError as e:
            print(f"\nRebuild failed: {e.message}")
            return 1

        if not args.quiet:
            print("\n")

        print_section("Rebuild Complete", [
            ("Files scanned", f"{stats.files_scanned:,}"),
            ("Files indexed", f"{stats.files_indexed:,}"),
            ("Files empty", f"{stats.files_empty:,}"),
            ("Files failed", f"{stats.files_failed:,}"),
            ("Files truncated", f"{stats.files_truncated:,}"),
            ("Chars indexed", f"{stats.chars_indexed:,}"),
            ("Duration", f"{stats.duration_s:.2f}s"),
        ])
        print_errors(stats.errors)
        run_queries(manager, args.query)
    finally:
        manager.close()

    logger.debug("Indexer finished")
    return 1 if stats.files_failed else 0


if __name__ == "__main__":
    sys.exit(main())
