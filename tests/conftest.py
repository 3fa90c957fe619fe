"""
Pytest fixtures and configuration for the test suite.

Provides temporary directories, generated PDFs, a scripted extractor,
and mock configurations to ensure tests are isolated and safe.
"""

import json
import pytest
import threading
from pathlib import Path
from typing import Dict, Iterable, Union

from pypdf import PdfWriter

import sys
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from pdf_library.core import ExtractionError  # noqa: E402
from pdf_library.extraction import DocumentMetadata  # noqa: E402


class FakeExtractor:
    """
    Extractor double returning scripted text per filename.

    Unknown files raise ExtractionError, as do names listed in
    `failing`. An optional gate blocks extraction until released,
    which lets tests hold a rebuild in flight.
    """

    def __init__(self, texts: Dict[str, str] = None, failing: Iterable[str] = ()):
        self.texts = dict(texts or {})
        self.failing = set(failing)
        self.calls = []
        self.gate = None
        self.entered = threading.Event()
        self._lock = threading.Lock()

    def extract_text(self, filepath: Union[str, Path]) -> str:
        name = Path(filepath).name

        with self._lock:
            self.calls.append(name)
        self.entered.set()

        if self.gate is not None:
            self.gate.wait(timeout=10)

        if name in self.failing or name not in self.texts:
            raise ExtractionError(f"Cannot extract {name}", filepath=str(filepath))

        return self.texts[name]

    def read_metadata(self, filepath: Union[str, Path], sample_chars: int = 500) -> DocumentMetadata:
        text = self.texts.get(Path(filepath).name, "")
        return DocumentMetadata(info={"Title": Path(filepath).stem}, page_count=1, text_sample=text[:sample_chars])


def write_pdf(path: Path, pages: int = 1, title: str = None) -> Path:
    """Write a PDF with blank pages and optional info title."""
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=612, height=792)
    if title:
        writer.add_metadata({"/Title": title})

    with open(path, "wb") as f:
        writer.write(f)

    return path


def touch_pdfs(directory: Path, names: Iterable[str]) -> None:
    """Create one-page PDFs with the given names."""
    for name in names:
        write_pdf(directory / name)


def settings_for(root: Path) -> dict:
    """Configuration written by temp_config, rooted under root."""
    return {
        "paths": {
            "data_directory": str(root / "data"),
            "logs_directory": str(root / "output" / "logs"),
            "create_data_directory": True
        },
        "extraction": {
            "primary_backend": "pypdf",
            "fallback_backend": "pdfplumber",
            "supported_extensions": [".pdf"],
            "max_workers": 2
        },
        "indexing": {"max_indexed_chars": 20000, "log_progress_every": 5},
        "search": {
            "default_limit": 20,
            "snippet_tokens": 8,
            "field_weights": {"title": 1.0, "body": 10.0},
            "tokenizer": "unicode61 remove_diacritics 2"
        },
        "library": {"summary_sentences": 2, "metadata_sample_chars": 100, "rebuild_timeout_s": 10},
        "gui": {"page_title": "Test PDF Library", "results_per_page": 10},
        "logging": {
            "level": "DEBUG",
            "format": "%(levelname)s - %(message)s",
            "max_file_size_mb": 1,
            "backup_count": 1
        }
    }


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Per-test scratch directory."""
    return tmp_path


@pytest.fixture
def temp_config(temp_dir: Path) -> Path:
    """config/config.json with data and logs directories under temp_dir."""
    settings = settings_for(temp_dir)
    for key in ("data_directory", "logs_directory"):
        Path(settings["paths"][key]).mkdir(parents=True)

    config_path = temp_dir / "config" / "config.json"
    config_path.parent.mkdir()
    config_path.write_text(json.dumps(settings, indent=2), encoding="utf-8")
    return config_path


@pytest.fixture
def data_dir(temp_config: Path) -> Path:
    return temp_config.parent.parent / "data"


@pytest.fixture
def sample_pdf(temp_dir: Path) -> Path:
    """Three blank pages titled "Sample Document"."""
    return write_pdf(temp_dir / "sample.pdf", pages=3, title="Sample Document")


@pytest.fixture
def sample_pdf_collection(temp_dir: Path) -> Path:
    """
    Store layout for scanner tests.

    Three top-level PDFs (one with an upper-case extension), one nested
    PDF, a text file and a directory whose name ends in .pdf.
    """
    collection = temp_dir / "collection"
    (collection / "folder1").mkdir(parents=True)

    touch_pdfs(collection, ["root_doc.pdf", "UPPER.PDF", "b.pdf"])
    touch_pdfs(collection / "folder1", ["nested.pdf"])
    (collection / "readme.txt").write_text("Not a PDF")
    (collection / "folder.pdf").mkdir()

    return collection


@pytest.fixture
def fake_extractor() -> FakeExtractor:
    """Extractor scripted with the two-document fox/turtle texts."""
    return FakeExtractor({"a.pdf": "The quick fox", "b.pdf": "A slow turtle"})


@pytest.fixture
def reset_config_singleton(monkeypatch):
    """Fresh global config, with no data directory override, for each test."""
    from pdf_library.core import config_loader

    monkeypatch.delenv(config_loader.DATA_DIRECTORY_ENV, raising=False)
    config_loader._config_instance = None
    yield
    config_loader._config_instance = None


@pytest.fixture
def reset_logger_singleton():
    from pdf_library.core.logger import reset_logging

    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def configured(temp_config, reset_config_singleton):
    """The temporary config, loaded as the global configuration."""
    from pdf_library.core.config_loader import get_config

    return get_config(temp_config)


@pytest.fixture
def make_extractor():
    """make_extractor(texts, failing=()) builds a FakeExtractor."""
    return FakeExtractor


@pytest.fixture
def make_pdf():
    """make_pdf(path, pages=1, title=None) writes a generated PDF."""
    return write_pdf


@pytest.fixture
def store(data_dir: Path):
    """store(*names) adds one-page PDFs to the configured store and returns it."""
    def populate(*names: str) -> Path:
        touch_pdfs(data_dir, names)
        return data_dir

    return populate
