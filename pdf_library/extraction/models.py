"""
Data models for the document store and text extraction.

Defines the scanner's store entries and the metadata returned by
the extraction backends.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict


@dataclass(frozen=True)
class StoreEntry:
    """
    A PDF file found directly inside the store directory.

    Attributes:
        name: Filename, unique within the store and used as identity.
        path: Resolved absolute path to the file.
    """
    name: str
    path: Path


@dataclass
class DocumentMetadata:
    """
    Structural metadata of a single PDF.

    Attributes:
        info: Embedded document info fields (Title, Author, ...).
        page_count: Number of pages in the document.
        text_sample: Leading characters of the extracted text.
    """
    info: Dict[str, str] = field(default_factory=dict)
    page_count: int = 0
    text_sample: str = ""

    def to_dict(self) -> Dict:
        """Serialize to the tool result layout."""
        return {
            "info": dict(self.info),
            "numpages": self.page_count,
            "text_sample": self.text_sample
        }
