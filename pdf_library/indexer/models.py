"""
Data models for index generations.

Defines the per-document record, the statistics of a rebuild, and the
snapshot that pairs a record set with the index built from it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, List, Mapping, Optional

if TYPE_CHECKING:
    from .document_index import DocumentIndex


@dataclass(frozen=True)
class DocumentRecord:
    """
    One store file together with the text that was indexed for it.

    Attributes:
        doc_id: Filename, the identity used as index reference.
        path: Absolute path to the PDF.
        title: Display title, the filename unless set otherwise.
        text: Indexed body, the bounded prefix of the extracted text.
        text_length: Length of the full extracted text.
    """
    doc_id: str
    path: Path
    title: str
    text: str
    text_length: int

    @property
    def truncated(self) -> bool:
        """Whether part of the extracted text was left out of the index."""
        return self.text_length > len(self.text)


@dataclass
class IndexingStats:
    """Statistics from a rebuild."""
    files_scanned: int = 0
    files_indexed: int = 0
    files_empty: int = 0
    files_failed: int = 0
    files_truncated: int = 0
    chars_indexed: int = 0
    duration_s: float = 0.0
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class IndexSnapshot:
    """
    A published generation: records and their index, swapped as one.

    Readers take a snapshot once per operation and resolve every
    index hit against that same snapshot's records.
    """
    generation: int
    records: Mapping[str, DocumentRecord]
    index: "DocumentIndex"
    stats: IndexingStats
    built_at: datetime

    def __post_init__(self):
        if not isinstance(self.records, MappingProxyType):
            object.__setattr__(self, "records", MappingProxyType(dict(self.records)))

    def __len__(self) -> int:
        return len(self.records)

    def get(self, doc_id: str) -> Optional[DocumentRecord]:
        """Look up a record by identity."""
        return self.records.get(doc_id)
