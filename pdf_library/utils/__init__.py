"""
Utility module providing shared helper functions.

Contains file operations and text processing utilities used across
the application. Depends only on the core module.
"""

from .file_utils import (
    get_file_size_mb,
    ensure_directory,
    safe_filename
)
from .text_utils import (
    clean_text,
    truncate_text,
    format_score,
    index_prefix,
    split_sentences,
    summarize_text
)

__all__ = [
    "get_file_size_mb",
    "ensure_directory",
    "safe_filename",
    "clean_text",
    "truncate_text",
    "format_score",
    "index_prefix",
    "split_sentences",
    "summarize_text"
]
