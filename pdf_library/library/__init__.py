"""
Library module exposing the document tool operations.

LibraryService is the facade used by the web interface and the scripts;
run_tool wraps its operations in JSON envelopes.
"""

from .service import LibraryService
from .tools import TOOLS, get_tool, run_tool

__all__ = [
    "LibraryService",
    "TOOLS",
    "get_tool",
    "run_tool"
]
