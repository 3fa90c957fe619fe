"""
Custom exception hierarchy for the PDF Library Service.

Provides specific exception types for the different failure modes:
configuration errors, an unreadable document store, per-document extraction
failures, query problems, and caller errors on tool operations.
"""


class PDFLibraryError(Exception):
    """Base exception for all PDF Library Service errors."""

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(PDFLibraryError):
    """Raised when configuration is invalid or missing."""
    pass


class StoreUnavailable(PDFLibraryError):
    """Raised when the document directory cannot be enumerated."""

    def __init__(self, message: str, directory: str = None, details: dict = None):
        """
        Initialize store error.

        Args:
            message: Error description.
            directory: The directory that could not be read.
            details: Additional context.
        """
        super().__init__(message, details)
        self.directory = directory


class ExtractionError(PDFLibraryError):
    """Raised when PDF text extraction fails."""

    def __init__(self, message: str, filepath: str = None, details: dict = None):
        """
        Initialize extraction error.

        Args:
            message: Error description.
            filepath: Path to the problematic PDF file.
            details: Additional context.
        """
        super().__init__(message, details)
        self.filepath = filepath


class DatabaseError(PDFLibraryError):
    """Raised when SQLite operations on an index fail."""
    pass


class SearchError(PDFLibraryError):
    """Raised when search query execution fails."""

    def __init__(self, message: str, query: str = None, details: dict = None):
        """
        Initialize search error.

        Args:
            message: Error description.
            query: The problematic search query.
            details: Additional context.
        """
        super().__init__(message, details)
        self.query = query


class InvalidQuery(SearchError):
    """Raised for empty queries or malformed advanced expressions."""
    pass


class IndexNotReady(SearchError):
    """Raised when no index build has completed yet."""
    pass


class DocumentNotFound(PDFLibraryError):
    """Raised when a tool operation names a file that does not exist."""

    def __init__(self, message: str, filename: str = None, details: dict = None):
        super().__init__(message, details)
        self.filename = filename


class InvalidPageRange(PDFLibraryError):
    """Raised when a requested page range selects no pages."""
    pass


class UnknownTool(PDFLibraryError):
    """Raised when a tool name has no registered handler."""
    pass


class InvalidParameter(PDFLibraryError):
    """Raised when a tool parameter has the wrong type or value."""
    pass


if __name__ == "__main__":
    try:
        raise StoreUnavailable("Directory not found", directory="/missing/pdfs")
    except PDFLibraryError as e:
        print(f"Caught: {e.__class__.__name__}: {e.message}")
        print(f"Directory: {e.directory}")

    try:
        raise InvalidQuery("Query is empty", query="   ")
    except SearchError as e:
        print(f"Search failed for: {e.query!r}")
