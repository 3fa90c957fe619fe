"""
File utility functions for the PDF Library Service.

Provides common file operations: size calculations, directory management,
and sanitizing names of files copied into the document store.
"""

from pathlib import Path, PureWindowsPath
from typing import Union


def get_file_size_mb(filepath: Union[str, Path]) -> float:
    """
    Get file size in megabytes.

    Args:
        filepath: Path to the file.

    Returns:
        File size in MB, rounded to 2 decimal places.
    """
    filepath = Path(filepath)
    size_bytes = filepath.stat().st_size
    return round(size_bytes / (1024 * 1024), 2)


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Create directory tree if it doesn't exist.

    Args:
        path: Directory path to create.

    Returns:
        Path object of the directory.
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def safe_filename(name: str) -> str:
    """
    Reduce a client-supplied name to a bare filename.

    Strips any directory part (POSIX or Windows separators) so that
    the result always lands directly inside the store directory.

    Args:
        name: Name as received, possibly including a path.

    Returns:
        The final path component.

    Raises:
        ValueError: If nothing usable remains.
    """
    candidate = PureWindowsPath(name or "").name
    candidate = Path(candidate).name.strip()

    if candidate in ("", ".", ".."):
        raise ValueError(f"Invalid filename: {name!r}")

    return candidate


if __name__ == "__main__":
    print(safe_filename("../../etc/report.pdf"))
    print(safe_filename("C:\\Users\\me\\notes.pdf"))
