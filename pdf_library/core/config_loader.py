"""
Configuration loader for the PDF Library Service.

Reads config/config.json into one dataclass per section. Every field has
a default, so a partial file (or an empty one) yields a usable Config.
The store directory can be overridden per process with PDF_DIR.
"""

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .exceptions import ConfigurationError


DATA_DIRECTORY_ENV = "PDF_DIR"
CONFIG_RELATIVE_PATH = Path("config") / "config.json"


@dataclass
class PathsConfig:
    """Store and log locations. Relative entries are resolved on load."""
    data_directory: Path = Path("data")
    logs_directory: Path = Path("output/logs")
    create_data_directory: bool = True


@dataclass
class ExtractionConfig:
    """Text extraction backends and parallelism."""
    primary_backend: str = "pypdf"
    fallback_backend: Optional[str] = "pdfplumber"
    supported_extensions: List[str] = field(default_factory=lambda: [".pdf"])
    max_workers: int = 4


@dataclass
class IndexingConfig:
    """Rebuild limits."""
    max_indexed_chars: int = 20000
    log_progress_every: int = 100


@dataclass
class FieldWeights:
    """BM25 weights of the title and body columns."""
    title: float = 1.0
    body: float = 10.0


@dataclass
class SearchConfig:
    """Ranking and display settings for queries."""
    default_limit: int = 50
    snippet_tokens: int = 16
    field_weights: FieldWeights = field(default_factory=FieldWeights)
    tokenizer: str = "unicode61 remove_diacritics 2"


@dataclass
class LibraryConfig:
    """Defaults of the document tool operations."""
    summary_sentences: int = 4
    metadata_sample_chars: int = 500
    rebuild_timeout_s: float = 120.0
    epub_language: str = "fr"


@dataclass
class GUIConfig:
    """Streamlit interface settings."""
    page_title: str = "Bibliothèque PDF"
    results_per_page: int = 20


@dataclass
class LoggingConfig:
    """Log level, format and file rotation."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_file_size_mb: int = 10
    backup_count: int = 5


def _section(section_cls, data: Mapping[str, Any], name: str):
    """Build one section dataclass, rejecting keys it does not define."""
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Section '{name}' must be an object", {"section": name})

    known = {f.name for f in fields(section_cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown keys in section '{name}': {', '.join(unknown)}",
            {"section": name, "keys": unknown}
        )

    return section_cls(**data)


def _positive(value: int, name: str) -> None:
    if not isinstance(value, int) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive integer", {"value": value})


@dataclass
class Config:
    """
    All configuration sections plus the root relative paths resolve against.

    Obtain the process-wide instance through get_config().
    """
    paths: PathsConfig = field(default_factory=PathsConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    indexing: IndexingConfig = field(default_factory=IndexingConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    library: LibraryConfig = field(default_factory=LibraryConfig)
    gui: GUIConfig = field(default_factory=GUIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    project_root: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_file(cls, config_path: Path) -> "Config":
        """
        Load configuration from a JSON file.

        The project root is the parent of the directory holding the file,
        so config/config.json resolves paths against the repository root.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid.
        """
        config_path = Path(config_path)

        try:
            raw = config_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                {"path": str(config_path)}
            )
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read configuration file: {e}",
                {"path": str(config_path)}
            )

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {e}",
                {"path": str(config_path)}
            )

        return cls.from_dict(data, config_path.resolve().parent.parent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], project_root: Path = None) -> "Config":
        """
        Build a Config from a parsed mapping, possibly partial.

        Args:
            data: Raw configuration, one object per section.
            project_root: Base for relative paths. Defaults to the cwd.

        Raises:
            ConfigurationError: On unknown keys or invalid limits.
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration root must be an object")

        project_root = Path(project_root or Path.cwd())

        paths = _section(PathsConfig, data.get("paths", {}), "paths")
        data_directory = os.environ.get(DATA_DIRECTORY_ENV) or paths.data_directory
        paths.data_directory = cls._resolve_path(data_directory, project_root)
        paths.logs_directory = cls._resolve_path(paths.logs_directory, project_root)

        search_data = dict(data.get("search", {}))
        weights = _section(FieldWeights, search_data.pop("field_weights", {}), "search.field_weights")
        search = _section(SearchConfig, search_data, "search")
        search.field_weights = weights

        config = cls(
            paths=paths,
            extraction=_section(ExtractionConfig, data.get("extraction", {}), "extraction"),
            indexing=_section(IndexingConfig, data.get("indexing", {}), "indexing"),
            search=search,
            library=_section(LibraryConfig, data.get("library", {}), "library"),
            gui=_section(GUIConfig, data.get("gui", {}), "gui"),
            logging=_section(LoggingConfig, data.get("logging", {}), "logging"),
            project_root=project_root
        )

        _positive(config.indexing.max_indexed_chars, "indexing.max_indexed_chars")
        _positive(config.extraction.max_workers, "extraction.max_workers")

        return config

    @staticmethod
    def _resolve_path(value, project_root: Path) -> Path:
        path = Path(value).expanduser()
        return path if path.is_absolute() else project_root / path


_config_instance: Optional[Config] = None


def get_config(config_path: Path = None) -> Config:
    """
    Get the process-wide Config.

    Args:
        config_path: Load from this file. Without it, the first call
                     looks for config/config.json from the cwd upward.

    Raises:
        ConfigurationError: If the configuration cannot be loaded.
    """
    global _config_instance

    if config_path is not None:
        _config_instance = Config.from_file(config_path)
    elif _config_instance is None:
        _config_instance = Config.from_file(_find_config_file())

    return _config_instance


def _find_config_file() -> Path:
    """Walk up from the cwd to the first directory holding config/config.json."""
    start = Path.cwd()

    for directory in [start, *start.parents]:
        candidate = directory / CONFIG_RELATIVE_PATH
        if candidate.is_file():
            return candidate

    raise ConfigurationError(
        f"Could not find {CONFIG_RELATIVE_PATH} in {start} or its parents"
    )


def reload_config(config_path: Path = None) -> Config:
    """Drop the cached Config and load it again."""
    global _config_instance
    _config_instance = None
    return get_config(config_path)


if __name__ == "__main__":
    try:
        config = get_config()
    except ConfigurationError as e:
        print(f"Config error: {e.message}")
    else:
        print(f"Project root:      {config.project_root}")
        print(f"Data directory:    {config.paths.data_directory}")
        print(f"Backends:          {config.extraction.primary_backend} -> {config.extraction.fallback_backend}")
        print(f"Max indexed chars: {config.indexing.max_indexed_chars}")
        print(f"Tokenizer:         {config.search.tokenizer}")
