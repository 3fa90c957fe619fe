"""
Logging for the PDF Library Service.

All modules log through get_logger(__name__). The first call attaches a
stdout handler and, when the configuration names a logs directory, a
size-rotated pdf_library.log to the root logger. Rebuilds run on worker
threads, so the default format includes the thread name.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from .exceptions import ConfigurationError


DEFAULT_FORMAT = "%(asctime)s - %(name)s - [%(threadName)s] %(levelname)s - %(message)s"
LOG_FILENAME = "pdf_library.log"

_logger_initialized = False
_installed_handlers: List[logging.Handler] = []


def _build_handlers(
    formatter: logging.Formatter,
    logs_directory: Optional[Path],
    max_file_size_mb: int,
    backup_count: int
) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if logs_directory:
        logs_directory = Path(logs_directory)
        logs_directory.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            logs_directory / LOG_FILENAME,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8"
        ))

    for handler in handlers:
        handler.setFormatter(formatter)

    return handlers


def setup_logging(
    log_level: str = "INFO",
    log_format: str = DEFAULT_FORMAT,
    logs_directory: Path = None,
    max_file_size_mb: int = 10,
    backup_count: int = 5
) -> None:
    """
    Attach console and optional rotating file output to the root logger.

    Only the first call has an effect until reset_logging().

    Args:
        log_level: Level name, e.g. "DEBUG" or "INFO".
        log_format: logging.Formatter format string.
        logs_directory: Where pdf_library.log goes. None disables the file.
        max_file_size_mb: Size at which the log file rotates.
        backup_count: Rotated files to keep.
    """
    global _logger_initialized

    if _logger_initialized:
        return

    handlers = _build_handlers(
        logging.Formatter(log_format),
        logs_directory,
        max_file_size_mb,
        backup_count
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    for handler in handlers:
        root_logger.addHandler(handler)

    _installed_handlers.extend(handlers)
    _logger_initialized = True


def reset_logging() -> None:
    """Detach and close the handlers installed by setup_logging."""
    global _logger_initialized

    root_logger = logging.getLogger()
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()

    _logger_initialized = False


def _setup_from_config() -> None:
    from .config_loader import get_config

    try:
        config = get_config()
    except ConfigurationError:
        setup_logging()
        return

    try:
        setup_logging(
            log_level=config.logging.level,
            log_format=config.logging.format,
            logs_directory=config.paths.logs_directory,
            max_file_size_mb=config.logging.max_file_size_mb,
            backup_count=config.logging.backup_count
        )
    except OSError:
        # Unwritable logs directory: keep console output.
        setup_logging(log_level=config.logging.level, log_format=config.logging.format)


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger, initializing logging from config on first use.

    Without a config file, logging falls back to console-only defaults.
    """
    if not _logger_initialized:
        _setup_from_config()

    return logging.getLogger(name)


if __name__ == "__main__":
    setup_logging(log_level="DEBUG")

    logger = get_logger(__name__)
    logger.debug("Debug message")
    logger.info("Info message")
    logger.warning("Warning message")

    reset_logging()
