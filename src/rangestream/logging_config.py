"""
Logging Configuration for rangestream.

Provides centralized logger setup for the package. All module loggers are
children of the ``rangestream`` logger, which is silent unless enabled
through the environment (see ``rangestream.config``).
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .config import StreamSettings, load_settings

PACKAGE_LOGGER_NAME = "rangestream"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_null_handler = logging.NullHandler()
_configured = False


class FlushingStreamHandler(logging.StreamHandler):
    """StreamHandler that flushes after every emit.

    ::: This is-in-layer Infrastructure-Layer.
    ::: This is a handler.
    ::: This is stateless.
    """
    def emit(self, record):
        super().emit(record)
        self.flush()


def _create_file_handler(log_path: Path, level: int) -> Optional[logging.FileHandler]:
    """
    Create a file handler for the specified log file.

    Args:
        log_path: Path of the log file; parent directories are created
        level: Handler level

    Returns:
        Configured FileHandler, or None if the file cannot be opened
    """
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
    except OSError:
        return None
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def _create_stderr_handler(level: int) -> logging.StreamHandler:
    """Create a stderr handler for console output with auto-flush."""
    handler = FlushingStreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.DEBUG


def configure_logging(settings: Optional[StreamSettings] = None, force: bool = False) -> logging.Logger:
    """
    Configure the package logger from settings.

    Only configures once unless ``force`` is set, in which case existing
    handlers are closed and replaced.

    Args:
        settings: Settings to apply (defaults to the environment)
        force: Reconfigure even if already configured

    Returns:
        The ``rangestream`` logger
    """
    global _configured

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if _configured and not force:
        return logger

    if settings is None:
        settings = load_settings()

    for handler in logger.handlers[:]:
        if handler is not _null_handler:
            handler.close()
        logger.removeHandler(handler)

    if not settings.logging_enabled:
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
        logger.addHandler(_null_handler)
        _configured = True
        return logger

    level = _resolve_level(settings.log_level)
    logger.setLevel(level)
    logger.propagate = False  # Don't propagate to root logger

    if settings.log_file is not None:
        file_handler = _create_file_handler(settings.log_file, level)
        if file_handler:
            logger.addHandler(file_handler)

    if settings.debug_log:
        logger.addHandler(_create_stderr_handler(level))

    _configured = True
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger under the ``rangestream`` hierarchy.

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        Logger whose records reach the package handlers
    """
    configure_logging()
    return logging.getLogger(name)
