"""
NorKyst Reader Logging Configuration

Progress messages of an extraction (metadata fetch, index resolution,
velocity fetch, rotation) are emitted through the 'norkyst_reader' logger.
Nothing is printed unless the caller configures logging.
"""

import logging
import sys
from pathlib import Path
from typing import IO, Optional, Union

PACKAGE_LOGGER = 'norkyst_reader'

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _coerce_level(level: Union[int, str], default: int) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), default)
    return level


def _add_handler(logger: logging.Logger, handler: logging.Handler,
                 level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    format_string: Optional[str] = None,
    date_format: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Route extraction progress to a stream and optionally a file.

    INFO shows the pipeline steps; DEBUG adds the resolved cell, window and
    velocity slice of every request. Calling again replaces the handlers.

    Args:
        level: Level name or logging constant
        log_file: Optional path to a log file (parent directories are created)
        format_string: Record format, defaults to DEFAULT_FORMAT
        date_format: Timestamp format, defaults to DEFAULT_DATE_FORMAT
        stream: Console stream, defaults to stdout

    Returns:
        logging.Logger: The 'norkyst_reader' logger

    Examples:
        >>> setup_logging(level='DEBUG', log_file='norkyst.log')
    """
    level = _coerce_level(level, logging.INFO)
    formatter = logging.Formatter(
        format_string or DEFAULT_FORMAT, datefmt=date_format or DEFAULT_DATE_FORMAT
    )

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    _add_handler(logger, logging.StreamHandler(stream or sys.stdout), level, formatter)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        _add_handler(logger, logging.FileHandler(log_path), level, formatter)
        logger.info("Logging to file: %s", log_path)

    # Records stay out of the root logger
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, named relative to the package (e.g. 'io.extractor')."""
    return logging.getLogger(f'{PACKAGE_LOGGER}.{name}')


def set_log_level(level: Union[int, str]) -> None:
    """Change the level of the package logger and all of its handlers."""
    level = _coerce_level(level, logging.WARNING)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


# No output by default, warnings and errors once a handler is attached
_default_logger = logging.getLogger(PACKAGE_LOGGER)
if not _default_logger.handlers:
    _default_logger.addHandler(logging.NullHandler())
_default_logger.setLevel(logging.WARNING)
