"""
Log handlers for console and file output.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import IO, Iterable, Optional


def _attach(handler: logging.Handler, level: int, formatter: logging.Formatter,
            filters: Optional[Iterable[logging.Filter]]) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    for f in filters or ():
        handler.addFilter(f)


def create_console_handler(
    level: int,
    formatter: logging.Formatter,
    filters: Optional[Iterable[logging.Filter]] = None,
    stream: Optional[IO[str]] = None,
) -> logging.StreamHandler:
    """
    Create console handler.

    Writes to stderr by default so that a server writing responses to
    stdout (CGI style hosts) is not polluted by hook traces.

    Args:
        level: Log level (e.g. logging.INFO)
        formatter: Formatter instance
        filters: Filters to add
        stream: Target stream (default: sys.stderr)
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    _attach(handler, level, formatter, filters)
    return handler


def create_file_handler(
    file_path: str,
    level: int,
    formatter: logging.Formatter,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    filters: Optional[Iterable[logging.Filter]] = None
) -> RotatingFileHandler:
    """
    Create rotating file handler.

    The parent directory is created when missing. Rotation keeps
    ``backup_count`` old files (ssr.log.1 ... ssr.log.N).
    """
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=file_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    _attach(handler, level, formatter, filters)
    return handler
