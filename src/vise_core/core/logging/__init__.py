"""
Logging system for Vise Core.

Provides structured logging with multiple formats, handlers, and filters.

Example:
    >>> from vise_core.core.logging import get_logger, LoggingConfig
    >>>
    >>> logger = get_logger()
    >>> logger.info("Server ready")
    >>>
    >>> config = LoggingConfig.create(level="DEBUG", format="colored")
    >>> logger = configure_logging(config)
    >>> logger.info("Lifecycle finished", code=200, render_by="vise-plugin-ssr")
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import ViseLogger, get_logger, configure_logging
from .formatters import JSONFormatter, TextFormatter, ColoredFormatter, get_formatter
from .filters import (
    CorrelationIdFilter,
    ExtraFieldsFilter,
    HookFilter,
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
)
from .handlers import create_console_handler, create_file_handler

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "ViseLogger",
    "get_logger",
    "configure_logging",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "ColoredFormatter",
    "get_formatter",
    # Filters
    "CorrelationIdFilter",
    "ExtraFieldsFilter",
    "HookFilter",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    # Handlers
    "create_console_handler",
    "create_file_handler",
]
