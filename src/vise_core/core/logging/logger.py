"""
Main logger for Vise Core.

Wraps a stdlib logger with configured handlers, formatters and filters and
masks sensitive values (cookies, authorization headers, tokens) before
they reach any handler.
"""

import logging
from typing import Optional, Any

from .config import LoggingConfig, LogLevel
from .formatters import get_formatter
from .filters import CorrelationIdFilter, ExtraFieldsFilter, HookFilter
from .handlers import create_console_handler, create_file_handler
from ...utils.sanitizer import mask_sensitive_data


class ViseLogger:
    """
    Main logger for Vise Core.

    Example:
        >>> config = LoggingConfig.create(level="DEBUG", format="json")
        >>> logger = ViseLogger(config)
        >>> logger.info("Lifecycle finished", code=200, render_by="vise-plugin-ssr")
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = "vise_core.lifecycle"):
        """
        Initialize logger.

        Args:
            config: Logging configuration (uses defaults if None)
            name: Logger name
        """
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False

        level = self._get_level(self.config.level)
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)
        self._logger.propagate = False  # Don't propagate to root logger

        # Reinitialising replaces previous handlers
        for handler in self._logger.handlers[:]:
            self._logger.removeHandler(handler)
            handler.close()

        filters = []
        if self.config.enable_correlation_id:
            filters.append(CorrelationIdFilter())
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))
        if self.config.hooks_only:
            filters.append(HookFilter(self.config.hooks))

        formatter = get_formatter(self.config.format.value)

        if self.config.enable_console:
            self._logger.addHandler(
                create_console_handler(level=level, formatter=formatter, filters=filters)
            )

        if self.config.enable_file and self.config.file_path:
            self._logger.addHandler(
                create_file_handler(
                    file_path=self.config.file_path,
                    level=level,
                    formatter=formatter,
                    max_bytes=self.config.max_bytes,
                    backup_count=self.config.backup_count,
                    filters=filters
                )
            )

    @staticmethod
    def _get_level(level: LogLevel) -> int:
        """Convert LogLevel enum to logging level int."""
        return getattr(logging, level.value)

    @property
    def logger(self) -> logging.Logger:
        """Underlying stdlib logger."""
        return self._logger

    def is_enabled_for(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)

    def _log(self, level: int, message: str, kwargs: dict, exc_info: bool = False) -> None:
        self._logger.log(level, message, extra=mask_sensitive_data(kwargs), exc_info=exc_info)

    # Proxy methods; keyword arguments become extra fields on the record

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, message, kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log error with traceback. Call from an exception handler."""
        self._log(logging.ERROR, message, kwargs, exc_info=True)

    def close(self) -> None:
        """
        Flush and close all handlers. Idempotent.

        Example:
            >>> with ViseLogger(config) as logger:
            ...     logger.info("Serving")
        """
        if self._closed:
            return

        for handler in self._logger.handlers[:]:
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


# Global logger instance (singleton pattern)
_default_logger: Optional[ViseLogger] = None


def get_logger(config: Optional[LoggingConfig] = None) -> ViseLogger:
    """
    Get global logger instance.

    Creates the logger on first call; ``config`` is ignored afterwards.
    Use configure_logging() to replace it.
    """
    global _default_logger

    if _default_logger is None:
        _default_logger = ViseLogger(config)

    return _default_logger


def configure_logging(config: LoggingConfig) -> ViseLogger:
    """
    Replace the global logger with a newly configured one.

    Example:
        >>> logger = configure_logging(LoggingConfig.create(level="DEBUG"))
    """
    global _default_logger
    if _default_logger is not None:
        _default_logger.close()
    _default_logger = ViseLogger(config)
    return _default_logger
