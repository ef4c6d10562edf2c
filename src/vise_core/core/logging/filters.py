"""
Log filters for adding request context to log records.

The correlation ID lives in a ContextVar: every lifecycle run is its own
asyncio task, so concurrent requests keep separate IDs on one thread.
"""

import logging
from contextvars import ContextVar
from typing import Dict, Any, Optional


_correlation_id: ContextVar[Optional[str]] = ContextVar("vise_correlation_id", default=None)


def set_correlation_id(correlation_id: str) -> None:
    """
    Set correlation ID for the current execution context.

    Example:
        >>> set_correlation_id("req-12345")
        >>> logger.info("Rendering")  # Will include correlation_id
    """
    _correlation_id.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    """Get correlation ID for the current execution context (None if unset)."""
    return _correlation_id.get()


def clear_correlation_id() -> None:
    """Clear correlation ID for the current execution context."""
    _correlation_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """
    Filter that adds the correlation ID to log records.

    Example:
        >>> handler.addFilter(CorrelationIdFilter())
        >>> set_correlation_id("req-12345")
        >>> logger.info("Request started")  # correlation_id=req-12345
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Add correlation ID to record if present."""
        correlation_id = get_correlation_id()
        if correlation_id:
            record.correlation_id = correlation_id
        return True


class ExtraFieldsFilter(logging.Filter):
    """
    Filter that adds static fields (service, environment, ...) to all records.

    Fields already present on the record win.
    """

    def __init__(self, extra_fields: Dict[str, Any]):
        super().__init__()
        self.extra_fields = extra_fields

    def filter(self, record: logging.LogRecord) -> bool:
        """Add extra fields to record."""
        for key, value in self.extra_fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class HookFilter(logging.Filter):
    """
    Filter that keeps only hook trace records.

    Hook traces carry a ``hook`` attribute (set by HookLogger). Optionally
    restricts output to a subset of hook names, which is handy when only
    the render path of a busy server is interesting.

    Example:
        >>> handler.addFilter(HookFilter({"render", "after_render"}))
    """

    def __init__(self, hook_names: Optional[set] = None):
        super().__init__()
        self.hook_names = set(hook_names) if hook_names else None

    def filter(self, record: logging.LogRecord) -> bool:
        hook = getattr(record, "hook", None)
        if hook is None:
            return False
        if self.hook_names is None:
            return True
        return hook in self.hook_names
