"""
Pytest configuration and fixtures for vise-core tests.
"""

import pytest

from vise_core.core.context import HTTPRequest, RenderContext
from vise_core.core.logging.filters import clear_correlation_id
from vise_core.core.results import SsrBundleSuccess, SuccessRenderResult


class RecordingLogger:
    """
    Stand-in for ViseLogger that keeps every call in memory.

    Records are (level, message, kwargs) tuples.
    """

    def __init__(self):
        self.records = []

    def _add(self, level, message, kwargs):
        self.records.append((level, message, kwargs))

    def debug(self, message, **kwargs):
        self._add("DEBUG", message, kwargs)

    def info(self, message, **kwargs):
        self._add("INFO", message, kwargs)

    def warning(self, message, **kwargs):
        self._add("WARNING", message, kwargs)

    def error(self, message, **kwargs):
        self._add("ERROR", message, kwargs)

    def critical(self, message, **kwargs):
        self._add("CRITICAL", message, kwargs)

    def exception(self, message, **kwargs):
        self._add("ERROR", message, kwargs)

    def messages(self, level=None):
        return [message for lvl, message, _ in self.records if level is None or lvl == level]

    def hook_lines(self, hook):
        prefix = f'[hook] "{hook}" intercept with: '
        return [message for message in self.messages("INFO") if message.startswith(prefix)]


@pytest.fixture
def recording_logger():
    """In-memory logger for lifecycle and hook traces."""
    return RecordingLogger()


@pytest.fixture(autouse=True)
def reset_correlation_id():
    clear_correlation_id()
    yield
    clear_correlation_id()


@pytest.fixture
def http_request():
    """Typical incoming request behind the /app1 router base."""
    return HTTPRequest(
        url="/app1/foo/bar?x=1",
        headers={"accept": "text/html", "cookie": "uid=42"},
    )


@pytest.fixture
def render_context(http_request):
    return RenderContext(
        request=http_request,
        extra={"title": "A", "no_cache": False, "init_state": {"user": {"id": 1}}, "router_base": "/"},
    )


@pytest.fixture
def success_result(render_context):
    return SuccessRenderResult(
        context=render_context,
        render_by="vise-plugin-ssr",
        ssr_result=SsrBundleSuccess(app="<div>app</div>", html="<html>page</html>"),
    )
