"""
Trace of hook results.

Every hook result is summarised before logging: markup and cached
content are cut to a prefix, ``init_state`` is logged as a truncated
JSON string and headers/extra pass through the sanitizer. ``full_log``
logs the complete (still redacted) result instead.
"""

from typing import Any, Callable, Dict, Optional

from ..core.context import HTTPResponse, RenderContext, ResolvedRequest
from ..core.logging import ViseLogger, get_logger
from ..core.results import (
    ErrorRenderResult,
    FindCacheResult,
    HitCache,
    RenderResult,
    SuccessRenderResult,
)
from ..utils.sanitizer import mask_sensitive_data
from ..utils.serialization import dumps, to_jsonable
from .names import HookName

LOG_LINE = '[hook] "{hook}" intercept with: {text}'


class HookLogger:
    """
    Formats and emits one log line per hook result.

    Args:
        logger: Destination logger (global ViseLogger by default)
        full_log: Log complete results instead of summaries
        truncate: Prefix length for markup, content and init state

    Example:
        >>> hook_logger = HookLogger(full_log=False, truncate=100)
        >>> hook_logger.log(HookName.RENDER, render_result)
    """

    def __init__(self, logger: Optional[ViseLogger] = None, full_log: bool = False,
                 truncate: int = 100):
        self._logger = logger or get_logger()
        self.full_log = full_log
        self.truncate = truncate
        self._processors: Dict[HookName, Callable[[Any], Any]] = {
            HookName.RECEIVE_REQUEST: self._receive_request,
            HookName.REQUEST_RESOLVED: self._request_resolved,
            HookName.FIND_CACHE: self._find_cache,
            HookName.HIT_CACHE: self._hit_cache,
            HookName.BEFORE_RENDER: self._context,
            HookName.RENDER: self._render,
            HookName.AFTER_RENDER: self._after_render,
            HookName.BEFORE_RESPONSE: self._before_response,
        }

    def _cut(self, text: Optional[str]) -> str:
        return f"{(text or '')[:self.truncate]}..."

    def _extra(self, extra: Dict[str, Any]) -> Dict[str, Any]:
        init_state = extra.get("init_state")
        return {
            **extra,
            "init_state": dumps(init_state)[:self.truncate] if init_state else None,
        }

    def _context(self, context: RenderContext) -> Dict[str, Any]:
        data = context.to_dict()
        data["extra"] = self._extra(context.extra)
        return data

    def _receive_request(self, result: RenderResult) -> Dict[str, Any]:
        return {"render_by": result.render_by, "extra": result.context.extra}

    def _request_resolved(self, resolved_request: ResolvedRequest) -> Dict[str, Any]:
        return self._context(resolved_request.resolved)

    def _find_cache(self, result: FindCacheResult) -> Dict[str, Any]:
        return {"render_by": result.render_by, "content": self._cut(result.content)}

    def _hit_cache(self, hit: HitCache) -> Dict[str, Any]:
        return {"key": hit.key, "expire": hit.expire, "stale": hit.stale,
                "content": self._cut(hit.content)}

    def _render(self, result: RenderResult) -> Dict[str, Any]:
        if isinstance(result, ErrorRenderResult):
            text = f"render failed with: {dumps(result.error)}"
        elif isinstance(result, SuccessRenderResult):
            text = self._cut(result.ssr_result.app)
        else:
            text = result.type.value
        return {"render_by": result.render_by, "result": text}

    def _after_render(self, result: RenderResult) -> Dict[str, Any]:
        summary: Dict[str, Any] = {
            "render_by": result.render_by,
            "context": {
                "request": {"url": result.context.request.url},
                "extra": self._extra(result.context.extra),
            },
        }
        if isinstance(result, ErrorRenderResult):
            summary["error"] = result.error.to_dict()
        else:
            summary["type"] = result.type.value
        return summary

    def _before_response(self, response: HTTPResponse) -> Dict[str, Any]:
        data = response.to_dict()
        data["body"] = self._cut(response.body) if response.body else ""
        return data

    def format(self, hook: HookName, interception: Any) -> str:
        """Render the text part of a log line."""
        processor = self._processors.get(hook)
        if self.full_log or processor is None or interception is None:
            data = to_jsonable(interception) if interception is not None else None
        else:
            data = processor(interception)
        return dumps(mask_sensitive_data(data))

    def log(self, hook: HookName, interception: Any) -> None:
        text = self.format(hook, interception)
        self._logger.info(LOG_LINE.format(hook=hook.value, text=text), hook=hook.value)
