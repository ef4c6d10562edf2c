# src/vise_core/hooks/lifecycle.py
"""
Жизненный цикл обработки одного HTTP запроса.

Фазы: RECEIVING_REQUEST -> REQUEST_RESOLVED -> CACHE_CHECK -> RENDERING -> END.
Перехват в receive_request и попадание в кэш переводят запрос сразу в END.

Ошибки рендеринга не пробрасываются: они превращаются в
ErrorRenderResult (HTTP 500). Исключения остальных хуков пробрасываются
вызывающему коду, который строит ответ сам (см. error_response()).
"""

import traceback
import uuid
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from ..core.config import DEFAULT_CONTENT_TYPE, DEFAULT_RENDER_BY_HEADER, LifecycleConfig
from ..core.context import (
    EXTRA_ROUTER_BASE,
    HTTPRequest,
    HTTPResponse,
    RenderContext,
    RenderError,
    ResolvedRequest,
    build_default_extra,
    html_headers,
    strip_router_base,
)
from ..core.logging import ViseLogger, clear_correlation_id, get_correlation_id, get_logger, set_correlation_id
from ..core.results import (
    CacheInfo,
    ErrorRenderResult,
    FindCacheResult,
    HitCache,
    HitCacheRenderResult,
    InterceptRenderResult,
    RenderResult,
    SuccessRenderResult,
)
from ..utils.object import clone_deep
from .hook_logger import HookLogger
from .invoker import HookInvoker
from .plugin import ViseHooks, build_registry

DEFAULT_RENDER = "vise:core"
LOGGER_NAME = "vise_core.lifecycle"

HTTP_OK = 200
HTTP_SERVER_ERROR = 500

INTERCEPT_NOT_FINISHED = (
    "Fatal Error: Hooks intercept the request with receive_request "
    "without finish rendering"
)
NO_RENDER_RESULT = "No render hook produced a result"
INTERNAL_ERROR_BODY = "Internal Server Error"


class LifecyclePhase(str, Enum):
    """Состояния жизненного цикла запроса."""
    RECEIVING_REQUEST = "receiving_request"
    REQUEST_RESOLVED = "request_resolved"
    CACHE_CHECK = "cache_check"
    RENDERING = "rendering"
    END = "end"


def error_response(exc: Optional[BaseException] = None,
                   content_type: str = DEFAULT_CONTENT_TYPE,
                   render_by_header: Optional[str] = DEFAULT_RENDER_BY_HEADER) -> HTTPResponse:
    """
    Ответ 500 для хост-сервера, когда start() выбросил исключение фазы.

    Текст исключения в тело не попадает.

    Example:
        >>> try:
        ...     response = await lifecycle.start(request)
        ... except Exception as exc:
        ...     response = error_response(exc)
    """
    headers = html_headers(content_type)
    if render_by_header:
        headers[render_by_header] = DEFAULT_RENDER
    return HTTPResponse(code=HTTP_SERVER_ERROR, headers=headers, body=INTERNAL_ERROR_BODY)


class LifecycleOrchestrator:
    """
    Превращает HTTPRequest в HTTPResponse, вызывая хуки плагинов.

    Реестр хуков строится один раз в конструкторе и дальше только читается,
    поэтому один экземпляр безопасно обслуживает конкурентные запросы.

    Args:
        vise_hooks: Хуки приложения и подключённые плагины
        logger: Логгер. Без него: собственный ViseLogger
                ``vise_core.lifecycle.<app_name>``, если задан config.logging,
                иначе глобальный get_logger()
        config: Конфигурация жизненного цикла

    Raises:
        InvalidPluginNameError: Невалидное имя плагина (при создании)

    Example:
        >>> lifecycle = LifecycleOrchestrator(ViseHooks(
        ...     app_name="demo",
        ...     hooks={"render": render_page},
        ... ))
        >>> response = await lifecycle.start(HTTPRequest(url="/demo/index"), {"router_base": "/demo"})
        >>> response.code
        200
    """

    def __init__(self, vise_hooks: ViseHooks, logger: Optional[ViseLogger] = None,
                 config: Optional[LifecycleConfig] = None):
        self.config = config or LifecycleConfig()
        if logger is None and self.config.logging is not None:
            logger = ViseLogger(self.config.logging, name=f"{LOGGER_NAME}.{vise_hooks.app_name}")
        self._logger = logger or get_logger()
        self.registry = build_registry(vise_hooks)
        self.hook_logger = HookLogger(
            self._logger,
            full_log=self.config.full_log,
            truncate=self.config.log_truncate,
        )
        self.invoker = HookInvoker(self.registry, self.hook_logger)

    def _enter(self, phase: LifecyclePhase, context: Optional[RenderContext] = None) -> None:
        url = context.request.url if context is not None else None
        self._logger.debug("Lifecycle phase", phase=phase.value, url=url)

    async def start(self, http_request: HTTPRequest,
                    session_extra: Optional[Mapping[str, Any]] = None) -> HTTPResponse:
        """
        Обработать один запрос.

        Args:
            http_request: Запрос от хост-сервера
            session_extra: Значения RenderContext.extra для этого запроса
                           (например ``router_base`` из match_app_for_url)

        Returns:
            HTTPResponse от before_response или синтезированный ответ

        Raises:
            Exception: Любое исключение хука, кроме render
        """
        owns_correlation_id = get_correlation_id() is None
        if owns_correlation_id:
            set_correlation_id(uuid.uuid4().hex)
        try:
            return await self._run(http_request, session_extra)
        finally:
            if owns_correlation_id:
                clear_correlation_id()

    async def _run(self, http_request: HTTPRequest,
                   session_extra: Optional[Mapping[str, Any]]) -> HTTPResponse:
        extra = build_default_extra(session_extra, default_title=self.config.default_title)
        path = strip_router_base(http_request.url, str(extra[EXTRA_ROUTER_BASE]))
        request = http_request.with_url(path)
        context = RenderContext(request=request, extra=extra)

        self._enter(LifecyclePhase.RECEIVING_REQUEST, context)
        intercepted = await self.invoker.receive_request(request)
        if intercepted is not None:
            return await self._end(InterceptRenderResult(
                context=intercepted.context,
                render_by=intercepted.render_by,
            ))

        self._enter(LifecyclePhase.REQUEST_RESOLVED, context)
        resolved_request = await self.invoker.request_resolved(ResolvedRequest(
            original=clone_deep(context),
            resolved=clone_deep(context),
        ))
        context = resolved_request.resolved

        self._enter(LifecyclePhase.CACHE_CHECK, context)
        cache_info, found = await self._check_cache(context)
        if found is not None and cache_info is not None:
            return await self._end(HitCacheRenderResult(
                context=context,
                render_by=found.render_by,
                content=found.content,
                cache_info=cache_info,
            ))

        self._enter(LifecyclePhase.RENDERING, context)
        context = await self.invoker.before_render(context)
        render_result = await self._render(context, cache_info)
        return await self._end(render_result)

    async def _check_cache(self, context: RenderContext) -> Tuple[Optional[CacheInfo], Optional[FindCacheResult]]:
        """
        Returns:
            ``(cache_info, found)``: cache_info is kept only when it has a
            key; found is None on a cache miss
        """
        cache_info = await self.invoker.before_use_cache(context)
        if cache_info is None or not cache_info.key:
            return None, None

        found = await self.invoker.find_cache(cache_info)
        if not isinstance(found, FindCacheResult):
            return cache_info, None

        await self.invoker.hit_cache(HitCache(
            key=cache_info.key,
            expire=cache_info.expire,
            stale=cache_info.stale,
            content=found.content,
        ))
        return cache_info, found

    def _core_error(self, context: RenderContext, error: RenderError) -> ErrorRenderResult:
        return ErrorRenderResult(context=context, render_by=DEFAULT_RENDER, error=error)

    async def _render(self, context: RenderContext,
                      cache_info: Optional[CacheInfo]) -> RenderResult:
        # An error set by earlier hooks skips the renderer
        if context.error is not None:
            return self._core_error(context, context.error)

        try:
            render_result = await self.invoker.render(context)
        except Exception as exc:
            self._logger.exception("Render hook failed", error_type=type(exc).__name__)
            return self._core_error(context, RenderError(
                code=HTTP_SERVER_ERROR,
                message=str(exc),
                detail={"stack": traceback.format_exc()},
            ))

        if render_result is None:
            return self._core_error(context, RenderError(
                code=HTTP_SERVER_ERROR,
                message=NO_RENDER_RESULT,
            ))

        if cache_info is not None and isinstance(render_result, SuccessRenderResult):
            render_result.cache_info = cache_info
        return render_result

    async def _end(self, render_result: RenderResult) -> HTTPResponse:
        self._enter(LifecyclePhase.END, render_result.context)
        final_result = await self.invoker.after_render(render_result)

        response = await self.invoker.before_response(final_result)
        if response is None:
            response = self._synthesize(final_result)

        self._logger.info(
            "Request finished",
            code=response.code,
            render_by=getattr(final_result, "render_by", None),
            url=render_result.context.request.url,
        )
        return response

    def _synthesize(self, render_result: RenderResult) -> HTTPResponse:
        code = HTTP_OK
        if isinstance(render_result, HitCacheRenderResult):
            body = render_result.content
        elif isinstance(render_result, ErrorRenderResult):
            code = render_result.error.code
            body = render_result.error.message
        elif isinstance(render_result, SuccessRenderResult):
            body = render_result.ssr_result.html
        else:
            # receive_request interception reaching here is a contract violation
            code = HTTP_SERVER_ERROR
            body = INTERCEPT_NOT_FINISHED

        headers = html_headers(self.config.content_type)
        if self.config.render_by_header:
            headers[self.config.render_by_header] = getattr(render_result, "render_by", "") or DEFAULT_RENDER
        return HTTPResponse(code=code, headers=headers, body=body)
