"""Typed entry points for every hook, with trace logging."""

from typing import Optional

from ..core.context import HTTPRequest, HTTPResponse, RenderContext, ResolvedRequest
from ..core.results import CacheInfo, FindCacheResult, HitCache, RenderResult
from ..utils.equality import is_equal
from .hook_logger import HookLogger
from .names import HookName, dispatch_name
from .registry import HookRegistry


class HookInvoker:
    """
    Invokes hooks through the registry and logs their results.

    ``receive_request`` and ``find_cache`` are dispatched under their inner
    identifiers but logged under the public names. A result is only logged
    when the hook actually produced or changed something; ``render`` and
    ``hit_cache`` are always logged.
    """

    def __init__(self, registry: HookRegistry, hook_logger: Optional[HookLogger] = None):
        self.registry = registry
        self.hook_logger = hook_logger

    def _log(self, hook: HookName, interception) -> None:
        if self.hook_logger is not None:
            self.hook_logger.log(hook, interception)

    async def receive_request(self, http_request: HTTPRequest) -> Optional[RenderResult]:
        hook = HookName.RECEIVE_REQUEST
        result = await self.registry.invoke(dispatch_name(hook), http_request)
        if result is not None:
            self._log(hook, result)
        return result

    async def request_resolved(self, resolved_request: ResolvedRequest) -> ResolvedRequest:
        hook = HookName.REQUEST_RESOLVED
        result = await self.registry.invoke(hook, resolved_request)
        if not is_equal(result.original, result.resolved):
            self._log(hook, result)
        return result

    async def before_use_cache(self, context: RenderContext) -> Optional[CacheInfo]:
        hook = HookName.BEFORE_USE_CACHE
        cache_info = await self.registry.invoke(hook, context)
        if cache_info is not None:
            self._log(hook, cache_info)
        return cache_info

    async def find_cache(self, cache_info: CacheInfo) -> Optional[FindCacheResult]:
        hook = HookName.FIND_CACHE
        result = await self.registry.invoke(dispatch_name(hook), cache_info)
        if result is not None:
            self._log(hook, result)
        return result

    async def hit_cache(self, hit_cache: HitCache) -> None:
        hook = HookName.HIT_CACHE
        await self.registry.invoke(hook, hit_cache)
        self._log(hook, hit_cache)

    async def before_render(self, context: RenderContext) -> RenderContext:
        hook = HookName.BEFORE_RENDER
        result = await self.registry.invoke(hook, context)
        if not is_equal(result, context):
            self._log(hook, result)
        return result

    async def render(self, context: RenderContext) -> Optional[RenderResult]:
        hook = HookName.RENDER
        result = await self.registry.invoke(hook, context)
        self._log(hook, result)
        return result

    async def after_render(self, render_result: RenderResult) -> RenderResult:
        hook = HookName.AFTER_RENDER
        result = await self.registry.invoke(hook, render_result)
        if not is_equal(result, render_result):
            self._log(hook, result)
        return result

    async def before_response(self, render_result: RenderResult) -> Optional[HTTPResponse]:
        hook = HookName.BEFORE_RESPONSE
        response = await self.registry.invoke(hook, render_result)
        if response is not None:
            self._log(hook, response)
        return response
