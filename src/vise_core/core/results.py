"""
Cache descriptors and the tagged RenderResult union.

Every RenderResult variant carries the RenderContext it was produced for
and ``render_by``, the name of the plugin whose callback defined it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Optional

from .context import RenderContext, RenderError


class RenderResultCategory(str, Enum):
    """Tag of a RenderResult."""

    RENDER = "render"
    ERROR = "error"
    RECEIVE_REQUEST = "receive_request"
    HIT_CACHE = "hit_cache"


@dataclass
class CacheInfo:
    """
    Identifies a cacheable response and its freshness window.

    Attributes:
        key: Cache key; an empty key disables the cache lookup
        expire: Lifetime in seconds
        stale: Whether a stale entry may be served
    """

    key: str
    expire: float = 0
    stale: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "expire": self.expire, "stale": self.stale}


@dataclass
class HitCache(CacheInfo):
    """CacheInfo plus the cached page; payload of the ``hit_cache`` hook."""

    content: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["content"] = self.content
        return data


@dataclass
class FindCacheResult:
    """Wrapped ``find_cache`` result: cached content plus its provider."""

    content: str
    render_by: str

    def to_dict(self) -> Dict[str, Any]:
        return {"content": self.content, "render_by": self.render_by}


@dataclass
class SsrBundleSuccess:
    """
    Markup fragments produced by a server renderer.

    Attributes:
        app: Rendered application markup
        html: Fully assembled page
        template: Page template with ``<!--ssr-*-->`` placeholders
        preload_links: ``<link rel="modulepreload">`` tags
    """

    app: str = ""
    html: str = ""
    template: str = ""
    preload_links: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "app": self.app,
            "html": self.html,
            "template": self.template,
            "preload_links": self.preload_links,
        }


@dataclass(kw_only=True)
class RenderResult:
    """Base of the RenderResult union. Use one of the concrete variants."""

    type: ClassVar[RenderResultCategory]

    context: RenderContext
    render_by: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "render_by": self.render_by,
            "context": self.context.to_dict(),
        }


@dataclass(kw_only=True)
class SuccessRenderResult(RenderResult):
    """Successful render; ``cache_info`` is attached on a cache miss."""

    type: ClassVar[RenderResultCategory] = RenderResultCategory.RENDER

    ssr_result: SsrBundleSuccess = field(default_factory=SsrBundleSuccess)
    cache_info: Optional[CacheInfo] = None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["ssr_result"] = self.ssr_result.to_dict()
        if self.cache_info is not None:
            data["cache_info"] = self.cache_info.to_dict()
        return data


@dataclass(kw_only=True)
class ErrorRenderResult(RenderResult):
    """Render failed, or the context already carried an error."""

    type: ClassVar[RenderResultCategory] = RenderResultCategory.ERROR

    error: RenderError

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["error"] = self.error.to_dict()
        return data


@dataclass(kw_only=True)
class InterceptRenderResult(RenderResult):
    """
    Request intercepted in ``receive_request``.

    The intercepting plugin is expected to finish the response itself
    (in ``after_render``/``before_response``).
    """

    type: ClassVar[RenderResultCategory] = RenderResultCategory.RECEIVE_REQUEST


@dataclass(kw_only=True)
class HitCacheRenderResult(RenderResult):
    """Page served from cache; the renderer never ran."""

    type: ClassVar[RenderResultCategory] = RenderResultCategory.HIT_CACHE

    content: str
    cache_info: CacheInfo

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["content"] = self.content
        data["cache_info"] = self.cache_info.to_dict()
        return data
