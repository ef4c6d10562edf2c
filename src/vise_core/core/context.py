"""Request and render context threaded through the hook lifecycle."""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from requests.structures import CaseInsensitiveDict

from .config import DEFAULT_CONTENT_TYPE

# Reserved RenderContextExtra keys; plugins may add any other JSON fields
EXTRA_TITLE = "title"
EXTRA_NO_CACHE = "no_cache"
EXTRA_INIT_STATE = "init_state"
EXTRA_ROUTER_BASE = "router_base"


def _freeze_headers(headers: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    if headers is None:
        return MappingProxyType({})
    if isinstance(headers, MappingProxyType):
        return headers
    return MappingProxyType(dict(headers))


@dataclass(frozen=True)
class HTTPRequest:
    """
    Incoming HTTP request as handed over by the hosting server.

    Immutable: headers are frozen into a read-only mapping.

    Attributes:
        url: Request path with query string (e.g. ``/app1/foo?x=1``)
        headers: Request headers
        body: Raw request body, if any
    """

    url: str
    headers: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    body: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, 'headers', _freeze_headers(self.headers))

    def with_url(self, url: str) -> 'HTTPRequest':
        """Copy of the request pointing at another URL."""
        return replace(self, url=url)

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "headers": dict(self.headers), "body": self.body}


@dataclass
class HTTPResponse:
    """
    Terminal output of one lifecycle run.

    Headers are case-insensitive, so ``response.headers["Content-Type"]``
    finds a plugin supplied ``content-type`` as well.
    """

    code: int = 200
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(self.headers or {})

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "headers": dict(self.headers), "body": self.body}


@dataclass
class RenderError:
    """
    Error shape produced by a renderer or by the lifecycle itself.

    Attributes:
        code: HTTP status code to respond with
        message: Body of the synthesized error response
        detail: Optional diagnostic fields (e.g. ``{"stack": "..."}``)
    """

    code: int
    message: str
    detail: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.detail is not None:
            data["detail"] = dict(self.detail)
        return data


@dataclass
class RenderContext:
    """
    Request plus metadata, threaded through the rendering pipeline.

    ``extra`` is an open JSON object with the reserved keys ``title``,
    ``no_cache``, ``init_state`` and ``router_base``. A fresh context is
    built for every request and never shared between requests.
    """

    request: HTTPRequest
    extra: Dict[str, Any] = field(default_factory=dict)
    error: Optional[RenderError] = None

    def copy(self) -> 'RenderContext':
        """Shallow copy: new extra dict, same request and error objects."""
        return RenderContext(request=self.request, extra=dict(self.extra), error=self.error)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"request": self.request.to_dict(), "extra": self.extra}
        if self.error is not None:
            data["error"] = self.error.to_dict()
        return data


@dataclass
class ResolvedRequest:
    """
    Payload of the ``request_resolved`` waterfall.

    ``original`` is restored from a snapshot after every callback, so it
    reads the same in every later phase whatever a callback did to it.
    """

    original: RenderContext
    resolved: RenderContext

    def to_dict(self) -> Dict[str, Any]:
        return {"original": self.original.to_dict(), "resolved": self.resolved.to_dict()}


def build_default_extra(session_extra: Optional[Mapping[str, Any]] = None,
                        default_title: str = "") -> Dict[str, Any]:
    """
    Default RenderContextExtra merged with per-session values.

    Example:
        >>> build_default_extra({"router_base": "/app1"})["router_base"]
        '/app1'
    """
    extra: Dict[str, Any] = {
        EXTRA_TITLE: default_title,
        EXTRA_NO_CACHE: False,
        EXTRA_INIT_STATE: {},
        EXTRA_ROUTER_BASE: "/",
    }
    if session_extra:
        extra.update(session_extra)
    return extra


def strip_router_base(url: str, router_base: str) -> str:
    """
    Remove the router base from the front of a request URL.

    Everything after the end of the first occurrence of ``router_base`` is
    kept and a leading ``/`` is guaranteed. When the base does not occur
    in the URL the URL itself is kept.

    Examples:
        >>> strip_router_base("/app1/foo/bar", "/app1")
        '/foo/bar'
        >>> strip_router_base("/app1foo", "/app1")
        '/foo'
    """
    index = url.find(router_base) if router_base else -1
    path = url[index + len(router_base):] if index != -1 else url
    if not path.startswith("/"):
        path = f"/{path}"
    return path


def html_headers(content_type: str = DEFAULT_CONTENT_TYPE) -> CaseInsensitiveDict:
    """Header map for a synthesized HTML response."""
    return CaseInsensitiveDict({"content-type": content_type})
