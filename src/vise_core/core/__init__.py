"""Core Vise модули: модель данных, конфигурация, исключения."""

from .config import LifecycleConfig, DEFAULT_CONTENT_TYPE, DEFAULT_RENDER_BY_HEADER
from .exceptions import (
    ViseException,
    FatalError,
    ConfigurationError,
    InvalidPluginNameError,
    UnknownHookError,
    RegistryFrozenError,
    ConfigValidationError,
)
from .context import (
    HTTPRequest,
    HTTPResponse,
    RenderContext,
    RenderError,
    ResolvedRequest,
    build_default_extra,
    strip_router_base,
)
from .results import (
    RenderResultCategory,
    CacheInfo,
    HitCache,
    FindCacheResult,
    SsrBundleSuccess,
    RenderResult,
    SuccessRenderResult,
    ErrorRenderResult,
    InterceptRenderResult,
    HitCacheRenderResult,
)

__all__ = [
    # Config
    "LifecycleConfig",
    "DEFAULT_CONTENT_TYPE",
    "DEFAULT_RENDER_BY_HEADER",
    # Exceptions
    "ViseException",
    "FatalError",
    "ConfigurationError",
    "InvalidPluginNameError",
    "UnknownHookError",
    "RegistryFrozenError",
    "ConfigValidationError",
    # Context
    "HTTPRequest",
    "HTTPResponse",
    "RenderContext",
    "RenderError",
    "ResolvedRequest",
    "build_default_extra",
    "strip_router_base",
    # Results
    "RenderResultCategory",
    "CacheInfo",
    "HitCache",
    "FindCacheResult",
    "SsrBundleSuccess",
    "RenderResult",
    "SuccessRenderResult",
    "ErrorRenderResult",
    "InterceptRenderResult",
    "HitCacheRenderResult",
]
