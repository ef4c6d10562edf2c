"""Vise Core - hook lifecycle engine for server-rendered pages."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.config import LifecycleConfig
from .core.context import HTTPRequest, HTTPResponse, RenderContext, RenderError, ResolvedRequest
from .core.results import (
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
from .core.exceptions import (
    ViseException,
    FatalError,
    ConfigurationError,
    InvalidPluginNameError,
    UnknownHookError,
    RegistryFrozenError,
    ConfigValidationError,
)
from .core.logging import LoggingConfig, ViseLogger, get_logger, configure_logging
from .core.env_config import load_from_env, ConfigFileLoader, AppConfigFile
from .hooks import (
    ALL_HOOKS,
    HookName,
    HookRegistry,
    HookStrategy,
    Enforce,
    HookCallbackConfig,
    VisePlugin,
    ViseHooks,
    parse_hooks_with_plugins,
    LifecycleOrchestrator,
    LifecyclePhase,
    error_response,
)
from .utils import (
    is_equal,
    clone_deep,
    match_app_for_url,
    merge_config,
    fill_ssr_template,
    refill_render_result,
    http_fetcher,
)

# Set up logging - add NullHandler to prevent "No handler found" warnings
# Users can configure logging themselves using logging.getLogger('vise_core')
logging.getLogger('vise_core').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("vise-core")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    # Lifecycle
    "LifecycleOrchestrator",
    "LifecyclePhase",
    "error_response",
    "LifecycleConfig",
    # Hooks and plugins
    "ALL_HOOKS",
    "HookName",
    "HookRegistry",
    "HookStrategy",
    "Enforce",
    "HookCallbackConfig",
    "VisePlugin",
    "ViseHooks",
    "parse_hooks_with_plugins",
    # Data model
    "HTTPRequest",
    "HTTPResponse",
    "RenderContext",
    "RenderError",
    "ResolvedRequest",
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
    # Exceptions
    "ViseException",
    "FatalError",
    "ConfigurationError",
    "InvalidPluginNameError",
    "UnknownHookError",
    "RegistryFrozenError",
    "ConfigValidationError",
    # Logging and config
    "LoggingConfig",
    "ViseLogger",
    "get_logger",
    "configure_logging",
    "load_from_env",
    "ConfigFileLoader",
    "AppConfigFile",
    # Utilities
    "is_equal",
    "clone_deep",
    "match_app_for_url",
    "merge_config",
    "fill_ssr_template",
    "refill_render_result",
    "http_fetcher",
]
