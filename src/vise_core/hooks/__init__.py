"""Hook registry, plugin merger and the request lifecycle."""

from .names import (
    ALL_HOOKS,
    HOOK_STRATEGIES,
    HOOK_TO_INNER,
    HookName,
    HookStrategy,
    InnerHookName,
    dispatch_name,
)
from .registry import HookRegistry, HookSlot
from .plugin import (
    Enforce,
    HookCallbackConfig,
    LEGAL_PLUGIN_NAME,
    ViseHooks,
    VisePlugin,
    build_registry,
    parse_hooks_with_plugins,
    validate_plugin_name,
)
from .hook_logger import HookLogger
from .invoker import HookInvoker
from .lifecycle import DEFAULT_RENDER, LifecycleOrchestrator, LifecyclePhase, error_response

__all__ = [
    # Names
    "ALL_HOOKS",
    "HOOK_STRATEGIES",
    "HOOK_TO_INNER",
    "HookName",
    "HookStrategy",
    "InnerHookName",
    "dispatch_name",
    # Registry
    "HookRegistry",
    "HookSlot",
    # Plugins
    "Enforce",
    "HookCallbackConfig",
    "LEGAL_PLUGIN_NAME",
    "ViseHooks",
    "VisePlugin",
    "build_registry",
    "parse_hooks_with_plugins",
    "validate_plugin_name",
    # Invocation
    "HookLogger",
    "HookInvoker",
    # Lifecycle
    "DEFAULT_RENDER",
    "LifecycleOrchestrator",
    "LifecyclePhase",
    "error_response",
]
