"""
Hook identifiers and their composition strategies.

Two namespaces exist. ``HookName`` lists the nine hooks plugin authors
declare. ``InnerHookName`` lists the identifiers of the two hooks whose
wrapped return shape differs from the plugin-facing one
(``receive_request`` and ``find_cache``); the registry stores those
callbacks under the inner identifier and the lifecycle always calls that
one. ``HOOK_TO_INNER`` joins the two namespaces.
"""

from enum import Enum
from typing import Dict, Tuple, Union


class HookName(str, Enum):
    """Public hook names, in lifecycle order."""

    RECEIVE_REQUEST = "receive_request"
    REQUEST_RESOLVED = "request_resolved"
    BEFORE_USE_CACHE = "before_use_cache"
    FIND_CACHE = "find_cache"
    HIT_CACHE = "hit_cache"
    BEFORE_RENDER = "before_render"
    RENDER = "render"
    AFTER_RENDER = "after_render"
    BEFORE_RESPONSE = "before_response"


class InnerHookName(str, Enum):
    """Dispatch identifiers of hooks whose wrapped result changes shape."""

    RECEIVE_REQUEST_INNER = "receive_request_inner"
    FIND_CACHE_INNER = "find_cache_inner"


class HookStrategy(str, Enum):
    """Composition strategy bound to a hook slot."""

    PARALLEL_BAIL = "parallel_bail"
    SERIES_WATERFALL = "series_waterfall"
    PARALLEL_SETTLE_ALL = "parallel_settle_all"


HookId = Union[HookName, InnerHookName]

ALL_HOOKS: Tuple[HookName, ...] = tuple(HookName)

HOOK_TO_INNER: Dict[HookName, InnerHookName] = {
    HookName.RECEIVE_REQUEST: InnerHookName.RECEIVE_REQUEST_INNER,
    HookName.FIND_CACHE: InnerHookName.FIND_CACHE_INNER,
}

# Slots the registry is built with: every public hook without an inner
# twin, plus the inner identifiers
HOOK_STRATEGIES: Dict[HookId, HookStrategy] = {
    InnerHookName.RECEIVE_REQUEST_INNER: HookStrategy.PARALLEL_BAIL,
    HookName.REQUEST_RESOLVED: HookStrategy.SERIES_WATERFALL,
    HookName.BEFORE_USE_CACHE: HookStrategy.PARALLEL_BAIL,
    InnerHookName.FIND_CACHE_INNER: HookStrategy.PARALLEL_BAIL,
    HookName.HIT_CACHE: HookStrategy.PARALLEL_SETTLE_ALL,
    HookName.BEFORE_RENDER: HookStrategy.SERIES_WATERFALL,
    HookName.RENDER: HookStrategy.PARALLEL_BAIL,
    HookName.AFTER_RENDER: HookStrategy.SERIES_WATERFALL,
    HookName.BEFORE_RESPONSE: HookStrategy.PARALLEL_BAIL,
}


def dispatch_name(hook: HookName) -> HookId:
    """
    Identifier a public hook is tapped and invoked under.

    Examples:
        >>> dispatch_name(HookName.FIND_CACHE)
        <InnerHookName.FIND_CACHE_INNER: 'find_cache_inner'>
        >>> dispatch_name(HookName.RENDER)
        <HookName.RENDER: 'render'>
    """
    return HOOK_TO_INNER.get(hook, hook)


def parse_hook_name(name: Union[str, HookName]) -> Union[HookName, None]:
    """Public hook for a (possibly string) name; None if unrecognized."""
    if isinstance(name, HookName):
        return name
    try:
        return HookName(name)
    except ValueError:
        return None
