# src/vise_core/hooks/plugin.py
"""
Плагины Vise и слияние их хуков в упорядоченные списки callback'ов.

Каждый callback оборачивается адаптером, зависящим от хука:
- receive_request / render: результат помечается именем плагина (render_by)
- after_render: callback получает поверхностную копию, render_by
  переписывается, только если результат реально изменился
- request_resolved: ``original`` восстанавливается из снимка после вызова
- find_cache: строка оборачивается в FindCacheResult

После оборачивания callback'и каждого хука разбиваются по ``enforce``:
сначала ``pre``, затем без метки, затем ``post``. Порядок регистрации
внутри группы сохраняется (фильтрация, не сортировка).
"""

import copy
import functools
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..core.context import RenderContext, ResolvedRequest
from ..core.exceptions import ConfigurationError, InvalidPluginNameError
from ..core.results import FindCacheResult, InterceptRenderResult, RenderResult
from ..utils.equality import is_equal
from ..utils.object import clone_deep
from .names import ALL_HOOKS, HookName, dispatch_name, parse_hook_name
from .registry import HookCallback, HookRegistry, call_hook_callback

logger = logging.getLogger(__name__)

LEGAL_PLUGIN_NAME = re.compile(r"(vise-plugin-|app-|vise:)[a-z]([a-z0-9-]*[a-z0-9])?")


class Enforce(str, Enum):
    """
    Группа, в которой выполняется callback.

    Callback'и без метки выполняются между ``PRE`` и ``POST``.
    """
    PRE = "pre"
    POST = "post"


@dataclass(frozen=True)
class HookCallbackConfig:
    """
    Callback хука с необязательной группой порядка.

    Example:
        >>> HookCallbackConfig(callback=log_request, enforce=Enforce.PRE)
    """
    callback: HookCallback
    enforce: Optional[Enforce] = None


# callable | HookCallbackConfig | {"callback": ..., "enforce": ...} | list of those
HookConfig = Union[HookCallback, HookCallbackConfig, Mapping[str, Any], Sequence[Any]]


@dataclass
class VisePlugin:
    """
    Именованный набор callback'ов хуков.

    Attributes:
        name: Имя плагина (``vise-plugin-*``, ``app-*`` или ``vise:*``)
        hooks: Хук -> конфигурация callback'ов
    """
    name: str
    hooks: Dict[Union[str, HookName], HookConfig] = field(default_factory=dict)


@dataclass
class ViseHooks:
    """
    Конфигурация хуков приложения.

    Собственные ``hooks`` приложения становятся неявным плагином
    ``app-<app_name>``, который ставится перед ``plugins``.

    Attributes:
        app_name: Имя приложения
        router_base_config: Router base приложения (строка или список шаблонов)
        plugins: Подключённые плагины
        hooks: Собственные хуки приложения
    """
    app_name: str
    router_base_config: Union[str, List[str]] = "/"
    plugins: List[VisePlugin] = field(default_factory=list)
    hooks: Dict[Union[str, HookName], HookConfig] = field(default_factory=dict)


def validate_plugin_name(name: str) -> None:
    """
    Raises:
        InvalidPluginNameError: Имя не соответствует LEGAL_PLUGIN_NAME
    """
    if not isinstance(name, str) or LEGAL_PLUGIN_NAME.fullmatch(name) is None:
        raise InvalidPluginNameError(str(name))


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# АДАПТЕРЫ CALLBACK'ОВ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _wrap_intercepting(plugin_name: str, hook: HookName,
                       callback: HookCallback) -> HookCallback:
    @functools.wraps(callback)
    async def wrapper(*args: Any) -> Any:
        result = await call_hook_callback(callback, args)
        if result is None:
            return None
        if hook is HookName.RECEIVE_REQUEST and isinstance(result, RenderContext):
            return InterceptRenderResult(context=result, render_by=plugin_name)
        if isinstance(result, RenderResult):
            result.render_by = plugin_name
        return result
    return wrapper


def _wrap_after_render(plugin_name: str, callback: HookCallback) -> HookCallback:
    @functools.wraps(callback)
    async def wrapper(render_result: RenderResult) -> Any:
        result = await call_hook_callback(callback, (copy.copy(render_result),))
        if result is not None and not is_equal(render_result, result):
            result.render_by = plugin_name
        return result
    return wrapper


def _wrap_request_resolved(callback: HookCallback) -> HookCallback:
    @functools.wraps(callback)
    async def wrapper(resolved_request: ResolvedRequest) -> ResolvedRequest:
        original = clone_deep(resolved_request.original)
        result = await call_hook_callback(callback, (resolved_request,))
        resolved = result.resolved if result is not None else resolved_request.resolved
        return ResolvedRequest(original=original, resolved=resolved)
    return wrapper


def _wrap_find_cache(plugin_name: str, callback: HookCallback) -> HookCallback:
    @functools.wraps(callback)
    async def wrapper(cache_info: Any) -> Any:
        content = await call_hook_callback(callback, (cache_info,))
        if isinstance(content, str):
            return FindCacheResult(content=content, render_by=plugin_name)
        return content
    return wrapper


def wrap_callback(plugin_name: str, hook: HookName, callback: HookCallback) -> HookCallback:
    """Обернуть callback адаптером, соответствующим хуку."""
    if hook in (HookName.RECEIVE_REQUEST, HookName.RENDER):
        return _wrap_intercepting(plugin_name, hook, callback)
    if hook is HookName.AFTER_RENDER:
        return _wrap_after_render(plugin_name, callback)
    if hook is HookName.REQUEST_RESOLVED:
        return _wrap_request_resolved(callback)
    if hook is HookName.FIND_CACHE:
        return _wrap_find_cache(plugin_name, callback)
    return callback


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# СЛИЯНИЕ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _normalize_one(plugin_name: str, hook: HookName, raw: Any) -> HookCallbackConfig:
    if isinstance(raw, HookCallbackConfig):
        return raw
    if isinstance(raw, Mapping) and "callback" in raw:
        enforce = raw.get("enforce")
        try:
            return HookCallbackConfig(
                callback=raw["callback"],
                enforce=Enforce(enforce) if enforce is not None else None,
            )
        except ValueError:
            raise ConfigurationError(
                f"plugin '{plugin_name}': invalid enforce '{enforce}' for hook '{hook.value}'"
            )
    if callable(raw):
        return HookCallbackConfig(callback=raw)
    raise ConfigurationError(
        f"plugin '{plugin_name}': hook '{hook.value}' expects a callable, "
        f"got {type(raw).__name__}"
    )


def normalize_hook_config(plugin_name: str, hook: HookName,
                          raw: HookConfig) -> List[HookCallbackConfig]:
    """
    Привести конфигурацию хука к списку HookCallbackConfig.

    Raises:
        ConfigurationError: Элемент не является callback'ом
    """
    items = raw if isinstance(raw, (list, tuple)) else [raw]
    return [_normalize_one(plugin_name, hook, item) for item in items]


def wrap_app_as_plugin(vise_hooks: ViseHooks) -> List[VisePlugin]:
    """Список плагинов с неявным плагином приложения в начале."""
    app_plugin = VisePlugin(name=f"app-{vise_hooks.app_name}", hooks=dict(vise_hooks.hooks))
    return [app_plugin, *vise_hooks.plugins]


def merge_plugin_configs(plugins: Sequence[VisePlugin]) -> Dict[HookName, List[HookCallbackConfig]]:
    """
    Слить хуки плагинов в порядке плагинов, обернув каждый callback.

    Неизвестные имена хуков игнорируются.
    """
    merged: Dict[HookName, List[HookCallbackConfig]] = {}
    for plugin in plugins:
        for raw_name, raw_conf in plugin.hooks.items():
            hook = parse_hook_name(raw_name)
            if hook is None:
                logger.debug(
                    "Ignoring unknown hook",
                    extra={"plugin": plugin.name, "hook": str(raw_name)},
                )
                continue
            if not raw_conf:
                continue
            for conf in normalize_hook_config(plugin.name, hook, raw_conf):
                merged.setdefault(hook, []).append(HookCallbackConfig(
                    callback=wrap_callback(plugin.name, hook, conf.callback),
                    enforce=conf.enforce,
                ))
    return merged


def order_callbacks(configs: Sequence[HookCallbackConfig]) -> List[HookCallback]:
    """pre, затем без метки, затем post; порядок внутри группы сохраняется."""
    return [
        conf.callback
        for group in (Enforce.PRE, None, Enforce.POST)
        for conf in configs
        if conf.enforce == group
    ]


def parse_hooks_with_plugins(vise_hooks: ViseHooks) -> Dict[HookName, List[HookCallback]]:
    """
    Проверить имена плагинов и построить упорядоченные callback'и по хукам.

    Returns:
        Публичный хук -> обёрнутые callback'и в порядке вызова

    Raises:
        InvalidPluginNameError: Хотя бы одно имя плагина невалидно
        ConfigurationError: Невалидная конфигурация callback'а

    Example:
        >>> ordered = parse_hooks_with_plugins(ViseHooks(
        ...     app_name="demo",
        ...     hooks={"render": render_page},
        ...     plugins=[VisePlugin(name="vise-plugin-cache", hooks={...})],
        ... ))
    """
    plugins = wrap_app_as_plugin(vise_hooks)
    for plugin in plugins:
        validate_plugin_name(plugin.name)

    merged = merge_plugin_configs(plugins)
    return {
        hook: order_callbacks(merged[hook])
        for hook in ALL_HOOKS
        if hook in merged
    }


def build_registry(vise_hooks: ViseHooks) -> HookRegistry:
    """
    Построить и заморозить реестр хуков приложения.

    Callback'и хуков с другой формой результата регистрируются под
    внутренним идентификатором (dispatch_name).
    """
    registry = HookRegistry()
    for hook, callbacks in parse_hooks_with_plugins(vise_hooks).items():
        for callback in callbacks:
            registry.tap(dispatch_name(hook), callback)
    logger.debug(
        "Hook registry built",
        extra={"app": vise_hooks.app_name, "plugins": len(vise_hooks.plugins) + 1},
    )
    return registry.freeze()

