"""Tests for plugin validation, callback wrapping and ordering."""

import pytest

from vise_core.core.context import RenderContext, ResolvedRequest
from vise_core.core.exceptions import ConfigurationError, InvalidPluginNameError
from vise_core.core.results import (
    CacheInfo,
    FindCacheResult,
    InterceptRenderResult,
    SuccessRenderResult,
)
from vise_core.hooks.names import HookName, InnerHookName
from vise_core.hooks.plugin import (
    Enforce,
    HookCallbackConfig,
    ViseHooks,
    VisePlugin,
    build_registry,
    normalize_hook_config,
    order_callbacks,
    parse_hooks_with_plugins,
    validate_plugin_name,
    wrap_app_as_plugin,
    wrap_callback,
)
from vise_core.hooks.registry import HookRegistry


def _tracer(log, name):
    def callback(value):
        log.append(name)
    return callback


class TestPluginNames:

    @pytest.mark.parametrize("name", [
        "vise-plugin-cache", "app-demo", "vise:core", "app-a", "vise-plugin-a1-b2",
        "vise-plugin-foo", "app-bar", "vise:scaffold",
    ])
    def test_legal(self, name):
        validate_plugin_name(name)

    @pytest.mark.parametrize("name", [
        "Foo", "my-plugin", "app-", "app-Demo", "app-1x", "vise-plugin-cache-",
        "app-demo_x", "", "vise:", "xapp-demo", "vise-plugin-", "_bad",
    ])
    def test_illegal(self, name):
        with pytest.raises(InvalidPluginNameError):
            validate_plugin_name(name)

    def test_invalid_plugin_rejects_whole_config(self):
        with pytest.raises(InvalidPluginNameError, match="Foo"):
            parse_hooks_with_plugins(ViseHooks(
                app_name="demo",
                plugins=[VisePlugin(name="Foo", hooks={"render": lambda ctx: None})],
            ))

    def test_app_name_is_validated(self):
        with pytest.raises(InvalidPluginNameError, match="app-Demo"):
            parse_hooks_with_plugins(ViseHooks(app_name="Demo"))


class TestWrapAppAsPlugin:

    def test_app_plugin_is_prepended(self):
        plugin = VisePlugin(name="vise-plugin-x")
        callback = lambda ctx: None  # noqa: E731

        plugins = wrap_app_as_plugin(ViseHooks(app_name="shop", plugins=[plugin], hooks={"render": callback}))

        assert [p.name for p in plugins] == ["app-shop", "vise-plugin-x"]
        assert plugins[0].hooks == {"render": callback}


class TestNormalizeHookConfig:

    def test_forms(self):
        callback = lambda ctx: None  # noqa: E731

        configs = normalize_hook_config("app-x", HookName.RENDER, [
            callback,
            {"callback": callback, "enforce": "pre"},
            HookCallbackConfig(callback=callback, enforce=Enforce.POST),
        ])

        assert [c.enforce for c in configs] == [None, Enforce.PRE, Enforce.POST]

    def test_invalid_enforce(self):
        with pytest.raises(ConfigurationError, match="enforce"):
            normalize_hook_config("app-x", HookName.RENDER, {"callback": print, "enforce": "middle"})

    def test_not_callable(self):
        with pytest.raises(ConfigurationError, match="callable"):
            normalize_hook_config("app-x", HookName.RENDER, "not a function")


class TestOrdering:

    def test_order_callbacks_is_a_stable_filter(self):
        a, b, c, d = (lambda: 1), (lambda: 2), (lambda: 3), (lambda: 4)

        ordered = order_callbacks([
            HookCallbackConfig(a, Enforce.POST),
            HookCallbackConfig(b),
            HookCallbackConfig(c, Enforce.PRE),
            HookCallbackConfig(d),
        ])

        assert ordered == [c, b, d, a]

    @pytest.mark.asyncio
    async def test_merge_order_across_plugins(self, render_context):
        log = []
        vise_hooks = ViseHooks(
            app_name="one",
            hooks={"before_render": [
                _tracer(log, "app-one"),
                {"callback": _tracer(log, "app-post"), "enforce": "post"},
            ]},
            plugins=[
                VisePlugin(name="app-a", hooks={"before_render": [
                    {"callback": _tracer(log, "a-pre"), "enforce": "pre"},
                    _tracer(log, "a-1"),
                ]}),
                VisePlugin(name="app-b", hooks={"before_render": {
                    "callback": _tracer(log, "b-pre"), "enforce": Enforce.PRE,
                }}),
            ],
        )

        callbacks = parse_hooks_with_plugins(vise_hooks)[HookName.BEFORE_RENDER]
        for callback in callbacks:
            callback(render_context)

        assert log == ["a-pre", "b-pre", "app-one", "a-1", "app-post"]

    def test_unknown_and_empty_hooks_are_ignored(self):
        hooks = parse_hooks_with_plugins(ViseHooks(
            app_name="demo",
            hooks={"on_request": lambda r: None, "render": None, "after_render": []},
        ))

        assert hooks == {}

    def test_result_in_lifecycle_order(self):
        noop = lambda value: None  # noqa: E731
        hooks = parse_hooks_with_plugins(ViseHooks(
            app_name="demo",
            hooks={"before_response": noop, "receive_request": noop, HookName.RENDER: noop},
        ))

        assert list(hooks) == [HookName.RECEIVE_REQUEST, HookName.RENDER, HookName.BEFORE_RESPONSE]


class TestWrappers:

    @pytest.mark.asyncio
    async def test_render_stamps_render_by(self, render_context):
        async def render(ctx):
            return SuccessRenderResult(context=ctx, render_by="someone-else")

        result = await wrap_callback("vise-plugin-ssr", HookName.RENDER, render)(render_context)

        assert result.render_by == "vise-plugin-ssr"

    @pytest.mark.asyncio
    async def test_render_none_passes(self, render_context):
        wrapped = wrap_callback("vise-plugin-ssr", HookName.RENDER, lambda ctx: None)
        assert await wrapped(render_context) is None

    @pytest.mark.asyncio
    async def test_receive_request_wraps_context(self, render_context, http_request):
        wrapped = wrap_callback("app-demo", HookName.RECEIVE_REQUEST, lambda request: render_context)

        result = await wrapped(http_request)

        assert isinstance(result, InterceptRenderResult)
        assert result.context is render_context
        assert result.render_by == "app-demo"

    @pytest.mark.asyncio
    async def test_after_render_receives_copy(self, success_result):
        received = []

        def callback(result):
            received.append(result)
            result.render_by = "mutated"

        await wrap_callback("app-demo", HookName.AFTER_RENDER, callback)(success_result)

        assert received[0] is not success_result
        assert success_result.render_by == "vise-plugin-ssr"

    @pytest.mark.asyncio
    async def test_after_render_unchanged_keeps_render_by(self, success_result):
        result = await wrap_callback("app-demo", HookName.AFTER_RENDER, lambda r: r)(success_result)

        assert result.render_by == "vise-plugin-ssr"

    @pytest.mark.asyncio
    async def test_after_render_replacement_is_stamped(self, success_result):
        def replace(result):
            return SuccessRenderResult(context=result.context, render_by=result.render_by,
                                       ssr_result=result.ssr_result, cache_info=CacheInfo(key="k"))

        result = await wrap_callback("app-demo", HookName.AFTER_RENDER, replace)(success_result)

        assert result.render_by == "app-demo"

    @pytest.mark.asyncio
    async def test_request_resolved_restores_original(self, render_context):
        resolved_request = ResolvedRequest(original=render_context.copy(), resolved=render_context.copy())

        def mutate(value):
            value.original.extra["title"] = "hacked"
            value.resolved.extra["title"] = "B"
            return value

        result = await wrap_callback("app-demo", HookName.REQUEST_RESOLVED, mutate)(resolved_request)

        assert result.original.extra["title"] == "A"
        assert result.resolved.extra["title"] == "B"

    @pytest.mark.asyncio
    async def test_request_resolved_none_keeps_resolved(self, render_context):
        resolved = render_context.copy()
        resolved_request = ResolvedRequest(original=render_context, resolved=resolved)

        result = await wrap_callback("app-demo", HookName.REQUEST_RESOLVED, lambda v: None)(resolved_request)

        assert result.resolved is resolved
        assert result.original is not render_context
        assert result.original.extra == render_context.extra

    @pytest.mark.asyncio
    async def test_find_cache_string(self):
        wrapped = wrap_callback("vise-plugin-cache", HookName.FIND_CACHE, lambda info: "<html>")

        result = await wrapped(CacheInfo(key="k"))

        assert result == FindCacheResult(content="<html>", render_by="vise-plugin-cache")

    @pytest.mark.asyncio
    async def test_find_cache_empty_string_is_a_hit(self):
        wrapped = wrap_callback("vise-plugin-cache", HookName.FIND_CACHE, lambda info: "")

        assert await wrapped(CacheInfo(key="k")) == FindCacheResult(content="", render_by="vise-plugin-cache")

    @pytest.mark.asyncio
    async def test_find_cache_none(self):
        wrapped = wrap_callback("vise-plugin-cache", HookName.FIND_CACHE, lambda info: None)
        assert await wrapped(CacheInfo(key="k")) is None

    def test_other_hooks_are_not_wrapped(self):
        callback = lambda ctx: None  # noqa: E731
        assert wrap_callback("app-demo", HookName.BEFORE_USE_CACHE, callback) is callback


class TestBuildRegistry:

    def test_inner_hooks_are_tapped(self):
        noop = lambda value: None  # noqa: E731

        registry = build_registry(ViseHooks(
            app_name="demo",
            hooks={"receive_request": noop, "find_cache": noop, "render": noop},
        ))

        assert isinstance(registry, HookRegistry)
        assert registry.frozen is True
        assert len(registry.callbacks(InnerHookName.RECEIVE_REQUEST_INNER)) == 1
        assert len(registry.callbacks(InnerHookName.FIND_CACHE_INNER)) == 1
        assert len(registry.callbacks(HookName.RENDER)) == 1
        assert registry.callbacks(HookName.AFTER_RENDER) == ()
