"""
Integration tests for LifecycleOrchestrator.

Every test drives a full request through start() with real plugins and an
in-memory logger.
"""

import asyncio
import json

import pytest

from vise_core.core.config import LifecycleConfig
from vise_core.core.context import HTTPRequest, HTTPResponse, RenderError
from vise_core.core.exceptions import InvalidPluginNameError
from vise_core.core.logging.config import LoggingConfig, LogLevel
from vise_core.core.logging.filters import get_correlation_id, set_correlation_id
from vise_core.core.results import (
    CacheInfo,
    ErrorRenderResult,
    HitCacheRenderResult,
    InterceptRenderResult,
    SsrBundleSuccess,
    SuccessRenderResult,
)
from vise_core.hooks.lifecycle import (
    DEFAULT_RENDER,
    INTERCEPT_NOT_FINISHED,
    INTERNAL_ERROR_BODY,
    NO_RENDER_RESULT,
    LifecycleOrchestrator,
    error_response,
)
from vise_core.hooks.plugin import ViseHooks, VisePlugin
from vise_core.utils.match_app import match_app_for_url
from vise_core.utils.strings import fill_ssr_template

pytestmark = pytest.mark.integration

SESSION = {"router_base": "/app1"}


def ssr_render(ctx):
    return SuccessRenderResult(
        context=ctx,
        ssr_result=SsrBundleSuccess(app="<div>app</div>", html=f"<html>{ctx.request.url}</html>"),
    )


def make_lifecycle(recording_logger, hooks=None, plugins=None, config=None):
    return LifecycleOrchestrator(
        ViseHooks(app_name="demo", hooks=hooks or {}, plugins=plugins or []),
        logger=recording_logger,
        config=config,
    )


class TestLifecycleHappyPath:

    @pytest.mark.asyncio
    async def test_render_success(self, recording_logger, http_request):
        lifecycle = make_lifecycle(recording_logger, plugins=[
            VisePlugin(name="vise-plugin-ssr", hooks={"render": ssr_render}),
        ])

        response = await lifecycle.start(http_request, SESSION)

        assert response.code == 200
        assert response.body == "<html>/foo/bar?x=1</html>"
        assert response.headers["Content-Type"] == "text/html; charset=utf-8"
        assert response.headers["x-render-by"] == "vise-plugin-ssr"

    @pytest.mark.asyncio
    async def test_router_base_is_stripped(self, recording_logger, http_request):
        seen = []
        lifecycle = make_lifecycle(recording_logger, hooks={
            "receive_request": lambda request: seen.append(("receive", request.url)),
            "before_render": lambda ctx: seen.append(("before_render", ctx.request.url)),
            "render": ssr_render,
        })

        await lifecycle.start(http_request, SESSION)

        assert seen == [("receive", "/foo/bar?x=1"), ("before_render", "/foo/bar?x=1")]
        assert http_request.url == "/app1/foo/bar?x=1"

    @pytest.mark.asyncio
    async def test_default_extra(self, recording_logger, http_request):
        seen = []
        lifecycle = make_lifecycle(
            recording_logger,
            hooks={"before_render": lambda ctx: seen.append(dict(ctx.extra)), "render": ssr_render},
            config=LifecycleConfig(default_title="Shop"),
        )

        await lifecycle.start(http_request)

        assert seen == [{"title": "Shop", "no_cache": False, "init_state": {}, "router_base": "/"}]

    @pytest.mark.asyncio
    async def test_render_by_never_empty(self, recording_logger, http_request):
        final = []
        lifecycle = make_lifecycle(recording_logger, hooks={
            "render": lambda ctx: SuccessRenderResult(context=ctx, render_by=""),
            "before_response": lambda result: final.append(result),
        })

        response = await lifecycle.start(http_request)

        assert final[0].render_by == "app-demo"
        assert response.headers["x-render-by"] == "app-demo"

    @pytest.mark.asyncio
    async def test_render_by_header_disabled(self, recording_logger, http_request):
        lifecycle = make_lifecycle(recording_logger, hooks={"render": ssr_render},
                                   config=LifecycleConfig(render_by_header=None))

        response = await lifecycle.start(http_request)

        assert "x-render-by" not in response.headers

    @pytest.mark.asyncio
    async def test_before_response_returned_verbatim(self, recording_logger, http_request):
        custom = HTTPResponse(code=302, headers={"location": "/login"}, body="")
        lifecycle = make_lifecycle(recording_logger, hooks={
            "render": ssr_render,
            "before_response": lambda result: custom,
        })

        assert await lifecycle.start(http_request) is custom


class TestRequestResolved:

    @pytest.mark.asyncio
    async def test_original_is_isolated_from_mutation(self, recording_logger, http_request):
        originals = []

        def mutate(value):
            value.original.extra["title"] = "hacked"
            value.resolved.extra["title"] = "resolved"

        lifecycle = make_lifecycle(recording_logger, hooks={
            "request_resolved": [mutate, lambda value: originals.append(value.original.extra["title"])],
            "before_render": lambda ctx: originals.append(ctx.extra["title"]),
            "render": ssr_render,
        })

        await lifecycle.start(http_request)

        assert originals == ["", "resolved"]
        assert len(recording_logger.hook_lines("request_resolved")) == 1


class TestCache:

    @pytest.mark.asyncio
    async def test_cache_hit_skips_render(self, recording_logger, http_request):
        rendered, hits, results = [], [], []
        lifecycle = make_lifecycle(recording_logger, hooks={"render": rendered.append}, plugins=[
            VisePlugin(name="vise-plugin-cache", hooks={
                "before_use_cache": lambda ctx: CacheInfo(key=ctx.request.url, expire=60),
                "find_cache": lambda info: f"<html>cached {info.key}</html>",
                "hit_cache": hits.append,
                "after_render": results.append,
            }),
        ])

        response = await lifecycle.start(http_request, SESSION)

        assert rendered == []
        assert response.code == 200
        assert response.body == "<html>cached /foo/bar?x=1</html>"
        assert response.headers["x-render-by"] == "vise-plugin-cache"
        assert hits[0].key == "/foo/bar?x=1"
        assert hits[0].content == response.body
        assert isinstance(results[0], HitCacheRenderResult)
        assert results[0].cache_info.expire == 60

    @pytest.mark.asyncio
    async def test_empty_cached_content_is_a_hit(self, recording_logger, http_request):
        rendered = []
        lifecycle = make_lifecycle(recording_logger, hooks={
            "before_use_cache": lambda ctx: CacheInfo(key="k"),
            "find_cache": lambda info: "",
            "render": rendered.append,
        })

        response = await lifecycle.start(http_request)

        assert rendered == []
        assert response.body == ""

    @pytest.mark.asyncio
    async def test_cache_miss_attaches_cache_info(self, recording_logger, http_request):
        results = []
        lifecycle = make_lifecycle(recording_logger, hooks={
            "before_use_cache": lambda ctx: CacheInfo(key="k1", expire=30),
            "find_cache": lambda info: None,
            "render": ssr_render,
            "after_render": results.append,
        })

        response = await lifecycle.start(http_request)

        assert response.code == 200
        assert results[0].cache_info == CacheInfo(key="k1", expire=30)
        assert recording_logger.hook_lines("hit_cache") == []

    @pytest.mark.asyncio
    async def test_empty_key_skips_cache(self, recording_logger, http_request):
        lookups, results = [], []
        lifecycle = make_lifecycle(recording_logger, hooks={
            "before_use_cache": lambda ctx: CacheInfo(key=""),
            "find_cache": lookups.append,
            "render": ssr_render,
            "after_render": results.append,
        })

        await lifecycle.start(http_request)

        assert lookups == []
        assert results[0].cache_info is None


class TestRenderFailures:

    @pytest.mark.asyncio
    async def test_render_exception_becomes_500(self, recording_logger, http_request):
        results = []

        def broken(ctx):
            raise RuntimeError("template missing")

        lifecycle = make_lifecycle(recording_logger, hooks={
            "render": broken,
            "after_render": results.append,
            "before_response": lambda result: results.append(result.render_by),
        })

        response = await lifecycle.start(http_request)

        assert response.code == 500
        assert response.body == "template missing"
        assert response.headers["x-render-by"] == DEFAULT_RENDER
        assert isinstance(results[0], ErrorRenderResult)
        assert "RuntimeError: template missing" in results[0].error.detail["stack"]
        assert results[1] == DEFAULT_RENDER
        assert "Render hook failed" in recording_logger.messages("ERROR")

    @pytest.mark.asyncio
    async def test_render_none_becomes_500(self, recording_logger, http_request):
        lifecycle = make_lifecycle(recording_logger)

        response = await lifecycle.start(http_request)

        assert response.code == 500
        assert response.body == NO_RENDER_RESULT
        assert response.headers["x-render-by"] == DEFAULT_RENDER

    @pytest.mark.asyncio
    async def test_context_error_skips_render(self, recording_logger, http_request):
        rendered = []

        def not_found(ctx):
            ctx.error = RenderError(code=404, message="Not Found")

        lifecycle = make_lifecycle(recording_logger, hooks={
            "before_render": not_found,
            "render": rendered.append,
        })

        response = await lifecycle.start(http_request)

        assert rendered == []
        assert response.code == 404
        assert response.body == "Not Found"

    @pytest.mark.asyncio
    async def test_phase_error_propagates(self, recording_logger, http_request):
        def broken(ctx):
            raise ConnectionError("cache store down")

        lifecycle = make_lifecycle(recording_logger, hooks={"before_use_cache": broken, "render": ssr_render})

        with pytest.raises(ConnectionError):
            await lifecycle.start(http_request)

    def test_error_response(self):
        response = error_response(ConnectionError("secret detail"))

        assert response.code == 500
        assert response.body == INTERNAL_ERROR_BODY
        assert response.headers["x-render-by"] == DEFAULT_RENDER


class TestAfterRender:

    @pytest.mark.asyncio
    async def test_replacement_is_stamped(self, recording_logger, http_request):
        def add_footer(result):
            html = result.ssr_result.html.replace("</html>", "<footer/></html>")
            return SuccessRenderResult(
                context=result.context,
                render_by=result.render_by,
                ssr_result=SsrBundleSuccess(app=result.ssr_result.app, html=html),
            )

        lifecycle = make_lifecycle(recording_logger, plugins=[
            VisePlugin(name="vise-plugin-ssr", hooks={"render": ssr_render}),
            VisePlugin(name="vise-plugin-footer", hooks={"after_render": add_footer}),
        ])

        response = await lifecycle.start(http_request)

        assert response.body.endswith("<footer/></html>")
        assert response.headers["x-render-by"] == "vise-plugin-footer"

    @pytest.mark.asyncio
    async def test_pass_through_keeps_render_by(self, recording_logger, http_request):
        lifecycle = make_lifecycle(recording_logger, plugins=[
            VisePlugin(name="vise-plugin-ssr", hooks={"render": ssr_render}),
            VisePlugin(name="vise-plugin-audit", hooks={"after_render": lambda result: result}),
        ])

        response = await lifecycle.start(http_request)

        assert response.headers["x-render-by"] == "vise-plugin-ssr"
        assert recording_logger.hook_lines("after_render") == []


class TestInterception:

    @pytest.mark.asyncio
    async def test_intercept_without_response_is_500(self, recording_logger, http_request, render_context):
        calls, results = [], []
        lifecycle = make_lifecycle(recording_logger, hooks={
            "receive_request": lambda request: None,
            "before_use_cache": calls.append,
            "render": calls.append,
        }, plugins=[
            VisePlugin(name="vise-plugin-guard", hooks={
                "receive_request": lambda request: render_context,
                "after_render": results.append,
            }),
        ])

        response = await lifecycle.start(http_request)

        assert calls == []
        assert isinstance(results[0], InterceptRenderResult)
        assert results[0].render_by == "vise-plugin-guard"
        assert response.code == 500
        assert response.body == INTERCEPT_NOT_FINISHED

    @pytest.mark.asyncio
    async def test_intercept_with_response(self, recording_logger, http_request, render_context):
        lifecycle = make_lifecycle(recording_logger, plugins=[
            VisePlugin(name="vise-plugin-health", hooks={
                "receive_request": lambda request: render_context,
                "before_response": lambda result: HTTPResponse(code=204),
            }),
        ])

        response = await lifecycle.start(http_request)

        assert response.code == 204
        assert len(recording_logger.hook_lines("receive_request")) == 1


class TestPluginValidation:

    def test_invalid_plugin_name_fails_construction(self, recording_logger):
        with pytest.raises(InvalidPluginNameError):
            make_lifecycle(recording_logger, plugins=[VisePlugin(name="MyPlugin")])


class TestConcurrency:

    @pytest.mark.asyncio
    async def test_concurrent_requests_are_isolated(self, recording_logger):
        async def render(ctx):
            correlation_id = get_correlation_id()
            await asyncio.sleep(0.01)
            return SuccessRenderResult(
                context=ctx,
                ssr_result=SsrBundleSuccess(html=f"{ctx.request.url}|{correlation_id}"),
            )

        lifecycle = make_lifecycle(recording_logger, hooks={"render": render})

        responses = await asyncio.gather(*(
            lifecycle.start(HTTPRequest(url=f"/app1/page/{i}"), SESSION) for i in range(5)
        ))

        bodies = [response.body.split("|") for response in responses]
        assert [url for url, _ in bodies] == [f"/page/{i}" for i in range(5)]
        assert len({cid for _, cid in bodies}) == 5
        assert get_correlation_id() is None

    @pytest.mark.asyncio
    async def test_existing_correlation_id_is_kept(self, recording_logger, http_request):
        seen = []
        lifecycle = make_lifecycle(recording_logger, hooks={
            "render": lambda ctx: seen.append(get_correlation_id()),
        })

        set_correlation_id("upstream-id")
        await lifecycle.start(http_request)

        assert seen == ["upstream-id"]
        assert get_correlation_id() == "upstream-id"


class TestTrace:

    @pytest.mark.asyncio
    async def test_hook_trace_and_finish_line(self, recording_logger, http_request):
        lifecycle = make_lifecycle(recording_logger, plugins=[
            VisePlugin(name="vise-plugin-ssr", hooks={"render": ssr_render}),
        ], config=LifecycleConfig(log_truncate=8))

        await lifecycle.start(http_request, SESSION)

        render_line = recording_logger.hook_lines("render")[0]
        payload = json.loads(render_line.split("intercept with: ", 1)[1])
        assert payload == {"render_by": "vise-plugin-ssr", "result": "<div>app..."}

        finished = [r for r in recording_logger.records if r[1] == "Request finished"]
        assert finished[0][2] == {"code": 200, "render_by": "vise-plugin-ssr", "url": "/foo/bar?x=1"}

        phases = [kwargs["phase"] for level, message, kwargs in recording_logger.records
                  if message == "Lifecycle phase"]
        assert phases == ["receiving_request", "request_resolved", "cache_check", "rendering", "end"]


class TestMultiAppServer:

    @pytest.mark.asyncio
    async def test_match_app_and_fill_template(self, recording_logger):
        template = (
            "<html><head><!--START_TITLE--><title>default</title><!--END_TITLE--></head>"
            "<body><div id=\"app\"><!--ssr-app--></div><!--ssr-init-state--></body></html>"
        )

        def render(ctx):
            ctx.extra["init_state"] = {"path": ctx.request.url}
            ssr_result = SsrBundleSuccess(app=f"<p>{ctx.request.url}</p>", template=template)
            html = fill_ssr_template(ssr_result, ctx.extra)
            return SuccessRenderResult(
                context=ctx,
                ssr_result=SsrBundleSuccess(app=ssr_result.app, template=template, html=html),
            )

        lifecycle = make_lifecycle(recording_logger, hooks={
            "before_render": lambda ctx: ctx.extra.update(title="Shop"),
            "render": render,
        })
        url = "/shop/cart"
        project, router_base = match_app_for_url({"app1": "/app1", "shop": ["/^\\/shop/"]}, url)

        response = await lifecycle.start(HTTPRequest(url=url), {"router_base": router_base})

        assert project == "shop"
        assert "<title>Shop</title>" in response.body
        assert "<p>/cart</p>" in response.body
        assert 'window.Vise.initState = {"path": "\\u002Fcart"}' in response.body


class TestSelfReferencingState:

    @pytest.mark.asyncio
    async def test_cyclic_init_state(self, recording_logger, http_request):
        state = {"user": {"id": 1}}
        state["self"] = state
        seen = []
        lifecycle = make_lifecycle(recording_logger, hooks={
            "before_render": lambda ctx: seen.append(ctx.extra["init_state"]),
            "render": ssr_render,
        })

        response = await lifecycle.start(http_request, {"init_state": state})

        assert response.code == 200
        assert seen[0]["self"] is seen[0]
        assert seen[0] is not state
        assert recording_logger.hook_lines("request_resolved") == []


class TestLoggerPerOrchestrator:

    def test_logging_config_builds_own_logger(self):
        def build(app_name, level):
            return LifecycleOrchestrator(
                ViseHooks(app_name=app_name),
                config=LifecycleConfig(logging=LoggingConfig.create(level=level, enable_console=False)),
            )

        first = build("shop", "INFO")
        second = build("admin", "DEBUG")
        try:
            assert first._logger.config.level == LogLevel.INFO
            assert second._logger.config.level == LogLevel.DEBUG
            assert first._logger.name == "vise_core.lifecycle.shop"
            assert second._logger.name == "vise_core.lifecycle.admin"
            assert first._logger.logger.level != second._logger.logger.level
        finally:
            first._logger.close()
            second._logger.close()

    def test_explicit_logger_wins(self, recording_logger):
        lifecycle = LifecycleOrchestrator(
            ViseHooks(app_name="shop"),
            logger=recording_logger,
            config=LifecycleConfig(logging=LoggingConfig.create(level="DEBUG", enable_console=False)),
        )

        assert lifecycle._logger is recording_logger
        assert lifecycle.hook_logger._logger is recording_logger
