"""
Template string helpers for server-rendered pages.

Templates carry ``<!--ssr-<kebab-key>-->`` placeholders and
``<!--START_<MARK>-->...<!--END_<MARK>-->`` marks; renderers fill them
from the SsrBundleSuccess fields and RenderContext extra.
"""

import re
from dataclasses import replace
from typing import Any, Mapping, Union

from ..core.results import SsrBundleSuccess, SuccessRenderResult
from .serialization import serialize_javascript

_CAMEL_BOUNDARY = re.compile(r'([a-z0-9])([A-Z])')

INIT_STATE_SCRIPT = (
    "<script>try {{ window.Vise.initState = {state}; }} "
    "catch (err) {{ console.error('[Vise] fail to read initState.'); }}</script>"
)


def to_kebab(name: str) -> str:
    """
    Convert a camelCase or snake_case key to kebab-case.

    Examples:
        >>> to_kebab("preloadLinks")
        'preload-links'
        >>> to_kebab("init_state")
        'init-state'
    """
    return _CAMEL_BOUNDARY.sub(r'\1-\2', name).replace('_', '-').lower()


def get_placeholder_of(key: str) -> str:
    """``<!--ssr-<kebab-key>-->`` placeholder for a template key."""
    return f"<!--ssr-{to_kebab(key)}-->"


def replace_placeholder_with_value(source: str, key: str, replacement: str) -> str:
    """Replace the first placeholder of ``key`` in ``source``."""
    return source.replace(get_placeholder_of(key), replacement, 1)


def replace_content_between_marks(source: str, mark: str,
                                  replacement: Union[str, bool],
                                  mode: str = "script") -> str:
    """
    Replace a marked block, marks included.

    ``script`` mode uses ``// <!--START_X`` / ``// END_X-->`` marks and
    ``html`` mode ``<!--START_X-->`` / ``<!--END_X-->``. Passing
    ``replacement=True`` keeps the content between the marks and drops
    only the marks. A source without both marks is returned unchanged.

    Example:
        >>> replace_content_between_marks(
        ...     "<!--START_TITLE--><title>a</title><!--END_TITLE-->",
        ...     "TITLE", "<title>b</title>", mode="html")
        '<title>b</title>'
    """
    if mode == "html":
        start_mark = f"<!--START_{mark}-->"
        end_mark = f"<!--END_{mark}-->"
    else:
        start_mark = f"// <!--START_{mark}"
        end_mark = f"// END_{mark}-->"

    start = source.find(start_mark)
    end = source.find(end_mark)
    if start == -1 or end == -1 or end < start:
        return source

    if replacement is True:
        content = source[start + len(start_mark):end]
    else:
        content = str(replacement) if replacement is not False else ""
    return source[:start] + content + source[end + len(end_mark):]


def get_init_state_script(init_state: Any) -> str:
    """Inline script assigning ``window.Vise.initState``."""
    return INIT_STATE_SCRIPT.format(state=serialize_javascript(init_state))


def fill_ssr_template(ssr_result: SsrBundleSuccess, extra: Mapping[str, Any]) -> str:
    """
    Assemble the final page from the template.

    Replaces the TITLE mark when ``extra['title']`` is set, inlines the
    init state script and then every SsrBundleSuccess field placeholder.
    """
    html = ssr_result.template
    title = extra.get("title")
    if title:
        html = replace_content_between_marks(
            html, "TITLE", f"<title>{title}</title>", mode="html"
        )
    html = replace_placeholder_with_value(
        html, "init_state", get_init_state_script(extra.get("init_state") or {})
    )
    for key, value in ssr_result.to_dict().items():
        html = replace_placeholder_with_value(html, key, value or "")
    return html


def refill_render_result(render_result: SuccessRenderResult) -> SuccessRenderResult:
    """
    Copy of a success result whose ``ssr_result.html`` is rebuilt from the
    template with the current ``context.extra``.

    Useful in ``after_render`` after a plugin changed the title or state.
    """
    html = fill_ssr_template(render_result.ssr_result, render_result.context.extra)
    return replace(render_result, ssr_result=replace(render_result.ssr_result, html=html))
