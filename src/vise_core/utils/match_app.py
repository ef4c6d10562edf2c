"""Resolve which app (and router base) serves an incoming URL."""

import re
from typing import Mapping, Sequence, Tuple, Union

RouterBaseConfig = Union[str, Sequence[str]]


def _compile_pattern(pattern: str) -> 're.Pattern[str]':
    # "/^\/app\d+/" style patterns come from config files as strings
    if pattern.startswith('/'):
        pattern = pattern[1:]
    if pattern.endswith('/'):
        pattern = pattern[:-1]
    return re.compile(pattern)


def match_app_for_url(router_base_configs: Mapping[str, RouterBaseConfig],
                      url: str) -> Tuple[str, str]:
    """
    Find the first app whose router base matches ``url``.

    A string base matches when it occurs anywhere in the URL. A list of
    patterns matches on the first pattern found in the URL, and the matched
    text becomes the router base. Apps are tried in declared order.

    Returns:
        ``(project_name, router_base)``; ``("", "/")`` when nothing matches

    Examples:
        >>> match_app_for_url({"app1": "/app1", "app2": "/app2"}, "/app2/foo")
        ('app2', '/app2')
        >>> match_app_for_url({"multi": [r"/^\\/m\\d+/"]}, "/m42/page")
        ('multi', '/m42')
    """
    for app_name, router_base in router_base_configs.items():
        if isinstance(router_base, str):
            if router_base in url:
                return app_name, router_base
            continue

        for pattern in router_base:
            match = _compile_pattern(pattern).search(url)
            if match and match.group(0):
                return app_name, match.group(0)

    return "", "/"
