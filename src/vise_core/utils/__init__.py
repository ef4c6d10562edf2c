"""Utility modules for Vise Core."""

from .equality import is_equal
from .object import clone_deep, delete_invalid_key, is_pure_object
from .sanitizer import (
    mask_sensitive_data,
    mask_headers,
    add_sensitive_keys,
    remove_sensitive_keys,
    get_sensitive_keys,
)
from .serialization import serialize_javascript, to_jsonable
from .strings import (
    fill_ssr_template,
    get_placeholder_of,
    refill_render_result,
    replace_content_between_marks,
    replace_placeholder_with_value,
    to_kebab,
)
from .match_app import match_app_for_url
from .merge_config import merge_config
from .http_fetcher import http_fetcher

__all__ = [
    'is_equal',
    'clone_deep',
    'delete_invalid_key',
    'is_pure_object',
    'mask_sensitive_data',
    'mask_headers',
    'add_sensitive_keys',
    'remove_sensitive_keys',
    'get_sensitive_keys',
    'serialize_javascript',
    'to_jsonable',
    'fill_ssr_template',
    'get_placeholder_of',
    'refill_render_result',
    'replace_content_between_marks',
    'replace_placeholder_with_value',
    'to_kebab',
    'match_app_for_url',
    'merge_config',
    'http_fetcher',
]
