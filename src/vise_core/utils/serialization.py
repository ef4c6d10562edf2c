"""
JSON serialization helpers for lifecycle models.

Used for log summaries and for inlining ``init_state`` into the page.
"""

import json
from enum import Enum
from typing import Any, Mapping

# Characters that may close a <script> element or break JS string parsing
_UNSAFE_CHARS = {
    '<': '\\u003C',
    '>': '\\u003E',
    '/': '\\u002F',
    '\u2028': '\\u2028',
    '\u2029': '\\u2029',
}


def to_jsonable(value: Any) -> Any:
    """
    ``default=`` hook for json.dumps.

    Models expose ``to_dict()``; read-only mappings become plain dicts,
    enums their value. Anything else falls back to ``str()``.

    Example:
        >>> json.dumps({"ctx": context}, default=to_jsonable)
    """
    to_dict = getattr(value, 'to_dict', None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


def dumps(value: Any, **kwargs: Any) -> str:
    """json.dumps that understands lifecycle models."""
    kwargs.setdefault('ensure_ascii', False)
    kwargs.setdefault('default', to_jsonable)
    return json.dumps(value, **kwargs)


def serialize_javascript(value: Any) -> str:
    """
    Serialize a JSON value into a JavaScript literal safe to inline in ``<script>``.

    ``<``, ``>``, ``/`` and the U+2028/U+2029 line separators are written
    as ``\\uXXXX`` escapes, so a ``</script>`` inside a string value can
    not terminate the surrounding element.
    """
    text = dumps(value)
    return ''.join(_UNSAFE_CHARS.get(char, char) for char in text)
