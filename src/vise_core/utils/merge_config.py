"""Deep merge of nested config dictionaries."""

from numbers import Number
from typing import Any, Dict, Mapping, Optional

from .object import is_pure_object


def _same_kind(existing: Any, value: Any) -> bool:
    if isinstance(existing, bool) or isinstance(value, bool):
        return isinstance(existing, bool) and isinstance(value, bool)
    if isinstance(existing, Number) and isinstance(value, Number):
        return True
    return type(existing) is type(value)


def merge_config(defaults: Mapping[str, Any], *overrides: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Merge override dicts into a copy of ``defaults``.

    Rules per key:
    - ``None`` in an override is skipped
    - a missing or ``None`` existing value is always replaced
    - lists are concatenated (a list never replaces a non-list)
    - dicts merge recursively (a dict only merges into a dict)
    - scalars replace scalars of the same kind only

    Example:
        >>> merge_config({"port": 3000, "plugins": ["a"]}, {"port": 4000, "plugins": ["b"]})
        {'port': 4000, 'plugins': ['a', 'b']}
    """
    merged: Dict[str, Any] = dict(defaults)
    for override in overrides:
        if not override:
            continue
        for key, value in override.items():
            if value is None:
                continue
            existing = merged.get(key)
            if existing is None:
                merged[key] = value
            elif isinstance(value, list):
                if isinstance(existing, list):
                    merged[key] = [*existing, *value]
            elif is_pure_object(existing):
                if is_pure_object(value):
                    merged[key] = merge_config(existing, value)
            elif _same_kind(existing, value):
                merged[key] = value
    return merged
