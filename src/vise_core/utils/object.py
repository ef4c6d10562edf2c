"""Helpers for plain JSON objects: type checks, cleanup and cycle-safe cloning."""

import copy
from dataclasses import fields, is_dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, MutableMapping, Tuple

_MISSING = object()


def is_pure_object(obj: Any) -> bool:
    """True for plain ``dict`` instances only (not lists, not dict subclasses)."""
    return type(obj) is dict


def delete_invalid_key(obj: Any) -> Any:
    """
    Drop keys whose value is None from a plain dict.

    Anything that is not a plain dict is returned untouched.

    Example:
        >>> delete_invalid_key({"page": 1, "q": None})
        {'page': 1}
    """
    if not is_pure_object(obj):
        return obj
    return {key: value for key, value in obj.items() if value is not None}


def clone_deep(source: Any) -> Any:
    """
    Deep-copy a JSON-shaped value (dicts, lists, tuples, scalars and the
    lifecycle dataclasses).

    A side table of (source, clone) pairs is kept for the duration of one
    call and scanned linearly by identity: a sub-object referenced twice is
    cloned once and both references point at the same clone, and
    self-references resolve to the clone under construction instead of
    recursing forever.

    Example:
        >>> shared = {"v": 1}
        >>> cloned = clone_deep({"a": shared, "b": shared})
        >>> cloned["a"] is cloned["b"]
        True
    """
    seen: List[Tuple[Any, Any]] = []
    return _clone(source, seen)


def _find_cloned(seen: List[Tuple[Any, Any]], source: Any) -> Any:
    # Linear scan is fine for request-sized payloads
    for original, cloned in seen:
        if original is source:
            return cloned
    return _MISSING


def _clone(source: Any, seen: List[Tuple[Any, Any]]) -> Any:
    if source is None or isinstance(source, (str, bytes, int, float, Enum)):
        return source

    already_cloned = _find_cloned(seen, source)
    if already_cloned is not _MISSING:
        return already_cloned

    if isinstance(source, list):
        cloned_list: List[Any] = []
        seen.append((source, cloned_list))
        cloned_list.extend(_clone(item, seen) for item in source)
        return cloned_list

    if isinstance(source, tuple):
        cloned_tuple = tuple(_clone(item, seen) for item in source)
        seen.append((source, cloned_tuple))
        return cloned_tuple

    if type(source) is dict:
        cloned_dict: Dict[Any, Any] = {}
        seen.append((source, cloned_dict))
        for key, value in source.items():
            cloned_dict[key] = _clone(value, seen)
        return cloned_dict

    if isinstance(source, MappingProxyType):
        cloned_proxy = MappingProxyType(_clone(dict(source), seen))
        seen.append((source, cloned_proxy))
        return cloned_proxy

    if isinstance(source, MutableMapping):
        # dict subclasses, CaseInsensitiveDict and friends keep their type
        cloned_mapping = copy.copy(source)
        seen.append((source, cloned_mapping))
        for key, value in source.items():
            cloned_mapping[key] = _clone(value, seen)
        return cloned_mapping

    if is_dataclass(source) and not isinstance(source, type):
        cloned_obj = copy.copy(source)
        seen.append((source, cloned_obj))
        for f in fields(source):
            # object.__setattr__ also works on frozen dataclasses
            object.__setattr__(cloned_obj, f.name, _clone(getattr(source, f.name), seen))
        return cloned_obj

    # Outside the JSON value space: shared, not copied
    return source
