"""Structural equality over JSON-shaped values."""

from dataclasses import fields, is_dataclass
from numbers import Real
from typing import Any, List, Mapping, Optional, Sequence, Tuple

Seen = List[Tuple[Any, Any]]


def is_equal(item_a: Any, item_b: Any, _seen: Optional[Seen] = None) -> bool:
    """
    Deep structural comparison of two JSON-shaped values.

    Lists and tuples compare element-wise in order, mappings by key set and
    value, dataclass instances (the lifecycle models) field by field.
    ``int`` and ``float`` are one kind of number; any other difference in
    runtime type makes values unequal, so ``1`` and ``True`` differ even
    though Python's ``==`` says otherwise. Self-referencing values are
    supported: a pair of containers already under comparison counts as
    equal.

    Examples:
        >>> is_equal({"a": 1, "b": 2}, {"b": 2, "a": 1})
        True
        >>> is_equal([1, [2, 3]], [1, [2, 3]])
        True
        >>> is_equal({"expire": 60}, {"expire": 60.0})
        True
        >>> is_equal(None, {})
        False
    """
    if item_a is item_b:
        return True
    if item_a is None or item_b is None:
        return False
    if _is_number(item_a) and _is_number(item_b):
        return item_a == item_b
    if type(item_a) is not type(item_b):
        return False

    if not isinstance(item_a, (list, tuple, Mapping)) and not is_dataclass(item_a):
        return item_a == item_b

    seen: Seen = [] if _seen is None else _seen
    if _in_progress(seen, item_a, item_b):
        return True
    seen.append((item_a, item_b))

    if isinstance(item_a, (list, tuple)):
        return _is_equal_array(item_a, item_b, seen)
    if isinstance(item_a, Mapping):
        return _is_equal_mapping(item_a, item_b, seen)
    return all(
        is_equal(getattr(item_a, f.name), getattr(item_b, f.name), seen)
        for f in fields(item_a)
    )


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _in_progress(seen: Seen, item_a: Any, item_b: Any) -> bool:
    # Linear scan, same as clone_deep
    for seen_a, seen_b in seen:
        if seen_a is item_a and seen_b is item_b:
            return True
    return False


def _is_equal_array(items_a: Sequence[Any], items_b: Sequence[Any], seen: Seen) -> bool:
    if len(items_a) != len(items_b):
        return False
    return all(is_equal(a, b, seen) for a, b in zip(items_a, items_b))


def _is_equal_mapping(obj_a: Mapping[Any, Any], obj_b: Mapping[Any, Any], seen: Seen) -> bool:
    if len(obj_a) != len(obj_b):
        return False
    for key, value in obj_a.items():
        if key not in obj_b:
            return False
        if not is_equal(value, obj_b[key], seen):
            return False
    return True
