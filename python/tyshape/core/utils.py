"""Shape predicates and key-path helpers shared by the validation engine."""

import json
import math
import numbers
import re
from collections import abc
from typing import Any, Iterable, Union


class _Undefined:
    """Marker for a key or index that is absent from its container."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()

# Distinguishes "argument not given" from an explicit None.
NOTHING = object()

_NUMERIC_RE = re.compile(r"^\s*[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?\s*$")


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_object(value: Any) -> bool:
    return isinstance(value, abc.Mapping)


def is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def is_number(value: Any) -> bool:
    """Real numbers, excluding bool and NaN."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return not is_nan(value)


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_infinite(value: Any) -> bool:
    return is_number(value) and math.isinf(value)


def is_numeric(value: Any) -> bool:
    """Numeric strings such as '10', '-3.5' or '1e3'."""
    return isinstance(value, str) and bool(_NUMERIC_RE.match(value))


def has_key(data: Any, key: Any) -> bool:
    """Whether `key` is present in a mapping or a valid index of a sequence."""
    if is_object(data):
        return key in data
    if is_array(data):
        return is_int(key) and 0 <= key < len(data)
    return False


def get_value(data: Any, key: Any) -> Any:
    """Read `data[key]`, returning UNDEFINED when the key is absent."""
    if has_key(data, key):
        return data[key]
    return UNDEFINED


def is_equal(a: Any, b: Any) -> bool:
    """Structural equality that does not confuse bools with numbers."""
    if a is b:
        return True
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    if is_object(a) and is_object(b):
        if set(a.keys()) != set(b.keys()):
            return False
        return all(is_equal(a[key], b[key]) for key in a)
    if is_array(a) and is_array(b):
        if len(a) != len(b):
            return False
        return all(is_equal(x, y) for x, y in zip(a, b))
    if is_nan(a) and is_nan(b):
        return True
    try:
        return bool(a == b)
    except Exception:
        return False


class MappingKey:
    """A non-string mapping key in a key path, kept apart from sequence indexes."""

    def __init__(self, key: Any):
        self.key = key

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, MappingKey):
            return is_equal(self.key, other.key)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return str(self.key)

    def __repr__(self) -> str:
        return f"MappingKey({self.key!r})"


def make_key_path(keys: Iterable[Union[str, int, MappingKey]]) -> str:
    """['books', 0, 'price'] -> 'books[0].price', MappingKey(2) -> '["2"]'"""
    path = ""
    for key in keys:
        if isinstance(key, MappingKey):
            path += f"[{json.dumps(str(key))}]"
        elif is_int(key):
            path += f"[{key}]"
        else:
            path += f".{key}"
    return path[1:] if path.startswith(".") else path


def join_key_path(prefix: str, keys: Iterable[Union[str, int, MappingKey]]) -> str:
    """Attach a key path to a root prefix such as '$'."""
    path = make_key_path(keys)
    if not prefix or not path or path.startswith("["):
        return prefix + path
    return f"{prefix}.{path}"
