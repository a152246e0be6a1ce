"""Descriptor inference from sample data."""

import re
from typing import Any, Optional

from ..core.utils import UNDEFINED, is_array, is_equal, is_nan, is_number, is_numeric, is_object

KEY_SIGILS = "?!&=|*"


def get_type(value: Any) -> Any:
    """
    Infer the descriptor of one value.

    Example:
        get_type(10)        # 'number'
        get_type("10")      # 'numeric'
        get_type([1, "a"])  # ['number', 'string']
    """
    if is_object(value):
        return guess(value)
    if is_array(value):
        items: list = []
        for item in value:
            desc = get_type(item)
            if not any(is_equal(desc, existing) for existing in items):
                items.append(desc)
        return items
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    # bool is a number for isinstance, check it first
    if isinstance(value, bool):
        return "boolean"
    if is_nan(value):
        return "nan"
    if is_number(value):
        return "number"
    if is_numeric(value):
        return "numeric"
    if isinstance(value, str):
        return "string"
    if callable(value):
        return "function"
    return "any"


def guess(data: Any) -> Any:
    """Infer a descriptor from a sample value, field by field for mappings."""
    if is_object(data):
        return {key: get_type(value) for key, value in data.items()}
    return get_type(data)


def _find_key(exist: dict, key: str) -> Optional[str]:
    pattern = re.compile(f"^{re.escape(str(key))}[{re.escape(KEY_SIGILS)}]*$")
    for item in exist:
        if pattern.match(item):
            return item
    return None


def merge(exist: dict, data: Any) -> dict:
    """
    Widen a guessed descriptor with one more sample.

    A new leaf type turns the field into an enum (``key|``), None or an
    absent value makes it nonable (``key&``) and a field missing from the
    sample becomes optional (``key?``).

    Example:
        desc = guess({"name": "tomy", "age": 10})
        merge(desc, {"name": None})  # {'name&': 'string', 'age?': 'number'}
    """
    result: dict = {}
    checked = set()

    for key, value in data.items():
        prev_key = _find_key(exist, key)
        desc = get_type(value)

        if prev_key is None:
            checked.add(key)
            result[key] = desc
            continue

        checked.add(prev_key)
        prev = exist[prev_key]
        sigils = prev_key[len(str(key)):]
        is_enum = "|" in sigils
        if is_enum and not is_array(prev):
            raise ValueError(f"{prev_key} in previous descriptor should be a list, but receive {type(prev).__name__}")

        items = list(prev) if is_enum else [prev]
        if any(is_equal(item, desc) for item in items):
            result[prev_key] = prev
            continue

        if desc in ("null", "undefined"):
            result[prev_key if "&" in sigils else prev_key + "&"] = prev
            continue

        items.append(desc)
        result[prev_key if is_enum else prev_key + "|"] = items

    for key, value in exist.items():
        if key in checked:
            continue
        suffix = key[len(key.rstrip(KEY_SIGILS)):]
        result[key if "?" in suffix else key + "?"] = value

    return result
