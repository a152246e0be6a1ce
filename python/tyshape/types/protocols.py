"""Duck-typed structural checks."""

import numbers
from typing import Any, Optional

from ..core.error import TyError
from ..core.type import Type
from ..core.utils import UNDEFINED, is_array, is_object


def _members(value: Any, pattern: Any) -> Any:
    if is_object(value):
        return dict(value)
    if is_array(value):
        return list(value)
    if value is None or isinstance(value, (str, bytes, numbers.Number, type)):
        return None
    if is_object(pattern):
        # slots and properties are members too
        members = {}
        for key in pattern:
            item = _attribute(value, key)
            if item is not UNDEFINED:
                members[key] = item
        return members
    if hasattr(value, "__dict__"):
        return vars(value)
    return None


def _attribute(value: Any, key: Any) -> Any:
    if not isinstance(key, str):
        return UNDEFINED
    try:
        return getattr(value, key)
    except Exception:
        return UNDEFINED


class Shape(Type):
    """
    Checks that an object-like value carries the declared members.

    Mappings, sequences and plain instances (through their attributes) are
    accepted. Extra members are never reported, even in strict mode.

    Example:
        class Point:
            def __init__(self, x, y):
                self.x, self.y = x, y

        Shape({"x": int, "y": int}).test(Point(1, 2))  # True
    """

    def __init__(self, pattern: Any):
        super().__init__(pattern)
        self.name = "Shape"

    def _decide(self, value: Any) -> Optional[TyError]:
        pattern = self.pattern
        members = _members(value, pattern)
        if members is None:
            return TyError({"kind": "exception", "value": value, "name": self.name, "pattern": pattern})

        if is_object(pattern) and is_object(members):
            members = {key: item for key, item in members.items() if key in pattern}
        return self.validate(members, pattern)


def shape(pattern: Any) -> Shape:
    return Shape(pattern)
