"""Leaf predicates and the process-wide registry of primitive markers."""

import logging
import math
import numbers
import re
from collections import abc
from typing import Any, Callable, Optional

from .utils import is_array, is_equal, is_infinite, is_int, is_nan, is_number, is_object

logger = logging.getLogger(__name__)

Predicate = Callable[[Any], bool]


class Prototype:
    """
    A named leaf predicate.

    Build one ad hoc with a validate function, or subclass it and override
    `validate`. Subclasses can be used as patterns without instantiating them.

    Example:
        Even = Prototype(lambda value: isinstance(value, int) and value % 2 == 0, name="Even")
        Type(Even).test(4)  # True
    """

    name = "Prototype"

    def __init__(self, validate: Optional[Predicate] = None, name: Optional[str] = None):
        self._validate = validate
        if name:
            self.name = name

    def validate(self, value: Any) -> bool:
        if self._validate is None:
            return False
        return bool(self._validate(value))

    def __repr__(self) -> str:
        return self.name

    # Registry entries are (marker, predicate) pairs. The table is replaced,
    # never mutated, so a validation pass always reads a consistent snapshot.
    _registry: tuple = ()

    @classmethod
    def register(cls, marker: Any, predicate: Predicate) -> None:
        """Insert or replace the predicate for `marker`."""
        entries = [item for item in Prototype._registry if not _same_marker(item[0], marker)]
        entries.append((marker, predicate))
        Prototype._registry = tuple(entries)
        logger.debug("registered leaf marker %r", marker)

    @classmethod
    def unregister(cls, *markers: Any) -> None:
        """Remove the given markers, or every marker when called without arguments."""
        if not markers:
            Prototype._registry = ()
            logger.debug("cleared leaf marker registry")
            return

        Prototype._registry = tuple(
            item for item in Prototype._registry
            if not any(_same_marker(item[0], marker) for marker in markers)
        )
        logger.debug("unregistered leaf markers %r", markers)

    @classmethod
    def find(cls, marker: Any) -> Optional[Predicate]:
        for proto, predicate in Prototype._registry:
            if _same_marker(proto, marker):
                return predicate
        return None

    @classmethod
    def is_(cls, marker: Any) -> "_Inspection":
        """
        Inspect a marker.

        Example:
            Prototype.is_(str).existing()     # True
            Prototype.is_(str).typeof("a")    # True
            Prototype.is_(10).equal(10)       # True
        """
        return _Inspection(marker)


def _same_marker(a: Any, b: Any) -> bool:
    if a is b:
        return True
    # math.inf and float('inf') are distinct objects that must share an entry
    if isinstance(a, float) and isinstance(b, float):
        return a == b
    return False


def _is_prototype_class(marker: Any) -> bool:
    return isinstance(marker, type) and issubclass(marker, Prototype)


class _Inspection:
    """Answers questions about one marker against the registry."""

    def __init__(self, marker: Any):
        self.marker = marker

    def existing(self) -> bool:
        marker = self.marker
        return (
            is_nan(marker)
            or isinstance(marker, re.Pattern)
            or Prototype.find(marker) is not None
            or isinstance(marker, Prototype)
            or isinstance(marker, type)
        )

    def typeof(self, value: Any) -> bool:
        try:
            return self._typeof(value)
        except Exception:
            # a predicate that can not handle the value rejects it
            logger.debug("leaf predicate for %r raised on %r", self.marker, value, exc_info=True)
            return False

    def _typeof(self, value: Any) -> bool:
        marker = self.marker

        if isinstance(marker, Prototype):
            return marker.validate(value)

        if _is_prototype_class(marker):
            return marker().validate(value)

        predicate = Prototype.find(marker)
        if predicate is not None:
            return bool(predicate(value))

        if is_nan(marker):
            return is_nan(value)

        if isinstance(marker, re.Pattern):
            return isinstance(value, str) and marker.search(value) is not None

        if isinstance(marker, type):
            return isinstance(value, marker)

        return False

    def equal(self, value: Any) -> bool:
        return is_equal(self.marker, value)


def seed_registry() -> None:
    """Install the built-in primitive markers."""
    Prototype.register(numbers.Number, is_number)
    Prototype.register(int, is_int)
    Prototype.register(float, is_number)
    Prototype.register(str, lambda value: isinstance(value, str))
    Prototype.register(bool, lambda value: isinstance(value, bool))
    Prototype.register(list, is_array)
    Prototype.register(dict, is_object)
    Prototype.register(abc.Callable, callable)
    Prototype.register(re.Pattern, lambda value: isinstance(value, re.Pattern))
    Prototype.register(math.inf, is_infinite)


seed_registry()
