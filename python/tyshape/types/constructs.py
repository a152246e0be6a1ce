"""Composite pattern kinds built on Type."""

from typing import Any, Iterable, Mapping as MappingT, Optional, Union

from ..core.error import TyError
from ..core.rule import Rule
from ..core.type import Type
from ..core.utils import has_key, is_array, is_number, is_object


class Dict(Type):
    """
    A keyed structure.

    An empty pattern accepts any mapping, strict or not.

    Example:
        book = Dict({"title": str, "price": float})
        book.strict.test({"title": "a", "price": 1.0, "isbn": "x"})  # False
    """

    def __init__(self, pattern: MappingT):
        if not is_object(pattern):
            raise TypeError("[Dict]: pattern should be a mapping.")
        super().__init__(pattern)
        self.name = "Dict"

    def _decide(self, value: Any) -> Optional[TyError]:
        if not self.pattern:
            return None
        if not is_object(value):
            return TyError({"kind": "exception", "value": value, "name": self.name, "pattern": self.pattern})
        return self.validate(value, self.pattern)

    def extend(self, fields: MappingT) -> "Dict":
        """Return a new Dict with `fields` added to (or replacing) the current ones."""
        return type(self)({**self.pattern, **fields})

    def extract(self, fields: Union[MappingT, Iterable[str]]) -> "Dict":
        """
        Return a new Dict projected onto a subset of the current fields.

        Example:
            book.extract(["title"])           # Dict({"title": str})
            book.extract({"title": True})     # same
        """
        current = self.pattern
        if is_object(fields):
            keys = [key for key, keep in fields.items() if keep and key in current]
        else:
            keys = [key for key in fields if key in current]
        return type(self)({key: current[key] for key in keys})


class List(Type):
    """A sequence whose items each match one of the alternatives."""

    def __init__(self, pattern: list):
        if not is_array(pattern):
            raise TypeError("[List]: pattern should be a list.")
        super().__init__(pattern)
        self.name = "List"

    def _decide(self, value: Any) -> Optional[TyError]:
        if not is_array(value):
            return TyError({"kind": "exception", "value": value, "name": self.name, "pattern": self.pattern})
        if not self.pattern:
            return None
        return self.validate(value, self.pattern)


class Tuple(Type):
    """
    A fixed-position sequence.

    Rule entries receive ``(items, index)`` and may read or rewrite sibling items.
    Strict mode also requires the exact length.
    """

    def __init__(self, pattern: list):
        if not is_array(pattern):
            raise TypeError("[Tuple]: pattern should be a list.")
        super().__init__(pattern)
        self.name = "Tuple"

    def _decide(self, value: Any) -> Optional[TyError]:
        patterns = self.pattern

        if not is_array(value):
            return TyError({"kind": "exception", "value": value, "name": self.name, "pattern": patterns})
        if self.is_strict and len(value) != len(patterns):
            return TyError({"kind": "dirty", "value": value, "name": self.name, "pattern": patterns})

        items = value if isinstance(value, list) else list(value)
        tyerr = TyError()
        for index, pattern in enumerate(patterns):
            if isinstance(pattern, Rule):
                error = self._inherit(pattern).catch(items, index)
                if not error:
                    continue
                if has_key(items, index):
                    tyerr.add({"error": error, "index": index})
                else:
                    tyerr.add({"kind": "missing", "index": index})
            elif not has_key(items, index):
                tyerr.add({"kind": "missing", "index": index})
            elif isinstance(pattern, Type):
                error = self._inherit(pattern).catch(items[index])
                if error:
                    tyerr.add({"error": error, "index": index})
            else:
                error = self.validate(items[index], pattern)
                if error:
                    tyerr.add({"error": error, "index": index})

        tyerr.commit()
        return tyerr.error()


class Enum(Type):
    """Matches when any one alternative matches."""

    def __init__(self, pattern: list):
        if not is_array(pattern):
            raise TypeError("[Enum]: pattern should be a list.")
        super().__init__(pattern)
        self.name = "Enum"

    def _decide(self, value: Any) -> Optional[TyError]:
        errors = []
        for pattern in self.pattern:
            if isinstance(pattern, Type):
                error = self._inherit(pattern).catch(value)
            else:
                error = self.validate(value, pattern)
            if not error:
                return None
            errors.append(error)

        return TyError({
            "kind": "notin",
            "value": value,
            "name": self.name,
            "pattern": self.pattern,
            "errors": errors,
        })


class Range(Type):
    """
    A numeric interval.

    Pattern keys: ``min``, ``max`` and the optional ``min_bound``/``max_bound``
    flags, which default to True (inclusive).

    Example:
        Range({"min": 0, "max": 10, "min_bound": False}).test(0)  # False
    """

    def __init__(self, pattern: MappingT):
        if not is_object(pattern):
            raise TypeError("[Range]: pattern should be a mapping.")
        if "min" not in pattern:
            raise ValueError("[Range]: min should be in pattern.")
        if "max" not in pattern:
            raise ValueError("[Range]: max should be in pattern.")
        if not (is_number(pattern["min"]) and is_number(pattern["max"])):
            raise TypeError("[Range]: min and max should be numbers.")
        super().__init__(pattern)
        self.name = "Range"

    def _decide(self, value: Any) -> Optional[TyError]:
        pattern = self.pattern
        low, high = pattern["min"], pattern["max"]
        min_bound = pattern.get("min_bound", True)
        max_bound = pattern.get("max_bound", True)

        if (
            not is_number(value)
            or (value < low if min_bound else value <= low)
            or (value > high if max_bound else value >= high)
        ):
            return TyError({"kind": "exception", "value": value, "name": self.name, "pattern": pattern})
        return None


class Mapping(Type):
    """
    A keyed structure of arbitrary keys.

    Pattern is ``{"key": key_pattern, "value": value_pattern}``; each key and
    each value are checked independently.
    """

    def __init__(self, pattern: MappingT):
        if not is_object(pattern) or "key" not in pattern or "value" not in pattern:
            raise TypeError("[Mapping]: pattern should be a mapping with key and value.")
        super().__init__(pattern)
        self.name = "Mapping"

    def _decide(self, value: Any) -> Optional[TyError]:
        key_pattern = self.pattern["key"]
        value_pattern = self.pattern["value"]

        if not is_object(value):
            return TyError({"kind": "exception", "value": value, "name": self.name, "pattern": dict})

        tyerr = TyError()
        for key, item in value.items():
            error = self.validate(key, key_pattern)
            if error:
                tyerr.add({"kind": "illegal", "error": error, "pattern": key_pattern, "key": key})

            error = self.validate(item, value_pattern)
            if error:
                tyerr.add({"kind": "exception", "error": error, "pattern": value_pattern, "value": item, "key": key})

        tyerr.commit()
        return tyerr.error()


def create_type(pattern: Any) -> Type:
    """Wrap a plain pattern into the matching Type."""
    if isinstance(pattern, Type):
        return pattern
    if is_object(pattern):
        return Dict(pattern)
    if isinstance(pattern, list):
        return List(pattern)
    return Type(pattern)


def dict_(pattern: MappingT) -> Dict:
    return Dict(pattern)


def list_(pattern: list) -> List:
    return List(pattern)


def tuple_(pattern: list) -> Tuple:
    return Tuple(pattern)


def enumerate_(pattern: list) -> Enum:
    return Enum(pattern)


def range_(pattern: MappingT) -> Range:
    return Range(pattern)


def mapping(pattern: MappingT) -> Mapping:
    return Mapping(pattern)
