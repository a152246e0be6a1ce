"""Contextual validation units."""

import copy
import logging
from typing import Any, Callable, Optional, Union

from .error import TyError
from .utils import NOTHING, get_value

logger = logging.getLogger(__name__)

Message = Union[str, Callable[[Any, Any], str]]


class Rule:
    """
    A validation unit that sees the container of the value, not just the value.

    `catch(data, key)` runs a fixed sequence of stages on ``data[key]``:

        1. prepare(data, key)       stash context
        2. shouldcheck(data, key)   False skips validation entirely
        3. use(data, key)           pick the pattern to validate against
        4. validate(data, key, pattern)
        5. override(data, key)      on failure, rewrite ``data[key]`` and validate once more
        6. complete(data, key, error)

    Every stage can be given as a keyword callable, or overridden in a subclass.
    A `validate` callable receives ``(data, key)`` and returns True/None for
    success, False, a message or an exception for failure.

    Example:
        NonEmpty = Rule(name="NonEmpty", validate=lambda data, key: bool(data[key]))
        Dict({"title": NonEmpty}).test({"title": ""})  # False
    """

    def __init__(self, name: Optional[str] = None, pattern: Any = None, message: Optional[Message] = None, *,
                 validate: Optional[Callable] = None, prepare: Optional[Callable] = None,
                 shouldcheck: Optional[Callable] = None, use: Optional[Callable] = None,
                 override: Optional[Callable] = None, complete: Optional[Callable] = None):
        self.name = name or "Rule"
        self.pattern = pattern
        self.message = message
        self.is_strict = False
        self.is_loose = False

        self._validate = validate
        self._prepare = prepare
        self._shouldcheck = shouldcheck
        self._use = use
        self._override = override
        self._complete = complete

    def prepare(self, data: Any, key: Any) -> None:
        if self._prepare is not None:
            self._prepare(data, key)

    def shouldcheck(self, data: Any, key: Any) -> bool:
        if self._shouldcheck is None:
            return True
        return bool(self._shouldcheck(data, key))

    def use(self, data: Any, key: Any) -> Any:
        if self._use is None:
            return NOTHING
        return self._use(data, key)

    def validate(self, data: Any, key: Any, pattern: Any = NOTHING) -> Optional[BaseException]:
        """Validate ``data[key]`` against `pattern`, or with the validate callable."""
        if pattern is not NOTHING:
            error = self.check(pattern, data, key)
        elif self._validate is not None:
            try:
                result = self._validate(data, key)
            except Exception as exc:
                result = exc
            error = self._to_error(result, data, key)
        else:
            error = None
        return self.make_error(error, data, key)

    def override(self, data: Any, key: Any) -> bool:
        """Rewrite ``data[key]`` after a failure. Returns whether anything was done."""
        if self._override is None:
            return False
        self._override(data, key)
        return True

    def complete(self, data: Any, key: Any, error: Optional[BaseException]) -> Optional[BaseException]:
        if self._complete is None:
            return error
        result = self._complete(data, key, error)
        return result if isinstance(result, BaseException) else error

    def catch(self, data: Any, key: Any) -> Optional[BaseException]:
        self.prepare(data, key)
        error = None
        if self.shouldcheck(data, key):
            pattern = self.use(data, key)
            error = self.validate(data, key, pattern)
            if error is not None and self.override(data, key):
                error = self.validate(data, key, pattern)
        return self.complete(data, key, error)

    def check(self, pattern: Any, data: Any, key: Any) -> Optional[BaseException]:
        """Validate ``data[key]`` against a nested Rule, Type or plain pattern."""
        if isinstance(pattern, Rule):
            return self.inherit(pattern).catch(data, key)

        # Import here to avoid circular dependency
        from ..types.constructs import create_type

        return self.inherit(create_type(pattern)).catch(get_value(data, key))

    def inherit(self, pattern: Any) -> Any:
        """Pass this rule's strict/loose mode down to a nested Type or Rule."""
        if self.is_strict and not pattern.is_strict:
            return pattern.strict
        if not self.is_strict and self.is_loose and not pattern.is_strict and not pattern.is_loose:
            return pattern.loose
        return pattern

    def make_error(self, error: Optional[BaseException], data: Any, key: Any) -> Optional[BaseException]:
        if error is None:
            return None
        if self.message:
            text = self.message(data, key) if callable(self.message) else self.message
            return TypeError(text)
        return error

    def _to_error(self, result: Any, data: Any, key: Any) -> Optional[BaseException]:
        if result is None or result is True:
            return None
        if result is False:
            return TyError({
                "kind": "exception",
                "value": get_value(data, key),
                "name": self.name,
                "pattern": self.pattern,
            })
        if isinstance(result, BaseException):
            return result
        if isinstance(result, str):
            return TypeError(result)
        return None

    def clone(self) -> "Rule":
        return copy.copy(self)

    def to_be_strict(self, mode: bool = True) -> "Rule":
        self.is_strict = bool(mode)
        if mode:
            self.is_loose = False
        return self

    def to_be_loose(self, mode: bool = True) -> "Rule":
        if self.is_strict:
            logger.warning("strict rule %s can not change to be loose", self.name)
            return self
        self.is_loose = bool(mode)
        return self

    @property
    def strict(self) -> "Rule":
        return self.clone().to_be_strict()

    @property
    def loose(self) -> "Rule":
        return self.clone().to_be_loose()

    def __repr__(self) -> str:
        return self.name
